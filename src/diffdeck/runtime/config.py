"""Engine configuration resolved from ``DIFFDECK_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "DIFFDECK_"


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Tunables shared by the workspace, the scroll coordinator and hosts."""

    sync_indicator_ms: int = 400
    min_documents: int = 2
    max_documents: int = 4
    line_height: int = 24
    default_language: str = "javascript"

    def __post_init__(self) -> None:
        if self.min_documents < 2:
            raise ValueError("min_documents must be at least 2")
        if self.max_documents < self.min_documents:
            raise ValueError("max_documents cannot be below min_documents")
        if self.sync_indicator_ms < 0:
            raise ValueError("sync_indicator_ms cannot be negative")
        if self.line_height <= 0:
            raise ValueError("line_height must be positive")


def _env_int(
    env: Mapping[str, str], key: str, fallback: int, *, minimum: int = 0
) -> int:
    value = env.get(f"{ENV_PREFIX}{key}")
    if value is None:
        return fallback
    try:
        parsed = int(value)
    except ValueError:
        return fallback
    if parsed < minimum:
        return fallback
    return parsed


def load_config(env: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """Build an ``EngineConfig``; malformed or out-of-range values fall back.

    Each integer falls back on its own. Document limits fall back together
    when the pair is inconsistent (``MAX_DOCUMENTS`` below ``MIN_DOCUMENTS``).
    """

    source = os.environ if env is None else env
    defaults = EngineConfig()
    min_documents = _env_int(
        source, "MIN_DOCUMENTS", defaults.min_documents, minimum=2
    )
    max_documents = _env_int(
        source, "MAX_DOCUMENTS", defaults.max_documents, minimum=2
    )
    if max_documents < min_documents:
        min_documents, max_documents = defaults.min_documents, defaults.max_documents
    return EngineConfig(
        sync_indicator_ms=_env_int(
            source, "SYNC_INDICATOR_MS", defaults.sync_indicator_ms
        ),
        min_documents=min_documents,
        max_documents=max_documents,
        line_height=_env_int(source, "LINE_HEIGHT", defaults.line_height, minimum=1),
        default_language=source.get(
            f"{ENV_PREFIX}DEFAULT_LANGUAGE", defaults.default_language
        ),
    )


__all__ = ["EngineConfig", "load_config"]
