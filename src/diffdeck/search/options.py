"""Find options and the pattern compiler shared by search and replace."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Pattern

from diffdeck.errors import InvalidPatternError


@dataclass(frozen=True, slots=True)
class FindOptions:
    case_sensitive: bool = False
    use_regex: bool = False

    def toggled(self, name: str) -> "FindOptions":
        if name not in ("case_sensitive", "use_regex"):
            raise ValueError(f"Unknown find option '{name}'")
        return replace(self, **{name: not getattr(self, name)})


def compile_pattern(query: str, options: FindOptions) -> Pattern[str]:
    """Compile ``query`` the same way for matching and for replace-all.

    Literal queries have every metacharacter escaped; regex queries are used
    as written. Matching ignores case unless ``case_sensitive`` is set.
    """

    source = query if options.use_regex else re.escape(query)
    flags = 0 if options.case_sensitive else re.IGNORECASE
    try:
        return re.compile(source, flags)
    except (re.error, OverflowError, RecursionError) as exc:
        # Huge repeat counts and deep nesting fail outside re.error.
        raise InvalidPatternError(query, str(exc)) from exc


__all__ = ["FindOptions", "compile_pattern"]
