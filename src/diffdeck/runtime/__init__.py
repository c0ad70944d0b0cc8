"""Runtime services: telemetry, configuration and host scheduling."""

from . import telemetry
from .config import EngineConfig, load_config
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler, TimerHandle

__all__ = [
    "telemetry",
    "EngineConfig",
    "load_config",
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
]
