"""Configuration-driven HTTP health-check poller."""

__version__ = "0.1.0"

from .config import HealthcheckConfig, JobConfig, apply_defaults, load_config
from .runner import CheckRunner, CycleReport, JobFailure, JobSuccess
from .scheduler import CheckScheduler
from .validation import validate_config

__all__ = [
    "CheckRunner",
    "CheckScheduler",
    "CycleReport",
    "HealthcheckConfig",
    "JobConfig",
    "JobFailure",
    "JobSuccess",
    "apply_defaults",
    "load_config",
    "validate_config",
]
