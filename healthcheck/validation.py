from __future__ import annotations

from .config import HealthcheckConfig
from .errors import ConfigValidationError, EmptyExpectedBody, JobEndpointNotSet, ScheduleNotSet


def find_config_error(config: HealthcheckConfig) -> ConfigValidationError | None:
    """Return the first missing mandatory field, or None when the config is usable."""
    if not config.schedule or config.schedule < 0:
        return ScheduleNotSet(config.schedule)

    for i, job in enumerate(config.jobs):
        if not job.endpoint:
            return JobEndpointNotSet(job.name, i)
        if not job.body and job.expected_status != 404:
            return EmptyExpectedBody(job.name, i)

    return None


def validate_config(config: HealthcheckConfig) -> None:
    err = find_config_error(config)
    if err is not None:
        raise err
