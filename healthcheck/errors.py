"""Error kinds raised while loading, validating and running health checks."""

from __future__ import annotations


class HealthcheckError(Exception):
    """Base class for all health-check errors."""


class ConfigLoadError(HealthcheckError):
    """The config file (or a body file it references) could not be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"config error: could not load {path}: {reason}")


class ConfigNotProvided(HealthcheckError):
    def __init__(self) -> None:
        super().__init__("config error: Configuration file not provided")


class ConfigValidationError(HealthcheckError):
    """A populated config is missing a mandatory field."""


def _job_label(job_name: str | None, job_index: int) -> str:
    return job_name or str(job_index)


class ScheduleNotSet(ConfigValidationError):
    def __init__(self, value: int | None = None):
        self.value = value
        if value:
            super().__init__(f"config error: config.schedule must be a positive number of milliseconds, got {value}")
        else:
            super().__init__("config error: config.schedule not set")


class JobEndpointNotSet(ConfigValidationError):
    def __init__(self, job_name: str | None, job_index: int):
        self.job_name = job_name
        self.job_index = job_index
        super().__init__(f"config error: config.jobs[{_job_label(job_name, job_index)}] endpoint not set")


class EmptyExpectedBody(ConfigValidationError):
    def __init__(self, job_name: str | None, job_index: int):
        self.job_name = job_name
        self.job_index = job_index
        super().__init__(f"config error: No expected body provided for {_job_label(job_name, job_index)}")


class TransportError(HealthcheckError):
    """The HTTP request for a job never produced a response."""

    def __init__(self, job_name: str, url: str, cause: Exception):
        self.job_name = job_name
        self.url = url
        self.cause = cause
        super().__init__(f"{job_name}: Endpoint unreachable at {url} ({type(cause).__name__}: {cause})")
