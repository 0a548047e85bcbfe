"""Configuration model, loading and defaulting for the health-check poller."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import structlog
import yaml
from pydantic import BaseModel, Field, PrivateAttr, ValidationError, field_validator

from .errors import ConfigLoadError


logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost"
DEFAULT_PORT = 80
DEFAULT_STATUS = 200


class JobConfig(BaseModel):
    """One monitored endpoint.

    ``None`` means the key was absent from the config file; defaulting only
    ever fills ``None`` fields, so explicit values survive untouched.
    """

    name: Optional[str] = Field(default=None, description="Job identifier, defaults to job_<index>")
    description: Optional[str] = Field(default=None, description="Free text shown in verbose mode")
    endpoint: Optional[str] = Field(default=None, description="Path appended to base_url:port")
    status: Optional[int] = Field(default=None, description="Expected HTTP status code")
    body: Optional[str] = Field(default=None, description="Expected body, or a JSON file path if read_file")
    read_file: bool = Field(default=False, description="Treat body as a path to a JSON file")

    _expected_json: Optional[Dict[str, Any]] = PrivateAttr(default=None)
    _expected_text: Optional[str] = PrivateAttr(default=None)

    @field_validator("name", "description", "endpoint", "body", mode="before")
    @classmethod
    def _scalar_to_str(cls, value: Any) -> Any:
        # YAML turns `body: 42` or `name: 1` into numbers.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("read_file", mode="before")
    @classmethod
    def _null_read_file(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def expected_status(self) -> int:
        return self.status if self.status is not None else DEFAULT_STATUS

    @property
    def expected_json(self) -> Optional[Dict[str, Any]]:
        """Parsed body file contents, set by :func:`apply_defaults` for read_file jobs."""
        return self._expected_json

    @property
    def expected_body(self) -> str:
        """Text a response body is compared against, verbatim."""
        if self.read_file and self._expected_text is not None:
            return self._expected_text
        return self.body or ""

    def load_body_file(self) -> None:
        path = self.body or ""
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigLoadError(path, f"{type(e).__name__}: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigLoadError(path, f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigLoadError(path, f"expected a JSON object, got {type(data).__name__}")

        self._expected_text = raw
        self._expected_json = data


class HealthcheckConfig(BaseModel):
    """Run-wide settings plus the ordered job list."""

    schedule: Optional[int] = Field(default=None, description="Milliseconds between check cycles")
    base_url: Optional[str] = Field(default=None, description="Base URL, defaults to http://localhost")
    port: Optional[int] = Field(default=None, description="Port, defaults to 80")
    verbose: bool = Field(default=False, description="Log descriptions and body diffs")
    jobs: List[JobConfig] = Field(default_factory=list, description="Checks, in execution order")

    @field_validator("verbose", mode="before")
    @classmethod
    def _null_verbose(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("jobs", mode="before")
    @classmethod
    def _null_jobs(cls, value: Any) -> Any:
        return [] if value is None else value


def apply_defaults(config: HealthcheckConfig) -> HealthcheckConfig:
    """Fill unset fields in place: base URL, port, then per-job name, status and body file.

    Running it again is a no-op. A body file that cannot be read or parsed
    raises :class:`ConfigLoadError`.
    """
    if not config.base_url:
        logger.warning("config.base_url not set, using default", field="base_url", default=DEFAULT_BASE_URL)
        config.base_url = DEFAULT_BASE_URL

    if config.port is None:
        logger.warning("config.port not set, using default", field="port", default=DEFAULT_PORT)
        config.port = DEFAULT_PORT

    for i, job in enumerate(config.jobs):
        if not job.name:
            job.name = f"job_{i}"
            logger.warning("job name not set, using default", field=f"jobs[{i}].name", default=job.name)

        if job.status is None:
            job.status = DEFAULT_STATUS
            logger.warning("job status not set, using default", field=f"jobs[{i}].status", default=DEFAULT_STATUS, job=job.name)

        # An empty path is left for validation to report, or to accept for 404 jobs.
        if job.read_file and job.body and job.expected_json is None:
            job.load_body_file()
            logger.info("Loaded expected body from file", job=job.name, path=job.body)

    return config


def load_config(path: Union[str, Path]) -> HealthcheckConfig:
    """Read a YAML config file into a :class:`HealthcheckConfig` (no defaulting)."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigLoadError(str(path), f"{type(e).__name__}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigLoadError(str(path), f"invalid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigLoadError(str(path), "config YAML must be a mapping")

    try:
        return HealthcheckConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigLoadError(str(path), str(e)) from e
