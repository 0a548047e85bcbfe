"""One check cycle: request every configured job in order and classify the responses."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

import httpx
import structlog

from .config import DEFAULT_BASE_URL, DEFAULT_PORT, HealthcheckConfig, JobConfig
from .errors import TransportError
from .matcher import FailureReason, evaluate
from .reporting import log_report


logger = structlog.get_logger(__name__)

STATE_IDLE = "idle"
STATE_RUNNING = "running"
STATE_REPORTING = "reporting"


@dataclass(frozen=True)
class JobSuccess:
    job: JobConfig
    status_code: int
    elapsed_ms: float


@dataclass(frozen=True)
class JobFailure:
    job: JobConfig
    status_code: int | None  # None when no response was received
    body: bytes
    reason: FailureReason
    message: str
    elapsed_ms: float


JobOutcome = JobSuccess | JobFailure


@dataclass
class CycleReport:
    total: int
    successes: list[JobSuccess] = field(default_factory=list)
    failures: list[JobFailure] = field(default_factory=list)

    def add(self, outcome: JobOutcome) -> None:
        if isinstance(outcome, JobFailure):
            self.failures.append(outcome)
        else:
            self.successes.append(outcome)

    @property
    def ok(self) -> bool:
        return not self.failures


def build_target_url(base_url: str, port: int, endpoint: str) -> str:
    """``<base_url>:<port>/<endpoint>`` with exactly one slash before the endpoint."""
    base = (base_url or DEFAULT_BASE_URL).rstrip("/")
    path = (endpoint or "").lstrip("/")
    return f"{base}:{port}/{path}"


class CheckRunner:
    """Runs check cycles for a defaulted, validated config.

    Cycles never overlap: a cycle requested while another is in progress is
    skipped.
    """

    def __init__(self, config: HealthcheckConfig, client: httpx.AsyncClient | None = None):
        self.config = config
        self._client = client
        self._owns_client = client is None
        self._in_progress = False
        self.state = STATE_IDLE

    @property
    def client(self) -> httpx.AsyncClient:
        # Created lazily so it binds to the loop the scheduler runs on.
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
        return self._client

    def target_url(self, job: JobConfig) -> str:
        port = self.config.port if self.config.port is not None else DEFAULT_PORT
        return build_target_url(self.config.base_url or DEFAULT_BASE_URL, port, job.endpoint or "")

    async def check_job(self, job: JobConfig) -> JobOutcome:
        url = self.target_url(job)
        logger.info(f"Running: {job.name}", job=job.name, url=url)
        if self.config.verbose and job.description:
            logger.info(job.description, job=job.name)

        started = time.perf_counter()
        try:
            resp = await self.client.get(url)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            elapsed_ms = round((time.perf_counter() - started) * 1000.0, 3)
            err = TransportError(job.name or "", url, e)
            logger.error("Endpoint unreachable", job=job.name, url=url, error=f"{type(e).__name__}: {e}")
            return JobFailure(
                job=job,
                status_code=None,
                body=b"",
                reason=FailureReason.UNREACHABLE,
                message=str(err),
                elapsed_ms=elapsed_ms,
            )

        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 3)
        body = resp.content
        mismatch = evaluate(job, resp.status_code, body)
        if mismatch is not None:
            logger.debug("Check failed", job=job.name, reason=mismatch.reason, status_code=resp.status_code)
            return JobFailure(
                job=job,
                status_code=resp.status_code,
                body=body,
                reason=mismatch.reason,
                message=mismatch.message,
                elapsed_ms=elapsed_ms,
            )

        logger.debug("Check passed", job=job.name, status_code=resp.status_code, elapsed_ms=elapsed_ms)
        return JobSuccess(job=job, status_code=resp.status_code, elapsed_ms=elapsed_ms)

    async def run_cycle(self) -> CycleReport | None:
        """Check every job in order. Returns None if a previous cycle is still running."""
        return await self._guarded_cycle(report=False)

    async def run_and_report(self) -> CycleReport | None:
        """Run a cycle, then hand its results to the reporter."""
        return await self._guarded_cycle(report=True)

    async def _guarded_cycle(self, *, report: bool) -> CycleReport | None:
        if self._in_progress:
            logger.warning("Previous check cycle still running, skipping this one")
            return None

        self._in_progress = True
        try:
            self.state = STATE_RUNNING
            result = CycleReport(total=len(self.config.jobs))
            for job in self.config.jobs:
                result.add(await self.check_job(job))

            if report:
                self.state = STATE_REPORTING
                log_report(result, verbose=self.config.verbose)
            return result
        finally:
            self.state = STATE_IDLE
            self._in_progress = False

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
