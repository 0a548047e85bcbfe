from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .config import JobConfig


class FailureReason(str, Enum):
    STATUS_MISMATCH = "status_mismatch"
    BODY_MISMATCH = "body_mismatch"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class Mismatch:
    reason: FailureReason
    message: str


def status_matches(job: JobConfig, observed_status: int) -> bool:
    return observed_status == job.expected_status


def body_matches(job: JobConfig, observed_body: bytes | str) -> bool:
    # 404 jobs expect absence, so whatever came back is acceptable.
    if not observed_body or job.expected_status == 404:
        return True

    if isinstance(observed_body, str):
        observed_body = observed_body.encode("utf-8")
    return observed_body == job.expected_body.encode("utf-8")


def evaluate(job: JobConfig, observed_status: int, observed_body: bytes | str) -> Mismatch | None:
    """Check status first, then body. Returns the first mismatch or None on success."""
    if not status_matches(job, observed_status):
        return Mismatch(
            reason=FailureReason.STATUS_MISMATCH,
            message=f"{job.name}: Expected {job.expected_status} received {observed_status}",
        )
    if not body_matches(job, observed_body):
        return Mismatch(reason=FailureReason.BODY_MISMATCH, message=f"{job.name}: Response body did not match")
    return None
