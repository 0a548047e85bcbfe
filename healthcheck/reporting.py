from __future__ import annotations

import json
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from .config import JobConfig
    from .runner import CycleReport


logger = structlog.get_logger(__name__)


def render_expected_body(job: JobConfig) -> str:
    """Human-readable expected body: the parsed JSON for file-backed jobs, else the literal."""
    if job.read_file and job.expected_json is not None:
        return json.dumps(job.expected_json, indent=2, ensure_ascii=False)
    return job.expected_body


def render_observed_body(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


def format_report(report: CycleReport, *, verbose: bool = False) -> list[str]:
    lines = [
        "--RESULTS--",
        f"{len(report.successes)}/{report.total} Succeeded",
        f"{len(report.failures)}/{report.total} Failed",
    ]
    for failure in report.failures:
        lines.append(failure.message)
        if verbose:
            name = failure.job.name
            lines.append(f"{name}: Expected body was:")
            lines.append(render_expected_body(failure.job))
            lines.append(f"{name}: Received body was:")
            lines.append(render_observed_body(failure.body))
    return lines


def log_report(report: CycleReport, *, verbose: bool = False) -> None:
    summary_end = 3
    lines = format_report(report, verbose=verbose)
    for line in lines[:summary_end]:
        logger.info(line)
    for line in lines[summary_end:]:
        logger.warning(line)
