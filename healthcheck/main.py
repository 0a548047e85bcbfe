"""Command-line entry point: load the config, then poll the configured endpoints forever."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import structlog

from healthcheck import __version__
from healthcheck.config import HealthcheckConfig, apply_defaults, load_config
from healthcheck.errors import ConfigNotProvided, HealthcheckError
from healthcheck.runner import CheckRunner
from healthcheck.scheduler import CheckScheduler
from healthcheck.validation import validate_config


logger = structlog.get_logger("healthcheck")

USAGE = """
****************************************************************
                     endpoint-healthcheck
****************************************************************

 SYNOPSIS
    endpoint-healthcheck -f config_file.yml
 DESCRIPTION
    Polls a list of HTTP endpoints on a fixed interval and reports
    which ones returned the expected status code and body.
 OPTIONS
    -f, --file [file]     Config file. Sets the base url, port,
                          schedule (ms) and the list of checks.
    -v, --version         Print version information
 EXAMPLES
    endpoint-healthcheck -f production-check.yml
"""


def configure_logging(log_level: str) -> None:
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Request lines are logged per job already.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def load_checked_config(path: str | Path | None) -> HealthcheckConfig:
    """Load, default and validate the config; any problem raises a HealthcheckError."""
    if not path:
        raise ConfigNotProvided()
    config = load_config(path)
    apply_defaults(config)
    validate_config(config)
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="endpoint-healthcheck",
        description="Poll HTTP endpoints and compare status codes and bodies against expectations",
    )
    parser.add_argument("-f", "--file", dest="config_file", help="Path to YAML config")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    logger.info("Starting...")

    try:
        config = load_checked_config(args.config_file)
    except HealthcheckError as e:
        print(USAGE, file=sys.stderr)
        print(str(e), file=sys.stderr)
        return 1

    runner = CheckRunner(config)
    CheckScheduler(runner, config.schedule).run_forever()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
