"""Structlog-based logging configuration for Birdwatch.

Supports different deployment targets:
- Docker: Uses stdout with JSON output
- Development: Human-readable console output unless JSON is requested
"""

import logging
import os
import sys
from collections.abc import Callable
from typing import Any

import structlog

from birdwatch.config.models import BirdwatchConfig


def is_docker_environment() -> bool:
    """Check if running in a Docker container."""
    return os.path.exists("/.dockerenv") or os.environ.get("DOCKER_CONTAINER") == "true"


def get_deployment_environment() -> str:
    """Get deployment environment with 'unknown' fallback."""
    if is_docker_environment():
        return "docker"
    elif os.environ.get("BIRDWATCH_ENV") == "development":
        return "development"
    else:
        return "unknown"


def _add_static_context(extra_fields: dict[str, str]) -> Callable:
    """Processor to add static context fields to all log entries."""

    def processor(
        logger: structlog.BoundLogger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.update(extra_fields)
        return event_dict

    return processor


def _use_json_output(config: BirdwatchConfig) -> bool:
    """Decide between JSON and console rendering."""
    if config.logging.json_logs is not None:
        return config.logging.json_logs
    if os.environ.get("BIRDWATCH_JSON_LOGS", "false").lower() == "true":
        return True
    return is_docker_environment()


def _configure_processors(config: BirdwatchConfig) -> list:
    """Configure structlog processors based on environment."""
    extra_fields = {
        "service": "birdwatch",
        "deployment": get_deployment_environment(),
        **config.logging.extra_fields,
    }
    if config.site_name:
        extra_fields["site_name"] = config.site_name

    processors = [
        structlog.contextvars.merge_contextvars,
        _add_static_context(extra_fields),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
    ]

    if config.logging.include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if _use_json_output(config):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    return processors


def _configure_handlers(config: BirdwatchConfig) -> None:
    """Route stdlib logging to stdout at the configured level."""
    root_logger = logging.getLogger()
    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)


def configure_structlog(config: BirdwatchConfig) -> None:
    """Configure structlog-based logging system.

    Args:
        config: The BirdwatchConfig instance containing logging settings.
    """
    processors = _configure_processors(config)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.logging.level.upper(), logging.INFO)
        ),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configure_handlers(config)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Structured logging configured",
        log_level=config.logging.level,
        environment=get_deployment_environment(),
        json_output=_use_json_output(config),
    )
