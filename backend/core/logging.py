"""Structured logging for the practice scheduler.

Events are emitted through structlog and rendered by a stdlib
``ProcessorFormatter``, so uvicorn's own records come out in the same
format. Console output in development, JSON lines when ``LOG_JSON`` is set.

Request-scoped fields (correlation id, learner id, session index) are bound
through structlog's contextvars and show up on every event of the request.
"""
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import uuid4

import structlog
from structlog.types import EventDict, Processor

SERVICE_NAME = "practice-scheduler"
SERVICE_VERSION = "0.2.0"

# Keys whose float values are rounded before rendering
_SCORE_KEYS = frozenset({"score", "top_score", "accuracy", "difficulty", "accuracy_pct"})
_SCORE_DIGITS = 4

_NOISY_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
    "watchfiles": logging.WARNING,
}


def _add_service(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", SERVICE_VERSION)
    return event_dict


def _round_scores(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Round score-like floats; full precision only adds noise to the logs."""
    for key in _SCORE_KEYS & event_dict.keys():
        value = event_dict[key]
        if isinstance(value, float):
            event_dict[key] = round(value, _SCORE_DIGITS)
    return event_dict


def shared_processors() -> list[Processor]:
    """Processor chain common to structlog events and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        _add_service,
        _round_scores,
    ]


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Route structlog and stdlib logging to one stdout handler.

    Args:
        level: Root log level name; unknown names fall back to INFO
        json_logs: Render JSON lines instead of console output
    """
    processors = shared_processors()

    structlog.configure(
        processors=[
            *processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_logs),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # uvicorn installs its own handlers; let records propagate to ours instead
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = []
    for name, noisy_level in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(noisy_level)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def generate_correlation_id() -> str:
    return uuid4().hex[:8]


def bind_context(**kwargs) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def session_context(session_index: int, **fields) -> Iterator[None]:
    """Bind the session being scheduled to every event inside the block."""
    with structlog.contextvars.bound_contextvars(session_index=session_index, **fields):
        yield


class LoggerRegistry:
    """One named logger per domain, created on first use."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, domain: str) -> structlog.stdlib.BoundLogger:
        logger = cls._loggers.get(domain)
        if logger is None:
            logger = cls._loggers[domain] = get_logger(f"practice.{domain}")
        return logger


def api_logger() -> structlog.stdlib.BoundLogger:
    return LoggerRegistry.get("api")


def engine_logger() -> structlog.stdlib.BoundLogger:
    """Exercise assembly and result aggregation."""
    return LoggerRegistry.get("engine")


def scheduler_logger() -> structlog.stdlib.BoundLogger:
    """Scoring, ranking and sampling."""
    return LoggerRegistry.get("scheduler")
