from core.config import Settings, get_settings, settings
from core.logging import (
    api_logger,
    bind_context,
    clear_context,
    configure_logging,
    engine_logger,
    generate_correlation_id,
    get_logger,
    scheduler_logger,
    session_context,
)

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "api_logger",
    "bind_context",
    "clear_context",
    "configure_logging",
    "engine_logger",
    "generate_correlation_id",
    "get_logger",
    "scheduler_logger",
    "session_context",
]
