"""Public observability primitives: structured session logging."""

from mvn_tui.observability.logging import (
    ROOT_LOGGER_NAME,
    LoggingConfig,
    LogRedactor,
    StructuredLoggingHandle,
    default_log_redactor,
    get_active_logging_handle,
    new_run_id,
    setup_structured_logging,
    shutdown_logging,
    silence_logging,
)

__all__ = [
    "ROOT_LOGGER_NAME",
    "LogRedactor",
    "LoggingConfig",
    "StructuredLoggingHandle",
    "default_log_redactor",
    "get_active_logging_handle",
    "new_run_id",
    "setup_structured_logging",
    "shutdown_logging",
    "silence_logging",
]
