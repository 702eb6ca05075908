"""PyRewind Logging: structlog output for the sequencer's loggers."""

from pyrewind.logging.structlog_adapter import (
    LoggingProperties,
    StructlogAdapter,
    configure_logging,
    reset_logging,
)

__all__ = ["LoggingProperties", "StructlogAdapter", "configure_logging", "reset_logging"]
