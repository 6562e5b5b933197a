"""Configuration module."""

from invoiceflow.config.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)
from invoiceflow.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
