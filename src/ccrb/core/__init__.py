"""Configuration and logging."""

from .config import HarvestSettings, get_settings
from .logging import bind_run_context, get_logger, setup_logging

__all__ = ["HarvestSettings", "bind_run_context", "get_settings", "get_logger", "setup_logging"]
