"""Configuration, file and logging helpers."""

from .config_loader import ConfigLoader, ConfigSchema, Settings
from .logging_config import configure_logging

__all__ = ['ConfigLoader', 'ConfigSchema', 'Settings', 'configure_logging']
