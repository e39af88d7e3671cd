"""
Configuration module for spec-forms.

Handles environment variables and default settings.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    return os.getenv(name, str(default).lower()).lower() == "true"


@dataclass
class FormEngineConfig:
    """Configuration settings for spec-forms."""

    # Logging settings
    log_level: str = "WARNING"
    logger_name: str = "spec-forms"

    # Tracing settings
    enable_tracing: bool = False
    trace_to_console: bool = False
    trace_verbose: bool = False
    trace_file: str | None = None
    trace_name_prefix: str = "spec-forms"

    @classmethod
    def from_env(cls) -> "FormEngineConfig":
        """
        Create configuration from environment variables.

        If an environment variable is not set, uses the class field default value.
        """
        _defaults = cls()

        return cls(
            log_level=os.getenv("SPEC_FORMS_LOG_LEVEL", _defaults.log_level).upper(),
            enable_tracing=_env_flag("SPEC_FORMS_ENABLE_TRACING", _defaults.enable_tracing),
            trace_to_console=_env_flag("SPEC_FORMS_TRACE_CONSOLE", _defaults.trace_to_console),
            trace_verbose=_env_flag("SPEC_FORMS_TRACE_VERBOSE", _defaults.trace_verbose),
            trace_file=os.getenv("SPEC_FORMS_TRACE_FILE", _defaults.trace_file) or None,
        )


config = FormEngineConfig.from_env()


def get_config() -> FormEngineConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> FormEngineConfig:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config


def configure_logging(settings: FormEngineConfig | None = None) -> logging.Logger:
    """Apply the configured level to the package logger."""
    settings = settings or get_config()
    logger = logging.getLogger(settings.logger_name)
    logger.setLevel(getattr(logging, settings.log_level, logging.WARNING))
    return logger
