"""
Centralized logging configuration.

bootstrap_logging() configures logging once from a logging.ini file using
Python's native INI format, with a LOG_LEVEL environment override.
"""

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Optional

VALID_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
FALLBACK_FORMAT = '%(levelname)s: %(name)s: %(message)s'

_bootstrapped = False


def _find_logging_config() -> Optional[Path]:
    """
    Find the logging configuration file.

    Looks for logging.ini in the current working directory, then in config/.

    Returns:
        Path to logging configuration file, or None if not found.
    """
    for candidate in (Path('logging.ini'), Path('config') / 'logging.ini'):
        if candidate.exists():
            return candidate
    return None


def _resolve_log_level() -> str:
    """Read LOG_LEVEL from the environment, falling back to INFO when unset or invalid."""
    log_level = os.environ.get('LOG_LEVEL', 'INFO').strip().upper()
    if log_level not in VALID_LEVELS:
        print(f"Warning: Invalid LOG_LEVEL '{log_level}', using INFO", file=sys.stderr)
        log_level = 'INFO'
    # fileConfig substitutes %(LOG_LEVEL)s from defaults
    os.environ['LOG_LEVEL'] = log_level
    return log_level


def _basic_config(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format=FALLBACK_FORMAT,
        stream=sys.stderr
    )


def bootstrap_logging(name: Optional[str] = None, force: bool = False) -> None:
    """
    Bootstrap logging configuration for the application.

    This function:
    1. Resolves LOG_LEVEL from the environment
    2. Loads logging.ini with logging.config.fileConfig(), if one is found
    3. Applies the LOG_LEVEL override to the root logger and its stream handlers
    4. Falls back to basicConfig when no usable INI file exists

    Calling it again is a no-op unless force is set.

    Args:
        name: Optional logger name to report the configuration on
        force: Reconfigure even if logging was already bootstrapped
    """
    global _bootstrapped
    if _bootstrapped and not force:
        return

    level = _resolve_log_level()
    config_path = _find_logging_config()

    if config_path is None:
        _basic_config(level)
    else:
        try:
            logging.config.fileConfig(
                str(config_path),
                defaults={'LOG_LEVEL': level},
                disable_existing_loggers=False
            )
        except Exception as e:
            print(f"Warning: Failed to load logging config from {config_path}: {e}", file=sys.stderr)
            print("Using basic logging configuration", file=sys.stderr)
            _basic_config(level)
        else:
            root_logger = logging.getLogger()
            root_logger.setLevel(getattr(logging, level))
            for handler in root_logger.handlers:
                if isinstance(handler, logging.StreamHandler):
                    handler.setLevel(getattr(logging, level))
            logging.getLogger('jira_cloud_client').setLevel(getattr(logging, level))

    _bootstrapped = True
    logging.getLogger(name).debug(f"Logging configured from {config_path or 'defaults'}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name, ensuring logging is bootstrapped.

    Args:
        name: Name for the logger

    Returns:
        Configured logger instance
    """
    bootstrap_logging()
    return logging.getLogger(name)
