"""
Configuration for the Jira Cloud client: settings loading and logging bootstrap.
"""

from .settings import (
    ClientSettings,
    InvalidEndpointTemplateError,
    SettingsError,
    load_settings,
    validate_endpoint_template,
)
from .logging import bootstrap_logging, get_logger

__all__ = [
    'ClientSettings',
    'InvalidEndpointTemplateError',
    'SettingsError',
    'load_settings',
    'validate_endpoint_template',
    'bootstrap_logging',
    'get_logger',
]
