"""
Client settings.

Settings are layered: built-in defaults, then an optional YAML file, then
environment variables. Later layers win.
"""
import logging
import math
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_BUILDS_API_URL = 'https://api.atlassian.com/jira/builds/0.1/cloud/%s/bulk'
DEFAULT_DEPLOYMENTS_API_URL = 'https://api.atlassian.com/jira/deployments/0.1/cloud/%s/bulk'
DEFAULT_SETTINGS_PATH = Path('config') / 'jira.yaml'

# Environment variable -> settings field
ENV_VARS = {
    'JIRA_BUILDS_API_URL': 'builds_api_url',
    'JIRA_DEPLOYMENTS_API_URL': 'deployments_api_url',
    'JIRA_API_TIMEOUT': 'timeout_seconds',
    'JIRA_USER_AGENT': 'user_agent',
}


class SettingsError(Exception):
    """Raised when settings cannot be loaded or hold invalid values."""
    pass


class InvalidEndpointTemplateError(SettingsError):
    """Raised when an endpoint template does not have exactly one %s slot."""

    def __init__(self, template: str):
        self.template = template
        super().__init__(
            f"Endpoint template '{template}' must contain exactly one '%s' placeholder for the cloud id"
        )


def validate_endpoint_template(template: str) -> str:
    """Check that a template has a single ``%s`` slot and no other format directives."""
    if not isinstance(template, str) or not template:
        raise InvalidEndpointTemplateError(str(template))
    # '%%' is an escaped literal percent sign, not a slot
    unescaped = template.replace('%%', '')
    if unescaped.count('%s') != 1 or unescaped.count('%') != 1:
        raise InvalidEndpointTemplateError(template)
    return template


@dataclass(frozen=True)
class ClientSettings:
    """Settings for the Jira API clients."""
    builds_api_url: str = DEFAULT_BUILDS_API_URL
    deployments_api_url: str = DEFAULT_DEPLOYMENTS_API_URL
    timeout_seconds: float = 10.0
    user_agent: Optional[str] = None

    def __post_init__(self):
        validate_endpoint_template(self.builds_api_url)
        validate_endpoint_template(self.deployments_api_url)
        if not math.isfinite(self.timeout_seconds) or self.timeout_seconds <= 0:
            raise SettingsError(f"timeout_seconds must be a positive number, got {self.timeout_seconds}")


def _coerce(name: str, value: Any) -> Any:
    if name == 'timeout_seconds':
        try:
            return float(value)
        except (TypeError, ValueError):
            raise SettingsError(f"Invalid value for {name}: {value!r}")
    if value is not None and not isinstance(value, str):
        raise SettingsError(f"Invalid value for {name}: {value!r}")
    return value


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise SettingsError(f"Failed to parse {path}: {e}")

    if not isinstance(data, dict):
        raise SettingsError(f"{path} must contain a mapping")

    # Settings may be nested under a top-level 'jira' key
    data = data.get('jira', data)
    if not isinstance(data, dict):
        raise SettingsError(f"'jira' section in {path} must contain a mapping")
    known = {f.name for f in fields(ClientSettings)}
    unknown = set(data) - known
    if unknown:
        raise SettingsError(f"Unknown settings in {path}: {', '.join(sorted(unknown))}")
    return data


def load_settings(path: Optional[Union[str, Path]] = None,
                  environ: Optional[Dict[str, str]] = None) -> ClientSettings:
    """
    Load client settings.

    Args:
        path: YAML settings file. When omitted, config/jira.yaml in the current
            directory is used if it exists.
        environ: Environment mapping (defaults to os.environ)

    Returns:
        ClientSettings

    Raises:
        SettingsError: If an explicit file is missing or any value is invalid
    """
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}

    if path is not None:
        settings_path = Path(path)
        if not settings_path.exists():
            raise SettingsError(f"Settings file not found: {settings_path}")
    else:
        settings_path = Path.cwd() / DEFAULT_SETTINGS_PATH

    if settings_path.exists():
        overrides.update(_load_yaml(settings_path))
        logger.debug(f"Loaded settings from {settings_path}")

    for var_name, field_name in ENV_VARS.items():
        value = environ.get(var_name)
        if value is not None and value.strip():
            overrides[field_name] = value.strip()
            logger.debug(f"Setting {field_name} taken from {var_name}")

    values = {name: _coerce(name, value) for name, value in overrides.items()}
    return replace(ClientSettings(), **values)
