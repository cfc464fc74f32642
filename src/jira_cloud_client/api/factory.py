"""
Factories wiring JiraApi instances from settings.
"""
import logging
from typing import Optional

from ..codec import JsonCodec
from ..config.settings import ClientSettings, load_settings
from .jira_api import JiraApi
from .transport import HttpTransport, RequestsTransport

logger = logging.getLogger(__name__)


def create_transport(settings: ClientSettings) -> RequestsTransport:
    """Create the production transport configured from settings."""
    return RequestsTransport(
        timeout_seconds=settings.timeout_seconds,
        user_agent=settings.user_agent,
    )


def _create_api(api_endpoint: str, settings: ClientSettings,
                transport: Optional[HttpTransport], codec: Optional[JsonCodec]) -> JiraApi:
    transport = transport or create_transport(settings)
    codec = codec or JsonCodec()
    logger.debug(f"Creating Jira API client for {api_endpoint}")
    return JiraApi(transport, codec, api_endpoint)


def builds_api(settings: Optional[ClientSettings] = None,
               transport: Optional[HttpTransport] = None,
               codec: Optional[JsonCodec] = None) -> JiraApi:
    """Client for the Jira Builds API."""
    settings = settings or load_settings()
    return _create_api(settings.builds_api_url, settings, transport, codec)


def deployments_api(settings: Optional[ClientSettings] = None,
                    transport: Optional[HttpTransport] = None,
                    codec: Optional[JsonCodec] = None) -> JiraApi:
    """Client for the Jira Deployments API."""
    settings = settings or load_settings()
    return _create_api(settings.deployments_api_url, settings, transport, codec)
