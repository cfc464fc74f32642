"""
Jira Cloud API client package.

JiraApi submits payloads through an injected HttpTransport and decodes replies
with a JsonCodec.
"""

from .factory import builds_api, create_transport, deployments_api
from .jira_api import JiraApi
from .response import HttpRequest, HttpResponse
from .results import ApiUpdateFailedError, SubmitError, SubmitErrorKind, SubmitResult
from .transport import HttpTransport, RequestsTransport, TransportError

__all__ = [
    'JiraApi',
    'builds_api',
    'deployments_api',
    'create_transport',
    'HttpRequest',
    'HttpResponse',
    'HttpTransport',
    'RequestsTransport',
    'TransportError',
    'ApiUpdateFailedError',
    'SubmitError',
    'SubmitErrorKind',
    'SubmitResult',
]
