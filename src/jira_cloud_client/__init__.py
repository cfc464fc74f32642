"""
Jira Cloud client for CI/CD integrations.

Submits build and deployment updates to the Jira Cloud APIs.
"""

__version__ = '0.1.0'

from .api import (  # noqa: E402
    ApiUpdateFailedError,
    JiraApi,
    SubmitError,
    SubmitErrorKind,
    SubmitResult,
    builds_api,
    deployments_api,
)
from .codec import JsonCodec  # noqa: E402

__all__ = [
    'ApiUpdateFailedError',
    'JiraApi',
    'JsonCodec',
    'SubmitError',
    'SubmitErrorKind',
    'SubmitResult',
    'builds_api',
    'deployments_api',
]
