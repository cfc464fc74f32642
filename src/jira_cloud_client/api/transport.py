"""
HTTP transports for the Jira API client.

HttpTransport is the seam the client executes requests through. RequestsTransport
is the production implementation on top of the requests library; tests inject
their own transport.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests

from .response import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when the server cannot be reached or the exchange breaks off."""
    pass


class HttpTransport(ABC):
    """Abstract base class for HTTP transports.

    Implementations must be safe to share between threads.
    """

    @abstractmethod
    def execute(self, request: HttpRequest) -> HttpResponse:
        """Execute a request and return the response.

        Raises:
            TransportError: On connection failures, timeouts and I/O errors
        """
        pass

    def close(self):
        """Release any resources held by the transport."""
        pass


class RequestsTransport(HttpTransport):
    """Transport backed by a shared ``requests.Session``."""

    def __init__(self, timeout_seconds: float = 10.0, session: Optional[requests.Session] = None,
                 user_agent: Optional[str] = None):
        """Initialize the transport.

        Args:
            timeout_seconds: Connect and read timeout applied to every request
            session: Session to use; a new one is created when omitted
            user_agent: Optional User-Agent header set on the session
        """
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        if user_agent:
            self.session.headers['User-Agent'] = user_agent

    def execute(self, request: HttpRequest) -> HttpResponse:
        """Send the request over HTTP."""
        logger.debug(f"{request.method} {request.url}")
        data = request.body.encode('utf-8') if request.body is not None else None
        try:
            response = self.session.request(
                request.method,
                request.url,
                data=data,
                headers=request.headers,
                timeout=self.timeout_seconds,
                stream=True,
                allow_redirects=False,
            )
        except requests.RequestException as e:
            raise TransportError(str(e)) from e

        return HttpResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            reader=lambda: _read_body(response),
        )

    def close(self):
        """Close the underlying session."""
        self.session.close()


def _read_body(response: requests.Response) -> Optional[bytes]:
    try:
        return response.content
    except (requests.RequestException, OSError) as e:
        raise TransportError(f"Failed to read response body: {e}") from e
    finally:
        response.close()
