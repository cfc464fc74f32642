"""
Request and response wrappers shared by HTTP transports.

Provides a consistent interface regardless of underlying HTTP library.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

JSON_CONTENT_TYPE = 'application/json; charset=utf-8'


@dataclass(frozen=True)
class HttpRequest:
    """A fully built outbound request.

    The Authorization header is masked in ``repr`` so request objects can be
    logged without leaking the access token.
    """
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None

    def __repr__(self):
        masked = {
            name: ('***' if name.lower() == 'authorization' else value)
            for name, value in self.headers.items()
        }
        return f"HttpRequest(method={self.method!r}, url={self.url!r}, headers={masked!r})"


class HttpResponse:
    """Status, headers and a lazily read body.

    Reading the body may fail (the connection can drop after the status line
    arrives), so ``read()`` is allowed to raise ``TransportError``.
    """

    def __init__(self, status_code: int, headers: Optional[Dict[str, str]] = None,
                 body: Optional[bytes] = None,
                 reader: Optional[Callable[[], Optional[bytes]]] = None):
        """Initialize with either a ready body or a reader callable.

        Args:
            status_code: HTTP status code
            headers: Response headers
            body: Response body, None when the server sent none
            reader: Callable producing the body on first ``read()``; takes precedence over body
        """
        self.status_code = status_code
        self.headers = headers or {}
        self._body = body
        self._reader = reader

    @property
    def is_successful(self) -> bool:
        return 200 <= self.status_code < 300

    def read(self) -> Optional[bytes]:
        """Return the response body, reading it from the wire on first call."""
        if self._reader is not None:
            reader, self._reader = self._reader, None
            self._body = reader()
        return self._body

    def __repr__(self):
        return f"HttpResponse(status_code={self.status_code})"
