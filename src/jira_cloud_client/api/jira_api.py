"""
Common client for the Jira Cloud Builds and Deployments APIs.
"""
import logging
from typing import Any, Optional, Type, TypeVar

from ..codec import JsonCodec, JsonParseError, JsonMappingError, JsonSerializationError
from ..config.settings import validate_endpoint_template
from .response import JSON_CONTENT_TYPE, HttpRequest, HttpResponse
from .results import SubmitError, SubmitErrorKind, SubmitResult
from .transport import HttpTransport, TransportError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class _SubmitFailed(Exception):
    """Internal: aborts a submission once the error has been logged."""

    def __init__(self, error: SubmitError):
        super().__init__(error.message)
        self.error = error


class JiraApi:
    """Posts JSON payloads to a per-cloud Jira endpoint and decodes the reply.

    Holds no per-call state, so one instance can be shared across threads.
    """

    def __init__(self, transport: HttpTransport, codec: JsonCodec, api_endpoint: str):
        """Initialize the client.

        Args:
            transport: Executes HTTP requests
            codec: Serializes payloads and deserializes responses
            api_endpoint: Endpoint template with one %s slot for the cloud id,
                e.g. https://api.atlassian.com/jira/builds/0.1/cloud/%s/bulk
        """
        if transport is None or codec is None:
            raise ValueError("transport and codec are required")
        validate_endpoint_template(api_endpoint)
        self._transport = transport
        self._codec = codec
        self._api_endpoint = api_endpoint

    @property
    def api_endpoint(self) -> str:
        return self._api_endpoint

    def with_api_endpoint(self, api_endpoint: str) -> 'JiraApi':
        """Return a client sharing this one's transport and codec but posting elsewhere."""
        return JiraApi(self._transport, self._codec, api_endpoint)

    def close(self):
        """Close the underlying transport."""
        self._transport.close()

    def resolve_url(self, cloud_id: str) -> str:
        return self._api_endpoint % cloud_id

    def build_request(self, cloud_id: str, access_token: str, request_payload: str) -> HttpRequest:
        return HttpRequest(
            method='POST',
            url=self.resolve_url(cloud_id),
            headers={
                'Authorization': f'Bearer {access_token}',
                'Content-Type': JSON_CONTENT_TYPE,
            },
            body=request_payload,
        )

    def submit(self, cloud_id: str, access_token: str, site_url: str,
               request_payload: Any, response_type: Type[T]) -> SubmitResult[T]:
        """
        Submit an update to the Atlassian Builds or Deployments API.

        Exactly one HTTP request is made, and none at all if the payload cannot
        be serialized. Failures are logged here and returned as errors.

        Args:
            cloud_id: Jira Cloud Id, substituted into the endpoint template
            access_token: Access token generated from the Atlassian API
            site_url: Jira site URL, used only in diagnostics
            request_payload: Assembled payload to be submitted to Jira
            response_type: Type the response body is deserialized into

        Returns:
            SubmitResult holding the decoded response or a SubmitError
        """
        try:
            return SubmitResult.success(
                self._submit(cloud_id, access_token, site_url, request_payload, response_type)
            )
        except _SubmitFailed as e:
            return SubmitResult.failure(e.error)

    def post_update(self, cloud_id: str, access_token: str, site_url: str,
                    request_payload: Any, response_type: Type[T]) -> T:
        """Like ``submit`` but raises ApiUpdateFailedError on any failure."""
        return self.submit(cloud_id, access_token, site_url, request_payload, response_type).unwrap()

    def _submit(self, cloud_id, access_token, site_url, request_payload, response_type):
        try:
            payload = self._codec.serialize(request_payload)
        except JsonSerializationError as e:
            self._fail(
                SubmitErrorKind.PAYLOAD_SERIALIZATION,
                f"Unable to create the request payload for {site_url} : {e}",
                site_url,
            )

        request = self.build_request(cloud_id, access_token, payload)
        try:
            response = self._transport.execute(request)
        except (TransportError, OSError) as e:
            self._fail(
                SubmitErrorKind.TRANSPORT,
                f"Server exception when submitting to {site_url}: {e}",
                site_url,
            )

        self._check_for_error_response(site_url, response)
        return self._handle_response_body(site_url, response, response_type)

    def _check_for_error_response(self, site_url: str, response: HttpResponse):
        if response.is_successful:
            return

        try:
            body = response.read()
        except (TransportError, OSError) as e:
            logger.error(f"Error response body unavailable when submitting to {site_url}: {e}")
        else:
            if body is not None:
                logger.error(
                    f"Error response body when submitting to {site_url}: "
                    f"{body.decode('utf-8', errors='replace')}"
                )

        self._fail(
            SubmitErrorKind.ERROR_RESPONSE,
            f"Error response code {response.status_code} when submitting to {site_url}",
            site_url,
            response.status_code,
        )

    def _handle_response_body(self, site_url: str, response: HttpResponse, response_type: Type[T]) -> T:
        try:
            body = response.read()
        except (TransportError, OSError) as e:
            self._fail(
                SubmitErrorKind.TRANSPORT,
                f"Server exception when submitting to {site_url}: {e}",
                site_url,
                response.status_code,
            )

        if not body:
            self._fail(
                SubmitErrorKind.EMPTY_BODY,
                f"Empty response body when submitting to {site_url}",
                site_url,
                response.status_code,
            )

        try:
            return self._codec.deserialize(body, response_type)
        except JsonParseError as e:
            detail = f"{e}"
        except JsonMappingError as e:
            detail = f"cannot map to {getattr(response_type, '__name__', response_type)}: {e}"

        self._fail(
            SubmitErrorKind.RESPONSE_DESERIALIZATION,
            f"Invalid JSON when submitting to {site_url}: {detail}",
            site_url,
            response.status_code,
        )

    @staticmethod
    def _fail(kind: SubmitErrorKind, message: str, site_url: str, status_code: Optional[int] = None):
        logger.error(message)
        raise _SubmitFailed(SubmitError(kind=kind, message=message, site_url=site_url, status_code=status_code))


