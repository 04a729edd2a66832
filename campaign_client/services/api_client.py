"""Campaign Import/Report API Client.

Provides functionality to:
- Upload a campaign spreadsheet with byte-level progress
- Fetch paginated Sent/Responds reports with monthly stats
- Fetch the selectable response categories
- Confirm an unsubscribe link
"""

from collections.abc import AsyncIterator, Callable
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from campaign_client.config import get_settings
from campaign_client.schemas.report import (
    ReportEnvelope,
    ReportQuery,
    ReportResult,
    RespondsOptionsEnvelope,
)
from campaign_client.schemas.unsubscribe import UnsubscribeEnvelope, UnsubscribeResult
from campaign_client.schemas.upload import (
    Campaign,
    EmailType,
    SpreadsheetFile,
    UploadEnvelope,
)
from campaign_client.utils.logging import get_logger

logger = get_logger(__name__)

REPORT_PATH = "/import/report"
RESPONDS_OPTIONS_PATH = "/import/responds-options"
UNSUBSCRIBE_PATH = "/tracking/unsub"
UPLOAD_PATH_TEMPLATE = "/{campaign}/import/upload"

INVALID_RESPONSE_MESSAGE = "Invalid response from server"

ProgressCallback = Callable[[int], None]


class ApiError(Exception):
    """Exception raised when an API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkError(ApiError):
    """No response was received."""


class RequestTimeoutError(ApiError):
    """The request exceeded its deadline."""


class ServerError(ApiError):
    """The server answered with a non-2xx status or a failed envelope."""

    def __init__(
        self, message: str, status_code: Optional[int] = None, status_text: str = ""
    ):
        super().__init__(message, status_code=status_code)
        self.status_text = status_text


class DecodeError(ApiError):
    """A 2xx response whose body could not be decoded."""


def _error_message(response: httpx.Response) -> Optional[str]:
    """Extract the `message` field of a JSON error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


def _raise_for_status(response: httpx.Response, fallback: str) -> None:
    """Raise ServerError for a non-2xx response.

    Args:
        response: HTTP response
        fallback: Message used when the body carries none

    Raises:
        ServerError: If the status is outside 2xx
    """
    if 200 <= response.status_code < 300:
        return
    message = _error_message(response) or fallback
    logger.error(f"API error: {response.status_code} - {message}")
    raise ServerError(
        message,
        status_code=response.status_code,
        status_text=response.reason_phrase,
    )


def _json_body(response: httpx.Response) -> dict[str, Any]:
    """Decode a 2xx JSON body.

    Raises:
        DecodeError: If the body is not a JSON object
    """
    try:
        body = response.json()
    except ValueError as e:
        logger.error(f"Undecodable response body ({response.status_code}): {e}")
        raise DecodeError(INVALID_RESPONSE_MESSAGE, status_code=response.status_code) from e
    if not isinstance(body, dict):
        raise DecodeError(INVALID_RESPONSE_MESSAGE, status_code=response.status_code)
    return body


class CampaignApiClient:
    """Client for the campaign import/report HTTP API."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        upload_timeout: float | None = None,
        chunk_size: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Service root; defaults to settings.api_base_url
            timeout: Timeout for report/options/unsubscribe calls, in seconds
            upload_timeout: Transport timeout for uploads, in seconds
            chunk_size: Bytes per streamed upload chunk
            transport: Optional httpx transport (tests, proxies)
        """
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = (
            timeout if timeout is not None else settings.request_timeout_seconds
        )
        self.upload_timeout = (
            upload_timeout
            if upload_timeout is not None
            else settings.upload_timeout_seconds
        )
        self.chunk_size = (
            chunk_size if chunk_size is not None else settings.upload_chunk_size
        )
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=self._transport
        )

    async def _send(
        self, method: str, path: str, json: dict[str, Any] | None = None
    ) -> httpx.Response:
        """Send a JSON request, mapping transport failures to ApiError.

        Raises:
            RequestTimeoutError: If the request timed out
            NetworkError: If no response was received
        """
        try:
            async with self._client(self.timeout) as client:
                return await client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.error(f"{method} {path} timed out: {e}")
            raise RequestTimeoutError("Request timed out. Please try again.") from e
        except httpx.TransportError as e:
            logger.error(f"{method} {path} network error: {e}")
            raise NetworkError("Network error. Please check your connection.") from e

    async def get_report(self, query: ReportQuery) -> ReportResult:
        """Fetch one page of a Sent or Responds report.

        Args:
            query: Filters and pagination for the report

        Returns:
            Decoded report with records in server order

        Raises:
            ApiError: If the call fails at any layer
        """
        response = await self._send("POST", REPORT_PATH, json=query.to_payload())
        _raise_for_status(
            response, f"Report request failed with status {response.status_code}"
        )
        body = _json_body(response)

        try:
            envelope = ReportEnvelope.model_validate(body)
        except ValidationError as e:
            logger.error(f"Malformed report payload: {e}")
            raise DecodeError(INVALID_RESPONSE_MESSAGE, status_code=response.status_code) from e

        if envelope.status != 200:
            raise ServerError(
                envelope.message or "Report request failed",
                status_code=envelope.status,
            )
        if envelope.data is None:
            raise DecodeError(INVALID_RESPONSE_MESSAGE, status_code=response.status_code)

        try:
            result = ReportResult.from_envelope(envelope, query.report_kind)
        except ValidationError as e:
            logger.error(f"Malformed report records: {e}")
            raise DecodeError(INVALID_RESPONSE_MESSAGE, status_code=response.status_code) from e

        logger.debug(
            f"Fetched {len(result.records)} {query.report_kind.value} records "
            f"(page {result.pagination.page}/{result.pagination.total_pages})"
        )
        return result

    async def get_responds_options(self) -> list[str]:
        """Fetch the response category labels.

        Returns:
            Category labels in server order

        Raises:
            ApiError: If the call fails at any layer
        """
        response = await self._send("GET", RESPONDS_OPTIONS_PATH)
        _raise_for_status(
            response, f"Options request failed with status {response.status_code}"
        )
        body = _json_body(response)

        try:
            envelope = RespondsOptionsEnvelope.model_validate(body)
        except ValidationError as e:
            raise DecodeError(INVALID_RESPONSE_MESSAGE, status_code=response.status_code) from e

        if envelope.status != 200:
            raise ServerError(
                envelope.message or "Options request failed",
                status_code=envelope.status,
            )
        if envelope.data is None:
            raise DecodeError(INVALID_RESPONSE_MESSAGE, status_code=response.status_code)
        return [option.label for option in envelope.data.options]

    async def unsubscribe(self, k: str, to: str, from_: str) -> UnsubscribeResult:
        """Unsubscribe a receiver from a sender.

        Args:
            k: Send key from the unsubscribe link
            to: Receiver email address
            from_: Sender email address

        Returns:
            Subscription state after the call

        Raises:
            ServerError: On a non-2xx response; carries the HTTP status text
            ApiError: If the call fails at any other layer
        """
        response = await self._send(
            "POST", UNSUBSCRIBE_PATH, json={"k": k, "to": to, "from": from_}
        )
        _raise_for_status(
            response,
            f"Unsubscribe failed: {response.status_code} {response.reason_phrase}",
        )
        body = _json_body(response)

        try:
            envelope = UnsubscribeEnvelope.model_validate(body)
        except ValidationError as e:
            raise DecodeError(INVALID_RESPONSE_MESSAGE, status_code=response.status_code) from e

        if envelope.status != 200:
            raise ServerError(
                envelope.message or "Unsubscribe failed",
                status_code=envelope.status,
            )
        if envelope.data is None:
            raise DecodeError(INVALID_RESPONSE_MESSAGE, status_code=response.status_code)

        logger.info(
            f"Unsubscribed {envelope.data.receiver_email} from {envelope.data.sender_email}"
        )
        return envelope.data

    async def _stream_body(
        self, body: bytes, on_progress: ProgressCallback | None
    ) -> AsyncIterator[bytes]:
        """Yield the request body in chunks, reporting percent sent."""
        total = len(body)
        sent = 0
        for start in range(0, total, self.chunk_size):
            chunk = body[start : start + self.chunk_size]
            yield chunk
            sent += len(chunk)
            if on_progress is not None:
                on_progress(sent * 100 // total)

    async def upload_file(
        self,
        file: SpreadsheetFile,
        campaign: Campaign,
        email_type: EmailType,
        on_progress: ProgressCallback | None = None,
    ) -> UploadEnvelope:
        """Upload a spreadsheet as a multipart form.

        The body is encoded once and streamed in `chunk_size` pieces so that
        `on_progress` receives the percentage of bytes handed to the transport.

        Args:
            file: Spreadsheet to upload
            campaign: Campaign the rows belong to
            email_type: Email type of the rows
            on_progress: Called with 0..100 as the body is sent

        Returns:
            Upload envelope whose `data` is always present

        Raises:
            RequestTimeoutError: If the transport deadline elapsed
            NetworkError: If no response was received
            ServerError: On a non-2xx status or a failed envelope
            DecodeError: On a 2xx response that is not a valid upload envelope
        """
        path = UPLOAD_PATH_TEMPLATE.format(campaign=campaign.value)

        try:
            async with self._client(self.upload_timeout) as client:
                template = client.build_request(
                    "POST",
                    path,
                    data={"email_type": email_type.value},
                    files={"file": (file.name, file.content, file.content_type)},
                )
                body = template.read()
                headers = {
                    "Content-Type": template.headers["Content-Type"],
                    "Content-Length": str(len(body)),
                }
                logger.info(
                    f"Uploading {file.name} ({file.size} bytes) to {path} "
                    f"as {email_type.value}"
                )
                response = await client.post(
                    path, content=self._stream_body(body, on_progress), headers=headers
                )
        except httpx.TimeoutException as e:
            logger.error(f"Upload of {file.name} timed out: {e}")
            raise RequestTimeoutError("Upload timeout. Please try again.") from e
        except httpx.TransportError as e:
            logger.error(f"Upload of {file.name} network error: {e}")
            raise NetworkError("Network error. Please check your connection.") from e

        _raise_for_status(response, f"Upload failed with status {response.status_code}")
        body_json = _json_body(response)

        try:
            envelope = UploadEnvelope.model_validate(body_json)
        except ValidationError as e:
            logger.error(f"Malformed upload payload: {e}")
            raise DecodeError(INVALID_RESPONSE_MESSAGE, status_code=response.status_code) from e

        if envelope.status != 200:
            raise ServerError(
                envelope.message or "Upload failed. Please try again.",
                status_code=envelope.status,
            )
        if envelope.data is None:
            raise DecodeError(INVALID_RESPONSE_MESSAGE, status_code=response.status_code)
        return envelope
