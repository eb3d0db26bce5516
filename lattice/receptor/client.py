"""
Receptor HTTP Client.

Async client for the receptor's desired/actual LRP API. Consumers depend on
the narrow ReceptorClient protocol; HTTPReceptorClient is the httpx-backed
implementation used by the CLI.

Error contract:
    - Responses with status >= 400 raise ReceptorError, carrying the
      receptor's error name and message.
    - Transport failures raise httpx.HTTPError unchanged.
    No call is retried.
"""

from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from lattice.core.exceptions import ReceptorError
from lattice.core.logging import get_logger, log_with_source
from lattice.receptor.models import (
    ActualLRPResponse,
    DesiredLRPCreateRequest,
    DesiredLRPResponse,
    DesiredLRPUpdateRequest,
)

logger = get_logger(__name__)


class ReceptorClient(Protocol):
    """The subset of the receptor API the CLI relies on."""

    async def desired_lrps(self) -> list[DesiredLRPResponse]: ...

    async def create_desired_lrp(self, request: DesiredLRPCreateRequest) -> None: ...

    async def update_desired_lrp(self, process_guid: str, request: DesiredLRPUpdateRequest) -> None: ...

    async def delete_desired_lrp(self, process_guid: str) -> None: ...

    async def actual_lrps_by_process_guid(self, process_guid: str) -> list[ActualLRPResponse]: ...


def _error_from_response(response: httpx.Response) -> ReceptorError:
    """Build a ReceptorError from the receptor's {"name", "message"} error body."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("message"):
        return ReceptorError(
            body["message"],
            error_type=body.get("name", "UnknownError"),
            status_code=response.status_code,
        )

    text = response.text.strip() or response.reason_phrase
    return ReceptorError(
        f"Receptor responded with {response.status_code}: {text}",
        status_code=response.status_code,
    )


class HTTPReceptorClient:
    """
    HTTP client for the receptor API.

    Features:
    - Lazily created httpx.AsyncClient, optional basic auth
    - Structured logging of requests/responses
    - Receptor error bodies mapped onto ReceptorError

    Usage:
        client = HTTPReceptorClient("http://receptor.example.com")
        lrps = await client.desired_lrps()
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        auth: tuple[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the receptor client.

        Args:
            base_url: Receptor base URL.
            timeout: Request timeout in seconds.
            auth: Optional (username, password) for basic auth.
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._auth = auth
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                auth=self._auth,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Make a request to the receptor.

        Raises:
            ReceptorError: On an error status
            httpx.HTTPError: On transport failure
        """
        client = await self._get_client()

        log_with_source(logger, "receptor", "debug", "Receptor request", method=method, path=path)

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "receptor",
                "error",
                "Receptor request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise

        log_with_source(
            logger,
            "receptor",
            "debug",
            "Receptor response",
            method=method,
            path=path,
            status_code=response.status_code,
        )

        if response.status_code >= 400:
            error = _error_from_response(response)
            log_with_source(
                logger,
                "receptor",
                "warning",
                "Receptor returned an error",
                method=method,
                path=path,
                status_code=response.status_code,
                error_type=error.error_type,
            )
            raise error

        return response

    @staticmethod
    def _parse_list(response: httpx.Response, model: type) -> list[Any]:
        try:
            return [model.model_validate(item) for item in response.json() or []]
        except (ValueError, ValidationError) as e:
            raise ReceptorError(
                f"Invalid response from receptor: {e}",
                error_type="InvalidResponse",
                status_code=response.status_code,
            ) from e

    async def desired_lrps(self) -> list[DesiredLRPResponse]:
        """List every desired LRP."""
        response = await self._request("GET", "/v1/desired_lrps")
        return self._parse_list(response, DesiredLRPResponse)

    async def create_desired_lrp(self, request: DesiredLRPCreateRequest) -> None:
        """Desire a new LRP."""
        await self._request(
            "POST",
            "/v1/desired_lrps",
            json=request.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    async def update_desired_lrp(self, process_guid: str, request: DesiredLRPUpdateRequest) -> None:
        """Apply a partial update. Only fields set on the request are sent."""
        await self._request(
            "PUT",
            f"/v1/desired_lrps/{process_guid}",
            json=request.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    async def delete_desired_lrp(self, process_guid: str) -> None:
        """Delete a desired LRP."""
        await self._request("DELETE", f"/v1/desired_lrps/{process_guid}")

    async def actual_lrps_by_process_guid(self, process_guid: str) -> list[ActualLRPResponse]:
        """List the actual LRP instances of one process."""
        response = await self._request("GET", f"/v1/actual_lrps/{process_guid}")
        return self._parse_list(response, ActualLRPResponse)
