"""
Async HTTP Transport for gritty provider adapters.

Handles async HTTP communication with a provider REST API and translates error
responses into the canonical gritty error taxonomy.
"""

import time
from typing import Any

import httpx

from gritty.exceptions import DeserializationError, GrittyError, error_from_status
from gritty.logging import log_http_request, log_http_response


class AsyncHTTPTransport:
    """
    Async HTTP transport shared by every request of one adapter.

    Handles:
    - Authentication headers or HTTP basic auth
    - JSON encoding/decoding
    - Error response parsing into typed exceptions

    The underlying ``httpx.AsyncClient`` is safe for concurrent use, so the
    fan-out tasks of a listing share one transport without locking.
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        auth: httpx.Auth | tuple[str, str] | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            base_url: API root (e.g., "https://api.github.com")
            headers: Extra headers sent with every request (auth tokens, Accept, ...)
            auth: Optional httpx auth (HTTP basic for username/password remotes)
            timeout: Request timeout in seconds (default: httpx default)
            transport: Optional httpx transport, used to plug in fakes
        """
        self.base_url = base_url.rstrip("/")

        client_kwargs: dict[str, Any] = {
            "base_url": self.base_url,
            "headers": {"Accept": "application/json", **(headers or {})},
            "auth": auth,
            "transport": transport,
        }
        if timeout is not None:
            client_kwargs["timeout"] = timeout

        self._client = httpx.AsyncClient(**client_kwargs)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: API path relative to the base URL
            params: Query parameters
            body: JSON request body (for POST/PUT/PATCH)

        Returns:
            Parsed JSON response, or None when the response has no body

        Raises:
            GrittyError: On transport failures and error responses
        """
        log_http_request(method, f"{self.base_url}{path}", dict(self._client.headers), body)

        started = time.perf_counter()
        try:
            response = await self._client.request(method, path, params=params, json=body)
        except httpx.RequestError as e:
            raise GrittyError(f"{method} {path} failed: {e}") from e

        log_http_response(
            response.status_code,
            str(response.url),
            (time.perf_counter() - started) * 1000.0,
        )

        if response.status_code >= 400:
            raise self._parse_error_response(response)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise DeserializationError(
                f"Invalid JSON in response to {method} {path}: {e}",
                response.status_code,
            ) from e

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: dict[str, Any] | None = None) -> Any:
        return await self.request("POST", path, body=body)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    def _parse_error_response(self, response: httpx.Response) -> GrittyError:
        """
        Parse an error response into a typed exception.

        GitHub, GitLab and Gitea all report a ``message`` field; GitLab OAuth
        failures use ``error``/``error_description`` instead.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate GrittyError subclass carrying the status code
        """
        try:
            data = response.json()
        except ValueError:
            data = {}

        message = None
        if isinstance(data, dict):
            message = (
                data.get("message")
                or data.get("error_description")
                or data.get("error")
            )
        if not message:
            message = response.reason_phrase or f"HTTP {response.status_code}"

        return error_from_status(response.status_code, str(message))
