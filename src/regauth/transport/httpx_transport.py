"""httpx-backed transport for registry and token endpoint requests."""

import logging

import httpx

from regauth.auth.models.errors import MalformedUrlError, NetworkError
from regauth.transport.base import HttpTransport, PendingRequest, TransportResponse

logger = logging.getLogger(__name__)


class HttpxTransport(HttpTransport):
    """HTTP transport on top of a single ``httpx.AsyncClient``.

    Redirects are followed, since token servers commonly redirect the
    token request to a regional endpoint.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        verify: bool = True,
        user_agent: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            timeout: HTTP request timeout in seconds
            verify: Verify TLS certificates
            user_agent: Value of the User-Agent header, httpx default if None
            http_client: Preconfigured client to use instead of building one;
                the other arguments are ignored when it is given
        """
        if http_client is not None:
            self._http_client = http_client
            return

        headers = {"User-Agent": user_agent} if user_agent else None
        self._http_client = httpx.AsyncClient(
            timeout=timeout,
            verify=verify,
            headers=headers,
            follow_redirects=True,
        )

    async def send(self, request: PendingRequest) -> TransportResponse:
        logger.debug(f"{request.method} {request.url}")

        try:
            response = await self._http_client.request(
                request.method,
                request.url,
                headers=dict(request.headers),
            )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise MalformedUrlError(f"Invalid URL '{request.url}': {e}") from e
        except httpx.RequestError as e:
            raise NetworkError(
                f"{request.method} {request.url} failed: {e}"
            ) from e

        logger.debug(f"{request.method} {request.url} status: {response.status_code}")
        return TransportResponse(
            status_code=response.status_code,
            headers=self._collect_headers(response),
            content=response.content,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._http_client.aclose()

    def _collect_headers(self, response: httpx.Response) -> dict[str, bytes]:
        """Keep the first raw value of each header, keyed by lowercase name."""
        headers: dict[str, bytes] = {}
        for name, value in response.headers.raw:
            headers.setdefault(name.decode("latin-1").lower(), value)
        return headers
