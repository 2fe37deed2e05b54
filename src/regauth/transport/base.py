from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import TracebackType
from typing import Self


@dataclass(frozen=True)
class PendingRequest:
    """An outgoing HTTP request that has not been sent yet.

    Immutable so credentials can be attached without touching the
    original request.
    """

    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)

    def with_header(self, name: str, value: str) -> "PendingRequest":
        """Return a copy with ``name`` set to ``value``.

        Header names are matched case-insensitively, so an existing header
        of the same name is replaced rather than duplicated.
        """
        headers = {k: v for k, v in self.headers.items() if k.lower() != name.lower()}
        headers[name] = value
        return replace(self, headers=headers)


@dataclass(frozen=True)
class TransportResponse:
    """Status, headers and body of a completed HTTP request.

    Header names are lowercase and values are the raw bytes sent by the
    server. When a header is repeated only the first value is kept.
    """

    status_code: int
    headers: Mapping[str, bytes] = field(default_factory=dict)
    content: bytes = b""

    def header(self, name: str) -> bytes | None:
        return self.headers.get(name.lower())


class HttpTransport(ABC):
    """Abstract HTTP transport used for registry and token requests.

    Handles the mechanics of issuing a request and reading the response
    without any knowledge of registry authentication. TLS, timeouts and
    connection reuse are the transport's business.
    """

    @abstractmethod
    async def send(self, request: PendingRequest) -> TransportResponse:
        """Send a request and return the complete response.

        Args:
            request: The request to send

        Raises:
            MalformedUrlError: If the request URL cannot be used
            NetworkError: If the request could not be completed
        """

    @abstractmethod
    async def close(self) -> None:
        """Release any connections held by the transport."""

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
        return None
