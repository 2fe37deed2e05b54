"""Tests for the httpx-backed transport."""

import httpx
import pytest

from regauth.auth.models.errors import MalformedUrlError, NetworkError
from regauth.transport.base import PendingRequest
from regauth.transport.httpx_transport import HttpxTransport


class TestHttpxTransport:
    def setup_method(self):
        self.seen: list[httpx.Request] = []
        self.transport: HttpxTransport | None = None

    @pytest.fixture(autouse=True)
    async def close_transport(self):
        yield
        if self.transport is not None:
            await self.transport.close()

    def use_handler(self, handler):
        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.seen.append(request)
            return handler(request)

        self.transport = HttpxTransport(
            http_client=httpx.AsyncClient(
                transport=httpx.MockTransport(recording_handler),
                follow_redirects=True,
            )
        )

    async def test_injected_client_is_used_and_closed(self):
        # Arrange
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(204))
        )
        self.transport = HttpxTransport(http_client=client)

        # Act
        response = await self.transport.send(
            PendingRequest(method="GET", url="https://registry.example.com/v2/")
        )
        await self.transport.close()

        # Assert
        assert response.status_code == 204
        assert client.is_closed

    async def test_send_returns_status_headers_and_body(self):
        # Arrange
        self.use_handler(
            lambda request: httpx.Response(
                401,
                headers={"WWW-Authenticate": 'Bearer realm="https://r/token"'},
                content=b'{"errors": []}',
            )
        )

        # Act
        response = await self.transport.send(
            PendingRequest(method="GET", url="https://registry.example.com/v2/")
        )

        # Assert
        assert response.status_code == 401
        assert response.header("WWW-Authenticate") == b'Bearer realm="https://r/token"'
        assert response.header("www-authenticate") == b'Bearer realm="https://r/token"'
        assert response.content == b'{"errors": []}'

    async def test_request_headers_are_sent(self):
        # Arrange
        self.use_handler(lambda request: httpx.Response(200))

        # Act
        await self.transport.send(
            PendingRequest(
                method="GET",
                url="https://registry.example.com/v2/",
                headers={"Authorization": "Bearer tok"},
            )
        )

        # Assert
        assert self.seen[0].headers["Authorization"] == "Bearer tok"
        assert self.seen[0].method == "GET"

    async def test_first_value_of_repeated_header_is_kept(self):
        # Arrange
        self.use_handler(
            lambda request: httpx.Response(
                401,
                headers=[
                    ("WWW-Authenticate", 'Bearer realm="https://first/token"'),
                    ("WWW-Authenticate", 'Basic realm="second"'),
                ],
            )
        )

        # Act
        response = await self.transport.send(
            PendingRequest(method="GET", url="https://registry.example.com/v2/")
        )

        # Assert
        assert response.header("WWW-Authenticate") == b'Bearer realm="https://first/token"'

    async def test_missing_header_is_none(self):
        # Arrange
        self.use_handler(lambda request: httpx.Response(200))

        # Act
        response = await self.transport.send(
            PendingRequest(method="GET", url="https://registry.example.com/v2/")
        )

        # Assert
        assert response.header("WWW-Authenticate") is None

    async def test_request_error_becomes_network_error(self):
        # Arrange
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        self.use_handler(refuse)

        # Act & Assert
        with pytest.raises(NetworkError) as exc_info:
            await self.transport.send(
                PendingRequest(method="GET", url="https://registry.example.com/v2/")
            )
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_invalid_url_becomes_malformed_url_error(self):
        # Arrange
        self.use_handler(lambda request: httpx.Response(200))

        # Act & Assert
        with pytest.raises(MalformedUrlError):
            await self.transport.send(
                PendingRequest(
                    method="GET", url="https://registry.example.com:notaport/v2/"
                )
            )

    async def test_context_manager_closes_client(self):
        # Arrange
        self.use_handler(lambda request: httpx.Response(200))

        # Act
        async with self.transport as transport:
            assert transport is self.transport

        # Assert
        assert self.transport._http_client.is_closed
