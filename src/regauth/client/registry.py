"""Registry client authentication.

Negotiates credentials with a Docker Registry V2 / OCI distribution
registry. The client is an immutable value: authenticating returns a new
client carrying the resolved credential and leaves the original untouched,
so clients can be shared between tasks without locking.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from regauth.auth.models.challenge import BasicChallenge
from regauth.auth.models.credentials import BasicAuth, Credential, attach
from regauth.auth.models.errors import (
    MissingAuthHeaderError,
    NoCredentialsError,
    UnexpectedHttpStatusError,
)
from regauth.auth.primitives.challenge import parse_www_authenticate
from regauth.auth.services.tokens import BearerTokenService
from regauth.client.config import RegistryConfig
from regauth.transport.base import HttpTransport, PendingRequest, TransportResponse
from regauth.transport.httpx_transport import HttpxTransport

logger = logging.getLogger(__name__)

# API version check endpoint; answers 401 with a challenge when auth is required.
DISCOVERY_PATH = "/v2/"


@dataclass(frozen=True)
class RegistryClient:
    """Authentication state for one registry.

    Attributes:
        base_url: Registry base URL, e.g. ``https://registry.example.com``
        transport: Transport used for every request
        credentials: Optional (user, password) supplied by the caller
        auth: Credential resolved by :meth:`authenticate`, if any
    """

    base_url: str
    transport: HttpTransport
    credentials: tuple[str, str] | None = field(default=None, repr=False)
    auth: Credential | None = None

    @classmethod
    def from_config(
        cls, config: RegistryConfig, transport: HttpTransport | None = None
    ) -> RegistryClient:
        """Build an unauthenticated client from settings.

        Args:
            config: Registry settings
            transport: Transport to use; an HttpxTransport honouring the
                config's timeout, TLS and User-Agent settings if None
        """
        if transport is None:
            transport = HttpxTransport(
                timeout=config.timeout,
                verify=not config.accept_invalid_certs,
                user_agent=config.user_agent,
            )
        return cls(
            base_url=config.base_url.rstrip("/"),
            transport=transport,
            credentials=config.credentials,
        )

    def with_credentials(self, user: str, password: str) -> RegistryClient:
        """Return a copy with new caller credentials and no resolved credential."""
        return replace(self, credentials=(user, password), auth=None)

    def build_request(self, method: str, path: str) -> PendingRequest:
        """Build a request against the registry with the current credential attached."""
        request = PendingRequest(method=method, url=f"{self.base_url}{path}")
        if self.auth is not None:
            request = attach(self.auth, request)
        return request

    async def authenticate(self, scopes: Sequence[str] = ()) -> RegistryClient:
        """Negotiate a credential with the registry.

        Queries the discovery endpoint without credentials and answers its challenge.
        For Bearer challenges the returned client is authorized for the
        requested scopes; the caller credentials, if any, are presented to
        the token server rather than the registry.

        Args:
            scopes: Scopes to request, e.g. ``["repository:library/alpine:pull"]``

        Returns:
            A new client carrying the resolved credential

        Raises:
            MissingAuthHeaderError: If a non-200 discovery response has no challenge
            NoCredentialsError: If Basic auth is required and no credentials are set
            ParseError: If the challenge header is malformed
            TransportError: If a request fails or gets an unexpected status
            CredentialError: If the token server returns no usable token
        """
        # Never present a previously resolved credential to the discovery endpoint.
        anonymous = replace(self, auth=None)
        response = await anonymous._send_discovery_request()

        header = response.header("WWW-Authenticate")
        if header is None:
            if response.status_code == 200:
                logger.info(f"{self.base_url} allows anonymous access")
                return anonymous
            raise MissingAuthHeaderError("WWW-Authenticate")

        challenge = parse_www_authenticate(header)
        logger.debug(f"authenticate: challenge: {challenge}")

        if isinstance(challenge, BasicChallenge):
            if self.credentials is None:
                raise NoCredentialsError(
                    f"{self.base_url} requires Basic auth but no credentials were given"
                )
            user, password = self.credentials
            auth: Credential = BasicAuth(user=user, password=password)
        else:
            auth = await BearerTokenService(self.transport).obtain_bearer_token(
                challenge, scopes, self.credentials
            )

        logger.info(f"authenticate: login to {self.base_url} succeeded")
        return replace(self, auth=auth)

    async def is_authenticated(self) -> bool:
        """Check whether the client can make requests to the registry.

        Success may come from valid credentials or from anonymous access.

        Returns:
            True on HTTP 200, False on HTTP 401

        Raises:
            UnexpectedHttpStatusError: On any other status
            TransportError: If the request fails
        """
        response = await self._send_discovery_request()
        if response.status_code == 200:
            return True
        if response.status_code == 401:
            return False
        raise UnexpectedHttpStatusError(
            response.status_code, f"{self.base_url}{DISCOVERY_PATH}"
        )

    async def close(self) -> None:
        """Close the underlying transport."""
        await self.transport.close()

    async def _send_discovery_request(self) -> TransportResponse:
        request = self.build_request("GET", DISCOVERY_PATH)
        response = await self.transport.send(request)
        logger.debug(f"GET '{request.url}' status: {response.status_code}")
        return response
