"""Registry token service.

Implements the Bearer side of registry authentication: given a Bearer
challenge, request a token from the realm named in the challenge and turn
the response into a BearerAuth credential.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import ValidationError

from regauth.auth.models.challenge import BearerChallenge
from regauth.auth.models.credentials import BasicAuth, BearerAuth, attach
from regauth.auth.models.errors import (
    TokenResponseFormatError,
    UnexpectedHttpStatusError,
)
from regauth.auth.models.tokens import BearerTokenResponse
from regauth.auth.services.security import mask_token
from regauth.transport.base import HttpTransport, PendingRequest

logger = logging.getLogger(__name__)


class BearerTokenService:
    """Requests bearer tokens from registry token servers.

    Every call is a single GET to the token endpoint. Failures are raised to
    the caller and never retried here.
    """

    def __init__(self, transport: HttpTransport):
        """Initialize the token service.

        Args:
            transport: Transport used for the token request
        """
        self._transport = transport

    async def obtain_bearer_token(
        self,
        challenge: BearerChallenge,
        scopes: Sequence[str] = (),
        credentials: tuple[str, str] | None = None,
    ) -> BearerAuth:
        """Request a token for the given scopes.

        Args:
            challenge: Bearer challenge received from the registry
            scopes: Scopes to request, appended verbatim to the token URL
            credentials: Optional (user, password) presented to the token
                server as Basic auth

        Returns:
            BearerAuth: Validated credential holding the unmasked token

        Raises:
            MalformedUrlError: If the token endpoint URL is not usable
            UnexpectedHttpStatusError: If the token server does not answer 200
            TokenResponseFormatError: If the body is not a token document
            MissingTokenFieldError: If the body carries no token
            InvalidAuthTokenError: If the token is empty or "unauthenticated"
            NetworkError: If the request fails
        """
        token_endpoint = challenge.token_endpoint(scopes)
        logger.debug(f"authenticate: token endpoint: {token_endpoint}")

        request = PendingRequest(method="GET", url=token_endpoint)
        if credentials is not None:
            user, password = credentials
            request = attach(BasicAuth(user=user, password=password), request)

        response = await self._transport.send(request)
        logger.debug(f"authenticate: got status {response.status_code}")

        if response.status_code != 200:
            raise UnexpectedHttpStatusError(response.status_code, token_endpoint)

        bearer_auth = self._parse_token_response(response.content).to_bearer_auth()

        logger.debug(f"authenticate: got token: {mask_token(bearer_auth.token)!r}")
        return bearer_auth

    def _parse_token_response(self, content: bytes) -> BearerTokenResponse:
        """Decode the JSON body of a token response.

        Raises:
            TokenResponseFormatError: If the body is not a JSON token object
        """
        try:
            return BearerTokenResponse.model_validate_json(content)
        except ValidationError as e:
            raise TokenResponseFormatError(f"Invalid token response: {e}") from e
