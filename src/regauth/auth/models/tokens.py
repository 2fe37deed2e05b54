"""Token endpoint response model.

The registry token protocol names the token ``token``, and also accepts
``access_token`` for OAuth 2.0 compatibility. At least one must be present;
when both are present they should match, and which one a client uses is
otherwise undefined. Decoding therefore happens in two steps: a permissive
model capturing both spellings, then a factory that enforces the rules.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from regauth.auth.models.credentials import BearerAuth
from regauth.auth.models.errors import MissingTokenFieldError

logger = logging.getLogger(__name__)


class BearerTokenResponse(BaseModel):
    """Raw token endpoint response with both token spellings."""

    model_config = ConfigDict(extra="ignore")

    token: str | None = None
    access_token: str | None = None
    expires_in: int | None = Field(default=None, ge=0, le=2**32 - 1)
    issued_at: str | None = None
    refresh_token: str | None = None

    def resolve_token(self) -> str:
        """Pick the token, preferring ``token`` over ``access_token``.

        Raises:
            MissingTokenFieldError: If neither field is present
        """
        if self.token is not None:
            if self.access_token is not None and self.access_token != self.token:
                logger.warning(
                    "Token response has differing 'token' and 'access_token', "
                    "using 'token'"
                )
            return self.token

        if self.access_token is not None:
            return self.access_token

        raise MissingTokenFieldError(
            "Token response has neither 'token' nor 'access_token'"
        )

    def to_bearer_auth(self) -> BearerAuth:
        """Convert to a validated BearerAuth credential.

        Raises:
            MissingTokenFieldError: If neither token field is present
            InvalidAuthTokenError: If the token is empty or "unauthenticated"
        """
        return BearerAuth(
            token=self.resolve_token(),
            expires_in=self.expires_in,
            issued_at=self.issued_at,
            refresh_token=self.refresh_token,
        )
