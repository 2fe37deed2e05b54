"""Credentials resolved by registry authentication.

A credential is owned by the client value that resolved it and is replaced
wholesale on re-authentication, never mutated.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field

from regauth.auth.models.errors import InvalidAuthTokenError
from regauth.transport.base import PendingRequest

# Tokens some registries hand out in place of a real credential.
REJECTED_TOKENS = frozenset({"", "unauthenticated"})


@dataclass(frozen=True)
class BearerAuth:
    """Token issued by a registry token server.

    The token is never empty and never the literal ``"unauthenticated"``.
    """

    token: str = field(repr=False)
    expires_in: int | None = None  # Seconds, as issued
    issued_at: str | None = None  # RFC 3339 timestamp, as issued
    refresh_token: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.token in REJECTED_TOKENS:
            raise InvalidAuthTokenError(self.token)

    def authorization_header(self) -> str:
        return f"Bearer {self.token}"


@dataclass(frozen=True)
class BasicAuth:
    """Username and password for HTTP Basic authentication (RFC 7617)."""

    user: str
    password: str | None = field(default=None, repr=False)

    def authorization_header(self) -> str:
        userpass = f"{self.user}:{self.password or ''}"
        encoded = base64.b64encode(userpass.encode("utf-8")).decode("ascii")
        return f"Basic {encoded}"


Credential = BearerAuth | BasicAuth


def attach(credential: Credential, request: PendingRequest) -> PendingRequest:
    """Return a copy of ``request`` carrying the credential's Authorization header.

    Any Authorization header already on the request is replaced, so
    attaching the same credential twice gives the same request.
    """
    return request.with_header("Authorization", credential.authorization_header())
