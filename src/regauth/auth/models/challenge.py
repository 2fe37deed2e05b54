"""Typed WWW-Authenticate challenges.

A challenge is built per discovery request, consumed immediately and never
stored. Each variant has a validating constructor that maps the loose
key/value pairs of a parsed header onto its fields.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from urllib.parse import urlparse

from regauth.auth.models.errors import InvalidValueError, MalformedUrlError


@dataclass(frozen=True)
class BasicChallenge:
    """Challenge for HTTP Basic authentication (RFC 7617).

    The realm is informational only.
    """

    realm: str

    KNOWN_KEYS = frozenset({"realm"})

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> BasicChallenge:
        if "realm" not in params:
            raise InvalidValueError("Basic challenge is missing required 'realm'")
        return cls(realm=params["realm"])


@dataclass(frozen=True)
class BearerChallenge:
    """Challenge for registry token authentication.

    The realm is the URL of the token server; service and scope are passed
    back to it when requesting a token.
    """

    realm: str
    service: str | None = None
    scope: str | None = None

    KNOWN_KEYS = frozenset({"realm", "service", "scope"})

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> BearerChallenge:
        if "realm" not in params:
            raise InvalidValueError("Bearer challenge is missing required 'realm'")
        return cls(
            realm=params["realm"],
            service=params.get("service"),
            scope=params.get("scope"),
        )

    def token_endpoint(self, scopes: Sequence[str] = ()) -> str:
        """Build the token request URL for the given scopes.

        Scopes are appended verbatim, so callers must encode them
        beforehand.

        Args:
            scopes: Ordered scopes to request, e.g. ``repository:foo:pull``

        Returns:
            ``<realm>[?service=<service>][{?|&}scope=<scope>]*``

        Raises:
            MalformedUrlError: If the result is not an absolute http(s) URL
        """
        query = []
        if self.service:
            query.append(f"service={self.service}")
        query.extend(f"scope={scope}" for scope in scopes)

        url = self.realm
        if query:
            url += "?" + "&".join(query)

        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise MalformedUrlError(
                f"Token endpoint '{url}' is not an absolute http(s) URL"
            )
        return url


Challenge = BearerChallenge | BasicChallenge

CHALLENGE_TYPES: dict[str, type[BearerChallenge] | type[BasicChallenge]] = {
    "Bearer": BearerChallenge,
    "Basic": BasicChallenge,
}
