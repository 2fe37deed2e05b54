"""Exception hierarchy for registry authentication errors.

Every failure of the negotiation is raised as one of these types so callers
can tell a malformed challenge from a rejected credential or a transport
failure. Nothing here is retried internally.
"""

from __future__ import annotations


class RegistryAuthError(Exception):
    """Base exception for all registry authentication errors."""

    pass


# ----------------------------------------------------------------------
# Challenge parsing
# ----------------------------------------------------------------------


class ParseError(RegistryAuthError):
    """Raised when a WWW-Authenticate header cannot be parsed."""

    pass


class InvalidValueError(ParseError):
    """Raised when the header does not match a known challenge shape.

    Covers headers with no key/value pairs at all, unsupported methods and
    challenges missing a required key such as ``realm``.
    """

    pass


class FieldMethodMissingError(ParseError):
    """Raised when the header carries no authentication method token."""

    pass


class InvalidEncodingError(ParseError):
    """Raised when the raw header bytes are not valid UTF-8."""

    pass


# ----------------------------------------------------------------------
# Credentials
# ----------------------------------------------------------------------


class CredentialError(RegistryAuthError):
    """Raised when credentials are missing or a token is unusable."""

    pass


class NoCredentialsError(CredentialError):
    """Raised when the registry asks for Basic auth and none was supplied."""

    pass


class MissingTokenFieldError(CredentialError):
    """Raised when a token response has neither ``token`` nor ``access_token``."""

    pass


class InvalidAuthTokenError(CredentialError):
    """Raised when the token endpoint hands back an unusable token."""

    def __init__(self, token: str):
        super().__init__(f"Invalid auth token: {token!r}")
        self.token = token


# ----------------------------------------------------------------------
# Transport
# ----------------------------------------------------------------------


class TransportError(RegistryAuthError):
    """Raised when a request cannot be made or gets an unexpected answer."""

    pass


class MalformedUrlError(TransportError):
    """Raised when a request URL is not an absolute http(s) URL."""

    pass


class UnexpectedHttpStatusError(TransportError):
    """Raised when a response status is not one the caller can handle."""

    def __init__(self, status_code: int, url: str | None = None):
        message = f"Unexpected HTTP status {status_code}"
        if url:
            message += f" from {url}"
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class NetworkError(TransportError):
    """Raised when the underlying HTTP client fails to complete a request."""

    pass


# ----------------------------------------------------------------------
# Protocol
# ----------------------------------------------------------------------


class ProtocolError(RegistryAuthError):
    """Raised when the registry or token server breaks the auth protocol."""

    pass


class MissingAuthHeaderError(ProtocolError):
    """Raised when a challenge response carries no authentication header."""

    def __init__(self, header: str = "WWW-Authenticate"):
        super().__init__(f"Missing '{header}' header in registry response")
        self.header = header


class TokenResponseFormatError(ProtocolError):
    """Raised when a token endpoint body is not a valid token document."""

    pass
