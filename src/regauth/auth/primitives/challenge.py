"""WWW-Authenticate header parsing for registry challenges.

Registries answer an unauthenticated request with a header shaped like::

    Bearer realm="https://auth.example.com/token",service="registry",scope="..."

The grammar is loose: a capitalized method followed by ``key="value"``
pairs in any order. Rather than a full RFC 7235 parser, the header is
tokenized with a regular expression and the pairs are then mapped onto one
of the supported challenge types.
"""

from __future__ import annotations

import logging
import re

from regauth.auth.models.challenge import CHALLENGE_TYPES, Challenge
from regauth.auth.models.errors import (
    FieldMethodMissingError,
    InvalidEncodingError,
    InvalidValueError,
)

logger = logging.getLogger(__name__)

# Each match holds one key/value pair. Only the first match carries the method.
CHALLENGE_PATTERN = re.compile(
    r"""
    \s*
    ((?P<method>[A-Z][a-z]+)\s*)?
    (
        \s*
            (?P<key>[a-z_]+)
        \s*
            =
        \s*
            "(?P<value>[^"]+)"
        \s*
    )
    """,
    re.VERBOSE,
)


def parse_www_authenticate(header_value: bytes | str) -> Challenge:
    """Parse a WWW-Authenticate header value into a typed challenge.

    Keys the challenge type does not know are ignored and logged. A key
    that appears more than once keeps its last value. When the header holds
    several challenges only the first one is parsed.

    Args:
        header_value: Raw header content as received from the registry

    Returns:
        BearerChallenge or BasicChallenge

    Raises:
        InvalidEncodingError: If the bytes are not valid UTF-8
        FieldMethodMissingError: If no method precedes the first pair
        InvalidValueError: If the header matches no supported challenge
    """
    header = _decode(header_value)

    matches = list(CHALLENGE_PATTERN.finditer(header))
    if not matches:
        raise InvalidValueError(
            f"WWW-Authenticate header has no key=\"value\" pairs: {header!r}"
        )

    method = matches[0].group("method")
    if method is None:
        raise FieldMethodMissingError(
            f"WWW-Authenticate header has no method: {header!r}"
        )

    # A later method token starts another challenge; only the first is used.
    params: dict[str, str] = {}
    for index, match in enumerate(matches):
        if index > 0 and match.group("method") is not None:
            logger.debug(
                f"Ignoring further challenge '{match.group('method')}' in header"
            )
            break
        params[match.group("key")] = match.group("value")

    challenge_type = CHALLENGE_TYPES.get(method)
    if challenge_type is None:
        raise InvalidValueError(f"Unsupported authentication method '{method}'")

    challenge = challenge_type.from_params(params)

    unsupported_keys = sorted(set(params) - challenge_type.KNOWN_KEYS)
    if unsupported_keys:
        logger.warning(
            f"Skipping unrecognized keys in authentication header: {unsupported_keys}"
        )

    return challenge


def _decode(header_value: bytes | str) -> str:
    if isinstance(header_value, str):
        return header_value
    try:
        return header_value.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEncodingError(
            f"WWW-Authenticate header is not valid UTF-8: {e}"
        ) from e
