"""Helpers for keeping secrets out of diagnostics."""

from __future__ import annotations


def mask_token(token: str) -> str:
    """Mask a token for logging, keeping at most its first and last characters.

    The interior span ``[min(1, n - 1), max(n - 1, 1))`` is replaced with the
    same number of ``*``. Tokens of two characters are left as they are and
    a single character is masked entirely.

    Args:
        token: The secret token

    Returns:
        Masked token of the same length
    """
    length = len(token)
    if length == 0:
        return token

    mask_start = min(1, length - 1)
    mask_end = max(length - 1, 1)
    return token[:mask_start] + "*" * (mask_end - mask_start) + token[mask_end:]
