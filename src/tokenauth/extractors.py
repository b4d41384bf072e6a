"""Token extraction from the ``Authorization`` header.

The header value is expected to look like::

    Authorization: <scheme><separator><token>

where ``<scheme>`` is configurable (default ``"Bearer"``) and
``<separator>`` is exactly one character, normally a space.

Matching is strict:
- The scheme comparison is case-sensitive.
- Exactly one separator character is consumed. Nothing else is trimmed.
- A header holding only the scheme and separator is invalid, not an empty token.
"""

from __future__ import annotations

from typing import Final

from flask import request

from .errors import NoToken, TokenInvalid

DEFAULT_SCHEME: Final[str] = "Bearer"
AUTHORIZATION_HEADER: Final[str] = "Authorization"


def extract_token(header_value: str, scheme: str = DEFAULT_SCHEME) -> str:
    """Strip ``scheme`` and its separator from ``header_value``.

    Args:
        header_value: Raw ``Authorization`` header value.
        scheme: Expected scheme prefix.

    Returns:
        The token string following the scheme and separator.

    Raises:
        NoToken: If ``header_value`` is empty.
        TokenInvalid: If the prefix differs from ``scheme`` or the value is
            too short to hold scheme, separator and at least one token character.
    """
    if not header_value:
        raise NoToken()

    n = len(scheme)
    if len(header_value) > n + 1 and header_value[:n] == scheme:
        return header_value[n + 1 :]

    raise TokenInvalid()


class SchemeExtractor:
    """Extracts the token from the current request's ``Authorization`` header.

    Example:
        ```python
        extractor = SchemeExtractor("Token")
        auth = TokenAuth(options, extractor=extractor)
        ```

    Attributes:
        scheme: Expected scheme prefix.
    """

    def __init__(self, scheme: str = DEFAULT_SCHEME) -> None:
        """Initialize the extractor.

        Raises:
            ValueError: If scheme is empty.
        """
        if not scheme:
            raise ValueError("scheme cannot be empty")
        self.scheme = scheme

    def extract(self) -> str:
        """Extract the token from the active Flask request.

        Raises:
            NoToken: If the header is missing or empty.
            TokenInvalid: If the header does not carry a ``<scheme> <token>`` value.
        """
        return extract_token(request.headers.get(AUTHORIZATION_HEADER, ""), self.scheme)
