"""Token authentication errors.

Two families of errors live here:

- ``AuthError`` and its subclasses are raised while handling a request. They
  carry the HTTP status and a short description that is safe to return to the
  client. The Flask extension converts them to 401 responses.
- ``KeyResolutionError`` and its subclasses are raised while building the
  middleware. They mean the service is misconfigured and must not start.

Security Note:
    Descriptions are intentionally terse. They name the failure kind, never
    the token contents or the key material.
"""

from __future__ import annotations

from typing import ClassVar


class AuthError(Exception):
    """Base exception for all per-request authentication failures.

    Attributes:
        error_code: HTTP status to respond with.
        description: Client-safe message describing the failure kind.
    """

    error_code: ClassVar[int] = 401
    default_description: ClassVar[str] = "authentication failed"

    def __init__(self, description: str | None = None) -> None:
        self.description = description or self.default_description
        super().__init__(self.description)


class NoToken(AuthError):  # noqa: N818
    """Raised when the request carries no ``Authorization`` header value."""

    default_description = "token not found in request"


class TokenInvalid(AuthError):  # noqa: N818
    """Raised when a token is present but cannot be accepted.

    This occurs when:
    - The header does not start with the configured scheme
    - The header is too short to hold scheme, separator and token
    - The token is not a well-formed JWT
    - Signature verification fails
    - ``nbf``/``iat`` place the token in the future
    """

    default_description = "token invalid"


class BadSigningMethod(TokenInvalid):
    """Raised when the token declares a different algorithm than configured.

    Subclasses ``TokenInvalid`` so that it is always handled as an invalid
    token. It is never a recoverable mismatch.
    """

    default_description = "unexpected signing method"


class TokenExpired(AuthError):  # noqa: N818
    """Raised when the signature is valid but the ``exp`` claim has passed.

    Reported separately from ``TokenInvalid`` so clients know to refresh.
    """

    default_description = "token has expired"


class KeyResolutionError(Exception):
    """Base exception for failures while resolving verification key material."""


class ConfigMissing(KeyResolutionError):  # noqa: N818
    """Raised when the configuration value naming the key is absent."""


class KeyParseError(KeyResolutionError):
    """Raised when the key cannot be read or is not a key of the expected type."""
