"""Protocol definitions for the token authentication middleware.

This module defines structural interfaces using Protocol (PEP 544) for:
- Token verification
- Key resolution
- Token extraction

Any class implementing the required method satisfies the protocol, so test
doubles need no inheritance.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePublicKey
    from cryptography.hazmat.primitives.asymmetric.ed448 import Ed448PublicKey
    from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
    from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey

    from .signing import SigningMethodFamily

# ============================================================================
# Type Aliases
# ============================================================================

Claims: TypeAlias = Mapping[str, Any]
"""Decoded JWT payload of a verified token."""

KeyMaterial: TypeAlias = (
    "bytes | RSAPublicKey | EllipticCurvePublicKey | Ed25519PublicKey | Ed448PublicKey"
)
"""Verification key: raw secret for HMAC, public key object otherwise."""

ViewFunc: TypeAlias = Callable[..., Any]
"""Type alias for Flask view functions."""


# ============================================================================
# Core Protocols
# ============================================================================


class TokenVerifier(Protocol):
    """Protocol for token verification implementations."""

    def verify(self, token: str) -> Claims:
        """Verify a raw token and return its claims.

        Raises:
            BadSigningMethod: Token declares an algorithm other than the configured one
            TokenInvalid: Token is malformed or its signature does not verify
            TokenExpired: Token's exp claim has passed
        """
        ...


class KeySource(Protocol):
    """Protocol for supplying verification key material.

    Called exactly once, when the middleware is built. Implementations may
    read files, call a key-management service, or hand back an in-memory key.
    """

    def resolve(self, family: SigningMethodFamily) -> KeyMaterial:
        """Return the verification key for ``family``.

        Raises:
            ConfigMissing: The configuration naming the key is absent.
            KeyParseError: The key is unreadable or of the wrong type.
        """
        ...


class Extractor(Protocol):
    """Protocol for pulling the raw token out of the current Flask request."""

    def extract(self) -> str:
        """Return the raw token string.

        Raises:
            NoToken: Nothing to extract.
            TokenInvalid: The carrier is present but malformed.
        """
        ...
