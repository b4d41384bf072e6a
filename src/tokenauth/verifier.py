"""JWT verification using PyJWT.

The verifier is bound to one signing method family, one algorithm within it,
and one resolved key. For every token it:

1. Reads the unverified header
2. Rejects the token unless its ``alg`` equals the configured algorithm
3. Verifies the signature with the configured key
4. Checks ``exp``, ``nbf`` and ``iat``
5. Returns the decoded claims

Step 2 runs before any cryptography. The token's header never chooses the key
or the algorithm; it can only agree with the configuration or be rejected.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import jwt

from .errors import BadSigningMethod, TokenExpired, TokenInvalid
from .signing import SigningMethodFamily, resolve_algorithm

if TYPE_CHECKING:
    from .protocols import Claims, KeyMaterial

logger = logging.getLogger(__name__)


class JWTVerifier:
    """Verifies tokens against a fixed family, algorithm and key.

    Implements the TokenVerifier protocol.

    Thread Safety:
        Instances hold only immutable state and can be shared across threads.

    Example:
        ```python
        verifier = JWTVerifier(SigningMethodFamily.HMAC, b"secret")

        try:
            claims = verifier.verify(raw_token)
        except TokenExpired:
            ...  # ask the client to refresh
        except TokenInvalid:
            ...  # reject
        ```

    Attributes:
        family: Configured signing method family.
        algorithm: JWS ``alg`` every token must declare.
    """

    def __init__(
        self,
        family: SigningMethodFamily,
        key: KeyMaterial,
        algorithm: str | None = None,
        leeway: int = 0,
    ) -> None:
        """Initialize the verifier.

        Args:
            family: Signing method family the key belongs to.
            key: Resolved verification key.
            algorithm: JWS ``alg`` within ``family``. Defaults to the family's
                canonical algorithm.
            leeway: Clock skew tolerance in seconds for time-based claims.

        Raises:
            ValueError: If ``algorithm`` is not part of ``family`` or
                ``leeway`` is negative.
        """
        if leeway < 0:
            raise ValueError(f"leeway must not be negative, got {leeway}")
        self.family = family
        self.algorithm = resolve_algorithm(family, algorithm)
        self._key = key
        self._leeway = leeway

    def verify(self, token: str) -> Claims:
        """Verify ``token`` and return its claims.

        Raises:
            TokenInvalid: Token is malformed, its signature fails, or ``nbf``/``iat``
                lie in the future.
            BadSigningMethod: Declared ``alg`` differs from the configured algorithm.
            TokenExpired: ``exp`` has passed (accounting for leeway).
        """
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as e:
            raise TokenInvalid() from e

        declared = header.get("alg")
        if declared != self.algorithm:
            logger.warning(
                "Rejected token declaring alg=%r, expected %r", declared, self.algorithm
            )
            raise BadSigningMethod()

        try:
            return jwt.decode(
                token,
                self._key,
                algorithms=[self.algorithm],
                leeway=self._leeway,
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired() from e
        except (jwt.InvalidKeyError, TypeError) as e:
            # The configured key does not fit the configured algorithm.
            logger.error("Verification key rejected for %s: %s", self.algorithm, e)
            raise TokenInvalid() from e
        except jwt.InvalidTokenError as e:
            logger.info("Token failed verification: %s", e)
            raise TokenInvalid() from e
