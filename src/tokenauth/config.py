"""Middleware options.

Options can be built directly or read from a configuration mapping such as a
Flask ``app.config`` or ``os.environ``:

    TOKENAUTH_SIGN_METHOD   signing method family (HMAC, RSA, RSA-PSS, ECDSA, EdDSA)
    TOKENAUTH_ALGORITHM     JWS alg within the family (default: family canonical)
    TOKENAUTH_AUTH_SCHEME   Authorization header scheme (default: Bearer)
    TOKENAUTH_LEEWAY        clock skew tolerance in seconds (default: 0)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from .extractors import DEFAULT_SCHEME
from .signing import SigningMethodFamily

if TYPE_CHECKING:
    from .protocols import KeySource

CONFIG_PREFIX: Final[str] = "TOKENAUTH_"


@dataclass(frozen=True, slots=True)
class TokenAuthOptions:
    """Configuration for the token authentication middleware.

    Attributes:
        sign_method: Signing method family tokens must be signed with.
            Default: HMAC.

        algorithm: JWS ``alg`` within the family. None selects the family's
            canonical algorithm (HS256, RS256, PS256, ES256, EdDSA). Tokens
            declaring any other ``alg`` are rejected.

        key_source: Supplies the verification key once, at construction.
            None uses ``EnvKeySource`` over the configuration mapping given to
            the middleware.

        auth_scheme: Prefix expected before the token in the
            ``Authorization`` header. Default: "Bearer".

        leeway: Clock skew tolerance in seconds for exp/nbf/iat. Default: 0.

    Example:
        ```python
        options = TokenAuthOptions(
            sign_method=SigningMethodFamily.RSA,
            auth_scheme="Token",
        )
        ```
    """

    sign_method: SigningMethodFamily = SigningMethodFamily.HMAC
    algorithm: str | None = None
    key_source: KeySource | None = None
    auth_scheme: str = DEFAULT_SCHEME
    leeway: int = 0

    @classmethod
    def from_mapping(
        cls,
        config: Mapping[str, Any],
        *,
        key_source: KeySource | None = None,
    ) -> TokenAuthOptions:
        """Build options from ``TOKENAUTH_*`` entries of ``config``.

        Missing or empty entries fall back to the defaults.

        Raises:
            ValueError: If the sign method or leeway cannot be parsed.
        """
        sign_method = config.get(f"{CONFIG_PREFIX}SIGN_METHOD") or SigningMethodFamily.HMAC
        if not isinstance(sign_method, SigningMethodFamily):
            sign_method = SigningMethodFamily.from_name(str(sign_method))

        leeway = config.get(f"{CONFIG_PREFIX}LEEWAY") or 0
        try:
            leeway = int(leeway)
        except (TypeError, ValueError) as e:
            raise ValueError(f"{CONFIG_PREFIX}LEEWAY must be an integer, got {leeway!r}") from e

        return cls(
            sign_method=sign_method,
            algorithm=config.get(f"{CONFIG_PREFIX}ALGORITHM") or None,
            key_source=key_source,
            auth_scheme=config.get(f"{CONFIG_PREFIX}AUTH_SCHEME") or DEFAULT_SCHEME,
            leeway=leeway,
        )
