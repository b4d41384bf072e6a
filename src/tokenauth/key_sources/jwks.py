"""
JWKS key source.

Fetches one verification key, selected by ``kid``, from a JWKS endpoint.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jwt import PyJWKClient
from jwt.exceptions import PyJWKClientError, PyJWKError, PyJWKSetError

from ..errors import KeyParseError

if TYPE_CHECKING:
    from ..protocols import KeyMaterial
    from ..signing import SigningMethodFamily

logger = logging.getLogger(__name__)


class JWKSKeySource:
    """
    Resolves the verification key from a JWKS endpoint.

    The key is fetched once, when the middleware is built, like every other
    key source. Rotating keys therefore means rebuilding the middleware.

    Parameters
    ----------
    jwks_url : str
        Full URL of the JWKS document, e.g.
        "https://tenant.example.com/.well-known/jwks.json".

    kid : str
        Key ID of the signing key to use.

    timeout : int
        Seconds to wait for the endpoint.

    Example
    -------
    source = JWKSKeySource("https://tenant.example.com/.well-known/jwks.json", kid="k1")
    auth = TokenAuth(TokenAuthOptions(sign_method=SigningMethodFamily.RSA, key_source=source))
    """

    def __init__(self, jwks_url: str, kid: str, timeout: int = 30) -> None:
        if not kid:
            raise ValueError("kid cannot be empty")
        self._url = jwks_url
        self._kid = kid
        self._client = PyJWKClient(jwks_url, cache_jwk_set=False, timeout=timeout)

    def resolve(self, family: SigningMethodFamily) -> KeyMaterial:
        try:
            jwk = self._client.get_signing_key(self._kid)
        except (PyJWKClientError, PyJWKSetError, PyJWKError) as e:
            raise KeyParseError(
                f"unable to resolve key {self._kid!r} from {self._url}: {e}"
            ) from e

        logger.info("Resolved %s key %r from %s", family.value, self._kid, self._url)
        return jwk.key
