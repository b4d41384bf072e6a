"""
Bearer token authentication middleware for Flask.

Startup
-------
1. `TokenAuth(options)` picks the signing method family (default HMAC).
2. The family's `KeySource` resolves the verification key once:
   - HMAC: shared secret from `JWT_SECRET`
   - RSA / RSA-PSS / ECDSA / EdDSA: PEM public key at the path in `JWT_PUBLIC_KEY`
3. Any failure raises `ConfigMissing` / `KeyParseError` and the app does not start.

High-level flow (per request)
-----------------------------
1. `TokenAuth.require()` (or the `before_request` hook) runs.
2. `SchemeExtractor` strips `<scheme> ` from the `Authorization` header.
3. `JWTVerifier.verify(token)`:
   - Rejects the token unless its header `alg` equals the configured algorithm
   - Verifies the signature with the resolved key
   - Checks `exp` / `nbf` / `iat`
4. On success: verified claims are stored in `flask.g.claims`.
5. On failure: HTTP 401 with a short description of the failure kind.

Security notes
--------------
- The token never selects the key or the algorithm (no algorithm confusion).
- Expired tokens are reported distinctly from invalid ones; both are 401.

Example usage
-------------

.. code-block:: python

    from flask import Flask, g
    from tokenauth import SigningMethodFamily, TokenAuth, TokenAuthOptions

    app = Flask(__name__)
    app.config["JWT_PUBLIC_KEY"] = "/etc/keys/public.pem"

    auth = TokenAuth(
        TokenAuthOptions(sign_method=SigningMethodFamily.RSA),
        app=app,
    )

    @app.get("/me")
    @auth.require()
    def me():
        return {"sub": g.claims["sub"]}
"""

# Configuration
from .config import TokenAuthOptions

# Errors
from .errors import (
    AuthError,
    BadSigningMethod,
    ConfigMissing,
    KeyParseError,
    KeyResolutionError,
    NoToken,
    TokenExpired,
    TokenInvalid,
)

# Extractors
from .extractors import SchemeExtractor, extract_token

# Flask extension
from .flask_extension import CLAIMS_KEY, TokenAuth, current_claims

# Key sources
from .key_sources import EnvKeySource, JWKSKeySource, StaticKeySource

# Protocols
from .protocols import (
    Claims,
    Extractor,
    KeyMaterial,
    KeySource,
    TokenVerifier,
    ViewFunc,
)

# Signing methods
from .signing import FamilySpec, SigningMethodFamily, family_spec, resolve_algorithm

# Verifier
from .verifier import JWTVerifier

__all__ = [
    # Errors
    "AuthError",
    "BadSigningMethod",
    "ConfigMissing",
    "KeyParseError",
    "KeyResolutionError",
    "NoToken",
    "TokenExpired",
    "TokenInvalid",
    # Protocols
    "Claims",
    "Extractor",
    "KeyMaterial",
    "KeySource",
    "TokenVerifier",
    "ViewFunc",
    # Signing methods
    "FamilySpec",
    "SigningMethodFamily",
    "family_spec",
    "resolve_algorithm",
    # Key sources
    "EnvKeySource",
    "JWKSKeySource",
    "StaticKeySource",
    # Extractors
    "SchemeExtractor",
    "extract_token",
    # Verifier
    "JWTVerifier",
    # Configuration
    "TokenAuthOptions",
    # Flask extension
    "CLAIMS_KEY",
    "TokenAuth",
    "current_claims",
]
