"""Flask extension for bearer token authentication.

This module is the integration point between the verifier and Flask
applications. Routes are protected either one by one with the ``require()``
decorator or all at once by mounting the check as a ``before_request`` hook.

Security Model:
1. Resolve the verification key once, when the extension is built
2. Extract the token from the ``Authorization`` header
3. Verify algorithm, signature and time-based claims
4. Store verified claims in ``flask.g.claims`` for the view
5. Convert auth errors to HTTP 401 responses
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from functools import wraps
from typing import TYPE_CHECKING, Any, Final

from flask import Flask, abort, current_app, g, request

from .config import TokenAuthOptions
from .errors import AuthError, KeyResolutionError
from .extractors import SchemeExtractor
from .key_sources import EnvKeySource
from .verifier import JWTVerifier

if TYPE_CHECKING:
    from .protocols import Claims, Extractor, TokenVerifier, ViewFunc

logger = logging.getLogger(__name__)

_EXT_KEY: Final[str] = "tokenauth"
"""Flask extensions registry key for TokenAuth."""

CLAIMS_KEY: Final[str] = "claims"
"""Attribute of ``flask.g`` holding the verified claims."""

_EXEMPT_ATTR: Final[str] = "_tokenauth_exempt"


class TokenAuth:
    """
    Flask glue for bearer token authentication.

    Responsibilities:
    - Resolve the verification key at construction (fail fast)
    - Extract the token from the request
    - Verify it (TokenVerifier)
    - Store verified claims in ``flask.g.claims``
    - Convert domain errors to HTTP responses (abort)

    Construction is the only step that touches the key configuration. If the
    key cannot be resolved the constructor raises, so a half-configured
    extension never exists.

    Usage:
        auth = TokenAuth(TokenAuthOptions(sign_method=SigningMethodFamily.RSA))

        @app.get("/me")
        @auth.require()
        def me():
            return {"sub": g.claims["sub"]}

    Or, protecting every endpoint:
        auth = TokenAuth(app=app)           # options read from app.config
        auth.init_app(app, protect_all=True)
    """

    def __init__(
        self,
        options: TokenAuthOptions | None = None,
        *,
        config: Mapping[str, Any] | None = None,
        extractor: Extractor | None = None,
        app: Flask | None = None,
    ) -> None:
        """Build the extension and resolve its verification key.

        Args:
            options: Middleware options. Defaults to ``TOKENAUTH_*`` values
                read from ``config``.
            config: Mapping holding the key configuration (``JWT_SECRET`` or
                ``JWT_PUBLIC_KEY``) and, when ``options`` is None, the
                ``TOKENAUTH_*`` options. Defaults to ``app.config`` when an
                app is given, else ``os.environ``.
            extractor: Token extractor. Defaults to a ``SchemeExtractor`` for
                the configured auth scheme.
            app: Flask app to register with immediately.

        Raises:
            ConfigMissing: The key configuration is absent.
            KeyParseError: The key could not be read or parsed.
            ValueError: The options are inconsistent (e.g. an algorithm
                outside the configured family).
        """
        if config is None:
            config = app.config if app is not None else os.environ

        self.options = options or TokenAuthOptions.from_mapping(config)
        family = self.options.sign_method
        key_source = self.options.key_source or EnvKeySource(config)

        try:
            key = key_source.resolve(family)
        except KeyResolutionError as e:
            logger.error("Couldn't get %s verification key: %s", family.value, e)
            raise

        self._verifier: TokenVerifier = JWTVerifier(
            family,
            key,
            algorithm=self.options.algorithm,
            leeway=self.options.leeway,
        )
        self._extractor: Extractor = extractor or SchemeExtractor(self.options.auth_scheme)
        logger.info(
            "Token authentication ready (family=%s, scheme=%s)",
            family.value,
            self.options.auth_scheme,
        )

        if app is not None:
            self.init_app(app)

    @property
    def verifier(self) -> TokenVerifier:
        return self._verifier

    def init_app(self, app: Flask, *, protect_all: bool = False) -> None:
        """Register the extension with ``app``.

        Args:
            app (Flask): The Flask application instance.
            protect_all (bool, optional): Check every request in a
                ``before_request`` hook, not only routes decorated with
                ``require()``. Routes marked with ``exempt``, unmatched URLs
                and automatic OPTIONS responses are skipped.
                Defaults to False.
        """
        app.extensions[_EXT_KEY] = self
        if protect_all:
            app.before_request(self._protect_request)

    def authenticate(self) -> Claims:
        """Extract and verify the current request's token.

        Stores the claims in ``flask.g.claims`` and returns them.

        Raises:
            AuthError: Any of NoToken, TokenInvalid, BadSigningMethod, TokenExpired.
        """
        token = self._extractor.extract()
        claims = self._verifier.verify(token)
        setattr(g, CLAIMS_KEY, claims)
        return claims

    def require(self):
        """Decorator protecting a single Flask route.

        Error mapping:
        - ``NoToken``           -> HTTP 401 ("token not found in request")
        - ``TokenInvalid``      -> HTTP 401 ("token invalid")
        - ``BadSigningMethod``  -> HTTP 401 ("unexpected signing method")
        - ``TokenExpired``      -> HTTP 401 ("token has expired")
        - Any other error       -> HTTP 401 ("authentication failed")

        The view runs only after verification succeeds. Its return value and
        any exception it raises pass through untouched.

        Side Effects:
            - Writes verified claims to ``flask.g.claims`` before calling the view.
            - May terminate request handling early via ``flask.abort``.
        """

        def decorator(view: ViewFunc) -> ViewFunc:
            @wraps(view)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                self._check_request()
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def exempt(self, view: ViewFunc) -> ViewFunc:
        """Mark a view as public when the extension protects every endpoint."""
        setattr(view, _EXEMPT_ATTR, True)
        return view

    def _protect_request(self) -> None:
        # Unmatched URLs and disallowed methods keep their 404/405
        if request.endpoint is None:
            return
        rule = request.url_rule
        if (
            request.method == "OPTIONS"
            and rule is not None
            and rule.provide_automatic_options
        ):
            return
        view = current_app.view_functions.get(request.endpoint)
        if view is not None and getattr(view, _EXEMPT_ATTR, False):
            return
        self._check_request()

    def _check_request(self) -> None:
        try:
            self.authenticate()
        except AuthError as e:
            logger.info("Rejected %s %s: %s", request.method, request.path, e.description)
            abort(e.error_code, description=e.description)
        except Exception:
            logger.exception("Unexpected error while authenticating %s", request.path)
            abort(401, description="authentication failed")


def current_claims() -> Claims:
    """Return the verified claims of the current request.

    Raises:
        RuntimeError: If the request has not been authenticated.
    """
    claims = g.get(CLAIMS_KEY)
    if claims is None:
        raise RuntimeError("no verified claims for the current request")
    return claims
