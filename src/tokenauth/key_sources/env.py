"""
Configuration-backed and in-memory key sources.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..signing import family_spec

if TYPE_CHECKING:
    from ..protocols import KeyMaterial
    from ..signing import SigningMethodFamily

logger = logging.getLogger(__name__)


class EnvKeySource:
    """
    Resolves key material from a configuration mapping.

    The loader is chosen by the signing method family alone:

    - HMAC reads the shared secret from ``JWT_SECRET``.
    - RSA, RSA-PSS, ECDSA and EdDSA read a PEM file whose path is in
      ``JWT_PUBLIC_KEY`` and parse it as a public key of the family's type.

    The mapping is passed in rather than read from the process, so the same
    class serves ``os.environ``, a Flask ``app.config`` or a plain dict in
    tests.

    Example
    -------
    source = EnvKeySource(os.environ)
    key = source.resolve(SigningMethodFamily.RSA)
    """

    def __init__(self, config: Mapping[str, Any]) -> None:
        self._config = config

    def resolve(self, family: SigningMethodFamily) -> KeyMaterial:
        logger.debug("Resolving %s key from configuration", family.value)
        return family_spec(family).load_key(self._config)


class StaticKeySource:
    """Hands back a key that is already in memory.

    Useful in tests, or when the application obtained the key itself.
    """

    def __init__(self, key: KeyMaterial) -> None:
        self._key = key

    def resolve(self, family: SigningMethodFamily) -> KeyMaterial:
        return self._key
