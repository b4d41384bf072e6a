"""Loading verification keys from configuration.

Each ``load_*`` function takes the configuration mapping explicitly and
returns the key material for one signing-method family. The signing method
table in ``tokenauth.signing`` decides which loader runs.

Configuration values:
    JWT_SECRET: shared secret for HMAC.
    JWT_PUBLIC_KEY: path to a PEM-encoded public key for every other family.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePublicKey
from cryptography.hazmat.primitives.asymmetric.ed448 import Ed448PublicKey
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from cryptography.hazmat.primitives.serialization import load_pem_public_key

from .errors import ConfigMissing, KeyParseError

logger = logging.getLogger(__name__)

SECRET_CONFIG_KEY: Final[str] = "JWT_SECRET"
PUBLIC_KEY_CONFIG_KEY: Final[str] = "JWT_PUBLIC_KEY"


def _require(config: Mapping[str, Any], name: str) -> Any:
    value = config.get(name)
    if not value:
        raise ConfigMissing(f"required key configuration {name!r} is not set")
    return value


def read_pem_public_key(path: str | Path, expected: tuple[type, ...], label: str) -> Any:
    """Read ``path`` and parse it as a PEM public key of one of ``expected`` types.

    Raises:
        KeyParseError: If the file cannot be read, is not PEM, or holds a key
            of another type.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise KeyParseError(f"cannot read public key file {str(path)!r}: {e}") from e

    try:
        key = load_pem_public_key(data)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyParseError(f"{str(path)!r} is not a valid PEM public key") from e

    if not isinstance(key, expected):
        raise KeyParseError(f"{str(path)!r} does not contain an {label} public key")

    logger.debug("Loaded %s public key from %s", label, path)
    return key


def load_hmac_key(config: Mapping[str, Any]) -> bytes:
    """Return the shared secret as raw bytes.

    ``str`` secrets are UTF-8 encoded; ``bytes`` secrets (common in Flask's
    ``app.config``) are used as-is.

    Raises:
        ConfigMissing: If ``JWT_SECRET`` is unset or empty. An empty secret
            is refused rather than accepted.
        KeyParseError: If ``JWT_SECRET`` is neither ``str`` nor ``bytes``.
    """
    secret = _require(config, SECRET_CONFIG_KEY)
    if isinstance(secret, bytes):
        return secret
    if isinstance(secret, str):
        return secret.encode("utf-8")
    raise KeyParseError(
        f"{SECRET_CONFIG_KEY} must be str or bytes, got {type(secret).__name__}"
    )


def load_rsa_key(config: Mapping[str, Any]) -> RSAPublicKey:
    """Return the RSA public key named by ``JWT_PUBLIC_KEY``.

    Also used for RSA-PSS: the key type is the same, only the padding applied
    at verification time differs.
    """
    path = _require(config, PUBLIC_KEY_CONFIG_KEY)
    return read_pem_public_key(path, (RSAPublicKey,), "RSA")


def load_ecdsa_key(config: Mapping[str, Any]) -> EllipticCurvePublicKey:
    path = _require(config, PUBLIC_KEY_CONFIG_KEY)
    return read_pem_public_key(path, (EllipticCurvePublicKey,), "EC")


def load_eddsa_key(config: Mapping[str, Any]) -> Ed25519PublicKey | Ed448PublicKey:
    path = _require(config, PUBLIC_KEY_CONFIG_KEY)
    return read_pem_public_key(path, (Ed25519PublicKey, Ed448PublicKey), "EdDSA")
