import json
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from flask import Flask
from jwt.utils import base64url_encode

from tokenauth import SigningMethodFamily


@pytest.fixture()
def app():
    app = Flask(__name__)
    app.config["TESTING"] = True
    return app


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ed_key() -> ed25519.Ed25519PrivateKey:
    return ed25519.Ed25519PrivateKey.generate()


def public_pem(private_key: Any) -> bytes:
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


@pytest.fixture
def write_public_pem(tmp_path: Path):
    """
    Factory fixture writing the public half of a private key to a PEM file.

    Usage in tests:
        path = write_public_pem(rsa_key)
    """

    def _write(private_key: Any, name: str = "public.pem") -> Path:
        path = tmp_path / name
        path.write_bytes(public_pem(private_key))
        return path

    return _write


@pytest.fixture
def make_token():
    """
    Factory fixture signing a token with PyJWT.

    Usage in tests:
        token = make_token("secret", "HS256", exp_in=timedelta(minutes=-5))
    """

    def _make(
        key: Any,
        algorithm: str = "HS256",
        *,
        exp_in: timedelta | None = timedelta(minutes=5),
        headers: dict[str, Any] | None = None,
        **claims: Any,
    ) -> str:
        payload: dict[str, Any] = {"sub": "1234567890", **claims}
        if exp_in is not None:
            payload["exp"] = datetime.now(tz=UTC) + exp_in
        return jwt.encode(payload, key, algorithm=algorithm, headers=headers)

    return _make


@pytest.fixture
def forge_token():
    """
    Factory fixture assembling a token by hand, bypassing PyJWT's safety checks.

    The signer receives the signing input and returns the raw signature.
    """

    def _forge(header: dict[str, Any], payload: dict[str, Any], signer=None) -> str:
        segments = [
            base64url_encode(json.dumps(header).encode()),
            base64url_encode(json.dumps(payload).encode()),
        ]
        signing_input = b".".join(segments)
        signature = signer(signing_input) if signer else b""
        return b".".join([signing_input, base64url_encode(signature)]).decode("ascii")

    return _forge


@dataclass
class FamilySetup:
    family: SigningMethodFamily
    algorithm: str
    signing_key: Any
    config: dict[str, str]


@pytest.fixture(params=list(SigningMethodFamily), ids=lambda f: f.value)
def family_setup(request, rsa_key, ec_key, ed_key, write_public_pem) -> FamilySetup:
    """One configured family per parametrized run, with a matching signing key."""
    family: SigningMethodFamily = request.param

    if family is SigningMethodFamily.HMAC:
        return FamilySetup(family, "HS256", "secret", {"JWT_SECRET": "secret"})

    private_key, algorithm = {
        SigningMethodFamily.RSA: (rsa_key, "RS256"),
        SigningMethodFamily.RSA_PSS: (rsa_key, "PS256"),
        SigningMethodFamily.ECDSA: (ec_key, "ES256"),
        SigningMethodFamily.EDDSA: (ed_key, "EdDSA"),
    }[family]
    path = write_public_pem(private_key)
    return FamilySetup(family, algorithm, private_key, {"JWT_PUBLIC_KEY": str(path)})
