import hashlib
import hmac
import time
from datetime import timedelta
from typing import Any

import jwt
import pytest
from _pytest.monkeypatch import MonkeyPatch
from cryptography.hazmat.primitives import serialization

import tokenauth as m


def _verifier_for(setup) -> m.JWTVerifier:
    key = m.EnvKeySource(setup.config).resolve(setup.family)
    return m.JWTVerifier(setup.family, key)


def test_verifier_accepts_valid_token(family_setup, make_token):
    verifier = _verifier_for(family_setup)
    token = make_token(family_setup.signing_key, family_setup.algorithm, name="jane")

    claims = verifier.verify(token)
    assert claims["sub"] == "1234567890"
    assert claims["name"] == "jane"


def test_verifier_expired_maps_to_domain_error(family_setup, make_token):
    verifier = _verifier_for(family_setup)
    token = make_token(
        family_setup.signing_key, family_setup.algorithm, exp_in=timedelta(minutes=-5)
    )

    with pytest.raises(m.TokenExpired, match="token has expired"):
        verifier.verify(token)


def test_verifier_rejects_hmac_token_signed_with_rsa_public_key(rsa_key, forge_token):
    """The classic confusion attack: HS256 keyed with the server's public PEM."""
    verifier = m.JWTVerifier(m.SigningMethodFamily.RSA, rsa_key.public_key())
    pem = rsa_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    token = forge_token(
        {"alg": "HS256", "typ": "JWT"},
        {"sub": "attacker", "exp": int(time.time()) + 300},
        signer=lambda data: hmac.new(pem, data, hashlib.sha256).digest(),
    )

    with pytest.raises(m.BadSigningMethod, match="unexpected signing method"):
        verifier.verify(token)


def test_verifier_rejects_other_algorithm_of_same_family(rsa_key, make_token):
    verifier = m.JWTVerifier(m.SigningMethodFamily.RSA, rsa_key.public_key())
    token = make_token(rsa_key, "RS384")

    with pytest.raises(m.BadSigningMethod):
        verifier.verify(token)


@pytest.mark.parametrize("header", [{"alg": "none", "typ": "JWT"}, {"typ": "JWT"}])
def test_verifier_rejects_unsigned_or_undeclared_alg(header: dict[str, Any], forge_token):
    verifier = m.JWTVerifier(m.SigningMethodFamily.HMAC, b"secret")
    token = forge_token(header, {"sub": "u1", "exp": int(time.time()) + 300})

    with pytest.raises(m.BadSigningMethod):
        verifier.verify(token)


def test_verifier_checks_alg_before_signature(
    monkeypatch: MonkeyPatch, rsa_key, make_token
):
    verifier = m.JWTVerifier(m.SigningMethodFamily.HMAC, b"secret")

    def fail_decode(*args: Any, **kwargs: Any):
        raise AssertionError("signature must not be checked for a mismatched alg")

    monkeypatch.setattr(jwt, "decode", fail_decode)

    with pytest.raises(m.BadSigningMethod):
        verifier.verify(make_token(rsa_key, "RS256"))


def test_verifier_passes_configured_key_and_algorithm(monkeypatch: MonkeyPatch):
    key = b"secret"
    verifier = m.JWTVerifier(m.SigningMethodFamily.HMAC, key, algorithm="HS384", leeway=7)

    monkeypatch.setattr(jwt, "get_unverified_header", lambda _t: {"alg": "HS384"})  # type: ignore

    def fake_decode(*args: Any, **kwargs: Any):
        assert args[0] == "TOKEN"
        assert args[1] is key
        assert kwargs["algorithms"] == ["HS384"]
        assert kwargs["leeway"] == 7
        return {"sub": "u1"}

    monkeypatch.setattr(jwt, "decode", fake_decode)

    assert verifier.verify("TOKEN")["sub"] == "u1"


def test_verifier_wrong_secret_is_invalid_not_bad_method(make_token):
    verifier = m.JWTVerifier(m.SigningMethodFamily.HMAC, b"secret")
    token = make_token("another-secret", "HS256")

    with pytest.raises(m.TokenInvalid) as excinfo:
        verifier.verify(token)
    assert not isinstance(excinfo.value, m.BadSigningMethod)


def test_verifier_tampered_payload_is_invalid(rsa_key, make_token):
    verifier = m.JWTVerifier(m.SigningMethodFamily.RSA, rsa_key.public_key())
    header, _, signature = make_token(rsa_key, "RS256", role="user").split(".")
    _, forged_payload, _ = make_token(rsa_key, "RS256", role="admin").split(".")

    with pytest.raises(m.TokenInvalid):
        verifier.verify(f"{header}.{forged_payload}.{signature}")


@pytest.mark.parametrize("token", ["not-a-jwt", "a.b.c", ""])
def test_verifier_malformed_token(token: str):
    verifier = m.JWTVerifier(m.SigningMethodFamily.HMAC, b"secret")
    with pytest.raises(m.TokenInvalid):
        verifier.verify(token)


def test_verifier_not_before_in_future_is_invalid(make_token):
    verifier = m.JWTVerifier(m.SigningMethodFamily.HMAC, b"secret")
    token = make_token("secret", "HS256", nbf=int(time.time()) + 600)

    with pytest.raises(m.TokenInvalid):
        verifier.verify(token)


def test_verifier_leeway_tolerates_small_skew(make_token):
    verifier = m.JWTVerifier(m.SigningMethodFamily.HMAC, b"secret", leeway=60)
    token = make_token("secret", "HS256", exp_in=timedelta(seconds=-5))

    assert verifier.verify(token)["sub"] == "1234567890"


def test_verifier_token_without_exp_is_accepted(make_token):
    verifier = m.JWTVerifier(m.SigningMethodFamily.HMAC, b"secret")
    token = make_token("secret", "HS256", exp_in=None)

    assert verifier.verify(token)["sub"] == "1234567890"


def test_verifier_rejects_algorithm_outside_family():
    with pytest.raises(ValueError):
        m.JWTVerifier(m.SigningMethodFamily.ECDSA, b"secret", algorithm="HS256")


def test_verifier_rejects_negative_leeway():
    with pytest.raises(ValueError):
        m.JWTVerifier(m.SigningMethodFamily.HMAC, b"secret", leeway=-1)


def test_verifier_mismatched_key_material_is_invalid(ec_key, make_token):
    # Key source handed back an EC key for an HMAC configuration
    verifier = m.JWTVerifier(m.SigningMethodFamily.HMAC, ec_key.public_key())
    token = make_token("secret", "HS256")

    with pytest.raises(m.TokenInvalid):
        verifier.verify(token)
