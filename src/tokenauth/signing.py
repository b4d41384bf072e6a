"""Signing method families and their dispatch table.

The set of families is closed. Each family maps to:
- the canonical JWS ``alg`` used when no algorithm is configured,
- the ``alg`` values that belong to the family,
- the loader producing its default key material from configuration.

Nothing here looks at the token. The server configuration picks the family,
and the family picks the key and the algorithm.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .keys import load_ecdsa_key, load_eddsa_key, load_hmac_key, load_rsa_key

if TYPE_CHECKING:
    from .protocols import KeyMaterial


class SigningMethodFamily(StrEnum):
    """Algorithm family used to verify token signatures."""

    HMAC = "HMAC"
    RSA = "RSA"
    RSA_PSS = "RSA-PSS"
    ECDSA = "ECDSA"
    EDDSA = "EdDSA"

    @classmethod
    def from_name(cls, name: str) -> SigningMethodFamily:
        """Look up a family by value or member name, ignoring case.

        Raises:
            ValueError: If ``name`` names no family.
        """
        wanted = name.strip().upper().replace("_", "-")
        for family in cls:
            if family.value.upper() == wanted:
                return family
        raise ValueError(f"unknown signing method family {name!r}")


@dataclass(frozen=True, slots=True)
class FamilySpec:
    """Dispatch entry for one signing method family.

    Attributes:
        canonical_algorithm: Default JWS ``alg`` for the family.
        algorithms: Every JWS ``alg`` the family may be configured with.
        load_key: Default key loader, given the configuration mapping.
    """

    canonical_algorithm: str
    algorithms: frozenset[str]
    load_key: Callable[[Mapping[str, Any]], KeyMaterial]


_FAMILIES: Mapping[SigningMethodFamily, FamilySpec] = MappingProxyType(
    {
        SigningMethodFamily.HMAC: FamilySpec(
            "HS256", frozenset({"HS256", "HS384", "HS512"}), load_hmac_key
        ),
        SigningMethodFamily.RSA: FamilySpec(
            "RS256", frozenset({"RS256", "RS384", "RS512"}), load_rsa_key
        ),
        SigningMethodFamily.RSA_PSS: FamilySpec(
            "PS256", frozenset({"PS256", "PS384", "PS512"}), load_rsa_key
        ),
        SigningMethodFamily.ECDSA: FamilySpec(
            "ES256", frozenset({"ES256", "ES256K", "ES384", "ES512"}), load_ecdsa_key
        ),
        SigningMethodFamily.EDDSA: FamilySpec(
            "EdDSA", frozenset({"EdDSA"}), load_eddsa_key
        ),
    }
)


def family_spec(family: SigningMethodFamily) -> FamilySpec:
    return _FAMILIES[family]


def resolve_algorithm(family: SigningMethodFamily, algorithm: str | None = None) -> str:
    """Return the algorithm to enforce for ``family``.

    Args:
        family: Configured signing method family.
        algorithm: Explicit ``alg`` within the family, or None for the
            family's canonical algorithm.

    Raises:
        ValueError: If ``algorithm`` does not belong to ``family``.
    """
    spec = family_spec(family)
    if algorithm is None:
        return spec.canonical_algorithm
    if algorithm not in spec.algorithms:
        raise ValueError(
            f"algorithm {algorithm!r} is not part of the {family.value} family "
            f"(expected one of {sorted(spec.algorithms)})"
        )
    return algorithm
