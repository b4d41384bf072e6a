"""
Key source implementations for resolving verification key material.

This package contains implementations of the KeySource protocol. The
middleware calls exactly one of them, once, when it is built.
"""

from .env import EnvKeySource, StaticKeySource
from .jwks import JWKSKeySource

__all__ = ["EnvKeySource", "JWKSKeySource", "StaticKeySource"]
