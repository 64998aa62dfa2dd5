"""Injected crypto and randomness capabilities.

Key and signature code never calls hash or Ed25519 primitives directly; it
goes through a ``CryptoProvider`` passed by the caller (defaulting to
``DefaultCryptoProvider``). Randomness is a plain ``Callable[[int], bytes]``
such as ``os.urandom``, so tests can substitute a fixed sequence.
"""
from __future__ import annotations

import hashlib
import os
from typing import Callable, Optional, Protocol

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

RandomSource = Callable[[int], bytes]


class CryptoProvider(Protocol):
    def sha256(self, data: bytes) -> bytes: ...

    def sha512(self, data: bytes) -> bytes: ...

    def md5(self, data: bytes) -> bytes: ...

    def ed25519_public_key(self, seed: bytes) -> bytes: ...

    def ed25519_sign(self, seed: bytes, message: bytes) -> bytes: ...

    def ed25519_verify(self, public_key: bytes, signature: bytes, message: bytes) -> bool: ...


class DefaultCryptoProvider:
    """hashlib digests and ``cryptography`` Ed25519."""

    def sha256(self, data: bytes) -> bytes:
        return hashlib.sha256(data).digest()

    def sha512(self, data: bytes) -> bytes:
        return hashlib.sha512(data).digest()

    def md5(self, data: bytes) -> bytes:
        # fingerprint only, not a security use
        return hashlib.md5(data, usedforsecurity=False).digest()

    def ed25519_public_key(self, seed: bytes) -> bytes:
        sk = Ed25519PrivateKey.from_private_bytes(seed)
        return sk.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    def ed25519_sign(self, seed: bytes, message: bytes) -> bytes:
        return Ed25519PrivateKey.from_private_bytes(seed).sign(message)

    def ed25519_verify(self, public_key: bytes, signature: bytes, message: bytes) -> bool:
        try:
            pk = Ed25519PublicKey.from_public_bytes(public_key)
        except ValueError:
            return False
        try:
            pk.verify(signature, message)
            return True
        except InvalidSignature:
            return False


_DEFAULT = DefaultCryptoProvider()


def default_provider() -> DefaultCryptoProvider:
    return _DEFAULT


def resolve(provider: Optional[CryptoProvider]) -> CryptoProvider:
    return provider if provider is not None else _DEFAULT


def system_random(n: int) -> bytes:
    return os.urandom(n)


def draw(random_source: Optional[RandomSource], n: int) -> bytes:
    """Draw exactly ``n`` bytes from the source (``os.urandom`` by default)."""
    out = (random_source or system_random)(n)
    if len(out) != n:
        raise ValueError(f"random source returned {len(out)} bytes, wanted {n}")
    return bytes(out)


__all__ = [
    "RandomSource",
    "CryptoProvider",
    "DefaultCryptoProvider",
    "default_provider",
    "resolve",
    "system_random",
    "draw",
]
