"""Closed set of SSH key algorithms and ECDSA curves."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Optional

from ..errors import UnknownAlgorithm


class Curve(enum.Enum):
    NISTP256 = ("nistp256", 256)
    NISTP384 = ("nistp384", 384)
    NISTP521 = ("nistp521", 521)

    def __init__(self, wire_name: str, bits: int):
        self.wire_name = wire_name
        self.bits = bits

    def __str__(self) -> str:
        return self.wire_name

    @classmethod
    def from_name(cls, name: str) -> "Curve":
        for c in cls:
            if c.wire_name == name:
                return c
        raise UnknownAlgorithm(f"unknown curve {name!r}")


class KeyKind(enum.Enum):
    RSA = "RSA"
    DSA = "DSA"
    ECDSA = "ECDSA"
    ED25519 = "ED25519"


@dataclass(frozen=True)
class KeyAlgorithm:
    kind: KeyKind
    curve: Optional[Curve] = None

    @property
    def name(self) -> str:
        if self.kind is KeyKind.RSA:
            return "ssh-rsa"
        if self.kind is KeyKind.DSA:
            return "ssh-dss"
        if self.kind is KeyKind.ECDSA:
            return f"ecdsa-sha2-{self.curve}"
        return "ssh-ed25519"

    @property
    def hash_name(self) -> str:
        """Upper-case family name used in fingerprint text, e.g. ``ED25519``."""
        return self.kind.value

    @classmethod
    def from_name(cls, name: str) -> "KeyAlgorithm":
        try:
            return _BY_NAME[name]
        except KeyError:
            raise UnknownAlgorithm(f"unknown key type {name!r}") from None

    def __str__(self) -> str:
        return self.name


RSA = KeyAlgorithm(KeyKind.RSA)
DSA = KeyAlgorithm(KeyKind.DSA)
ECDSA_P256 = KeyAlgorithm(KeyKind.ECDSA, Curve.NISTP256)
ECDSA_P384 = KeyAlgorithm(KeyKind.ECDSA, Curve.NISTP384)
ECDSA_P521 = KeyAlgorithm(KeyKind.ECDSA, Curve.NISTP521)
ED25519 = KeyAlgorithm(KeyKind.ED25519)

ALGORITHMS = (RSA, DSA, ECDSA_P256, ECDSA_P384, ECDSA_P521, ED25519)
_BY_NAME: Dict[str, KeyAlgorithm] = {a.name: a for a in ALGORITHMS}


def ecdsa(curve: Curve) -> KeyAlgorithm:
    return KeyAlgorithm(KeyKind.ECDSA, curve)


__all__ = [
    "Curve",
    "KeyKind",
    "KeyAlgorithm",
    "RSA",
    "DSA",
    "ECDSA_P256",
    "ECDSA_P384",
    "ECDSA_P521",
    "ED25519",
    "ALGORITHMS",
    "ecdsa",
]
