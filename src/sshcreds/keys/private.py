"""Private key material as stored in an openssh-key-v1 private blob.

Layouts (after the algorithm name and, for non-RSA keys, the duplicated
public material):

  ssh-rsa              n, e, d, iqmp, p, q
  ssh-dss              x
  ecdsa-sha2-<curve>   d (the curve is taken from the key type)
  ssh-ed25519          seed || A (one 64-byte chunk)

Only Ed25519 supports generation and public key derivation; the other
algorithms raise ``Unimplemented`` for those paths.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from ..crypto.provider import CryptoProvider, RandomSource, draw, resolve
from ..errors import Invalid, Unimplemented
from ..utils.logging import get_logger
from ..wire.buffer import ReadBuffer
from .algorithms import DSA, ED25519, RSA, Curve, KeyAlgorithm, KeyKind, ecdsa
from .public import Ed25519PublicMaterial, PublicKeyMaterial

log = get_logger()

ED25519_SEED_BYTES = 32
ED25519_PRIVATE_BYTES = 64


class _PrivateMaterial:
    def chunks(self) -> List[bytes]:
        raise NotImplementedError

    def public_material(self) -> PublicKeyMaterial:
        log.warning("public material extraction not implemented for %s", self.algorithm.name)
        raise Unimplemented(f"public material extraction is not implemented for {self.algorithm.name}")

    def derive_public(self, provider: Optional[CryptoProvider] = None) -> PublicKeyMaterial:
        log.warning("public key derivation not implemented for %s", self.algorithm.name)
        raise Unimplemented(f"public key derivation is not implemented for {self.algorithm.name}")

    def describe(self) -> str:
        return self.chunks()[-1].hex()


@dataclass(frozen=True)
class RSAPrivateMaterial(_PrivateMaterial):
    modulus: bytes
    public_exponent: bytes
    private_exponent: bytes = field(repr=False)
    coefficient: bytes = field(repr=False)
    prime1: bytes = field(repr=False)
    prime2: bytes = field(repr=False)

    @property
    def algorithm(self) -> KeyAlgorithm:
        return RSA

    def chunks(self) -> List[bytes]:
        return [
            self.modulus,
            self.public_exponent,
            self.private_exponent,
            self.coefficient,
            self.prime1,
            self.prime2,
        ]

    def describe(self) -> str:
        return (
            f"(modulus: {self.modulus.hex()}, publicExponent: {self.public_exponent.hex()}, "
            f"privateExponent: {self.private_exponent.hex()}, coefficient: {self.coefficient.hex()}, "
            f"prime1: {self.prime1.hex()}, prime2: {self.prime2.hex()})"
        )


@dataclass(frozen=True)
class DSAPrivateMaterial(_PrivateMaterial):
    x: bytes = field(repr=False)

    @property
    def algorithm(self) -> KeyAlgorithm:
        return DSA

    def chunks(self) -> List[bytes]:
        return [self.x]


@dataclass(frozen=True)
class ECDSAPrivateMaterial(_PrivateMaterial):
    curve: Curve
    scalar: bytes = field(repr=False)

    @property
    def algorithm(self) -> KeyAlgorithm:
        return ecdsa(self.curve)

    def chunks(self) -> List[bytes]:
        return [self.scalar]


@dataclass(frozen=True)
class Ed25519PrivateMaterial(_PrivateMaterial):
    seed: bytes = field(repr=False)
    public_key: bytes

    def __post_init__(self):
        if len(self.seed) != ED25519_SEED_BYTES or len(self.public_key) != 32:
            raise Invalid("ed25519 private key must be a 32-byte seed and a 32-byte public key")

    @property
    def algorithm(self) -> KeyAlgorithm:
        return ED25519

    def chunks(self) -> List[bytes]:
        return [self.seed + self.public_key]

    def public_material(self) -> Ed25519PublicMaterial:
        return Ed25519PublicMaterial(key=self.public_key)

    def derive_public(self, provider: Optional[CryptoProvider] = None) -> Ed25519PublicMaterial:
        return Ed25519PublicMaterial(key=resolve(provider).ed25519_public_key(self.seed))


PrivateKeyMaterial = Union[RSAPrivateMaterial, DSAPrivateMaterial, ECDSAPrivateMaterial, Ed25519PrivateMaterial]


def decode_private_material(buf: ReadBuffer, algorithm: KeyAlgorithm) -> PrivateKeyMaterial:
    kind = algorithm.kind
    if kind is KeyKind.RSA:
        n, e, d, iqmp, p, q = (buf.read_chunk() for _ in range(6))
        return RSAPrivateMaterial(
            modulus=n,
            public_exponent=e,
            private_exponent=d,
            coefficient=iqmp,
            prime1=p,
            prime2=q,
        )
    if kind is KeyKind.DSA:
        return DSAPrivateMaterial(x=buf.read_chunk())
    if kind is KeyKind.ECDSA:
        return ECDSAPrivateMaterial(curve=algorithm.curve, scalar=buf.read_chunk())
    data = buf.read_chunk()
    if len(data) != ED25519_PRIVATE_BYTES:
        raise Invalid(f"ed25519 private key must be {ED25519_PRIVATE_BYTES} bytes, got {len(data)}")
    return Ed25519PrivateMaterial(seed=data[:32], public_key=data[32:])


def generate_private_material(algorithm: KeyAlgorithm, random_source: Optional[RandomSource] = None,
                              provider: Optional[CryptoProvider] = None) -> PrivateKeyMaterial:
    if algorithm.kind is not KeyKind.ED25519:
        log.warning("key generation not implemented for %s", algorithm.name)
        raise Unimplemented(f"key generation is not implemented for {algorithm.name}")
    seed = draw(random_source, ED25519_SEED_BYTES)
    public_key = resolve(provider).ed25519_public_key(seed)
    return Ed25519PrivateMaterial(seed=seed, public_key=public_key)


__all__ = [
    "PrivateKeyMaterial",
    "RSAPrivateMaterial",
    "DSAPrivateMaterial",
    "ECDSAPrivateMaterial",
    "Ed25519PrivateMaterial",
    "decode_private_material",
    "generate_private_material",
]
