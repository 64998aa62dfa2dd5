"""Public key material, one frozen dataclass per algorithm.

Wire layouts (after the algorithm name string):

  ssh-rsa              e, n
  ssh-dss              p, q, g, y
  ecdsa-sha2-<curve>   string curve, Q
  ssh-ed25519          A (32 bytes)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from ..crypto.digest import HashAlgorithm, HashIdentity
from ..crypto.provider import CryptoProvider
from ..errors import AlgorithmMismatch, Invalid
from ..wire.buffer import ReadBuffer, WriteBuffer
from .algorithms import DSA, ED25519, RSA, Curve, KeyAlgorithm, KeyKind, ecdsa

ED25519_KEY_BYTES = 32


def _odd_trimmed_bits(n: bytes) -> int:
    # an odd byte count means one leading zero sign byte was added to keep the mpint positive
    count = len(n) if len(n) % 2 == 0 else len(n) - 1
    return count * 8


class _PublicMaterial:
    algorithm: KeyAlgorithm

    def chunks(self) -> List[bytes]:
        raise NotImplementedError

    def encode(self) -> bytes:
        """Public key blob: algorithm name followed by the material chunks."""
        buf = WriteBuffer()
        buf.write_string(self.algorithm.name)
        buf.write_chunks(self.chunks())
        return buf.getvalue()

    def key_bits(self) -> int:
        raise NotImplementedError

    def fingerprint(self, algorithm: HashAlgorithm = HashAlgorithm.SHA256,
                    provider: Optional[CryptoProvider] = None) -> HashIdentity:
        return HashIdentity.of(self.encode(), algorithm, provider)

    def describe(self) -> str:
        return self.chunks()[-1].hex()


@dataclass(frozen=True)
class RSAPublicMaterial(_PublicMaterial):
    exponent: bytes
    modulus: bytes

    @property
    def algorithm(self) -> KeyAlgorithm:
        return RSA

    def chunks(self) -> List[bytes]:
        return [self.exponent, self.modulus]

    def key_bits(self) -> int:
        return _odd_trimmed_bits(self.modulus)

    def describe(self) -> str:
        return f"(exponent: {self.exponent.hex()}, modulus: {self.modulus.hex()})"


@dataclass(frozen=True)
class DSAPublicMaterial(_PublicMaterial):
    p: bytes
    q: bytes
    g: bytes
    y: bytes

    @property
    def algorithm(self) -> KeyAlgorithm:
        return DSA

    def chunks(self) -> List[bytes]:
        return [self.p, self.q, self.g, self.y]

    def key_bits(self) -> int:
        return _odd_trimmed_bits(self.p)

    def describe(self) -> str:
        return f"(p: {self.p.hex()}, q: {self.q.hex()}, g: {self.g.hex()}, y: {self.y.hex()})"


@dataclass(frozen=True)
class ECDSAPublicMaterial(_PublicMaterial):
    curve: Curve
    point: bytes

    @property
    def algorithm(self) -> KeyAlgorithm:
        return ecdsa(self.curve)

    def chunks(self) -> List[bytes]:
        return [self.curve.wire_name.encode(), self.point]

    def key_bits(self) -> int:
        return self.curve.bits


@dataclass(frozen=True)
class Ed25519PublicMaterial(_PublicMaterial):
    key: bytes

    def __post_init__(self):
        if len(self.key) != ED25519_KEY_BYTES:
            raise Invalid(f"ed25519 public key must be {ED25519_KEY_BYTES} bytes, got {len(self.key)}")

    @property
    def algorithm(self) -> KeyAlgorithm:
        return ED25519

    def chunks(self) -> List[bytes]:
        return [self.key]

    def key_bits(self) -> int:
        return 256


PublicKeyMaterial = Union[RSAPublicMaterial, DSAPublicMaterial, ECDSAPublicMaterial, Ed25519PublicMaterial]


def read_curve(buf: ReadBuffer, algorithm: KeyAlgorithm) -> Curve:
    name = buf.read_string()
    if name != algorithm.curve.wire_name:
        raise AlgorithmMismatch(f"curve {name!r} does not match key type {algorithm.name}")
    return algorithm.curve


def decode_public_material(buf: ReadBuffer, algorithm: KeyAlgorithm) -> PublicKeyMaterial:
    kind = algorithm.kind
    if kind is KeyKind.RSA:
        e = buf.read_chunk()
        n = buf.read_chunk()
        return RSAPublicMaterial(exponent=e, modulus=n)
    if kind is KeyKind.DSA:
        p, q, g, y = (buf.read_chunk() for _ in range(4))
        return DSAPublicMaterial(p=p, q=q, g=g, y=y)
    if kind is KeyKind.ECDSA:
        curve = read_curve(buf, algorithm)
        return ECDSAPublicMaterial(curve=curve, point=buf.read_chunk())
    return Ed25519PublicMaterial(key=buf.read_chunk())


def read_public_key(buf: ReadBuffer, expected: Optional[KeyAlgorithm] = None) -> PublicKeyMaterial:
    algorithm = KeyAlgorithm.from_name(buf.read_string())
    if expected is not None and algorithm != expected:
        raise AlgorithmMismatch(f"expected {expected.name}, got {algorithm.name}")
    return decode_public_material(buf, algorithm)


def public_material_from_blob(blob: bytes, expected: Optional[KeyAlgorithm] = None) -> PublicKeyMaterial:
    buf = ReadBuffer(blob)
    material = read_public_key(buf, expected)
    buf.expect_end("public key")
    return material


__all__ = [
    "PublicKeyMaterial",
    "RSAPublicMaterial",
    "DSAPublicMaterial",
    "ECDSAPublicMaterial",
    "Ed25519PublicMaterial",
    "decode_public_material",
    "read_public_key",
    "public_material_from_blob",
    "read_curve",
]
