"""openssh-key-v1 private key envelope.

See https://coolaj86.com/articles/the-openssh-private-key-format/ and
PROTOCOL.key in the OpenSSH sources. Layout of the armored body:

    "openssh-key-v1\\0"
    string   cipher name        "none" only
    string   kdf name           "none" only
    string   kdf options        empty only
    uint32   number of keys     1 only
    string   public key blob
    string   private blob:
               uint32 check, uint32 check (must match)
               string key type
               [not RSA] public material again (must match the outer copy)
               private material
               string comment
               padding 01 02 03 ... to a multiple of 8

Encrypted and multi-key files are rejected rather than half-parsed.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Optional

from ..crypto.provider import CryptoProvider, RandomSource, draw
from ..errors import (
    AlgorithmMismatch,
    CheckMismatch,
    Invalid,
    InvalidFormat,
    UnsupportedEncryption,
    UnsupportedMultiKey,
)
from ..sshsig.protocol import SHA512, sign as sshsig_sign
from ..sshsig.signature import Signature
from ..utils.logging import get_logger
from ..wire.armor import ArmorBlock
from ..wire.buffer import ReadBuffer, WriteBuffer
from .algorithms import KeyAlgorithm, KeyKind
from .private import (
    Ed25519PrivateMaterial,
    PrivateKeyMaterial,
    decode_private_material,
    generate_private_material,
)
from .public import (
    PublicKeyMaterial,
    decode_public_material,
    public_material_from_blob,
)
from .record import PublicKeyRecord

log = get_logger()

MAGIC = "openssh-key-v1"
ARMOR_LABEL = "OPENSSH PRIVATE KEY"
NONE = "none"


def _duplicates_public(algorithm: KeyAlgorithm) -> bool:
    # RSA private fields already carry n and e, so the blob skips the public copy
    return algorithm.kind is not KeyKind.RSA


@dataclass(frozen=True)
class KeyPair:
    public: PublicKeyMaterial
    check: int
    private: PrivateKeyMaterial = field(repr=False)
    comment: str = ""

    def __post_init__(self):
        if not 0 <= self.check <= 0xFFFFFFFF:
            raise ValueError(f"check value out of range: {self.check}")
        if self.public.algorithm != self.private.algorithm:
            raise AlgorithmMismatch(
                f"public key is {self.public.algorithm.name}, private key is {self.private.algorithm.name}"
            )

    @property
    def algorithm(self) -> KeyAlgorithm:
        return self.public.algorithm

    @classmethod
    def generate(cls, algorithm: KeyAlgorithm, comment: str = "",
                 random_source: Optional[RandomSource] = None,
                 provider: Optional[CryptoProvider] = None) -> "KeyPair":
        # seed first, then check value: fixed-sequence sources rely on this order
        private = generate_private_material(algorithm, random_source, provider)
        check = struct.unpack(">I", draw(random_source, 4))[0]
        log.debug("generated %s key comment_len=%d", algorithm.name, len(comment))
        return cls(public=private.public_material(), check=check, private=private, comment=comment)

    @classmethod
    def parse(cls, text: str) -> "KeyPair":
        block = ArmorBlock.expect(text, ARMOR_LABEL)
        key = cls.from_bytes(block.body)
        log.debug("parsed %s private key comment_len=%d", key.algorithm.name, len(key.comment))
        return key

    @classmethod
    def from_bytes(cls, data: bytes) -> "KeyPair":
        buf = ReadBuffer(data)
        if buf.read_cstring() != MAGIC:
            raise InvalidFormat("not an openssh-key-v1 private key")
        cipher_name = buf.read_string()
        kdf_name = buf.read_string()
        kdf_options = buf.read_chunk()
        if cipher_name != NONE or kdf_name != NONE or kdf_options:
            log.debug("rejecting encrypted key cipher=%s kdf=%s", cipher_name, kdf_name)
            raise UnsupportedEncryption(
                f"encrypted private keys are not supported (cipher={cipher_name}, kdf={kdf_name})"
            )
        count = buf.read_uint32()
        if count != 1:
            raise UnsupportedMultiKey(f"expected exactly 1 key, found {count}")

        public = public_material_from_blob(buf.read_chunk())
        algorithm = public.algorithm
        priv_buf = ReadBuffer(buf.read_chunk())
        buf.expect_end("private key blob")

        check1 = priv_buf.read_uint32()
        check2 = priv_buf.read_uint32()
        if check1 != check2:
            raise CheckMismatch(f"check values differ ({check1:08x} != {check2:08x})")

        inner_type = priv_buf.read_string()
        if inner_type != algorithm.name:
            raise AlgorithmMismatch(f"private key type {inner_type!r} does not match public key {algorithm.name}")
        if _duplicates_public(algorithm):
            inner_public = decode_public_material(priv_buf, algorithm)
            if inner_public != public:
                raise Invalid("public key copy inside private blob does not match")
        private = decode_private_material(priv_buf, algorithm)
        if isinstance(private, Ed25519PrivateMaterial):
            if private.public_material() != public:
                raise Invalid("ed25519 private key does not carry the matching public key")

        comment = priv_buf.read_string()
        priv_buf.expect_padding()
        priv_buf.expect_end("padding")
        return cls(public=public, check=check1, private=private, comment=comment)

    def to_bytes(self) -> bytes:
        buf = WriteBuffer()
        buf.write_cstring(MAGIC)
        buf.write_string(NONE)  # cipher
        buf.write_string(NONE)  # kdf
        buf.write_empty_chunk()  # kdf options
        buf.write_uint32(1)
        buf.write_chunk(self.public.encode())

        priv_buf = WriteBuffer()
        priv_buf.write_uint32(self.check)
        priv_buf.write_uint32(self.check)
        priv_buf.write_string(self.algorithm.name)
        if _duplicates_public(self.algorithm):
            priv_buf.write_chunks(self.public.chunks())
        priv_buf.write_chunks(self.private.chunks())
        priv_buf.write_string(self.comment)
        priv_buf.write_padding()
        buf.write_chunk(priv_buf.getvalue())
        return buf.getvalue()

    def serialize(self) -> str:
        return ArmorBlock(ARMOR_LABEL, self.to_bytes()).serialize()

    def __str__(self) -> str:
        return self.serialize()

    def public_key(self) -> PublicKeyRecord:
        return PublicKeyRecord(material=self.public, comment=self.comment)

    def derive_public_key(self, provider: Optional[CryptoProvider] = None) -> PublicKeyRecord:
        return PublicKeyRecord(material=self.private.derive_public(provider), comment=self.comment)

    def sign(self, message: bytes, namespace: str, hash_algorithm: str = SHA512,
             provider: Optional[CryptoProvider] = None) -> Signature:
        return sshsig_sign(self.private, self.public, message, namespace, hash_algorithm, provider)

    def describe(self) -> str:
        """Full dump including secret material; keep it out of logs."""
        return (
            f"KeyPair(type: {self.algorithm.name}, public: {self.public.describe()}, "
            f"check: {self.check:08x}, private: {self.private.describe()}, comment: {self.comment})"
        )


__all__ = ["KeyPair", "MAGIC", "ARMOR_LABEL"]
