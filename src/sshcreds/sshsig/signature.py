"""SSHSIG detached signature container (``-----BEGIN SSH SIGNATURE-----``).

Binary body:

    byte[6]  "SSHSIG"
    uint32   version (1)
    string   public key blob
    string   namespace
    string   reserved ("")
    string   hash algorithm
    string   signature blob = string key type || string raw signature
"""
from __future__ import annotations

from dataclasses import dataclass

from ..errors import AlgorithmMismatch, Invalid, InvalidFormat
from ..keys.algorithms import KeyAlgorithm
from ..keys.public import PublicKeyMaterial, public_material_from_blob
from ..utils.logging import get_logger
from ..wire.armor import ArmorBlock
from ..wire.buffer import ReadBuffer, WriteBuffer

log = get_logger()

MAGIC = b"SSHSIG"
VERSION = 1
ARMOR_LABEL = "SSH SIGNATURE"


@dataclass(frozen=True)
class Signature:
    public: PublicKeyMaterial
    signature: bytes
    hash_algorithm: str
    namespace: str

    @property
    def algorithm(self) -> KeyAlgorithm:
        return self.public.algorithm

    @classmethod
    def parse(cls, text: str) -> "Signature":
        block = ArmorBlock.expect(text, ARMOR_LABEL)
        return cls.from_bytes(block.body)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Signature":
        buf = ReadBuffer(data)
        if buf.read(len(MAGIC)) != MAGIC:
            raise InvalidFormat("bad SSHSIG magic")
        version = buf.read_uint32()
        if version != VERSION:
            log.debug("sshsig: rejecting version %d", version)
            raise Invalid(f"unsupported SSHSIG version {version}")
        public = public_material_from_blob(buf.read_chunk())
        namespace = buf.read_string()
        if buf.read_chunk():
            raise InvalidFormat("reserved field must be empty")
        hash_algorithm = buf.read_string()

        sig_buf = ReadBuffer(buf.read_chunk())
        sig_type = sig_buf.read_string()
        if sig_type != public.algorithm.name:
            raise AlgorithmMismatch(f"signature type {sig_type!r} does not match key type {public.algorithm.name}")
        raw = sig_buf.read_chunk()
        sig_buf.expect_end("signature blob")
        buf.expect_end("signature")
        return cls(public=public, signature=raw, hash_algorithm=hash_algorithm, namespace=namespace)

    def to_bytes(self) -> bytes:
        buf = WriteBuffer()
        buf.write(MAGIC)
        buf.write_uint32(VERSION)
        buf.write_chunk(self.public.encode())
        buf.write_string(self.namespace)
        buf.write_empty_chunk()  # reserved
        buf.write_string(self.hash_algorithm)
        sig_buf = WriteBuffer()
        sig_buf.write_string(self.algorithm.name)
        sig_buf.write_chunk(self.signature)
        buf.write_chunk(sig_buf.getvalue())
        return buf.getvalue()

    def serialize(self) -> str:
        return ArmorBlock(ARMOR_LABEL, self.to_bytes()).serialize()

    def __str__(self) -> str:
        return self.serialize()

    def describe(self) -> str:
        return (
            f"Signature(type: {self.algorithm.name}, hash: {self.hash_algorithm}, "
            f"namespace: {self.namespace}, public: {self.public.describe()}, data: {self.signature.hex()})"
        )


__all__ = ["Signature", "MAGIC", "VERSION", "ARMOR_LABEL"]
