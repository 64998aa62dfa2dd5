"""SSH key fingerprints: ``SHA256:<unpadded base64>`` and ``MD5:<hex:pairs>``."""
import base64
import binascii
import enum
import re
from dataclasses import dataclass
from typing import Optional

from ..errors import Invalid
from .provider import CryptoProvider, resolve

SHA256_TEXT_LEN = 43
_MD5_HEX_RE = re.compile(r"[0-9a-f]{2}(?::[0-9a-f]{2}){15}")


class HashAlgorithm(enum.Enum):
    SHA256 = "SHA256"
    MD5 = "MD5"

    @property
    def digest_size(self) -> int:
        return 32 if self is HashAlgorithm.SHA256 else 16

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "HashAlgorithm":
        try:
            return cls(name.upper())
        except ValueError:
            raise Invalid(f"unknown fingerprint hash {name!r}") from None


def sha256_b64(digest: bytes) -> str:
    # OpenSSH drops the trailing "=" of the 44-char base64 form
    return base64.b64encode(digest).decode().rstrip("=")


def md5_hex(digest: bytes) -> str:
    return ":".join(f"{b:02x}" for b in digest)


@dataclass(frozen=True)
class HashIdentity:
    """A fingerprint digest with its algorithm; text form ``SHA256:...`` or ``MD5:aa:bb:...``."""

    algorithm: HashAlgorithm
    digest: bytes

    def __post_init__(self):
        if len(self.digest) != self.algorithm.digest_size:
            raise Invalid(
                f"{self.algorithm} digest must be {self.algorithm.digest_size} bytes, got {len(self.digest)}"
            )

    @classmethod
    def of(cls, data: bytes, algorithm: HashAlgorithm = HashAlgorithm.SHA256,
           provider: Optional[CryptoProvider] = None) -> "HashIdentity":
        p = resolve(provider)
        digest = p.sha256(data) if algorithm is HashAlgorithm.SHA256 else p.md5(data)
        return cls(algorithm, digest)

    @classmethod
    def decode(cls, body: str, algorithm: HashAlgorithm) -> "HashIdentity":
        if algorithm is HashAlgorithm.SHA256:
            if len(body) != SHA256_TEXT_LEN:
                raise Invalid(f"SHA256 fingerprint must be {SHA256_TEXT_LEN} characters, got {len(body)}")
            try:
                digest = base64.b64decode(body + "=", validate=True)
            except (binascii.Error, ValueError) as e:
                raise Invalid("SHA256 fingerprint is not valid base64") from e
        else:
            # 16 lowercase hex pairs joined by ":", 47 characters
            if not _MD5_HEX_RE.fullmatch(body):
                raise Invalid("MD5 fingerprint must be 16 colon-separated lowercase hex pairs")
            digest = bytes.fromhex(body.replace(":", ""))
        return cls(algorithm, digest)

    @classmethod
    def parse(cls, text: str) -> "HashIdentity":
        name, sep, body = text.partition(":")
        if not sep:
            raise Invalid("fingerprint must look like ALGO:body")
        return cls.decode(body, HashAlgorithm.from_name(name))

    @property
    def encoded(self) -> str:
        if self.algorithm is HashAlgorithm.SHA256:
            return sha256_b64(self.digest)
        return md5_hex(self.digest)

    @property
    def text(self) -> str:
        return f"{self.algorithm}:{self.encoded}"

    def __str__(self) -> str:
        return self.text


__all__ = ["HashAlgorithm", "HashIdentity", "sha256_b64", "md5_hex"]
