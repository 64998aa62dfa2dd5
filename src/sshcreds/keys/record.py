"""Public key lines (``ssh-ed25519 AAAA... comment``) and allowed_signers lines."""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Optional

from ..config import load_settings
from ..crypto.digest import HashAlgorithm, HashIdentity
from ..crypto.provider import CryptoProvider
from ..errors import InvalidEncoding, InvalidFormat
from ..randomart.grid import RandomArtGrid, randomart_grid
from ..sshsig.protocol import verify as verify_signature
from ..sshsig.signature import Signature
from ..utils.logging import get_logger
from ..wire.armor import check_input_size
from .algorithms import KeyAlgorithm
from .public import PublicKeyMaterial, public_material_from_blob

log = get_logger()


def default_fingerprint_hash() -> HashAlgorithm:
    return HashAlgorithm.from_name(load_settings().fingerprint_hash)


@dataclass(frozen=True)
class PublicKeyRecord:
    material: PublicKeyMaterial
    comment: str = ""

    @property
    def algorithm(self) -> KeyAlgorithm:
        return self.material.algorithm

    @classmethod
    def parse(cls, line: str) -> "PublicKeyRecord":
        check_input_size(line)
        parts = line.strip().split(None, 2)
        if len(parts) < 2:
            raise InvalidFormat("public key line needs a key type and base64 key")
        algorithm = KeyAlgorithm.from_name(parts[0])
        try:
            blob = base64.b64decode(parts[1], validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidEncoding("public key is not valid base64") from e
        material = public_material_from_blob(blob, expected=algorithm)
        comment = parts[2].strip() if len(parts) == 3 else ""
        log.debug("parsed public key type=%s comment_len=%d", algorithm.name, len(comment))
        return cls(material=material, comment=comment)

    def base64(self) -> str:
        return base64.b64encode(self.material.encode()).decode("ascii")

    def serialize(self) -> str:
        parts = [self.algorithm.name, self.base64()]
        if self.comment:
            parts.append(self.comment)
        return " ".join(parts)

    def __str__(self) -> str:
        return self.serialize()

    def key_bits(self) -> int:
        return self.material.key_bits()

    def fingerprint(self, algorithm: Optional[HashAlgorithm] = None,
                    provider: Optional[CryptoProvider] = None) -> HashIdentity:
        return self.material.fingerprint(algorithm or default_fingerprint_hash(), provider)

    def fingerprint_string(self, algorithm: Optional[HashAlgorithm] = None,
                           provider: Optional[CryptoProvider] = None) -> str:
        """``ssh-keygen -l`` style: ``256 SHA256:... comment (ED25519)``."""
        fp = self.fingerprint(algorithm, provider)
        return " ".join([str(self.key_bits()), fp.text, self.comment, f"({self.algorithm.hash_name})"])

    # https://man.openbsd.org/ssh-keygen#ALLOWED_SIGNERS
    def allowed_signer_line(self, identity: str) -> str:
        return " ".join([identity, self.algorithm.name, self.base64()])

    def verify(self, message: bytes, signature: Signature, namespace: str,
               provider: Optional[CryptoProvider] = None) -> bool:
        return verify_signature(self.material, message, signature, namespace, provider)

    def randomart_grid(self, algorithm: Optional[HashAlgorithm] = None,
                       provider: Optional[CryptoProvider] = None) -> RandomArtGrid:
        return randomart_grid(self.material, algorithm or default_fingerprint_hash(), provider)


__all__ = ["PublicKeyRecord", "default_fingerprint_hash"]
