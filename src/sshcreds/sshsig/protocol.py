"""SSHSIG namespace-bound signing.

The signature never covers the raw message. It covers this wrapper:

    "SSHSIG" || string namespace || string reserved("") ||
    string hash_algorithm || string H(message)

so a signature made for one namespace or hash cannot be replayed in another.
"""
from __future__ import annotations

from typing import Optional

from ..crypto.provider import CryptoProvider, resolve
from ..errors import (
    KeyAlgorithmMismatch,
    NamespaceMismatch,
    Unimplemented,
    UnsupportedHashAlgorithm,
)
from ..keys.private import Ed25519PrivateMaterial, PrivateKeyMaterial
from ..keys.public import Ed25519PublicMaterial, PublicKeyMaterial
from ..utils.logging import get_logger
from ..wire.buffer import WriteBuffer
from .signature import MAGIC, Signature

log = get_logger()

SHA512 = "sha512"
SUPPORTED_HASHES = (SHA512,)


def _digest(message: bytes, hash_algorithm: str, provider: Optional[CryptoProvider]) -> bytes:
    if hash_algorithm != SHA512:
        raise UnsupportedHashAlgorithm(f"unsupported signature hash {hash_algorithm!r}")
    return resolve(provider).sha512(message)


def wrap_message(message: bytes, namespace: str, hash_algorithm: str = SHA512,
                 provider: Optional[CryptoProvider] = None) -> bytes:
    buf = WriteBuffer()
    buf.write(MAGIC)
    buf.write_string(namespace)
    buf.write_empty_chunk()  # reserved
    buf.write_string(hash_algorithm)
    buf.write_chunk(_digest(message, hash_algorithm, provider))
    return buf.getvalue()


def sign(private: PrivateKeyMaterial, public: PublicKeyMaterial, message: bytes, namespace: str,
         hash_algorithm: str = SHA512, provider: Optional[CryptoProvider] = None) -> Signature:
    if not isinstance(private, Ed25519PrivateMaterial):
        log.warning("signing not implemented for %s", private.algorithm.name)
        raise Unimplemented(f"signing is not implemented for {private.algorithm.name}")
    wrapped = wrap_message(message, namespace, hash_algorithm, provider)
    sig = resolve(provider).ed25519_sign(private.seed, wrapped)
    return Signature(public=public, signature=sig, hash_algorithm=hash_algorithm, namespace=namespace)


def verify(public: PublicKeyMaterial, message: bytes, signature: Signature, namespace: str,
           provider: Optional[CryptoProvider] = None) -> bool:
    """Check ``signature`` over ``message`` for ``namespace``.

    Protocol mismatches raise; a signature that simply does not verify
    returns False.
    """
    if public.algorithm != signature.algorithm:
        raise KeyAlgorithmMismatch(
            f"key is {public.algorithm.name}, signature is {signature.algorithm.name}"
        )
    if signature.hash_algorithm not in SUPPORTED_HASHES:
        raise UnsupportedHashAlgorithm(f"unsupported signature hash {signature.hash_algorithm!r}")
    if namespace != signature.namespace:
        raise NamespaceMismatch(f"expected namespace {namespace!r}, signature has {signature.namespace!r}")
    if not isinstance(public, Ed25519PublicMaterial):
        log.warning("verification not implemented for %s", public.algorithm.name)
        raise Unimplemented(f"verification is not implemented for {public.algorithm.name}")
    wrapped = wrap_message(message, signature.namespace, signature.hash_algorithm, provider)
    ok = resolve(provider).ed25519_verify(public.key, signature.signature, wrapped)
    log.debug("sshsig verify namespace=%s ok=%s", namespace, ok)
    return ok


__all__ = ["wrap_message", "sign", "verify", "SHA512", "SUPPORTED_HASHES"]
