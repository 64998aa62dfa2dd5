"""Exception taxonomy for sshcreds.

Every failure is raised where it is detected. Structural problems with
untrusted input derive from ``Invalid``; violations of the SSHSIG protocol
derive from ``SignatureError``; deliberately unsupported algorithm paths raise
``Unimplemented``. All of them are ``ValueError`` subclasses so callers that
only care about "bad input" can catch that.
"""


class SSHCredsError(ValueError):
    """Base class for all sshcreds errors."""


class Invalid(SSHCredsError):
    """Input failed structural validation."""


class OutOfData(Invalid):
    """A read ran past the end of the buffer."""


class InvalidEncoding(Invalid):
    """Malformed UTF-8 or base64."""


class InvalidFormat(Invalid):
    """Armor pattern, magic, padding or layout mismatch."""


class UnknownAlgorithm(Invalid):
    """Key type name is not one of the supported algorithms."""


class AlgorithmMismatch(Invalid):
    """Two key type tags that must agree do not."""


class UnsupportedEncryption(Invalid):
    """Private key envelope is passphrase-protected (cipher/kdf not "none")."""


class UnsupportedMultiKey(Invalid):
    """Private key envelope holds more or fewer than exactly one key."""


class CheckMismatch(Invalid):
    """The two check values of a private key blob differ."""


class SignatureError(SSHCredsError):
    """SSHSIG protocol violation (not a cryptographically bad signature)."""


class KeyAlgorithmMismatch(SignatureError):
    """Verifying key type differs from the key embedded in the signature."""


class UnsupportedHashAlgorithm(SignatureError):
    """Message hash is not one SSHSIG signing supports (only sha512)."""


class NamespaceMismatch(SignatureError):
    """Signature was made for a different namespace."""


class Unimplemented(SSHCredsError, NotImplementedError):
    """Algorithm path intentionally not implemented (e.g. RSA signing)."""


__all__ = [
    "SSHCredsError",
    "Invalid",
    "OutOfData",
    "InvalidEncoding",
    "InvalidFormat",
    "UnknownAlgorithm",
    "AlgorithmMismatch",
    "UnsupportedEncryption",
    "UnsupportedMultiKey",
    "CheckMismatch",
    "SignatureError",
    "KeyAlgorithmMismatch",
    "UnsupportedHashAlgorithm",
    "NamespaceMismatch",
    "Unimplemented",
]
