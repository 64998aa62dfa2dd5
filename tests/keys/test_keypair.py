import pytest

from sshcreds.errors import (
    AlgorithmMismatch,
    CheckMismatch,
    Invalid,
    InvalidFormat,
    OutOfData,
    Unimplemented,
    UnsupportedEncryption,
    UnsupportedMultiKey,
)
from sshcreds.keys.algorithms import ED25519, RSA, Curve
from sshcreds.keys.keypair import ARMOR_LABEL, KeyPair
from sshcreds.keys.private import (
    DSAPrivateMaterial,
    ECDSAPrivateMaterial,
    Ed25519PrivateMaterial,
    RSAPrivateMaterial,
)
from sshcreds.keys.public import (
    DSAPublicMaterial,
    ECDSAPublicMaterial,
    Ed25519PublicMaterial,
    RSAPublicMaterial,
)
from sshcreds.wire.armor import ArmorBlock
from sshcreds.wire.buffer import PADDING, ReadBuffer, WriteBuffer, padding_needed

GOLDEN_SEED = bytes.fromhex("7eb559bbbf6cce2632cf9f194aeb50943de7e1cbad54dcfab27a42759f5e2fed")
GOLDEN_CHECK = 0x2DBE9051
ED_KEY = bytes.fromhex("76f863e1024d8ff6cd8ad56c434e01dbbf2999cfc2f132fc7f41ca19fed7a97c")


def envelope(private_blob: bytes, public_blob: bytes = None, cipher="none", kdf="none",
             kdf_options=b"", count=1) -> bytes:
    if public_blob is None:
        public_blob = Ed25519PublicMaterial(key=ED_KEY).encode()
    buf = WriteBuffer()
    buf.write_cstring("openssh-key-v1")
    buf.write_string(cipher)
    buf.write_string(kdf)
    buf.write_chunk(kdf_options)
    buf.write_uint32(count)
    buf.write_chunk(public_blob)
    buf.write_chunk(private_blob)
    return buf.getvalue()


def ed25519_private_blob(check1=GOLDEN_CHECK, check2=GOLDEN_CHECK, key_type="ssh-ed25519",
                         inner_public=ED_KEY, private=GOLDEN_SEED + ED_KEY,
                         comment="wolf@Wolf.local", padding=None) -> bytes:
    buf = WriteBuffer()
    buf.write_uint32(check1)
    buf.write_uint32(check2)
    buf.write_string(key_type)
    buf.write_chunk(inner_public)
    buf.write_chunk(private)
    buf.write_string(comment)
    if padding is None:
        buf.write_padding()
    else:
        buf.write(padding)
    return buf.getvalue()


def rsa_pair() -> KeyPair:
    n = b"\x00" + b"\xd3" * 256
    e = b"\x01\x00\x01"
    return KeyPair(
        public=RSAPublicMaterial(exponent=e, modulus=n),
        check=0xDEADBEEF,
        private=RSAPrivateMaterial(
            modulus=n, public_exponent=e, private_exponent=b"\x5a" * 256,
            coefficient=b"\x11" * 128, prime1=b"\x00" + b"\xe7" * 128, prime2=b"\x00" + b"\xeb" * 128,
        ),
        comment="rsa@host",
    )


def dsa_pair() -> KeyPair:
    return KeyPair(
        public=DSAPublicMaterial(p=b"\x00" + b"\x91" * 128, q=b"\x00" + b"\x83" * 20, g=b"\x22" * 128, y=b"\x44" * 128),
        check=7,
        private=DSAPrivateMaterial(x=b"\x3c" * 20),
        comment="dsa",
    )


def ecdsa_pair() -> KeyPair:
    return KeyPair(
        public=ECDSAPublicMaterial(curve=Curve.NISTP384, point=b"\x04" + b"\x5e" * 96),
        check=0,
        private=ECDSAPrivateMaterial(curve=Curve.NISTP384, scalar=b"\x00" + b"\x9f" * 48),
    )


def test_generate_matches_golden(golden_random, golden_private_key, golden_public_line):
    key = KeyPair.generate(ED25519, "wolf@Wolf.local", golden_random)
    assert key.check == GOLDEN_CHECK
    assert key.private.seed == GOLDEN_SEED
    assert key.public == Ed25519PublicMaterial(key=ED_KEY)
    assert key.serialize() == golden_private_key
    assert key.public_key().serialize() == golden_public_line


def test_generate_draws_seed_then_check(golden_random):
    KeyPair.generate(ED25519, random_source=golden_random)
    assert golden_random.pos == 36


def test_generate_default_random_source():
    a = KeyPair.generate(ED25519, "x")
    b = KeyPair.generate(ED25519, "x")
    assert a.private.seed != b.private.seed
    assert KeyPair.parse(a.serialize()) == a


def test_generate_unimplemented(counting_random):
    with pytest.raises(Unimplemented):
        KeyPair.generate(RSA, random_source=counting_random)


def test_parse_golden(golden_private_key):
    key = KeyPair.parse(golden_private_key)
    assert key.algorithm == ED25519
    assert key.check == GOLDEN_CHECK
    assert key.comment == "wolf@Wolf.local"
    assert key.private == Ed25519PrivateMaterial(seed=GOLDEN_SEED, public_key=ED_KEY)
    assert key.serialize() == golden_private_key


def test_private_blob_layout(golden_private_key):
    body = ArmorBlock.parse(golden_private_key).body
    buf = ReadBuffer(body)
    buf.read_cstring()
    buf.read_chunk()
    buf.read_chunk()
    buf.read_chunk()
    buf.read_uint32()
    buf.read_chunk()
    private_blob = buf.read_chunk()
    assert len(private_blob) == 152
    assert len(private_blob) % 8 == 0
    assert private_blob.endswith(b"local" + PADDING[:6])


def test_public_key_and_derived_agree(golden_private_key, golden_public_line):
    key = KeyPair.parse(golden_private_key)
    assert key.public_key().serialize() == golden_public_line
    assert key.derive_public_key() == key.public_key()
    assert key.public_key().fingerprint() == key.derive_public_key().fingerprint()


def test_describe_and_repr(golden_private_key):
    key = KeyPair.parse(golden_private_key)
    text = key.describe()
    assert text.startswith("KeyPair(type: ssh-ed25519, public: " + ED_KEY.hex())
    assert "check: 2dbe9051" in text
    assert (GOLDEN_SEED + ED_KEY).hex() in text
    assert GOLDEN_SEED.hex() not in repr(key)


@pytest.mark.parametrize("make", [rsa_pair, dsa_pair, ecdsa_pair])
def test_other_algorithms_roundtrip(make):
    key = make()
    text = key.serialize()
    assert KeyPair.parse(text) == key
    assert KeyPair.parse(text).serialize() == text
    assert len(key.to_bytes()) > 0


def test_rsa_blob_has_no_public_copy():
    key = rsa_pair()
    buf = ReadBuffer(key.to_bytes())
    buf.read_cstring()
    for _ in range(3):  # cipher, kdf, kdf options
        buf.read_chunk()
    buf.read_uint32()
    buf.read_chunk()
    priv = ReadBuffer(buf.read_chunk())
    priv.read_uint32()
    priv.read_uint32()
    assert priv.read_string() == "ssh-rsa"
    # straight into n, e, d, ... with no duplicated public e, n
    assert priv.read_chunk() == key.private.modulus
    assert priv.read_chunk() == key.private.public_exponent


@pytest.mark.parametrize("make", [rsa_pair, dsa_pair, ecdsa_pair])
def test_other_algorithms_unimplemented_paths(make):
    key = make()
    with pytest.raises(Unimplemented):
        key.derive_public_key()
    with pytest.raises(Unimplemented):
        key.sign(b"msg", "file")
    assert key.public_key().comment == key.comment


def test_mismatched_materials_rejected():
    with pytest.raises(AlgorithmMismatch):
        KeyPair(public=Ed25519PublicMaterial(key=ED_KEY), check=1, private=DSAPrivateMaterial(x=b"\x01"))


def test_check_range():
    with pytest.raises(ValueError):
        KeyPair(public=Ed25519PublicMaterial(key=ED_KEY), check=1 << 32,
                private=Ed25519PrivateMaterial(seed=GOLDEN_SEED, public_key=ED_KEY))


def test_handbuilt_envelope_matches_golden(golden_private_key):
    assert envelope(ed25519_private_blob()) == ArmorBlock.parse(golden_private_key).body
    assert KeyPair.from_bytes(envelope(ed25519_private_blob())) == KeyPair.parse(golden_private_key)


@pytest.mark.parametrize("kwargs", [
    {"cipher": "aes256-ctr", "kdf": "bcrypt", "kdf_options": b"\x00\x00\x00\x10" + b"s" * 16 + b"\x00\x00\x00\x10"},
    {"cipher": "aes256-ctr"},
    {"kdf": "bcrypt"},
    {"kdf_options": b"\x00"},
])
def test_encrypted_rejected(kwargs):
    with pytest.raises(UnsupportedEncryption):
        KeyPair.from_bytes(envelope(ed25519_private_blob(), **kwargs))


@pytest.mark.parametrize("count", [0, 2])
def test_multikey_rejected(count):
    with pytest.raises(UnsupportedMultiKey):
        KeyPair.from_bytes(envelope(ed25519_private_blob(), count=count))


def test_check_mismatch():
    with pytest.raises(CheckMismatch):
        KeyPair.from_bytes(envelope(ed25519_private_blob(check2=0x2DBE9052)))


def test_inner_type_mismatch():
    with pytest.raises(AlgorithmMismatch):
        KeyPair.from_bytes(envelope(ed25519_private_blob(key_type="ssh-rsa")))


def test_inner_public_copy_must_match():
    other = bytes(32)
    with pytest.raises(Invalid):
        KeyPair.from_bytes(envelope(ed25519_private_blob(inner_public=other)))


def test_private_half_public_must_match():
    with pytest.raises(Invalid):
        KeyPair.from_bytes(envelope(ed25519_private_blob(private=GOLDEN_SEED + bytes(32))))


def test_tampered_padding():
    blob = ed25519_private_blob(padding=b"\x01\x02\x03\x04\x05\x07")
    with pytest.raises(InvalidFormat):
        KeyPair.from_bytes(envelope(blob))


def test_missing_padding():
    blob = ed25519_private_blob(padding=b"")
    assert padding_needed(len(blob)) == 6
    with pytest.raises(OutOfData):
        KeyPair.from_bytes(envelope(blob))


def test_extra_bytes_after_padding():
    blob = ed25519_private_blob(padding=PADDING[:6] + b"\x00" * 8)
    with pytest.raises(InvalidFormat):
        KeyPair.from_bytes(envelope(blob))


def test_trailing_bytes_after_private_blob():
    with pytest.raises(InvalidFormat):
        KeyPair.from_bytes(envelope(ed25519_private_blob()) + b"\x00")


def test_bad_magic():
    data = envelope(ed25519_private_blob()).replace(b"openssh-key-v1", b"openssh-key-v2", 1)
    with pytest.raises(InvalidFormat):
        KeyPair.from_bytes(data)


def test_truncated_body(golden_private_key):
    body = ArmorBlock.parse(golden_private_key).body
    with pytest.raises(OutOfData):
        KeyPair.from_bytes(body[:-10])


def test_wrong_armor_label():
    text = ArmorBlock("SSH SIGNATURE", envelope(ed25519_private_blob())).serialize()
    with pytest.raises(InvalidFormat):
        KeyPair.parse(text)
    assert KeyPair.parse(ArmorBlock(ARMOR_LABEL, envelope(ed25519_private_blob())).serialize()).comment == "wolf@Wolf.local"


def test_unicode_comment_roundtrip(counting_random):
    key = KeyPair.generate(ED25519, "zoë@hôte ключ", counting_random)
    assert KeyPair.parse(key.serialize()).comment == "zoë@hôte ключ"
