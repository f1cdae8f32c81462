import pytest

from asymcrypt.crypto import (
    CurveType,
    InvalidKeyError,
    KeyFormat,
    generate_key_pair,
    get_public_key,
    sign,
    verify_signed_with_public_key,
)
from asymcrypt.crypto.signing import SECP256K1_ORDER


def test_sign_and_verify(secp_pair):
    signature = sign("hello world", secp_pair.private_key)
    assert len(bytes.fromhex(signature)) == 64
    assert verify_signed_with_public_key("hello world", secp_pair.public_key, signature)


def test_signing_is_deterministic(secp_pair):
    assert sign("same message", secp_pair.private_key) == sign("same message", secp_pair.private_key)
    assert sign("same message", secp_pair.private_key) != sign("other message", secp_pair.private_key)


def test_signature_is_low_s(secp_pair):
    for message in ["a", "b", "c", "d", "e", "f"]:
        s = int(sign(message, secp_pair.private_key)[64:], 16)
        assert 0 < s <= SECP256K1_ORDER // 2


def test_high_s_signature_rejected(secp_pair):
    signature = sign("hello", secp_pair.private_key)
    r = signature[:64]
    s = int(signature[64:], 16)
    high_s = (SECP256K1_ORDER - s).to_bytes(32, "big").hex()
    assert not verify_signed_with_public_key("hello", secp_pair.public_key, r + high_s)


def test_compressed_public_key_verifies(secp_pair):
    compressed = get_public_key(secp_pair.private_key, CurveType.SECP256K1, KeyFormat.COMPRESSED)
    signature = sign("hello", secp_pair.private_key)
    assert verify_signed_with_public_key("hello", compressed, signature)


def test_unicode_message(secp_pair):
    signature = sign("héllo ✓", secp_pair.private_key)
    assert verify_signed_with_public_key("héllo ✓", secp_pair.public_key, signature)
    assert not verify_signed_with_public_key("hello ✓", secp_pair.public_key, signature)


@pytest.mark.parametrize("index", [0, 17, 31, 32, 50, 63])
def test_altered_signature_byte(secp_pair, index):
    signature = bytearray(bytes.fromhex(sign("hello", secp_pair.private_key)))
    signature[index] ^= 0x01
    assert not verify_signed_with_public_key("hello", secp_pair.public_key, signature.hex())


def test_altered_message(secp_pair):
    signature = sign("hello", secp_pair.private_key)
    assert not verify_signed_with_public_key("hellp", secp_pair.public_key, signature)
    assert not verify_signed_with_public_key("", secp_pair.public_key, signature)


def test_wrong_public_key(secp_pair):
    other = generate_key_pair(CurveType.SECP256K1)
    signature = sign("hello", secp_pair.private_key)
    assert not verify_signed_with_public_key("hello", other.public_key, signature)


@pytest.mark.parametrize("signature", ["", "zz", "00" * 63, "00" * 64, "ff" * 64, "00" * 65])
def test_malformed_signature_returns_false(secp_pair, signature):
    assert not verify_signed_with_public_key("hello", secp_pair.public_key, signature)


def test_malformed_public_key_returns_false(secp_pair):
    signature = sign("hello", secp_pair.private_key)
    assert not verify_signed_with_public_key("hello", "04" + "00" * 64, signature)
    assert not verify_signed_with_public_key("hello", "not-hex", signature)


def test_sign_with_invalid_key():
    with pytest.raises(InvalidKeyError):
        sign("hello", "00" * 32)
    with pytest.raises(InvalidKeyError):
        sign("hello", "abcd")
