import base64

import pytest
from nacl.public import Box, PrivateKey, PublicKey

from asymcrypt.crypto import (
    CurveType,
    InvalidEnvelopeError,
    InvalidKeyError,
    KeyFormat,
    UnsupportedCurveError,
    agree_as_receiver,
    agree_as_sender,
    generate_key_pair,
    get_public_key,
)
from asymcrypt.crypto.keys import CURVES, get_curve


def test_secp256k1_agreement(secp_pair):
    agreement = agree_as_sender(bytes.fromhex(secp_pair.public_key), CurveType.SECP256K1)
    assert len(agreement.ephem_public_key) == 65
    assert agreement.ephem_public_key[0] == 0x04
    assert len(agreement.shared_secret) == 32

    shared = agree_as_receiver(
        bytes.fromhex(secp_pair.private_key),
        agreement.ephem_public_key.hex(),
        CurveType.SECP256K1,
    )
    assert shared == agreement.shared_secret


def test_secp256k1_compressed_ephemeral_key(secp_pair):
    agreement = agree_as_sender(
        bytes.fromhex(secp_pair.public_key),
        "secp256k1",
        KeyFormat.COMPRESSED,
    )
    assert len(agreement.ephem_public_key) == 33
    assert agreement.ephem_public_key[0] in (0x02, 0x03)

    shared = agree_as_receiver(
        bytes.fromhex(secp_pair.private_key),
        agreement.ephem_public_key.hex(),
        "secp256k1",
    )
    assert shared == agreement.shared_secret


def test_ed25519_ephemeral_key_is_base64(ed_pair):
    agreement = agree_as_sender(bytes.fromhex(ed_pair.public_key), CurveType.ED25519)
    raw = base64.b64decode(agreement.ephem_public_key)
    assert len(raw) == 32
    assert len(agreement.ephem_public_key) == 44

    shared = agree_as_receiver(
        bytes.fromhex(ed_pair.private_key),
        agreement.ephem_public_key.hex(),
        CurveType.ED25519,
    )
    assert shared == agreement.shared_secret


def test_ed25519_rejects_raw_hex_ephemeral_key(ed_pair):
    agreement = agree_as_sender(bytes.fromhex(ed_pair.public_key), CurveType.ED25519)
    raw = base64.b64decode(agreement.ephem_public_key)
    with pytest.raises(InvalidEnvelopeError):
        agree_as_receiver(bytes.fromhex(ed_pair.private_key), raw.hex(), CurveType.ED25519)


def test_unsupported_curve(secp_pair):
    with pytest.raises(UnsupportedCurveError):
        agree_as_sender(bytes.fromhex(secp_pair.public_key), "secp256r1")
    with pytest.raises(UnsupportedCurveError):
        agree_as_receiver(bytes.fromhex(secp_pair.private_key), "00", "secp256r1")


def test_curve_set_is_closed():
    assert set(CURVES) == {CurveType.SECP256K1, CurveType.ED25519}
    assert get_curve("ed25519").curve_type == CurveType.ED25519


def test_invalid_public_key():
    with pytest.raises(InvalidKeyError):
        agree_as_sender(bytes(65), CurveType.SECP256K1)
    with pytest.raises(InvalidKeyError):
        agree_as_sender(bytes(31), CurveType.ED25519)


def test_invalid_private_key(secp_pair):
    agreement = agree_as_sender(bytes.fromhex(secp_pair.public_key), CurveType.SECP256K1)
    with pytest.raises(InvalidKeyError):
        agree_as_receiver(bytes(32), agreement.ephem_public_key.hex(), CurveType.SECP256K1)
    with pytest.raises(InvalidKeyError):
        agree_as_receiver(bytes(16), agreement.ephem_public_key.hex(), CurveType.SECP256K1)


def test_generate_key_pair_sizes():
    secp = generate_key_pair(CurveType.SECP256K1)
    assert len(bytes.fromhex(secp.private_key)) == 32
    assert len(bytes.fromhex(secp.public_key)) == 65

    compressed = generate_key_pair(CurveType.SECP256K1, KeyFormat.COMPRESSED)
    assert len(bytes.fromhex(compressed.public_key)) == 33

    ed = generate_key_pair(CurveType.ED25519)
    assert len(bytes.fromhex(ed.private_key)) == 32
    assert len(bytes.fromhex(ed.public_key)) == 32


def test_get_public_key(secp_pair, ed_pair):
    assert get_public_key(secp_pair.private_key, CurveType.SECP256K1) == secp_pair.public_key
    assert get_public_key(ed_pair.private_key, CurveType.ED25519) == ed_pair.public_key


def test_get_public_key_bad_hex():
    with pytest.raises(InvalidKeyError):
        get_public_key("not-hex", CurveType.SECP256K1)


# NaCl box test keys (crypto_box_beforenm of these gives FIRSTKEY)
ALICE_SK = "77076d0a7318a57d3c16c17251b26645df4c2f87ebc0992ab177fba51db92c2a"
ALICE_PK = "8520f0098930a754748b7ddcb43ef75a0dbf3a0d26381af4eba4a98eaa9b4e6a"
BOB_SK = "5dab087e624a8a4b79e17f8b83800ee66f3bb1292618b6fd1c2f8b27ff88e0eb"
BOB_PK = "de9edb7d7b7dc1b4d35b61c2ece435373f8343c85b78674dadfc7e146f882b4f"
FIRSTKEY = "1b27556473e985d462cd51197a9a46c76009549eac6474f206c4ee0844f68389"


def _wire_ephemeral(public_key_hex):
    return base64.b64encode(bytes.fromhex(public_key_hex)).hex()


def test_ed25519_known_answer():
    assert get_public_key(ALICE_SK, CurveType.ED25519) == ALICE_PK
    assert get_public_key(BOB_SK, CurveType.ED25519) == BOB_PK

    shared = agree_as_receiver(bytes.fromhex(ALICE_SK), _wire_ephemeral(BOB_PK), CurveType.ED25519)
    assert shared.hex() == FIRSTKEY
    shared = agree_as_receiver(bytes.fromhex(BOB_SK), _wire_ephemeral(ALICE_PK), CurveType.ED25519)
    assert shared.hex() == FIRSTKEY


def test_ed25519_secret_matches_nacl_box(ed_pair):
    agreement = agree_as_sender(bytes.fromhex(ed_pair.public_key), CurveType.ED25519)
    ephemeral = PublicKey(base64.b64decode(agreement.ephem_public_key))
    box = Box(PrivateKey(bytes.fromhex(ed_pair.private_key)), ephemeral)
    assert agreement.shared_secret == box.shared_key()


def test_ed25519_low_order_point():
    with pytest.raises(InvalidKeyError):
        agree_as_sender(bytes(32), CurveType.ED25519)
    with pytest.raises(InvalidKeyError):
        agree_as_receiver(bytes.fromhex(ALICE_SK), _wire_ephemeral("00" * 32), CurveType.ED25519)


def test_unsupported_key_format(secp_pair):
    with pytest.raises(InvalidKeyError, match="key format"):
        agree_as_sender(bytes.fromhex(secp_pair.public_key), CurveType.SECP256K1, "hybrid")
    with pytest.raises(InvalidKeyError, match="key format"):
        generate_key_pair(CurveType.SECP256K1, "hybrid")
    with pytest.raises(InvalidKeyError, match="key format"):
        get_public_key(secp_pair.private_key, CurveType.SECP256K1, "hybrid")
