import pytest

from asymcrypt.crypto import DefaultKeyStrategy, HashType, generate_message_hash
from asymcrypt.crypto import strategy as strategy_module


def test_default_split():
    keys = DefaultKeyStrategy(HashType.SHA512).derive_keys(b"\x01" * 32, b"s1", b"ephem")
    digest = generate_message_hash("sha512", b"\x01" * 32 + b"s1" + b"ephem")
    assert keys.cipher_key == digest[:32]
    assert keys.mac_key == digest[32:]


def test_kdf_input_is_zeroed(monkeypatch):
    buffers = []
    real_zero = strategy_module.secure_zero

    def recording_zero(data):
        buffers.append(data)
        real_zero(data)

    monkeypatch.setattr(strategy_module, "secure_zero", recording_zero)
    DefaultKeyStrategy().derive_keys(b"\xaa" * 32, b"context", b"\x04" + b"\xbb" * 64)

    assert len(buffers) == 1
    assert len(buffers[0]) == 32 + len(b"context") + 65
    assert buffers[0] == bytearray(len(buffers[0]))


def test_kdf_input_is_zeroed_on_error(monkeypatch):
    buffers = []
    monkeypatch.setattr(strategy_module, "secure_zero", buffers.append)

    def failing_hash(hash_type, message):
        raise RuntimeError("hash failed")

    monkeypatch.setattr(strategy_module, "generate_message_hash", failing_hash)
    with pytest.raises(RuntimeError):
        DefaultKeyStrategy().derive_keys(b"\xaa" * 32, b"", b"ephem")
    assert len(buffers) == 1
