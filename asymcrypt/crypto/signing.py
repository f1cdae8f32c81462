"""
asymcrypt Message Signing

Deterministic ECDSA over secp256k1.

- Digest: SHA-256 over the ASCII hex encoding of the UTF-8 message
  (kept for compatibility with existing signatures)
- Nonce: RFC 6979, so the same key and message give the same signature
- Signature: 64 bytes r || s, low-S normalized, hex-encoded
"""

import logging

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from .errors import InvalidKeyError
from .keys import hex_to_bytes, load_secp256k1_private_key, load_secp256k1_public_key
from .primitives import SIGNATURE_SIZE


logger = logging.getLogger(__name__)


# Order of the secp256k1 base point
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
_HALF_ORDER = SECP256K1_ORDER // 2
_SCALAR_SIZE = SIGNATURE_SIZE // 2


def _signing_input(message: str) -> bytes:
    return message.encode("utf-8").hex().encode("ascii")


def sign(message: str, private_key: str) -> str:
    """
    Sign a UTF-8 message with a secp256k1 private key.

    Args:
        message: Text to sign
        private_key: 32-byte private key (hex)

    Returns:
        str: 64-byte r || s signature (hex)

    Raises:
        InvalidKeyError: If the private key cannot be decoded
    """
    key = load_secp256k1_private_key(hex_to_bytes(private_key, "private key"))
    der = key.sign(
        _signing_input(message),
        ec.ECDSA(hashes.SHA256(), deterministic_signing=True),
    )
    r, s = decode_dss_signature(der)
    if s > _HALF_ORDER:
        s = SECP256K1_ORDER - s
    return (r.to_bytes(_SCALAR_SIZE, "big") + s.to_bytes(_SCALAR_SIZE, "big")).hex()


def verify_signed_with_public_key(message: str, public_key: str, signature: str) -> bool:
    """
    Verify that a message was signed by the key pair of a public key.

    Never raises for a bad signature: malformed signatures, malformed
    keys and high-S signatures all verify as False.

    Args:
        message: Text that was signed
        public_key: secp256k1 public key (hex, compressed or uncompressed)
        signature: 64-byte r || s signature (hex)

    Returns:
        bool: True if the signature is valid
    """
    try:
        sig = bytes.fromhex(signature)
        key = load_secp256k1_public_key(hex_to_bytes(public_key, "public key"))
    except (TypeError, ValueError, InvalidKeyError) as e:
        logger.debug(f"Signature verification input rejected: {e}")
        return False

    if len(sig) != SIGNATURE_SIZE:
        return False

    r = int.from_bytes(sig[:_SCALAR_SIZE], "big")
    s = int.from_bytes(sig[_SCALAR_SIZE:], "big")
    if not (0 < r < SECP256K1_ORDER and 0 < s <= _HALF_ORDER):
        return False

    try:
        key.verify(
            encode_dss_signature(r, s),
            _signing_input(message),
            ec.ECDSA(hashes.SHA256()),
        )
        return True
    except InvalidSignature:
        return False
