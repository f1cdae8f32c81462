"""
asymcrypt Cryptographic Primitives

Low-level hashing, keyed hashing and comparison helpers wrapping the
cryptography library.

SECURITY NOTES:
- MAC comparison runs over every byte, independent of where inputs differ
- Sensitive buffers are zeroed when the caller owns a bytearray

Dependencies:
- cryptography (OpenSSL backend)
"""

from enum import Enum
from typing import Union

from cryptography.hazmat.primitives import hashes, hmac

from .errors import CipherError


class HashType(str, Enum):
    """Hash functions usable for key derivation and MACs."""
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"


_HASH_ALGORITHMS = {
    HashType.SHA1: hashes.SHA1,
    HashType.SHA256: hashes.SHA256,
    HashType.SHA384: hashes.SHA384,
    HashType.SHA512: hashes.SHA512,
}


def hash_algorithm(hash_type: Union[HashType, str]) -> hashes.HashAlgorithm:
    """
    Resolve a hash name to a cryptography hash algorithm instance.

    Raises:
        CipherError: If the hash name is not supported
    """
    try:
        return _HASH_ALGORITHMS[HashType(hash_type)]()
    except ValueError as e:
        raise CipherError(f"Unsupported hash type: {hash_type}") from e


def generate_message_hash(hash_type: Union[HashType, str], message: bytes) -> bytes:
    """
    Compute the digest of a message.

    Used as the key derivation function: the digest of
    shared_secret || s1 || ephemeral_public_key is split into
    the cipher key and the MAC key.

    Args:
        hash_type: Hash function name (e.g. "sha256")
        message: Data to hash

    Returns:
        bytes: Digest (32 bytes for sha256, 64 for sha512)
    """
    hasher = hashes.Hash(hash_algorithm(hash_type))
    hasher.update(message)
    return hasher.finalize()


def generate_message_mac(hash_type: Union[HashType, str], key: bytes, message: bytes) -> bytes:
    """
    Compute an HMAC tag over a message.

    Args:
        hash_type: Hash function name for the HMAC
        key: MAC key
        message: Data to authenticate (ciphertext || s2)

    Returns:
        bytes: HMAC tag
    """
    h = hmac.HMAC(bytes(key), hash_algorithm(hash_type))
    h.update(message)
    return h.finalize()


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """
    Compare two byte strings in constant time.

    Every byte pair is visited and folded into one accumulator,
    so the running time does not depend on the position of the
    first differing byte. Only a length mismatch returns early,
    and lengths are public (tags have a fixed size per hash).

    Args:
        a: First byte string
        b: Second byte string

    Returns:
        bool: True if equal, False otherwise
    """
    if len(a) != len(b):
        return False

    result = 0
    for x, y in zip(a, b):
        result |= x ^ y
    return result == 0


def secure_zero(data: bytearray) -> None:
    """
    Zero a bytearray in place to remove sensitive data from memory.

    Note: This is best-effort. Python's memory management may still
    leave copies of the data.

    Args:
        data: Bytearray to zero (modified in place)
    """
    for i in range(len(data)):
        data[i] = 0


# Size constants
AES_BLOCK_SIZE = 16  # bytes
SECP256K1_PRIVATE_KEY_SIZE = 32  # bytes
X25519_KEY_SIZE = 32  # bytes
SIGNATURE_SIZE = 64  # bytes (r || s)
