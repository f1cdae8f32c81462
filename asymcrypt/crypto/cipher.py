"""
asymcrypt Symmetric Cipher

Mode-aware AES encryption/decryption for the ECIES payload.

Cipher names follow the OpenSSL convention: aes-<key bits>-<mode>.
- ECB and CBC are block modes with PKCS#7 padding
- CTR is a stream mode (no padding), and needs a 16-byte IV

The cipher key length is fixed by the name, so the KDF hash must
produce enough material (an aes-256 cipher needs a 64-byte digest
such as sha512, split into a 32-byte cipher key and a 32-byte MAC key).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import CipherError
from .primitives import AES_BLOCK_SIZE


class SymmetricCipherType(str, Enum):
    """Supported symmetric ciphers."""
    AES_128_ECB = "aes-128-ecb"
    AES_192_ECB = "aes-192-ecb"
    AES_256_ECB = "aes-256-ecb"
    AES_128_CBC = "aes-128-cbc"
    AES_256_CBC = "aes-256-cbc"
    AES_128_CTR = "aes-128-ctr"
    AES_256_CTR = "aes-256-ctr"


@dataclass(frozen=True)
class CipherSpec:
    """Key size and mode of a named cipher."""
    key_size: int   # bytes
    mode: str       # "ecb", "cbc" or "ctr"

    @property
    def requires_iv(self) -> bool:
        """Whether the mode needs a 16-byte IV."""
        return self.mode != "ecb"

    @property
    def padded(self) -> bool:
        """Whether the mode pads plaintext to the block size."""
        return self.mode != "ctr"


def cipher_spec(cipher_type: Union[SymmetricCipherType, str]) -> CipherSpec:
    """
    Parse a cipher name into its key size and mode.

    Raises:
        CipherError: If the cipher name is not supported
    """
    try:
        name = SymmetricCipherType(cipher_type).value
    except ValueError as e:
        raise CipherError(f"Unsupported symmetric cipher: {cipher_type}") from e
    _, bits, mode = name.split("-")
    return CipherSpec(key_size=int(bits) // 8, mode=mode)


def symmetric_encrypt(
    cipher_type: Union[SymmetricCipherType, str],
    iv: bytes,
    key: bytes,
    plaintext: bytes,
) -> bytes:
    """
    Encrypt plaintext with a named cipher.

    Args:
        cipher_type: Cipher name (e.g. "aes-128-ecb")
        iv: Initialization vector (empty for ECB)
        key: Cipher key, length fixed by the cipher name
        plaintext: Data to encrypt

    Returns:
        bytes: Ciphertext

    Raises:
        CipherError: If the cipher, key or IV is invalid
    """
    spec = cipher_spec(cipher_type)
    if spec.padded:
        padder = padding.PKCS7(AES_BLOCK_SIZE * 8).padder()
        plaintext = padder.update(plaintext) + padder.finalize()

    encryptor = _build_cipher(spec, iv, key).encryptor()
    return encryptor.update(plaintext) + encryptor.finalize()


def symmetric_decrypt(
    cipher_type: Union[SymmetricCipherType, str],
    iv: bytes,
    key: bytes,
    ciphertext: bytes,
) -> bytes:
    """
    Decrypt ciphertext with a named cipher.

    Raises:
        CipherError: If the cipher, key or IV is invalid, or padding is bad
    """
    spec = cipher_spec(cipher_type)
    decryptor = _build_cipher(spec, iv, key).decryptor()
    try:
        plaintext = decryptor.update(ciphertext) + decryptor.finalize()
    except ValueError as e:
        # Block modes reject ciphertext that is not a whole number of blocks
        raise CipherError(f"Decryption failed: {e}") from e

    if spec.padded:
        unpadder = padding.PKCS7(AES_BLOCK_SIZE * 8).unpadder()
        try:
            plaintext = unpadder.update(plaintext) + unpadder.finalize()
        except ValueError as e:
            raise CipherError("Decryption failed: bad padding") from e
    return plaintext


def _build_cipher(spec: CipherSpec, iv: bytes, key: bytes) -> Cipher:
    if len(key) != spec.key_size:
        raise CipherError(
            f"Invalid key length for aes-{spec.key_size * 8}-{spec.mode}: "
            f"{len(key)} (expected {spec.key_size})"
        )

    iv = bytes(iv or b"")
    if spec.mode == "ecb":
        if iv:
            raise CipherError(f"Invalid IV length for ECB mode: {len(iv)} (expected 0)")
        mode = modes.ECB()
    elif len(iv) != AES_BLOCK_SIZE:
        raise CipherError(
            f"Invalid IV length for {spec.mode.upper()} mode: {len(iv)} "
            f"(expected {AES_BLOCK_SIZE})"
        )
    elif spec.mode == "cbc":
        mode = modes.CBC(iv)
    else:
        mode = modes.CTR(iv)

    return Cipher(algorithms.AES(bytes(key)), mode)
