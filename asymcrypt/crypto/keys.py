"""
asymcrypt Curve Abstraction

Handles:
- Curve selection (secp256k1, ed25519)
- Ephemeral key generation and ECDH key agreement
- Key pair generation and public key derivation
- Decoding raw key bytes into cryptography key objects

Curve Families:
- secp256k1: X9.62 points, ECDH shared secret is the x-coordinate.
  Ephemeral public keys travel as raw point bytes (hex on the wire).
- ed25519: Curve25519 agreement over raw 32-byte keys. The shared
  secret is the NaCl box precomputation (HSalsa20 over the X25519
  output), so secrets match crypto_box_beforenm peers.
  Ephemeral public keys travel as base64 text, and that text is
  what gets hex-wrapped on the wire and fed to the KDF.

The set of curves is closed: each curve is a CurveAgreement
subclass registered in CURVES. Adding a curve means adding a
subclass and a CurveType member.

SECURITY NOTES:
- Private keys are never logged
- A fresh ephemeral key is generated for every encryption
"""

import base64
import binascii
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.x25519 import (
    X25519PrivateKey,
    X25519PublicKey,
)
import nacl.bindings
from nacl.exceptions import CryptoError

from .errors import InvalidEnvelopeError, InvalidKeyError, UnsupportedCurveError
from .primitives import SECP256K1_PRIVATE_KEY_SIZE, X25519_KEY_SIZE


logger = logging.getLogger(__name__)


DEFAULT_SECP256K1_SCHEME = "asym.chainjs.secp256k1"
DEFAULT_ED25519_SCHEME = "asym.chainjs.ed25519"


class CurveType(str, Enum):
    """Supported elliptic curve families."""
    SECP256K1 = "secp256k1"
    ED25519 = "ed25519"


class KeyFormat(str, Enum):
    """Serialization of secp256k1 points."""
    COMPRESSED = "compressed"
    UNCOMPRESSED = "uncompressed"


_POINT_FORMATS = {
    KeyFormat.COMPRESSED: serialization.PublicFormat.CompressedPoint,
    KeyFormat.UNCOMPRESSED: serialization.PublicFormat.UncompressedPoint,
}


@dataclass(frozen=True)
class Agreement:
    """Sender-side result of a key agreement."""
    ephem_public_key: bytes  # wire bytes of the ephemeral public key
    shared_secret: bytes


@dataclass(frozen=True)
class KeyPair:
    """Hex-encoded key pair for one curve."""
    public_key: str
    private_key: str


class CurveAgreement(ABC):
    """Key agreement for a single curve family."""

    curve_type: CurveType
    default_scheme: str

    @abstractmethod
    def agree_as_sender(self, public_key: bytes, key_format: KeyFormat) -> Agreement:
        """Generate an ephemeral key and agree with the recipient's public key."""

    @abstractmethod
    def agree_as_receiver(self, private_key: bytes, ephem_public_key: str) -> bytes:
        """Recompute the shared secret from a stored (hex) ephemeral public key."""

    @abstractmethod
    def public_key_for(self, private_key: bytes, key_format: KeyFormat) -> bytes:
        """Derive the public key bytes for a private key."""

    @abstractmethod
    def generate_private_key(self) -> bytes:
        """Generate fresh private key bytes."""


class Secp256k1Agreement(CurveAgreement):
    """ECDH over secp256k1."""

    curve_type = CurveType.SECP256K1
    default_scheme = DEFAULT_SECP256K1_SCHEME

    def agree_as_sender(self, public_key: bytes, key_format: KeyFormat) -> Agreement:
        recipient = load_secp256k1_public_key(public_key)
        ephemeral = ec.generate_private_key(ec.SECP256K1())
        shared_secret = ephemeral.exchange(ec.ECDH(), recipient)
        ephem_public_key = ephemeral.public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=_point_format(key_format),
        )
        return Agreement(ephem_public_key=ephem_public_key, shared_secret=shared_secret)

    def agree_as_receiver(self, private_key: bytes, ephem_public_key: str) -> bytes:
        private = load_secp256k1_private_key(private_key)
        try:
            ephemeral = ec.EllipticCurvePublicKey.from_encoded_point(
                ec.SECP256K1(),
                bytes.fromhex(ephem_public_key),
            )
        except ValueError as e:
            raise InvalidEnvelopeError(f"Invalid secp256k1 ephemeral public key: {e}") from e
        return private.exchange(ec.ECDH(), ephemeral)

    def public_key_for(self, private_key: bytes, key_format: KeyFormat) -> bytes:
        return load_secp256k1_private_key(private_key).public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=_point_format(key_format),
        )

    def generate_private_key(self) -> bytes:
        private = ec.generate_private_key(ec.SECP256K1())
        return private.private_numbers().private_value.to_bytes(
            SECP256K1_PRIVATE_KEY_SIZE, byteorder="big"
        )


class Ed25519Agreement(CurveAgreement):
    """
    Curve25519 agreement for the ed25519 curve family.

    Keys are the raw 32-byte Curve25519 forms. The shared secret is
    crypto_box_beforenm(public, private). The ephemeral public key is
    base64-encoded before it is stored, unlike secp256k1.
    """

    curve_type = CurveType.ED25519
    default_scheme = DEFAULT_ED25519_SCHEME

    def agree_as_sender(self, public_key: bytes, key_format: KeyFormat) -> Agreement:
        _load_x25519_public_key(public_key)
        ephemeral = X25519PrivateKey.generate()
        shared_secret = _box_before(public_key, _x25519_private_bytes(ephemeral))
        raw_public = ephemeral.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        return Agreement(
            ephem_public_key=base64.b64encode(raw_public),
            shared_secret=shared_secret,
        )

    def agree_as_receiver(self, private_key: bytes, ephem_public_key: str) -> bytes:
        _load_x25519_private_key(private_key)
        try:
            decoded = base64.b64decode(bytes.fromhex(ephem_public_key), validate=True)
        except (ValueError, binascii.Error) as e:
            raise InvalidEnvelopeError(f"Invalid ed25519 ephemeral public key: {e}") from e
        if len(decoded) != X25519_KEY_SIZE:
            raise InvalidEnvelopeError(
                f"Invalid ed25519 ephemeral public key length: {len(decoded)}"
            )
        return _box_before(decoded, private_key)

    def public_key_for(self, private_key: bytes, key_format: KeyFormat) -> bytes:
        return _load_x25519_private_key(private_key).public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    def generate_private_key(self) -> bytes:
        return _x25519_private_bytes(X25519PrivateKey.generate())


CURVES: Mapping[CurveType, CurveAgreement] = MappingProxyType({
    CurveType.SECP256K1: Secp256k1Agreement(),
    CurveType.ED25519: Ed25519Agreement(),
})


def get_curve(curve_type: Union[CurveType, str]) -> CurveAgreement:
    """
    Look up the agreement implementation for a curve tag.

    Raises:
        UnsupportedCurveError: If the tag is not a supported curve
    """
    try:
        return CURVES[CurveType(curve_type)]
    except ValueError as e:
        raise UnsupportedCurveError(f"Not supported curve type: {curve_type}") from e


def agree_as_sender(
    public_key: bytes,
    curve_type: Union[CurveType, str],
    key_format: Union[KeyFormat, str] = KeyFormat.UNCOMPRESSED,
) -> Agreement:
    """
    Generate an ephemeral key pair and a shared secret for a recipient.

    Args:
        public_key: Recipient public key bytes
        curve_type: Curve of the recipient key
        key_format: Point format for the secp256k1 ephemeral key

    Returns:
        Agreement: ephemeral public key (wire bytes) and shared secret

    Raises:
        UnsupportedCurveError: If the curve is not supported
        InvalidKeyError: If the public key or key format is invalid
    """
    curve = get_curve(curve_type)
    logger.debug(f"Sender agreement on {curve.curve_type.value}")
    return curve.agree_as_sender(public_key, parse_key_format(key_format))


def agree_as_receiver(
    private_key: bytes,
    ephem_public_key: str,
    curve_type: Union[CurveType, str],
) -> bytes:
    """
    Recompute the shared secret from the envelope's ephemeral public key.

    Args:
        private_key: Recipient private key bytes
        ephem_public_key: Ephemeral public key as stored in the envelope (hex)
        curve_type: Curve of the recipient key

    Returns:
        bytes: Shared secret

    Raises:
        UnsupportedCurveError: If the curve is not supported
        InvalidKeyError: If the private key cannot be decoded
        InvalidEnvelopeError: If the ephemeral public key cannot be decoded
    """
    curve = get_curve(curve_type)
    logger.debug(f"Receiver agreement on {curve.curve_type.value}")
    return curve.agree_as_receiver(private_key, ephem_public_key)


def generate_key_pair(
    curve_type: Union[CurveType, str] = CurveType.SECP256K1,
    key_format: Union[KeyFormat, str] = KeyFormat.UNCOMPRESSED,
) -> KeyPair:
    """
    Generate a new hex-encoded key pair.

    Security:
        Keys come from the OpenSSL CSPRNG.
    """
    curve = get_curve(curve_type)
    private_key = curve.generate_private_key()
    public_key = curve.public_key_for(private_key, parse_key_format(key_format))
    return KeyPair(public_key=public_key.hex(), private_key=private_key.hex())


def get_public_key(
    private_key: str,
    curve_type: Union[CurveType, str] = CurveType.SECP256K1,
    key_format: Union[KeyFormat, str] = KeyFormat.UNCOMPRESSED,
) -> str:
    """Derive the hex public key for a hex private key."""
    curve = get_curve(curve_type)
    return curve.public_key_for(hex_to_bytes(private_key, "private key"), parse_key_format(key_format)).hex()


def hex_to_bytes(value: str, what: str = "key") -> bytes:
    """
    Decode a hex-encoded key string.

    Raises:
        InvalidKeyError: If the value is not valid hex
    """
    try:
        return bytes.fromhex(value)
    except (TypeError, ValueError) as e:
        raise InvalidKeyError(f"Invalid {what} hex: {e}") from e


def load_secp256k1_private_key(data: bytes) -> ec.EllipticCurvePrivateKey:
    """
    Load a secp256k1 private key from 32 raw bytes.

    Raises:
        InvalidKeyError: If the length or scalar value is invalid
    """
    if len(data) != SECP256K1_PRIVATE_KEY_SIZE:
        raise InvalidKeyError(
            f"Invalid secp256k1 private key length: {len(data)} "
            f"(expected {SECP256K1_PRIVATE_KEY_SIZE})"
        )
    try:
        return ec.derive_private_key(int.from_bytes(data, byteorder="big"), ec.SECP256K1())
    except ValueError as e:
        raise InvalidKeyError(f"Invalid secp256k1 private key: {e}") from e


def load_secp256k1_public_key(data: bytes) -> ec.EllipticCurvePublicKey:
    """
    Load a secp256k1 public key from compressed or uncompressed point bytes.

    Raises:
        InvalidKeyError: If the bytes are not a point on the curve
    """
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), data)
    except ValueError as e:
        raise InvalidKeyError(f"Invalid secp256k1 public key: {e}") from e


def _load_x25519_private_key(data: bytes) -> X25519PrivateKey:
    if len(data) != X25519_KEY_SIZE:
        raise InvalidKeyError(
            f"Invalid ed25519 private key length: {len(data)} (expected {X25519_KEY_SIZE})"
        )
    return X25519PrivateKey.from_private_bytes(data)


def _load_x25519_public_key(data: bytes) -> X25519PublicKey:
    if len(data) != X25519_KEY_SIZE:
        raise InvalidKeyError(
            f"Invalid ed25519 public key length: {len(data)} (expected {X25519_KEY_SIZE})"
        )
    return X25519PublicKey.from_public_bytes(data)


def _x25519_private_bytes(private: X25519PrivateKey) -> bytes:
    return private.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _box_before(public_key: bytes, private_key: bytes) -> bytes:
    try:
        return nacl.bindings.crypto_box_beforenm(public_key, private_key)
    except CryptoError as e:
        # Low-order points produce an all-zero secret
        raise InvalidKeyError(f"Curve25519 agreement failed: {e}") from e


def parse_key_format(key_format: Union[KeyFormat, str]) -> KeyFormat:
    """
    Resolve a key format tag.

    Raises:
        InvalidKeyError: If the tag is not a supported key format
    """
    try:
        return KeyFormat(key_format)
    except ValueError as e:
        raise InvalidKeyError(f"Unsupported key format: {key_format}") from e


def _point_format(key_format: KeyFormat) -> serialization.PublicFormat:
    return _POINT_FORMATS[parse_key_format(key_format)]
