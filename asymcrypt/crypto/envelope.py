"""
asymcrypt Envelope Encryption

ECIES encryption for a single recipient.

Protocol (encrypt):
1. Generate an ephemeral key pair on the recipient's curve
2. Compute the shared secret S with the recipient's public key
3. Derive Ke || Km from S, S1 and the ephemeral public key
4. Encrypt: c = E(Ke; m)
5. Tag: d = MAC(Km; c || S2)

Envelope format (JSON, hex-encoded fields):
    {"iv", "publicKey", "ephemPublicKey", "ciphertext", "mac", "scheme"?}

publicKey is informational only and is not checked on decryption.

SECURITY NOTES:
- A fresh ephemeral key per envelope
- The tag is recomputed from the re-derived keys and compared in
  constant time before anything is decrypted
- A declared scheme must match the resolved scheme (no downgrade)
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from .cipher import symmetric_decrypt, symmetric_encrypt
from .errors import (
    AuthenticationFailedError,
    CipherError,
    InvalidEnvelopeError,
    SchemeMismatchError,
)
from .keys import agree_as_receiver, agree_as_sender, hex_to_bytes
from .options import OptionsLike, compose_options, resolve_scheme
from .primitives import constant_time_compare
from .strategy import CustomAsymmetricScheme, require_custom_scheme


logger = logging.getLogger(__name__)


# Oversimplified check, only meant to catch a wrong string being passed in
_ENVELOPE_STRING_PATTERN = re.compile(
    r"^.+publicKey.+ephemPublicKey.+ciphertext.+mac.+$",
    re.IGNORECASE | re.DOTALL,
)

_REQUIRED_FIELDS = ("publicKey", "ephemPublicKey", "ciphertext", "mac")


@dataclass(frozen=True)
class EncryptedEnvelope:
    """
    Result of single-recipient encryption.

    All byte fields are hex strings. iv is None when the cipher
    mode uses no IV; scheme is None when no scheme was resolved.
    """
    public_key: str
    ephem_public_key: str
    ciphertext: str
    mac: str
    iv: Optional[str] = None
    scheme: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Wire-format mapping (camelCase field names)."""
        data = {
            "iv": self.iv,
            "publicKey": self.public_key,
            "ephemPublicKey": self.ephem_public_key,
            "ciphertext": self.ciphertext,
            "mac": self.mac,
        }
        if self.scheme:
            data["scheme"] = self.scheme
        return data

    def to_json(self) -> str:
        """Serialize to compact JSON text."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'EncryptedEnvelope':
        """
        Parse a wire-format mapping.

        Raises:
            InvalidEnvelopeError: If a required field is missing or not a string
        """
        # ciphertext may legitimately be empty (stream mode, empty plaintext)
        missing = [name for name in _REQUIRED_FIELDS if data.get(name) is None]
        if missing:
            raise InvalidEnvelopeError(f"Encrypted value is missing field(s): {', '.join(missing)}")

        for name in _REQUIRED_FIELDS + ("iv", "scheme"):
            value = data.get(name)
            if value is not None and not isinstance(value, str):
                raise InvalidEnvelopeError(f"Encrypted value field {name} must be a string")

        return cls(
            public_key=data["publicKey"],
            ephem_public_key=data["ephemPublicKey"],
            ciphertext=data["ciphertext"],
            mac=data["mac"],
            iv=data.get("iv") or None,
            scheme=data.get("scheme") or None,
        )

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> 'EncryptedEnvelope':
        """
        Parse JSON text.

        Raises:
            InvalidEnvelopeError: If the text is not a JSON envelope object
        """
        try:
            data = json.loads(text)
        except ValueError as e:
            raise InvalidEnvelopeError(f"Encrypted value is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise InvalidEnvelopeError("Encrypted value must be a JSON object")
        return cls.from_dict(data)


EnvelopeLike = Union[EncryptedEnvelope, Mapping[str, Any], str, bytes]


def is_asym_encrypted_data_string(value: Any) -> bool:
    """
    Check that a value looks like a stringified envelope.

    The text must contain publicKey, ephemPublicKey, ciphertext and mac
    in that order. This is a syntactic pre-check only; parsing may
    still fail later.
    """
    if not isinstance(value, str):
        return False
    return _ENVELOPE_STRING_PATTERN.match(value) is not None


def to_asym_encrypted_data_string(value: Any) -> str:
    """
    Ensure a value is a well-formed stringified envelope.

    Raises:
        InvalidEnvelopeError: If the value fails the pre-check
    """
    if is_asym_encrypted_data_string(value):
        return value
    raise InvalidEnvelopeError(f"Not valid asymmetric encrypted data string: {value!r}")


def ensure_envelope(value: EnvelopeLike) -> EncryptedEnvelope:
    """
    Normalize an envelope object, mapping or JSON text to EncryptedEnvelope.

    Raises:
        InvalidEnvelopeError: If the value cannot be interpreted as an envelope
    """
    if isinstance(value, EncryptedEnvelope):
        return value
    if isinstance(value, Mapping):
        return EncryptedEnvelope.from_dict(value)
    if isinstance(value, (bytes, bytearray)):
        try:
            value = bytes(value).decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidEnvelopeError(f"Encrypted value is not UTF-8 text: {e}") from e
    if isinstance(value, str):
        return EncryptedEnvelope.from_json(to_asym_encrypted_data_string(value))
    raise InvalidEnvelopeError(f"Unsupported encrypted value type: {type(value).__name__}")


def encrypt_with_public_key(
    public_key: str,
    plaintext: Union[str, bytes],
    options: OptionsLike,
    custom_scheme: CustomAsymmetricScheme,
) -> EncryptedEnvelope:
    """
    Encrypt plaintext for the holder of a public key.

    Args:
        public_key: Recipient public key (hex)
        plaintext: Text (UTF-8 encoded) or bytes to encrypt
        options: ECIES options, or None for the defaults
        custom_scheme: Scheme name and generator overrides; required,
            pass CustomAsymmetricScheme() for the defaults

    Returns:
        EncryptedEnvelope: Envelope with hex-encoded fields

    Raises:
        MissingStrategyError: If custom_scheme is None
        UnsupportedCurveError: If the curve is not supported
        InvalidKeyError: If the public key cannot be decoded
        CipherError: If the cipher cannot be used with the derived key or IV
    """
    custom = require_custom_scheme(custom_scheme)
    use_options = compose_options(options)
    strategy = custom.strategy(use_options)
    message = plaintext.encode("utf-8") if isinstance(plaintext, str) else bytes(plaintext)

    agreement = agree_as_sender(
        hex_to_bytes(public_key, "public key"),
        use_options.curve_type,
        use_options.key_format,
    )

    keys = strategy.derive_keys(agreement.shared_secret, use_options.s1, agreement.ephem_public_key)
    ciphertext = symmetric_encrypt(
        use_options.symmetric_cipher_type,
        use_options.iv,
        keys.cipher_key,
        message,
    )
    mac = strategy.compute_mac(keys.mac_key, use_options.s2, ciphertext)

    scheme = resolve_scheme(custom.scheme, use_options)
    logger.debug(
        f"Encrypted {len(message)} bytes ({use_options.curve_type.value}, "
        f"{use_options.symmetric_cipher_type.value}, scheme={scheme})"
    )

    return EncryptedEnvelope(
        iv=use_options.iv.hex() if use_options.iv else None,
        public_key=public_key,
        ephem_public_key=agreement.ephem_public_key.hex(),
        ciphertext=ciphertext.hex(),
        mac=mac.hex(),
        scheme=scheme,
    )


def decrypt_with_private_key(
    encrypted: EnvelopeLike,
    private_key: str,
    options: OptionsLike,
    custom_scheme: CustomAsymmetricScheme,
    encoding: Optional[str] = "utf-8",
) -> Union[str, bytes]:
    """
    Decrypt an envelope with the recipient's private key.

    Args:
        encrypted: EncryptedEnvelope, wire mapping or JSON text
        private_key: Recipient private key (hex)
        options: ECIES options used for encryption, or None for the defaults
        custom_scheme: Scheme name and generator overrides; required,
            pass CustomAsymmetricScheme() for the defaults
        encoding: Text encoding of the plaintext, or None to return bytes

    Returns:
        Decrypted plaintext

    Raises:
        MissingStrategyError: If custom_scheme is None
        InvalidEnvelopeError: If the envelope is malformed
        SchemeMismatchError: If the envelope's scheme differs from the resolved one
        AuthenticationFailedError: If the MAC does not match
        CipherError: If the ciphertext cannot be decrypted,
            or the plaintext is not valid text in the given encoding
    """
    custom = require_custom_scheme(custom_scheme)
    use_options = compose_options(options)
    envelope = ensure_envelope(encrypted)

    scheme = resolve_scheme(custom.scheme, use_options)
    if envelope.scheme and envelope.scheme != scheme:
        raise SchemeMismatchError(
            f"Scheme does not match - expected {scheme}, encrypted value scheme: {envelope.scheme}"
        )

    ciphertext = _envelope_bytes(envelope.ciphertext, "ciphertext")
    mac = _envelope_bytes(envelope.mac, "mac")
    iv = _envelope_bytes(envelope.iv, "iv") if envelope.iv else b""
    ephem_public_key = _envelope_bytes(envelope.ephem_public_key, "ephemPublicKey")

    shared_secret = agree_as_receiver(
        hex_to_bytes(private_key, "private key"),
        envelope.ephem_public_key,
        use_options.curve_type,
    )

    strategy = custom.strategy(use_options)
    keys = strategy.derive_keys(shared_secret, use_options.s1, ephem_public_key)
    expected_mac = strategy.compute_mac(keys.mac_key, use_options.s2, ciphertext)

    if not constant_time_compare(mac, expected_mac):
        raise AuthenticationFailedError("MAC does not match - encrypted value may be corrupted")

    plaintext = symmetric_decrypt(use_options.symmetric_cipher_type, iv, keys.cipher_key, ciphertext)
    logger.debug(f"Decrypted {len(plaintext)} bytes (scheme={scheme})")

    if encoding is None:
        return plaintext
    try:
        return plaintext.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise CipherError(f"Decrypted plaintext is not valid {encoding} text: {e}") from e


def _envelope_bytes(value: str, name: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise InvalidEnvelopeError(f"Encrypted value field {name} is not valid hex: {e}") from e
