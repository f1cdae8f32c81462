"""
asymcrypt Onion Encryption

Layered encryption across an ordered list of recipients.

Onion Structure:
    Layer 1 (innermost): plaintext encrypted for public_keys[0]
    Layer 2:             layer 1 envelope (JSON) encrypted for public_keys[1]
    ...
    Layer N (outermost): layer N-1 envelope encrypted for public_keys[N-1]

Unwrapping takes the private keys in the same order as the public
keys and applies them back to front, so the holder of the last key
peels the outermost layer first.

SECURITY NOTES:
- Each layer uses an independent ephemeral key
- Each layer is authenticated before the next one is exposed
"""

import logging
from typing import List, Optional, Sequence, Union

from .envelope import (
    EncryptedEnvelope,
    EnvelopeLike,
    decrypt_with_private_key,
    encrypt_with_public_key,
    is_asym_encrypted_data_string,
)
from .errors import InvalidEnvelopeError
from .options import OptionsLike
from .strategy import NO_CUSTOM_SCHEME


logger = logging.getLogger(__name__)


def encrypt_with_public_keys(
    plaintext: Union[str, bytes],
    public_keys: Sequence[str],
    options: OptionsLike = None,
) -> List[EncryptedEnvelope]:
    """
    Encrypt with each public key in turn, wrapping the previous result.

    Args:
        plaintext: Text or bytes to encrypt
        public_keys: Recipient public keys (hex), innermost first
        options: ECIES options applied to every layer

    Returns:
        List[EncryptedEnvelope]: One envelope per layer; the last one
        is the fully wrapped value to distribute

    Raises:
        ValueError: If no public keys are given
    """
    if not public_keys:
        raise ValueError("At least one public key is required")

    results: List[EncryptedEnvelope] = []
    value: Union[str, bytes] = plaintext
    for public_key in public_keys:
        envelope = encrypt_with_public_key(public_key, value, options, NO_CUSTOM_SCHEME)
        results.append(envelope)
        value = envelope.to_json()

    logger.debug(f"Built {len(results)}-layer onion")
    return results


def decrypt_with_private_keys(
    encrypted: EnvelopeLike,
    private_keys: Sequence[str],
    options: OptionsLike = None,
    encoding: Optional[str] = "utf-8",
) -> Union[str, bytes]:
    """
    Unwrap a value produced by encrypt_with_public_keys().

    Args:
        encrypted: Outermost envelope (object, mapping or JSON text)
        private_keys: Private keys (hex) in the same order as the public
            keys used to encrypt; they are applied in reverse
        options: ECIES options applied to every layer
        encoding: Text encoding of the innermost plaintext, or None to
            return it as bytes

    Returns:
        The original plaintext

    Raises:
        ValueError: If no private keys are given
        InvalidEnvelopeError: If an inner layer is not an envelope
        AuthenticationFailedError: If any layer fails its MAC check
        CipherError: If the innermost plaintext is not valid text in the
            given encoding
    """
    if not private_keys:
        raise ValueError("At least one private key is required")

    value: EnvelopeLike = encrypted
    layer = len(private_keys)
    for private_key in reversed(private_keys):
        if layer == 1:
            value = decrypt_with_private_key(value, private_key, options, NO_CUSTOM_SCHEME, encoding)
        else:
            inner = decrypt_with_private_key(value, private_key, options, NO_CUSTOM_SCHEME, None)
            value = _inner_envelope(inner, layer)
        layer -= 1

    logger.debug(f"Peeled {len(private_keys)}-layer onion")
    return value


def _inner_envelope(data: bytes, layer: int) -> str:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEnvelopeError(f"Layer {layer} did not decrypt to an inner envelope: {e}") from e
    if not is_asym_encrypted_data_string(text):
        raise InvalidEnvelopeError(f"Layer {layer} did not decrypt to an inner envelope")
    return text
