"""
asymcrypt Cryptographic Module

Provides the cryptographic operations of asymcrypt:
- ECDH key agreement (secp256k1, X25519 for the ed25519 family)
- Key derivation and HMAC tags
- AES symmetric encryption (ECB, CBC, CTR)
- ECIES envelopes for one recipient
- Onion (layered) envelopes for several recipients
- Deterministic ECDSA signatures (secp256k1)

All implementations use the cryptography library (OpenSSL backend).
"""

from .errors import (
    AsymmetricCryptoError,
    UnsupportedCurveError,
    InvalidKeyError,
    InvalidEnvelopeError,
    AuthenticationFailedError,
    SchemeMismatchError,
    MissingStrategyError,
    CipherError,
)

from .primitives import (
    HashType,
    generate_message_hash,
    generate_message_mac,
    constant_time_compare,
)

from .keys import (
    CurveType,
    KeyFormat,
    KeyPair,
    agree_as_sender,
    agree_as_receiver,
    generate_key_pair,
    get_public_key,
)

from .cipher import (
    SymmetricCipherType,
    symmetric_encrypt,
    symmetric_decrypt,
)

from .options import (
    UNSET,
    EciesOptions,
    DEFAULT_ECIES_OPTIONS,
    compose_options,
    default_scheme,
)

from .strategy import (
    DerivedKeys,
    KeyStrategy,
    DefaultKeyStrategy,
    CustomKeyStrategy,
    CustomAsymmetricScheme,
    NO_CUSTOM_SCHEME,
)

from .envelope import (
    EncryptedEnvelope,
    encrypt_with_public_key,
    decrypt_with_private_key,
    ensure_envelope,
    is_asym_encrypted_data_string,
    to_asym_encrypted_data_string,
)

from .onion import (
    encrypt_with_public_keys,
    decrypt_with_private_keys,
)

from .signing import (
    sign,
    verify_signed_with_public_key,
)

__all__ = [
    # Errors
    'AsymmetricCryptoError',
    'UnsupportedCurveError',
    'InvalidKeyError',
    'InvalidEnvelopeError',
    'AuthenticationFailedError',
    'SchemeMismatchError',
    'MissingStrategyError',
    'CipherError',
    # Primitives
    'HashType',
    'generate_message_hash',
    'generate_message_mac',
    'constant_time_compare',
    # Keys
    'CurveType',
    'KeyFormat',
    'KeyPair',
    'agree_as_sender',
    'agree_as_receiver',
    'generate_key_pair',
    'get_public_key',
    # Cipher
    'SymmetricCipherType',
    'symmetric_encrypt',
    'symmetric_decrypt',
    # Options
    'UNSET',
    'EciesOptions',
    'DEFAULT_ECIES_OPTIONS',
    'compose_options',
    'default_scheme',
    # Strategies
    'DerivedKeys',
    'KeyStrategy',
    'DefaultKeyStrategy',
    'CustomKeyStrategy',
    'CustomAsymmetricScheme',
    'NO_CUSTOM_SCHEME',
    # Envelope
    'EncryptedEnvelope',
    'encrypt_with_public_key',
    'decrypt_with_private_key',
    'ensure_envelope',
    'is_asym_encrypted_data_string',
    'to_asym_encrypted_data_string',
    # Onion
    'encrypt_with_public_keys',
    'decrypt_with_private_keys',
    # Signing
    'sign',
    'verify_signed_with_public_key',
]
