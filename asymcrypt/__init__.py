"""
asymcrypt - Asymmetric Encryption Engine

Public-key encryption, multi-recipient onion encryption and message
signing, independent of any blockchain account or transaction logic.

This package contains:
- crypto/    : ECIES envelopes, onion layers, signing and primitives
- config.py  : TOML configuration for default ECIES options

Callers hand in already-validated hex key strings and use:
    encrypt_with_public_key / decrypt_with_private_key
    encrypt_with_public_keys / decrypt_with_private_keys
    sign / verify_signed_with_public_key
"""

__version__ = "0.1.0"

from .crypto import (
    AsymmetricCryptoError,
    UnsupportedCurveError,
    InvalidKeyError,
    InvalidEnvelopeError,
    AuthenticationFailedError,
    SchemeMismatchError,
    MissingStrategyError,
    CipherError,
    CurveType,
    KeyFormat,
    SymmetricCipherType,
    HashType,
    EciesOptions,
    DEFAULT_ECIES_OPTIONS,
    UNSET,
    CustomAsymmetricScheme,
    NO_CUSTOM_SCHEME,
    EncryptedEnvelope,
    encrypt_with_public_key,
    decrypt_with_private_key,
    encrypt_with_public_keys,
    decrypt_with_private_keys,
    is_asym_encrypted_data_string,
    to_asym_encrypted_data_string,
    generate_key_pair,
    get_public_key,
    sign,
    verify_signed_with_public_key,
)
