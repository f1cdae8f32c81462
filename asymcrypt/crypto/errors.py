"""
asymcrypt Error Types

Every failure raised by the engine derives from AsymmetricCryptoError,
so callers can catch the whole family with one clause.
"""


class AsymmetricCryptoError(Exception):
    """Base exception for asymmetric encryption and signing errors."""
    pass


class UnsupportedCurveError(AsymmetricCryptoError):
    """Raised when a curve tag is not one of the supported curves."""
    pass


class InvalidKeyError(AsymmetricCryptoError):
    """Raised when key bytes cannot be decoded for the selected curve."""
    pass


class InvalidEnvelopeError(AsymmetricCryptoError):
    """Raised when an encrypted value is malformed or cannot be parsed."""
    pass


class AuthenticationFailedError(AsymmetricCryptoError):
    """Raised when the MAC of an envelope does not match (corrupted or tampered)."""
    pass


class SchemeMismatchError(AsymmetricCryptoError):
    """Raised when an envelope's scheme differs from the resolved scheme."""
    pass


class MissingStrategyError(AsymmetricCryptoError):
    """Raised when a required custom scheme or generator is not supplied."""
    pass


class CipherError(AsymmetricCryptoError):
    """Raised for unknown ciphers, bad key/IV lengths or bad padding."""
    pass
