"""
asymcrypt Key Derivation and MAC Strategies

A KeyStrategy turns the ECDH shared secret into a cipher key and a
MAC key, and computes the authentication tag over the ciphertext.

    Ke || Km = H(S || S1 || ephemeral_public_key)
    d        = HMAC(Km; c || S2)

DefaultKeyStrategy implements the scheme above. CustomKeyStrategy
replaces either step with caller-supplied callables; a replaced step
bypasses the default logic entirely. The strategy is chosen per call
through CustomAsymmetricScheme.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from .errors import MissingStrategyError
from .options import ComposedOptions
from .primitives import (
    HashType,
    generate_message_hash,
    generate_message_mac,
    secure_zero,
)


@dataclass(frozen=True)
class DerivedKeys:
    """Cipher key and MAC key derived from one shared secret."""
    cipher_key: bytes
    mac_key: bytes


MessageKeyGenerator = Callable[[bytes, bytes, bytes], Any]
MacGenerator = Callable[[bytes, bytes, bytes], bytes]


class KeyStrategy(ABC):
    """Key derivation and MAC computation for one call."""

    @abstractmethod
    def derive_keys(self, shared_secret: bytes, s1: bytes, ephem_public_key: bytes) -> DerivedKeys:
        """Derive the cipher key and the MAC key."""

    @abstractmethod
    def compute_mac(self, mac_key: bytes, s2: bytes, ciphertext: bytes) -> bytes:
        """Compute the tag over ciphertext and s2."""


class DefaultKeyStrategy(KeyStrategy):
    """Hash-split key derivation and HMAC tag."""

    def __init__(
        self,
        hash_type: Union[HashType, str] = HashType.SHA256,
        mac_type: Union[HashType, str] = HashType.SHA256,
    ):
        self.hash_type = HashType(hash_type)
        self.mac_type = HashType(mac_type)

    def derive_keys(self, shared_secret: bytes, s1: bytes, ephem_public_key: bytes) -> DerivedKeys:
        material = bytearray(shared_secret)
        material += s1
        material += ephem_public_key
        try:
            digest = generate_message_hash(self.hash_type, bytes(material))
        finally:
            secure_zero(material)

        half = len(digest) // 2
        return DerivedKeys(cipher_key=digest[:half], mac_key=digest[half:])

    def compute_mac(self, mac_key: bytes, s2: bytes, ciphertext: bytes) -> bytes:
        return generate_message_mac(self.mac_type, mac_key, ciphertext + s2)


class CustomKeyStrategy(KeyStrategy):
    """
    Strategy built from caller callables.

    Either callable may be omitted, in which case that step is
    delegated to the fallback strategy.
    """

    def __init__(
        self,
        fallback: KeyStrategy,
        message_key_generator: Optional[MessageKeyGenerator] = None,
        mac_generator: Optional[MacGenerator] = None,
    ):
        self.fallback = fallback
        self.message_key_generator = message_key_generator
        self.mac_generator = mac_generator

    def derive_keys(self, shared_secret: bytes, s1: bytes, ephem_public_key: bytes) -> DerivedKeys:
        if self.message_key_generator is None:
            return self.fallback.derive_keys(shared_secret, s1, ephem_public_key)
        return _as_derived_keys(self.message_key_generator(shared_secret, s1, ephem_public_key))

    def compute_mac(self, mac_key: bytes, s2: bytes, ciphertext: bytes) -> bytes:
        if self.mac_generator is None:
            return self.fallback.compute_mac(mac_key, s2, ciphertext)
        return bytes(self.mac_generator(mac_key, s2, ciphertext))


@dataclass(frozen=True)
class CustomAsymmetricScheme:
    """
    Per-call scheme name and optional key/MAC generators.

    An empty CustomAsymmetricScheme() means: default scheme name,
    default derivation, default MAC.
    """
    scheme: Optional[str] = None
    message_key_generator: Optional[MessageKeyGenerator] = None
    mac_generator: Optional[MacGenerator] = None

    def strategy(self, options: ComposedOptions) -> KeyStrategy:
        """Select the key strategy for a call."""
        default = DefaultKeyStrategy(options.hash_cipher_type, options.mac_cipher_type)
        if self.message_key_generator is None and self.mac_generator is None:
            return default
        return CustomKeyStrategy(
            fallback=default,
            message_key_generator=self.message_key_generator,
            mac_generator=self.mac_generator,
        )


NO_CUSTOM_SCHEME = CustomAsymmetricScheme()


def require_custom_scheme(
    custom_scheme: Union[CustomAsymmetricScheme, Mapping[str, Any], None],
) -> CustomAsymmetricScheme:
    """
    Validate the required custom scheme argument.

    Raises:
        MissingStrategyError: If no custom scheme (not even an empty one) was given
    """
    if custom_scheme is None:
        raise MissingStrategyError(
            "custom_scheme is required - pass CustomAsymmetricScheme() to use the defaults"
        )
    if isinstance(custom_scheme, CustomAsymmetricScheme):
        return custom_scheme
    if isinstance(custom_scheme, Mapping):
        try:
            return CustomAsymmetricScheme(**custom_scheme)
        except TypeError as e:
            raise MissingStrategyError(f"Invalid custom scheme: {e}") from e
    raise MissingStrategyError(f"Invalid custom scheme type: {type(custom_scheme).__name__}")


def _as_derived_keys(result: Any) -> DerivedKeys:
    if isinstance(result, DerivedKeys):
        return result
    if isinstance(result, Mapping) and "cipher_key" in result and "mac_key" in result:
        return DerivedKeys(cipher_key=bytes(result["cipher_key"]), mac_key=bytes(result["mac_key"]))
    if isinstance(result, tuple) and len(result) == 2:
        return DerivedKeys(cipher_key=bytes(result[0]), mac_key=bytes(result[1]))
    raise MissingStrategyError(
        "Custom message key generator must return cipher_key and mac_key"
    )
