"""
asymcrypt Options Composer

Merges caller options with the immutable defaults and converts the
text inputs (iv, s1, s2) into bytes.

IV resolution:
- hex string      -> parsed bytes
- UNSET (default) -> empty, or 16 zero bytes when the cipher mode needs an IV
- None            -> empty, even when the mode needs an IV (legacy ECB-style
                     callers); CBC/CTR encryption then fails on the IV length

When no symmetric cipher is given, the default cipher is used and the
IV is always derived from it, whatever IV the caller passed.
"""

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Union

from .cipher import SymmetricCipherType, cipher_spec
from .errors import CipherError
from .keys import CurveType, KeyFormat, get_curve, parse_key_format
from .primitives import AES_BLOCK_SIZE, HashType, hash_algorithm


class _Unset:
    """Marker for "derive the IV from the cipher type"."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()


@dataclass(frozen=True)
class EciesOptions:
    """
    Caller-facing ECIES options.

    Fields left as None fall back to the defaults. iv uses UNSET
    for "not given" because None has its own meaning (no IV).
    """
    hash_cipher_type: Optional[Union[HashType, str]] = None
    mac_cipher_type: Optional[Union[HashType, str]] = None
    curve_type: Optional[Union[CurveType, str]] = None
    symmetric_cipher_type: Optional[Union[SymmetricCipherType, str]] = None
    key_format: Optional[Union[KeyFormat, str]] = None
    iv: Union[str, bytes, None, _Unset] = UNSET
    s1: Optional[Union[str, bytes]] = None
    s2: Optional[Union[str, bytes]] = None
    scheme: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'EciesOptions':
        """Build options from a mapping of field names (unknown keys rejected)."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown ECIES option(s): {', '.join(sorted(unknown))}")
        return cls(**dict(data))


DEFAULT_ECIES_OPTIONS = EciesOptions(
    hash_cipher_type=HashType.SHA256,
    mac_cipher_type=HashType.SHA256,
    curve_type=CurveType.SECP256K1,
    symmetric_cipher_type=SymmetricCipherType.AES_128_ECB,
    key_format=KeyFormat.UNCOMPRESSED,
)


@dataclass(frozen=True)
class ComposedOptions:
    """Fully populated options with byte-typed iv, s1 and s2."""
    hash_cipher_type: HashType
    mac_cipher_type: HashType
    curve_type: CurveType
    symmetric_cipher_type: SymmetricCipherType
    key_format: KeyFormat
    iv: bytes
    s1: bytes
    s2: bytes
    scheme: Optional[str] = None


OptionsLike = Union[EciesOptions, Mapping[str, Any], None]


def compose_options(
    options: OptionsLike = None,
    defaults: EciesOptions = DEFAULT_ECIES_OPTIONS,
) -> ComposedOptions:
    """
    Populate missing options with defaults and convert iv, s1, s2 to bytes.

    Args:
        options: Caller options (EciesOptions, mapping of field names, or None)
        defaults: Options used for every field the caller left unset

    Returns:
        ComposedOptions: Complete options for one call

    Raises:
        UnsupportedCurveError: If the curve is not supported
        CipherError: If a cipher or hash name, or the iv hex, is invalid
    """
    if options is None:
        options = EciesOptions()
    elif not isinstance(options, EciesOptions):
        options = EciesOptions.from_mapping(options)

    iv_in = options.iv
    cipher_type = options.symmetric_cipher_type
    if cipher_type is None:
        cipher_type = defaults.symmetric_cipher_type
        iv_in = UNSET

    cipher_spec(cipher_type)
    cipher_type = SymmetricCipherType(cipher_type)
    hash_type = _hash_type(_pick(options.hash_cipher_type, defaults.hash_cipher_type))
    mac_type = _hash_type(_pick(options.mac_cipher_type, defaults.mac_cipher_type))
    curve = get_curve(_pick(options.curve_type, defaults.curve_type))
    key_format = parse_key_format(_pick(options.key_format, defaults.key_format))

    return ComposedOptions(
        hash_cipher_type=hash_type,
        mac_cipher_type=mac_type,
        curve_type=curve.curve_type,
        symmetric_cipher_type=cipher_type,
        key_format=key_format,
        iv=_resolve_iv(iv_in, cipher_type),
        s1=_text_to_bytes(options.s1),
        s2=_text_to_bytes(options.s2),
        scheme=_pick(options.scheme, defaults.scheme),
    )


def default_scheme(curve_type: Union[CurveType, str]) -> str:
    """Return the default scheme name for a curve."""
    return get_curve(curve_type).default_scheme


def resolve_scheme(custom_scheme: Optional[str], options: ComposedOptions) -> str:
    """Custom scheme name, else the options scheme, else the curve default."""
    return custom_scheme or options.scheme or default_scheme(options.curve_type)


def empty_iv_for(cipher_type: Union[SymmetricCipherType, str]) -> bytes:
    """Compose the "no IV given" buffer for a cipher type."""
    if cipher_spec(cipher_type).requires_iv:
        return bytes(AES_BLOCK_SIZE)
    return b""


def _resolve_iv(iv_in: Union[str, bytes, None, _Unset], cipher_type: SymmetricCipherType) -> bytes:
    if iv_in is UNSET:
        return empty_iv_for(cipher_type)
    if iv_in is None or len(iv_in) == 0:
        # Explicit "no IV" overrides the mode's IV requirement
        return b""
    if isinstance(iv_in, (bytes, bytearray)):
        return bytes(iv_in)
    try:
        return bytes.fromhex(iv_in)
    except ValueError as e:
        raise CipherError(f"Invalid iv hex: {e}") from e


def _text_to_bytes(value: Optional[Union[str, bytes]]) -> bytes:
    if not value:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return value.encode("utf-8")


def _hash_type(value: Union[HashType, str]) -> HashType:
    hash_algorithm(value)
    return HashType(value)


def _pick(value, default):
    return default if value is None else value
