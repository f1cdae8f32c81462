"""
asymcrypt Configuration Management

Handles loading and validation of default ECIES options from a TOML file.

Example config.toml:

    log_level = "INFO"

    [ecies]
    curve_type = "secp256k1"
    symmetric_cipher_type = "aes-128-ecb"
    hash_cipher_type = "sha256"
    mac_cipher_type = "sha256"
    key_format = "uncompressed"
    scheme = ""
    s1 = ""
    s2 = ""
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from .crypto.cipher import SymmetricCipherType
from .crypto.keys import CurveType, KeyFormat
from .crypto.options import EciesOptions
from .crypto.primitives import HashType


# Default configuration path
DEFAULT_CONFIG_PATH = Path("~/.config/asymcrypt/config.toml").expanduser()

# Environment variable overriding the configuration path
CONFIG_PATH_ENV = "ASYMCRYPT_CONFIG"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class EciesConfig:
    """Default ECIES options."""
    curve_type: str = CurveType.SECP256K1.value
    symmetric_cipher_type: str = SymmetricCipherType.AES_128_ECB.value
    hash_cipher_type: str = HashType.SHA256.value
    mac_cipher_type: str = HashType.SHA256.value
    key_format: str = KeyFormat.UNCOMPRESSED.value
    scheme: str = ""
    s1: str = ""
    s2: str = ""


@dataclass
class Config:
    """
    Complete asymcrypt configuration.
    """
    ecies: EciesConfig = field(default_factory=EciesConfig)

    # Paths
    config_path: Path = field(default_factory=lambda: DEFAULT_CONFIG_PATH)

    # Logging
    log_level: str = "WARNING"
    log_file: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """
        Load configuration from file.

        Args:
            config_path: Path to config file (default: $ASYMCRYPT_CONFIG or
                ~/.config/asymcrypt/config.toml)

        Returns:
            Loaded configuration (defaults if the file does not exist)

        Raises:
            ValueError: If the file exists but cannot be parsed
        """
        path = config_path or default_config_path()
        config = cls()
        config.config_path = path

        if not path.exists():
            return config

        try:
            data = toml.load(path)
        except (OSError, toml.TomlDecodeError) as e:
            raise ValueError(f"Failed to load config {path}: {e}") from e

        config._apply_dict(data)
        return config

    def _apply_dict(self, data: Dict[str, Any]) -> None:
        """Apply dictionary data to config."""
        # Top-level settings
        if "log_level" in data:
            self.log_level = str(data["log_level"]).upper()
        if "log_file" in data:
            self.log_file = Path(data["log_file"])

        # ECIES config
        if "ecies" in data:
            e = data["ecies"]
            for name in (
                "curve_type",
                "symmetric_cipher_type",
                "hash_cipher_type",
                "mac_cipher_type",
                "key_format",
                "scheme",
                "s1",
                "s2",
            ):
                if name in e:
                    setattr(self.ecies, name, str(e[name]))

    def validate(self) -> None:
        """
        Validate configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        _check_choice("curve type", self.ecies.curve_type, CurveType)
        _check_choice("symmetric cipher", self.ecies.symmetric_cipher_type, SymmetricCipherType)
        _check_choice("hash type", self.ecies.hash_cipher_type, HashType)
        _check_choice("MAC hash type", self.ecies.mac_cipher_type, HashType)
        _check_choice("key format", self.ecies.key_format, KeyFormat)

        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

    def to_options(self) -> EciesOptions:
        """Build ECIES options from the configured defaults."""
        return EciesOptions(
            hash_cipher_type=self.ecies.hash_cipher_type,
            mac_cipher_type=self.ecies.mac_cipher_type,
            curve_type=self.ecies.curve_type,
            symmetric_cipher_type=self.ecies.symmetric_cipher_type,
            key_format=self.ecies.key_format,
            s1=self.ecies.s1 or None,
            s2=self.ecies.s2 or None,
            scheme=self.ecies.scheme or None,
        )

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return getattr(logging, self.log_level)


def default_config_path() -> Path:
    """Configuration path from the environment, else the default."""
    env = os.environ.get(CONFIG_PATH_ENV)
    return Path(env) if env else DEFAULT_CONFIG_PATH


def _check_choice(label: str, value: str, choices) -> None:
    valid = [c.value for c in choices]
    if value not in valid:
        raise ValueError(f"Invalid {label}: {value} (expected one of {', '.join(valid)})")
