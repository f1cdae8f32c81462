#!/usr/bin/env python3
"""
asymctl - asymcrypt command line client

Command-line interface for key generation, encryption, onion
encryption and signing.

Usage:
    asymctl keygen          - Generate a key pair
    asymctl encrypt         - Encrypt a message for a public key
    asymctl decrypt         - Decrypt an envelope with a private key
    asymctl encrypt-multi   - Onion-encrypt for several public keys
    asymctl decrypt-multi   - Unwrap an onion with several private keys
    asymctl sign            - Sign a message
    asymctl verify          - Verify a signature
"""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from asymcrypt import __version__
from asymcrypt.config import Config, default_config_path
from asymcrypt.crypto import (
    AsymmetricCryptoError,
    CustomAsymmetricScheme,
    EciesOptions,
    decrypt_with_private_key,
    decrypt_with_private_keys,
    encrypt_with_public_key,
    encrypt_with_public_keys,
    generate_key_pair,
    sign,
    verify_signed_with_public_key,
)


logger = logging.getLogger("asymctl")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(config: Config, verbose: bool = False) -> None:
    """Configure root logging from config (DEBUG when verbose)."""
    logging.basicConfig(level=config.log_level_value, format=LOG_FORMAT)
    if config.log_file:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def read_value(value: str) -> str:
    """Return the argument, or stdin when the argument is '-'."""
    if value == "-":
        return sys.stdin.read().strip()
    return value


class AsymCtl:
    """asymctl CLI application."""

    def __init__(self, options: EciesOptions):
        """Initialize CLI with the ECIES options for every command."""
        self.options = options

    def keygen(self) -> int:
        """Generate a key pair for the configured curve."""
        pair = generate_key_pair(self.options.curve_type, self.options.key_format)
        print(json.dumps({"publicKey": pair.public_key, "privateKey": pair.private_key}, indent=2))
        return 0

    def encrypt(self, public_key: str, message: str, scheme: Optional[str] = None) -> int:
        """Encrypt a message for one public key."""
        envelope = encrypt_with_public_key(
            public_key,
            read_value(message),
            self.options,
            CustomAsymmetricScheme(scheme=scheme),
        )
        print(envelope.to_json())
        return 0

    def decrypt(self, private_key: str, envelope: str, scheme: Optional[str] = None) -> int:
        """Decrypt an envelope."""
        plaintext = decrypt_with_private_key(
            read_value(envelope),
            private_key,
            self.options,
            CustomAsymmetricScheme(scheme=scheme),
        )
        print(plaintext)
        return 0

    def encrypt_multi(self, message: str, public_keys: List[str], show_all: bool = False) -> int:
        """Onion-encrypt a message, innermost key first."""
        results = encrypt_with_public_keys(read_value(message), public_keys, self.options)
        if show_all:
            print(json.dumps([r.to_dict() for r in results], indent=2))
        else:
            print(results[-1].to_json())
        return 0

    def decrypt_multi(self, envelope: str, private_keys: List[str]) -> int:
        """Unwrap an onion; keys in the same order as used to encrypt."""
        print(decrypt_with_private_keys(read_value(envelope), private_keys, self.options))
        return 0

    def sign(self, private_key: str, message: str) -> int:
        """Sign a message."""
        print(sign(read_value(message), private_key))
        return 0

    def verify(self, public_key: str, message: str, signature: str) -> int:
        """Verify a signature."""
        if verify_signed_with_public_key(read_value(message), public_key, signature):
            print("valid")
            return 0
        print("invalid")
        return 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="asymctl",
        description="asymcrypt command line client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  keygen          Generate a key pair
  encrypt         Encrypt a message for a public key
  decrypt         Decrypt an envelope with a private key
  encrypt-multi   Onion-encrypt for several public keys
  decrypt-multi   Unwrap an onion with several private keys
  sign            Sign a message
  verify          Verify a signature

Examples:
  asymctl keygen --curve ed25519
  asymctl encrypt 04a1b2... "Hello!"
  asymctl encrypt 04a1b2... "Hello!" | asymctl decrypt 5f3c... -
  asymctl encrypt-multi "secret" PUB_A PUB_B PUB_C
  asymctl decrypt-multi - PRIV_A PRIV_B PRIV_C
  asymctl sign 5f3c... "message"
""",
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help=f"Configuration file path (default: {default_config_path()})",
    )
    parser.add_argument(
        "--curve",
        help="Curve type (secp256k1, ed25519)",
    )
    parser.add_argument(
        "--cipher",
        help="Symmetric cipher (e.g. aes-128-ecb, aes-256-ctr)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"asymctl {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    # keygen command
    subparsers.add_parser("keygen", help="Generate a key pair")

    # encrypt command
    encrypt_parser = subparsers.add_parser("encrypt", help="Encrypt a message")
    encrypt_parser.add_argument("public_key", help="Recipient public key (hex)")
    encrypt_parser.add_argument("message", help="Message to encrypt ('-' reads stdin)")
    encrypt_parser.add_argument("--scheme", help="Custom scheme name")

    # decrypt command
    decrypt_parser = subparsers.add_parser("decrypt", help="Decrypt an envelope")
    decrypt_parser.add_argument("private_key", help="Recipient private key (hex)")
    decrypt_parser.add_argument("envelope", help="Envelope JSON ('-' reads stdin)")
    decrypt_parser.add_argument("--scheme", help="Custom scheme name")

    # encrypt-multi command
    multi_enc_parser = subparsers.add_parser("encrypt-multi", help="Onion-encrypt a message")
    multi_enc_parser.add_argument("message", help="Message to encrypt ('-' reads stdin)")
    multi_enc_parser.add_argument("public_keys", nargs="+", help="Public keys, innermost first")
    multi_enc_parser.add_argument(
        "--all",
        action="store_true",
        help="Print every layer, not just the outermost",
    )

    # decrypt-multi command
    multi_dec_parser = subparsers.add_parser("decrypt-multi", help="Unwrap an onion")
    multi_dec_parser.add_argument("envelope", help="Envelope JSON ('-' reads stdin)")
    multi_dec_parser.add_argument(
        "private_keys",
        nargs="+",
        help="Private keys in the same order as the public keys used to encrypt",
    )

    # sign command
    sign_parser = subparsers.add_parser("sign", help="Sign a message")
    sign_parser.add_argument("private_key", help="secp256k1 private key (hex)")
    sign_parser.add_argument("message", help="Message to sign ('-' reads stdin)")

    # verify command
    verify_parser = subparsers.add_parser("verify", help="Verify a signature")
    verify_parser.add_argument("public_key", help="secp256k1 public key (hex)")
    verify_parser.add_argument("message", help="Signed message ('-' reads stdin)")
    verify_parser.add_argument("signature", help="Signature (hex)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = Config.load(args.config)
        if args.curve:
            config.ecies.curve_type = args.curve
        if args.cipher:
            config.ecies.symmetric_cipher_type = args.cipher
        config.validate()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config, verbose=args.verbose)
    logger.debug(f"Using config {config.config_path}")

    cli = AsymCtl(config.to_options())

    try:
        if args.command == "keygen":
            return cli.keygen()
        elif args.command == "encrypt":
            return cli.encrypt(args.public_key, args.message, scheme=args.scheme)
        elif args.command == "decrypt":
            return cli.decrypt(args.private_key, args.envelope, scheme=args.scheme)
        elif args.command == "encrypt-multi":
            return cli.encrypt_multi(args.message, args.public_keys, show_all=args.all)
        elif args.command == "decrypt-multi":
            return cli.decrypt_multi(args.envelope, args.private_keys)
        elif args.command == "sign":
            return cli.sign(args.private_key, args.message)
        elif args.command == "verify":
            return cli.verify(args.public_key, args.message, args.signature)
    except (AsymmetricCryptoError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
