#!/usr/bin/env python3
"""
asymcrypt - Setup Script

For development installation:
    pip install -e .[dev]
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read version from package
version = "0.1.0"

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text() if readme_path.exists() else ""

setup(
    name="asymcrypt",
    version=version,
    description="ECIES public-key encryption, onion encryption and signing",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="asymcrypt Project",
    license="MIT",

    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",

    install_requires=[
        "cryptography>=43.0",
        "PyNaCl>=1.5",
        "toml>=0.10",
    ],

    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=3.0",
            "black>=22.0",
            "mypy>=0.9",
        ],
    },

    entry_points={
        "console_scripts": [
            "asymctl=asymctl.main:main",
        ],
    },

    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Security :: Cryptography",
    ],

    keywords="ecies ecdh secp256k1 x25519 encryption onion signing",
)
