"""
NIP13 - Cryptographic Operations Module

This module provides cryptographic utilities for NIP13 including:
- Ed25519 key handling
- SLIP-10 hierarchical derivation from BIP39 mnemonics
- Ledger hash functions (SHA3-256, RIPEMD160)

Dependencies:
- cryptography: Ed25519 primitives
- mnemonic: BIP39 seed generation
- pycryptodome: RIPEMD160
"""

from .exceptions import (
    CryptoError,
    InvalidKeyError,
    DerivationError,
)

from .keys import (
    PrivateKey,
    PublicKey,
    ExtendedKey,
    derive_key_from_path,
    generate_mnemonic,
    mnemonic_to_seed,
    parse_derivation_path,
    sha3_256,
    hash160,
)

__all__ = [
    'CryptoError',
    'InvalidKeyError',
    'DerivationError',
    'PrivateKey',
    'PublicKey',
    'ExtendedKey',
    'derive_key_from_path',
    'generate_mnemonic',
    'mnemonic_to_seed',
    'parse_derivation_path',
    'sha3_256',
    'hash160',
]
