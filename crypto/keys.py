"""
Key Management and Derivation for NIP13

This module handles Ed25519 private/public key operations, SLIP-10
hierarchical derivation from BIP39 seeds, and the hash functions the
ledger uses to derive addresses and identifiers.

References:
- BIP39: https://github.com/bitcoin/bips/blob/master/bip-0039.mediawiki
- SLIP-10: https://github.com/satoshilabs/slips/blob/master/slip-0010.md
"""

import hashlib
import hmac
from typing import List, Optional

from Crypto.Hash import RIPEMD160
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from mnemonic import Mnemonic

from .exceptions import (
    InvalidKeyError,
    DerivationError,
)


# SLIP-10 constants
SLIP10_ED25519_SEED = b"ed25519 seed"
HARDENED_OFFSET = 0x80000000

# Coin types registered for the ledger (SLIP-44)
COIN_TYPE_MAIN_NET = 4343
COIN_TYPE_TEST_NET = 1


def sha3_256(data: bytes) -> bytes:
    """Compute SHA3-256 digest."""
    return hashlib.sha3_256(data).digest()


def ripemd160(data: bytes) -> bytes:
    """Compute RIPEMD160 digest."""
    return RIPEMD160.new(data).digest()


def hash160(data: bytes) -> bytes:
    """
    Compute RIPEMD160(SHA3-256(data)), the ledger's public key hash.

    Args:
        data: Input data to hash

    Returns:
        20-byte digest
    """
    return ripemd160(sha3_256(data))


class PrivateKey:
    """
    Wrapper for Ed25519 private key operations.
    """

    def __init__(self, key_bytes: Optional[bytes] = None):
        """
        Initialize private key.

        Args:
            key_bytes: 32-byte private key. If None, generates random key.
        """
        if key_bytes is None:
            self._key = Ed25519PrivateKey.generate()
            return

        if not isinstance(key_bytes, bytes) or len(key_bytes) != 32:
            raise InvalidKeyError("Private key must be 32 bytes")

        self._key = Ed25519PrivateKey.from_private_bytes(key_bytes)

    @classmethod
    def from_hex(cls, key_hex: str) -> 'PrivateKey':
        """Create private key from hex string."""
        try:
            return cls(bytes.fromhex(key_hex))
        except ValueError as e:
            raise InvalidKeyError(f"Invalid private key hex: {e}")

    @property
    def bytes(self) -> bytes:
        """Get private key as bytes."""
        return self._key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )

    @property
    def hex(self) -> str:
        """Get private key as hex string."""
        return self.bytes.hex()

    def public_key(self) -> 'PublicKey':
        """Get corresponding public key."""
        raw = self._key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        return PublicKey(raw)


class PublicKey:
    """
    Wrapper for a raw 32-byte Ed25519 public key.
    """

    def __init__(self, key_data: bytes):
        if not isinstance(key_data, bytes) or len(key_data) != 32:
            raise InvalidKeyError("Public key must be 32 bytes")
        self._key = key_data

    @classmethod
    def from_hex(cls, key_hex: str) -> 'PublicKey':
        """Create public key from hex string."""
        try:
            return cls(bytes.fromhex(key_hex))
        except ValueError as e:
            raise InvalidKeyError(f"Invalid public key hex: {e}")

    @property
    def bytes(self) -> bytes:
        """Get public key as bytes."""
        return self._key

    @property
    def hex(self) -> str:
        """Get public key as upper-case hex string."""
        return self._key.hex().upper()

    def __eq__(self, other) -> bool:
        return isinstance(other, PublicKey) and self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __repr__(self) -> str:
        return f"PublicKey({self.hex})"


class ExtendedKey:
    """
    SLIP-10 extended key for Ed25519.

    Ed25519 only supports hardened derivation, so every child index must
    be at least ``HARDENED_OFFSET``.
    """

    def __init__(self, key: PrivateKey, chain_code: bytes, depth: int = 0,
                 child_number: int = 0):
        """
        Initialize extended key.

        Args:
            key: Private key
            chain_code: 32-byte chain code for derivation
            depth: Depth in derivation tree
            child_number: Child number
        """
        if not isinstance(chain_code, bytes) or len(chain_code) != 32:
            raise DerivationError("Chain code must be 32 bytes")
        if depth < 0 or depth > 255:
            raise DerivationError("Depth must be 0-255")

        self.key = key
        self.chain_code = chain_code
        self.depth = depth
        self.child_number = child_number

    def public_key(self) -> PublicKey:
        return self.key.public_key()

    def derive_child(self, index: int) -> 'ExtendedKey':
        """
        Derive hardened child key at given index.

        Args:
            index: Child index, must be >= 2^31

        Returns:
            Extended child key
        """
        if index < HARDENED_OFFSET or index > 0xFFFFFFFF:
            raise DerivationError(f"Ed25519 derivation requires hardened index, got {index}")

        data = b'\x00' + self.key.bytes + index.to_bytes(4, 'big')
        I = hmac.new(self.chain_code, data, hashlib.sha512).digest()

        return ExtendedKey(
            key=PrivateKey(I[:32]),
            chain_code=I[32:],
            depth=self.depth + 1,
            child_number=index
        )

    def derive_path(self, path: str) -> 'ExtendedKey':
        """
        Derive key from derivation path.

        Args:
            path: Derivation path like "m/44'/4343'/0'/0'/0'"

        Returns:
            Extended key at path
        """
        current_key = self
        for index in parse_derivation_path(path):
            current_key = current_key.derive_child(index)
        return current_key


def generate_mnemonic(strength: int = 256) -> str:
    """
    Generate BIP39 mnemonic phrase.

    Args:
        strength: Entropy strength in bits (128, 160, 192, 224, 256)

    Returns:
        Mnemonic phrase
    """
    if strength not in [128, 160, 192, 224, 256]:
        raise DerivationError("Strength must be 128, 160, 192, 224, or 256 bits")

    mnemo = Mnemonic("english")
    return mnemo.generate(strength=strength)


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """
    Convert mnemonic to seed using BIP39.

    Args:
        mnemonic: BIP39 mnemonic phrase
        passphrase: Optional passphrase

    Returns:
        64-byte seed
    """
    mnemo = Mnemonic("english")

    if not mnemo.check(mnemonic):
        raise DerivationError("Invalid mnemonic phrase")

    return mnemo.to_seed(mnemonic, passphrase)


def seed_to_master_key(seed: bytes) -> ExtendedKey:
    """
    Generate SLIP-10 master extended key from seed.

    Args:
        seed: BIP39 seed (typically 64 bytes)

    Returns:
        Master extended private key
    """
    if len(seed) < 16 or len(seed) > 64:
        raise DerivationError("Seed must be 16-64 bytes")

    I = hmac.new(SLIP10_ED25519_SEED, seed, hashlib.sha512).digest()
    return ExtendedKey(key=PrivateKey(I[:32]), chain_code=I[32:])


def derive_key_from_path(mnemonic: str, path: str, passphrase: str = "") -> ExtendedKey:
    """
    Derive key from mnemonic and derivation path.

    Args:
        mnemonic: BIP39 mnemonic phrase
        path: Derivation path
        passphrase: Optional passphrase

    Returns:
        Extended key at path
    """
    seed = mnemonic_to_seed(mnemonic, passphrase)
    master_key = seed_to_master_key(seed)
    return master_key.derive_path(path)


def parse_derivation_path(path: str) -> List[int]:
    """
    Parse derivation path into list of integers.

    Args:
        path: Derivation path like "m/44'/4343'/0'/0'/0'"

    Returns:
        List of derivation indices
    """
    if not isinstance(path, str) or not path.startswith('m/'):
        raise DerivationError("Path must start with 'm/'")

    indices = []
    for part in path[2:].split('/'):
        hardened = part.endswith("'")
        digits = part[:-1] if hardened else part

        if not digits.isdigit():
            raise DerivationError(f"Invalid path level: {part!r}")

        index = int(digits)
        if index >= HARDENED_OFFSET:
            raise DerivationError(f"Path level out of range: {part!r}")

        indices.append(index + HARDENED_OFFSET if hardened else index)

    return indices
