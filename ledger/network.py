"""
NIP13 - Network Types and Addresses

This module defines ledger network types and the address format: one
network byte, the 20-byte public key hash and a 3-byte checksum, rendered
as unpadded base32 ("plain") or hex ("encoded").
"""

import base64
from enum import IntEnum
from typing import Union

from crypto.keys import PublicKey, hash160, sha3_256, COIN_TYPE_MAIN_NET, COIN_TYPE_TEST_NET

from .exceptions import InvalidAddressError


ADDRESS_RAW_SIZE = 24
ADDRESS_PLAIN_SIZE = 39
CHECKSUM_SIZE = 3


class NetworkType(IntEnum):
    """Ledger network identifiers."""
    MAIN_NET = 104
    TEST_NET = 152

    @property
    def coin_type(self) -> int:
        """SLIP-44 coin type used for HD derivation on this network."""
        return COIN_TYPE_MAIN_NET if self is NetworkType.MAIN_NET else COIN_TYPE_TEST_NET


class Address:
    """Ledger account address."""

    def __init__(self, raw: bytes):
        if not isinstance(raw, bytes) or len(raw) != ADDRESS_RAW_SIZE:
            raise InvalidAddressError(f"Address must be {ADDRESS_RAW_SIZE} bytes")

        try:
            NetworkType(raw[0])
        except ValueError:
            raise InvalidAddressError(f"Unknown network byte: {raw[0]}")

        if sha3_256(raw[:-CHECKSUM_SIZE])[:CHECKSUM_SIZE] != raw[-CHECKSUM_SIZE:]:
            raise InvalidAddressError("Address checksum mismatch")

        self._raw = raw

    @classmethod
    def from_public_key(cls, public_key: Union[PublicKey, str], network_type: NetworkType) -> 'Address':
        """
        Derive the address of a public key on a network.

        Args:
            public_key: Public key (wrapper or hex)
            network_type: Target network

        Returns:
            Derived address
        """
        if isinstance(public_key, str):
            public_key = PublicKey.from_hex(public_key)

        body = bytes([int(network_type)]) + hash160(public_key.bytes)
        checksum = sha3_256(body)[:CHECKSUM_SIZE]
        return cls(body + checksum)

    @classmethod
    def from_plain(cls, plain: str) -> 'Address':
        """Parse base32 address (dashes allowed)."""
        cleaned = plain.replace('-', '').strip().upper()
        if len(cleaned) != ADDRESS_PLAIN_SIZE:
            raise InvalidAddressError(f"Plain address must be {ADDRESS_PLAIN_SIZE} characters")

        try:
            raw = base64.b32decode(cleaned + '=')
        except ValueError as e:
            raise InvalidAddressError(f"Invalid base32 address: {e}")

        return cls(raw)

    @classmethod
    def from_encoded(cls, encoded: str) -> 'Address':
        """Parse hex-encoded address as returned by REST endpoints."""
        try:
            raw = bytes.fromhex(encoded)
        except ValueError as e:
            raise InvalidAddressError(f"Invalid hex address: {e}")

        return cls(raw)

    @classmethod
    def parse(cls, value: Union['Address', str]) -> 'Address':
        """Accept an address in any supported representation."""
        if isinstance(value, Address):
            return value
        if isinstance(value, str) and len(value) == ADDRESS_RAW_SIZE * 2:
            return cls.from_encoded(value)
        if isinstance(value, str):
            return cls.from_plain(value)
        raise InvalidAddressError(f"Unsupported address value: {value!r}")

    @property
    def raw(self) -> bytes:
        return self._raw

    @property
    def network_type(self) -> NetworkType:
        return NetworkType(self._raw[0])

    @property
    def plain(self) -> str:
        return base64.b32encode(self._raw + b'\x00').decode('ascii')[:ADDRESS_PLAIN_SIZE]

    @property
    def encoded(self) -> str:
        return self._raw.hex().upper()

    def pretty(self) -> str:
        """Dash-separated plain address for display."""
        plain = self.plain
        return '-'.join(plain[i:i + 6] for i in range(0, len(plain), 6))

    def __eq__(self, other) -> bool:
        return isinstance(other, Address) and self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    def __str__(self) -> str:
        return self.plain

    def __repr__(self) -> str:
        return f"Address({self.plain})"
