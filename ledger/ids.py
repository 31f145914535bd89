"""
NIP13 - Identifier Generation

Ledger-defined derivations for mosaic ids (nonce + owner address),
namespace ids (parent id + name) and uint64 metadata/restriction keys.
All of them read the first 8 bytes of a SHA3-256 digest as a
little-endian uint64.
"""

import re
import struct
from typing import List, Union

from crypto.keys import sha3_256

from .exceptions import InvalidIdentifierError, InvalidNamespaceError
from .network import Address


NONCE_SIZE = 4
NAMESPACE_NAME_MAX_LENGTH = 64
NAMESPACE_NAME_PATTERN = re.compile(r'^[a-z0-9][a-z0-9_-]*$')

_HIGH_BIT = 1 << 63


def _digest_uint64(data: bytes) -> int:
    return struct.unpack('<Q', sha3_256(data)[:8])[0]


def generate_mosaic_id(nonce: bytes, owner: Address) -> int:
    """
    Derive a mosaic id from a 4-byte nonce and the owner address.

    Args:
        nonce: 4-byte mosaic nonce
        owner: Owner account address

    Returns:
        Mosaic id with the namespace bit cleared
    """
    if not isinstance(nonce, bytes) or len(nonce) != NONCE_SIZE:
        raise InvalidIdentifierError(f"Mosaic nonce must be {NONCE_SIZE} bytes")

    return _digest_uint64(nonce + owner.raw) & ~_HIGH_BIT


def validate_namespace_name(name: str) -> str:
    """Validate a single namespace segment."""
    if not name or len(name) > NAMESPACE_NAME_MAX_LENGTH:
        raise InvalidNamespaceError(
            f"Namespace name must be 1-{NAMESPACE_NAME_MAX_LENGTH} characters: {name!r}"
        )

    if not NAMESPACE_NAME_PATTERN.match(name):
        raise InvalidNamespaceError(f"Invalid namespace name: {name!r}")

    return name


def generate_namespace_id(name: str, parent_id: int = 0) -> int:
    """
    Derive a namespace id from its name and parent id.

    Args:
        name: Namespace segment
        parent_id: Parent namespace id (0 for root namespaces)

    Returns:
        Namespace id with the namespace bit set
    """
    validate_namespace_name(name)
    return _digest_uint64(struct.pack('<Q', parent_id) + name.encode('utf-8')) | _HIGH_BIT


def generate_namespace_path(full_name: str) -> List[int]:
    """
    Derive the ids of every level of a dot-separated namespace name.

    Args:
        full_name: Namespace name like "company.tokens.bond"

    Returns:
        List of namespace ids, root first
    """
    path = []
    parent_id = 0
    for part in full_name.split('.'):
        parent_id = generate_namespace_id(part, parent_id)
        path.append(parent_id)
    return path


def generate_uint64_key(key: str) -> int:
    """Derive the scoped uint64 key used by metadata and restrictions."""
    if not key:
        raise InvalidIdentifierError("Key must not be empty")
    return _digest_uint64(key.encode('utf-8')) | _HIGH_BIT


def id_to_hex(value: int) -> str:
    """Render a uint64 identifier as 16 upper-case hex characters."""
    return f"{value:016X}"


def hex_to_id(value: Union[str, int]) -> int:
    """Parse a 16-character hex identifier."""
    if isinstance(value, int):
        return value

    if not re.match(r'^[0-9a-fA-F]{16}$', value or ''):
        raise InvalidIdentifierError(f"Identifier must be 16 hex characters: {value!r}")
    return int(value, 16)
