"""
NIP13 - Token Models

Value objects describing tokens and the parties that govern them:
operators and their roles, nonce-derived token identifiers, provenance
and the on-chain state read during synchronization.
"""

import re
from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ledger.accounts import PublicAccount
from ledger.exceptions import InvalidAddressError
from ledger.ids import generate_mosaic_id, id_to_hex, NONCE_SIZE
from ledger.network import Address, NetworkType


class TokenRole(IntEnum):
    """Ordinal role scale stored in the role restriction key."""
    GUEST = 1
    HOLDER = 2
    OPERATOR = 3


def _normalize_address(v: str) -> str:
    try:
        return Address.parse(v).plain
    except InvalidAddressError as e:
        raise ValueError(str(e))


class Operator(BaseModel):
    """Cosignatory of a token account, tagged with its role."""

    model_config = ConfigDict(frozen=True)

    public_key: str = Field(..., description="Operator public key (hex)")
    role: TokenRole = Field(default=TokenRole.OPERATOR)

    @field_validator('public_key')
    @classmethod
    def validate_public_key(cls, v):
        """Validate public key format."""
        if not re.match(r'^[a-fA-F0-9]{64}$', v):
            raise ValueError('Public key must be 64-character hex string')
        return v.upper()

    def to_public_account(self, network_type: NetworkType) -> PublicAccount:
        return PublicAccount.from_public_key(self.public_key, network_type)


class TokenIdentifier(BaseModel):
    """
    Nonce-based token identifier.

    The identifier is unique per (owner, nonce) pair and its ``id`` is the
    ledger mosaic id derived from both.
    """

    model_config = ConfigDict(frozen=True)

    nonce: str = Field(..., description="4-byte mosaic nonce (hex)")
    owner: str = Field(..., description="Owner account address")

    @field_validator('nonce')
    @classmethod
    def validate_nonce(cls, v):
        if not re.match(r'^[a-fA-F0-9]{%d}$' % (NONCE_SIZE * 2), v):
            raise ValueError(f'Nonce must be {NONCE_SIZE * 2}-character hex string')
        return v.upper()

    @field_validator('owner')
    @classmethod
    def validate_owner(cls, v):
        return _normalize_address(v)

    @classmethod
    def create(cls, nonce: bytes, owner: Address) -> 'TokenIdentifier':
        return cls(nonce=nonce.hex(), owner=owner.plain)

    @property
    def nonce_bytes(self) -> bytes:
        return bytes.fromhex(self.nonce)

    @property
    def owner_address(self) -> Address:
        return Address.from_plain(self.owner)

    @property
    def mosaic_id(self) -> int:
        return generate_mosaic_id(self.nonce_bytes, self.owner_address)

    @property
    def id(self) -> str:
        return id_to_hex(self.mosaic_id)

    def __str__(self) -> str:
        return self.id


class TokenSource(BaseModel):
    """Provenance tag of a token."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., min_length=1, max_length=128)
    network: Optional[str] = Field(None, description="Source network label")

    def __str__(self) -> str:
        return f"{self.network}:{self.source}" if self.network else self.source


class TokenInfo(BaseModel):
    """On-chain state of a token."""

    token_id: str
    supply: int = Field(default=0, ge=0)
    owner_address: str
    divisibility: int = Field(default=0, ge=0, le=6)
    flags: int = Field(default=0, ge=0)

    @field_validator('owner_address')
    @classmethod
    def validate_owner_address(cls, v):
        return _normalize_address(v)


class MultisigInfo(BaseModel):
    """Multisig state of an account."""

    account_address: str
    min_approval: int = Field(default=0, ge=0)
    min_removal: int = Field(default=0, ge=0)
    cosignatory_addresses: List[str] = Field(default_factory=list)

    @field_validator('account_address')
    @classmethod
    def validate_account_address(cls, v):
        return _normalize_address(v)

    @field_validator('cosignatory_addresses')
    @classmethod
    def validate_cosignatory_addresses(cls, v):
        return [_normalize_address(address) for address in v]

    def is_cosignatory(self, address: Address) -> bool:
        return address.plain in self.cosignatory_addresses
