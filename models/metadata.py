"""
NIP13 - Metadata Models

Key/value annotations attached to token accounts or tokens on-chain.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ledger.ids import generate_uint64_key, hex_to_id, id_to_hex
from ledger.exceptions import InvalidIdentifierError
from ledger.network import Address

from .token import _normalize_address


MAX_METADATA_VALUE_SIZE = 1024


class AccountMetadata(BaseModel):
    """Metadata entry attached to an account."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1, max_length=64)
    value: str = Field(default="")
    target_address: str

    @field_validator('target_address')
    @classmethod
    def validate_target_address(cls, v):
        return _normalize_address(v)

    @field_validator('value')
    @classmethod
    def validate_value(cls, v):
        if len(v.encode('utf-8')) > MAX_METADATA_VALUE_SIZE:
            raise ValueError(f'Metadata value exceeds {MAX_METADATA_VALUE_SIZE} bytes')
        return v

    @property
    def scoped_key(self) -> int:
        return generate_uint64_key(self.key)

    @property
    def address(self) -> Address:
        return Address.from_plain(self.target_address)


class TokenMetadata(AccountMetadata):
    """Metadata entry attached to a token."""

    token_id: str = Field(..., description="Token id (16 hex characters)")

    @field_validator('token_id')
    @classmethod
    def validate_token_id(cls, v):
        try:
            return id_to_hex(hex_to_id(v))
        except InvalidIdentifierError as e:
            raise ValueError(str(e))

    @property
    def mosaic_id(self) -> int:
        return hex_to_id(self.token_id)


def scoped_key_hex(key: str) -> str:
    """Render the scoped uint64 key of a metadata entry for REST lookups."""
    return id_to_hex(generate_uint64_key(key))
