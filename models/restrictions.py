"""
NIP13 - Restriction Models

Access-control rules evaluated by the ledger at transfer time. Token
restrictions compare a role flag against a required ordinal role; account
restrictions whitelist or block tokens for an account's own balance.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ledger.exceptions import InvalidIdentifierError
from ledger.ids import generate_uint64_key, hex_to_id, id_to_hex
from ledger.network import Address
from ledger.transactions import AccountRestrictionFlags, MosaicRestrictionType

from .token import _normalize_address


# Comparison operators share the ledger encoding
TokenRestrictionType = MosaicRestrictionType


class RestrictionScope(str, Enum):
    """Restriction scope enumeration."""
    GLOBAL = "global"
    ADDRESS = "address"


class TokenRestriction(BaseModel):
    """(scope, key, comparison, value) rule attached to a token."""

    model_config = ConfigDict(frozen=True)

    scope: RestrictionScope = Field(default=RestrictionScope.GLOBAL)
    key: str = Field(..., min_length=1, max_length=64)
    type: TokenRestrictionType = Field(default=TokenRestrictionType.GE)
    value: int = Field(..., ge=0)
    target_address: Optional[str] = Field(None, description="Required for address restrictions")

    @field_validator('value')
    @classmethod
    def validate_value(cls, v):
        return int(v)

    @field_validator('target_address')
    @classmethod
    def validate_target_address(cls, v):
        return _normalize_address(v) if v is not None else v

    @model_validator(mode='after')
    def validate_scope_target(self):
        """Address restrictions name their target, global ones do not."""
        if self.scope == RestrictionScope.ADDRESS and self.target_address is None:
            raise ValueError('Address restrictions require a target address')
        if self.scope == RestrictionScope.GLOBAL and self.target_address is not None:
            raise ValueError('Global restrictions cannot have a target address')
        return self

    @property
    def scoped_key(self) -> int:
        return generate_uint64_key(self.key)

    @property
    def address(self) -> Optional[Address]:
        return Address.from_plain(self.target_address) if self.target_address else None

    def allows(self, flag_value: int) -> bool:
        """Evaluate the rule against an account's flag value."""
        comparisons = {
            TokenRestrictionType.NONE: lambda a, b: True,
            TokenRestrictionType.EQ: lambda a, b: a == b,
            TokenRestrictionType.NE: lambda a, b: a != b,
            TokenRestrictionType.LT: lambda a, b: a < b,
            TokenRestrictionType.LE: lambda a, b: a <= b,
            TokenRestrictionType.GT: lambda a, b: a > b,
            TokenRestrictionType.GE: lambda a, b: a >= b,
        }
        return comparisons[self.type](flag_value, self.value)


class AccountRestriction(BaseModel):
    """Token whitelist or blacklist for an account."""

    model_config = ConfigDict(frozen=True)

    flags: int = Field(default=int(AccountRestrictionFlags.MOSAIC_ID), ge=0, le=0xFFFF)
    values: List[str] = Field(default_factory=list, description="Token ids (hex)")

    @field_validator('values')
    @classmethod
    def validate_values(cls, v):
        try:
            return [id_to_hex(hex_to_id(value)) for value in v]
        except InvalidIdentifierError as e:
            raise ValueError(str(e))

    @property
    def restriction_flags(self) -> AccountRestrictionFlags:
        return AccountRestrictionFlags(self.flags)

    @property
    def mosaic_ids(self) -> List[int]:
        return [hex_to_id(value) for value in self.values]

    @property
    def is_blocking(self) -> bool:
        return bool(self.restriction_flags & AccountRestrictionFlags.BLOCK)
