"""
NIP13 - Command Arguments

Typed argument models parsed from the input register of each command.
Account arguments accept public accounts, operators or hex public keys
and are resolved on the network of the execution context.
"""

from typing import Any, List, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from crypto.exceptions import CryptoError
from helpers.accounts import to_public_account
from ledger.accounts import PublicAccount
from ledger.exceptions import LedgerError
from ledger.transactions import MAX_MOSAIC_SUPPLY
from models.token import TokenSource


def _account(value: Any, info: ValidationInfo) -> PublicAccount:
    network_type = (info.context or {}).get('network_type')
    if network_type is None:
        raise ValueError("network type is required to resolve accounts")

    try:
        return to_public_account(value, network_type)
    except (CryptoError, LedgerError, TypeError) as e:
        raise ValueError(str(e))


class CommandArguments(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    identifier: Any


class CreateTokenArguments(CommandArguments):
    name: str = Field(..., min_length=1)
    source: TokenSource
    operators: List[PublicAccount]
    supply: int = Field(default=1, ge=0, le=MAX_MOSAIC_SUPPLY)

    @field_validator('source', mode='before')
    @classmethod
    def validate_source(cls, v):
        return TokenSource(source=v) if isinstance(v, str) else v

    @field_validator('operators', mode='before')
    @classmethod
    def validate_operators(cls, v, info: ValidationInfo):
        if not isinstance(v, (list, tuple)):
            v = [v]
        return [_account(operator, info) for operator in v]


class AddOperatorArguments(CommandArguments):
    operator: PublicAccount

    @field_validator('operator', mode='before')
    @classmethod
    def validate_operator(cls, v, info: ValidationInfo):
        return _account(v, info)


class MintTokensArguments(CommandArguments):
    amount: int = Field(..., gt=0, le=MAX_MOSAIC_SUPPLY)


class ModifyMetadataArguments(CommandArguments):
    key: str = Field(..., min_length=1, max_length=64)
    value: str
    scope: Literal['token', 'account'] = 'token'
