"""
NIP13 - MintTokens Command

Increases the supply of an existing token. Only operators of the token
account may mint, and the resulting supply must stay within the ledger's
maximum token supply.
"""

import asyncio
from dataclasses import dataclass
from typing import List, Optional

from contracts.command import BaseCommand
from contracts.exceptions import CommandExecutionError, InvalidArgumentError
from helpers.transactions import create_mosaic_supply_change
from ledger.transactions import MAX_MOSAIC_SUPPLY, InnerTransaction
from models.token import MultisigInfo, TokenInfo

from ..standard import NIP13
from .arguments import MintTokensArguments


@dataclass
class MintState:
    multisig: Optional[MultisigInfo]
    token: Optional[TokenInfo]


@NIP13.register
class MintTokens(BaseCommand):
    """Token command increasing the supply of a token."""

    NAME = "MintTokens"
    ACTION = "mint"
    ARGUMENTS = ['identifier', 'amount']
    options_model = MintTokensArguments

    async def synchronize(self) -> MintState:
        reader = self.require_reader()
        identifier = self.identifier
        multisig, token = await asyncio.gather(
            reader.get_multisig_info(self.target.address),
            reader.get_token_info(identifier.mosaic_id),
        )
        return MintState(multisig=multisig, token=token)

    def assemble(self, state: MintState) -> List[InnerTransaction]:
        """Build the inner transactions of a MintTokens command."""
        self.require_operator(state.multisig)

        identifier = self.identifier
        if state.token is None:
            raise CommandExecutionError(f"Token {identifier.id} does not exist")

        amount = self.options.amount
        if state.token.supply + amount > MAX_MOSAIC_SUPPLY:
            raise InvalidArgumentError(
                'amount', f"supply {state.token.supply} + {amount} exceeds {MAX_MOSAIC_SUPPLY}"
            )

        return [
            InnerTransaction(self.create_notification(), self.target),
            InnerTransaction(
                create_mosaic_supply_change(self.context, identifier.mosaic_id, amount),
                self.target,
            ),
        ]
