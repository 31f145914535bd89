"""
NIP13 - AddOperator Command

Adds one operator to an existing token account. The token account gains a
cosignatory and both multisig thresholds move up by one, keeping the
n-1 approval rule. The new operator is tagged with the operator role.
"""

from typing import List, Optional

from contracts.command import BaseCommand
from contracts.exceptions import InvalidArgumentError
from helpers.accounts import is_cosignatory
from helpers.transactions import (
    create_mosaic_address_restriction,
    create_multisig_account_modification,
)
from ledger.transactions import InnerTransaction
from models.restrictions import RestrictionScope, TokenRestriction, TokenRestrictionType
from models.token import MultisigInfo, TokenRole

from ..standard import NIP13
from .arguments import AddOperatorArguments


@NIP13.register
class AddOperator(BaseCommand):
    """Token command adding an operator to a token account."""

    NAME = "AddOperator"
    ACTION = "add-operator"
    ARGUMENTS = ['identifier', 'operator']
    options_model = AddOperatorArguments

    async def synchronize(self) -> Optional[MultisigInfo]:
        return await self.require_reader().get_multisig_info(self.target.address)

    def assemble(self, state: Optional[MultisigInfo]) -> List[InnerTransaction]:
        """Build the inner transactions of an AddOperator command."""
        self.require_operator(state)

        operator = self.options.operator
        if operator == self.target:
            raise InvalidArgumentError('operator', "the token account cannot operate itself")
        if is_cosignatory(operator, state):
            raise InvalidArgumentError('operator', f"{operator.address.plain} is already an operator")

        target = self.target
        return [
            InnerTransaction(self.create_notification(), target),
            InnerTransaction(
                create_multisig_account_modification(self.context, 1, 1, additions=[operator]),
                target,
            ),
            InnerTransaction(
                create_mosaic_address_restriction(
                    self.context,
                    self.identifier.mosaic_id,
                    TokenRestriction(
                        scope=RestrictionScope.ADDRESS,
                        key=NIP13.ROLE_KEY,
                        type=TokenRestrictionType.EQ,
                        value=TokenRole.OPERATOR,
                        target_address=operator.address.plain,
                    ),
                ),
                operator,
            ),
        ]
