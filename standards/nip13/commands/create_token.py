"""
NIP13 - CreateToken Command

Prepares one aggregate bonded transaction with the following inner
transactions:

- Transaction 01: proof-of-intent notification transfer
- Transaction 02: MultisigAccountModificationTransaction
- Transaction 03: NamespaceRegistrationTransaction (one per name segment)
- Transaction 04: MosaicDefinitionTransaction
- Transaction 05: MosaicSupplyChangeTransaction (positive supply only)
- Transaction 06: AccountMosaicRestrictionTransaction for the new token
- Transaction 07: MosaicGlobalRestrictionTransaction on the role key
- Transaction 08: MosaicAddressRestrictionTransaction (one per operator)

Transaction 08 entries are signed by their operator. Every other entry is
signed by the target (token) account.
"""

from typing import Any, List

from contracts.command import BaseCommand
from contracts.exceptions import InvalidArgumentError, MinimumRequiredOperatorsError
from helpers.transactions import (
    create_account_mosaic_restriction,
    create_mosaic_address_restriction,
    create_mosaic_definition,
    create_mosaic_global_restriction,
    create_mosaic_supply_change,
    create_multisig_account_modification,
    create_namespace_registration,
)
from ledger.exceptions import InvalidNamespaceError
from ledger.ids import validate_namespace_name
from ledger.transactions import InnerTransaction
from models.restrictions import (
    AccountRestriction,
    RestrictionScope,
    TokenRestriction,
    TokenRestrictionType,
)
from models.token import TokenRole

from ..standard import NIP13
from .arguments import CreateTokenArguments


@NIP13.register
class CreateToken(BaseCommand):
    """Token command creating a NIP13 compliant token."""

    NAME = "CreateToken"
    ACTION = "create"
    ARGUMENTS = ['name', 'source', 'identifier', 'operators']
    options_model = CreateTokenArguments

    def _check_arguments(self) -> List[str]:
        """Run every pre-emission check and return the name segments."""
        operators = self.options.operators

        if len(operators) < NIP13.MINIMUM_OPERATORS:
            raise MinimumRequiredOperatorsError(NIP13.MINIMUM_OPERATORS, len(operators))

        if len(set(operators)) != len(operators):
            raise InvalidArgumentError('operators', "operators must be distinct")

        if self.target in operators:
            raise InvalidArgumentError('operators', "the token account cannot operate itself")

        parts = self.options.name.split('.')
        if len(parts) > NIP13.MAXIMUM_NAMESPACE_DEPTH:
            raise InvalidArgumentError(
                'name', f"at most {NIP13.MAXIMUM_NAMESPACE_DEPTH} levels allowed, got {len(parts)}"
            )

        for part in parts:
            try:
                validate_namespace_name(part)
            except InvalidNamespaceError as e:
                raise InvalidArgumentError('name', str(e))

        return parts

    def assemble(self, state: Any) -> List[InnerTransaction]:
        """Build the inner transactions of a CreateToken command."""
        parts = self._check_arguments()

        target = self.target
        operators = self.options.operators
        supply = self.options.supply
        identifier = self.identifier
        mosaic_id = identifier.mosaic_id

        transactions: List[InnerTransaction] = []

        # Transaction 01: execution proof
        transactions.append(InnerTransaction(self.create_notification(), target))

        # Transaction 02: multisig conversion
        # minApproval is always n-1 to permit loss of up to 1 key.
        transactions.append(InnerTransaction(
            create_multisig_account_modification(
                self.context,
                len(operators) - 1,
                len(operators) - 1,
                additions=operators,
            ),
            target,
        ))

        # Transaction 03: one registration per name segment, parent first
        for i, part in enumerate(parts):
            transactions.append(InnerTransaction(
                create_namespace_registration(
                    self.context,
                    NIP13.NAMESPACE_DURATION,
                    part,
                    '.'.join(parts[:i]) if i else None,
                ),
                target,
            ))

        # Transaction 04: token definition
        transactions.append(InnerTransaction(
            create_mosaic_definition(
                self.context,
                identifier.nonce_bytes,
                mosaic_id,
                NIP13.NAMESPACE_DURATION,
            ),
            target,
        ))

        # Transaction 05: initial supply
        if supply > 0:
            transactions.append(InnerTransaction(
                create_mosaic_supply_change(self.context, mosaic_id, supply),
                target,
            ))

        # Transaction 06: allow the token on the target's own balance
        transactions.append(InnerTransaction(
            create_account_mosaic_restriction(
                self.context,
                AccountRestriction(values=[identifier.id]),
            ),
            target,
        ))

        # Transaction 07: token restricted to accounts with role >= Holder
        transactions.append(InnerTransaction(
            create_mosaic_global_restriction(
                self.context,
                mosaic_id,
                TokenRestriction(
                    scope=RestrictionScope.GLOBAL,
                    key=NIP13.ROLE_KEY,
                    type=TokenRestrictionType.GE,
                    value=TokenRole.HOLDER,
                ),
            ),
            target,
        ))

        # Transaction 08: operator role, signed by each operator
        for operator in operators:
            transactions.append(InnerTransaction(
                create_mosaic_address_restriction(
                    self.context,
                    mosaic_id,
                    TokenRestriction(
                        scope=RestrictionScope.ADDRESS,
                        key=NIP13.ROLE_KEY,
                        type=TokenRestrictionType.EQ,
                        value=TokenRole.OPERATOR,
                        target_address=operator.address.plain,
                    ),
                ),
                operator,
            ))

        return transactions
