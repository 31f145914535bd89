"""
NIP13 - Token Standard

The NIP13 standard governs tokens through a multisig token account whose
cosignatories are the token operators. Holders and operators are tagged
on an ordinal role scale stored under a role restriction key.
"""

import logging
from typing import Iterable, Optional, Tuple, Union

from contracts.standard import Standard
from ledger.accounts import PublicAccount
from ledger.transactions import AggregateTransaction
from models.network import TransactionParameters
from models.token import Operator


logger = logging.getLogger(__name__)


class NIP13(Standard):
    """NIP13 token standard."""

    NAME = "NIP13"
    REVISION = 1

    MINIMUM_OPERATORS = 2
    MAXIMUM_NAMESPACE_DEPTH = 3
    NAMESPACE_DURATION = 2010240  # 1 year at 15 sec / block
    ROLE_KEY = "User_Role"

    async def create_token(self,
                           actor: PublicAccount,
                           name: str,
                           source: str,
                           operators: Iterable[Union[PublicAccount, Operator, str]],
                           identifier: Optional[str] = None,
                           supply: int = 1,
                           parameters: Optional[TransactionParameters] = None,
                           now: Optional[float] = None) -> Tuple[PublicAccount, AggregateTransaction]:
        """
        Derive the token account and compile a CreateToken command.

        Args:
            actor: Issuing account
            name: Dot-separated token name
            source: Provenance tag
            operators: Token operators
            identifier: Nonce seed, defaults to the source and name
            supply: Initial supply
            parameters: Fee and deadline parameters
            now: Override for the current Unix time

        Returns:
            (token account, aggregate transaction)
        """
        target = self.get_target(name, source)
        logger.info(f"Creating token {name} at {target.address.plain}")

        argv = {
            'name': name,
            'source': source,
            'identifier': identifier or f"{source}:{name}",
            'operators': list(operators),
            'supply': supply,
        }

        aggregate = await self.execute(actor, target, 'CreateToken', argv, parameters, now)
        return target, aggregate
