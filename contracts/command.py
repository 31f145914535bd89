"""
NIP13 - Command Contract

A command turns validated arguments and synchronized ledger state into an
ordered list of inner operations, each explicitly paired with its signer.
Execution is a strict three-phase protocol:

1. ``validate()`` checks required arguments and parses them into the
   command's typed argument model.
2. ``synchronize()`` reads the on-chain state the command depends on.
3. ``assemble(state)`` builds the operation list. It runs every check
   before emitting anything, so failures never yield a partial list.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Type

from pydantic import BaseModel, ValidationError

from helpers.accounts import is_cosignatory
from helpers.derivation import nonce_from_seed
from helpers.transactions import create_transfer
from ledger.accounts import PublicAccount
from ledger.transactions import InnerTransaction, TransferTransaction
from models.allowance import AllowanceResult
from models.notification import Notification
from models.token import MultisigInfo, TokenIdentifier

from .context import Context
from .exceptions import (
    CommandError,
    CommandExecutionError,
    InvalidArgumentError,
    MissingArgumentError,
    OperationForbiddenError,
)
from .ledger import LedgerReader


class Command(ABC):
    """Capability interface implemented by every command variant."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable command name used for registry lookup."""

    @property
    @abstractmethod
    def arguments(self) -> List[str]:
        """Names of the required arguments."""

    @abstractmethod
    def validate(self) -> Any:
        """Validate the input register before synchronization."""

    @abstractmethod
    async def synchronize(self) -> Any:
        """Read the ledger state needed for assembly."""

    @abstractmethod
    def assemble(self, state: Any) -> List[InnerTransaction]:
        """Build the ordered operation list from synchronized state."""


class BaseCommand(Command):
    """
    Shared command behavior: argument validation, token identifier
    derivation, notifications, permission checks and the execution
    pipeline.
    """

    NAME: str = None
    ACTION: str = None
    ARGUMENTS: List[str] = []
    options_model: Optional[Type[BaseModel]] = None

    def __init__(self, context: Context, target: PublicAccount, reader: Optional[LedgerReader] = None):
        """
        Initialize command.

        Args:
            context: Execution context holding the arguments
            target: Governed token account
            reader: Ledger reader used during synchronization
        """
        self.context = context
        self.target = target
        self.reader = reader
        self.options: Optional[BaseModel] = None
        self.state: Any = None
        self._synchronized = False
        self.logger = logging.getLogger(f"standards.commands.{self.name}")

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def arguments(self) -> List[str]:
        return list(self.ARGUMENTS)

    @property
    def identifier(self) -> TokenIdentifier:
        """Token identifier derived from the nonce seed and the target account."""
        seed = self.context.get_input('identifier')
        if seed is None:
            raise MissingArgumentError('identifier')

        if isinstance(seed, TokenIdentifier):
            if seed.owner_address != self.target.address:
                raise InvalidArgumentError('identifier', "token identifier is owned by another account")
            return seed

        return TokenIdentifier.create(nonce_from_seed(seed), self.target.address)

    def validate(self) -> Optional[BaseModel]:
        """
        Validate the input register.

        Raises:
            MissingArgumentError: For the first required argument without a value
            InvalidArgumentError: If the arguments do not parse
        """
        for argument in self.arguments:
            if self.context.get_input(argument) is None:
                raise MissingArgumentError(argument)

        if self.options_model is not None:
            try:
                self.options = self.options_model.model_validate(
                    self.context.inputs,
                    context={'network_type': self.context.network_type},
                )
            except ValidationError as e:
                error = e.errors()[0]
                argument = str(error['loc'][0]) if error['loc'] else self.name
                raise InvalidArgumentError(argument, error['msg'])

        return self.options

    async def synchronize(self) -> Any:
        """No ledger state needed by default."""
        return None

    @property
    def transactions(self) -> List[InnerTransaction]:
        """Assembled operations, available once the command is synchronized."""
        if not self._synchronized:
            raise CommandExecutionError(f"Command {self.name} must be synchronized before assembly")
        return self.assemble(self.state)

    async def execute(self) -> List[InnerTransaction]:
        """
        Run validation, synchronization and assembly in order.

        Returns:
            Ordered (operation, signer) pairs

        Raises:
            CommandError: Any failure, lower-level ones wrapped in CommandExecutionError
        """
        self.logger.debug(f"Validating {self.name} for {self.target.address.plain}")
        self.validate()

        try:
            self.state = await self.synchronize()
        except CommandError:
            raise
        except Exception as e:
            raise CommandExecutionError(f"Synchronization of {self.name} failed: {e}") from e
        self._synchronized = True

        try:
            transactions = self.transactions
        except CommandError:
            raise
        except Exception as e:
            raise CommandExecutionError(f"Assembly of {self.name} failed: {e}") from e

        self.logger.info(f"Assembled {len(transactions)} operations for {self.name}")
        return transactions

    # Shared building blocks

    @property
    def notification(self) -> Notification:
        return Notification(
            revision=self.context.revision,
            action=self.ACTION,
            token_id=self.identifier.id,
        )

    def create_notification(self) -> TransferTransaction:
        """Proof-of-intent transfer to the target account."""
        return create_transfer(self.context, self.target, message=self.notification.message)

    def require_reader(self) -> LedgerReader:
        if self.reader is None:
            raise CommandExecutionError(f"Command {self.name} requires a ledger reader")
        return self.reader

    def can_execute(self, multisig: Optional[MultisigInfo]) -> AllowanceResult:
        """Check whether the actor is an operator of the target account."""
        if multisig is None:
            return AllowanceResult(allowed=False, reason=f"{self.target.address.plain} is not a token account")

        if not is_cosignatory(self.context.actor, multisig):
            return AllowanceResult(
                allowed=False,
                reason=f"{self.context.actor.address.plain} is not an operator of {self.target.address.plain}",
            )

        return AllowanceResult(allowed=True)

    def require_operator(self, multisig: Optional[MultisigInfo]) -> None:
        allowance = self.can_execute(multisig)
        if not allowance:
            raise OperationForbiddenError(f"{self.name} forbidden: {allowance.reason}")
