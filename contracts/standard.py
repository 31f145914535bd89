"""
NIP13 - Standard Contract

A standard is the single place of truth for which commands exist in one
protocol version. Each standard subclass owns a registry of command
constructors, filled with the ``register`` class decorator.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Type, Union

from helpers.derivation import derive_account, token_path
from helpers.transactions import create_aggregate_bonded
from ledger.accounts import PublicAccount
from ledger.transactions import AggregateTransaction
from models.command_option import CommandOption
from models.network import NetworkConfig, TransactionParameters

from .command import BaseCommand
from .context import Context
from .exceptions import InvalidCommandError, InvalidDerivationPathError
from .ledger import LedgerReader


logger = logging.getLogger(__name__)

Arguments = Union[Dict[str, Any], Iterable[CommandOption]]


class Standard:
    """Command registry and entry point of a token standard."""

    NAME: str = None
    REVISION: int = 1
    COMMANDS: Dict[str, Type[BaseCommand]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.COMMANDS = {}

    @classmethod
    def register(cls, command_cls: Type[BaseCommand]) -> Type[BaseCommand]:
        """
        Class decorator registering a command with this standard.

        Raises:
            ValueError: If the command has no name or the name is taken
        """
        if not command_cls.NAME:
            raise ValueError(f"Command {command_cls.__name__} has no NAME")
        if command_cls.NAME in cls.COMMANDS:
            raise ValueError(f"Command {command_cls.NAME} is already registered in {cls.NAME}")

        cls.COMMANDS[command_cls.NAME] = command_cls
        return command_cls

    def __init__(self,
                 network: NetworkConfig,
                 reader: Optional[LedgerReader] = None,
                 mnemonic: Optional[str] = None,
                 passphrase: str = ""):
        """
        Initialize standard.

        Args:
            network: Network configuration
            reader: Ledger reader handed to commands for synchronization
            mnemonic: BIP39 mnemonic holding the token accounts
            passphrase: Optional BIP39 passphrase
        """
        self.network = network
        self.reader = reader
        self._mnemonic = mnemonic
        self._passphrase = passphrase

    @property
    def commands(self) -> List[str]:
        return sorted(self.COMMANDS)

    def get_context(self,
                    actor: PublicAccount,
                    argv: Arguments,
                    parameters: Optional[TransactionParameters] = None) -> Context:
        """Build a fresh execution context from a mapping or command options."""
        if isinstance(argv, dict):
            return Context(self.network, actor, revision=self.REVISION,
                           parameters=parameters, inputs=argv)

        return Context.from_options(self.network, actor, argv,
                                    revision=self.REVISION, parameters=parameters)

    def get_command(self, name: str, context: Context, target: PublicAccount) -> BaseCommand:
        """
        Instantiate a registered command.

        Raises:
            InvalidCommandError: If the name is not registered
        """
        command_cls = self.COMMANDS.get(name)
        if command_cls is None:
            raise InvalidCommandError(name, self.NAME)

        return command_cls(context, target, self.reader)

    def get_target(self, name: str, source: str) -> PublicAccount:
        """
        Derive the governed account of a token from the standard's mnemonic.

        Raises:
            InvalidDerivationPathError: If no mnemonic is configured or derivation fails
        """
        path = token_path(name, source, self.network.network_type)
        if not self._mnemonic:
            raise InvalidDerivationPathError(path, "No mnemonic configured for token account derivation")

        return derive_account(self._mnemonic, path, self.network.network_type, self._passphrase)

    async def execute(self,
                      actor: PublicAccount,
                      target: PublicAccount,
                      command: str,
                      argv: Arguments,
                      parameters: Optional[TransactionParameters] = None,
                      now: Optional[float] = None) -> AggregateTransaction:
        """
        Compile a command into one aggregate bonded transaction.

        Args:
            actor: Acting account
            target: Governed token account
            command: Command name
            argv: Command arguments
            parameters: Fee and deadline parameters
            now: Override for the current Unix time

        Returns:
            Aggregate transaction ready for signing
        """
        context = self.get_context(actor, argv, parameters)
        instance = self.get_command(command, context, target)

        logger.info(f"Executing {self.NAME}:{command} for {target.address.plain}")
        inner_transactions = await instance.execute()
        return create_aggregate_bonded(context, inner_transactions, now)
