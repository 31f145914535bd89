"""
NIP13 - Execution Context

The context of one command execution: network configuration, protocol
revision, transaction parameters, the acting account and the input
register holding command arguments. A context belongs to exactly one
execution and is not shared.
"""

from typing import Any, Dict, Iterable, Optional

from contracts.exceptions import MissingArgumentError
from ledger.accounts import PublicAccount
from models.command_option import CommandOption
from models.network import NetworkConfig, TransactionParameters


class Context:
    """Execution context with a write-once input register."""

    def __init__(self,
                 network: NetworkConfig,
                 actor: PublicAccount,
                 revision: int = 1,
                 parameters: Optional[TransactionParameters] = None,
                 inputs: Optional[Dict[str, Any]] = None):
        """
        Initialize execution context.

        Args:
            network: Network configuration
            actor: Public account of the acting party
            revision: Protocol revision tagged on notifications
            parameters: Fee and deadline parameters
            inputs: Initial command arguments
        """
        if revision < 1:
            raise ValueError(f"Protocol revision must be positive: {revision}")

        self._network = network
        self._actor = actor
        self._revision = revision
        self._parameters = parameters or TransactionParameters()
        self._inputs: Dict[str, Any] = {}

        for name, value in (inputs or {}).items():
            self.set_input(name, value)

    @classmethod
    def from_options(cls,
                     network: NetworkConfig,
                     actor: PublicAccount,
                     options: Iterable[CommandOption],
                     revision: int = 1,
                     parameters: Optional[TransactionParameters] = None) -> 'Context':
        """
        Build a context from command options.

        Options without a value register their default, options without
        either are left out of the register.

        Raises:
            MissingArgumentError: If a required option has neither a value nor a default
        """
        context = cls(network, actor, revision=revision, parameters=parameters)
        for option in options:
            if option.required and option.resolved_value is None:
                raise MissingArgumentError(option.name)
            if option.resolved_value is not None:
                context.set_input(option.name, option.resolved_value)
        return context

    @property
    def network(self) -> NetworkConfig:
        return self._network

    @property
    def network_type(self):
        return self._network.network_type

    @property
    def actor(self) -> PublicAccount:
        return self._actor

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def parameters(self) -> TransactionParameters:
        return self._parameters

    @property
    def inputs(self) -> Dict[str, Any]:
        """Copy of the input register."""
        return dict(self._inputs)

    def has_input(self, name: str) -> bool:
        return name in self._inputs

    def get_input(self, name: str, default: Any = None) -> Any:
        """
        Read an argument from the input register.

        Args:
            name: Argument name
            default: Value returned when the argument is absent

        Returns:
            Registered value or default
        """
        return self._inputs.get(name, default)

    def set_input(self, name: str, value: Any) -> None:
        """
        Register an argument.

        Raises:
            ValueError: If the argument was already registered
        """
        if name in self._inputs:
            raise ValueError(f"Input '{name}' is already set")
        self._inputs[name] = value

    def __repr__(self) -> str:
        return (f"Context(network={self.network_type.name}, actor={self._actor}, "
                f"revision={self._revision}, inputs={sorted(self._inputs)})")
