"""
NIP13 - Command Exceptions

Construction-time failures raised while turning a command request into an
operation list. Every one of them aborts assembly before any operation is
returned.
"""

from typing import Optional


class CommandError(Exception):
    """Base exception for NIP13 command failures."""
    pass


class MissingArgumentError(CommandError):
    """Exception raised when a required argument is absent from the context."""

    def __init__(self, argument: str, message: Optional[str] = None):
        self.argument = argument
        if message is None:
            message = f"Missing required argument: {argument}"
        super().__init__(message)


class InvalidArgumentError(CommandError):
    """Exception raised when an argument is present but its value is unusable."""

    def __init__(self, argument: str, message: str):
        self.argument = argument
        super().__init__(f"Invalid argument '{argument}': {message}")


class InvalidCommandError(CommandError):
    """Exception raised for command names unknown to a standard."""

    def __init__(self, command: str, standard: Optional[str] = None):
        self.command = command
        self.standard = standard
        where = f" in standard {standard}" if standard else ""
        super().__init__(f"Unknown command '{command}'{where}")


class MinimumRequiredOperatorsError(CommandError):
    """Exception raised when too few operators are supplied for a governed token."""

    def __init__(self, required: int, given: int):
        self.required = required
        self.given = given
        super().__init__(f"At least {required} operators are required, {given} given")


class InvalidDerivationPathError(CommandError):
    """Exception raised for malformed or out-of-range derivation paths or seeds."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        if message is None:
            message = f"Invalid derivation path: {path}"
        super().__init__(message)


class OperationForbiddenError(CommandError):
    """Exception raised when an actor lacks the role a command requires."""
    pass


class CommandExecutionError(CommandError):
    """Exception raised when a lower-level failure prevents command assembly."""
    pass
