"""
NIP13 - Command Options

A command option names one argument of a command invocation together with
its presence requirement and default.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CommandOption(BaseModel):
    """Named command argument."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1)
    value: Any = None
    required: bool = False
    default: Any = None

    @property
    def is_set(self) -> bool:
        return self.value is not None

    @property
    def resolved_value(self) -> Any:
        """Value if set, default otherwise."""
        return self.value if self.is_set else self.default
