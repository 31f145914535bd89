"""
NIP13 - Allowance Results
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class AllowanceResult(BaseModel):
    """Outcome of a permission check for an actor and a command."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed
