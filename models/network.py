"""
NIP13 - Network Configuration Models

Network configuration and the non-functional transaction parameters that
are threaded through every transaction helper.
"""

import os
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ledger.network import NetworkType


# Public network epoch (2021-03-16 00:06:25 UTC)
DEFAULT_EPOCH_ADJUSTMENT = 1615853185


class NetworkConfig(BaseModel):
    """Immutable network configuration."""

    model_config = ConfigDict(frozen=True)

    network_type: NetworkType = Field(default=NetworkType.TEST_NET)
    generation_hash: str = Field(..., description="Network generation hash seed (hex)")
    epoch_adjustment: int = Field(default=DEFAULT_EPOCH_ADJUSTMENT, ge=0)
    node_url: Optional[str] = Field(None, description="REST gateway URL")

    @field_validator('generation_hash')
    @classmethod
    def validate_generation_hash(cls, v):
        """Validate generation hash format."""
        if not re.match(r'^[a-fA-F0-9]{64}$', v):
            raise ValueError('Generation hash must be 64-character hex string')
        return v.upper()

    @classmethod
    def from_env(cls) -> 'NetworkConfig':
        """Create network config from environment variables."""
        return cls(
            network_type=NetworkType[os.getenv("NIP13_NETWORK_TYPE", "TEST_NET").upper()],
            generation_hash=os.getenv("NIP13_GENERATION_HASH", ""),
            epoch_adjustment=int(os.getenv("NIP13_EPOCH_ADJUSTMENT", str(DEFAULT_EPOCH_ADJUSTMENT))),
            node_url=os.getenv("NIP13_NODE_URL"),
        )


class TransactionParameters(BaseModel):
    """Fee and deadline parameters applied to assembled transactions."""

    model_config = ConfigDict(frozen=True)

    deadline_hours: int = Field(default=2, ge=1, le=48)
    max_fee: int = Field(default=0, ge=0, description="Absolute maximum fee, 0 to let the signer decide")
    fee_multiplier: int = Field(default=100, ge=0)
