"""
NIP13 - Ledger Reader Contract

Narrow read interface commands use during synchronization. Implementations
return ``None`` for state that does not exist on-chain and raise for
transport failures.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ledger.network import Address
from models.metadata import AccountMetadata, TokenMetadata
from models.token import MultisigInfo, TokenInfo


class LedgerReader(ABC):
    """Asynchronous read access to ledger state."""

    @abstractmethod
    async def get_multisig_info(self, address: Address) -> Optional[MultisigInfo]:
        """Multisig state of an account, or None if it is not multisig."""

    @abstractmethod
    async def get_token_info(self, token_id: int) -> Optional[TokenInfo]:
        """Definition and supply of a token, or None if it does not exist."""

    @abstractmethod
    async def get_token_metadata(self, target: Address, token_id: int, key: str) -> Optional[TokenMetadata]:
        """Current metadata entry of a token."""

    @abstractmethod
    async def get_account_metadata(self, target: Address, key: str) -> Optional[AccountMetadata]:
        """Current metadata entry of an account."""
