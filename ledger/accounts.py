"""
NIP13 - Public Accounts

A public account couples a public key with the network it lives on, which
is enough to derive its address and to name it as a transaction signer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from crypto.keys import PublicKey

from .network import Address, NetworkType


@dataclass(frozen=True)
class PublicAccount:
    """Public identity of a ledger account."""
    public_key: PublicKey
    network_type: NetworkType
    address: Address = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(
            self, 'address', Address.from_public_key(self.public_key, self.network_type)
        )

    @classmethod
    def from_public_key(cls, public_key_hex: str, network_type: NetworkType) -> 'PublicAccount':
        """Create public account from hex-encoded public key."""
        return cls(PublicKey.from_hex(public_key_hex), NetworkType(network_type))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "public_key": self.public_key.hex,
            "address": self.address.plain,
        }

    def __str__(self) -> str:
        return self.public_key.hex
