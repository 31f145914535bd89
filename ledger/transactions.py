"""
NIP13 - Ledger Operation Records

This module defines the unsigned operations the NIP13 commands emit, the
explicit (operation, signer) pairing used for aggregate inner entries and
the aggregate bonded transaction that bundles them. Binary serialization,
signing and announcement belong to the ledger client.
"""

import time
from dataclasses import dataclass, field, fields
from enum import Enum, IntEnum, IntFlag
from typing import Any, Dict, List, Optional, Tuple

from .accounts import PublicAccount
from .ids import id_to_hex
from .network import Address, NetworkType


MAX_MOSAIC_SUPPLY = 8_999_999_999_000_000
UNSET_ADDRESS_RESTRICTION_VALUE = 0xFFFFFFFFFFFFFFFF


class TransactionType(IntEnum):
    """Entity type codes defined by the ledger."""
    TRANSFER = 0x4154
    MULTISIG_ACCOUNT_MODIFICATION = 0x4155
    NAMESPACE_REGISTRATION = 0x414E
    MOSAIC_DEFINITION = 0x414D
    MOSAIC_SUPPLY_CHANGE = 0x424D
    ACCOUNT_MOSAIC_RESTRICTION = 0x4250
    MOSAIC_GLOBAL_RESTRICTION = 0x4151
    MOSAIC_ADDRESS_RESTRICTION = 0x4251
    ACCOUNT_METADATA = 0x4144
    MOSAIC_METADATA = 0x4244
    AGGREGATE_COMPLETE = 0x4141
    AGGREGATE_BONDED = 0x4241


class MosaicRestrictionType(IntEnum):
    """Comparison operators for mosaic restrictions."""
    NONE = 0
    EQ = 1
    NE = 2
    LT = 3
    LE = 4
    GT = 5
    GE = 6


class MosaicSupplyChangeAction(IntEnum):
    DECREASE = 0
    INCREASE = 1


class NamespaceRegistrationType(IntEnum):
    ROOT = 0
    SUB = 1


class MosaicFlags(IntFlag):
    NONE = 0
    SUPPLY_MUTABLE = 1
    TRANSFERABLE = 2
    RESTRICTABLE = 4
    REVOKABLE = 8


class AccountRestrictionFlags(IntFlag):
    ADDRESS = 0x0001
    MOSAIC_ID = 0x0002
    TRANSACTION_TYPE = 0x0004
    OUTGOING = 0x4000
    BLOCK = 0x8000


def _identifier(**kwargs) -> Any:
    """Dataclass field rendered as a 16-character hex identifier."""
    return field(metadata={"identifier": True}, **kwargs)


def _render(value: Any, identifier: bool = False) -> Any:
    if identifier and isinstance(value, int):
        return id_to_hex(value)
    if isinstance(value, Address):
        return value.plain
    if isinstance(value, PublicAccount):
        return value.public_key.hex
    if isinstance(value, Enum):
        return value.name if not isinstance(value, IntFlag) else int(value)
    if isinstance(value, bytes):
        return value.hex().upper()
    if isinstance(value, (list, tuple)):
        return [_render(item, identifier) for item in value]
    return value


@dataclass(frozen=True)
class Transaction:
    """Base class for unsigned ledger operations."""
    network_type: NetworkType

    TYPE = None

    @property
    def type(self) -> TransactionType:
        return self.TYPE

    def to_dict(self) -> Dict[str, Any]:
        """Render operation fields into a JSON-friendly dict."""
        result = {"type": self.TYPE.name}
        for f in fields(self):
            result[f.name] = _render(getattr(self, f.name), f.metadata.get("identifier", False))
        return result


@dataclass(frozen=True)
class TransferTransaction(Transaction):
    recipient: Address = None
    mosaics: Tuple[Tuple[int, int], ...] = ()
    message: str = ""

    TYPE = TransactionType.TRANSFER


@dataclass(frozen=True)
class MultisigAccountModificationTransaction(Transaction):
    min_approval_delta: int = 0
    min_removal_delta: int = 0
    address_additions: Tuple[Address, ...] = ()
    address_deletions: Tuple[Address, ...] = ()

    TYPE = TransactionType.MULTISIG_ACCOUNT_MODIFICATION


@dataclass(frozen=True)
class NamespaceRegistrationTransaction(Transaction):
    registration_type: NamespaceRegistrationType = NamespaceRegistrationType.ROOT
    name: str = ""
    namespace_id: int = _identifier(default=0)
    duration: Optional[int] = None
    parent_id: Optional[int] = _identifier(default=None)

    TYPE = TransactionType.NAMESPACE_REGISTRATION


@dataclass(frozen=True)
class MosaicDefinitionTransaction(Transaction):
    nonce: bytes = b''
    mosaic_id: int = _identifier(default=0)
    flags: MosaicFlags = MosaicFlags.NONE
    divisibility: int = 0
    duration: int = 0

    TYPE = TransactionType.MOSAIC_DEFINITION


@dataclass(frozen=True)
class MosaicSupplyChangeTransaction(Transaction):
    mosaic_id: int = _identifier(default=0)
    action: MosaicSupplyChangeAction = MosaicSupplyChangeAction.INCREASE
    delta: int = 0

    TYPE = TransactionType.MOSAIC_SUPPLY_CHANGE


@dataclass(frozen=True)
class AccountMosaicRestrictionTransaction(Transaction):
    restriction_flags: AccountRestrictionFlags = AccountRestrictionFlags.MOSAIC_ID
    restriction_additions: Tuple[int, ...] = _identifier(default=())
    restriction_deletions: Tuple[int, ...] = _identifier(default=())

    TYPE = TransactionType.ACCOUNT_MOSAIC_RESTRICTION


@dataclass(frozen=True)
class MosaicGlobalRestrictionTransaction(Transaction):
    mosaic_id: int = _identifier(default=0)
    reference_mosaic_id: int = _identifier(default=0)
    restriction_key: int = _identifier(default=0)
    previous_restriction_value: int = 0
    new_restriction_value: int = 0
    previous_restriction_type: MosaicRestrictionType = MosaicRestrictionType.NONE
    new_restriction_type: MosaicRestrictionType = MosaicRestrictionType.NONE

    TYPE = TransactionType.MOSAIC_GLOBAL_RESTRICTION


@dataclass(frozen=True)
class MosaicAddressRestrictionTransaction(Transaction):
    mosaic_id: int = _identifier(default=0)
    restriction_key: int = _identifier(default=0)
    target_address: Address = None
    previous_restriction_value: int = UNSET_ADDRESS_RESTRICTION_VALUE
    new_restriction_value: int = 0

    TYPE = TransactionType.MOSAIC_ADDRESS_RESTRICTION


@dataclass(frozen=True)
class AccountMetadataTransaction(Transaction):
    target_address: Address = None
    scoped_metadata_key: int = _identifier(default=0)
    value_size_delta: int = 0
    value: bytes = b''

    TYPE = TransactionType.ACCOUNT_METADATA


@dataclass(frozen=True)
class MosaicMetadataTransaction(Transaction):
    target_address: Address = None
    scoped_metadata_key: int = _identifier(default=0)
    target_mosaic_id: int = _identifier(default=0)
    value_size_delta: int = 0
    value: bytes = b''

    TYPE = TransactionType.MOSAIC_METADATA


@dataclass(frozen=True)
class InnerTransaction:
    """An operation paired with the account that must sign it."""
    transaction: Transaction
    signer: PublicAccount

    @property
    def type(self) -> TransactionType:
        return self.transaction.type

    def to_dict(self) -> Dict[str, Any]:
        result = self.transaction.to_dict()
        result["signer"] = self.signer.public_key.hex
        return result


@dataclass(frozen=True)
class Deadline:
    """Transaction deadline in milliseconds since the network epoch."""
    value: int

    @classmethod
    def create(cls, epoch_adjustment: int, hours: int = 2, now: Optional[float] = None) -> 'Deadline':
        """
        Create a deadline relative to the current time.

        Args:
            epoch_adjustment: Network epoch in seconds since the Unix epoch
            hours: Validity window
            now: Override for the current Unix time in seconds
        """
        if now is None:
            now = time.time()
        return cls(int((now - epoch_adjustment + hours * 3600) * 1000))


@dataclass(frozen=True)
class AggregateTransaction:
    """Aggregate transaction bundling inner operations committed atomically."""
    network_type: NetworkType
    inner_transactions: Tuple[InnerTransaction, ...]
    deadline: Deadline
    max_fee: int = 0
    fee_multiplier: int = 0
    type: TransactionType = TransactionType.AGGREGATE_BONDED

    @property
    def signers(self) -> List[PublicAccount]:
        """Distinct signers in order of first appearance."""
        seen = []
        for inner in self.inner_transactions:
            if inner.signer not in seen:
                seen.append(inner.signer)
        return seen

    @property
    def initiator(self) -> Optional[PublicAccount]:
        return self.inner_transactions[0].signer if self.inner_transactions else None

    @property
    def cosigners(self) -> List[PublicAccount]:
        """Signers other than the initiator of the first inner operation."""
        return self.signers[1:]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.name,
            "network_type": self.network_type.name,
            "deadline": self.deadline.value,
            "max_fee": self.max_fee,
            "fee_multiplier": self.fee_multiplier,
            "cosigners": [signer.public_key.hex for signer in self.cosigners],
            "transactions": [inner.to_dict() for inner in self.inner_transactions],
        }
