"""
NIP13 - Transaction Helpers

Pure construction functions, each returning one unsigned ledger operation
(or the aggregate wrapping them) from explicit inputs. The execution
context supplies the network and the transaction parameters.
"""

from typing import TYPE_CHECKING, Iterable, Optional, Sequence, Tuple, Union

from ledger.accounts import PublicAccount
from ledger.ids import (
    NONCE_SIZE,
    generate_namespace_id,
    generate_namespace_path,
    validate_namespace_name,
)
from ledger.network import Address
from ledger.transactions import (
    AccountMetadataTransaction,
    AccountMosaicRestrictionTransaction,
    AggregateTransaction,
    Deadline,
    InnerTransaction,
    MosaicAddressRestrictionTransaction,
    MosaicDefinitionTransaction,
    MosaicFlags,
    MosaicGlobalRestrictionTransaction,
    MosaicMetadataTransaction,
    MosaicRestrictionType,
    MosaicSupplyChangeAction,
    MosaicSupplyChangeTransaction,
    MultisigAccountModificationTransaction,
    NamespaceRegistrationTransaction,
    NamespaceRegistrationType,
    TransferTransaction,
    MAX_MOSAIC_SUPPLY,
)
from models.metadata import AccountMetadata, TokenMetadata
from models.restrictions import AccountRestriction, RestrictionScope, TokenRestriction

if TYPE_CHECKING:
    from contracts.context import Context


# Maximum registration period of a root namespace (1 year at 15 s / block)
MAX_NAMESPACE_DURATION = 2010240

DEFAULT_MOSAIC_FLAGS = MosaicFlags.SUPPLY_MUTABLE | MosaicFlags.TRANSFERABLE | MosaicFlags.RESTRICTABLE


def _address(value: Union[PublicAccount, Address]) -> Address:
    return value.address if isinstance(value, PublicAccount) else value


def create_transfer(context: 'Context',
                    recipient: Union[PublicAccount, Address],
                    mosaics: Sequence[Tuple[int, int]] = (),
                    message: str = "") -> TransferTransaction:
    """
    Create a transfer operation.

    Args:
        context: Execution context
        recipient: Recipient account or address
        mosaics: (mosaic id, amount) pairs
        message: Plain message

    Returns:
        Transfer operation
    """
    return TransferTransaction(
        network_type=context.network_type,
        recipient=_address(recipient),
        mosaics=tuple(mosaics),
        message=message,
    )


def create_multisig_account_modification(context: 'Context',
                                         min_approval_delta: int,
                                         min_removal_delta: int,
                                         additions: Iterable[Union[PublicAccount, Address]] = (),
                                         deletions: Iterable[Union[PublicAccount, Address]] = ()
                                         ) -> MultisigAccountModificationTransaction:
    """Create a multisig modification operation adding or removing cosignatories."""
    return MultisigAccountModificationTransaction(
        network_type=context.network_type,
        min_approval_delta=min_approval_delta,
        min_removal_delta=min_removal_delta,
        address_additions=tuple(_address(account) for account in additions),
        address_deletions=tuple(_address(account) for account in deletions),
    )


def create_namespace_registration(context: 'Context',
                                  duration: int,
                                  name: str,
                                  parent: Optional[str] = None) -> NamespaceRegistrationTransaction:
    """
    Create a namespace registration operation.

    Sub-namespaces inherit the registration period of their root, so the
    duration is only carried by root registrations.

    Args:
        context: Execution context
        duration: Registration period in blocks
        name: Namespace segment to register
        parent: Full dot-separated name of the parent, None for a root namespace

    Returns:
        Namespace registration operation
    """
    if duration <= 0 or duration > MAX_NAMESPACE_DURATION:
        raise ValueError(f"Namespace duration must be 1-{MAX_NAMESPACE_DURATION} blocks: {duration}")

    validate_namespace_name(name)

    if parent is None:
        return NamespaceRegistrationTransaction(
            network_type=context.network_type,
            registration_type=NamespaceRegistrationType.ROOT,
            name=name,
            namespace_id=generate_namespace_id(name),
            duration=duration,
        )

    parent_id = generate_namespace_path(parent)[-1]
    return NamespaceRegistrationTransaction(
        network_type=context.network_type,
        registration_type=NamespaceRegistrationType.SUB,
        name=name,
        namespace_id=generate_namespace_id(name, parent_id),
        parent_id=parent_id,
    )


def create_mosaic_definition(context: 'Context',
                             nonce: bytes,
                             mosaic_id: int,
                             duration: int,
                             flags: MosaicFlags = DEFAULT_MOSAIC_FLAGS,
                             divisibility: int = 0) -> MosaicDefinitionTransaction:
    """Create a mosaic definition operation."""
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"Mosaic nonce must be {NONCE_SIZE} bytes")
    if divisibility < 0 or divisibility > 6:
        raise ValueError(f"Divisibility must be 0-6: {divisibility}")

    return MosaicDefinitionTransaction(
        network_type=context.network_type,
        nonce=nonce,
        mosaic_id=mosaic_id,
        flags=flags,
        divisibility=divisibility,
        duration=duration,
    )


def create_mosaic_supply_change(context: 'Context',
                                mosaic_id: int,
                                delta: int,
                                action: MosaicSupplyChangeAction = MosaicSupplyChangeAction.INCREASE
                                ) -> MosaicSupplyChangeTransaction:
    """Create a supply change operation."""
    if delta <= 0 or delta > MAX_MOSAIC_SUPPLY:
        raise ValueError(f"Supply delta must be 1-{MAX_MOSAIC_SUPPLY}: {delta}")

    return MosaicSupplyChangeTransaction(
        network_type=context.network_type,
        mosaic_id=mosaic_id,
        action=action,
        delta=delta,
    )


def create_account_mosaic_restriction(context: 'Context',
                                      restriction: AccountRestriction
                                      ) -> AccountMosaicRestrictionTransaction:
    """Create an operation adding tokens to an account's mosaic restriction list."""
    return AccountMosaicRestrictionTransaction(
        network_type=context.network_type,
        restriction_flags=restriction.restriction_flags,
        restriction_additions=tuple(restriction.mosaic_ids),
    )


def create_mosaic_global_restriction(context: 'Context',
                                     mosaic_id: int,
                                     restriction: TokenRestriction,
                                     previous: Optional[TokenRestriction] = None
                                     ) -> MosaicGlobalRestrictionTransaction:
    """
    Create a global restriction operation for a token.

    Args:
        context: Execution context
        mosaic_id: Restricted token
        restriction: New rule
        previous: Rule being replaced, None for a new rule

    Returns:
        Global restriction operation
    """
    if restriction.scope != RestrictionScope.GLOBAL:
        raise ValueError("Global restriction operation requires a global restriction")

    return MosaicGlobalRestrictionTransaction(
        network_type=context.network_type,
        mosaic_id=mosaic_id,
        reference_mosaic_id=0,
        restriction_key=restriction.scoped_key,
        previous_restriction_value=previous.value if previous else 0,
        new_restriction_value=restriction.value,
        previous_restriction_type=previous.type if previous else MosaicRestrictionType.NONE,
        new_restriction_type=restriction.type,
    )


def create_mosaic_address_restriction(context: 'Context',
                                      mosaic_id: int,
                                      restriction: TokenRestriction
                                      ) -> MosaicAddressRestrictionTransaction:
    """Create an operation setting an address's restriction flag for a token."""
    if restriction.scope != RestrictionScope.ADDRESS:
        raise ValueError("Address restriction operation requires an address restriction")

    return MosaicAddressRestrictionTransaction(
        network_type=context.network_type,
        mosaic_id=mosaic_id,
        restriction_key=restriction.scoped_key,
        target_address=restriction.address,
        new_restriction_value=restriction.value,
    )


def metadata_value_delta(new_value: str, current_value: Optional[str] = None) -> Tuple[int, bytes]:
    """
    Compute the size delta and payload of a metadata update.

    Updates carry the XOR of the current and new values, both padded to
    the longer length.

    Returns:
        (value size delta, payload)
    """
    new_bytes = new_value.encode('utf-8')
    if current_value is None:
        return len(new_bytes), new_bytes

    current_bytes = current_value.encode('utf-8')
    size = max(len(new_bytes), len(current_bytes))
    padded_new = new_bytes.ljust(size, b'\x00')
    padded_current = current_bytes.ljust(size, b'\x00')

    payload = bytes(a ^ b for a, b in zip(padded_new, padded_current))
    return len(new_bytes) - len(current_bytes), payload


def create_mosaic_metadata(context: 'Context',
                           metadata: TokenMetadata,
                           current: Optional[TokenMetadata] = None) -> MosaicMetadataTransaction:
    """Create a token metadata operation relative to the current entry."""
    size_delta, payload = metadata_value_delta(metadata.value, current.value if current else None)
    return MosaicMetadataTransaction(
        network_type=context.network_type,
        target_address=metadata.address,
        scoped_metadata_key=metadata.scoped_key,
        target_mosaic_id=metadata.mosaic_id,
        value_size_delta=size_delta,
        value=payload,
    )


def create_account_metadata(context: 'Context',
                            metadata: AccountMetadata,
                            current: Optional[AccountMetadata] = None) -> AccountMetadataTransaction:
    """Create an account metadata operation relative to the current entry."""
    size_delta, payload = metadata_value_delta(metadata.value, current.value if current else None)
    return AccountMetadataTransaction(
        network_type=context.network_type,
        target_address=metadata.address,
        scoped_metadata_key=metadata.scoped_key,
        value_size_delta=size_delta,
        value=payload,
    )


def create_aggregate_bonded(context: 'Context',
                            inner_transactions: Sequence[InnerTransaction],
                            now: Optional[float] = None) -> AggregateTransaction:
    """
    Wrap inner operations into one aggregate bonded transaction.

    Args:
        context: Execution context
        inner_transactions: Ordered (operation, signer) pairs
        now: Override for the current Unix time

    Returns:
        Aggregate bonded transaction
    """
    if not inner_transactions:
        raise ValueError("Aggregate transaction requires at least one inner transaction")

    parameters = context.parameters
    return AggregateTransaction(
        network_type=context.network_type,
        inner_transactions=tuple(inner_transactions),
        deadline=Deadline.create(context.network.epoch_adjustment, parameters.deadline_hours, now),
        max_fee=parameters.max_fee,
        fee_multiplier=parameters.fee_multiplier,
    )
