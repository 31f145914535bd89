"""
NIP13 - Ledger Primitives

This module provides the ledger-level building blocks the NIP13 commands
compose: network types and addresses, public accounts, identifier
generation and unsigned operation records.
"""

from .exceptions import *
from .network import NetworkType, Address
from .accounts import PublicAccount
from .ids import (
    generate_mosaic_id,
    generate_namespace_id,
    generate_namespace_path,
    generate_uint64_key,
    id_to_hex,
    hex_to_id,
)
from .transactions import (
    TransactionType,
    MosaicRestrictionType,
    MosaicSupplyChangeAction,
    NamespaceRegistrationType,
    MosaicFlags,
    AccountRestrictionFlags,
    Transaction,
    InnerTransaction,
    AggregateTransaction,
    Deadline,
    MAX_MOSAIC_SUPPLY,
)

__all__ = [
    'NetworkType',
    'Address',
    'PublicAccount',
    'generate_mosaic_id',
    'generate_namespace_id',
    'generate_namespace_path',
    'generate_uint64_key',
    'id_to_hex',
    'hex_to_id',
    'TransactionType',
    'MosaicRestrictionType',
    'MosaicSupplyChangeAction',
    'NamespaceRegistrationType',
    'MosaicFlags',
    'AccountRestrictionFlags',
    'Transaction',
    'InnerTransaction',
    'AggregateTransaction',
    'Deadline',
    'MAX_MOSAIC_SUPPLY',
]
