"""
NIP13 - Data Models

Typed value objects describing ledger-level concepts consumed and produced
by NIP13 commands.
"""

from .allowance import AllowanceResult
from .command_option import CommandOption
from .metadata import AccountMetadata, TokenMetadata
from .network import NetworkConfig, TransactionParameters
from .notification import Notification, NotificationProof, PublicationProof
from .restrictions import (
    AccountRestriction,
    RestrictionScope,
    TokenRestriction,
    TokenRestrictionType,
)
from .token import (
    MultisigInfo,
    Operator,
    TokenIdentifier,
    TokenInfo,
    TokenRole,
    TokenSource,
)

__all__ = [
    'AllowanceResult',
    'CommandOption',
    'AccountMetadata',
    'TokenMetadata',
    'NetworkConfig',
    'TransactionParameters',
    'Notification',
    'NotificationProof',
    'PublicationProof',
    'AccountRestriction',
    'RestrictionScope',
    'TokenRestriction',
    'TokenRestrictionType',
    'MultisigInfo',
    'Operator',
    'TokenIdentifier',
    'TokenInfo',
    'TokenRole',
    'TokenSource',
]
