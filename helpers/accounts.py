"""
NIP13 - Account Helpers
"""

from typing import Union

from ledger.accounts import PublicAccount
from ledger.exceptions import InvalidAddressError
from ledger.network import Address, NetworkType
from models.token import MultisigInfo, Operator


def create_public_account(public_key: str, network_type: NetworkType) -> PublicAccount:
    """Create public account from hex-encoded public key."""
    return PublicAccount.from_public_key(public_key, network_type)


def address_from_public_key(public_key: str, network_type: NetworkType) -> Address:
    """Derive the address of a hex-encoded public key."""
    return Address.from_public_key(public_key, network_type)


def to_public_account(value: Union[PublicAccount, Operator, str],
                      network_type: NetworkType) -> PublicAccount:
    """
    Coerce an account reference into a public account on a network.

    Args:
        value: Public account, operator or hex public key
        network_type: Expected network

    Returns:
        Public account

    Raises:
        InvalidAddressError: If a public account belongs to another network
        TypeError: If the value cannot designate an account
    """
    if isinstance(value, PublicAccount):
        if value.network_type != network_type:
            raise InvalidAddressError(
                f"Account {value} belongs to {value.network_type.name}, expected {network_type.name}"
            )
        return value

    if isinstance(value, Operator):
        return value.to_public_account(network_type)

    if isinstance(value, str):
        return create_public_account(value, network_type)

    raise TypeError(f"Cannot use {type(value).__name__} as an account")


def is_cosignatory(account: PublicAccount, multisig: MultisigInfo) -> bool:
    """Check whether an account cosigns for a multisig account."""
    return multisig is not None and multisig.is_cosignatory(account.address)
