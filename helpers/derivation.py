"""
NIP13 - Derivation Helpers

Deterministic derivation of token accounts and token nonces. Token
accounts live on hardened SLIP-10 paths of the form
``m/44'/{coin}'/{account}'/0'/0'`` where the account level is computed
from the token name and source.
"""

import logging
import re
from typing import List, Union

from contracts.exceptions import InvalidDerivationPathError
from crypto.exceptions import DerivationError
from crypto.keys import derive_key_from_path, parse_derivation_path, sha3_256
from ledger.accounts import PublicAccount
from ledger.ids import NONCE_SIZE
from ledger.network import NetworkType


logger = logging.getLogger(__name__)

PATH_PATTERN = re.compile(r"^m/44'/(\d+)'/(\d+)'/0'/0'$")
MAX_ACCOUNT_INDEX = 0x7FFFFFFF


def validate_path(path: str, network_type: NetworkType = None) -> List[int]:
    """
    Validate a token account derivation path.

    Args:
        path: Derivation path
        network_type: When given, the coin type must match this network

    Returns:
        Parsed path indices

    Raises:
        InvalidDerivationPathError: If the path is malformed or out of range
    """
    match = PATH_PATTERN.match(path or '')
    if not match:
        raise InvalidDerivationPathError(
            path, f"Derivation path must match m/44'/coin'/account'/0'/0': {path!r}"
        )

    coin_type = int(match.group(1))
    if network_type is not None and coin_type != network_type.coin_type:
        raise InvalidDerivationPathError(
            path, f"Coin type {coin_type} does not match network {network_type.name}"
        )

    try:
        return parse_derivation_path(path)
    except DerivationError as e:
        raise InvalidDerivationPathError(path, str(e))


def token_path(name: str, source: str, network_type: NetworkType) -> str:
    """
    Compute the derivation path of a token account.

    Args:
        name: Token name
        source: Token provenance tag
        network_type: Network the token lives on

    Returns:
        Hardened derivation path
    """
    if not name or not source:
        raise InvalidDerivationPathError("", "Token name and source are required for derivation")

    digest = sha3_256(f"{source}:{name}".encode('utf-8'))
    account = int.from_bytes(digest[:4], 'big') & MAX_ACCOUNT_INDEX
    return f"m/44'/{network_type.coin_type}'/{account}'/0'/0'"


def derive_account(mnemonic: str, path: str, network_type: NetworkType,
                   passphrase: str = "") -> PublicAccount:
    """
    Derive the public account at a path of a BIP39 mnemonic.

    Args:
        mnemonic: BIP39 mnemonic phrase
        path: Token account derivation path
        network_type: Network of the account
        passphrase: Optional BIP39 passphrase

    Returns:
        Derived public account
    """
    validate_path(path, network_type)

    try:
        extended_key = derive_key_from_path(mnemonic, path, passphrase)
    except DerivationError as e:
        raise InvalidDerivationPathError(path, f"Derivation failed: {e}")

    account = PublicAccount(extended_key.public_key(), network_type)
    logger.debug(f"Derived account {account.address.plain} at {path}")
    return account


def nonce_from_seed(seed: Union[str, bytes, int]) -> bytes:
    """
    Turn a nonce seed into a 4-byte token nonce.

    An 8-character hex string or 4-byte value is used as is, an integer is
    encoded little-endian, any other string is hashed.

    Raises:
        InvalidDerivationPathError: If the seed is empty or out of range
    """
    if isinstance(seed, bool):
        raise InvalidDerivationPathError(str(seed), f"Unsupported nonce seed: {seed!r}")

    if isinstance(seed, int):
        if seed < 0 or seed > 0xFFFFFFFF:
            raise InvalidDerivationPathError(str(seed), f"Nonce out of range: {seed}")
        return seed.to_bytes(NONCE_SIZE, 'little')

    if isinstance(seed, bytes):
        if len(seed) != NONCE_SIZE:
            raise InvalidDerivationPathError(seed.hex(), f"Nonce must be {NONCE_SIZE} bytes")
        return seed

    if isinstance(seed, str) and seed:
        if re.match(r'^[0-9a-fA-F]{%d}$' % (NONCE_SIZE * 2), seed):
            return bytes.fromhex(seed)
        return sha3_256(seed.encode('utf-8'))[:NONCE_SIZE]

    raise InvalidDerivationPathError(str(seed), f"Unsupported nonce seed: {seed!r}")
