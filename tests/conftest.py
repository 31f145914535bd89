"""
Pytest configuration and fixtures for NIP13 tests.
"""

from typing import Dict, Optional, Tuple

import pytest

from contracts.context import Context
from contracts.ledger import LedgerReader
from crypto.keys import PrivateKey
from ledger.accounts import PublicAccount
from ledger.network import Address, NetworkType
from models.metadata import AccountMetadata, TokenMetadata
from models.network import NetworkConfig
from models.token import MultisigInfo, TokenInfo


GENERATION_HASH = "49D6E1CE276A85B70EAFE52349AACCA389302E7A9754BCF1221E79494FC665A4"
TEST_MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)
NOW = 1700000000.0


def make_account(index: int, network_type: NetworkType = NetworkType.TEST_NET) -> PublicAccount:
    """Deterministic public account built from a repeated-byte private key."""
    return PublicAccount(PrivateKey(bytes([index]) * 32).public_key(), network_type)


class FakeLedgerReader(LedgerReader):
    """In-memory ledger reader."""

    def __init__(self):
        self.multisig: Dict[Address, MultisigInfo] = {}
        self.tokens: Dict[int, TokenInfo] = {}
        self.token_metadata: Dict[Tuple[Address, int, str], TokenMetadata] = {}
        self.account_metadata: Dict[Tuple[Address, str], AccountMetadata] = {}
        self.calls = []

    def add_multisig(self, account: PublicAccount, cosignatories, min_approval: Optional[int] = None):
        approval = len(cosignatories) - 1 if min_approval is None else min_approval
        self.multisig[account.address] = MultisigInfo(
            account_address=account.address.plain,
            min_approval=approval,
            min_removal=approval,
            cosignatory_addresses=[c.address.plain for c in cosignatories],
        )

    async def get_multisig_info(self, address):
        self.calls.append(('multisig', address))
        return self.multisig.get(address)

    async def get_token_info(self, token_id):
        self.calls.append(('token', token_id))
        return self.tokens.get(token_id)

    async def get_token_metadata(self, target, token_id, key):
        self.calls.append(('token_metadata', target, token_id, key))
        return self.token_metadata.get((target, token_id, key))

    async def get_account_metadata(self, target, key):
        self.calls.append(('account_metadata', target, key))
        return self.account_metadata.get((target, key))


@pytest.fixture
def network_config():
    """Test network configuration."""
    return NetworkConfig(network_type=NetworkType.TEST_NET, generation_hash=GENERATION_HASH)


@pytest.fixture
def actor():
    return make_account(1)


@pytest.fixture
def target():
    return make_account(2)


@pytest.fixture
def operators():
    return [make_account(3), make_account(4), make_account(5)]


@pytest.fixture
def context(network_config, actor):
    """Empty execution context for helper tests."""
    return Context(network_config, actor)


@pytest.fixture
def reader():
    return FakeLedgerReader()


@pytest.fixture
def mnemonic():
    return TEST_MNEMONIC
