"""
Tests for Derivation Helpers

Tests token account paths, account derivation and nonce seeds.
"""

import pytest

from contracts.exceptions import InvalidDerivationPathError
from crypto.keys import HARDENED_OFFSET
from helpers.derivation import derive_account, nonce_from_seed, token_path, validate_path
from ledger.network import NetworkType
from tests.conftest import TEST_MNEMONIC


class TestValidatePath:
    def test_valid_path(self):
        indices = validate_path("m/44'/1'/7'/0'/0'", NetworkType.TEST_NET)
        assert indices == [HARDENED_OFFSET + 44, HARDENED_OFFSET + 1, HARDENED_OFFSET + 7,
                           HARDENED_OFFSET, HARDENED_OFFSET]

    @pytest.mark.parametrize("path", [
        "",
        "m/44'/1'/0'",
        "m/44'/1'/0'/0/0",
        "m/45'/1'/0'/0'/0'",
        "m/44'/1'/2147483648'/0'/0'",
    ])
    def test_invalid_paths(self, path):
        with pytest.raises(InvalidDerivationPathError):
            validate_path(path)

    def test_coin_type_mismatch(self):
        with pytest.raises(InvalidDerivationPathError):
            validate_path("m/44'/4343'/0'/0'/0'", NetworkType.TEST_NET)


class TestTokenPath:
    def test_deterministic(self):
        path = token_path('cat.token', 'ISIN:US0000000000', NetworkType.TEST_NET)

        assert path == token_path('cat.token', 'ISIN:US0000000000', NetworkType.TEST_NET)
        assert path.startswith("m/44'/1'/")
        validate_path(path, NetworkType.TEST_NET)

    def test_depends_on_inputs(self):
        base = token_path('cat.token', 'src', NetworkType.TEST_NET)

        assert token_path('dog.token', 'src', NetworkType.TEST_NET) != base
        assert token_path('cat.token', 'other', NetworkType.TEST_NET) != base
        assert token_path('cat.token', 'src', NetworkType.MAIN_NET).startswith("m/44'/4343'/")

    def test_requires_name_and_source(self):
        with pytest.raises(InvalidDerivationPathError):
            token_path('', 'src', NetworkType.TEST_NET)
        with pytest.raises(InvalidDerivationPathError):
            token_path('name', '', NetworkType.TEST_NET)


class TestDeriveAccount:
    def test_derive_account(self):
        path = "m/44'/1'/0'/0'/0'"
        account = derive_account(TEST_MNEMONIC, path, NetworkType.TEST_NET)

        assert account == derive_account(TEST_MNEMONIC, path, NetworkType.TEST_NET)
        assert account != derive_account(TEST_MNEMONIC, path, NetworkType.TEST_NET, passphrase='x')
        assert account.network_type == NetworkType.TEST_NET

    def test_invalid_mnemonic(self):
        with pytest.raises(InvalidDerivationPathError):
            derive_account('not a mnemonic', "m/44'/1'/0'/0'/0'", NetworkType.TEST_NET)

    def test_wrong_network_path(self):
        with pytest.raises(InvalidDerivationPathError):
            derive_account(TEST_MNEMONIC, "m/44'/1'/0'/0'/0'", NetworkType.MAIN_NET)


class TestNonceFromSeed:
    def test_int_seed(self):
        assert nonce_from_seed(1) == b'\x01\x00\x00\x00'
        assert nonce_from_seed(0xFFFFFFFF) == b'\xff' * 4

    def test_bytes_seed(self):
        assert nonce_from_seed(b'\x01\x02\x03\x04') == b'\x01\x02\x03\x04'

    def test_hex_seed(self):
        assert nonce_from_seed('0A0B0C0D') == b'\x0a\x0b\x0c\x0d'

    def test_string_seed_is_hashed(self):
        nonce = nonce_from_seed('ISIN:US0000000000:cat.token')

        assert len(nonce) == 4
        assert nonce == nonce_from_seed('ISIN:US0000000000:cat.token')
        assert nonce != nonce_from_seed('ISIN:US0000000000:dog.token')

    @pytest.mark.parametrize("seed", [-1, 0x100000000, b'\x01', '', True, None, 1.5])
    def test_invalid_seeds(self, seed):
        with pytest.raises(InvalidDerivationPathError):
            nonce_from_seed(seed)
