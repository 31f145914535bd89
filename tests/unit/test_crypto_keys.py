"""
Tests for Crypto Keys Module

Tests Ed25519 key handling, SLIP-10 derivation from BIP39 seeds and the
hash functions used for addresses.
"""

import hashlib

import pytest

from crypto.keys import (
    HARDENED_OFFSET,
    ExtendedKey,
    PrivateKey,
    PublicKey,
    derive_key_from_path,
    generate_mnemonic,
    hash160,
    mnemonic_to_seed,
    parse_derivation_path,
    seed_to_master_key,
    sha3_256,
)
from crypto.exceptions import DerivationError, InvalidKeyError


TEST_MNEMONIC = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)


class TestPrivateKey:
    """Test PrivateKey class functionality."""

    def test_random_key_generation(self):
        key1 = PrivateKey()
        key2 = PrivateKey()

        assert key1.bytes != key2.bytes
        assert len(key1.bytes) == 32

    def test_key_from_bytes(self):
        key_bytes = b'\x01' * 32
        key = PrivateKey(key_bytes)
        assert key.bytes == key_bytes
        assert key.hex == key_bytes.hex()

    def test_invalid_key_bytes(self):
        with pytest.raises(InvalidKeyError):
            PrivateKey(b'\x01' * 31)

        with pytest.raises(InvalidKeyError):
            PrivateKey(b'\x01' * 33)

    def test_from_hex(self):
        key = PrivateKey.from_hex('01' * 32)
        assert key.bytes == b'\x01' * 32

        with pytest.raises(InvalidKeyError):
            PrivateKey.from_hex('zz' * 32)

    def test_public_key_derivation(self):
        public_key = PrivateKey(b'\x01' * 32).public_key()

        assert isinstance(public_key, PublicKey)
        assert len(public_key.bytes) == 32
        assert public_key == PrivateKey(b'\x01' * 32).public_key()
        assert public_key != PrivateKey(b'\x02' * 32).public_key()


class TestPublicKey:
    """Test PublicKey wrapper."""

    def test_hex_is_upper_case(self):
        public_key = PublicKey(b'\xab' * 32)
        assert public_key.hex == 'AB' * 32

    def test_from_hex_roundtrip(self):
        public_key = PrivateKey(b'\x07' * 32).public_key()
        assert PublicKey.from_hex(public_key.hex.lower()) == public_key

    def test_invalid_length(self):
        with pytest.raises(InvalidKeyError):
            PublicKey(b'\x01' * 33)

        with pytest.raises(InvalidKeyError):
            PublicKey.from_hex('AB' * 31)

    def test_hashable(self):
        a = PublicKey(b'\x01' * 32)
        b = PublicKey(b'\x01' * 32)
        assert len({a, b}) == 1


class TestHashes:
    """Test digest helpers."""

    def test_sha3_256(self):
        assert sha3_256(b'abc') == hashlib.sha3_256(b'abc').digest()

    def test_hash160_length(self):
        assert len(hash160(b'\x01' * 32)) == 20


class TestMnemonic:
    """Test BIP39 mnemonic handling."""

    def test_generate_mnemonic(self):
        assert len(generate_mnemonic().split()) == 24
        assert len(generate_mnemonic(128).split()) == 12

    def test_invalid_strength(self):
        with pytest.raises(DerivationError):
            generate_mnemonic(100)

    def test_mnemonic_to_seed(self):
        seed = mnemonic_to_seed(TEST_MNEMONIC)
        assert len(seed) == 64
        assert seed != mnemonic_to_seed(TEST_MNEMONIC, "passphrase")

    def test_invalid_mnemonic(self):
        with pytest.raises(DerivationError):
            mnemonic_to_seed("abandon " * 12)


class TestExtendedKey:
    """Test SLIP-10 derivation."""

    def test_master_key(self):
        master = seed_to_master_key(mnemonic_to_seed(TEST_MNEMONIC))
        assert isinstance(master, ExtendedKey)
        assert master.depth == 0
        assert len(master.chain_code) == 32

    def test_slip10_vector(self):
        master = seed_to_master_key(bytes.fromhex('000102030405060708090a0b0c0d0e0f'))

        assert master.key.hex == '2b4be7f19ee27bbf30c667b642d5f4aa69fd169872f8fc3059c08ebae2eb19e7'
        assert master.chain_code.hex() == '90046a93de5380a72b5e45010748567d5ea02bbf6522f979e05c0d8d8ca9fffb'
        assert master.public_key().hex == (
            'A4B2856BFEC510ABAB89753FAC1AC0E1112364E7D250545963F135F2A33188ED'
        )

    def test_hardened_child(self):
        master = seed_to_master_key(mnemonic_to_seed(TEST_MNEMONIC))
        child = master.derive_child(HARDENED_OFFSET + 44)

        assert child.depth == 1
        assert child.child_number == HARDENED_OFFSET + 44
        assert child.key.bytes != master.key.bytes

    def test_non_hardened_child_rejected(self):
        master = seed_to_master_key(mnemonic_to_seed(TEST_MNEMONIC))
        with pytest.raises(DerivationError):
            master.derive_child(0)

    def test_invalid_seed_length(self):
        with pytest.raises(DerivationError):
            seed_to_master_key(b'\x01' * 8)

    def test_derive_path_deterministic(self):
        path = "m/44'/1'/0'/0'/0'"
        key1 = derive_key_from_path(TEST_MNEMONIC, path)
        key2 = derive_key_from_path(TEST_MNEMONIC, path)
        other = derive_key_from_path(TEST_MNEMONIC, "m/44'/1'/1'/0'/0'")

        assert key1.depth == 5
        assert key1.public_key() == key2.public_key()
        assert key1.public_key() != other.public_key()

    def test_derive_path_with_non_hardened_level(self):
        with pytest.raises(DerivationError):
            derive_key_from_path(TEST_MNEMONIC, "m/44'/1'/0'/0/0")


class TestParseDerivationPath:
    """Test path parsing."""

    def test_parse_hardened_path(self):
        assert parse_derivation_path("m/44'/4343'/0'") == [
            HARDENED_OFFSET + 44,
            HARDENED_OFFSET + 4343,
            HARDENED_OFFSET,
        ]

    def test_parse_normal_level(self):
        assert parse_derivation_path("m/0/1'") == [0, HARDENED_OFFSET + 1]

    @pytest.mark.parametrize("path", ["44'/0'", "m/abc'", "m/44'/'", f"m/{HARDENED_OFFSET}'", None])
    def test_invalid_paths(self, path):
        with pytest.raises(DerivationError):
            parse_derivation_path(path)
