"""
Tests for the NIP13 CreateToken Command

Covers argument validation, the ordering and signers of the emitted
operations, supply handling and determinism.
"""

import asyncio

import pytest

from contracts.exceptions import (
    InvalidArgumentError,
    MinimumRequiredOperatorsError,
    MissingArgumentError,
)
from helpers.derivation import nonce_from_seed
from ledger.ids import generate_namespace_id, generate_namespace_path, generate_uint64_key
from ledger.network import NetworkType
from ledger.transactions import (
    MosaicRestrictionType,
    NamespaceRegistrationType,
    TransactionType,
)
from models.command_option import CommandOption
from models.notification import Notification
from models.token import Operator, TokenIdentifier, TokenRole
from standards.nip13 import NIP13
from tests.conftest import NOW, TEST_MNEMONIC, make_account


@pytest.fixture
def standard(network_config, reader):
    return NIP13(network_config, reader=reader, mnemonic=TEST_MNEMONIC)


@pytest.fixture
def argv(operators):
    return {
        'name': 'cat.token',
        'source': 'ISIN:US0000000000',
        'identifier': 'ISIN:US0000000000:cat.token',
        'operators': [op.public_key.hex for op in operators[:2]],
    }


def compile_token(standard, actor, target, argv):
    return asyncio.run(standard.execute(actor, target, 'CreateToken', argv, now=NOW))


def types_of(aggregate):
    return [inner.type for inner in aggregate.inner_transactions]


class TestArguments:
    @pytest.mark.parametrize("missing", ['name', 'source', 'identifier', 'operators'])
    def test_missing_argument(self, standard, actor, target, argv, missing):
        del argv[missing]
        with pytest.raises(MissingArgumentError) as exc_info:
            compile_token(standard, actor, target, argv)
        assert exc_info.value.argument == missing

    def test_too_few_operators(self, standard, actor, target, argv, operators):
        argv['operators'] = [operators[0].public_key.hex]
        with pytest.raises(MinimumRequiredOperatorsError) as exc_info:
            compile_token(standard, actor, target, argv)
        assert exc_info.value.required == 2
        assert exc_info.value.given == 1

    def test_no_operators(self, standard, actor, target, argv):
        argv['operators'] = []
        with pytest.raises(MinimumRequiredOperatorsError):
            compile_token(standard, actor, target, argv)

    def test_single_operator_value_is_wrapped(self, standard, actor, target, argv, operators):
        argv['operators'] = operators[0].public_key.hex
        with pytest.raises(MinimumRequiredOperatorsError):
            compile_token(standard, actor, target, argv)

    def test_duplicate_operators(self, standard, actor, target, argv, operators):
        argv['operators'] = [operators[0].public_key.hex, operators[0].public_key.hex]
        with pytest.raises(InvalidArgumentError):
            compile_token(standard, actor, target, argv)

    def test_target_cannot_operate_itself(self, standard, actor, target, argv, operators):
        argv['operators'] = [operators[0].public_key.hex, target.public_key.hex]
        with pytest.raises(InvalidArgumentError):
            compile_token(standard, actor, target, argv)

    def test_invalid_operator_key(self, standard, actor, target, argv):
        argv['operators'] = ['not-a-key', 'AB' * 32]
        with pytest.raises(InvalidArgumentError) as exc_info:
            compile_token(standard, actor, target, argv)
        assert exc_info.value.argument == 'operators'

    def test_operator_on_other_network(self, standard, actor, target, argv, operators):
        argv['operators'] = [operators[0], make_account(4, NetworkType.MAIN_NET)]
        with pytest.raises(InvalidArgumentError):
            compile_token(standard, actor, target, argv)

    def test_namespace_too_deep(self, standard, actor, target, argv):
        argv['name'] = 'a.b.c.d'
        with pytest.raises(InvalidArgumentError) as exc_info:
            compile_token(standard, actor, target, argv)
        assert exc_info.value.argument == 'name'

    @pytest.mark.parametrize("name", ['Cat', 'cat..token', 'cat.', 'cat token'])
    def test_invalid_namespace_segment(self, standard, actor, target, argv, name):
        argv['name'] = name
        with pytest.raises(InvalidArgumentError):
            compile_token(standard, actor, target, argv)

    def test_negative_supply(self, standard, actor, target, argv):
        argv['supply'] = -1
        with pytest.raises(InvalidArgumentError) as exc_info:
            compile_token(standard, actor, target, argv)
        assert exc_info.value.argument == 'supply'


class TestOperations:
    def test_operation_order(self, standard, actor, target, argv):
        aggregate = compile_token(standard, actor, target, argv)

        assert types_of(aggregate) == [
            TransactionType.TRANSFER,
            TransactionType.MULTISIG_ACCOUNT_MODIFICATION,
            TransactionType.NAMESPACE_REGISTRATION,
            TransactionType.NAMESPACE_REGISTRATION,
            TransactionType.MOSAIC_DEFINITION,
            TransactionType.MOSAIC_SUPPLY_CHANGE,
            TransactionType.ACCOUNT_MOSAIC_RESTRICTION,
            TransactionType.MOSAIC_GLOBAL_RESTRICTION,
            TransactionType.MOSAIC_ADDRESS_RESTRICTION,
            TransactionType.MOSAIC_ADDRESS_RESTRICTION,
        ]
        assert aggregate.type == TransactionType.AGGREGATE_BONDED

    def test_notification(self, standard, actor, target, argv):
        aggregate = compile_token(standard, actor, target, argv)
        identifier = TokenIdentifier.create(nonce_from_seed(argv['identifier']), target.address)

        notification = aggregate.inner_transactions[0].transaction
        assert notification.recipient == target.address
        assert Notification.from_message(notification.message) == Notification(
            revision=1, action='create', token_id=identifier.id
        )

    @pytest.mark.parametrize("count", [2, 3])
    def test_multisig_threshold(self, standard, actor, target, argv, operators, count):
        argv['operators'] = [op.public_key.hex for op in operators[:count]]
        modification = compile_token(standard, actor, target, argv).inner_transactions[1].transaction

        assert modification.min_approval_delta == count - 1
        assert modification.min_removal_delta == count - 1
        assert modification.address_additions == tuple(op.address for op in operators[:count])

    def test_namespaces_parent_first(self, standard, actor, target, argv):
        argv['name'] = 'a.b.c'
        aggregate = compile_token(standard, actor, target, argv)

        registrations = [
            inner.transaction for inner in aggregate.inner_transactions
            if inner.type == TransactionType.NAMESPACE_REGISTRATION
        ]
        path = generate_namespace_path('a.b.c')

        assert [r.name for r in registrations] == ['a', 'b', 'c']
        assert [r.namespace_id for r in registrations] == path
        assert registrations[0].registration_type == NamespaceRegistrationType.ROOT
        assert registrations[0].duration == NIP13.NAMESPACE_DURATION
        assert registrations[1].parent_id == path[0]
        assert registrations[2].parent_id == path[1]
        assert registrations[2].namespace_id == generate_namespace_id('c', path[1])

    def test_single_level_name(self, standard, actor, target, argv):
        argv['name'] = 'cat'
        assert types_of(compile_token(standard, actor, target, argv)).count(
            TransactionType.NAMESPACE_REGISTRATION
        ) == 1

    def test_mosaic_definition_uses_identifier(self, standard, actor, target, argv):
        aggregate = compile_token(standard, actor, target, argv)
        identifier = TokenIdentifier.create(nonce_from_seed(argv['identifier']), target.address)

        definition = aggregate.inner_transactions[4].transaction
        assert definition.nonce == identifier.nonce_bytes
        assert definition.mosaic_id == identifier.mosaic_id
        assert definition.duration == NIP13.NAMESPACE_DURATION

    def test_default_supply(self, standard, actor, target, argv):
        supply = compile_token(standard, actor, target, argv).inner_transactions[5].transaction
        assert supply.type == TransactionType.MOSAIC_SUPPLY_CHANGE
        assert supply.delta == 1

    def test_explicit_supply(self, standard, actor, target, argv):
        argv['supply'] = 5
        supply = compile_token(standard, actor, target, argv).inner_transactions[5].transaction
        assert supply.delta == 5

    def test_zero_supply_skips_supply_change(self, standard, actor, target, argv):
        argv['supply'] = 0
        assert TransactionType.MOSAIC_SUPPLY_CHANGE not in types_of(compile_token(standard, actor, target, argv))

    def test_restrictions(self, standard, actor, target, argv, operators):
        aggregate = compile_token(standard, actor, target, argv)
        identifier = TokenIdentifier.create(nonce_from_seed(argv['identifier']), target.address)
        inner = aggregate.inner_transactions

        account_restriction = inner[6].transaction
        assert account_restriction.restriction_additions == (identifier.mosaic_id,)

        global_restriction = inner[7].transaction
        assert global_restriction.restriction_key == generate_uint64_key(NIP13.ROLE_KEY)
        assert global_restriction.new_restriction_type == MosaicRestrictionType.GE
        assert global_restriction.new_restriction_value == TokenRole.HOLDER

        for entry, operator in zip(inner[8:], operators[:2]):
            assert entry.transaction.target_address == operator.address
            assert entry.transaction.new_restriction_value == TokenRole.OPERATOR
            assert entry.transaction.restriction_key == generate_uint64_key(NIP13.ROLE_KEY)

    @pytest.mark.parametrize("count", [2, 3])
    def test_signers(self, standard, actor, target, argv, operators, count):
        argv['operators'] = [op.public_key.hex for op in operators[:count]]
        aggregate = compile_token(standard, actor, target, argv)
        inner = aggregate.inner_transactions

        restrictions = [entry for entry in inner if entry.type == TransactionType.MOSAIC_ADDRESS_RESTRICTION]
        assert len(restrictions) == count
        assert [entry.signer for entry in restrictions] == operators[:count]
        assert [entry.transaction.target_address for entry in restrictions] == [
            op.address for op in operators[:count]
        ]

        others = [entry for entry in inner if entry.type != TransactionType.MOSAIC_ADDRESS_RESTRICTION]
        assert all(entry.signer == target for entry in others)
        assert aggregate.signers == [target] + operators[:count]
        assert aggregate.cosigners == operators[:count]

    def test_required_option_without_value(self, standard, actor, target, argv):
        options = [CommandOption(name=key, value=value) for key, value in argv.items()]
        options.append(CommandOption(name='memo', required=True))

        with pytest.raises(MissingArgumentError) as exc_info:
            compile_token(standard, actor, target, options)
        assert exc_info.value.argument == 'memo'

    def test_operators_as_models(self, standard, actor, target, argv, operators):
        argv['operators'] = [operators[0], Operator(public_key=operators[1].public_key.hex)]
        aggregate = compile_token(standard, actor, target, argv)
        assert aggregate.cosigners == operators[:2]


class TestDeterminism:
    def test_same_inputs_same_output(self, standard, actor, target, argv):
        first = compile_token(standard, actor, target, dict(argv))
        second = compile_token(standard, actor, target, dict(argv))
        assert first.to_dict() == second.to_dict()

    def test_identifier_idempotent(self, standard, actor, target, argv):
        first = compile_token(standard, actor, target, dict(argv)).inner_transactions[4].transaction
        second = compile_token(standard, actor, target, dict(argv)).inner_transactions[4].transaction
        assert first.mosaic_id == second.mosaic_id

    def test_identifier_changes_token_id(self, standard, actor, target, argv):
        first = compile_token(standard, actor, target, dict(argv)).inner_transactions[4].transaction
        argv['identifier'] = 'another-seed'
        second = compile_token(standard, actor, target, argv).inner_transactions[4].transaction
        assert first.mosaic_id != second.mosaic_id


class TestCreateTokenShortcut:
    def test_create_token(self, standard, actor, operators):
        target, aggregate = asyncio.run(standard.create_token(
            actor, 'cat.token', 'ISIN:US0000000000', operators[:2], supply=10, now=NOW
        ))

        assert target == standard.get_target('cat.token', 'ISIN:US0000000000')
        assert aggregate.initiator == target
        assert aggregate.inner_transactions[5].transaction.delta == 10

    def test_default_identifier(self, standard, actor, operators):
        target, aggregate = asyncio.run(standard.create_token(
            actor, 'cat.token', 'src', operators[:2], now=NOW
        ))
        identifier = TokenIdentifier.create(nonce_from_seed('src:cat.token'), target.address)

        assert aggregate.inner_transactions[4].transaction.mosaic_id == identifier.mosaic_id
