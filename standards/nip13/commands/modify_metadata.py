"""
NIP13 - ModifyMetadata Command

Sets a metadata entry on the token or on the token account. The update
is computed relative to the value currently stored on-chain.
"""

from typing import List, Optional, Tuple, Union

from contracts.command import BaseCommand
from contracts.exceptions import InvalidArgumentError
from helpers.transactions import create_account_metadata, create_mosaic_metadata
from ledger.transactions import InnerTransaction
from models.metadata import AccountMetadata, TokenMetadata
from models.token import MultisigInfo

from ..standard import NIP13
from .arguments import ModifyMetadataArguments

Metadata = Union[AccountMetadata, TokenMetadata]


@NIP13.register
class ModifyMetadata(BaseCommand):
    """Token command modifying token or token account metadata."""

    NAME = "ModifyMetadata"
    ACTION = "modify-metadata"
    ARGUMENTS = ['identifier', 'key', 'value']
    options_model = ModifyMetadataArguments

    @property
    def is_token_scope(self) -> bool:
        return self.options.scope == 'token'

    def _metadata(self) -> Metadata:
        try:
            if self.is_token_scope:
                return TokenMetadata(
                    key=self.options.key,
                    value=self.options.value,
                    target_address=self.target.address.plain,
                    token_id=self.identifier.id,
                )
            return AccountMetadata(
                key=self.options.key,
                value=self.options.value,
                target_address=self.target.address.plain,
            )
        except ValueError as e:
            raise InvalidArgumentError('value', str(e))

    async def synchronize(self) -> Tuple[Optional[MultisigInfo], Optional[Metadata]]:
        reader = self.require_reader()
        multisig = await reader.get_multisig_info(self.target.address)

        if self.is_token_scope:
            current = await reader.get_token_metadata(
                self.target.address, self.identifier.mosaic_id, self.options.key
            )
        else:
            current = await reader.get_account_metadata(self.target.address, self.options.key)

        return multisig, current

    def assemble(self, state: Tuple[Optional[MultisigInfo], Optional[Metadata]]) -> List[InnerTransaction]:
        """Build the inner transactions of a ModifyMetadata command."""
        multisig, current = state
        self.require_operator(multisig)

        metadata = self._metadata()
        if current is not None and current.value == metadata.value:
            raise InvalidArgumentError('value', f"metadata {metadata.key} already holds this value")

        if self.is_token_scope:
            operation = create_mosaic_metadata(self.context, metadata, current)
        else:
            operation = create_account_metadata(self.context, metadata, current)

        return [
            InnerTransaction(self.create_notification(), self.target),
            InnerTransaction(operation, self.target),
        ]
