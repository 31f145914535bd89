"""
NIP13 - Notifications and Proofs

Every NIP13 command opens its aggregate with a proof-of-intent
notification: a minimal transfer to the token account whose message names
the protocol revision, the command action and the token id. Once the
aggregate is confirmed, the notification proofs tie each notification to
the transaction that carried it.
"""

import re
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ledger.transactions import AggregateTransaction, TransactionType


NOTIFICATION_PATTERN = re.compile(r'^NIP13\(v(\d+)\):([a-z][a-z-]*):([0-9A-F]{16})$')


def _validate_hash(v: str) -> str:
    if not re.match(r'^[a-fA-F0-9]{64}$', v):
        raise ValueError('Transaction hash must be 64-character hex string')
    return v.upper()


class Notification(BaseModel):
    """Out-of-band claim about a NIP13 command execution."""

    model_config = ConfigDict(frozen=True)

    revision: int = Field(..., ge=1)
    action: str = Field(..., pattern=r'^[a-z][a-z-]*$')
    token_id: str = Field(..., pattern=r'^[0-9A-F]{16}$')

    @property
    def message(self) -> str:
        return f"NIP13(v{self.revision}):{self.action}:{self.token_id}"

    @classmethod
    def from_message(cls, message: str) -> 'Notification':
        """
        Parse a notification message.

        Raises:
            ValueError: If the message is not a NIP13 notification
        """
        match = NOTIFICATION_PATTERN.match(message or '')
        if not match:
            raise ValueError(f"Not a NIP13 notification: {message!r}")

        revision, action, token_id = match.groups()
        return cls(revision=int(revision), action=action, token_id=token_id)

    @classmethod
    def is_notification(cls, message: str) -> bool:
        return bool(NOTIFICATION_PATTERN.match(message or ''))


class NotificationProof(BaseModel):
    """On-chain evidence for one notification."""

    model_config = ConfigDict(frozen=True)

    notification: Notification
    transaction_hash: str
    height: int = Field(..., ge=1)

    @field_validator('transaction_hash')
    @classmethod
    def validate_transaction_hash(cls, v):
        return _validate_hash(v)


class PublicationProof(BaseModel):
    """On-chain evidence for a confirmed NIP13 aggregate."""

    model_config = ConfigDict(frozen=True)

    aggregate_hash: str
    height: int = Field(..., ge=1)
    signers: List[str] = Field(default_factory=list, description="Signer public keys (hex)")
    proofs: List[NotificationProof] = Field(default_factory=list)

    @field_validator('aggregate_hash')
    @classmethod
    def validate_aggregate_hash(cls, v):
        return _validate_hash(v)

    @classmethod
    def create(cls, aggregate: AggregateTransaction, aggregate_hash: str, height: int) -> 'PublicationProof':
        """
        Build the publication proof of a confirmed aggregate.

        Args:
            aggregate: The aggregate that was announced
            aggregate_hash: Hash of the confirmed aggregate
            height: Block height of the confirmation

        Returns:
            Proof listing every notification carried by the aggregate
        """
        proofs = []
        for inner in aggregate.inner_transactions:
            if inner.type != TransactionType.TRANSFER:
                continue
            if not Notification.is_notification(inner.transaction.message):
                continue

            proofs.append(NotificationProof(
                notification=Notification.from_message(inner.transaction.message),
                transaction_hash=aggregate_hash,
                height=height,
            ))

        return cls(
            aggregate_hash=aggregate_hash,
            height=height,
            signers=[signer.public_key.hex for signer in aggregate.signers],
            proofs=proofs,
        )

    def covers(self, notification: Notification) -> bool:
        return any(proof.notification == notification for proof in self.proofs)
