"""Follow-up actions the platform may request after a transaction result."""

from gateway_shared.models.enums import TransactionAction, TransactionEventType

TRANSACTION_ACTIONS: dict[TransactionEventType, tuple[TransactionAction, ...]] = {
    TransactionEventType.CHARGE_SUCCESS: (TransactionAction.REFUND, TransactionAction.CANCEL),
    TransactionEventType.AUTHORIZATION_SUCCESS: (
        TransactionAction.REFUND,
        TransactionAction.CANCEL,
    ),
    TransactionEventType.REFUND_SUCCESS: (),
    TransactionEventType.CANCEL_SUCCESS: (),
}


def get_transaction_actions(result: TransactionEventType) -> list[TransactionAction]:
    """Actions allowed after ``result``; every failure result allows none."""
    return list(TRANSACTION_ACTIONS.get(result, ()))
