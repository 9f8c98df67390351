"""Receipt and order-notes builders for Razorpay orders.

Razorpay rejects receipts longer than 40 characters. Short transaction IDs
are used as-is so retries with the same ID map to the same receipt; longer
ones are replaced by a stable hash and kept in the order notes.
"""

import hashlib
from typing import Optional

MAX_RECEIPT_LENGTH = 40


def build_receipt(transaction_id: str) -> str:
    """Derive a bounded, deterministic receipt from a transaction ID.

    Args:
        transaction_id: Platform transaction identifier.

    Returns:
        The ID itself when it fits, otherwise the SHA-1 hex digest of the ID
        (always exactly 40 characters).
    """
    if len(transaction_id) <= MAX_RECEIPT_LENGTH:
        return transaction_id
    return hashlib.sha1(transaction_id.encode("utf-8")).hexdigest()[:MAX_RECEIPT_LENGTH]


def build_order_notes(
    transaction_id: str,
    idempotency_key: Optional[str] = None,
) -> dict[str, str]:
    """Build the notes attached to a Razorpay order.

    The full transaction ID is always stored under ``checkout_id`` so it can
    be recovered from the dashboard when the receipt is a hash.
    """
    notes = {"checkout_id": transaction_id}
    if idempotency_key:
        notes["idempotency_key"] = idempotency_key
    return notes
