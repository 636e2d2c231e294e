"""Duplicate reconciliation for imported transactions.

Bank transaction IDs are not used: re-exports of overlapping date ranges often
omit or regenerate them, and matching on them alone suppresses genuine
transactions. A transaction is a duplicate only when date, payee and amount
are all exactly equal to a stored one. Two real purchases that share all three
(two identical coffees on the same day) are therefore treated as duplicates;
this false-positive rate is accepted.
"""

from dataclasses import dataclass
from typing import List

from models.transaction import Transaction
from logger import get_logger

logger = get_logger()

POLICIES = ("strict", "off")


@dataclass
class ReconcileResult:
    """Outcome of reconciling an import batch against the store."""

    accepted: List[Transaction]
    skipped_count: int


def _key(transaction: Transaction) -> tuple:
    return (transaction.date, transaction.payee, transaction.amount)


def reconcile(
    incoming: List[Transaction],
    existing: List[Transaction],
    policy: str = "strict",
) -> ReconcileResult:
    """Decide which incoming transactions are new.

    Args:
        incoming: Parsed transactions from an import.
        existing: Transactions already in the store.
        policy: 'strict' (exact date + payee + amount match) or 'off'.

    Returns:
        ReconcileResult with the accepted transactions (in incoming order) and
        the number of skipped duplicates.

    Raises:
        ValueError: If policy is unknown.
    """
    if policy not in POLICIES:
        raise ValueError(f"Unknown duplicate detection policy: {policy}")

    if policy == "off":
        return ReconcileResult(accepted=list(incoming), skipped_count=0)

    existing_keys = {_key(t) for t in existing}

    accepted = []
    skipped = 0
    for transaction in incoming:
        if _key(transaction) in existing_keys:
            skipped += 1
        else:
            accepted.append(transaction)

    if skipped:
        logger.info(f"Skipped {skipped} duplicate transaction(s)")

    return ReconcileResult(accepted=accepted, skipped_count=skipped)
