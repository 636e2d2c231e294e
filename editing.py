"""Direct user edits of a single transaction: tags and the savings flag."""

from typing import List

from services.store import TransactionStore


def _get(store: TransactionStore, transaction_id: str):
    transaction = store.find(transaction_id)
    if transaction is None:
        raise ValueError(f"Transaction with ID '{transaction_id}' not found")
    return transaction


def add_tag(store: TransactionStore, transaction_id: str, tag: str) -> List[str]:
    """Append a tag unless the transaction already has it.

    Returns:
        The transaction's tags after the edit.
    """
    tag = tag.strip()
    if not tag:
        raise ValueError("Tag cannot be empty")

    transaction = _get(store, transaction_id)
    if tag in transaction.tags:
        return transaction.tags

    tags = transaction.tags + [tag]
    store.update_one(transaction_id, {"tags": tags})
    return tags


def remove_tag(store: TransactionStore, transaction_id: str, tag: str) -> List[str]:
    transaction = _get(store, transaction_id)
    tags = [t for t in transaction.tags if t != tag]
    if len(tags) != len(transaction.tags):
        store.update_one(transaction_id, {"tags": tags})
    return tags


def set_saving(store: TransactionStore, transaction_id: str, is_saving: bool) -> None:
    _get(store, transaction_id)
    store.update_one(transaction_id, {"is_saving": is_saving})
