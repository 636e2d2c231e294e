from ingestion.mapping import read_csv, rows_to_transactions
from reconciliation import reconcile

__all__ = ["read_csv", "rows_to_transactions", "import_transactions"]


def import_transactions(source, mapping, store, policy: str = "strict", dayfirst: bool = False):
    """Parse a CSV export, drop duplicates and save the new transactions.

    Args:
        source: Text stream of the CSV export.
        mapping: ColumnMapping for the file's layout.
        store: TransactionStore to read existing and save new transactions.
        policy: Duplicate detection policy ('strict' or 'off').
        dayfirst: Parse ambiguous dates as DD/MM.

    Returns:
        ReconcileResult of the import.

    Raises:
        ValueError: If the file or mapping is invalid.
        PersistenceError: If saving fails. Nothing is saved in that case.
    """
    headers, rows = read_csv(source)
    parsed = rows_to_transactions(headers, rows, mapping, dayfirst=dayfirst)

    result = reconcile(parsed, store.get_all(), policy)
    store.add_all(result.accepted)
    return result
