import csv
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, TextIO, Tuple

from dateutil import parser as date_parser

from models.column_mapping import ColumnMapping
from models.transaction import Transaction
from logger import get_logger

logger = get_logger()

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def read_csv(source: TextIO) -> Tuple[List[str], List[List[str]]]:
    """Split a CSV export into its header row and data rows.

    Rows whose cells are all blank are dropped.

    Raises:
        ValueError: If the file has no header row.
    """
    reader = csv.reader(source)

    try:
        headers = [h.strip() for h in next(reader)]
    except StopIteration:
        raise ValueError("Empty CSV file")

    rows = [row for row in reader if any(cell.strip() for cell in row)]
    logger.info(f"Read {len(rows)} rows with columns: {headers}")
    return headers, rows


def parse_amount(value: Optional[str]) -> Decimal:
    """Parse a money cell, keeping only digits, '.' and '-'.

    Raises:
        ValueError: If nothing numeric is left.
    """
    cleaned = _NON_NUMERIC.sub("", value or "")
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}")


def parse_date(value: Optional[str], dayfirst: bool = False) -> datetime:
    """Parse a date cell in any common format.

    Any timezone offset is dropped; all stored dates are naive local time.

    Raises:
        ValueError: If the cell is empty or not a date.
    """
    if not value or not value.strip():
        raise ValueError("Missing date")
    try:
        return date_parser.parse(value.strip(), dayfirst=dayfirst, ignoretz=True)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date {value!r}: {e}")


def parse_type(value: Optional[str]) -> Optional[str]:
    """Map a free-form type cell to 'credit', 'debit' or None."""
    if not value:
        return None
    lowered = value.lower()
    if "credit" in lowered:
        return "credit"
    if "debit" in lowered:
        return "debit"
    return None


def _column_indexes(headers: List[str], mapping: ColumnMapping) -> Dict[str, int]:
    indexes = {}
    for field_name, column in mapping.to_dict().items():
        if column not in headers:
            raise ValueError(f"Column '{column}' mapped to {field_name} not found in file")
        indexes[field_name] = headers.index(column)
    return indexes


def row_to_transaction(
    row: List[str], indexes: Dict[str, int], dayfirst: bool = False
) -> Transaction:
    """Convert a CSV row to a Transaction object.

    Args:
        row: Raw cells of one CSV row.
        indexes: Logical field name -> column index.
        dayfirst: Parse ambiguous dates as DD/MM.

    Returns:
        Transaction object

    Raises:
        ValueError: If the date or amount is missing or invalid
    """

    def cell(field_name: str) -> Optional[str]:
        index = indexes.get(field_name)
        if index is None or index >= len(row):
            return None
        return row[index]

    date = parse_date(cell("date"), dayfirst=dayfirst)
    amount = parse_amount(cell("amount"))

    balance = None
    raw_balance = cell("balance")
    if raw_balance and _NON_NUMERIC.sub("", raw_balance):
        try:
            balance = parse_amount(raw_balance)
        except ValueError:
            logger.debug(f"Ignoring unparseable balance {raw_balance!r}")

    return Transaction.create(
        date=date,
        payee=cell("payee") or "Unknown",
        amount=amount,
        transaction_id=cell("transaction_id") or None,
        type=parse_type(cell("type")),
        description=cell("description") or None,
        account=cell("account") or None,
        balance=balance,
        reference=cell("reference") or None,
    )


def rows_to_transactions(
    headers: List[str],
    rows: List[List[str]],
    mapping: ColumnMapping,
    dayfirst: bool = False,
) -> List[Transaction]:
    """Coerce raw CSV rows into transactions using a column mapping.

    Rows without a valid date and amount are skipped.

    Raises:
        ValueError: If a mapped column is not present in headers.
    """
    indexes = _column_indexes(headers, mapping)
    transactions = []

    # Header is line 1
    for line_num, row in enumerate(rows, start=2):
        try:
            transactions.append(row_to_transaction(row, indexes, dayfirst=dayfirst))
        except ValueError as e:
            logger.warning(f"Skipping line {line_num}: {e}")
            continue

    logger.info(f"Successfully parsed {len(transactions)} of {len(rows)} rows")
    return transactions
