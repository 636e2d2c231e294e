"""Column mapping model for CSV imports."""

from dataclasses import dataclass, asdict, fields
from typing import Optional


@dataclass
class ColumnMapping:
    """Maps logical transaction fields to source CSV column headers.

    date, payee and amount are required; every other field is optional.
    """

    date: str
    payee: str
    amount: str
    transaction_id: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    account: Optional[str] = None
    balance: Optional[str] = None
    reference: Optional[str] = None

    def to_dict(self) -> dict:
        return {key: value for key, value in asdict(self).items() if value}

    @classmethod
    def from_dict(cls, data: dict) -> "ColumnMapping":
        known = {f.name for f in fields(cls)}
        missing = [key for key in ("date", "payee", "amount") if not data.get(key)]
        if missing:
            raise ValueError(f"Column mapping is missing required fields: {missing}")
        return cls(**{key: value for key, value in data.items() if key in known})
