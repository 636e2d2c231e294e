from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
import json
import uuid


@dataclass
class Transaction:
    id: str  # generated at import time
    date: datetime
    payee: str  # raw, as imported
    amount: Decimal  # signed: negative = outflow, positive = inflow
    transaction_id: Optional[str] = None  # bank-issued, not unique across re-imports
    type: Optional[str] = None  # 'credit', 'debit' or None
    description: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    account: Optional[str] = None
    balance: Optional[Decimal] = None
    reference: Optional[str] = None
    is_saving: Optional[bool] = None

    @classmethod
    def create(
        cls,
        date: datetime,
        payee: str,
        amount: Decimal,
        **kwargs,
    ) -> "Transaction":
        """Create a Transaction with a freshly generated ID."""
        return cls(
            id=f"txn-{uuid.uuid4().hex}",
            date=date,
            payee=payee,
            amount=amount,
            **kwargs,
        )

    def to_dict(self) -> dict:
        """Convert transaction to dictionary for database storage."""
        return {
            "id": self.id,
            "transaction_id": self.transaction_id,
            "date": self.date.isoformat(),
            "payee": self.payee,
            "amount": str(self.amount),
            "type": self.type,
            "description": self.description,
            "category": self.category,
            "tags": json.dumps(self.tags),
            "account": self.account,
            "balance": str(self.balance) if self.balance is not None else None,
            "reference": self.reference,
            "is_saving": None if self.is_saving is None else int(self.is_saving),
        }
