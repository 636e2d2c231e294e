"""Spending analytics.

Every function is a pure computation over a transaction list (and the
category list where the hierarchy matters). Nothing is cached or stored, so
results always reflect the transactions passed in. Empty input gives empty or
zero results.

Spending is the absolute value of negative amounts; income is the sum of
positive amounts.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

from config import SavingsGoal
from models.category import Category, DEFAULT_COLOR
from models.transaction import Transaction
from taxonomy.hierarchy import children, descendants, find_category, roots

UNCATEGORIZED = "Uncategorized"


@dataclass
class CategoryTotal:
    name: str
    total: Decimal
    color: str


@dataclass
class MonthlyBucket:
    month: str  # "YYYY/MM"
    income: Decimal
    spending: Decimal
    net: Decimal


@dataclass
class PayeeTotal:
    payee: str
    total: Decimal


@dataclass
class Summary:
    income: Decimal
    spending: Decimal
    net: Decimal


@dataclass
class SavingsProgress:
    saved: Decimal
    target: Decimal
    months: int
    ratio: Optional[Decimal]  # None when there is no target


def _spending(transactions: List[Transaction]) -> List[Transaction]:
    return [t for t in transactions if t.amount < 0]


def spending_by_category(transactions: List[Transaction]) -> Dict[str, Decimal]:
    """Sum spending per category name ("Uncategorized" when unset)."""
    totals: Dict[str, Decimal] = {}
    for t in _spending(transactions):
        name = t.category or UNCATEGORIZED
        totals[name] = totals.get(name, Decimal("0")) + abs(t.amount)
    return totals


def category_breakdown(
    transactions: List[Transaction], categories: List[Category]
) -> List[CategoryTotal]:
    """Spending per category with display colors, largest first."""
    breakdown = []
    for name, total in spending_by_category(transactions).items():
        category = find_category(name, categories)
        breakdown.append(
            CategoryTotal(
                name=name,
                total=total,
                color=category.color if category else DEFAULT_COLOR,
            )
        )
    return sorted(breakdown, key=lambda c: c.total, reverse=True)


def rollup_total(
    root_name: str, transactions: List[Transaction], categories: List[Category]
) -> Decimal:
    """Spending of a category including all of its descendant categories."""
    names = {root_name} | {c.name for c in descendants(root_name, categories)}
    totals = spending_by_category(transactions)
    return sum((totals[name] for name in names if name in totals), Decimal("0"))


def rollup_by_root(
    transactions: List[Transaction], categories: List[Category]
) -> Dict[str, Decimal]:
    """Rolled-up spending for every root category that has any.

    Spending in categories unknown to the taxonomy is reported under its own
    name; uncategorized spending under "Uncategorized".
    """
    result: Dict[str, Decimal] = {}
    for root_category in roots(categories):
        total = rollup_total(root_category.name, transactions, categories)
        if total:
            result[root_category.name] = total

    known = {c.name for c in categories}
    for name, total in spending_by_category(transactions).items():
        if name not in known:
            result[name] = result.get(name, Decimal("0")) + total

    return result


def drilldown(
    name: str, transactions: List[Transaction], categories: List[Category]
) -> Dict[str, Decimal]:
    """Rolled-up spending one level below a category.

    Spending booked directly on the category itself is reported under its
    own name. Children without spending are omitted.
    """
    result: Dict[str, Decimal] = {}

    direct = spending_by_category(transactions).get(name)
    if direct:
        result[name] = direct

    for child in children(name, categories):
        total = rollup_total(child.name, transactions, categories)
        if total:
            result[child.name] = total

    return result


def subscription_total(
    transactions: List[Transaction], categories: List[Category]
) -> Decimal:
    """Spending in categories flagged (directly or by inheritance) as subscriptions."""
    total = Decimal("0")
    for t in _spending(transactions):
        if not t.category:
            continue
        category = find_category(t.category, categories)
        if category and category.is_subscription:
            total += abs(t.amount)
    return total


def monthly_series(transactions: List[Transaction]) -> List[MonthlyBucket]:
    """Income, spending and net per calendar month, oldest first.

    Months use the transaction date as recorded; no timezone conversion.
    """
    buckets: Dict[str, Dict[str, Decimal]] = {}

    for t in transactions:
        month_key = f"{t.date.year:04d}/{t.date.month:02d}"
        entry = buckets.setdefault(
            month_key, {"income": Decimal("0"), "spending": Decimal("0")}
        )
        if t.amount < 0:
            entry["spending"] += abs(t.amount)
        else:
            entry["income"] += t.amount

    return [
        MonthlyBucket(
            month=month_key,
            income=entry["income"],
            spending=entry["spending"],
            net=entry["income"] - entry["spending"],
        )
        for month_key, entry in sorted(buckets.items())
    ]


def top_payees(transactions: List[Transaction], n: int = 10) -> List[PayeeTotal]:
    """Payees with the highest spending, largest first.

    Groups by the raw imported payee, not the renamed display payee.
    """
    totals: Dict[str, Decimal] = {}
    for t in _spending(transactions):
        totals[t.payee] = totals.get(t.payee, Decimal("0")) + abs(t.amount)

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [PayeeTotal(payee=payee, total=total) for payee, total in ranked[:n]]


def summary(transactions: List[Transaction]) -> Summary:
    income = sum((t.amount for t in transactions if t.amount > 0), Decimal("0"))
    spending = sum((abs(t.amount) for t in _spending(transactions)), Decimal("0"))
    return Summary(income=income, spending=spending, net=income - spending)


def savings_progress(
    transactions: List[Transaction], goal: SavingsGoal
) -> SavingsProgress:
    """Progress towards a savings goal over the months covered by transactions.

    Saved money is the absolute amount of transactions flagged is_saving. The
    target is the goal scaled to the number of calendar months between the
    oldest and newest transaction (inclusive).
    """
    if not transactions:
        return SavingsProgress(
            saved=Decimal("0"), target=Decimal("0"), months=0, ratio=None
        )

    saved = sum((abs(t.amount) for t in transactions if t.is_saving), Decimal("0"))

    first = min(t.date for t in transactions)
    last = max(t.date for t in transactions)
    months = (last.year - first.year) * 12 + (last.month - first.month) + 1

    monthly_target = goal.amount if goal.period == "month" else goal.amount / 12
    target = monthly_target * months

    ratio = saved / target if target > 0 else None
    return SavingsProgress(saved=saved, target=target, months=months, ratio=ratio)
