"""
Period reports: cashflow totals, category breakdowns and daily summaries.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from household_finance_mcp.models.account import Account
from household_finance_mcp.models.report import CashflowSummary, CategoryTotal, DailySummary
from household_finance_mcp.models.transaction import EXPENSE, INCOME, Transaction


def filter_transactions(
    transactions: Iterable[Transaction],
    accounts: Sequence[Account],
    start: Optional[date] = None,
    end: Optional[date] = None,
    owner: Optional[str] = None,
) -> List[Transaction]:
    """
    Filter transactions by inclusive day range and source-account owner.

    Transactions whose source account is unknown never match an owner filter.
    """
    owners = {acc.account_id: acc.owner for acc in accounts}
    result = []
    for txn in transactions:
        day = txn.day
        if start is not None and day < start:
            continue
        if end is not None and day > end:
            continue
        if owner is not None and owners.get(txn.account_id) != owner:
            continue
        result.append(txn)
    return result


def summarize_cashflow(
    transactions: Iterable[Transaction],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> CashflowSummary:
    """Total income and expense; transfers move money without earning or spending it."""
    income = 0.0
    expense = 0.0
    count = 0
    for txn in transactions:
        if txn.type == INCOME:
            income += txn.amount
        elif txn.type == EXPENSE:
            expense += txn.amount
        else:
            continue
        count += 1

    return CashflowSummary(
        start_date=start.isoformat() if start else None,
        end_date=end.isoformat() if end else None,
        income=round(income, 2),
        expense=round(expense, 2),
        net=round(income - expense, 2),
        transaction_count=count,
    )


def category_breakdown(
    transactions: Iterable[Transaction],
    transaction_type: str = EXPENSE,
    exclude_adjustments: bool = True,
) -> List[CategoryTotal]:
    """
    Aggregate amounts by category.

    Args:
        transactions: Transactions to aggregate
        transaction_type: INCOME or EXPENSE
        exclude_adjustments: Skip balance corrections, which would skew the breakdown

    Returns:
        Category totals, largest first
    """
    totals: Dict[str, float] = defaultdict(float)
    counts: Dict[str, int] = defaultdict(int)

    for txn in transactions:
        if txn.type != transaction_type:
            continue
        if exclude_adjustments and txn.is_adjustment:
            continue
        category = txn.category or "Uncategorized"
        totals[category] += txn.amount
        counts[category] += 1

    breakdown = [
        CategoryTotal(category=cat, total=round(amount, 2), transaction_count=counts[cat])
        for cat, amount in totals.items()
    ]
    breakdown.sort(key=lambda c: c.total, reverse=True)
    return breakdown


def daily_summaries(transactions: Iterable[Transaction]) -> List[DailySummary]:
    """Per-day income, expense and net, newest day first."""
    by_day: Dict[date, DailySummary] = {}
    for txn in transactions:
        if txn.type not in (INCOME, EXPENSE):
            continue
        day = txn.day
        summary = by_day.setdefault(day, DailySummary(date=day.isoformat()))
        if txn.type == INCOME:
            summary.income += txn.amount
        else:
            summary.expense += txn.amount
        summary.total = summary.income - summary.expense

    return [by_day[day] for day in sorted(by_day, reverse=True)]


def group_totals(
    accounts: Iterable[Account], owner: Optional[str] = None
) -> Dict[str, float]:
    """Balance per account group, optionally for one owner."""
    totals: Dict[str, float] = defaultdict(float)
    for acc in accounts:
        if owner is not None and acc.owner != owner:
            continue
        totals[acc.group] += acc.balance
    return dict(totals)
