"""
Balance history reconstruction.

Historical balances are never stored. Asset history is rebuilt by starting
from the current balances and walking the transaction log backwards in
time, undoing each transaction to recover the balance the day before it
happened ("reverse replay").
"""

import logging
from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from household_finance_mcp.models.account import Account
from household_finance_mcp.models.history import AssetHistory, AssetPoint
from household_finance_mcp.models.scope import Scope
from household_finance_mcp.models.transaction import (
    EXPENSE,
    INCOME,
    TRANSFER,
    Transaction,
)

logger = logging.getLogger(__name__)

MAX_HISTORY_DAYS = 3650
ONE_DAY = timedelta(days=1)


def scope_balance(accounts: Iterable[Account], scope: Scope) -> float:
    """Live sum of current balances for the accounts in scope."""
    return sum(acc.balance for acc in accounts if scope.includes(acc))


def clamp_range(start: date, end: date) -> Tuple[date, bool]:
    """
    Bound a range so it spans at most MAX_HISTORY_DAYS days before ``end``.

    Returns:
        Tuple of (effective_start, was_clamped)
    """
    if (end - start).days > MAX_HISTORY_DAYS:
        return end - timedelta(days=MAX_HISTORY_DAYS), True
    return start, False


def order_for_replay(transactions: Sequence[Transaction]) -> List[Transaction]:
    """
    Sort transactions newest first for reverse replay.

    Identical timestamps are broken by log position: the transaction that
    appears later in the log is undone first.
    """
    indexed = list(enumerate(transactions))
    indexed.sort(key=lambda pair: (pair[1].occurred_at, pair[0]), reverse=True)
    return [txn for _, txn in indexed]


def _undo(balances: Dict[str, float], txn: Transaction) -> None:
    """Reverse one transaction's effect on the scoped balance map."""
    if txn.account_id in balances:
        if txn.type == INCOME:
            balances[txn.account_id] -= txn.amount
        elif txn.type == EXPENSE:
            balances[txn.account_id] += txn.amount
        elif txn.type == TRANSFER:
            balances[txn.account_id] += txn.amount + (txn.fee or 0.0)
    if txn.type == TRANSFER and txn.to_account_id in balances:
        balances[txn.to_account_id] -= txn.amount


def _fill_days(
    snapshots: Dict[date, float],
    newest: date,
    oldest: date,
    total: float,
    window: Tuple[date, date],
) -> None:
    """Record ``total`` for every day in [oldest, newest) inside the window."""
    day = min(newest - ONE_DAY, window[1])
    floor = max(oldest, window[0])
    while day >= floor:
        snapshots[day] = total
        day -= ONE_DAY


def reconstruct_asset_history(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    start: date,
    end: date,
    scope: Optional[Scope] = None,
    now: Optional[datetime] = None,
) -> AssetHistory:
    """
    Reconstruct end-of-day total assets for every day in [start, end].

    Args:
        accounts: Full current account list
        transactions: Full transaction log, in any order
        start: First day of the range (inclusive)
        end: Last day of the range (inclusive)
        scope: Accounts to total over (default: global)
        now: Reference clock (default: datetime.now())

    Returns:
        AssetHistory with exactly one point per day, oldest first.
        Days after today report the live current total.

    Raises:
        ValueError: If start is after end
    """
    if start > end:
        raise ValueError(f"Start date {start} is after end date {end}")

    scope = scope or Scope.global_scope()
    today = (now or datetime.now()).date()
    window_start, clamped = clamp_range(start, end)
    if clamped:
        logger.info(
            "Range %s..%s exceeds %d days; starting at %s",
            start, end, MAX_HISTORY_DAYS, window_start,
        )
    window = (window_start, end)

    balances = {acc.account_id: acc.balance for acc in accounts if scope.includes(acc)}
    current_total = sum(balances.values())

    snapshots: Dict[date, float] = {}
    if window_start <= today <= end:
        snapshots[today] = current_total

    cursor = today
    for txn in order_for_replay(transactions):
        if txn.account_id not in balances and txn.to_account_id not in balances:
            continue

        txn_day = txn.day
        if txn_day < cursor:
            _fill_days(snapshots, cursor, txn_day, sum(balances.values()), window)
            cursor = txn_day
        if cursor < window_start:
            # Everything older only affects days before the window
            break

        _undo(balances, txn)

    if cursor > window_start:
        _fill_days(snapshots, cursor, window_start, sum(balances.values()), window)

    points = []
    day = window_start
    while day <= end:
        if day > today:
            value = current_total
        else:
            value = snapshots.get(day, 0.0)
        points.append(AssetPoint(date=day.isoformat(), value=value))
        day += ONE_DAY

    return AssetHistory(
        scope=scope,
        start_date=window_start.isoformat(),
        end_date=end.isoformat(),
        current_total=current_total,
        clamped=clamped,
        points=points,
    )


class AssetHistoryCache:
    """
    Memoizes reconstructed histories.

    Entries are keyed by (scope, start, end, today, log_version); callers
    bump the log version whenever accounts or transactions change, so stale
    entries are simply never hit again and age out of the LRU.
    """

    def __init__(self, max_entries: int = 64):
        self.max_entries = max_entries
        self._entries: "OrderedDict[Hashable, AssetHistory]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get_or_compute(
        self,
        accounts: Sequence[Account],
        transactions: Sequence[Transaction],
        start: date,
        end: date,
        log_version: int,
        scope: Optional[Scope] = None,
        now: Optional[datetime] = None,
    ) -> AssetHistory:
        scope = scope or Scope.global_scope()
        now = now or datetime.now()
        key = (scope, start, end, now.date(), log_version)

        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            self._entries.move_to_end(key)
            return cached

        self.misses += 1
        history = reconstruct_asset_history(
            accounts, transactions, start, end, scope=scope, now=now
        )
        self._entries[key] = history
        if len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
        return history

    def clear(self) -> None:
        self._entries.clear()
