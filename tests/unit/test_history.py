"""
Unit tests for balance history reconstruction.
"""

from datetime import date, datetime, timedelta

import pytest

from household_finance_mcp.core.history import (
    MAX_HISTORY_DAYS,
    AssetHistoryCache,
    clamp_range,
    order_for_replay,
    reconstruct_asset_history,
)
from household_finance_mcp.models.account import Account
from household_finance_mcp.models.scope import Scope
from household_finance_mcp.models.transaction import Transaction

NOW = datetime(2026, 3, 15, 12, 0, 0)
TODAY = NOW.date()


def _txn(txn_id, when, type_, amount, account_id, to_account_id=None, fee=None):
    return Transaction(
        transaction_id=txn_id,
        date=when,
        type=type_,
        amount=amount,
        account_id=account_id,
        to_account_id=to_account_id,
        fee=fee,
    )


def _values(history):
    return {point.date: point.value for point in history.points}


class TestReconstructGlobal:
    """Global scope over the sample household."""

    @pytest.fixture
    def history(self, sample_accounts, sample_transactions):
        return reconstruct_asset_history(
            sample_accounts, sample_transactions, date(2026, 3, 1), TODAY, now=NOW
        )

    def test_one_point_per_day(self, history):
        assert len(history.points) == 15
        assert history.points[0].date == "2026-03-01"
        assert history.points[-1].date == "2026-03-15"
        assert history.clamped is False

    def test_today_equals_current_total(self, history):
        """Test that the newest point is the live sum of balances."""
        assert history.current_total == 6_500_000
        assert history.value_on("2026-03-15") == 6_500_000

    def test_end_of_day_values(self, history):
        values = _values(history)
        assert values["2026-03-14"] == 6_500_000
        assert values["2026-03-13"] == 6_800_000
        assert values["2026-03-12"] == 6_800_000
        assert values["2026-03-11"] == 5_800_000
        assert values["2026-03-10"] == 5_800_000
        assert values["2026-03-09"] == 5_950_000
        assert values["2026-03-05"] == 5_950_000
        assert values["2026-03-04"] == 5_952_500
        assert values["2026-03-01"] == 5_952_500

    def test_day_over_day_change_matches_transactions(
        self, history, sample_transactions
    ):
        """Test that each step back undoes exactly that day's net effect."""
        in_scope = {"acc_bca_h", "acc_mandiri_w", "acc_cash_h", "acc_cc"}
        points = history.points
        for previous, current in zip(points, points[1:]):
            day = current.date
            net = sum(
                txn.signed_amount_for(acc)
                for txn in sample_transactions
                if txn.day.isoformat() == day
                for acc in in_scope
            )
            assert current.value - previous.value == pytest.approx(net)

    def test_excluded_account_never_counts(self, sample_accounts, sample_transactions):
        history = reconstruct_asset_history(
            sample_accounts, sample_transactions, TODAY, TODAY, now=NOW
        )
        # acc_hidden holds 1,000,000 but is flagged out of totals
        assert history.value_on("2026-03-15") == 6_500_000

    def test_inputs_are_not_mutated(self, sample_accounts, sample_transactions):
        before_accounts = [acc.model_copy() for acc in sample_accounts]
        before_txns = list(sample_transactions)

        first = reconstruct_asset_history(
            sample_accounts, sample_transactions, date(2026, 3, 1), TODAY, now=NOW
        )
        second = reconstruct_asset_history(
            sample_accounts, sample_transactions, date(2026, 3, 1), TODAY, now=NOW
        )

        assert first == second
        assert sample_accounts == before_accounts
        assert sample_transactions == before_txns


class TestReconstructScopes:
    """Owner and account scopes."""

    def test_owner_scope(self, sample_accounts, sample_transactions):
        history = reconstruct_asset_history(
            sample_accounts,
            sample_transactions,
            date(2026, 2, 28),
            TODAY,
            scope=Scope.for_owner("Husband"),
            now=NOW,
        )
        values = _values(history)
        assert history.current_total == 3_500_000
        assert values["2026-03-13"] == 3_800_000
        assert values["2026-03-11"] == 3_800_000  # wife's income is out of scope
        assert values["2026-03-09"] == 3_950_000
        assert values["2026-03-04"] == 3_952_500
        assert values["2026-02-28"] == 1_952_500

    def test_account_scope(self, sample_accounts, sample_transactions):
        history = reconstruct_asset_history(
            sample_accounts,
            sample_transactions,
            date(2026, 3, 4),
            date(2026, 3, 10),
            scope=Scope.for_account("acc_cash_h"),
            now=NOW,
        )
        values = _values(history)
        assert values["2026-03-10"] == 500_000
        assert values["2026-03-09"] == 650_000
        assert values["2026-03-05"] == 650_000
        assert values["2026-03-04"] == 150_000

    def test_account_scope_includes_hidden_account(self, sample_accounts, sample_transactions):
        history = reconstruct_asset_history(
            sample_accounts,
            sample_transactions,
            date(2026, 3, 1),
            TODAY,
            scope=Scope.for_account("acc_hidden"),
            now=NOW,
        )
        assert {point.value for point in history.points} == {1_000_000}

    def test_cross_scope_transfer(self):
        """Test that a husband-to-wife transfer moves value between owner scopes."""
        accounts = [
            Account(account_id="h", name="H", group="Bank Accounts", balance=900, owner="Husband"),
            Account(account_id="w", name="W", group="Bank Accounts", balance=600, owner="Wife"),
        ]
        transactions = [_txn("t", "2026-03-14T10:00:00", "TRANSFER", 100, "h", "w")]

        husband = reconstruct_asset_history(
            accounts, transactions, date(2026, 3, 13), date(2026, 3, 14),
            scope=Scope.for_owner("Husband"), now=NOW,
        )
        wife = reconstruct_asset_history(
            accounts, transactions, date(2026, 3, 13), date(2026, 3, 14),
            scope=Scope.for_owner("Wife"), now=NOW,
        )
        household = reconstruct_asset_history(
            accounts, transactions, date(2026, 3, 13), date(2026, 3, 14), now=NOW
        )

        assert husband.value_on("2026-03-13") == 1_000
        assert wife.value_on("2026-03-13") == 500
        assert household.value_on("2026-03-13") == household.value_on("2026-03-14") == 1_500


class TestTransfers:
    """Internal transfers and fees."""

    def test_feeless_internal_transfer_is_invisible(self):
        accounts = [
            Account(account_id="a", name="A", group="Cash", balance=100),
            Account(account_id="b", name="B", group="Bank Accounts", balance=400),
        ]
        transactions = [_txn("t", "2026-03-10T10:00:00", "TRANSFER", 250, "a", "b")]
        history = reconstruct_asset_history(
            accounts, transactions, date(2026, 3, 8), TODAY, now=NOW
        )
        assert {point.value for point in history.points} == {500}

    def test_transfer_fee_is_an_outflow(self):
        accounts = [
            Account(account_id="a", name="A", group="Cash", balance=95),
            Account(account_id="b", name="B", group="Bank Accounts", balance=400),
        ]
        transactions = [_txn("t", "2026-03-10T10:00:00", "TRANSFER", 250, "a", "b", fee=5)]
        history = reconstruct_asset_history(
            accounts, transactions, date(2026, 3, 9), date(2026, 3, 10), now=NOW
        )
        assert history.value_on("2026-03-10") == 495
        assert history.value_on("2026-03-09") == 500

    def test_transfer_to_unknown_account(self):
        """Test that a transfer into an account outside the list only counts its source leg."""
        accounts = [Account(account_id="a", name="A", group="Cash", balance=0)]
        transactions = [_txn("t", "2026-03-10T10:00:00", "TRANSFER", 50, "a", "gone")]
        history = reconstruct_asset_history(
            accounts, transactions, date(2026, 3, 9), date(2026, 3, 10), now=NOW
        )
        assert history.value_on("2026-03-09") == 50


class TestRanges:
    """Range handling: future days, clamping and gaps."""

    def test_future_days_report_current_total(self, sample_accounts, sample_transactions):
        history = reconstruct_asset_history(
            sample_accounts, sample_transactions, date(2026, 3, 14), date(2026, 3, 20), now=NOW
        )
        values = _values(history)
        assert len(history.points) == 7
        assert values["2026-03-14"] == 6_500_000
        for day in range(16, 21):
            assert values[f"2026-03-{day}"] == 6_500_000

    def test_entirely_future_range(self, sample_accounts, sample_transactions):
        history = reconstruct_asset_history(
            sample_accounts, sample_transactions, date(2026, 4, 1), date(2026, 4, 3), now=NOW
        )
        assert [p.value for p in history.points] == [6_500_000] * 3

    def test_range_before_first_transaction(self, sample_accounts, sample_transactions):
        history = reconstruct_asset_history(
            sample_accounts, sample_transactions, date(2026, 2, 1), date(2026, 2, 3), now=NOW
        )
        assert [p.value for p in history.points] == [3_952_500] * 3

    def test_window_between_transactions(self, sample_accounts, sample_transactions):
        """Test gap days inside a window that ends before today."""
        history = reconstruct_asset_history(
            sample_accounts, sample_transactions, date(2026, 3, 3), date(2026, 3, 6), now=NOW
        )
        assert [p.value for p in history.points] == [5_952_500, 5_952_500, 5_950_000, 5_950_000]

    def test_no_transactions(self, sample_accounts):
        history = reconstruct_asset_history(
            sample_accounts, [], date(2026, 3, 1), TODAY, now=NOW
        )
        assert {p.value for p in history.points} == {6_500_000}

    def test_start_after_end_raises(self, sample_accounts):
        with pytest.raises(ValueError):
            reconstruct_asset_history(
                sample_accounts, [], date(2026, 3, 2), date(2026, 3, 1), now=NOW
            )

    def test_single_day(self, sample_accounts, sample_transactions):
        history = reconstruct_asset_history(
            sample_accounts, sample_transactions, date(2026, 3, 11), date(2026, 3, 11), now=NOW
        )
        assert [p.value for p in history.points] == [5_800_000]

    def test_long_range_is_clamped(self, sample_accounts, sample_transactions):
        history = reconstruct_asset_history(
            sample_accounts, sample_transactions, date(2000, 1, 1), TODAY, now=NOW
        )
        assert history.clamped is True
        assert history.start_date == (TODAY - timedelta(days=MAX_HISTORY_DAYS)).isoformat()
        assert len(history.points) == MAX_HISTORY_DAYS + 1
        assert history.points[0].value == 3_952_500

    def test_clamp_range_boundary(self):
        end = date(2026, 3, 15)
        start = end - timedelta(days=MAX_HISTORY_DAYS)
        assert clamp_range(start, end) == (start, False)
        assert clamp_range(start - timedelta(days=1), end) == (start, True)


class TestSingleExpenseScenario:
    """One account, one expense ten days ago."""

    @pytest.fixture
    def ledger(self):
        accounts = [Account(account_id="a", name="A", group="Bank Accounts", balance=1_000_000)]
        spent_on = TODAY - timedelta(days=10)
        transactions = [_txn("e", f"{spent_on.isoformat()}T09:00:00", "EXPENSE", 200_000, "a")]
        return accounts, transactions, spent_on

    def test_fifteen_day_window(self, ledger):
        """Fifteen daily points ending today: four days before the expense."""
        accounts, transactions, spent_on = ledger

        history = reconstruct_asset_history(
            accounts, transactions, TODAY - timedelta(days=14), TODAY, now=NOW
        )
        values = [p.value for p in history.points]

        assert len(values) == 15
        assert values[:4] == [1_200_000] * 4
        assert history.points[4].date == spent_on.isoformat()
        assert values[4:] == [1_000_000] * 11

    def test_window_starting_fifteen_days_ago(self, ledger):
        """Starting at today minus 15 gives 16 points, five before the expense."""
        accounts, transactions, spent_on = ledger

        history = reconstruct_asset_history(
            accounts, transactions, TODAY - timedelta(days=15), TODAY, now=NOW
        )
        values = [p.value for p in history.points]

        assert len(values) == 16
        assert values[:5] == [1_200_000] * 5
        assert history.points[5].date == spent_on.isoformat()
        assert values[5:] == [1_000_000] * 11
        assert history.value_on(TODAY.isoformat()) == 1_000_000


class TestReplayOrder:
    """Ordering of the reverse replay."""

    def test_newest_first_with_log_position_tie_break(self):
        first = _txn("first", "2026-03-10T10:00:00", "INCOME", 1, "a")
        second = _txn("second", "2026-03-10T10:00:00", "EXPENSE", 1, "a")
        older = _txn("older", "2026-03-01T10:00:00", "INCOME", 1, "a")

        ordered = order_for_replay([first, older, second])
        assert [t.transaction_id for t in ordered] == ["second", "first", "older"]

    def test_same_day_order_does_not_change_snapshots(self):
        accounts = [Account(account_id="a", name="A", group="Cash", balance=100)]
        txns = [
            _txn("x", "2026-03-10T10:00:00", "INCOME", 30, "a"),
            _txn("y", "2026-03-10T10:00:00", "EXPENSE", 10, "a"),
        ]
        forward = reconstruct_asset_history(
            accounts, txns, date(2026, 3, 9), date(2026, 3, 10), now=NOW
        )
        backward = reconstruct_asset_history(
            accounts, list(reversed(txns)), date(2026, 3, 9), date(2026, 3, 10), now=NOW
        )
        assert forward.points == backward.points
        assert forward.value_on("2026-03-09") == 80


class TestAssetHistoryCache:
    """Tests for memoized reconstruction."""

    def test_hit_for_same_version(self, sample_accounts, sample_transactions):
        cache = AssetHistoryCache()
        args = (sample_accounts, sample_transactions, date(2026, 3, 1), TODAY)

        first = cache.get_or_compute(*args, log_version=1, now=NOW)
        second = cache.get_or_compute(*args, log_version=1, now=NOW)

        assert first is second
        assert cache.hits == 1
        assert cache.misses == 1

    def test_new_version_recomputes(self, sample_accounts, sample_transactions):
        cache = AssetHistoryCache()
        args = (sample_accounts, sample_transactions, date(2026, 3, 1), TODAY)

        cache.get_or_compute(*args, log_version=1, now=NOW)
        cache.get_or_compute(*args, log_version=2, now=NOW)

        assert cache.misses == 2

    def test_scope_is_part_of_key(self, sample_accounts, sample_transactions):
        cache = AssetHistoryCache()
        args = (sample_accounts, sample_transactions, date(2026, 3, 1), TODAY)

        household = cache.get_or_compute(*args, log_version=1, now=NOW)
        husband = cache.get_or_compute(
            *args, log_version=1, scope=Scope.for_owner("Husband"), now=NOW
        )
        assert household.current_total != husband.current_total

    def test_eviction(self, sample_accounts):
        cache = AssetHistoryCache(max_entries=2)
        for version in range(3):
            cache.get_or_compute(sample_accounts, [], TODAY, TODAY, log_version=version, now=NOW)
        cache.get_or_compute(sample_accounts, [], TODAY, TODAY, log_version=0, now=NOW)

        assert cache.misses == 4
        cache.clear()
        cache.get_or_compute(sample_accounts, [], TODAY, TODAY, log_version=2, now=NOW)
        assert cache.misses == 5
