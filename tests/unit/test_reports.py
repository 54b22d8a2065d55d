"""
Unit tests for period reports.
"""

from datetime import date

from household_finance_mcp.core.reports import (
    category_breakdown,
    daily_summaries,
    filter_transactions,
    group_totals,
    summarize_cashflow,
)
from household_finance_mcp.models.transaction import Transaction


class TestFilterTransactions:
    def test_day_range_is_inclusive(self, sample_transactions, sample_accounts):
        result = filter_transactions(
            sample_transactions, sample_accounts, date(2026, 3, 5), date(2026, 3, 10)
        )
        assert [t.transaction_id for t in result] == ["tx2", "tx3"]

    def test_owner_filter_uses_source_account(self, sample_transactions, sample_accounts):
        result = filter_transactions(sample_transactions, sample_accounts, owner="Wife")
        assert [t.transaction_id for t in result] == ["tx4"]


class TestCashflow:
    def test_summary_excludes_transfers(self, sample_transactions):
        summary = summarize_cashflow(sample_transactions, date(2026, 3, 1), date(2026, 3, 31))

        assert summary.income == 3_000_000
        assert summary.expense == 450_000
        assert summary.net == 2_550_000
        assert summary.transaction_count == 4
        assert summary.start_date == "2026-03-01"

    def test_empty(self):
        summary = summarize_cashflow([])
        assert summary.net == 0
        assert summary.start_date is None


class TestCategoryBreakdown:
    def test_expense_breakdown_sorted(self, sample_transactions):
        breakdown = category_breakdown(sample_transactions)
        assert [(c.category, c.total) for c in breakdown] == [
            ("Shopping", 300_000),
            ("Food", 150_000),
        ]

    def test_income_breakdown(self, sample_transactions):
        breakdown = category_breakdown(sample_transactions, transaction_type="INCOME")
        assert breakdown[0].category == "Salary"
        assert breakdown[0].transaction_count == 1

    def test_adjustments_are_excluded_by_default(self, sample_transactions):
        adjustment = Transaction(
            transaction_id="adj",
            date="2026-03-11",
            type="EXPENSE",
            amount=1_000_000,
            account_id="acc_bca_h",
            category="Adjustment",
        )
        transactions = sample_transactions + [adjustment]

        assert "Adjustment" not in {c.category for c in category_breakdown(transactions)}
        with_adjustments = category_breakdown(transactions, exclude_adjustments=False)
        assert with_adjustments[0].category == "Adjustment"


class TestDailyAndGroups:
    def test_daily_summaries_newest_first(self, sample_transactions):
        days = daily_summaries(sample_transactions)
        assert [d.date for d in days] == [
            "2026-03-14",
            "2026-03-12",
            "2026-03-10",
            "2026-03-01",
        ]
        assert days[0].total == -300_000
        assert days[-1].income == 2_000_000

    def test_group_totals(self, sample_accounts):
        totals = group_totals(sample_accounts)
        assert totals["Bank Accounts"] == 8_000_000
        assert totals["Credit Cards"] == -2_000_000

    def test_group_totals_for_owner(self, sample_accounts):
        totals = group_totals(sample_accounts, owner="Wife")
        assert totals == {"Bank Accounts": 3_000_000}
