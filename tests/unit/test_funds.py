"""
Unit tests for Hajj/Umrah fund rules and models.
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from household_finance_mcp.core.funds import deposit_reminder_due, fund_name, total_saved
from household_finance_mcp.models.fund import FundAccount, FundDeposit


def _fund(balance=0.0, target=None):
    return FundAccount(fund_id="np_1", name="Umrah Wife", owner="Wife", balance=balance, target=target)


def _deposit(when):
    return FundDeposit(deposit_id="d", date=when, amount=100_000, fund_id="np_1")


class TestFundModels:
    def test_fund_from_stored_record(self):
        fund = FundAccount.model_validate(
            {"id": "np_1", "name": "Haji Husband", "owner": "Husband", "balance": 5_000_000,
             "target": 20_000_000}
        )
        assert fund.fund_id == "np_1"
        assert fund.progress == 0.25

    def test_progress(self):
        assert _fund(balance=5).progress is None
        assert _fund(balance=5, target=0).progress is None
        assert _fund(balance=30, target=20).progress == 1.0

    def test_deposit_from_stored_record(self):
        deposit = FundDeposit.model_validate(
            {"id": "d1", "date": "2026-03-02T10:00:00", "amount": 50_000, "accountId": "np_1"}
        )
        assert deposit.fund_id == "np_1"
        assert deposit.occurred_at == datetime(2026, 3, 2, 10, 0, 0)

    @pytest.mark.parametrize("amount", [0, -1, float("nan")])
    def test_deposit_rejects_bad_amount(self, amount):
        with pytest.raises(ValidationError):
            FundDeposit(deposit_id="d", date="2026-03-02", amount=amount, fund_id="np_1")

    def test_fund_requires_owner(self):
        with pytest.raises(ValidationError):
            FundAccount.model_validate({"id": "np_1", "name": "Haji", "balance": 0})


class TestFundRules:
    def test_fund_name(self):
        assert fund_name("Haji", "Husband") == "Haji Husband"
        with pytest.raises(ValueError, match="Unknown fund type"):
            fund_name("Ziarah", "Wife")

    def test_total_saved(self):
        assert total_saved([_fund(balance=1_000), _fund(balance=2_500)]) == 3_500
        assert total_saved([]) == 0

    def test_reminder_after_day_twenty_without_deposit(self):
        now = datetime(2026, 3, 21, 9, 0, 0)
        assert deposit_reminder_due([_fund()], [_deposit("2026-02-25")], now=now) is True

    def test_no_reminder_when_deposited_this_month(self):
        now = datetime(2026, 3, 21, 9, 0, 0)
        assert deposit_reminder_due([_fund()], [_deposit("2026-03-01")], now=now) is False

    def test_no_reminder_until_day_twenty(self):
        now = datetime(2026, 3, 20, 23, 0, 0)
        assert deposit_reminder_due([_fund()], [], now=now) is False

    def test_no_reminder_without_funds(self):
        now = datetime(2026, 3, 28, 9, 0, 0)
        assert deposit_reminder_due([], [], now=now) is False

    def test_same_month_of_another_year_does_not_count(self):
        now = datetime(2026, 3, 28, 9, 0, 0)
        assert deposit_reminder_due([_fund()], [_deposit("2025-03-10")], now=now) is True
