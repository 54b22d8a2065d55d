"""
Hajj and Umrah savings rules.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from household_finance_mcp.models.fund import FUND_TYPES, FundAccount, FundDeposit

# Past this day of the month a missing deposit raises the reminder
REMINDER_DAY = 20


def fund_name(fund_type: str, owner: str) -> str:
    """Build the display name of a new fund, e.g. "Haji Husband"."""
    if fund_type not in FUND_TYPES:
        raise ValueError(f"Unknown fund type: {fund_type}")
    return f"{fund_type} {owner}"


def deposit_reminder_due(
    funds: List[FundAccount],
    deposits: Iterable[FundDeposit],
    now: Optional[datetime] = None,
) -> bool:
    """
    Check whether the monthly deposit reminder should show.

    The reminder is due after REMINDER_DAY when funds exist and nothing
    has been deposited in the current month.
    """
    now = now or datetime.now()
    if not funds or now.day <= REMINDER_DAY:
        return False

    for deposit in deposits:
        occurred = deposit.occurred_at
        if (occurred.year, occurred.month) == (now.year, now.month):
            return False
    return True


def total_saved(funds: Iterable[FundAccount]) -> float:
    return sum(fund.balance for fund in funds)
