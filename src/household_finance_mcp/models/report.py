"""
Report models for cashflow and category breakdowns.
"""

from typing import Optional

from pydantic import BaseModel


class CategoryTotal(BaseModel):
    """Aggregated amount for one category."""

    category: str
    total: float
    transaction_count: int


class CashflowSummary(BaseModel):
    """Income and expense totals over a period; transfers are excluded."""

    start_date: Optional[str] = None
    end_date: Optional[str] = None
    income: float = 0.0
    expense: float = 0.0
    net: float = 0.0
    transaction_count: int = 0


class DailySummary(BaseModel):
    """Income, expense and net for a single day."""

    date: str
    income: float = 0.0
    expense: float = 0.0
    total: float = 0.0
