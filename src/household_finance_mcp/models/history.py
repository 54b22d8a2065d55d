"""
Derived asset history models.
"""

from typing import List

from pydantic import BaseModel, Field

from household_finance_mcp.models.scope import Scope


class AssetPoint(BaseModel):
    """Total assets at the end of one calendar day."""

    model_config = {"frozen": True}

    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    value: float


class AssetHistory(BaseModel):
    """
    Day-by-day asset totals for a scope, oldest first.

    Computed per query from current balances and the transaction log;
    never persisted.
    """

    model_config = {"frozen": True}

    scope: Scope
    start_date: str
    end_date: str
    current_total: float  # Live sum of current balances in scope
    clamped: bool = False  # True when the requested range was shortened
    points: List[AssetPoint]

    def value_on(self, iso_day: str) -> float:
        """
        Get the value recorded for a day.

        Raises:
            KeyError: If the day is outside the history
        """
        for point in self.points:
            if point.date == iso_day:
                return point.value
        raise KeyError(iso_day)
