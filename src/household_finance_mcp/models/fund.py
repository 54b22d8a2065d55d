"""
Hajj and Umrah savings fund models.

Funds form a sub-ledger kept apart from the main accounts: their balances
never count toward net worth, asset history or zakat.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from household_finance_mcp.models.account import AccountOwner
from household_finance_mcp.utils.date_utils import parse_iso_datetime

FundType = Literal["Haji", "Umrah"]

FUND_TYPES = ("Haji", "Umrah")


class FundAccount(BaseModel):
    """
    A savings fund for one owner, e.g. "Haji Husband".

    Field aliases match the keys of the stored backup document.
    """

    model_config = {"strict": True, "populate_by_name": True, "allow_inf_nan": False}

    fund_id: str = Field(alias="id")
    name: str
    owner: AccountOwner
    balance: float = 0.0
    target: Optional[float] = None  # 0 or None means no target

    @computed_field  # type: ignore[prop-decorator]
    @property
    def progress(self) -> Optional[float]:
        """Share of the target collected so far, capped at 1."""
        if not self.target:
            return None
        return min(max(self.balance / self.target, 0.0), 1.0)


class FundDeposit(BaseModel):
    """A deposit into a fund, either brought in by hand or moved from a main account."""

    model_config = {"strict": True, "populate_by_name": True, "allow_inf_nan": False}

    deposit_id: str = Field(alias="id")
    date: str
    amount: float
    fund_id: str = Field(alias="accountId")
    notes: Optional[str] = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        parse_iso_datetime(v)
        return v

    @field_validator("amount")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Deposit amount {v} must be positive")
        return v

    @property
    def occurred_at(self) -> datetime:
        return parse_iso_datetime(self.date)
