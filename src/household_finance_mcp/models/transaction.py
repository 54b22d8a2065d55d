"""
Transaction model for household finance data.
"""

from datetime import date as _date
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from household_finance_mcp.utils.date_utils import parse_iso_datetime

TransactionType = Literal["INCOME", "EXPENSE", "TRANSFER"]

INCOME = "INCOME"
EXPENSE = "EXPENSE"
TRANSFER = "TRANSFER"

ADJUSTMENT_CATEGORY = "Adjustment"
TRANSFER_CATEGORY = "Transfer"
ZAKAT_CATEGORY = "Zakat Mal"
FUND_TRANSFER_CATEGORY = "Non-Profit Transfer"


class Transaction(BaseModel):
    """
    Represents an income, expense or transfer between two accounts.

    Amounts are non-negative magnitudes; the type decides the direction.
    """

    model_config = {"strict": True, "populate_by_name": True, "allow_inf_nan": False}

    # Required fields
    transaction_id: str = Field(alias="id")
    date: str  # ISO date or date-time
    type: TransactionType
    amount: float
    account_id: str = Field(alias="accountId")

    to_account_id: Optional[str] = Field(default=None, alias="toAccountId")
    category: str = "Uncategorized"
    notes: Optional[str] = None
    fee: Optional[float] = Field(default=None, alias="fees")  # Transfers only

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        """Reject dates that cannot be placed on the calendar."""
        parse_iso_datetime(v)
        return v

    @field_validator("amount", "fee")
    @classmethod
    def validate_non_negative(cls, v: Optional[float]) -> Optional[float]:
        """Amounts are magnitudes; direction comes from the type."""
        if v is not None and v < 0:
            raise ValueError(f"Amount {v} must not be negative")
        return v

    @model_validator(mode="after")
    def validate_destination(self) -> "Transaction":
        """Transfers need a distinct destination; other types carry none."""
        if self.type == TRANSFER:
            if not self.to_account_id:
                raise ValueError("Transfer requires a destination account")
            if self.to_account_id == self.account_id:
                raise ValueError("Transfer destination must differ from source")
        else:
            self.to_account_id = None
        return self

    @property
    def occurred_at(self) -> datetime:
        """Naive local timestamp of the transaction."""
        return parse_iso_datetime(self.date)

    @property
    def day(self) -> _date:
        return self.occurred_at.date()

    @property
    def is_adjustment(self) -> bool:
        return self.category == ADJUSTMENT_CATEGORY

    def touches(self, account_id: str) -> bool:
        """Check whether either leg of this transaction is the given account."""
        return self.account_id == account_id or self.to_account_id == account_id

    def signed_amount_for(self, account_id: str) -> float:
        """
        Effect of this transaction on one account's balance.

        Args:
            account_id: Account to evaluate

        Returns:
            Positive when money arrives, negative when it leaves, 0 otherwise
        """
        effect = 0.0
        if self.account_id == account_id:
            if self.type == INCOME:
                effect += self.amount
            elif self.type == EXPENSE:
                effect -= self.amount
            else:
                effect -= self.amount + (self.fee or 0.0)
        if self.type == TRANSFER and self.to_account_id == account_id:
            effect += self.amount
        return effect
