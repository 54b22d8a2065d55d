"""
Account model for household finance data.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, computed_field

AccountGroup = Literal["Cash", "Bank Accounts", "Credit Cards", "Investments", "Loans"]
AccountOwner = Literal["Husband", "Wife"]

ACCOUNT_GROUPS = ("Cash", "Bank Accounts", "Credit Cards", "Investments", "Loans")
ACCOUNT_OWNERS = ("Husband", "Wife")


class Account(BaseModel):
    """
    Represents a household account (wallet, bank, card, investment or loan).

    Field aliases match the camelCase keys of the stored backup document.
    """

    model_config = {"strict": True, "populate_by_name": True, "allow_inf_nan": False}

    # Required fields
    account_id: str = Field(alias="id")
    name: str
    group: AccountGroup
    balance: float  # Current, authoritative balance; history is derived

    currency: str = "IDR"
    include_in_totals: bool = Field(default=True, alias="includeInTotals")
    owner: Optional[AccountOwner] = None

    # Free-form details
    description: Optional[str] = None
    type: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None  # e.g. {"grams": 10} for gold

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_name(self) -> str:
        """Get the best display name for this account."""
        return self.name or "Unknown"
