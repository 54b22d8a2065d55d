"""
Zakat Mal assessment and notification models.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel

from household_finance_mcp.models.account import AccountOwner

NotificationType = Literal["ALERT", "INFO", "SUCCESS", "MARKET"]


class ZakatStatus(str, Enum):
    """Eligibility state, derived fresh on every assessment."""

    NOT_OBLIGATED = "NOT_OBLIGATED"
    OBLIGATED = "OBLIGATED"
    PAID = "PAID"


class ZakatAssessment(BaseModel):
    """
    Result of evaluating one owner's zakat obligation.

    Dates are "YYYY-MM-DD" strings. Payment fields are only set when the
    status is PAID.
    """

    owner: AccountOwner
    status: ZakatStatus
    reason: str

    gold_price_per_gram: float
    nisab_value: float
    haul_start_date: str

    current_total: float
    zakat_amount: float = 0.0
    lowest_balance_in_haul: Optional[float] = None

    # PAID only
    payment_date: Optional[str] = None
    payment_transaction_id: Optional[str] = None
    next_haul_date: Optional[str] = None


class Notification(BaseModel):
    """In-app notification."""

    notification_id: str
    title: str
    message: str
    date: str
    read: bool = False
    type: NotificationType = "INFO"
