"""
Custom exceptions for the household finance MCP server.
"""

from typing import Optional


class HouseholdFinanceError(Exception):
    """Base exception for household finance errors."""
    pass


class StoreNotFoundError(HouseholdFinanceError):
    """Raised when the data document cannot be found."""
    pass


class ParseError(HouseholdFinanceError):
    """Raised when a stored record has a malformed date or amount."""

    def __init__(
        self,
        message: str,
        record_id: Optional[str] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.record_id = record_id
        self.field = field

    def to_dict(self) -> dict:
        return {
            "record_id": self.record_id,
            "field": self.field,
            "message": self.message,
        }


class MissingAccountError(HouseholdFinanceError):
    """Raised when a transaction references an unknown account id."""

    def __init__(self, account_id: str):
        super().__init__(f"Account not found: {account_id}")
        self.account_id = account_id


class FetchError(HouseholdFinanceError):
    """Raised when market data cannot be fetched."""
    pass


class ZakatPaymentError(HouseholdFinanceError):
    """Raised when a zakat payment is attempted while the action is blocked."""
    pass
