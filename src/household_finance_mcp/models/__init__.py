"""
Pydantic models for household finance data structures.
"""

from household_finance_mcp.models.account import Account
from household_finance_mcp.models.fund import FundAccount, FundDeposit
from household_finance_mcp.models.history import AssetHistory, AssetPoint
from household_finance_mcp.models.report import (
    CashflowSummary,
    CategoryTotal,
    DailySummary,
)
from household_finance_mcp.models.scope import Scope
from household_finance_mcp.models.transaction import Transaction
from household_finance_mcp.models.zakat import (
    Notification,
    ZakatAssessment,
    ZakatStatus,
)

__all__ = [
    "Account",
    "Transaction",
    "FundAccount",
    "FundDeposit",
    "Scope",
    "AssetPoint",
    "AssetHistory",
    "CategoryTotal",
    "CashflowSummary",
    "DailySummary",
    "ZakatStatus",
    "ZakatAssessment",
    "Notification",
]
