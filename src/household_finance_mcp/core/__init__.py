"""
Core functionality for the household finance MCP server.
"""

from household_finance_mcp.core.database import FinanceDatabase
from household_finance_mcp.core.decoder import decode_accounts, decode_document, decode_transactions
from household_finance_mcp.core.exceptions import (
    FetchError,
    HouseholdFinanceError,
    MissingAccountError,
    ParseError,
    StoreNotFoundError,
    ZakatPaymentError,
)
from household_finance_mcp.core.history import AssetHistoryCache, reconstruct_asset_history
from household_finance_mcp.core.zakat import assess_zakat

__all__ = [
    "FinanceDatabase",
    "decode_accounts",
    "decode_transactions",
    "decode_document",
    "reconstruct_asset_history",
    "AssetHistoryCache",
    "assess_zakat",
    "HouseholdFinanceError",
    "StoreNotFoundError",
    "ParseError",
    "MissingAccountError",
    "FetchError",
    "ZakatPaymentError",
]
