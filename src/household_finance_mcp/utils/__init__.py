"""
Utility functions for the household finance MCP server.
"""

from household_finance_mcp.utils.date_utils import (
    get_month_range,
    parse_date,
    parse_iso_datetime,
    parse_period,
    period_range,
    shift_cursor,
)

__all__ = [
    "parse_period",
    "get_month_range",
    "period_range",
    "shift_cursor",
    "parse_iso_datetime",
    "parse_date",
]
