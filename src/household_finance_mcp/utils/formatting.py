"""
Chart-facing formatting helpers.

Turns reconstructed asset histories into plain point lists and renders
amounts the way the household reads them (Indonesian Rupiah by default).
"""

from typing import Any, Dict, List

from household_finance_mcp.models.history import AssetHistory
from household_finance_mcp.utils.date_utils import ALL, YEAR, parse_date

_MONTH_ABBR = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def display_label(iso_day: str, range_kind: str) -> str:
    """Axis label for a day: "Mar" on yearly/lifetime charts, "5 Mar" otherwise."""
    day = parse_date(iso_day)
    month = _MONTH_ABBR[day.month - 1]
    if range_kind in (YEAR, ALL):
        return month
    return f"{day.day} {month}"


def to_chart_points(history: AssetHistory, range_kind: str) -> List[Dict[str, Any]]:
    """
    Convert an asset history into chart points.

    Args:
        history: Reconstructed asset history
        range_kind: Range kind the chart was requested with (WEEK, MONTH, ...)

    Returns:
        List of {"date", "displayDate", "value"} dicts, oldest first
    """
    return [
        {
            "date": point.date,
            "displayDate": display_label(point.date, range_kind),
            "value": point.value,
        }
        for point in history.points
    ]


def format_compact(value: float) -> str:
    """Short label: 1.5 M (milyar), 2.3 jt (juta), 750 rb (ribu)."""
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    if magnitude >= 1_000_000_000:
        return f"{sign}{magnitude / 1_000_000_000:.1f} M"
    if magnitude >= 1_000_000:
        return f"{sign}{magnitude / 1_000_000:.1f} jt"
    return f"{sign}{magnitude / 1_000:.0f} rb"


def format_currency(value: float, currency: str = "IDR") -> str:
    # id-ID grouping uses dots for thousands and no decimals for rupiah
    grouped = f"{abs(round(value)):,}".replace(",", ".")
    symbol = "Rp" if currency == "IDR" else currency
    sign = "-" if round(value) < 0 else ""
    return f"{sign}{symbol} {grouped}"
