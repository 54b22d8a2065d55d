"""
Gold price feed for the nisab threshold.

The feed fetches a spot price per gram from a JSON endpoint. Fetch failures
never propagate to calculations: the last known price is kept.
"""

import logging
from datetime import datetime
from typing import Any, Optional

import requests

from household_finance_mcp.core.exceptions import FetchError

logger = logging.getLogger(__name__)

DEFAULT_GOLD_PRICE_PER_GRAM = 1_000_000.0  # IDR
REQUEST_TIMEOUT = 10


class GoldPriceFeed:
    """
    Last-known gold price with optional refresh from an HTTP endpoint.

    The endpoint must return a JSON object holding the price per gram
    under ``price_field`` (dotted paths such as "data.price" are allowed).
    """

    def __init__(
        self,
        url: Optional[str] = None,
        price_field: str = "price",
        initial_price: float = DEFAULT_GOLD_PRICE_PER_GRAM,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.url = url
        self.price_field = price_field
        self.timeout = timeout
        self.session = session or requests.Session()
        self._price = float(initial_price)
        self.last_updated: Optional[datetime] = None

    @property
    def last_price(self) -> float:
        return self._price

    def set_price(self, price: float) -> None:
        """Set the price manually, e.g. from user input."""
        if price <= 0:
            raise ValueError(f"Gold price must be positive, got {price}")
        self._price = float(price)
        self.last_updated = datetime.now()

    def fetch_gold_price_per_gram(self) -> float:
        """
        Fetch the current gold price per gram.

        Returns:
            Price per gram

        Raises:
            FetchError: If no endpoint is configured, the request fails or
                the response holds no positive numeric price
        """
        if not self.url:
            raise FetchError("No gold price endpoint configured")

        try:
            resp = self.session.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise FetchError(f"Gold price request failed: {e}") from e

        price = _lookup(payload, self.price_field)
        try:
            price = float(price)
        except (TypeError, ValueError):
            raise FetchError(f"Gold price field {self.price_field!r} is not numeric") from None
        if price <= 0:
            raise FetchError(f"Gold price must be positive, got {price}")
        return price

    def current_price(self) -> float:
        """
        Refresh from the endpoint when configured, keeping the last value on failure.

        Returns:
            The freshest price available
        """
        if not self.url:
            return self._price

        try:
            price = self.fetch_gold_price_per_gram()
        except FetchError as e:
            logger.warning("Keeping last gold price %.2f: %s", self._price, e)
            return self._price

        self._price = price
        self.last_updated = datetime.now()
        logger.debug("Gold price updated to %.2f", price)
        return price


def _lookup(payload: Any, path: str) -> Any:
    value = payload
    for key in path.split("."):
        if not isinstance(value, dict) or key not in value:
            raise FetchError(f"Gold price field {path!r} missing from response")
        value = value[key]
    return value
