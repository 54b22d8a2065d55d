"""
Unit tests for the gold price feed.
"""

from unittest.mock import MagicMock

import pytest
import requests

from household_finance_mcp.core.exceptions import FetchError
from household_finance_mcp.core.market import DEFAULT_GOLD_PRICE_PER_GRAM, GoldPriceFeed


def _session_returning(payload=None, error=None):
    session = MagicMock(spec=requests.Session)
    if error is not None:
        session.get.side_effect = error
    else:
        response = MagicMock()
        response.json.return_value = payload
        session.get.return_value = response
    return session


class TestGoldPriceFeed:
    def test_default_price_without_endpoint(self):
        feed = GoldPriceFeed()
        assert feed.current_price() == DEFAULT_GOLD_PRICE_PER_GRAM

    def test_fetch_without_endpoint_raises(self):
        with pytest.raises(FetchError, match="No gold price endpoint"):
            GoldPriceFeed().fetch_gold_price_per_gram()

    def test_set_price(self):
        feed = GoldPriceFeed()
        feed.set_price(1_250_000)
        assert feed.last_price == 1_250_000
        assert feed.last_updated is not None

    @pytest.mark.parametrize("price", [0, -1])
    def test_set_price_rejects_non_positive(self, price):
        with pytest.raises(ValueError):
            GoldPriceFeed().set_price(price)

    def test_fetch_nested_field(self):
        session = _session_returning({"data": {"price": "1300000"}})
        feed = GoldPriceFeed(url="https://gold.example/api", price_field="data.price", session=session)

        assert feed.current_price() == 1_300_000
        assert feed.last_price == 1_300_000
        session.get.assert_called_once_with("https://gold.example/api", timeout=feed.timeout)

    def test_request_failure_keeps_last_price(self):
        session = _session_returning(error=requests.ConnectionError("offline"))
        feed = GoldPriceFeed(url="https://gold.example/api", initial_price=1_100_000, session=session)

        assert feed.current_price() == 1_100_000
        with pytest.raises(FetchError, match="request failed"):
            feed.fetch_gold_price_per_gram()

    @pytest.mark.parametrize(
        "payload,message",
        [
            ({"other": 1}, "missing"),
            ({"price": "n/a"}, "not numeric"),
            ({"price": 0}, "positive"),
        ],
    )
    def test_bad_payloads(self, payload, message):
        feed = GoldPriceFeed(url="https://gold.example/api", session=_session_returning(payload))
        with pytest.raises(FetchError, match=message):
            feed.fetch_gold_price_per_gram()
        assert feed.current_price() == DEFAULT_GOLD_PRICE_PER_GRAM
