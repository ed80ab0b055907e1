"""Crypto source — CoinGecko spot price with 24h change for one asset."""

from __future__ import annotations

from typing import Any

from skynet.core.config import CryptoFeedConfig, get_settings
from skynet.core.types import CryptoReading
from skynet.feeds.base import BaseSource
from skynet.feeds.exceptions import FeedParseError


def _parse_simple_price(data: dict[str, Any], asset_id: str, vs_currency: str) -> CryptoReading:
    """Parse a CoinGecko ``simple/price`` response.

    Expected structure::

        {"bitcoin": {"usd": 67012.0, "usd_24h_change": -3.41}}

    Volatility is the absolute 24h change.
    """
    quote = data.get(asset_id)
    if not isinstance(quote, dict):
        raise FeedParseError(f"crypto response missing '{asset_id}' quote")

    try:
        price = float(quote[vs_currency])
    except (KeyError, TypeError, ValueError) as exc:
        raise FeedParseError(f"crypto quote missing '{vs_currency}' price") from exc

    try:
        change = float(quote.get(f"{vs_currency}_24h_change") or 0.0)
    except (TypeError, ValueError):
        change = 0.0

    return CryptoReading(price=price, change_24h=change, volatility=abs(change))


class CryptoSource(BaseSource[CryptoReading]):
    """Spot price for the configured asset (bitcoin by default)."""

    name = "crypto"

    def __init__(self, config: CryptoFeedConfig | None = None) -> None:
        cfg = config or get_settings().feeds.crypto
        super().__init__(timeout_secs=cfg.timeout_secs)
        self._config = cfg

    async def fetch(self) -> CryptoReading:
        params = {
            "ids": self._config.asset_id,
            "vs_currencies": self._config.vs_currency,
            "include_24hr_change": "true",
        }
        body = await self._get_json(self._config.base_url, params=params)
        if not isinstance(body, dict):
            raise FeedParseError("crypto response is not an object")
        return _parse_simple_price(body, self._config.asset_id, self._config.vs_currency)
