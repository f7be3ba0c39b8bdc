"""Static configuration for the markets the tools can look up."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class MarketConfig:
    """A supported market and its Parcl Labs identifier."""

    key: str
    name: str
    parcl_id: int


SUPPORTED_MARKETS: tuple[MarketConfig, ...] = (
    MarketConfig(key="new_york_city", name="New York City", parcl_id=5372594),
    MarketConfig(key="los_angeles", name="Los Angeles", parcl_id=5373892),
    MarketConfig(key="chicago", name="Chicago", parcl_id=5387853),
    MarketConfig(key="houston", name="Houston", parcl_id=5381035),
    MarketConfig(key="philadelphia", name="Philadelphia", parcl_id=5378051),
    MarketConfig(key="austin", name="Austin", parcl_id=5380879),
    MarketConfig(key="san_francisco", name="San Francisco", parcl_id=5374321),
)

DEFAULT_MARKET_KEY = "new_york_city"


def get_market_by_key(key: str) -> MarketConfig | None:
    for market in SUPPORTED_MARKETS:
        if market.key == key:
            return market
    return None


def get_market_by_name(name: str) -> MarketConfig | None:
    """Case-insensitive exact match against the supported market names."""

    folded = name.casefold()
    for market in SUPPORTED_MARKETS:
        if market.name.casefold() == folded:
            return market
    return None


def iter_markets(keys: Iterable[str] | None = None) -> tuple[MarketConfig, ...]:
    """Every supported market, or the ones named by ``keys`` in request order.

    Keys that match no market are dropped.
    """

    if keys is None:
        return SUPPORTED_MARKETS
    found = (get_market_by_key(key) for key in keys)
    return tuple(market for market in found if market is not None)


def split_market_keys(raw: str | None) -> list[str]:
    return [key.strip() for key in (raw or "").split(",") if key.strip()]


__all__ = [
    "DEFAULT_MARKET_KEY",
    "MarketConfig",
    "SUPPORTED_MARKETS",
    "get_market_by_key",
    "get_market_by_name",
    "iter_markets",
    "split_market_keys",
]
