"""Translate free-text city names into Parcl market identifiers."""

from __future__ import annotations

import logging
import os
from enum import Enum

from markets.config import DEFAULT_MARKET_KEY, MarketConfig, get_market_by_key, get_market_by_name
from pipelines.errors import UnknownLocationError

POLICY_ENV = "UNKNOWN_LOCATION_POLICY"
DEFAULT_MARKET_ENV = "DEFAULT_MARKET_KEY"

logger = logging.getLogger(__name__)


class UnknownLocationPolicy(str, Enum):
    """What to do with a location outside the supported markets."""

    DEFAULT = "default"
    REJECT = "reject"


class LocationResolver:
    """Resolves city names under an explicit unknown-location policy."""

    def __init__(
        self,
        policy: UnknownLocationPolicy = UnknownLocationPolicy.DEFAULT,
        default_market_key: str = DEFAULT_MARKET_KEY,
    ) -> None:
        default_market = get_market_by_key(default_market_key)
        if default_market is None:
            raise ValueError(f"Unknown default market key '{default_market_key}'")
        self.policy = UnknownLocationPolicy(policy)
        self.default_market = default_market

    @classmethod
    def from_env(cls) -> "LocationResolver":
        raw_policy = os.getenv(POLICY_ENV, UnknownLocationPolicy.DEFAULT.value).strip().lower()
        try:
            policy = UnknownLocationPolicy(raw_policy)
        except ValueError as exc:
            raise ValueError(
                f"{POLICY_ENV} must be one of "
                f"{', '.join(p.value for p in UnknownLocationPolicy)}; got '{raw_policy}'."
            ) from exc
        return cls(policy, os.getenv(DEFAULT_MARKET_ENV, DEFAULT_MARKET_KEY))

    def resolve_market(self, name: str) -> MarketConfig:
        market = get_market_by_name(name)
        if market is not None:
            return market
        if self.policy is UnknownLocationPolicy.REJECT:
            logger.info("Rejecting unsupported location '%s'", name)
            raise UnknownLocationError(name)
        logger.warning(
            "Unsupported location '%s'; falling back to %s", name, self.default_market.name
        )
        return self.default_market

    def resolve(self, name: str) -> int:
        return self.resolve_market(name).parcl_id


_default_resolver = LocationResolver()


def resolve(name: str) -> int:
    """Parcl id for ``name``, falling back to New York City for anything unsupported."""

    return _default_resolver.resolve(name)


__all__ = ["LocationResolver", "UnknownLocationPolicy", "resolve"]
