"""Parcl Labs feed client.

Turns Parcl Labs feed responses into normalized ``MetricSample`` records that
the market tools reduce and format.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping

import httpx

from pipelines.common import ParclSettings, fetch_json
from pipelines.errors import InsufficientDataError, UpstreamError
from pipelines.model import MetricSample


@dataclass(frozen=True)
class FeedConfig:
    """Where a feed lives and which item field carries its value."""

    key: str
    path: str
    field: str


PRICE_FEED = FeedConfig(
    key="price_feed",
    path="/v1/price_feed/{parcl_id}/price_feed",
    field="price_feed",
)
RENTAL_PRICE_FEED = FeedConfig(
    key="rental_price_feed",
    path="/v1/price_feed/{parcl_id}/rental_price_feed",
    field="rental_price_feed",
)
VOLATILITY_FEED = FeedConfig(
    key="volatility",
    path="/v1/price_feed/{parcl_id}/volatility",
    field="pct_volatility",
)
FOR_SALE_INVENTORY_FEED = FeedConfig(
    key="for_sale_inventory",
    path="/v1/for_sale_market_metrics/{parcl_id}/for_sale_inventory",
    field="for_sale_inventory",
)

logger = logging.getLogger(__name__)


def _coerce_number(value: Any) -> int | float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        raw: Any = value
    elif isinstance(value, str):
        raw = value.strip()
    else:
        return None

    try:
        numeric = float(raw)
    except (OverflowError, ValueError):
        return None
    if math.isnan(numeric) or math.isinf(numeric):
        return None
    # Counts stay integral.
    if isinstance(value, int):
        return value
    return numeric


def _parse_date(raw: Any) -> date | None:
    if not isinstance(raw, str):
        return None
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def parse_feed_items(
    payload: Any,
    feed: FeedConfig,
    parcl_id: int,
    *,
    limit: int | None = None,
) -> list[MetricSample]:
    """Normalize a feed payload, keeping the provider's ordering.

    Without ``limit`` unusable items are skipped. With ``limit`` only the first
    ``limit`` raw items are read and every one of them must carry a usable
    value; a gap inside that window raises ``InsufficientDataError`` instead of
    pulling a later item forward.
    """

    items = payload.get("items") if isinstance(payload, Mapping) else None
    if not isinstance(items, list):
        raise UpstreamError(f"Parcl {feed.key} response for {parcl_id} has no 'items' list.")
    if limit is not None:
        items = items[:limit]

    samples: list[MetricSample] = []
    for item in items:
        value = _coerce_number(item.get(feed.field)) if isinstance(item, Mapping) else None
        if value is None:
            logger.debug("Skipping %s item without numeric %s: %s", feed.key, feed.field, item)
            continue
        samples.append(
            MetricSample(
                parcl_id=parcl_id,
                metric=feed.field,
                value=value,
                observed_on=_parse_date(item.get("date")),
                raw_payload=dict(item),
            )
        )

    if limit is not None and len(samples) < limit:
        raise InsufficientDataError(required=limit, available=len(samples))
    return samples


class ParclClient:
    """Scoped Parcl Labs client; credentials travel with the instance."""

    def __init__(
        self,
        settings: ParclSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._transport = transport

    def url_for(self, feed: FeedConfig, parcl_id: int) -> str:
        return self.settings.base_url + feed.path.format(parcl_id=parcl_id)

    async def fetch_feed(
        self, feed: FeedConfig, parcl_id: int, *, limit: int | None = None
    ) -> list[MetricSample]:
        payload = await fetch_json(
            self.url_for(feed, parcl_id),
            headers=self.settings.auth_headers(),
            timeout=self.settings.timeout,
            transport=self._transport,
        )
        samples = parse_feed_items(payload, feed, parcl_id, limit=limit)
        logger.debug("Fetched %s %s samples for parcl_id=%s", len(samples), feed.key, parcl_id)
        return samples

    async def price_feed(self, parcl_id: int) -> list[MetricSample]:
        return await self.fetch_feed(PRICE_FEED, parcl_id)

    async def rental_price_feed(self, parcl_id: int) -> list[MetricSample]:
        return await self.fetch_feed(RENTAL_PRICE_FEED, parcl_id)

    async def volatility(self, parcl_id: int) -> list[MetricSample]:
        return await self.fetch_feed(VOLATILITY_FEED, parcl_id)

    async def for_sale_inventory(self, parcl_id: int) -> list[MetricSample]:
        return await self.fetch_feed(FOR_SALE_INVENTORY_FEED, parcl_id)


__all__ = [
    "FOR_SALE_INVENTORY_FEED",
    "FeedConfig",
    "PRICE_FEED",
    "ParclClient",
    "RENTAL_PRICE_FEED",
    "VOLATILITY_FEED",
    "parse_feed_items",
]
