"""Market tools backed by the Parcl Labs feeds.

Every handler is a one-shot: resolve the location, fetch one feed, reduce the
samples to a single value and format the envelope.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from markets.resolver import LocationResolver
from pipelines.aggregate import VOLATILITY_WINDOW, average, latest
from pipelines.model import AgentInfo, LocationInput, ToolResponse
from pipelines.sources.parcl import (
    FOR_SALE_INVENTORY_FEED,
    PRICE_FEED,
    RENTAL_PRICE_FEED,
    VOLATILITY_FEED,
    FeedConfig,
    ParclClient,
)
from tools.envelope import build_response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolContext:
    """Collaborators a handler needs; built once per service or CLI run."""

    client: ParclClient
    resolver: LocationResolver


@dataclass(frozen=True)
class Pricing:
    price_per_use: float = 0.01
    currency: str = "USD"


ToolHandler = Callable[[LocationInput, AgentInfo, ToolContext], Awaitable[ToolResponse]]


@dataclass(frozen=True)
class ToolConfig:
    id: str
    name: str
    description: str
    input_description: str
    output_description: str
    handler: ToolHandler
    pricing: Pricing = field(default_factory=Pricing)

    def card(self) -> dict:
        schema = copy.deepcopy(LocationInput.model_json_schema())
        schema["properties"]["location"]["description"] = self.input_description
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "input_schema": schema,
            "output": self.output_description,
            "pricing": {
                "price_per_use": self.pricing.price_per_use,
                "currency": self.pricing.currency,
            },
        }


async def _latest_value(feed: FeedConfig, location: str, context: ToolContext) -> int | float:
    market = context.resolver.resolve_market(location)
    samples = await context.client.fetch_feed(feed, market.parcl_id, limit=1)
    return latest(samples)


async def get_price_feed(
    tool_input: LocationInput, agent: AgentInfo, context: ToolContext
) -> ToolResponse:
    logger.info("Agent %s requested price feed for %s", agent.agent_id, tool_input.location)
    value = await _latest_value(PRICE_FEED, tool_input.location, context)
    return build_response(
        "The current price of property per square foot in {location} is {value}",
        "Property Price Feed",
        "price",
        tool_input.location,
        value,
    )


async def get_rental_price_feed(
    tool_input: LocationInput, agent: AgentInfo, context: ToolContext
) -> ToolResponse:
    logger.info("Agent %s requested rental price feed for %s", agent.agent_id, tool_input.location)
    value = await _latest_value(RENTAL_PRICE_FEED, tool_input.location, context)
    return build_response(
        "The current rental price of property per square foot in {location} is {value}",
        "Property Rental Price Feed",
        "price",
        tool_input.location,
        value,
    )


async def get_volatility_feed(
    tool_input: LocationInput, agent: AgentInfo, context: ToolContext
) -> ToolResponse:
    logger.info("Agent %s requested volatility rate for %s", agent.agent_id, tool_input.location)
    market = context.resolver.resolve_market(tool_input.location)
    samples = await context.client.fetch_feed(
        VOLATILITY_FEED, market.parcl_id, limit=VOLATILITY_WINDOW
    )
    value = average(samples, VOLATILITY_WINDOW)
    return build_response(
        "The average volatility rate over the last 10 days for {location} is {value}",
        "Property Volatility Rate Feed",
        "volatility_average",
        tool_input.location,
        value,
    )


async def get_sale_inventory_feed(
    tool_input: LocationInput, agent: AgentInfo, context: ToolContext
) -> ToolResponse:
    logger.info("Agent %s requested sale inventory for %s", agent.agent_id, tool_input.location)
    value = await _latest_value(FOR_SALE_INVENTORY_FEED, tool_input.location, context)
    return build_response(
        "The current sale inventory for {location} is {value}",
        "Property Sale Inventory Feed",
        "sale_inventory",
        tool_input.location,
        value,
    )


PRICE_FEED_TOOL = ToolConfig(
    id="get-parcl-price-feed",
    name="Get Parcl Price Feed",
    description="Fetches the latest Parcl price feed",
    input_description="The location to get the property price per square foot for",
    output_description="Parcl price per square foot for the requested location",
    handler=get_price_feed,
)

RENTAL_PRICE_FEED_TOOL = ToolConfig(
    id="get-parcl-rental-price-feed",
    name="Get Parcl Rental Price Feed",
    description="Fetches the latest Parcl Rental price feed",
    input_description="The location to get the property rental price per square foot for",
    output_description="Parcl rental price per square foot for the requested location",
    handler=get_rental_price_feed,
)

VOLATILITY_FEED_TOOL = ToolConfig(
    id="get-parcl-volatility-feed",
    name="Get Parcl Volatility Feed",
    description="Fetches the latest Parcl 10-day average volatility rate",
    input_description="The location to get the 10-day average property volatility rate for",
    output_description="Parcl average volatility rate over the last 10 days for the requested location",
    handler=get_volatility_feed,
)

SALE_INVENTORY_FEED_TOOL = ToolConfig(
    id="get-parcl-sale-inventory-feed",
    name="Get Parcl Sale Inventory Feed",
    description="Fetches the latest Parcl sale inventory",
    input_description="The location to get the sale inventory for",
    output_description="Parcl sale inventory for the requested location",
    handler=get_sale_inventory_feed,
)

TOOLS: tuple[ToolConfig, ...] = (
    PRICE_FEED_TOOL,
    RENTAL_PRICE_FEED_TOOL,
    VOLATILITY_FEED_TOOL,
    SALE_INVENTORY_FEED_TOOL,
)


__all__ = [
    "Pricing",
    "TOOLS",
    "ToolConfig",
    "ToolContext",
    "get_price_feed",
    "get_rental_price_feed",
    "get_sale_inventory_feed",
    "get_volatility_feed",
]
