"""Command-line entrypoint for inspecting and invoking the market tools."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Iterable

from dotenv import load_dotenv

from markets.config import MarketConfig, iter_markets, split_market_keys
from markets.resolver import LocationResolver
from pipelines.common import ParclSettings
from pipelines.errors import MarketToolError
from pipelines.model import AgentInfo, LocationInput, ToolResponse
from pipelines.sources.parcl import ParclClient
from tools.feeds import ToolConfig, ToolContext
from tools.service import ServiceDefinition, define_service


def _format_market(market: MarketConfig) -> str:
    return f"{market.key}: name='{market.name}' parcl_id={market.parcl_id}"


def _format_tool(tool: ToolConfig) -> str:
    return f"{tool.id}: {tool.description} ({tool.pricing.price_per_use} {tool.pricing.currency}/use)"


def _resolve_markets_from_cli(keys: Iterable[str]) -> tuple[MarketConfig, ...]:
    keys = list(keys)
    if not keys:
        return iter_markets()
    markets = iter_markets(keys)
    unknown = set(keys) - {m.key for m in markets}
    if unknown:
        raise SystemExit(f"Unknown market keys: {', '.join(sorted(unknown))}")
    return markets


async def _invoke(
    tool: ToolConfig, location: str, agent_id: str, resolver: LocationResolver
) -> ToolResponse:
    context = ToolContext(client=ParclClient(ParclSettings.from_env()), resolver=resolver)
    return await tool.handler(LocationInput(location=location), AgentInfo(agent_id=agent_id), context)


def _run_invoke(
    service: ServiceDefinition, args: argparse.Namespace, resolver: LocationResolver
) -> int:
    tool = service.get_tool(args.tool_id)
    if tool is None:
        known = ", ".join(t.id for t in service.tools)
        raise SystemExit(f"Unknown tool '{args.tool_id}'. Known tools: {known}")
    try:
        response = asyncio.run(_invoke(tool, args.location, args.agent_id, resolver))
    except MarketToolError as exc:
        print(f"{exc.code}: {exc.message}", file=sys.stderr)
        return 1
    print(json.dumps(response.model_dump(mode="json"), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Parcl market tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    markets_parser = subparsers.add_parser(
        "list-markets", help="Show supported markets and their Parcl ids"
    )
    markets_parser.add_argument(
        "--markets",
        help="Comma-separated list of market keys to show (defaults to all supported)",
    )
    subparsers.add_parser("list-tools", help="Show the tools this service exposes")

    invoke_parser = subparsers.add_parser("invoke", help="Run one tool against the Parcl API")
    invoke_parser.add_argument("tool_id", help="Tool identifier, e.g. get-parcl-price-feed")
    invoke_parser.add_argument("--location", required=True, help="City name to look up")
    invoke_parser.add_argument("--agent-id", default="cli", help="Agent id recorded in logs")
    invoke_parser.add_argument(
        "--log-level",
        help="Override LOG_LEVEL for this invocation (e.g. DEBUG, INFO)",
    )

    args = parser.parse_args(argv)
    service = define_service()

    if args.command == "list-markets":
        for market in _resolve_markets_from_cli(split_market_keys(args.markets)):
            print(_format_market(market))
        return 0

    if args.command == "list-tools":
        for tool in service.tools:
            print(_format_tool(tool))
        return 0

    if args.command == "invoke":
        if args.log_level:
            os.environ["LOG_LEVEL"] = args.log_level
        logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
        try:
            resolver = LocationResolver.from_env()
        except ValueError as exc:
            parser.error(f"invalid configuration: {exc}")
        return _run_invoke(service, args, resolver)

    parser.error("Unknown command")
    return 1


if __name__ == "__main__":  # pragma: no cover
    load_dotenv()
    raise SystemExit(main())
