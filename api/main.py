"""FastAPI service hosting the Parcl market tools."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from markets.config import iter_markets, split_market_keys
from markets.resolver import LocationResolver
from pipelines.common import ParclSettings
from pipelines.errors import (
    InsufficientDataError,
    MarketToolError,
    MissingCredentialsError,
    UnknownLocationError,
    UpstreamError,
    UpstreamTimeoutError,
)
from pipelines.model import AgentInfo, LocationInput, ToolResponse
from pipelines.sources.parcl import ParclClient
from tools.feeds import ToolContext
from tools.service import ServiceSettings, define_service

load_dotenv()

logger = logging.getLogger(__name__)

# Most specific first; UpstreamTimeoutError subclasses UpstreamError.
ERROR_STATUS: tuple[tuple[type[MarketToolError], int], ...] = (
    (UnknownLocationError, 404),
    (InsufficientDataError, 422),
    (UpstreamTimeoutError, 504),
    (UpstreamError, 502),
    (MissingCredentialsError, 503),
)


def status_for(exc: MarketToolError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 500


def _build_context() -> ToolContext | None:
    try:
        resolver = LocationResolver.from_env()
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        raise
    try:
        settings = ParclSettings.from_env()
    except MissingCredentialsError:
        return None
    return ToolContext(client=ParclClient(settings), resolver=resolver)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.service = define_service(ServiceSettings.from_env())
    app.state.context = _build_context()
    yield


app = FastAPI(title="Parcl Market Tools", version="1.1.0", lifespan=lifespan)


def _configure_cors() -> None:
    raw_origins = os.getenv("API_CORS_ORIGINS", "*")
    origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )


_configure_cors()


@app.exception_handler(MarketToolError)
async def market_tool_error_handler(request: Request, exc: MarketToolError) -> JSONResponse:
    logger.warning("%s failed with %s: %s", request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=status_for(exc), content={"error": exc.to_dict()})


def get_tool_context(request: Request) -> ToolContext:
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise MissingCredentialsError("PARCL_API_KEY is not configured.")
    return context


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata(request: Request) -> dict[str, Any]:
    return request.app.state.service.describe()


@app.get("/markets")
def markets(
    keys: str | None = Query(None, description="Comma-separated market keys to return"),
) -> dict[str, Any]:
    requested = split_market_keys(keys)
    selected = iter_markets(requested or None)
    unknown = set(requested) - {market.key for market in selected}
    if unknown:
        raise HTTPException(
            status_code=404, detail=f"Unknown market keys: {', '.join(sorted(unknown))}"
        )
    items = [
        {"key": market.key, "name": market.name, "parcl_id": market.parcl_id}
        for market in selected
    ]
    return {"count": len(items), "items": items}


@app.get("/tools")
def list_tools(request: Request) -> dict[str, Any]:
    cards = [tool.card() for tool in request.app.state.service.tools]
    return {"count": len(cards), "items": cards}


@app.post("/tools/{tool_id}", response_model=ToolResponse)
async def invoke_tool(
    tool_id: str,
    tool_input: LocationInput,
    request: Request,
    x_agent_id: str | None = Header(default=None),
) -> ToolResponse:
    tool = request.app.state.service.get_tool(tool_id)
    if tool is None:
        raise HTTPException(status_code=404, detail=f"Unknown tool '{tool_id}'")
    context = get_tool_context(request)
    agent = AgentInfo(agent_id=x_agent_id) if x_agent_id else AgentInfo()
    return await tool.handler(tool_input, agent, context)
