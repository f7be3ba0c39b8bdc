from typing import Any, Callable

import httpx
import pytest

from markets.resolver import LocationResolver, UnknownLocationPolicy
from pipelines.common import ParclSettings
from pipelines.sources.parcl import ParclClient
from tools.feeds import ToolContext

TEST_SETTINGS = ParclSettings(api_key="test-key", base_url="https://parcl.test")


def _transport(routes: dict[str, Any], seen: list[httpx.Request]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"detail": "not found"})
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    return httpx.MockTransport(handler)


@pytest.fixture()
def requests_seen() -> list[httpx.Request]:
    return []


@pytest.fixture()
def make_client(requests_seen) -> Callable[[dict[str, Any]], ParclClient]:
    """Build a client whose upstream answers from ``routes`` keyed by URL path."""

    def _make(routes: dict[str, Any]) -> ParclClient:
        return ParclClient(TEST_SETTINGS, transport=_transport(routes, requests_seen))

    return _make


@pytest.fixture()
def make_context(make_client) -> Callable[..., ToolContext]:
    def _make(
        routes: dict[str, Any],
        policy: UnknownLocationPolicy = UnknownLocationPolicy.DEFAULT,
    ) -> ToolContext:
        return ToolContext(client=make_client(routes), resolver=LocationResolver(policy))

    return _make
