from datetime import date

import httpx
import pytest

from pipelines.common import DEFAULT_BASE_URL, ParclSettings
from pipelines.errors import (
    InsufficientDataError,
    MissingCredentialsError,
    UpstreamError,
    UpstreamTimeoutError,
)
from pipelines.sources.parcl import (
    FOR_SALE_INVENTORY_FEED,
    PRICE_FEED,
    VOLATILITY_FEED,
    parse_feed_items,
)

AUSTIN = 5380879


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("PARCL_API_KEY", "env-key")
    monkeypatch.setenv("PARCL_BASE_URL", "https://example.test/")
    monkeypatch.setenv("PARCL_TIMEOUT_SECONDS", "5")

    settings = ParclSettings.from_env()

    assert settings.api_key == "env-key"
    assert settings.base_url == "https://example.test"
    assert settings.timeout == pytest.approx(5.0)


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("PARCL_BASE_URL", raising=False)
    monkeypatch.delenv("PARCL_TIMEOUT_SECONDS", raising=False)

    settings = ParclSettings.from_env(api_key="explicit")

    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.timeout == pytest.approx(30.0)


def test_settings_without_key_raise(monkeypatch):
    monkeypatch.delenv("PARCL_API_KEY", raising=False)

    with pytest.raises(MissingCredentialsError):
        ParclSettings.from_env()


def test_parse_feed_items_keeps_order_and_skips_unusable_values():
    payload = {
        "items": [
            {"date": "2024-06-03", "price_feed": 412.5},
            {"date": "2024-06-02", "price_feed": None},
            {"date": "2024-06-01", "price_feed": "410.25"},
            {"date": "2024-05-31", "price_feed": "n/a"},
            "garbage",
            {"date": "2024-05-30", "price_feed": float("nan")},
            {"date": "2024-05-29", "price_feed": 10**400},
            {"date": "2024-05-28", "price_feed": "1e999"},
            {"price_feed": 405},
        ]
    }

    samples = parse_feed_items(payload, PRICE_FEED, AUSTIN)

    assert [s.value for s in samples] == [412.5, 410.25, 405]
    assert isinstance(samples[2].value, int)
    assert samples[0].observed_on == date(2024, 6, 3)
    assert samples[2].observed_on is None
    assert all(s.metric == "price_feed" and s.parcl_id == AUSTIN for s in samples)


def test_parse_feed_items_with_limit_reads_only_the_window():
    payload = {"items": [{"pct_volatility": v} for v in (0.5, 0.7, 0.9)]}

    samples = parse_feed_items(payload, VOLATILITY_FEED, AUSTIN, limit=2)

    assert [s.value for s in samples] == [0.5, 0.7]


def test_parse_feed_items_with_limit_rejects_gap_inside_window():
    payload = {"items": [{"pct_volatility": 0.5}, {"pct_volatility": "n/a"}, {"pct_volatility": 0.9}]}

    with pytest.raises(InsufficientDataError) as excinfo:
        parse_feed_items(payload, VOLATILITY_FEED, AUSTIN, limit=2)

    assert excinfo.value.required == 2
    assert excinfo.value.available == 1


@pytest.mark.parametrize("payload", [{}, {"items": None}, [], "oops"])
def test_parse_feed_items_without_items_list_raises(payload):
    with pytest.raises(UpstreamError):
        parse_feed_items(payload, PRICE_FEED, AUSTIN)


@pytest.mark.asyncio
async def test_fetch_feed_sends_credentials_to_feed_path(make_client, requests_seen):
    client = make_client(
        {f"/v1/for_sale_market_metrics/{AUSTIN}/for_sale_inventory": {"items": [{"for_sale_inventory": 4210}]}}
    )

    samples = await client.fetch_feed(FOR_SALE_INVENTORY_FEED, AUSTIN)

    assert [s.value for s in samples] == [4210.0]
    assert len(requests_seen) == 1
    request = requests_seen[0]
    assert request.method == "GET"
    assert request.headers["Authorization"] == "test-key"
    assert str(request.url) == f"https://parcl.test/v1/for_sale_market_metrics/{AUSTIN}/for_sale_inventory"


@pytest.mark.asyncio
async def test_volatility_reads_pct_volatility(make_client):
    items = [{"pct_volatility": v} for v in (0.5, 0.7)]
    client = make_client({f"/v1/price_feed/{AUSTIN}/volatility": {"items": items}})

    samples = await client.volatility(AUSTIN)

    assert [s.value for s in samples] == [0.5, 0.7]
    assert samples[0].metric == VOLATILITY_FEED.field


@pytest.mark.asyncio
async def test_http_error_status_is_surfaced(make_client):
    client = make_client(
        {f"/v1/price_feed/{AUSTIN}/price_feed": lambda request: httpx.Response(401, json={"detail": "Invalid Token"})}
    )

    with pytest.raises(UpstreamError) as excinfo:
        await client.price_feed(AUSTIN)

    assert excinfo.value.status_code == 401
    assert excinfo.value.code == "UPSTREAM_ERROR"


@pytest.mark.asyncio
async def test_timeout_is_surfaced(make_client):
    def _timeout(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    client = make_client({f"/v1/price_feed/{AUSTIN}/rental_price_feed": _timeout})

    with pytest.raises(UpstreamTimeoutError) as excinfo:
        await client.rental_price_feed(AUSTIN)

    assert excinfo.value.code == "UPSTREAM_TIMEOUT"


@pytest.mark.asyncio
async def test_connection_failure_is_surfaced(make_client):
    def _refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client({f"/v1/price_feed/{AUSTIN}/price_feed": _refuse})

    with pytest.raises(UpstreamError) as excinfo:
        await client.price_feed(AUSTIN)

    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_invalid_json_is_surfaced(make_client):
    client = make_client(
        {f"/v1/price_feed/{AUSTIN}/price_feed": lambda request: httpx.Response(200, content=b"<html>")}
    )

    with pytest.raises(UpstreamError):
        await client.price_feed(AUSTIN)
