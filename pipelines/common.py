"""Shared utilities for issuing requests to the Parcl Labs API."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from pipelines.errors import MissingCredentialsError, UpstreamError, UpstreamTimeoutError

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_BASE_URL = "https://api.parcllabs.com"

API_KEY_ENV = "PARCL_API_KEY"
BASE_URL_ENV = "PARCL_BASE_URL"
TIMEOUT_ENV = "PARCL_TIMEOUT_SECONDS"

Headers = Mapping[str, str] | None
Params = Mapping[str, Any] | None

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParclSettings:
    """Credentials and transport options owned by one client instance."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls, api_key: str | None = None) -> "ParclSettings":
        resolved = api_key or os.getenv(API_KEY_ENV)
        if not resolved:
            logger.warning(
                "Parcl API key missing. Set %s or pass api_key explicitly.", API_KEY_ENV
            )
            raise MissingCredentialsError(f"{API_KEY_ENV} is not configured.")
        return cls(
            api_key=resolved,
            base_url=os.getenv(BASE_URL_ENV, DEFAULT_BASE_URL).rstrip("/"),
            timeout=float(os.getenv(TIMEOUT_ENV, DEFAULT_TIMEOUT_SECONDS)),
        )

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": self.api_key, "Accept": "application/json"}


async def fetch_json(
    url: str,
    *,
    headers: Headers = None,
    params: Params = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Execute a single GET request and return the decoded JSON payload.

    Transport failures, non-2xx answers and undecodable bodies are raised as
    ``UpstreamError`` (``UpstreamTimeoutError`` for timeouts). Nothing is retried.
    """

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.get(url, headers=headers, params=params)
        response.raise_for_status()
    except httpx.TimeoutException as exc:
        logger.error("Timed out after %.1fs fetching %s", timeout, url)
        raise UpstreamTimeoutError(f"Request to {url} timed out.") from exc
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        logger.error("Upstream returned HTTP %s for %s", status, url)
        raise UpstreamError(
            f"Upstream returned HTTP {status} for {url}.", status_code=status
        ) from exc
    except httpx.RequestError as exc:
        logger.error("Request to %s failed: %s", url, exc)
        raise UpstreamError(f"Request to {url} failed: {exc}") from exc

    try:
        return response.json()
    except ValueError as exc:
        logger.error("Upstream response from %s is not valid JSON", url)
        raise UpstreamError(f"Upstream response from {url} is not valid JSON.") from exc


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "ParclSettings",
    "fetch_json",
]
