"""Canonical data model for Parcl feed samples and tool envelopes."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class MetricSample(BaseModel):
    """Normalized representation of a single feed observation."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    parcl_id: int = Field(..., description="Parcl market identifier the sample belongs to.")
    metric: str = Field(
        ..., description="Feed field the value was read from (e.g. 'price_feed', 'pct_volatility')."
    )
    value: int | float = Field(
        ..., description="Numeric value of the observation; integral counts stay integers."
    )
    observed_on: Optional[date] = Field(
        default=None, description="Date of the observation when the provider supplies one."
    )
    raw_payload: Optional[Any] = Field(
        default=None,
        description="Raw upstream item retained for traceability and debugging.",
    )


class LocationInput(BaseModel):
    """Single required input accepted by every market tool."""

    model_config = ConfigDict(extra="forbid")

    location: str = Field(..., description="City name to look up (e.g. 'Austin').")


class AgentInfo(BaseModel):
    """Caller metadata forwarded by the hosting platform."""

    agent_id: str = Field(default="anonymous", description="Identifier of the calling agent.")


class UIDirective(BaseModel):
    type: str = Field(default="h2", description="Display element the platform should render.")
    children: str = Field(..., description="Heading label.")


class ToolResponse(BaseModel):
    """Envelope returned by every tool: a sentence, a payload and a display hint."""

    text: str
    data: dict[str, int | float]
    ui: UIDirective


__all__ = ["AgentInfo", "LocationInput", "MetricSample", "ToolResponse", "UIDirective"]
