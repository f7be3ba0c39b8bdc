"""Text/data/ui envelopes returned by the market tools."""

from __future__ import annotations

from pipelines.model import ToolResponse, UIDirective


def format_value(value: int | float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def build_response(
    template: str, heading: str, key: str, location: str, value: int | float
) -> ToolResponse:
    """Interpolate ``location`` and ``value`` into ``template`` and wrap the payload."""

    return ToolResponse(
        text=template.format(location=location, value=format_value(value)),
        data={key: value},
        ui=UIDirective(type="h2", children=heading),
    )


__all__ = ["build_response", "format_value"]
