"""Service, toolbox and metadata definitions advertised to the hosting platform."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from tools.feeds import TOOLS, ToolConfig

DEFAULT_PORT = 2024
PORT_ENV = "SERVICE_PORT"
PLATFORM_KEY_ENV = "DAIN_API_KEY"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceConfig:
    id: str
    name: str
    description: str
    capabilities: tuple[str, ...]
    languages: tuple[str, ...]
    recommended_prompt: str
    recommended_tools: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "metadata": {
                "capabilities": list(self.capabilities),
                "languages": list(self.languages),
            },
            "recommended_prompt": self.recommended_prompt,
            "recommended_tools": list(self.recommended_tools),
        }


@dataclass(frozen=True)
class ToolboxConfig:
    id: str
    name: str
    description: str
    tools: tuple[str, ...]
    complexity: str
    applicable_fields: tuple[str, ...]
    recommended_prompt: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "tools": list(self.tools),
            "metadata": {
                "complexity": self.complexity,
                "applicable_fields": list(self.applicable_fields),
            },
            "recommended_prompt": self.recommended_prompt,
        }


@dataclass(frozen=True)
class ServiceMetadata:
    title: str
    description: str
    version: str
    tags: tuple[str, ...]


@dataclass(frozen=True)
class ServiceSettings:
    """Hosting options read once at startup."""

    port: int = DEFAULT_PORT
    platform_api_key: str | None = field(default=None, repr=False)

    @classmethod
    def from_env(cls) -> "ServiceSettings":
        platform_key = os.getenv(PLATFORM_KEY_ENV)
        if not platform_key:
            logger.warning(
                "%s is not set; the service will run without a platform identity.",
                PLATFORM_KEY_ENV,
            )
        return cls(
            port=int(os.getenv(PORT_ENV, DEFAULT_PORT)),
            platform_api_key=platform_key or None,
        )


TOOL_IDS: tuple[str, ...] = tuple(tool.id for tool in TOOLS)

REAL_ESTATE_SERVICE = ServiceConfig(
    id="real-estate-data-service",
    name="Real Estate Data Service",
    description="Provides comprehensive real estate data",
    capabilities=(
        "property-price-per-square-foot",
        "property-rental-price-per-square-foot",
        "property-volatility-rate",
        "property-sale-inventory",
    ),
    languages=("en",),
    recommended_prompt=(
        "Ask about real estate data, such as property price per square foot, "
        "rental price per square foot, and volatility rate"
    ),
    recommended_tools=TOOL_IDS,
)

REAL_ESTATE_TOOLBOX = ToolboxConfig(
    id="real-estate-data-toolbox",
    name="Real Estate Data Toolbox",
    description="Collection of real estate data-related tools",
    tools=TOOL_IDS,
    complexity="Medium",
    applicable_fields=("Real Estate", "Property", "Real Estate Data"),
    recommended_prompt="Use these tools for various real estate data-related tasks and analyses",
)

SERVICE_METADATA = ServiceMetadata(
    title="Comprehensive Real Estate Data Service",
    description=(
        "A service for detailed real estate data, such as property price per square foot, "
        "rental price per square foot, and volatility rate"
    ),
    version="1.1.0",
    tags=("property", "real estate", "property price"),
)


@dataclass(frozen=True)
class ServiceDefinition:
    """Everything the hosting platform needs to register this service."""

    metadata: ServiceMetadata
    services: tuple[ServiceConfig, ...]
    tools: tuple[ToolConfig, ...]
    toolboxes: tuple[ToolboxConfig, ...]
    settings: ServiceSettings

    def get_tool(self, tool_id: str) -> ToolConfig | None:
        for tool in self.tools:
            if tool.id == tool_id:
                return tool
        return None

    def describe(self) -> dict:
        return {
            "title": self.metadata.title,
            "description": self.metadata.description,
            "version": self.metadata.version,
            "tags": list(self.metadata.tags),
            "identity_configured": self.settings.platform_api_key is not None,
            "services": [service.to_dict() for service in self.services],
            "toolboxes": [toolbox.to_dict() for toolbox in self.toolboxes],
        }


def define_service(settings: ServiceSettings | None = None) -> ServiceDefinition:
    return ServiceDefinition(
        metadata=SERVICE_METADATA,
        services=(REAL_ESTATE_SERVICE,),
        tools=TOOLS,
        toolboxes=(REAL_ESTATE_TOOLBOX,),
        settings=settings or ServiceSettings(),
    )


__all__ = [
    "DEFAULT_PORT",
    "REAL_ESTATE_SERVICE",
    "REAL_ESTATE_TOOLBOX",
    "SERVICE_METADATA",
    "ServiceConfig",
    "ServiceDefinition",
    "ServiceMetadata",
    "ServiceSettings",
    "ToolboxConfig",
    "define_service",
]
