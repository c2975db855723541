"""Europarcel MCP tools.

Each tool is a plain async function; ``TOOL_DESCRIPTORS`` pairs it with the
stable protocol name, title and description it is published under. Input
schemas come from the annotated handler signatures.

Handlers read the caller's API key from the request context, never raise
to the protocol layer, and answer every failure with descriptive text.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fastmcp import FastMCP
from mcp.types import ToolAnnotations

from src.mcp.europarcel.tools.addresses import (
    get_billing_addresses,
    get_shipping_addresses,
)
from src.mcp.europarcel.tools.locations import (
    get_carriers,
    get_counties,
    get_countries,
    get_services,
)
from src.mcp.europarcel.tools.orders import track_orders_by_ids


@dataclass(frozen=True)
class ToolDescriptor:
    """Published contract of one tool."""

    name: str
    title: str
    description: str
    handler: Callable[..., Awaitable[str]]


TOOL_DESCRIPTORS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="getCountries",
        title="Get Countries",
        description="Retrieves all available countries with their currency and language information",
        handler=get_countries,
    ),
    ToolDescriptor(
        name="getCounties",
        title="Get Counties",
        description="Retrieves counties for a specific country. Requires country_code parameter.",
        handler=get_counties,
    ),
    ToolDescriptor(
        name="getCarriers",
        title="Get Carriers",
        description="Retrieves all available carriers with their status",
        handler=get_carriers,
    ),
    ToolDescriptor(
        name="getServices",
        title="Get Services",
        description=(
            "Retrieves available services with carrier information. "
            "Optional filters: service_id, carrier_id, country_code"
        ),
        handler=get_services,
    ),
    ToolDescriptor(
        name="getBillingAddresses",
        title="Get All Billing Addresses",
        description=(
            "Retrieves all billing addresses for the authenticated customer. "
            "Returns complete list with business details, VAT info, and bank details."
        ),
        handler=get_billing_addresses,
    ),
    ToolDescriptor(
        name="getShippingAddresses",
        title="Get All Shipping Addresses",
        description=(
            "Retrieves all shipping addresses (pickup locations) for the authenticated "
            "customer. Returns complete list with coordinates and postal codes."
        ),
        handler=get_shipping_addresses,
    ),
    ToolDescriptor(
        name="trackOrdersByIds",
        title="Track Multiple Orders",
        description=(
            "Track multiple orders by their order IDs. Parameters: order_ids "
            "(array of order IDs, required), language (optional, default 'ro')"
        ),
        handler=track_orders_by_ids,
    ),
)


def register_tools(server: FastMCP) -> None:
    """Register every Europarcel tool on ``server``."""
    for descriptor in TOOL_DESCRIPTORS:
        server.tool(
            name=descriptor.name,
            title=descriptor.title,
            description=descriptor.description,
            annotations=ToolAnnotations(
                readOnlyHint=True,
                openWorldHint=True,
            ),
        )(descriptor.handler)


__all__ = [
    "TOOL_DESCRIPTORS",
    "ToolDescriptor",
    "register_tools",
    "get_billing_addresses",
    "get_carriers",
    "get_counties",
    "get_countries",
    "get_services",
    "get_shipping_addresses",
    "track_orders_by_ids",
]
