"""Address tools: billing and shipping (pickup) addresses of the customer."""

import logging

from src.mcp.europarcel.client import EuroparcelAPIError
from src.mcp.europarcel.formatting import (
    format_billing_addresses,
    format_shipping_addresses,
)
from src.mcp.europarcel.tools.common import (
    MISSING_API_KEY_MESSAGE,
    client_for_current_request,
)

logger = logging.getLogger(__name__)


async def get_billing_addresses() -> str:
    """Retrieve every billing address of the authenticated customer."""
    client = client_for_current_request()
    if client is None:
        return MISSING_API_KEY_MESSAGE

    logger.info("Fetching all billing addresses")
    try:
        page = await client.get_billing_addresses(fetch_all=True)
    except EuroparcelAPIError as e:
        logger.error("Failed to fetch billing addresses: %s", e)
        return f"Error fetching billing addresses: {e}"

    logger.info("Retrieved %d billing addresses", len(page.items))
    total = page.meta.total if page.meta.total is not None else len(page.items)
    return format_billing_addresses(page.items, total)


async def get_shipping_addresses() -> str:
    """Retrieve every shipping address of the authenticated customer."""
    client = client_for_current_request()
    if client is None:
        return MISSING_API_KEY_MESSAGE

    logger.info("Fetching all shipping addresses")
    try:
        page = await client.get_shipping_addresses(fetch_all=True)
    except EuroparcelAPIError as e:
        logger.error("Failed to fetch shipping addresses: %s", e)
        return f"Error fetching shipping addresses: {e}"

    logger.info("Retrieved %d shipping addresses", len(page.items))
    total = page.meta.total if page.meta.total is not None else len(page.items)
    return format_shipping_addresses(page.items, total)
