"""Order tools."""

import logging
from typing import Annotated, Literal

from pydantic import Field

from src.mcp.europarcel.client import EuroparcelAPIError
from src.mcp.europarcel.formatting import format_tracking
from src.mcp.europarcel.tools.common import (
    MISSING_API_KEY_MESSAGE,
    client_for_current_request,
)

logger = logging.getLogger(__name__)

TrackingLanguage = Literal["ro", "de", "en", "fr", "hu", "bg"]


async def track_orders_by_ids(
    order_ids: Annotated[
        list[Annotated[int, Field(ge=1)]],
        Field(
            min_length=1,
            description="Array of order IDs to track (positive integers, minimum 1)",
        ),
    ],
    language: Annotated[
        TrackingLanguage,
        Field(description="Language for tracking responses: ro (default), de, en, fr, hu, bg"),
    ] = "ro",
) -> str:
    """Track several orders by their order IDs."""
    client = client_for_current_request()
    if client is None:
        return MISSING_API_KEY_MESSAGE

    logger.info("Tracking %d orders language=%s", len(order_ids), language)
    try:
        tracking = await client.track_orders_by_ids(order_ids, language)
    except EuroparcelAPIError as e:
        logger.error("Failed to track orders: %s", e)
        return f"Error tracking orders: {e}"

    logger.info("Retrieved tracking info for %d orders", len(tracking))
    return format_tracking(tracking)
