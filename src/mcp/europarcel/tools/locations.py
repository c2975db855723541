"""Location tools: countries, counties, carriers and delivery services."""

import logging
from typing import Annotated, Literal

from pydantic import Field

from src.mcp.europarcel.client import EuroparcelAPIError
from src.mcp.europarcel.formatting import (
    format_carriers,
    format_counties,
    format_countries,
    format_services,
)
from src.mcp.europarcel.tools.common import (
    MISSING_API_KEY_MESSAGE,
    client_for_current_request,
)

logger = logging.getLogger(__name__)

CountryCode = Literal["RO"]
ServiceId = Literal[1, 2, 3, 4]
CarrierId = Literal[1, 2, 3, 4, 6, 16]


async def get_countries() -> str:
    """Retrieve all available countries with currency and language."""
    client = client_for_current_request()
    if client is None:
        return MISSING_API_KEY_MESSAGE

    logger.info("Fetching countries")
    try:
        countries = await client.get_countries()
    except EuroparcelAPIError as e:
        logger.error("Failed to fetch countries: %s", e)
        return f"Error fetching countries: {e}"

    logger.info("Retrieved %d countries", len(countries))
    return format_countries(countries)


async def get_counties(
    country_code: Annotated[
        CountryCode, Field(description="The country code - must be 'RO' (Romania)")
    ],
) -> str:
    """Retrieve counties for a specific country."""
    client = client_for_current_request()
    if client is None:
        return MISSING_API_KEY_MESSAGE

    logger.info("Fetching counties for %s", country_code)
    try:
        counties = await client.get_counties(country_code)
    except EuroparcelAPIError as e:
        logger.error("Failed to fetch counties: %s", e)
        return f"Error fetching counties: {e}"

    logger.info("Retrieved %d counties", len(counties))
    return format_counties(counties, country_code)


async def get_carriers() -> str:
    """Retrieve all available carriers with their status."""
    client = client_for_current_request()
    if client is None:
        return MISSING_API_KEY_MESSAGE

    logger.info("Fetching carriers")
    try:
        carriers = await client.get_carriers()
    except EuroparcelAPIError as e:
        logger.error("Failed to fetch carriers: %s", e)
        return f"Error fetching carriers: {e}"

    logger.info("Retrieved %d carriers", len(carriers))
    return format_carriers(carriers)


async def get_services(
    service_id: Annotated[
        ServiceId | None,
        Field(
            description=(
                "Optional service ID: 1=From home to home, 2=From home to locker, "
                "3=From locker to home, 4=From locker to locker"
            )
        ),
    ] = None,
    carrier_id: Annotated[
        CarrierId | None,
        Field(
            description=(
                "Optional carrier ID: 1=Cargus, 2=DPD, 3=FAN Courier, 4=GLS, "
                "6=Sameday, 16=Bookurier"
            )
        ),
    ] = None,
    country_code: Annotated[
        CountryCode | None,
        Field(description="Optional country code - must be 'RO' (Romania)"),
    ] = None,
) -> str:
    """Retrieve delivery services, optionally filtered by service, carrier or country."""
    client = client_for_current_request()
    if client is None:
        return MISSING_API_KEY_MESSAGE

    filters = {"service_id": service_id, "carrier_id": carrier_id, "country_code": country_code}
    logger.info("Fetching services filters=%s", filters)
    try:
        services = await client.get_services(**filters)
    except EuroparcelAPIError as e:
        logger.error("Failed to fetch services: %s", e)
        return f"Error fetching services: {e}"

    logger.info("Retrieved %d services", len(services))
    filtered = any(value is not None for value in filters.values())
    return format_services(services, filtered=filtered)
