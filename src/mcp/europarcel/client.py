"""Europarcel REST API client.

Every tool goes through ``EuroparcelClient._make_request``: it attaches the
caller's API key, drops unset filter parameters, and converts any failure
(HTTP error status, timeout, connection error, undecodable body) into a
single ``EuroparcelAPIError``. Response bodies are validated into the typed
models of ``src.mcp.europarcel.models``.

Example:
    client = EuroparcelClient(api_key)
    page = await client.get_shipping_addresses(fetch_all=True)
    for address in page.items:
        ...
"""

import logging
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from src.errors import AppError
from src.mcp.europarcel.models import (
    BillingAddress,
    Carrier,
    Country,
    County,
    Page,
    PageMeta,
    Service,
    ShippingAddress,
    TrackingInfo,
)
from src.utils.redaction import redact_for_logging, sanitize_error_message

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_BASE_URL = "https://api.europarcel.com/api/public"
DEFAULT_TIMEOUT = 30.0
DEFAULT_PER_PAGE = 50
# Upper bound on pages followed by fetch_all
MAX_PAGES = 100


@dataclass
class EuroparcelAPIError(Exception):
    """Normalized failure of an upstream call.

    Attributes:
        message: Human-readable error message.
        code: Error code from src.errors.registry (E-3xxx).
        status_code: Upstream HTTP status, when a response was received.
        upstream_message: Message reported by the API body, when present.
        details: Extra context (validation errors, endpoint).
    """

    message: str
    code: str = "E-3001"
    status_code: int | None = None
    upstream_message: str | None = None
    details: dict | None = None

    def __str__(self) -> str:
        """Return the human-readable message."""
        return self.message


def _api_error(
    code: str,
    endpoint: str,
    status_code: int | None = None,
    upstream_message: str | None = None,
    details: dict | None = None,
    **context: object,
) -> EuroparcelAPIError:
    """Build an EuroparcelAPIError whose message comes from the registry template."""
    message = AppError.from_code(code, status_code=status_code, **context).message
    return EuroparcelAPIError(
        message=message,
        code=code,
        status_code=status_code,
        upstream_message=upstream_message,
        details={"endpoint": endpoint, **(details or {})},
    )


def clean_params(params: dict[str, Any] | None) -> dict[str, Any]:
    """Drop unset values so optional filters are omitted from the request.

    None, empty strings and empty lists are removed; everything else,
    including 0 and False, is kept.
    """
    if not params:
        return {}
    return {
        key: value
        for key, value in params.items()
        if value is not None and value != "" and value != []
    }


def _unwrap_data(body: Any) -> Any:
    """Return ``body["data"]`` for ``{"data": ...}`` envelopes, else body."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _upstream_message(response: httpx.Response) -> str | None:
    """Extract the error message reported in an upstream error body."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return sanitize_error_message(text) if text else None
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return sanitize_error_message(value)
    return None


class EuroparcelClient:
    """Authenticated async client for the Europarcel public API.

    A client is built per tool invocation for exactly one caller; it holds
    no state besides that caller's key and connection settings.

    Args:
        api_key: Caller's Europarcel API key. Required.
        base_url: API root. Defaults to the public production endpoint.
        timeout: Request timeout in seconds. Defaults to 30.
        transport: Optional httpx transport (used by tests).

    Raises:
        ValueError: If api_key is empty.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("EuroparcelClient requires an API key")
        self._api_key = api_key
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._timeout = DEFAULT_TIMEOUT if timeout is None else timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Make an authenticated request to the Europarcel API.

        Args:
            method: HTTP method (GET, POST).
            endpoint: Path relative to the API root (e.g. 'carriers').
            params: Query parameters; unset values are dropped.
            json: JSON body; unset values are dropped.

        Returns:
            Parsed JSON response.

        Raises:
            EuroparcelAPIError: On any HTTP, transport or decoding failure.
        """
        url = f"{self._base_url}/{endpoint.lstrip('/')}"
        query = clean_params(params)
        body = clean_params(json) if json is not None else None
        headers = self._get_headers()

        logger.debug(
            "Europarcel request %s %s params=%s headers=%s",
            method, endpoint, query, redact_for_logging(headers),
        )

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    params=query or None,
                    json=body,
                    headers=headers,
                )
        except httpx.TimeoutException as e:
            raise _api_error("E-3002", endpoint, timeout=f"{self._timeout:g}") from e
        except httpx.HTTPError as e:
            raise _api_error("E-3003", endpoint, reason=e.__class__.__name__) from e

        if response.is_error:
            upstream = _upstream_message(response)
            reason = upstream or response.reason_phrase or "request failed"
            raise _api_error(
                "E-3001",
                endpoint,
                status_code=response.status_code,
                upstream_message=upstream,
                reason=reason,
            )

        try:
            return response.json()
        except ValueError as e:
            raise _api_error(
                "E-3004",
                endpoint,
                status_code=response.status_code,
                reason="body is not valid JSON",
            ) from e

    # ------------------------------------------------------------------
    # Response shaping
    # ------------------------------------------------------------------

    def _parse(self, adapter: TypeAdapter, data: Any, endpoint: str) -> Any:
        try:
            return adapter.validate_python(data)
        except ValidationError as e:
            raise _api_error(
                "E-3004",
                endpoint,
                details={"errors": e.errors(include_url=False)},
                reason=f"'{endpoint}' did not match the expected shape",
            ) from e

    async def _get_resource(
        self,
        endpoint: str,
        model: type[ModelT],
        params: dict[str, Any] | None = None,
    ) -> ModelT:
        """Fetch a singular resource."""
        data = _unwrap_data(await self._make_request("GET", endpoint, params=params))
        return self._parse(TypeAdapter(model), data, endpoint)

    async def _get_list(
        self,
        endpoint: str,
        model: type[ModelT],
        params: dict[str, Any] | None = None,
    ) -> list[ModelT]:
        """Fetch an unpaginated collection (bare list or ``{"data": [...]}``)."""
        data = _unwrap_data(await self._make_request("GET", endpoint, params=params))
        if isinstance(data, dict) and "list" in data:
            data = data["list"]
        return self._parse(TypeAdapter(list[model]), data, endpoint)

    async def _get_page(
        self,
        endpoint: str,
        model: type[ModelT],
        params: dict[str, Any],
    ) -> Page[ModelT]:
        body = _unwrap_data(await self._make_request("GET", endpoint, params=params))
        if isinstance(body, list):
            # Unpaginated answer to a paginated endpoint
            body = {"list": body, "meta": {"total": len(body), "page": 1, "per_page": len(body)}}
        return self._parse(TypeAdapter(Page[model]), body, endpoint)

    async def _get_paginated(
        self,
        endpoint: str,
        model: type[ModelT],
        params: dict[str, Any] | None = None,
        *,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
        fetch_all: bool = False,
    ) -> Page[ModelT]:
        """Fetch one page, or every page when ``fetch_all`` is set.

        With ``fetch_all`` pages are requested sequentially from ``page``
        until a short or empty page, the reported total, or the reported
        last page is reached. The merged result reports page 1 with all
        items.
        """
        base_params = dict(params or {})
        current = await self._get_page(
            endpoint, model, {**base_params, "page": page, "per_page": per_page}
        )
        if not fetch_all:
            return current

        items = list(current.items)
        pages_fetched = 1
        while self._has_more(current, len(items), per_page):
            if pages_fetched >= MAX_PAGES:
                logger.warning(
                    "Stopped following pagination of %s after %d pages", endpoint, MAX_PAGES
                )
                break
            page += 1
            current = await self._get_page(
                endpoint, model, {**base_params, "page": page, "per_page": per_page}
            )
            pages_fetched += 1
            if not current.items:
                break
            items.extend(current.items)

        logger.debug("Fetched %d items from %s in %d pages", len(items), endpoint, pages_fetched)
        total = current.meta.total if current.meta.total is not None else len(items)
        return Page[model](
            items=items,
            meta=PageMeta(total=max(total, len(items)), page=1, per_page=len(items), last_page=1),
        )

    @staticmethod
    def _has_more(current: Page, collected: int, requested_per_page: int) -> bool:
        meta = current.meta
        page_size = meta.per_page or requested_per_page
        if len(current.items) < page_size:
            return False
        if meta.total is not None and collected >= meta.total:
            return False
        if meta.last_page is not None and meta.page >= meta.last_page:
            return False
        return True

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------

    async def get_countries(self) -> list[Country]:
        return await self._get_list("locations/countries", Country)

    async def get_counties(self, country_code: str) -> list[County]:
        return await self._get_list(f"locations/counties/{country_code}", County)

    async def get_carriers(self) -> list[Carrier]:
        return await self._get_list("carriers", Carrier)

    async def get_services(
        self,
        service_id: int | None = None,
        carrier_id: int | None = None,
        country_code: str | None = None,
    ) -> list[Service]:
        """List delivery services, optionally filtered."""
        return await self._get_list(
            "services",
            Service,
            params={
                "service_id": service_id,
                "carrier_id": carrier_id,
                "country_code": country_code,
            },
        )

    # ------------------------------------------------------------------
    # Addresses
    # ------------------------------------------------------------------

    async def get_billing_addresses(
        self,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
        fetch_all: bool = False,
    ) -> Page[BillingAddress]:
        return await self._get_paginated(
            "addresses/billing", BillingAddress,
            page=page, per_page=per_page, fetch_all=fetch_all,
        )

    async def get_shipping_addresses(
        self,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
        fetch_all: bool = False,
    ) -> Page[ShippingAddress]:
        return await self._get_paginated(
            "addresses/shipping", ShippingAddress,
            page=page, per_page=per_page, fetch_all=fetch_all,
        )

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    async def track_orders_by_ids(
        self,
        order_ids: list[int],
        language: str | None = None,
    ) -> list[TrackingInfo]:
        """Fetch tracking information for several orders in one call."""
        endpoint = "orders/track-by-ids"
        body = await self._make_request(
            "POST",
            endpoint,
            json={"order_ids": list(order_ids), "language": language},
        )
        data = _unwrap_data(body)
        if isinstance(data, dict) and "list" in data:
            data = data["list"]
        return self._parse(TypeAdapter(list[TrackingInfo]), data, endpoint)
