"""Typed Europarcel API resources.

Upstream payloads are parsed into these models at the client boundary so
tool formatting works on known fields instead of raw JSON. Unknown fields
are ignored; optional fields default to None.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

ItemT = TypeVar("ItemT")


class PageMeta(BaseModel):
    """Pagination metadata returned alongside collection responses."""

    total: int | None = Field(None, description="Total items across all pages")
    page: int = Field(default=1, description="Current page (1-based)")
    per_page: int | None = Field(None, description="Page size used by the API")
    last_page: int | None = Field(None, description="Last page number, when reported")


class Page(BaseModel, Generic[ItemT]):
    """A paginated collection: ``{"list": [...], "meta": {...}}``."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[ItemT] = Field(alias="list")
    meta: PageMeta = Field(default_factory=PageMeta)


class Country(BaseModel):
    """Country supported by Europarcel."""

    country_code: str
    name: str
    currency: str | None = None
    language: str | None = None


class County(BaseModel):
    """County (administrative region) of a country."""

    id: int
    county_code: str
    county_name: str
    country_code: str | None = None


class Carrier(BaseModel):
    """Courier company available through Europarcel."""

    id: int
    name: str
    is_active: bool = True


class Service(BaseModel):
    """Delivery service offered by a carrier in a country."""

    service_id: int
    service_name: str
    carrier_id: int
    carrier_name: str
    country_code: str | None = None


class Coordinates(BaseModel):
    lat: float
    lng: float


class Address(BaseModel):
    """Fields shared by billing and shipping addresses."""

    id: int
    address_type: str | None = Field(None, description="'individual' or 'business'")
    contact: str | None = None
    phone: str | None = None
    email: str | None = None
    country_code: str | None = None
    county_name: str | None = None
    locality_name: str | None = None
    street_name: str | None = None
    street_no: str | None = None
    street_details: str | None = None
    is_default: bool = False


class BillingAddress(Address):
    """Invoicing address, optionally with company and bank details."""

    company: str | None = None
    vat_no: str | None = None
    reg_com: str | None = None
    vat_payer: bool | str | None = None
    bank_iban: str | None = None
    bank: str | None = None


class ShippingAddress(Address):
    """Pickup location used as the sender address of shipments."""

    zipcode: str | None = None
    coordinates: Coordinates | None = None


class TrackingEvent(BaseModel):
    timestamp: str
    status: str
    status_id: int | None = None


class TrackingInfo(BaseModel):
    """Tracking state of one order."""

    order_id: int
    awb: str | None = None
    carrier: str | None = None
    carrier_id: int | None = None
    current_status: str | None = None
    current_status_id: int | None = None
    current_status_description: str | None = None
    is_current_status_final: bool = False
    track_url: str | None = None
    reference: str | None = None
    history: list[TrackingEvent] = Field(default_factory=list)
