"""Plain-text rendering of Europarcel resources for tool results.

Pure functions from typed models to text; the output depends only on the
input so tool responses are deterministic.
"""

from datetime import datetime

from src.mcp.europarcel.models import (
    Address,
    BillingAddress,
    Carrier,
    Country,
    County,
    Service,
    ShippingAddress,
    TrackingInfo,
)


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def _or_na(value: object) -> str:
    return "N/A" if value is None or value == "" else str(value)


def format_timestamp(value: str) -> str:
    """Render an ISO-8601 timestamp as 'YYYY-MM-DD HH:MM:SS'.

    Unparseable values are returned unchanged.
    """
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def format_countries(countries: list[Country]) -> str:
    lines = [f"Found {len(countries)} countries:", ""]
    for country in countries:
        lines.append(f"{country.name} ({country.country_code})")
        lines.append(f"  Currency: {_or_na(country.currency)}")
        lines.append(f"  Language: {_or_na(country.language)}")
        lines.append("")
    return "\n".join(lines)


def format_counties(counties: list[County], country_code: str) -> str:
    lines = [f"Found {len(counties)} counties in {country_code}:", ""]
    for county in counties:
        lines.append(f"{county.county_name} ({county.county_code}) - ID: {county.id}")
    return "\n".join(lines)


def format_carriers(carriers: list[Carrier]) -> str:
    lines = [f"Found {len(carriers)} carriers:", ""]
    for carrier in carriers:
        lines.append(f"{carrier.name} (ID: {carrier.id})")
        lines.append(f"  Status: {'Active' if carrier.is_active else 'Inactive'}")
        lines.append("")
    return "\n".join(lines)


def format_services(services: list[Service], filtered: bool = False) -> str:
    header = f"Found {len(services)} services"
    if filtered:
        header += " (filtered)"
    lines = [header + ":", ""]
    for service in services:
        lines.append(f"{service.service_name} (ID: {service.service_id})")
        lines.append(f"  Carrier: {service.carrier_name} ({service.carrier_id})")
        lines.append(f"  Country: {_or_na(service.country_code)}")
        lines.append("")
    return "\n".join(lines)


def _format_address_common(address: Address, label: str) -> list[str]:
    street = f"{address.street_name or 'N/A'} {address.street_no or ''}".rstrip()
    if address.street_details:
        street += f", {address.street_details}"
    return [
        f"{label} Address #{address.id}:",
        f"- Type: {_or_na(address.address_type)}",
        f"- Contact: {_or_na(address.contact)}",
        f"- Phone: {_or_na(address.phone)}",
        f"- Email: {_or_na(address.email)}",
        f"- Location: {_or_na(address.locality_name)}, {_or_na(address.county_name)}"
        f" ({_or_na(address.country_code)})",
        f"- Street: {street}",
    ]


def format_billing_address(address: BillingAddress) -> str:
    lines = _format_address_common(address, "Billing")
    if address.address_type == "business":
        vat_payer = address.vat_payer
        if isinstance(vat_payer, bool):
            vat_payer = _yes_no(vat_payer)
        lines += [
            f"- Company: {_or_na(address.company)}",
            f"- VAT No: {_or_na(address.vat_no)}",
            f"- Reg Com: {_or_na(address.reg_com)}",
            f"- VAT Payer: {_or_na(vat_payer)}",
        ]
    if address.bank_iban:
        lines += [
            f"- Bank IBAN: {address.bank_iban}",
            f"- Bank: {_or_na(address.bank)}",
        ]
    lines.append(f"- Default: {_yes_no(address.is_default)}")
    return "\n".join(lines)


def format_shipping_address(address: ShippingAddress) -> str:
    lines = _format_address_common(address, "Shipping")
    if address.zipcode:
        lines.append(f"- Zip Code: {address.zipcode}")
    if address.coordinates:
        lines.append(f"- Coordinates: {address.coordinates.lat}, {address.coordinates.lng}")
    lines.append(f"- Default: {_yes_no(address.is_default)}")
    return "\n".join(lines)


def _plural_addresses(count: int) -> str:
    return "address" if count == 1 else "addresses"


def format_billing_addresses(addresses: list[BillingAddress], total: int) -> str:
    text = f"Found {total} billing {_plural_addresses(total)}:\n\n"
    if not addresses:
        return text + "No billing addresses found."
    return text + "\n\n".join(format_billing_address(a) for a in addresses) + "\n"


def format_shipping_addresses(addresses: list[ShippingAddress], total: int) -> str:
    text = f"Found {total} shipping {_plural_addresses(total)}:\n\n"
    if not addresses:
        return text + "No shipping addresses found."
    return text + "\n\n".join(format_shipping_address(a) for a in addresses) + "\n"


def format_tracking(tracking: list[TrackingInfo]) -> str:
    """Render tracking results. The API lists history newest first."""
    lines = [f"Tracking Results for {len(tracking)} Orders:", ""]
    if not tracking:
        lines.append("No tracking information found for the provided order IDs.")
        return "\n".join(lines)

    for info in tracking:
        lines.append(f"Order #{info.order_id} - AWB: {_or_na(info.awb)}")
        lines.append(f"   Carrier: {_or_na(info.carrier)} (ID: {_or_na(info.carrier_id)})")
        lines.append(
            f"   Status: {_or_na(info.current_status)} (ID: {_or_na(info.current_status_id)})"
        )
        lines.append(f"   Description: {_or_na(info.current_status_description)}")
        lines.append(f"   Final Status: {_yes_no(info.is_current_status_final)}")
        if info.track_url:
            lines.append(f"   Track URL: {info.track_url}")
        if info.reference:
            lines.append(f"   Reference: {info.reference}")
        if info.history:
            latest = info.history[0]
            lines.append(
                f"   Latest Event: {format_timestamp(latest.timestamp)} - {latest.status}"
            )
        lines.append("")
    return "\n".join(lines)
