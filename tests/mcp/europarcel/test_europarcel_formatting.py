"""Tests for plain-text rendering of Europarcel resources."""

from src.mcp.europarcel.formatting import (
    format_billing_address,
    format_counties,
    format_countries,
    format_shipping_addresses,
    format_timestamp,
    format_tracking,
)
from src.mcp.europarcel.models import (
    BillingAddress,
    Country,
    County,
    ShippingAddress,
    TrackingInfo,
)
from tests.helpers.upstream import SAMPLE_SHIPPING_ADDRESS, SAMPLE_TRACKING


class TestTimestamps:
    def test_iso_with_zulu(self):
        assert format_timestamp("2026-03-02T10:15:00Z") == "2026-03-02 10:15:00"

    def test_iso_with_offset(self):
        assert format_timestamp("2026-03-02T10:15:00+02:00") == "2026-03-02 10:15:00"

    def test_unparseable_value_is_kept(self):
        assert format_timestamp("yesterday") == "yesterday"


class TestLocations:
    def test_countries_missing_fields_show_na(self):
        text = format_countries([Country(country_code="RO", name="Romania")])
        assert "Romania (RO)\n  Currency: N/A\n  Language: N/A" in text

    def test_counties_header(self):
        text = format_counties([County(id=1, county_code="AB", county_name="Alba")], "RO")
        assert text == "Found 1 counties in RO:\n\nAlba (AB) - ID: 1"


class TestAddresses:
    def test_individual_billing_address_has_no_company_block(self):
        address = BillingAddress(
            id=9,
            address_type="individual",
            contact="Maria",
            locality_name="Iasi",
            county_name="Iasi",
            country_code="RO",
            street_name="Strada Lapusneanu",
            street_no="14",
            street_details="Bl. 2",
        )

        text = format_billing_address(address)

        assert text.splitlines()[0] == "Billing Address #9:"
        assert "- Street: Strada Lapusneanu 14, Bl. 2" in text
        assert "- Location: Iasi, Iasi (RO)" in text
        assert "Company" not in text
        assert text.endswith("- Default: No")

    def test_vat_payer_text_value_is_kept(self):
        address = BillingAddress(id=1, address_type="business", vat_payer="partial")
        assert "- VAT Payer: partial" in format_billing_address(address)

    def test_shipping_addresses_are_separated(self):
        addresses = [
            ShippingAddress(**SAMPLE_SHIPPING_ADDRESS),
            ShippingAddress(**{**SAMPLE_SHIPPING_ADDRESS, "id": 12, "is_default": False}),
        ]

        text = format_shipping_addresses(addresses, total=2)

        assert text.startswith("Found 2 shipping addresses:\n\nShipping Address #11:")
        assert "- Default: Yes\n\nShipping Address #12:" in text

    def test_empty_shipping_addresses(self):
        assert format_shipping_addresses([], total=0) == (
            "Found 0 shipping addresses:\n\nNo shipping addresses found."
        )


class TestTracking:
    def test_latest_event_is_first_history_entry(self):
        text = format_tracking([TrackingInfo(**SAMPLE_TRACKING)])

        assert "Latest Event: 2026-03-02 10:15:00 - Delivered" in text
        assert "In transit" not in text
        assert "Track URL: https://track.example/AWB123" in text

    def test_minimal_tracking_entry(self):
        text = format_tracking([TrackingInfo(order_id=5)])

        assert "Order #5 - AWB: N/A" in text
        assert "Final Status: No" in text
        assert "Latest Event" not in text
        assert "Track URL" not in text

    def test_output_is_deterministic(self):
        tracking = [TrackingInfo(**SAMPLE_TRACKING), TrackingInfo(order_id=2)]
        assert format_tracking(tracking) == format_tracking(tracking)
