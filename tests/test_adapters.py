"""Tests for backend payload mapping."""

from datetime import date, time
from decimal import Decimal

import pytest

from studio_core.adapters.payloads import (
    bookings_from_payload,
    rate_card_from_payload,
    request_from_payload,
    resource_from_payload,
    rule_from_payload,
)
from studio_core.availability.resolver import is_available
from studio_core.errors import IncompleteRateCardError, InvalidRuleError
from studio_core.schemas.availability_schema import OneOffRule, RecurringRule, ResourceKind
from tests.conftest import utc

MICROPHONE_DOC = {
    "_id": "eq-sm7b",
    "name": "Shure SM7B",
    "category": "microphone",
    "rentalPricePerDay": 1500,
    "rentalPricePerWeek": 9000,
    "availability": [
        {"isRecurring": True, "daysOfWeek": [1, 2, 3, 4, 5], "startTime": "09:00", "endTime": "17:00"},
    ],
}


class TestRules:
    def test_recurring_rule_from_time_strings(self):
        rule = rule_from_payload({"daysOfWeek": [0, 6], "startTime": "10:00", "endTime": "14:30"})
        assert isinstance(rule, RecurringRule)
        assert rule.days_of_week == frozenset({0, 6})
        assert rule.end_time == time(14, 30)

    def test_recurring_rule_from_datetimes_uses_local_wall_time(self):
        rule = rule_from_payload({
            "isRecurring": True,
            "daysOfWeek": [1],
            "start": "2025-03-03T03:30:00Z",
            "end": "2025-03-03T11:30:00Z",
            "timezone": "Asia/Colombo",
        })
        assert rule.start_time == time(9, 0)
        assert rule.end_time == time(17, 0)
        assert rule.timezone == "Asia/Colombo"

    def test_validity_bounds_parsed(self):
        rule = rule_from_payload({
            "daysOfWeek": [1], "startTime": "09:00", "endTime": "17:00",
            "validFrom": "2025-03-01", "validUntil": "2025-03-31",
        })
        assert rule.valid_from == date(2025, 3, 1)
        assert rule.valid_until == date(2025, 3, 31)

    def test_one_off_rule(self):
        rule = rule_from_payload({
            "isRecurring": False, "start": "2025-03-03T09:00:00Z", "end": "2025-03-03T17:00:00Z",
        })
        assert isinstance(rule, OneOffRule)
        assert rule.start == utc(2025, 3, 3, 9)

    def test_default_timezone_applied(self):
        rule = rule_from_payload(
            {"daysOfWeek": [1], "startTime": "09:00", "endTime": "17:00"}, "Europe/London"
        )
        assert rule.timezone == "Europe/London"

    def test_invalid_rule_propagates(self):
        with pytest.raises(InvalidRuleError):
            rule_from_payload({"daysOfWeek": [1], "startTime": "17:00", "endTime": "09:00"})


class TestResources:
    def test_equipment_document(self):
        resource = resource_from_payload(MICROPHONE_DOC)
        assert resource.id == "eq-sm7b"
        assert resource.kind == ResourceKind.EQUIPMENT
        assert resource.display_name == "Shure SM7B"
        assert resource.rate_card.price_per_week == Decimal("9000")
        assert resource.rate_card.price_per_month is None
        assert len(resource.availability_rules) == 1

    def test_mapped_resource_resolves(self):
        resource = resource_from_payload(MICROPHONE_DOC)
        assert is_available(resource, utc(2025, 3, 3, 10), utc(2025, 3, 3, 12))
        assert not is_available(resource, utc(2025, 3, 2, 10), utc(2025, 3, 2, 12))

    def test_studio_document_without_prices(self):
        resource = resource_from_payload({"id": "studio-9", "name": "Room A", "availability": []})
        assert resource.kind == ResourceKind.STUDIO
        assert resource.rate_card is None

    def test_explicit_kind_wins(self):
        resource = resource_from_payload({"_id": "svc-1", "pricePerDay": 100}, kind="service")
        assert resource.kind == ResourceKind.SERVICE

    def test_unavailable_equipment_has_no_rules(self):
        resource = resource_from_payload({**MICROPHONE_DOC, "isAvailable": False})
        assert resource.availability_rules == ()

    def test_resource_timezone_applies_to_rules(self):
        resource = resource_from_payload({**MICROPHONE_DOC, "timezone": "Asia/Colombo"})
        assert resource.availability_rules[0].timezone == "Asia/Colombo"

    def test_missing_id_rejected(self):
        with pytest.raises(KeyError):
            resource_from_payload({"name": "nameless"})

    def test_weekly_price_without_daily_rejected(self):
        with pytest.raises(IncompleteRateCardError):
            rate_card_from_payload({"rentalPricePerWeek": 600})


class TestBookings:
    def test_studio_and_equipment_holds(self):
        holds = bookings_from_payload({
            "_id": "bk-1",
            "studio": {"_id": "studio-1", "name": "Room A"},
            "start": "2025-03-03T10:00:00Z",
            "end": "2025-03-03T12:00:00Z",
            "status": "payment_pending",
            "equipment": [
                {"equipmentId": "eq-1", "status": "rented"},
                {"equipmentId": {"_id": "eq-2"}, "status": "returned"},
            ],
        })
        assert [h.resource_id for h in holds] == ["studio-1", "eq-1"]
        assert all(h.id == "bk-1" for h in holds)
        assert holds[0].status == "payment_pending"

    def test_equipment_only_booking(self):
        holds = bookings_from_payload({
            "_id": "bk-2",
            "start": "2025-03-03T10:00:00Z",
            "end": "2025-03-05T10:00:00Z",
            "equipment": [{"equipmentId": "eq-1"}],
        })
        assert len(holds) == 1
        assert holds[0].status == "confirmed"


class TestRequests:
    def test_wizard_selection(self):
        request = request_from_payload({
            "startDate": "2025-03-03T00:00:00Z",
            "endDate": "2025-03-13T00:00:00Z",
            "requiredCategories": ["microphone"],
            "equipment": [{"_id": "eq-1", "quantity": 2}, {"id": "eq-2"}],
        })
        assert request.duration_days == 10
        assert request.requested_resources == ("eq-1", "eq-2")
        assert request.quantity_for_resource("eq-1") == 2
        assert request.quantity_for_resource("eq-2") == 1
        assert request.required_categories == ("microphone",)

    def test_category_quantities(self):
        request = request_from_payload({
            "start": "2025-03-03T10:00:00Z",
            "end": "2025-03-03T12:00:00Z",
            "categoryQuantities": {"microphone": 3},
        })
        assert request.quantity_for_category("microphone") == 3
