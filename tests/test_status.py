#!/usr/bin/env python3
"""Tests for status enums and badge variants."""

import pytest

from fleet import EntryStatus, Priority, TicketStatus, VehicleStatus
from fleet import status


class TestEnumValues:
    """Display values are the labels shown in the dashboard."""

    def test_ticket_status_values(self):
        assert [s.value for s in TicketStatus] == [
            "Scheduled",
            "In Progress",
            "Completed",
            "Deferred",
        ]

    def test_vehicle_status_values(self):
        assert VehicleStatus("Maintenance") == VehicleStatus.MAINTENANCE

    def test_priority_declared_most_urgent_first(self):
        assert list(Priority) == [Priority.HIGH, Priority.MEDIUM, Priority.LOW]

    def test_unknown_value_raises(self):
        with pytest.raises(ValueError):
            EntryStatus("Pending")


class TestVariants:
    """Every member maps to a badge variant."""

    def test_every_vehicle_status_mapped(self):
        assert {status.vehicle_variant(s) for s in VehicleStatus} == {
            "success",
            "warning",
            "destructive",
        }

    def test_every_entry_status_mapped(self):
        for s in EntryStatus:
            assert status.entry_variant(s)

    def test_every_ticket_status_mapped(self):
        for s in TicketStatus:
            assert status.ticket_variant(s)

    def test_every_priority_mapped(self):
        assert status.priority_variant(Priority.HIGH) == "destructive"
        assert status.priority_variant(Priority.LOW) == "secondary"

    def test_unmapped_member_raises(self, monkeypatch):
        monkeypatch.delitem(status._VEHICLE_VARIANTS, VehicleStatus.DOWN)
        with pytest.raises(ValueError, match="No badge variant"):
            status.vehicle_variant(VehicleStatus.DOWN)
