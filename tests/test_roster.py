#!/usr/bin/env python3
"""Tests for vehicle and driver list rows."""

from datetime import datetime

from conftest import UTC
from fleet import Flag, driver_summaries, vehicle_summaries
from fleet.roster import driver_summary


class TestVehicleSummaries:
    """Tests for vehicle_summaries."""

    def test_rows(self, store):
        rows = {s.vehicle.id: s for s in vehicle_summaries(store)}
        assert rows["V001"].driver.name == "John Doe"
        assert rows["V001"].last_fuel == datetime(2025, 10, 26, 16, 0, tzinfo=UTC)
        assert rows["V001"].next_service.id == "M002"

    def test_unassigned_and_never_fueled(self, store):
        row = vehicle_summaries(store, "North Fleet")[-1]
        assert row.vehicle.id == "V003"
        assert row.driver is None
        assert row.last_fuel is None
        assert row.next_service is None

    def test_fleet_filter(self, store):
        assert [s.vehicle.id for s in vehicle_summaries(store, "South Fleet")] == ["V002"]


class TestDriverSummaries:
    """Tests for driver_summaries."""

    def test_flag_count_and_last_submission(self, store):
        row = driver_summary(store, store.get_driver_by_id("D001"))
        assert row.vehicle.id == "V001"
        assert row.last_submission == datetime(2025, 10, 26, 16, 0, tzinfo=UTC)
        assert row.flag_count == 2
        assert row.flags == (Flag.ODO_DELTA_HIGH, Flag.FUEL_OVER_MAX)

    def test_driver_without_submissions(self, store):
        rows = driver_summaries(store)
        assert [r.driver.id for r in rows] == ["D001", "D002"]
        assert rows[1].last_submission is None
        assert rows[1].flag_count == 0
        assert rows[1].flags == ()
