#!/usr/bin/env python3
"""Tests for YAML loading and saving utilities."""

import shutil
from datetime import date, datetime

import pytest
import yaml

from conftest import UTC
from fleet import (
    EntityStore,
    EntryStatus,
    Flag,
    Priority,
    TicketStatus,
    UnknownEntity,
    VehicleStatus,
    WorkType,
    load_store,
    save_fuel_entry,
    save_ticket,
    save_vehicle,
    update_entry_status,
)
from fleet.loader import dump_store, save_vehicle_odometer, store_from_dict

MINIMAL = """
fleets:
  - id: F001
    name: North Fleet
stations:
  - id: S001
    name: ENOC
vehicles:
  - id: V001
    plate: A12345
    type: Van
    fleet: North Fleet
    status: Active
    odoKm: 1000
"""


@pytest.fixture
def dataset(tmp_path, sample_data_path):
    """Writable copy of the sample dataset."""
    path = tmp_path / "fleet.yaml"
    shutil.copy(sample_data_path, path)
    return path


# =============================================================================
# Loading
# =============================================================================


class TestLoadStore:
    """Tests for load_store."""

    def test_loads_sample_dataset(self, sample_data_path):
        store = load_store(sample_data_path)
        assert isinstance(store, EntityStore)
        assert len(store.fleets) == 2
        assert len(store.vehicles) == 5
        assert len(store.tickets) == 4
        assert len(store.fuel_entries) == 3
        assert store.settings.reporting_timezone == "Asia/Muscat"

    def test_parses_vehicle(self, sample_data_path):
        vehicle = load_store(sample_data_path).get_vehicle_by_id("V090")
        assert vehicle.status == VehicleStatus.MAINTENANCE
        assert vehicle.driver_id == "D003"
        assert vehicle.odo_km == 45890

    def test_parses_entry(self, sample_data_path):
        entry = load_store(sample_data_path).get_entry_by_id("FE17610000000001")
        assert entry.flags == (Flag.ODO_DELTA_HIGH,)
        assert entry.status == EntryStatus.SUBMITTED
        assert entry.ts == datetime(2025, 10, 25, 5, 40, tzinfo=UTC)
        assert entry.ts.utcoffset().total_seconds() == 4 * 3600

    def test_parses_ticket(self, sample_data_path):
        ticket = load_store(sample_data_path).get_ticket_by_id("M001")
        assert ticket.status == TicketStatus.IN_PROGRESS
        assert ticket.due_date == date(2025, 10, 28)
        assert ticket.est_cost == 1200

    def test_minimal_file(self, tmp_path):
        path = tmp_path / "minimal.yaml"
        path.write_text(MINIMAL)
        store = load_store(path)
        assert store.tickets == []
        assert store.fuel_entries == []
        assert store.drivers == []
        assert store.settings.alert_limit == 6

    def test_naive_timestamp_is_utc(self):
        data = yaml.safe_load(MINIMAL)
        data["fuelEntries"] = [
            {
                "id": "FE1",
                "ts": "2025-10-26T08:00:00",
                "fleet": "North Fleet",
                "vehicleId": "V001",
                "driverId": "D001",
                "station": "ENOC",
                "fuelL": 40,
                "odoKm": 1000,
                "odoDeltaKm": 0,
            }
        ]
        entry = store_from_dict(data).fuel_entries[0]
        assert entry.ts == datetime(2025, 10, 26, 8, 0, tzinfo=UTC)
        assert entry.flags == ()
        assert entry.ocr_confidence == 100

    def test_bad_status_raises(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(MINIMAL.replace("status: Active", "status: Parked"))
        with pytest.raises(ValueError):
            load_store(path)


# =============================================================================
# Saving
# =============================================================================


class TestSaveFuelEntry:
    """Tests for save_fuel_entry."""

    def test_appends_and_bumps_odometer(self, dataset):
        store = load_store(dataset)
        entry = store.submit_fuel_entry(
            "V010", 30, 15400, 97, "ENOC", datetime(2025, 10, 27, 7, 0, tzinfo=UTC),
            price_per_l=0.24,
        )
        save_fuel_entry(dataset, entry)

        reloaded = load_store(dataset)
        saved = reloaded.get_entry_by_id(entry.id)
        assert saved.odo_delta_km == 166
        assert saved.total_cost == pytest.approx(7.2)
        assert reloaded.get_vehicle_by_id("V010").odo_km == 15400

    def test_unknown_vehicle_raises(self, dataset):
        store = load_store(dataset)
        entry = store.get_entry_by_id("FE17610000000000")
        entry.vehicle_id = "V999"
        with pytest.raises(UnknownEntity):
            save_fuel_entry(dataset, entry)


class TestUpdateEntryStatus:
    """Tests for update_entry_status."""

    def test_updates_status(self, dataset):
        update_entry_status(dataset, "FE17610000000002", EntryStatus.APPROVED)
        entry = load_store(dataset).get_entry_by_id("FE17610000000002")
        assert entry.status == EntryStatus.APPROVED

    def test_unknown_entry(self, dataset):
        with pytest.raises(UnknownEntity):
            update_entry_status(dataset, "FE0", EntryStatus.APPROVED)


class TestSaveTicket:
    """Tests for save_ticket."""

    def test_replaces_existing(self, dataset):
        store = load_store(dataset)
        ticket = store.advance_ticket("M002", TicketStatus.IN_PROGRESS)
        save_ticket(dataset, ticket)
        reloaded = load_store(dataset)
        assert reloaded.get_ticket_by_id("M002").status == TicketStatus.IN_PROGRESS
        assert len(reloaded.tickets) == 4

    def test_appends_new(self, dataset):
        store = load_store(dataset)
        ticket = store.create_ticket("V010", WorkType.SERVICE, Priority.LOW, date(2025, 11, 20))
        save_ticket(dataset, ticket)
        reloaded = load_store(dataset)
        assert reloaded.get_ticket_by_id("M005").due_date == date(2025, 11, 20)


class TestSaveVehicle:
    """Tests for save_vehicle."""

    def test_appends_new(self, dataset):
        store = load_store(dataset)
        vehicle = store.add_vehicle("E55555", "Van", "North Fleet", odo_km=1200, driver_id="D002")
        save_vehicle(dataset, vehicle)
        reloaded = load_store(dataset).get_vehicle_by_id(vehicle.id)
        assert reloaded.plate == "E55555"
        assert reloaded.driver_id == "D002"
        assert reloaded.status == VehicleStatus.ACTIVE

    def test_replaces_existing(self, dataset):
        store = load_store(dataset)
        vehicle = store.get_vehicle_by_id("V001")
        vehicle.status = VehicleStatus.DOWN
        save_vehicle(dataset, vehicle)
        reloaded = load_store(dataset)
        assert reloaded.get_vehicle_by_id("V001").status == VehicleStatus.DOWN
        assert len(reloaded.vehicles) == len(store.vehicles)


class TestDumpStore:
    """Tests for dump_store / save_vehicle_odometer."""

    def test_round_trip(self, tmp_path, sample_data_path):
        store = load_store(sample_data_path)
        path = tmp_path / "dump.yaml"
        dump_store(path, store)
        again = load_store(path)
        assert [e.id for e in again.fuel_entries] == [e.id for e in store.fuel_entries]
        assert [e.ts for e in again.fuel_entries] == [e.ts for e in store.fuel_entries]
        assert again.settings == store.settings

    def test_uses_camel_case_keys(self, tmp_path, store):
        path = tmp_path / "dump.yaml"
        dump_store(path, store)
        data = yaml.safe_load(path.read_text())
        assert "fuelEntries" in data
        assert "odoDeltaKm" in data["fuelEntries"][0]
        assert data["settings"]["reportingTimezone"] == "UTC"

    def test_save_vehicle_odometer(self, dataset):
        save_vehicle_odometer(dataset, "V001", 26000)
        assert load_store(dataset).get_vehicle_by_id("V001").odo_km == 26000
