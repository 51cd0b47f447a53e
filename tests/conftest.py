"""Shared fixtures: a small fleet with a few fuel entries and work orders."""

from datetime import date, datetime
from pathlib import Path

import pytest
from dateutil import tz

from fleet import (
    Driver,
    EntityStore,
    EntryStatus,
    Flag,
    Fleet,
    FuelEntry,
    MaintenanceTicket,
    Priority,
    Settings,
    Station,
    TicketStatus,
    Vehicle,
    VehicleStatus,
    WorkType,
)

UTC = tz.UTC

SAMPLE_DATA = Path(__file__).parent.parent / "data" / "fleet.yaml"


def make_entry(
    id,
    ts,
    vehicle_id="V001",
    fleet="North Fleet",
    station="ENOC",
    fuel_l=40.0,
    odo_km=1200,
    odo_delta_km=200,
    flags=(),
    status=EntryStatus.SUBMITTED,
    total_cost=None,
):
    return FuelEntry(
        id=id,
        ts=ts,
        fleet=fleet,
        vehicle_id=vehicle_id,
        driver_id="D001",
        station=station,
        fuel_l=fuel_l,
        odo_km=odo_km,
        odo_delta_km=odo_delta_km,
        flags=flags,
        status=status,
        total_cost=total_cost,
    )


@pytest.fixture
def sample_data_path():
    return SAMPLE_DATA


@pytest.fixture
def settings():
    return Settings(reporting_timezone="UTC")


@pytest.fixture
def store(settings):
    """Two fleets, two stations, three vehicles, three entries, three tickets."""
    vehicles = [
        Vehicle("V001", "A12345", "Van", "North Fleet", VehicleStatus.ACTIVE, 1000, 80, "D001"),
        Vehicle("V002", "B67890", "Truck", "South Fleet", VehicleStatus.MAINTENANCE, 5000, 40, "D002"),
        Vehicle("V003", "C24680", "Crane", "North Fleet", VehicleStatus.DOWN, 9000, 10),
    ]
    drivers = [
        Driver("D001", "John Doe", "555-0101", "B64S-987P-342L"),
        Driver("D002", "Jane Smith", "555-0102", "C75T-898Q-453M"),
    ]
    entries = [
        make_entry(
            "FE1",
            datetime(2025, 10, 24, 8, 0, tzinfo=UTC),
            odo_km=1000,
            status=EntryStatus.APPROVED,
            total_cost=9.6,
        ),
        make_entry(
            "FE2",
            datetime(2025, 10, 25, 9, 30, tzinfo=UTC),
            vehicle_id="V002",
            fleet="South Fleet",
            station="Shell",
            fuel_l=65.0,
            odo_km=5000,
            odo_delta_km=420,
            flags=(Flag.ODO_DELTA_HIGH, Flag.FUEL_OVER_MAX),
            total_cost=15.6,
        ),
        make_entry(
            "FE3",
            datetime(2025, 10, 26, 16, 0, tzinfo=UTC),
            odo_km=1000,
            odo_delta_km=0,
            status=EntryStatus.REJECTED,
        ),
    ]
    tickets = [
        MaintenanceTicket("M001", "V002", WorkType.REPAIR, Priority.HIGH, date(2025, 10, 28),
                          TicketStatus.IN_PROGRESS, "City Garage", 1200),
        MaintenanceTicket("M002", "V001", WorkType.SERVICE, Priority.MEDIUM, date(2025, 11, 2),
                          TicketStatus.SCHEDULED, "Fleet Maintenance Inc.", 350),
        MaintenanceTicket("M003", "V003", WorkType.INSPECTION, Priority.LOW, date(2025, 10, 20),
                          TicketStatus.COMPLETED, "Quick Check", 150),
    ]
    return EntityStore(
        fleets=[Fleet("F001", "North Fleet"), Fleet("F002", "South Fleet")],
        stations=[Station("S001", "ENOC"), Station("S002", "Shell")],
        vehicles=vehicles,
        drivers=drivers,
        tickets=tickets,
        fuel_entries=entries,
        settings=settings,
    )
