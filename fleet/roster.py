"""Vehicle and driver list rows: who drives what, last fill, next service."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from .fuel_entry import Flag, ordered_flags
from .store import EntityStore
from .ticket import MaintenanceTicket
from .vehicle import Driver, Vehicle


@dataclass(frozen=True)
class VehicleSummary:
    """One row of the vehicles list."""

    vehicle: Vehicle
    driver: Optional[Driver]
    last_fuel: Optional[datetime]
    next_service: Optional[MaintenanceTicket]


@dataclass(frozen=True)
class DriverSummary:
    """
    One row of the drivers list.

    flag_count counts every flag on every submission by the driver;
    flags lists the distinct ones in display order.
    """

    driver: Driver
    vehicle: Optional[Vehicle]
    last_submission: Optional[datetime]
    flag_count: int
    flags: Tuple[Flag, ...]


def vehicle_summary(store: EntityStore, vehicle: Vehicle) -> VehicleSummary:
    last = store.last_fuel_entry(vehicle.id)
    driver = store.find_driver(vehicle.driver_id) if vehicle.driver_id else None
    return VehicleSummary(
        vehicle=vehicle,
        driver=driver,
        last_fuel=last.ts if last else None,
        next_service=store.next_service(vehicle.id),
    )


def vehicle_summaries(store: EntityStore, fleet: str = "all") -> List[VehicleSummary]:
    return [vehicle_summary(store, v) for v in store.vehicles_in_fleet(fleet)]


def driver_summary(store: EntityStore, driver: Driver) -> DriverSummary:
    entries = store.entries_for_driver(driver.id)
    flags = [f for e in entries for f in e.flags]
    return DriverSummary(
        driver=driver,
        vehicle=store.assigned_vehicle(driver.id),
        last_submission=entries[0].ts if entries else None,
        flag_count=len(flags),
        flags=ordered_flags(flags),
    )


def driver_summaries(store: EntityStore) -> List[DriverSummary]:
    return [driver_summary(store, d) for d in store.drivers]
