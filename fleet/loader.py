"""YAML loading and saving utilities for fleet datasets."""

from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dateutil import parser as date_parser
from dateutil import tz

from .config import Settings, settings_from_dict, settings_to_dict
from .errors import UnknownEntity
from .fuel_entry import Flag, FuelEntry
from .reference import Fleet, Station
from .status import (
    DriverStatus,
    EntryStatus,
    Priority,
    TicketStatus,
    VehicleStatus,
    WorkType,
)
from .store import EntityStore
from .ticket import MaintenanceTicket
from .vehicle import Driver, Vehicle


# =============================================================================
# Parsing
# =============================================================================


def _parse_date(value: Union[str, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _parse_ts(value: Union[str, datetime]) -> datetime:
    """Parse an ISO timestamp; naive values are taken as UTC."""
    ts = value if isinstance(value, datetime) else date_parser.isoparse(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=tz.UTC)
    return ts


def _parse_vehicle(dct: Dict[str, Any]) -> Vehicle:
    return Vehicle(
        dct["id"],
        dct["plate"],
        dct["type"],
        dct["fleet"],
        VehicleStatus(dct["status"]),
        dct["odoKm"],
        dct.get("fuelLevelPercent", 0),
        dct.get("driverId"),
    )


def _parse_driver(dct: Dict[str, Any]) -> Driver:
    return Driver(
        dct["id"],
        dct["name"],
        dct.get("contact", ""),
        dct.get("licenseNumber", ""),
        DriverStatus(dct.get("status", DriverStatus.ACTIVE.value)),
        dct.get("avatar"),
    )


def _parse_ticket(dct: Dict[str, Any]) -> MaintenanceTicket:
    return MaintenanceTicket(
        dct["id"],
        dct["vehicleId"],
        WorkType(dct["type"]),
        Priority(dct["priority"]),
        _parse_date(dct["dueDate"]),
        TicketStatus(dct.get("status", TicketStatus.SCHEDULED.value)),
        dct.get("vendor", ""),
        dct.get("estCost", 0),
        dct.get("notes", ""),
        dct.get("actualCost"),
    )


def _parse_entry(dct: Dict[str, Any]) -> FuelEntry:
    return FuelEntry(
        id=dct["id"],
        ts=_parse_ts(dct["ts"]),
        fleet=dct["fleet"],
        vehicle_id=dct["vehicleId"],
        driver_id=dct["driverId"],
        station=dct["station"],
        fuel_l=dct["fuelL"],
        odo_km=dct["odoKm"],
        odo_delta_km=dct["odoDeltaKm"],
        flags=[Flag(f) for f in dct.get("flags") or []],
        status=EntryStatus(dct.get("status", EntryStatus.SUBMITTED.value)),
        ocr_confidence=dct.get("ocrConfidence", 100),
        price_per_l=dct.get("pricePerL"),
        total_cost=dct.get("totalCost"),
    )


def store_from_dict(data: Dict[str, Any]) -> EntityStore:
    """Build an EntityStore from a parsed dataset document."""
    return EntityStore(
        fleets=[Fleet(f["id"], f["name"]) for f in data.get("fleets") or []],
        stations=[Station(s["id"], s["name"]) for s in data.get("stations") or []],
        vehicles=[_parse_vehicle(v) for v in data.get("vehicles") or []],
        drivers=[_parse_driver(d) for d in data.get("drivers") or []],
        tickets=[_parse_ticket(t) for t in data.get("tickets") or []],
        fuel_entries=[_parse_entry(e) for e in data.get("fuelEntries") or []],
        settings=settings_from_dict(data.get("settings")),
    )


def load_store(filename: Union[str, Path]) -> EntityStore:
    """Load a fleet dataset from a YAML file."""
    return store_from_dict(_read(filename))


# =============================================================================
# Serializing
# =============================================================================


def _vehicle_to_dict(vehicle: Vehicle) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": vehicle.id,
        "plate": vehicle.plate,
        "type": vehicle.type,
        "fleet": vehicle.fleet,
        "status": vehicle.status.value,
        "odoKm": vehicle.odo_km,
        "fuelLevelPercent": vehicle.fuel_level_percent,
    }
    if vehicle.driver_id is not None:
        d["driverId"] = vehicle.driver_id
    return d


def _driver_to_dict(driver: Driver) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": driver.id,
        "name": driver.name,
        "contact": driver.contact,
        "licenseNumber": driver.license_number,
        "status": driver.status.value,
    }
    if driver.avatar is not None:
        d["avatar"] = driver.avatar
    return d


def _ticket_to_dict(ticket: MaintenanceTicket) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": ticket.id,
        "vehicleId": ticket.vehicle_id,
        "type": ticket.type.value,
        "priority": ticket.priority.value,
        "dueDate": ticket.due_date.isoformat(),
        "status": ticket.status.value,
        "vendor": ticket.vendor,
        "estCost": ticket.est_cost,
        "notes": ticket.notes,
    }
    if ticket.actual_cost is not None:
        d["actualCost"] = ticket.actual_cost
    return d


def _entry_to_dict(entry: FuelEntry) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": entry.id,
        "ts": entry.ts.isoformat(),
        "fleet": entry.fleet,
        "vehicleId": entry.vehicle_id,
        "driverId": entry.driver_id,
        "station": entry.station,
        "fuelL": entry.fuel_l,
        "odoKm": entry.odo_km,
        "odoDeltaKm": entry.odo_delta_km,
        "flags": [f.value for f in entry.flags],
        "status": entry.status.value,
        "ocrConfidence": entry.ocr_confidence,
    }
    if entry.price_per_l is not None:
        d["pricePerL"] = entry.price_per_l
    if entry.total_cost is not None:
        d["totalCost"] = entry.total_cost
    return d


def store_to_dict(store: EntityStore, settings: Optional[Settings] = None) -> Dict[str, Any]:
    return {
        "settings": settings_to_dict(settings or store.settings),
        "fleets": [{"id": f.id, "name": f.name} for f in store.fleets],
        "stations": [{"id": s.id, "name": s.name} for s in store.stations],
        "drivers": [_driver_to_dict(d) for d in store.drivers],
        "vehicles": [_vehicle_to_dict(v) for v in store.vehicles],
        "tickets": [_ticket_to_dict(t) for t in store.tickets],
        "fuelEntries": [_entry_to_dict(e) for e in store.fuel_entries],
    }


# =============================================================================
# File helpers
# =============================================================================


def _read(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader) or {}


def _write(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _find_index(items, item_id: str, kind: str) -> int:
    for index, item in enumerate(items):
        if item.get("id") == item_id:
            return index
    raise UnknownEntity(kind, item_id)


def dump_store(
    filename: Union[str, Path], store: EntityStore, settings: Optional[Settings] = None
) -> None:
    """Write a whole store to a YAML file, replacing its contents."""
    _write(filename, store_to_dict(store, settings))


def save_fuel_entry(filename: Union[str, Path], entry: FuelEntry) -> None:
    """
    Append a fuel entry to a dataset file.

    Also moves the vehicle's odoKm forward to the entry's reading so the
    odometer in the file never goes backwards, as in the in-memory store.
    """
    data = _read(filename)
    if data.get("fuelEntries") is None:
        data["fuelEntries"] = []
    data["fuelEntries"].append(_entry_to_dict(entry))

    vehicles = data.get("vehicles") or []
    index = _find_index(vehicles, entry.vehicle_id, "vehicle")
    vehicles[index]["odoKm"] = max(vehicles[index]["odoKm"], entry.odo_km)

    _write(filename, data)


def update_entry_status(filename: Union[str, Path], entry_id: str, status: EntryStatus) -> None:
    """Replace the status of one fuel entry in a dataset file."""
    data = _read(filename)
    entries = data.get("fuelEntries") or []
    entries[_find_index(entries, entry_id, "fuel entry")]["status"] = status.value
    _write(filename, data)


def save_ticket(filename: Union[str, Path], ticket: MaintenanceTicket) -> None:
    """Insert or replace (by id) a maintenance ticket in a dataset file."""
    data = _read(filename)
    if data.get("tickets") is None:
        data["tickets"] = []
    tickets = data["tickets"]
    try:
        tickets[_find_index(tickets, ticket.id, "ticket")] = _ticket_to_dict(ticket)
    except UnknownEntity:
        tickets.append(_ticket_to_dict(ticket))
    _write(filename, data)


def save_vehicle(filename: Union[str, Path], vehicle: Vehicle) -> None:
    """Insert or replace (by id) a vehicle in a dataset file."""
    data = _read(filename)
    if data.get("vehicles") is None:
        data["vehicles"] = []
    vehicles = data["vehicles"]
    try:
        vehicles[_find_index(vehicles, vehicle.id, "vehicle")] = _vehicle_to_dict(vehicle)
    except UnknownEntity:
        vehicles.append(_vehicle_to_dict(vehicle))
    _write(filename, data)


def save_vehicle_odometer(filename: Union[str, Path], vehicle_id: str, odo_km: float) -> None:
    """Update a vehicle's odoKm in a dataset file."""
    data = _read(filename)
    vehicles = data.get("vehicles") or []
    vehicles[_find_index(vehicles, vehicle_id, "vehicle")]["odoKm"] = odo_km
    _write(filename, data)
