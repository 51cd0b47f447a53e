"""EntityStore - the in-memory aggregate holding every fleet collection."""

import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from dateutil import tz

from .config import Settings
from .errors import InvalidOdometerReading, InvalidStatusTransition, UnknownEntity
from .flagging import compute_flags
from .fuel_entry import FuelEntry
from .reference import Fleet, Station
from .status import EntryStatus, Priority, TicketStatus, VehicleStatus, WorkType
from .ticket import MaintenanceTicket
from .vehicle import Driver, Vehicle

logger = logging.getLogger(__name__)

QUEUE_TABS = ("all", "submitted", "flagged", "approved", "rejected")

EDITABLE_TICKET_FIELDS = (
    "type",
    "priority",
    "due_date",
    "vendor",
    "est_cost",
    "actual_cost",
    "notes",
)


class EntityStore:
    """
    Vehicles, drivers, fleets, stations, tickets and fuel entries.

    Entities reference each other by id; the store owns all of them.
    """

    def __init__(
        self,
        fleets: List[Fleet],
        stations: List[Station],
        vehicles: List[Vehicle],
        drivers: List[Driver],
        tickets: Optional[List[MaintenanceTicket]] = None,
        fuel_entries: Optional[List[FuelEntry]] = None,
        settings: Optional[Settings] = None,
    ):
        self.fleets = fleets
        self.stations = stations
        self.vehicles = vehicles
        self.drivers = drivers
        self.tickets = tickets or []
        self.fuel_entries = fuel_entries or []
        self.settings = settings or Settings()

    # -- lookups -------------------------------------------------------------

    def find_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        """
        Find a vehicle by id.

        Falls back to treating the id as a driver id and returning the
        vehicle assigned to that driver.
        """
        for vehicle in self.vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        driver = self.find_driver(vehicle_id)
        if driver:
            for vehicle in self.vehicles:
                if vehicle.driver_id == driver.id:
                    return vehicle
        return None

    def find_driver(self, driver_id: str) -> Optional[Driver]:
        for driver in self.drivers:
            if driver.id == driver_id:
                return driver
        return None

    def find_ticket(self, ticket_id: str) -> Optional[MaintenanceTicket]:
        for ticket in self.tickets:
            if ticket.id == ticket_id:
                return ticket
        return None

    def find_entry(self, entry_id: str) -> Optional[FuelEntry]:
        for entry in self.fuel_entries:
            if entry.id == entry_id:
                return entry
        return None

    def get_vehicle_by_id(self, vehicle_id: str) -> Vehicle:
        vehicle = self.find_vehicle(vehicle_id)
        if vehicle is None:
            raise UnknownEntity("vehicle", vehicle_id)
        return vehicle

    def get_driver_by_id(self, driver_id: str) -> Driver:
        driver = self.find_driver(driver_id)
        if driver is None:
            raise UnknownEntity("driver", driver_id)
        return driver

    def get_ticket_by_id(self, ticket_id: str) -> MaintenanceTicket:
        ticket = self.find_ticket(ticket_id)
        if ticket is None:
            raise UnknownEntity("ticket", ticket_id)
        return ticket

    def get_entry_by_id(self, entry_id: str) -> FuelEntry:
        entry = self.find_entry(entry_id)
        if entry is None:
            raise UnknownEntity("fuel entry", entry_id)
        return entry

    def vehicles_in_fleet(self, fleet: str = "all") -> List[Vehicle]:
        if fleet == "all":
            return list(self.vehicles)
        return [v for v in self.vehicles if v.fleet == fleet]

    def entries_for_vehicle(self, vehicle_id: str) -> List[FuelEntry]:
        """Fuel entries for one vehicle, newest first."""
        entries = [e for e in self.fuel_entries if e.vehicle_id == vehicle_id]
        return sorted(entries, key=lambda e: e.ts, reverse=True)

    def tickets_for_vehicle(self, vehicle_id: str) -> List[MaintenanceTicket]:
        return [t for t in self.tickets if t.vehicle_id == vehicle_id]

    def entries_for_driver(self, driver_id: str) -> List[FuelEntry]:
        """Fuel entries submitted by one driver, newest first."""
        entries = [e for e in self.fuel_entries if e.driver_id == driver_id]
        return sorted(entries, key=lambda e: e.ts, reverse=True)

    def assigned_vehicle(self, driver_id: str) -> Optional[Vehicle]:
        for vehicle in self.vehicles:
            if vehicle.driver_id == driver_id:
                return vehicle
        return None

    def last_fuel_entry(self, vehicle_id: str) -> Optional[FuelEntry]:
        entries = self.entries_for_vehicle(vehicle_id)
        return entries[0] if entries else None

    def next_service(self, vehicle_id: str) -> Optional[MaintenanceTicket]:
        """Open (Scheduled or In Progress) ticket with the earliest due date."""
        open_tickets = [t for t in self.tickets_for_vehicle(vehicle_id) if t.is_open]
        return min(open_tickets, key=lambda t: t.due_date, default=None)

    def add_vehicle(
        self,
        plate: str,
        type: str,
        fleet: str,
        odo_km: float = 0,
        driver_id: Optional[str] = None,
        status: VehicleStatus = VehicleStatus.ACTIVE,
    ) -> Vehicle:
        """
        Register a new vehicle with the next V### id.

        The fleet and driver must already exist and the plate must be unused.
        """
        if fleet not in {f.name for f in self.fleets}:
            raise UnknownEntity("fleet", fleet)
        if driver_id is not None:
            self.get_driver_by_id(driver_id)
        if any(v.plate == plate for v in self.vehicles):
            raise ValueError(f"Plate {plate} is already registered")
        if odo_km < 0:
            raise ValueError(f"Odometer must be >= 0, got {odo_km}")
        vehicle = Vehicle(
            id=_next_id("V", (v.id for v in self.vehicles)),
            plate=plate,
            type=type,
            fleet=fleet,
            status=status,
            odo_km=odo_km,
            driver_id=driver_id,
        )
        self.vehicles.append(vehicle)
        logger.info("Added vehicle %s (%s) to %s", vehicle.id, plate, fleet)
        return vehicle

    # -- fuel queue ----------------------------------------------------------

    def queue(self, tab: str = "all") -> List[FuelEntry]:
        """Fuel entries shown under a fuel-queue tab."""
        if tab == "all":
            return list(self.fuel_entries)
        if tab == "flagged":
            return [e for e in self.fuel_entries if e.needs_review]
        if tab in QUEUE_TABS:
            return [e for e in self.fuel_entries if e.status.value.lower() == tab]
        raise ValueError(f"Unknown queue tab '{tab}' (expected one of {QUEUE_TABS})")

    def queue_counts(self) -> Dict[str, int]:
        return {tab: len(self.queue(tab)) for tab in QUEUE_TABS}

    def submit_fuel_entry(
        self,
        vehicle_id: str,
        fuel_l: float,
        odo_km: float,
        ocr_confidence: float,
        station: str,
        ts: datetime,
        driver_id: Optional[str] = None,
        price_per_l: Optional[float] = None,
    ) -> FuelEntry:
        """
        Record a fuel/odometer submission.

        The vehicle's current odometer is the previous reading. A backwards
        reading raises InvalidOdometerReading and leaves the store untouched.
        Flagged entries always start as Submitted; unflagged entries are
        approved only when settings.auto_approve_unflagged is on. A naive
        `ts` is taken as UTC.
        """
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=tz.UTC)
        vehicle = self.get_vehicle_by_id(vehicle_id)
        try:
            result = compute_flags(
                fuel_l,
                odo_km,
                vehicle.odo_km,
                ocr_confidence,
                self.settings.thresholds,
            )
        except InvalidOdometerReading as e:
            logger.warning("Rejected odometer reading for %s: %s", vehicle.id, e)
            raise InvalidOdometerReading(odo_km, vehicle.odo_km, vehicle.id) from None

        status = EntryStatus.SUBMITTED
        if not result.flagged and self.settings.auto_approve_unflagged:
            status = EntryStatus.APPROVED

        entry = FuelEntry(
            id=self._next_entry_id(ts),
            ts=ts,
            fleet=vehicle.fleet,
            vehicle_id=vehicle.id,
            driver_id=driver_id or vehicle.driver_id,
            station=station,
            fuel_l=fuel_l,
            odo_km=odo_km,
            odo_delta_km=result.odo_delta_km,
            flags=result.flags,
            status=status,
            ocr_confidence=ocr_confidence,
            price_per_l=price_per_l,
            total_cost=fuel_l * price_per_l if price_per_l is not None else None,
        )
        self.fuel_entries.append(entry)
        vehicle.odo_km = odo_km
        logger.info(
            "Fuel entry %s for %s: %.2f L, +%.0f km, flags=%s, status=%s",
            entry.id,
            vehicle.id,
            fuel_l,
            result.odo_delta_km,
            [f.value for f in entry.flags],
            status.value,
        )
        return entry

    def approve_entry(self, entry_id: str) -> FuelEntry:
        return self._decide(entry_id, EntryStatus.APPROVED)

    def reject_entry(self, entry_id: str) -> FuelEntry:
        return self._decide(entry_id, EntryStatus.REJECTED)

    def _decide(self, entry_id: str, target: EntryStatus) -> FuelEntry:
        entry = self.get_entry_by_id(entry_id)
        if entry.status != EntryStatus.SUBMITTED:
            raise InvalidStatusTransition("fuel entry", entry.status, target)
        entry.status = target
        logger.info("Fuel entry %s %s", entry.id, target.value.lower())
        return entry

    def _next_entry_id(self, ts: datetime) -> str:
        base = f"FE{int(ts.timestamp() * 1000)}"
        taken = {e.id for e in self.fuel_entries}
        n = 0
        while f"{base}{n}" in taken:
            n += 1
        return f"{base}{n}"

    # -- maintenance ---------------------------------------------------------

    def tickets_by_status(
        self, tickets: Optional[List[MaintenanceTicket]] = None
    ) -> Dict[TicketStatus, List[MaintenanceTicket]]:
        """Board columns, in workflow order. Defaults to every ticket."""
        tickets = self.tickets if tickets is None else tickets
        return {
            status: [t for t in tickets if t.status == status]
            for status in TicketStatus
        }

    def filter_tickets(
        self,
        fleet: str = "all",
        vehicle: str = "all",
        priority: str = "all",
        vendor: str = "all",
    ) -> List[MaintenanceTicket]:
        """Maintenance board filters. "all" disables a filter; fleet goes via the vehicle."""
        fleets = {v.id: v.fleet for v in self.vehicles}
        return [
            t
            for t in self.tickets
            if (fleet == "all" or fleets.get(t.vehicle_id) == fleet)
            and (vehicle == "all" or t.vehicle_id == vehicle)
            and (priority == "all" or t.priority.value == priority)
            and (vendor == "all" or t.vendor == vendor)
        ]

    def advance_ticket(self, ticket_id: str, target: TicketStatus) -> MaintenanceTicket:
        ticket = self.get_ticket_by_id(ticket_id)
        previous = ticket.status
        ticket.move_to(target)
        logger.info("Ticket %s: %s -> %s", ticket.id, previous.value, target.value)
        return ticket

    def create_ticket(
        self,
        vehicle_id: str,
        type: WorkType,
        priority: Priority,
        due_date: date,
        vendor: str = "",
        est_cost: float = 0,
        notes: str = "",
    ) -> MaintenanceTicket:
        """Open a new Scheduled work order."""
        vehicle = self.get_vehicle_by_id(vehicle_id)
        ticket = MaintenanceTicket(
            id=_next_id("M", (t.id for t in self.tickets)),
            vehicle_id=vehicle.id,
            type=type,
            priority=priority,
            due_date=due_date,
            vendor=vendor,
            est_cost=est_cost,
            notes=notes,
        )
        self.tickets.append(ticket)
        logger.info("Created ticket %s for %s due %s", ticket.id, vehicle.id, due_date)
        return ticket

    def update_ticket(self, ticket_id: str, **changes) -> MaintenanceTicket:
        """
        Edit a work order's details (type, priority, due date, vendor, costs, notes).

        Status changes go through advance_ticket. Unknown fields and
        negative costs raise ValueError before anything is changed.
        """
        ticket = self.get_ticket_by_id(ticket_id)
        unknown = set(changes) - set(EDITABLE_TICKET_FIELDS)
        if unknown:
            raise ValueError(f"Cannot edit ticket field(s): {', '.join(sorted(unknown))}")
        for name in ("est_cost", "actual_cost"):
            if changes.get(name) is not None and changes[name] < 0:
                raise ValueError(f"{name} must be >= 0, got {changes[name]}")
        for name, value in changes.items():
            setattr(ticket, name, value)
        logger.info("Updated ticket %s: %s", ticket.id, ", ".join(sorted(changes)))
        return ticket


def _next_id(prefix: str, ids) -> str:
    """Next id in a PREFIX + zero-padded number sequence, e.g. M004."""
    numbers = [
        int(i[len(prefix):]) for i in ids if i.startswith(prefix) and i[len(prefix):].isdigit()
    ]
    return f"{prefix}{max(numbers, default=0) + 1:03d}"
