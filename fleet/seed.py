"""
Reproducible mock dataset.

generate_store() builds the demo fleet from a seeded random.Random, so the
same seed and `today` always give the same store. Fuel entries go through
compute_flags like real submissions; nothing assigns flags or approval
statuses at random.
"""

import random
from datetime import date, datetime, time
from typing import Dict, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from .config import Settings
from .flagging import compute_flags
from .fuel_entry import FuelEntry
from .reference import Fleet, Station
from .status import DriverStatus, Priority, TicketStatus, VehicleStatus, WorkType
from .store import EntityStore
from .ticket import MaintenanceTicket
from .vehicle import Driver, Vehicle

FLEETS = [Fleet("F001", "North Fleet"), Fleet("F002", "South Fleet")]

STATIONS = [Station("S001", "ENOC"), Station("S002", "Adnoc"), Station("S003", "Shell")]

# Sample consumption/mileage series sent to the anomaly analysis
ANOMALY_SAMPLE = {
    "V001": {
        "fuel_consumption_l_100km": [8.5, 8.6, 8.4, 8.7, 14.2],
        "mileage_km": [120, 130, 125, 128, 110],
    },
    "V010": {
        "fuel_consumption_l_100km": [9.1, 9.0, 9.2, 9.3, 9.1],
        "mileage_km": [150, 145, 155, 160, 152],
    },
}


def make_drivers() -> List[Driver]:
    return [
        Driver("D001", "John Doe", "555-0101", "B64S-987P-342L", DriverStatus.ACTIVE, "driver1"),
        Driver("D002", "Jane Smith", "555-0102", "C75T-898Q-453M", DriverStatus.ACTIVE, "driver2"),
        Driver("D003", "Mike Johnson", "555-0103", "D86U-765R-564N", DriverStatus.ACTIVE, "driver3"),
        Driver("D004", "Emily Davis", "555-0104", "E97V-654S-675O", DriverStatus.ACTIVE, "driver4"),
        Driver("D005", "Chris Brown", "555-0105", "F08W-543T-786P", DriverStatus.INACTIVE, "driver5"),
    ]


def make_vehicles() -> List[Vehicle]:
    return [
        Vehicle("V001", "A12345", "Van", "North Fleet", VehicleStatus.ACTIVE, 25678, 85, "D001"),
        Vehicle("V010", "B67890", "Truck", "North Fleet", VehicleStatus.ACTIVE, 15234, 45, "D002"),
        Vehicle("V090", "C24680", "Crane", "South Fleet", VehicleStatus.MAINTENANCE, 45890, 95, "D003"),
        Vehicle("V020", "D13579", "Van", "South Fleet", VehicleStatus.ACTIVE, 31050, 15, "D004"),
        Vehicle("V030", "E98765", "Truck", "North Fleet", VehicleStatus.DOWN, 8950, 100, "D005"),
    ]


def make_tickets(today: date) -> List[MaintenanceTicket]:
    """Work orders; the last five are dated relative to today."""

    def days(n: int) -> date:
        return today + relativedelta(days=n)

    return [
        MaintenanceTicket("M001", "V090", WorkType.REPAIR, Priority.HIGH, date(2025, 10, 28),
                          TicketStatus.IN_PROGRESS, "City Garage", 1200, "Engine overheating issue."),
        MaintenanceTicket("M002", "V001", WorkType.SERVICE, Priority.MEDIUM, date(2025, 11, 2),
                          TicketStatus.SCHEDULED, "Fleet Maintenance Inc.", 350, "Routine 30k km service."),
        MaintenanceTicket("M003", "V030", WorkType.REPAIR, Priority.HIGH, date(2025, 10, 29),
                          TicketStatus.SCHEDULED, "Heavy Duty Repairs", 2500, "Transmission failure reported."),
        MaintenanceTicket("M004", "V020", WorkType.INSPECTION, Priority.LOW, date(2025, 10, 31),
                          TicketStatus.SCHEDULED, "Quick Check", 150, "Annual safety inspection."),
        MaintenanceTicket("M005", "V010", WorkType.SERVICE, Priority.MEDIUM, date(2025, 11, 7),
                          TicketStatus.SCHEDULED, "Fleet Maintenance Inc.", 250, "Oil change and filter replacement."),
        MaintenanceTicket("M006", "V090", WorkType.REPAIR, Priority.LOW, days(-5),
                          TicketStatus.COMPLETED, "Body Shop Experts", 500, "Minor body damage repair."),
        MaintenanceTicket("M007", "V001", WorkType.REPAIR, Priority.LOW, days(-8),
                          TicketStatus.COMPLETED, "Windshield Repair Pro", 100, "Fixed chip in windshield."),
        MaintenanceTicket("M008", "V010", WorkType.INSPECTION, Priority.LOW, days(20),
                          TicketStatus.SCHEDULED, "Crane Specialists", 1000, "Hydraulic system certification."),
        MaintenanceTicket("M009", "V020", WorkType.REPAIR, Priority.MEDIUM, days(4),
                          TicketStatus.SCHEDULED, "Tire World", 600, "Four new tires mounted and balanced."),
        MaintenanceTicket("M010", "V090", WorkType.REPAIR, Priority.MEDIUM, days(1),
                          TicketStatus.DEFERRED, "City Garage", 300,
                          "A/C compressor replacement deferred to next service."),
    ]


def generate_fuel_entries(
    rng: random.Random,
    vehicles: List[Vehicle],
    drivers: List[Driver],
    stations: List[Station],
    today: date,
    settings: Settings,
    days: int = 10,
) -> List[FuelEntry]:
    """
    Two to four fills per day over the last `days` days.

    Most readings are ordinary; a few are pushed past a threshold so the
    queue and alert feed have something to show. Vehicle odometers are
    advanced to the last generated reading. Newest entries first.
    """
    tz = settings.tz
    limits = settings.thresholds
    last_odo = {v.id: v.odo_km - rng.randrange(2000) for v in vehicles}
    entries = []
    for back in range(days - 1, -1, -1):
        day = today - relativedelta(days=back)
        count = rng.randrange(3) + 2
        times = sorted(time(6 + rng.randrange(12), rng.randrange(60)) for _ in range(count))
        for j, at in enumerate(times):
            vehicle = rng.choice(vehicles)
            driver_id = vehicle.driver_id or rng.choice(drivers).id
            station = rng.choice(stations)
            ts = datetime.combine(day, at, tzinfo=tz)

            fuel_l = float(rng.randrange(45) + 10)
            odo_delta = rng.randrange(200) + 50
            ocr_confidence = float(rng.randrange(10) + 90)
            if rng.random() < 0.1:
                odo_delta = int(limits.odo_delta_high_km) + rng.randrange(200) + 1
            if rng.random() < 0.1:
                ocr_confidence = float(rng.randrange(30) + 50)
            if rng.random() < 0.05:
                fuel_l = float(limits.max_tank_capacity_l + rng.randrange(20) + 1)

            previous = last_odo[vehicle.id]
            odo_km = previous + odo_delta
            result = compute_flags(fuel_l, odo_km, previous, ocr_confidence, limits)
            last_odo[vehicle.id] = odo_km
            price_per_l = 0.23 + rng.random() * 0.02

            entries.append(
                FuelEntry(
                    id=f"FE{int(ts.timestamp() * 1000)}{j}",
                    ts=ts,
                    fleet=vehicle.fleet,
                    vehicle_id=vehicle.id,
                    driver_id=driver_id,
                    station=station.name,
                    fuel_l=fuel_l,
                    odo_km=odo_km,
                    odo_delta_km=result.odo_delta_km,
                    flags=result.flags,
                    ocr_confidence=ocr_confidence,
                    price_per_l=price_per_l,
                    total_cost=fuel_l * price_per_l,
                )
            )
    for vehicle in vehicles:
        vehicle.odo_km = max(vehicle.odo_km, last_odo[vehicle.id])
    entries.sort(key=lambda e: e.ts, reverse=True)
    return entries


def generate_store(
    seed: int = 0,
    today: Optional[date] = None,
    settings: Optional[Settings] = None,
) -> EntityStore:
    """Build the demo store. Same seed and today -> same data."""
    settings = settings or Settings()
    today = today or datetime.now(settings.tz).date()
    rng = random.Random(seed)
    vehicles = make_vehicles()
    drivers = make_drivers()
    entries = generate_fuel_entries(rng, vehicles, drivers, STATIONS, today, settings)
    return EntityStore(
        fleets=list(FLEETS),
        stations=list(STATIONS),
        vehicles=vehicles,
        drivers=drivers,
        tickets=make_tickets(today),
        fuel_entries=entries,
        settings=settings,
    )


def generate_vehicle_hours(
    vehicles: List[Vehicle],
    tickets: List[MaintenanceTicket],
    seed: int = 0,
) -> Dict[str, Tuple[float, float]]:
    """
    Mock (maintenance_hours, down_hours) per vehicle for the availability report.

    Down vehicles lose 40-120 h, vehicles in maintenance 20-60 h, and every
    ticket on a vehicle adds 4-12 maintenance hours.
    """
    rng = random.Random(seed)
    hours = {}
    for vehicle in vehicles:
        down = maintenance = 0.0
        if vehicle.status == VehicleStatus.DOWN:
            down = float(rng.randrange(80) + 40)
        elif vehicle.status == VehicleStatus.MAINTENANCE:
            maintenance = float(rng.randrange(40) + 20)
        ticket_count = sum(1 for t in tickets if t.vehicle_id == vehicle.id)
        for _ in range(ticket_count):
            maintenance += rng.randrange(8) + 4
        hours[vehicle.id] = (maintenance, down)
    return hours
