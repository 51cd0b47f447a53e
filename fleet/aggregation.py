"""
Report aggregation over fuel entries and vehicles.

Everything here is a pure function over in-memory lists: daily totals,
cost by station, the fleet x station pivot, KPIs and vehicle availability.
Sums are plain float accumulation; rounding happens only for display
(round_amount / round_percent). Empty groups give 0, never an error.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime, time, tzinfo
from typing import Dict, Iterable, List, Optional, Tuple

from dateutil import tz as dateutil_tz

from .fuel_entry import FuelEntry
from .reference import Fleet, Station
from .status import VehicleStatus
from .vehicle import Vehicle

UTC = dateutil_tz.UTC


def round_amount(value: float) -> float:
    """Liters / cost display precision."""
    return round(value, 2)


def round_percent(value: float) -> float:
    return round(value, 1)


def local_date(ts: datetime, tz: tzinfo = UTC) -> date:
    """Calendar date of a timestamp in the reporting timezone (naive = UTC)."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(tz).date()


# =============================================================================
# Filtering
# =============================================================================


def filter_entries(
    entries: Iterable[FuelEntry],
    fleet: str = "all",
    vehicle: str = "all",
    station: str = "all",
    start: Optional[date] = None,
    end: Optional[date] = None,
    tz: tzinfo = UTC,
) -> List[FuelEntry]:
    """
    Apply report filters.

    "all" disables a filter. start/end are inclusive calendar dates in the
    reporting timezone, so `end` covers the whole day.
    """
    result = []
    for entry in entries:
        if fleet != "all" and entry.fleet != fleet:
            continue
        if vehicle != "all" and entry.vehicle_id != vehicle:
            continue
        if station != "all" and entry.station != station:
            continue
        if start is not None or end is not None:
            day = local_date(entry.ts, tz)
            if start is not None and day < start:
                continue
            if end is not None and day > end:
                continue
        result.append(entry)
    return result


def day_bounds(day: date, tz: tzinfo = UTC) -> Tuple[datetime, datetime]:
    """First and last instant of a calendar day in the given timezone."""
    return (
        datetime.combine(day, time.min, tzinfo=tz),
        datetime.combine(day, time.max, tzinfo=tz),
    )


# =============================================================================
# Sums and KPIs
# =============================================================================


def daily_totals(entries: Iterable[FuelEntry], tz: tzinfo = UTC) -> List[Tuple[date, float]]:
    """Liters per calendar day, ascending by date."""
    totals: Dict[date, float] = {}
    for entry in entries:
        day = local_date(entry.ts, tz)
        totals[day] = totals.get(day, 0.0) + entry.fuel_l
    return sorted(totals.items())


def cost_by_station(entries: Iterable[FuelEntry]) -> Dict[str, float]:
    """Total cost per station name. Missing cost counts as 0."""
    totals: Dict[str, float] = {}
    for entry in entries:
        totals[entry.station] = totals.get(entry.station, 0.0) + (entry.total_cost or 0)
    return totals


@dataclass(frozen=True)
class FuelKpis:
    total_liters: float
    total_cost: float
    avg_price_per_liter: float


def fuel_kpis(entries: Iterable[FuelEntry]) -> FuelKpis:
    total_liters = 0.0
    total_cost = 0.0
    for entry in entries:
        total_liters += entry.fuel_l
        total_cost += entry.total_cost or 0
    avg = total_cost / total_liters if total_liters > 0 else 0.0
    return FuelKpis(total_liters, total_cost, avg)


@dataclass(frozen=True)
class FuelLogTotals:
    liters: float
    odo_delta_km: float


def fuel_log_totals(entries: Iterable[FuelEntry]) -> FuelLogTotals:
    """Sum of liters and of distance between fills."""
    liters = 0.0
    delta = 0.0
    for entry in entries:
        liters += entry.fuel_l
        delta += entry.odo_delta_km
    return FuelLogTotals(liters, delta)


def vehicle_status_counts(vehicles: Iterable[Vehicle]) -> Dict[VehicleStatus, int]:
    """Count of vehicles per status; every status present, zeros included."""
    counts = {status: 0 for status in VehicleStatus}
    for vehicle in vehicles:
        counts[vehicle.status] += 1
    return counts


# =============================================================================
# Fleet x Station pivot
# =============================================================================


@dataclass
class Cell:
    liters: float = 0.0
    cost: float = 0.0

    def add(self, liters: float, cost: float) -> None:
        self.liters += liters
        self.cost += cost


@dataclass
class PivotTable:
    """
    Liters and cost for every fleet x station pair.

    Row, column and grand totals are derived from the cells, so
    sum(cells) == grand_total holds exactly.
    """

    fleets: List[str]
    stations: List[str]
    cells: Dict[Tuple[str, str], Cell] = field(default_factory=dict)

    def cell(self, fleet: str, station: str) -> Cell:
        return self.cells[(fleet, station)]

    def fleet_total(self, fleet: str) -> Cell:
        return _total(self.cells[(fleet, s)] for s in self.stations)

    def station_total(self, station: str) -> Cell:
        return _total(self.cells[(f, station)] for f in self.fleets)

    @property
    def grand_total(self) -> Cell:
        return _total(self.cells[(f, s)] for f in self.fleets for s in self.stations)


def _total(cells: Iterable[Cell]) -> Cell:
    total = Cell()
    for c in cells:
        total.add(c.liters, c.cost)
    return total


def fleet_station_pivot(
    entries: Iterable[FuelEntry],
    fleets: Iterable[Fleet],
    stations: Iterable[Station],
) -> PivotTable:
    """
    Build the fleet x station pivot.

    Known fleets/stations come first in their given order; any seen only in
    entries are appended in order of appearance. Zero pairs are kept.
    """
    fleet_names = OrderedDict((f.name, None) for f in fleets)
    station_names = OrderedDict((s.name, None) for s in stations)
    entries = list(entries)
    for entry in entries:
        fleet_names.setdefault(entry.fleet, None)
        station_names.setdefault(entry.station, None)

    pivot = PivotTable(fleets=list(fleet_names), stations=list(station_names))
    for f in pivot.fleets:
        for s in pivot.stations:
            pivot.cells[(f, s)] = Cell()
    for entry in entries:
        pivot.cells[(entry.fleet, entry.station)].add(entry.fuel_l, entry.total_cost or 0)
    return pivot


# =============================================================================
# Vehicle availability
# =============================================================================


@dataclass(frozen=True)
class AvailabilityRow:
    vehicle_id: str
    plate: str
    total_hours: float
    maintenance_hours: float
    down_hours: float

    @property
    def uptime_hours(self) -> float:
        """Scheduled hours not lost to maintenance or downtime, never negative."""
        return max(0.0, self.total_hours - self.maintenance_hours - self.down_hours)

    @property
    def availability(self) -> float:
        """Uptime as a percentage of scheduled hours."""
        if self.total_hours <= 0:
            return 0.0
        return self.uptime_hours / self.total_hours * 100


@dataclass(frozen=True)
class FleetAvailability:
    total_hours: float
    uptime_hours: float
    maintenance_hours: float
    down_hours: float

    def _pct(self, hours: float) -> float:
        return hours / self.total_hours * 100 if self.total_hours > 0 else 0.0

    @property
    def availability(self) -> float:
        return self._pct(self.uptime_hours)

    @property
    def maintenance_percent(self) -> float:
        return self._pct(self.maintenance_hours)

    @property
    def down_percent(self) -> float:
        return self._pct(self.down_hours)


def vehicle_availability(
    vehicle: Vehicle,
    total_hours: float,
    maintenance_hours: float = 0,
    down_hours: float = 0,
) -> AvailabilityRow:
    return AvailabilityRow(
        vehicle_id=vehicle.id,
        plate=vehicle.plate,
        total_hours=total_hours,
        maintenance_hours=maintenance_hours,
        down_hours=down_hours,
    )


def fleet_availability(rows: Iterable[AvailabilityRow]) -> FleetAvailability:
    """
    Fleet-wide availability.

    Hours are summed across vehicles before dividing, so vehicles with
    longer operating windows weigh more than a plain average would give.
    Uptime is the sum of each vehicle's clamped uptime: an over-booked
    vehicle contributes 0, not a negative share of the other vehicles' hours.
    """
    total = uptime = maintenance = down = 0.0
    for row in rows:
        total += row.total_hours
        uptime += row.uptime_hours
        maintenance += row.maintenance_hours
        down += row.down_hours
    return FleetAvailability(total, uptime, maintenance, down)


def availability_report(
    vehicles: Iterable[Vehicle],
    hours: Dict[str, Tuple[float, float]],
    total_hours: float,
) -> List[AvailabilityRow]:
    """Availability rows for vehicles; `hours` maps id -> (maintenance, down)."""
    return [
        vehicle_availability(v, total_hours, *hours.get(v.id, (0, 0)))
        for v in vehicles
    ]


# =============================================================================
# Export row builders
# =============================================================================


def daily_fuel_log_rows(entries: List[FuelEntry], tz: tzinfo = UTC) -> List[Dict[str, str]]:
    """Daily fuel log rows plus a trailing Totals row."""
    rows = []
    for entry in entries:
        ts = entry.ts if entry.ts.tzinfo else entry.ts.replace(tzinfo=UTC)
        rows.append(
            {
                "Issue Date/Time": ts.astimezone(tz).strftime("%Y-%m-%d %H:%M"),
                "Vehicle Plate": entry.vehicle_id,
                "Odometer": f"{entry.odo_km:,.0f}",
                "Delta Odometer": f"{entry.odo_delta_km:,.0f}",
                "Quantity (L)": f"{entry.fuel_l:.2f}",
                "Station": entry.station,
            }
        )
    if entries:
        totals = fuel_log_totals(entries)
        rows.append(
            {
                "Issue Date/Time": "Totals",
                "Vehicle Plate": "",
                "Odometer": "",
                "Delta Odometer": f"{totals.odo_delta_km:,.0f}",
                "Quantity (L)": f"{totals.liters:.2f}",
                "Station": "",
            }
        )
    return rows


def pivot_rows(pivot: PivotTable) -> List[Dict[str, str]]:
    """One row per fleet x station cell."""
    return [
        {
            "Fleet": f,
            "Station": s,
            "Total Liters": f"{pivot.cell(f, s).liters:.2f}",
            "Total Cost": f"{pivot.cell(f, s).cost:.2f}",
        }
        for f in pivot.fleets
        for s in pivot.stations
    ]


def availability_rows(rows: List[AvailabilityRow]) -> List[Dict[str, str]]:
    """Per-vehicle availability plus a trailing Fleet Totals row."""
    out = [
        {
            "Vehicle": r.plate,
            "Uptime (hrs)": f"{r.uptime_hours:.0f}",
            "Maintenance (hrs)": f"{r.maintenance_hours:.0f}",
            "Down (hrs)": f"{r.down_hours:.0f}",
            "Availability (%)": f"{r.availability:.1f}",
        }
        for r in rows
    ]
    if rows:
        fleet = fleet_availability(rows)
        out.append(
            {
                "Vehicle": "Fleet Totals",
                "Uptime (hrs)": f"{fleet.uptime_hours:.0f}",
                "Maintenance (hrs)": f"{fleet.maintenance_hours:.0f}",
                "Down (hrs)": f"{fleet.down_hours:.0f}",
                "Availability (%)": f"{fleet.availability:.1f}",
            }
        )
    return out
