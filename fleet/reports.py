"""Named reports: daily fuel log, fuel consumption pivot, vehicle availability."""

from typing import Any, Dict, List

from . import aggregation
from .filters import ReportFilterState
from .seed import generate_vehicle_hours
from .store import EntityStore

# Report key -> export name used in the download filename
REPORTS = {
    "daily-log": "daily_fuel_log",
    "consumption": "fuel_consumption_pivot",
    "availability": "vehicle_availability",
}


def build_report(
    store: EntityStore,
    name: str,
    state: ReportFilterState,
    seed: int = 0,
) -> List[Dict[str, Any]]:
    """
    Build the export rows for a report under the given filter state.

    The rows are also stashed on `state` via set_export so the download
    sink can pick them up. Raises ValueError for an unknown report name.
    """
    if name not in REPORTS:
        raise ValueError(f"Unknown report '{name}' (expected one of {sorted(REPORTS)})")

    if name == "availability":
        vehicles = state.filtered_vehicles(store.vehicles)
        if state.filters["vehicle"] != "all":
            vehicles = [v for v in vehicles if v.id == state.filters["vehicle"]]
        hours = generate_vehicle_hours(store.vehicles, store.tickets, seed=seed)
        rows = aggregation.availability_rows(
            aggregation.availability_report(
                vehicles, hours, store.settings.availability_period_hours
            )
        )
    elif name == "daily-log":
        entries = sorted(state.apply(store.fuel_entries), key=lambda e: e.ts, reverse=True)
        rows = aggregation.daily_fuel_log_rows(entries, state.tz)
    else:
        pivot = aggregation.fleet_station_pivot(
            state.apply(store.fuel_entries), store.fleets, store.stations
        )
        rows = aggregation.pivot_rows(pivot)

    state.set_export(rows, REPORTS[name])
    return rows
