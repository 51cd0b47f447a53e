"""Shared report filter state with explicit subscribe/unsubscribe."""

import logging
from datetime import date, tzinfo
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from .aggregation import UTC, filter_entries
from .fuel_entry import FuelEntry
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

DEFAULT_RANGE_DAYS = 14
FILTER_NAMES = ("fleet", "vehicle", "station")

Listener = Callable[["ReportFilterState"], None]


class ReportFilterState:
    """
    Date range, fleet/vehicle/station filters and the pending export payload.

    One instance is created per report session and passed to whatever needs
    it. Listeners are called after every filter or date change.
    """

    def __init__(self, today: Optional[date] = None, tz: tzinfo = UTC):
        today = today or date.today()
        self.tz = tz
        self.date_range: Optional[Tuple[date, date]] = (
            today - relativedelta(days=DEFAULT_RANGE_DAYS - 1),
            today,
        )
        self.filters: Dict[str, str] = {name: "all" for name in FILTER_NAMES}
        self.export_rows: List[Dict[str, Any]] = []
        self.report_name = "report"
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def set_date_range(self, date_range: Optional[Tuple[date, date]]) -> None:
        """Set (start, end) inclusive, or None to disable the date filter."""
        if date_range is not None and date_range[0] > date_range[1]:
            raise ValueError(f"Start {date_range[0]} is after end {date_range[1]}")
        self.date_range = date_range
        self._notify()

    def set_filter(self, name: str, value: str) -> None:
        if name not in self.filters:
            raise KeyError(f"Unknown filter '{name}' (expected one of {FILTER_NAMES})")
        self.filters[name] = value
        logger.debug("Report filter %s=%s", name, value)
        self._notify()

    def set_export(self, rows: List[Dict[str, Any]], report_name: str) -> None:
        """Stash the rows the current report would export. Does not notify."""
        self.export_rows = rows
        self.report_name = report_name

    def apply(self, entries: Iterable[FuelEntry]) -> List[FuelEntry]:
        start, end = self.date_range if self.date_range else (None, None)
        return filter_entries(
            entries,
            fleet=self.filters["fleet"],
            vehicle=self.filters["vehicle"],
            station=self.filters["station"],
            start=start,
            end=end,
            tz=self.tz,
        )

    def filtered_vehicles(self, vehicles: Iterable[Vehicle]) -> List[Vehicle]:
        """Vehicles offered in the vehicle picker for the selected fleet."""
        fleet = self.filters["fleet"]
        return [v for v in vehicles if fleet == "all" or v.fleet == fleet]
