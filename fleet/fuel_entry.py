"""FuelEntry record and the Flag enum."""

from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from .status import EntryStatus


class Flag(Enum):
    """Machine-detected anomaly on a submission. Declaration order is display order."""

    ODO_DELTA_HIGH = "odo-delta-high"
    FUEL_OVER_MAX = "fuel-over-max"
    LOW_OCR = "low-ocr"

    @property
    def title(self) -> str:
        """Sentence-case label, e.g. 'Odo delta high'."""
        text = self.value.replace("-", " ")
        return text[0].upper() + text[1:]

    @property
    def tooltip(self) -> str:
        return _FLAG_TOOLTIPS[self]


_FLAG_TOOLTIPS = {
    Flag.ODO_DELTA_HIGH: "Unusual distance since last fill (> configured threshold).",
    Flag.FUEL_OVER_MAX: "Dispensed liters exceed the configured tank capacity.",
    Flag.LOW_OCR: "OCR confidence under threshold on latest odometer photo.",
}


def ordered_flags(flags: Iterable[Flag]) -> tuple:
    """Deduplicate flags and put them in declaration order."""
    present = set(flags)
    return tuple(f for f in Flag if f in present)


class FuelEntry:
    """A fuel/odometer submission."""

    def __init__(
        self,
        id: str,
        ts: datetime,
        fleet: str,
        vehicle_id: str,
        driver_id: str,
        station: str,
        fuel_l: float,
        odo_km: float,
        odo_delta_km: float,
        flags: Iterable[Flag] = (),
        status: EntryStatus = EntryStatus.SUBMITTED,
        ocr_confidence: float = 100,
        price_per_l: Optional[float] = None,
        total_cost: Optional[float] = None,
    ):
        self.id = id
        self.ts = ts
        self.fleet = fleet
        self.vehicle_id = vehicle_id
        self.driver_id = driver_id
        self.station = station
        self.fuel_l = fuel_l
        self.odo_km = odo_km
        self.odo_delta_km = odo_delta_km
        self.flags = ordered_flags(flags)
        self.status = status
        self.ocr_confidence = ocr_confidence
        self.price_per_l = price_per_l
        self.total_cost = total_cost

    @property
    def is_flagged(self) -> bool:
        return bool(self.flags)

    @property
    def needs_review(self) -> bool:
        """Flagged and still waiting for a decision."""
        return self.is_flagged and self.status == EntryStatus.SUBMITTED

    def __repr__(self) -> str:
        return f"FuelEntry({self.id!r}, {self.vehicle_id!r}, {self.status.value})"
