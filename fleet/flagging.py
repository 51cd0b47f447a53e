"""Validation flags for fuel/odometer submissions."""

from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidOdometerReading
from .fuel_entry import Flag


@dataclass(frozen=True)
class FlagThresholds:
    """Limits a submission is checked against."""

    max_tank_capacity_l: float = 60
    odo_delta_high_km: float = 300
    ocr_confidence_min: float = 85


@dataclass(frozen=True)
class FlagResult:
    odo_delta_km: float
    flags: Tuple[Flag, ...]

    @property
    def flagged(self) -> bool:
        return bool(self.flags)


def compute_odo_delta(odo_km: float, previous_odo_km: float) -> float:
    """Distance since the previous reading. Never clamped."""
    delta = odo_km - previous_odo_km
    if delta < 0:
        raise InvalidOdometerReading(odo_km, previous_odo_km)
    return delta


def compute_flags(
    fuel_l: float,
    odo_km: float,
    previous_odo_km: float,
    ocr_confidence: float,
    thresholds: FlagThresholds = FlagThresholds(),
) -> FlagResult:
    """
    Flag a submission against the configured thresholds.

    - odo-delta-high: distance since last reading > odo_delta_high_km
    - fuel-over-max: liters dispensed > max_tank_capacity_l
    - low-ocr: ocr_confidence < ocr_confidence_min

    Flags come back in that order. Raises InvalidOdometerReading when the
    odometer went backwards and ValueError for out-of-range inputs.
    """
    if fuel_l <= 0:
        raise ValueError(f"fuel_l must be positive, got {fuel_l}")
    if not 0 <= ocr_confidence <= 100:
        raise ValueError(f"ocr_confidence must be within 0-100, got {ocr_confidence}")

    odo_delta_km = compute_odo_delta(odo_km, previous_odo_km)

    flags = []
    if odo_delta_km > thresholds.odo_delta_high_km:
        flags.append(Flag.ODO_DELTA_HIGH)
    if fuel_l > thresholds.max_tank_capacity_l:
        flags.append(Flag.FUEL_OVER_MAX)
    if ocr_confidence < thresholds.ocr_confidence_min:
        flags.append(Flag.LOW_OCR)
    return FlagResult(odo_delta_km=odo_delta_km, flags=tuple(flags))
