"""Exception types raised by the fleet domain package."""

from typing import List


class FleetError(Exception):
    """Base class for fleet domain errors."""


class InvalidOdometerReading(FleetError):
    """A submitted odometer reading is lower than the vehicle's previous one."""

    def __init__(self, odo_km: float, previous_odo_km: float, vehicle_id: str = None):
        self.odo_km = odo_km
        self.previous_odo_km = previous_odo_km
        self.vehicle_id = vehicle_id
        where = f" for vehicle {vehicle_id}" if vehicle_id else ""
        super().__init__(
            f"Odometer reading {odo_km:,.0f} km is below the previous "
            f"reading {previous_odo_km:,.0f} km{where}"
        )


class SchemaMismatch(FleetError):
    """Export rows do not all share the key set of the first row."""

    def __init__(self, row_index: int, expected: List[str], found: List[str]):
        self.row_index = row_index
        self.expected = expected
        self.found = found
        super().__init__(
            f"Row {row_index} has columns {found}, expected {expected}"
        )


class ExternalServiceFailure(FleetError):
    """The generative-text service failed or returned malformed output."""


class InvalidStatusTransition(FleetError):
    """A status change not allowed by the entry or ticket workflow."""

    def __init__(self, kind: str, current, target):
        self.kind = kind
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move {kind} from {current.value} to {target.value}"
        )


class UnknownEntity(FleetError, KeyError):
    """Lookup by id found nothing."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"Unknown {kind} '{entity_id}'")

    def __str__(self) -> str:
        return self.args[0]
