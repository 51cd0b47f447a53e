"""Vehicle and Driver records."""

from typing import Optional

from .status import DriverStatus, VehicleStatus


class Vehicle:
    """A fleet vehicle. Driver and fleet are referenced by id/name only."""

    def __init__(
        self,
        id: str,
        plate: str,
        type: str,
        fleet: str,
        status: VehicleStatus,
        odo_km: float,
        fuel_level_percent: float = 0,
        driver_id: Optional[str] = None,
    ):
        self.id = id
        self.plate = plate
        self.type = type
        self.fleet = fleet
        self.status = status
        self.odo_km = odo_km
        self.fuel_level_percent = fuel_level_percent
        self.driver_id = driver_id

    @property
    def name(self) -> str:
        """Human-readable vehicle label."""
        return f"{self.plate} ({self.type})"

    def __repr__(self) -> str:
        return f"Vehicle({self.id!r}, {self.plate!r}, {self.status.value})"


class Driver:
    """A driver. Assigned to vehicles via Vehicle.driver_id."""

    def __init__(
        self,
        id: str,
        name: str,
        contact: str,
        license_number: str,
        status: DriverStatus = DriverStatus.ACTIVE,
        avatar: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.contact = contact
        self.license_number = license_number
        self.status = status
        self.avatar = avatar

    def __repr__(self) -> str:
        return f"Driver({self.id!r}, {self.name!r})"
