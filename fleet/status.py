"""Status enums for vehicles, drivers, fuel entries and maintenance tickets."""

from enum import Enum


class VehicleStatus(Enum):
    """Operational state of a vehicle."""

    ACTIVE = "Active"
    MAINTENANCE = "Maintenance"
    DOWN = "Down"


class DriverStatus(Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class EntryStatus(Enum):
    """Approval state of a fuel/odometer submission."""

    SUBMITTED = "Submitted"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class WorkType(Enum):
    SERVICE = "Service"
    REPAIR = "Repair"
    INSPECTION = "Inspection"


class Priority(Enum):
    """Ticket priority. Declaration order = urgency, most urgent first."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class TicketStatus(Enum):
    """Work order state, in board column order."""

    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    DEFERRED = "Deferred"


# Badge variants for the presentation layer. Every member must be mapped;
# the lookup functions raise instead of falling back to a default.
_VEHICLE_VARIANTS = {
    VehicleStatus.ACTIVE: "success",
    VehicleStatus.MAINTENANCE: "warning",
    VehicleStatus.DOWN: "destructive",
}

_ENTRY_VARIANTS = {
    EntryStatus.SUBMITTED: "secondary",
    EntryStatus.APPROVED: "success",
    EntryStatus.REJECTED: "destructive",
}

_TICKET_VARIANTS = {
    TicketStatus.SCHEDULED: "secondary",
    TicketStatus.IN_PROGRESS: "warning",
    TicketStatus.COMPLETED: "success",
    TicketStatus.DEFERRED: "outline",
}

_PRIORITY_VARIANTS = {
    Priority.HIGH: "destructive",
    Priority.MEDIUM: "warning",
    Priority.LOW: "secondary",
}


def _variant(table: dict, member: Enum) -> str:
    try:
        return table[member]
    except KeyError:
        raise ValueError(f"No badge variant for {member!r}") from None


def vehicle_variant(status: VehicleStatus) -> str:
    return _variant(_VEHICLE_VARIANTS, status)


def entry_variant(status: EntryStatus) -> str:
    return _variant(_ENTRY_VARIANTS, status)


def ticket_variant(status: TicketStatus) -> str:
    return _variant(_TICKET_VARIANTS, status)


def priority_variant(priority: Priority) -> str:
    return _variant(_PRIORITY_VARIANTS, priority)
