"""MaintenanceTicket (work order) and its status workflow."""

from datetime import date
from typing import Optional

from .errors import InvalidStatusTransition
from .status import Priority, TicketStatus, WorkType

# Forward moves only. DEFERRED may be entered from any non-terminal state.
_TRANSITIONS = {
    TicketStatus.SCHEDULED: {TicketStatus.IN_PROGRESS, TicketStatus.DEFERRED},
    TicketStatus.IN_PROGRESS: {TicketStatus.COMPLETED, TicketStatus.DEFERRED},
    TicketStatus.COMPLETED: set(),
    TicketStatus.DEFERRED: set(),
}


def can_transition(current: TicketStatus, target: TicketStatus) -> bool:
    """Check whether a work order may move from current to target."""
    return target in _TRANSITIONS[current]


class MaintenanceTicket:
    """A scheduled service, repair or inspection for one vehicle."""

    def __init__(
        self,
        id: str,
        vehicle_id: str,
        type: WorkType,
        priority: Priority,
        due_date: date,
        status: TicketStatus = TicketStatus.SCHEDULED,
        vendor: str = "",
        est_cost: float = 0,
        notes: str = "",
        actual_cost: Optional[float] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.type = type
        self.priority = priority
        self.due_date = due_date
        self.status = status
        self.vendor = vendor
        self.est_cost = est_cost
        self.notes = notes
        self.actual_cost = actual_cost

    @property
    def is_open(self) -> bool:
        """Not yet completed or deferred."""
        return bool(_TRANSITIONS[self.status])

    def move_to(self, target: TicketStatus) -> None:
        """
        Advance the ticket along its workflow.

        Raises InvalidStatusTransition for backward moves, skips
        (Scheduled -> Completed) and moves out of a terminal state.
        """
        if not can_transition(self.status, target):
            raise InvalidStatusTransition("ticket", self.status, target)
        self.status = target

    def __repr__(self) -> str:
        return f"MaintenanceTicket({self.id!r}, {self.vehicle_id!r}, {self.status.value})"
