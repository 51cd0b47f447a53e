"""Dashboard alert feed: flagged fuel entries plus upcoming maintenance."""

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from enum import Enum
from typing import Iterable, List

from .aggregation import UTC, day_bounds
from .fuel_entry import FuelEntry
from .status import TicketStatus
from .ticket import MaintenanceTicket


class AlertCategory(Enum):
    FUEL = "fuel"
    MAINTENANCE = "maintenance"


@dataclass(frozen=True)
class Alert:
    """One actionable item in the dashboard feed."""

    category: AlertCategory
    title: str
    subtitle: str
    timestamp: datetime
    target: str
    ref_id: str

    @property
    def id(self) -> str:
        if self.category == AlertCategory.FUEL:
            return f"{self.ref_id}-{self.title.lower().replace(' ', '-')}"
        return self.ref_id


def _short_date(ts: datetime) -> str:
    return f"{ts:%b} {ts.day}"


def fuel_alerts(entries: Iterable[FuelEntry], tz: tzinfo = UTC) -> List[Alert]:
    """One alert per flag on every flagged entry still awaiting review."""
    alerts = []
    for entry in entries:
        if not entry.needs_review:
            continue
        ts = entry.ts if entry.ts.tzinfo else entry.ts.replace(tzinfo=UTC)
        for flag in entry.flags:
            alerts.append(
                Alert(
                    category=AlertCategory.FUEL,
                    title=flag.title,
                    subtitle=f"Vehicle {entry.vehicle_id} on {_short_date(ts.astimezone(tz))}",
                    timestamp=ts,
                    target=f"/fuel-queue?entryId={entry.id}",
                    ref_id=entry.id,
                )
            )
    return alerts


def maintenance_alerts(
    tickets: Iterable[MaintenanceTicket],
    now: datetime,
    lookahead_days: int = 7,
    tz: tzinfo = UTC,
) -> List[Alert]:
    """Scheduled tickets due (midnight, reporting timezone) within [now, now + lookahead]."""
    window_end = now + timedelta(days=lookahead_days)
    alerts = []
    for ticket in tickets:
        if ticket.status != TicketStatus.SCHEDULED:
            continue
        due, _ = day_bounds(ticket.due_date, tz)
        if not now <= due <= window_end:
            continue
        alerts.append(
            Alert(
                category=AlertCategory.MAINTENANCE,
                title=f"{ticket.type.value} Due",
                subtitle=f"Vehicle {ticket.vehicle_id} on {_short_date(due)}",
                timestamp=due,
                target=f"/maintenance/{ticket.id}",
                ref_id=ticket.id,
            )
        )
    return alerts


def select_alerts(
    entries: Iterable[FuelEntry],
    tickets: Iterable[MaintenanceTicket],
    now: datetime,
    lookahead_days: int = 7,
    limit: int = 6,
    tz: tzinfo = UTC,
) -> List[Alert]:
    """
    Build the alert feed, newest first, at most `limit` items.

    Fuel alerts are listed before maintenance alerts and the sort is
    stable, so equal timestamps keep that source order.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    merged = fuel_alerts(entries, tz) + maintenance_alerts(tickets, now, lookahead_days, tz)
    merged.sort(key=lambda a: a.timestamp, reverse=True)
    return merged[:limit]
