#!/usr/bin/env python3
"""
Unified CLI for fleet operations.

Commands:
  dashboard   - Vehicle status counts and fuel totals for a period
  alerts      - Flagged fuel entries and upcoming maintenance
  queue       - Fuel entry review queue
  submit      - Record a fuel/odometer submission
  approve     - Approve a submitted fuel entry
  reject      - Reject a submitted fuel entry
  tickets     - Maintenance board grouped by status
  advance     - Move a work order to a new status
  edit-ticket - Change a work order's details
  vehicles    - Vehicle list with driver, last fill and next service
  vehicle     - One vehicle's fuel history and work orders
  add-vehicle - Register a new vehicle
  drivers     - Driver list with last submission and flags
  driver      - One driver's submissions
  report      - Daily fuel log, fuel consumption pivot, vehicle availability
"""

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from fleet import (
    EntityStore,
    EntryStatus,
    FleetError,
    FuelEntry,
    MaintenanceTicket,
    Priority,
    TicketStatus,
    VehicleStatus,
    WorkType,
    Flag,
    load_store,
    save_fuel_entry,
    update_entry_status,
    save_ticket,
    save_vehicle,
    vehicle_summaries,
    driver_summaries,
    generate_store,
    select_alerts,
    build_export,
    ReportFilterState,
)
from fleet import aggregation
from fleet.alerts import Alert
from fleet.filters import DEFAULT_RANGE_DAYS
from fleet.reports import REPORTS, build_report
from fleet.roster import DriverSummary, VehicleSummary, driver_summary, vehicle_summary
from fleet.store import QUEUE_TABS

# =============================================================================
# Formatting helpers
# =============================================================================


def format_liters(liters: Optional[float]) -> str:
    """Format liters for display."""
    return f"{liters:,.2f} L" if liters is not None else "-"


def format_km(km: Optional[float]) -> str:
    return f"{km:,.0f}" if km is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"{cost:,.2f}" if cost is not None else "-"


def format_flags(flags) -> str:
    return ", ".join(f.value for f in flags) if flags else "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def parse_date(value: str) -> date:
    return date.fromisoformat(value)


# =============================================================================
# Table builders
# =============================================================================


def make_queue_table(entries: List[FuelEntry], tz) -> List[List[str]]:
    """Convert fuel entries to table rows."""
    rows = []
    for entry in entries:
        rows.append(
            [
                entry.id,
                entry.ts.astimezone(tz).strftime("%Y-%m-%d %H:%M"),
                entry.vehicle_id,
                entry.station,
                format_liters(entry.fuel_l),
                format_km(entry.odo_km),
                format_km(entry.odo_delta_km),
                f"{entry.ocr_confidence:.0f}",
                format_flags(entry.flags),
                entry.status.value,
            ]
        )
    return rows


def make_alert_table(alerts: List[Alert]) -> List[List[str]]:
    return [[a.category.value, a.title, a.subtitle, a.target] for a in alerts]


def make_ticket_table(tickets: List[MaintenanceTicket]) -> List[List[str]]:
    rows = []
    for t in tickets:
        rows.append(
            [
                t.id,
                t.vehicle_id,
                t.type.value,
                t.priority.value,
                t.due_date.isoformat(),
                t.vendor or "-",
                format_cost(t.est_cost),
                truncate(t.notes),
            ]
        )
    return rows


def format_when(ts: Optional[datetime], tz) -> str:
    return ts.astimezone(tz).strftime("%Y-%m-%d %H:%M") if ts else "-"


def make_vehicle_table(summaries: List[VehicleSummary], tz) -> List[List[str]]:
    rows = []
    for s in summaries:
        v = s.vehicle
        due = s.next_service
        rows.append(
            [
                v.id,
                v.plate,
                v.type,
                s.driver.name if s.driver else "Unassigned",
                v.fleet,
                format_km(v.odo_km),
                format_when(s.last_fuel, tz),
                f"{due.due_date.isoformat()} {due.type.value}" if due else "-",
                v.status.value,
            ]
        )
    return rows


def make_driver_table(summaries: List[DriverSummary], tz) -> List[List[str]]:
    rows = []
    for s in summaries:
        d = s.driver
        rows.append(
            [
                d.id,
                d.name,
                s.vehicle.fleet if s.vehicle else "-",
                d.contact,
                format_when(s.last_submission, tz),
                format_flags(s.flags) if s.flag_count else "-",
                d.status.value,
            ]
        )
    return rows


# =============================================================================
# Data source
# =============================================================================


def open_store(args) -> EntityStore:
    if args.data_file is not None:
        return load_store(args.data_file)
    return generate_store(seed=args.seed)


def now_for(store: EntityStore) -> datetime:
    return datetime.now(store.settings.tz)


# =============================================================================
# Dashboard / alerts
# =============================================================================


def cmd_dashboard(args, store: EntityStore):
    """Vehicle status counts and fuel totals for the selected period."""
    tz = store.settings.tz
    today = now_for(store).date()
    start = args.start or today
    end = args.end or today
    entries = aggregation.filter_entries(store.fuel_entries, start=start, end=end, tz=tz)
    counts = aggregation.vehicle_status_counts(store.vehicles)
    totals = aggregation.fuel_log_totals(entries)

    print(f"Period: {start} to {end}")
    print()
    rows = [
        ["Active Vehicles", counts[VehicleStatus.ACTIVE]],
        ["In Maintenance", counts[VehicleStatus.MAINTENANCE]],
        ["Down", counts[VehicleStatus.DOWN]],
        ["Fuel", format_liters(totals.liters)],
        ["Odo delta", f"{format_km(totals.odo_delta_km)} km"],
    ]
    print(tabulate(rows, tablefmt="simple"))
    print()

    daily = aggregation.daily_totals(entries, tz)
    if daily:
        print("Daily fuel:")
        daily_rows = [[day.isoformat(), format_liters(liters)] for day, liters in daily]
        print(tabulate(daily_rows, headers=["Date", "Liters"], tablefmt="simple"))
        print()
        print("Cost by station:")
        costs = sorted(aggregation.cost_by_station(entries).items())
        cost_rows = [[station, format_cost(cost)] for station, cost in costs]
        print(tabulate(cost_rows, headers=["Station", "Cost"], tablefmt="simple"))
        print()

    flagged = store.queue("flagged")
    if flagged:
        print(f"Flagged for review: {len(flagged)}")
        for flag in Flag:
            n = sum(1 for e in flagged if flag in e.flags)
            if n:
                print(f"  {flag.title}: {n} ({flag.tooltip})")
    return 0


def cmd_alerts(args, store: EntityStore):
    """Flagged fuel entries and upcoming maintenance, newest first."""
    settings = store.settings
    now = args.now or now_for(store)
    alerts = select_alerts(
        store.fuel_entries,
        store.tickets,
        now,
        lookahead_days=settings.alert_lookahead_days,
        limit=args.limit or settings.alert_limit,
        tz=settings.tz,
    )
    if not alerts:
        print("No alerts.")
        return 0
    headers = ["Type", "Alert", "Detail", "Link"]
    print(tabulate(make_alert_table(alerts), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Fuel queue
# =============================================================================


def cmd_queue(args, store: EntityStore):
    """Fuel entry review queue."""
    counts = store.queue_counts()
    print("  ".join(f"{tab.capitalize()} ({counts[tab]})" for tab in QUEUE_TABS))
    print()
    entries = sorted(store.queue(args.tab), key=lambda e: e.ts, reverse=True)
    if not entries:
        print("No fuel entries found.")
        return 0
    headers = ["ID", "Time", "Vehicle", "Station", "Fuel", "Odometer", "Delta", "OCR", "Flags", "Status"]
    print(tabulate(make_queue_table(entries, store.settings.tz), headers=headers, tablefmt="simple"))
    return 0


def cmd_submit(args, store: EntityStore):
    """Record a fuel/odometer submission."""
    ts = args.at or now_for(store)
    entry = store.submit_fuel_entry(
        vehicle_id=args.vehicle_id,
        fuel_l=args.fuel,
        odo_km=args.odo,
        ocr_confidence=args.ocr,
        station=args.station,
        ts=ts,
        driver_id=args.driver,
        price_per_l=args.price,
    )

    print(f"Fuel entry {entry.id}:")
    print(f"  Vehicle:  {entry.vehicle_id} ({entry.fleet})")
    print(f"  Fuel:     {format_liters(entry.fuel_l)}")
    print(f"  Odometer: {format_km(entry.odo_km)} (+{format_km(entry.odo_delta_km)} km)")
    print(f"  Flags:    {format_flags(entry.flags)}")
    print(f"  Status:   {entry.status.value}")
    print()

    if args.dry_run or args.data_file is None:
        print("(dry run - no changes made)")
        return 0

    save_fuel_entry(args.data_file, entry)
    print("Entry saved.")
    return 0


def _decide(args, store: EntityStore, status: EntryStatus):
    if status == EntryStatus.APPROVED:
        entry = store.approve_entry(args.entry_id)
    else:
        entry = store.reject_entry(args.entry_id)
    print(f"Fuel entry {entry.id}: {entry.status.value}")
    if args.data_file is not None:
        update_entry_status(args.data_file, entry.id, entry.status)
    return 0


def cmd_approve(args, store: EntityStore):
    return _decide(args, store, EntryStatus.APPROVED)


def cmd_reject(args, store: EntityStore):
    return _decide(args, store, EntryStatus.REJECTED)


# =============================================================================
# Maintenance
# =============================================================================


def cmd_tickets(args, store: EntityStore):
    """Maintenance board grouped by status."""
    headers = ["ID", "Vehicle", "Type", "Priority", "Due", "Vendor", "Est. Cost", "Notes"]
    filtered = store.filter_tickets(
        fleet=args.fleet, vehicle=args.vehicle, priority=args.priority, vendor=args.vendor
    )
    for status, tickets in store.tickets_by_status(filtered).items():
        if args.status and status != args.status:
            continue
        print(f"{status.value.upper()} ({len(tickets)}):")
        if tickets:
            tickets = sorted(tickets, key=lambda t: t.due_date)
            print(tabulate(make_ticket_table(tickets), headers=headers, tablefmt="simple"))
        else:
            print("  No tickets in this status.")
        print()
    return 0


def cmd_advance(args, store: EntityStore):
    """Move a work order to a new status."""
    ticket = store.advance_ticket(args.ticket_id, args.status)
    print(f"Ticket {ticket.id}: {ticket.status.value}")
    if args.data_file is not None:
        save_ticket(args.data_file, ticket)
    return 0


def cmd_edit_ticket(args, store: EntityStore):
    """Change a work order's details. Only the options given are changed."""
    options = {
        "type": args.type,
        "priority": args.priority,
        "due_date": args.due,
        "vendor": args.vendor,
        "est_cost": args.est_cost,
        "actual_cost": args.actual_cost,
        "notes": args.notes,
    }
    changes = {name: value for name, value in options.items() if value is not None}
    if not changes:
        print("Nothing to change.")
        return 1
    ticket = store.update_ticket(args.ticket_id, **changes)
    headers = ["ID", "Vehicle", "Type", "Priority", "Due", "Vendor", "Est. Cost", "Notes"]
    print(tabulate(make_ticket_table([ticket]), headers=headers, tablefmt="simple"))
    if args.data_file is not None:
        save_ticket(args.data_file, ticket)
    return 0


# =============================================================================
# Vehicles / drivers
# =============================================================================


def cmd_vehicles(args, store: EntityStore):
    """Vehicle list with driver, last fill and next service."""
    summaries = vehicle_summaries(store, args.fleet)
    if not summaries:
        print("No vehicles found.")
        return 0
    headers = ["ID", "Plate", "Type", "Driver", "Fleet", "Odometer", "Last Fuel", "Next Service", "Status"]
    print(tabulate(make_vehicle_table(summaries, store.settings.tz), headers=headers, tablefmt="simple"))
    return 0


def cmd_vehicle(args, store: EntityStore):
    """One vehicle's details, fuel history and work orders."""
    tz = store.settings.tz
    vehicle = store.get_vehicle_by_id(args.vehicle_id)
    summary = vehicle_summary(store, vehicle)
    print(f"Vehicle {vehicle.id}:")
    print(f"  Plate:    {vehicle.plate} ({vehicle.type})")
    print(f"  Fleet:    {vehicle.fleet}")
    print(f"  Driver:   {summary.driver.name if summary.driver else 'Unassigned'}")
    print(f"  Odometer: {format_km(vehicle.odo_km)} km")
    print(f"  Fuel:     {vehicle.fuel_level_percent:.0f}%")
    print(f"  Status:   {vehicle.status.value}")
    print()

    entries = store.entries_for_vehicle(vehicle.id)
    print(f"Fuel entries ({len(entries)}):")
    if entries:
        headers = ["ID", "Time", "Vehicle", "Station", "Fuel", "Odometer", "Delta", "OCR", "Flags", "Status"]
        print(tabulate(make_queue_table(entries, tz), headers=headers, tablefmt="simple"))
    print()

    tickets = store.tickets_for_vehicle(vehicle.id)
    if args.status:
        tickets = [t for t in tickets if t.status == args.status]
    print(f"Work orders ({len(tickets)}):")
    if tickets:
        headers = ["ID", "Vehicle", "Type", "Priority", "Due", "Vendor", "Est. Cost", "Notes"]
        print(tabulate(make_ticket_table(tickets), headers=headers, tablefmt="simple"))
    return 0


def cmd_add_vehicle(args, store: EntityStore):
    """Register a new vehicle."""
    vehicle = store.add_vehicle(
        plate=args.plate,
        type=args.type,
        fleet=args.fleet,
        odo_km=args.odo,
        driver_id=args.driver,
    )
    print(f"Vehicle {vehicle.id}: {vehicle.name} in {vehicle.fleet}")

    if args.dry_run or args.data_file is None:
        print("(dry run - no changes made)")
        return 0

    save_vehicle(args.data_file, vehicle)
    print("Vehicle saved.")
    return 0


def cmd_drivers(args, store: EntityStore):
    """Driver list with last submission and flags."""
    summaries = driver_summaries(store)
    if not summaries:
        print("No drivers found.")
        return 0
    headers = ["ID", "Name", "Fleet", "Contact", "Last Submission", "Flags", "Status"]
    print(tabulate(make_driver_table(summaries, store.settings.tz), headers=headers, tablefmt="simple"))
    return 0


def cmd_driver(args, store: EntityStore):
    """One driver's details and submissions."""
    driver = store.get_driver_by_id(args.driver_id)
    summary = driver_summary(store, driver)
    print(f"Driver {driver.id}:")
    print(f"  Name:    {driver.name}")
    print(f"  Contact: {driver.contact}")
    print(f"  License: {driver.license_number}")
    print(f"  Vehicle: {summary.vehicle.name if summary.vehicle else 'Unassigned'}")
    print(f"  Flags:   {summary.flag_count}")
    print()

    entries = store.entries_for_driver(driver.id)
    print(f"Fuel entries ({len(entries)}):")
    if entries:
        headers = ["ID", "Time", "Vehicle", "Station", "Fuel", "Odometer", "Delta", "OCR", "Flags", "Status"]
        print(tabulate(make_queue_table(entries, store.settings.tz), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Reports
# =============================================================================


def make_filter_state(args, store: EntityStore) -> ReportFilterState:
    """Filter state from --from/--to/--fleet/--vehicle/--station."""
    today = now_for(store).date()
    state = ReportFilterState(today=today, tz=store.settings.tz)
    if args.start or args.end:
        end = args.end or today
        start = args.start or end - relativedelta(days=DEFAULT_RANGE_DAYS - 1)
        state.set_date_range((start, end))
    for name in ("fleet", "vehicle", "station"):
        state.set_filter(name, getattr(args, name))
    return state


def cmd_report(args, store: EntityStore):
    """Print a report and optionally export it as CSV."""
    state = make_filter_state(args, store)
    rows = build_report(store, args.name, state, seed=args.seed)
    if not rows:
        print("No data to export." if args.export else "No results found.")
        return 0

    start, end = state.date_range
    print(f"{state.report_name}: {start} to {end}")
    if args.name == "consumption":
        kpis = aggregation.fuel_kpis(state.apply(store.fuel_entries))
        print(f"Total liters: {format_liters(kpis.total_liters)}")
        print(f"Total cost:   {format_cost(kpis.total_cost)}")
        print(f"Avg price/L:  {kpis.avg_price_per_liter:.3f}")
    print()

    headers = list(rows[0].keys())
    print(tabulate([list(r.values()) for r in rows], headers=headers, tablefmt="simple"))

    if args.export:
        export = build_export(
            state.export_rows, state.report_name, args.fleet, now_for(store).date()
        )
        args.export.mkdir(parents=True, exist_ok=True)
        path = args.export / export.filename
        path.write_bytes(export.content)
        print()
        print(f"Exported {len(rows)} rows to {path}")
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fleet operations tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/fleet.yaml dashboard --from 2025-10-20 --to 2025-10-26
  %(prog)s data/fleet.yaml queue --tab flagged
  %(prog)s data/fleet.yaml submit V001 --fuel 45 --odo 25890 --ocr 97 \\
      --station ENOC --price 0.238
  %(prog)s data/fleet.yaml approve FE17610000000002
  %(prog)s data/fleet.yaml advance M002 "In Progress"
  %(prog)s data/fleet.yaml tickets --fleet "North Fleet" --priority High
  %(prog)s data/fleet.yaml edit-ticket M002 --vendor "City Garage" --est-cost 900
  %(prog)s data/fleet.yaml add-vehicle E55555 --type Van --fleet "North Fleet" --odo 1200
  %(prog)s --seed 7 report consumption --fleet "North Fleet" --export out/
  %(prog)s --seed 7 alerts
""",
    )
    parser.add_argument(
        "data_file",
        type=Path,
        nargs="?",
        help="Path to fleet dataset YAML file (omit to use generated demo data)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed for generated demo data and mock availability hours (default: 0)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    dashboard_parser = subparsers.add_parser(
        "dashboard", help="Vehicle status counts and fuel totals"
    )
    dashboard_parser.add_argument("--from", dest="start", type=parse_date, help="Start date (YYYY-MM-DD, default: today)")
    dashboard_parser.add_argument("--to", dest="end", type=parse_date, help="End date (YYYY-MM-DD, default: today)")

    alerts_parser = subparsers.add_parser("alerts", help="Flagged fuel entries and upcoming maintenance")
    alerts_parser.add_argument("--now", type=date_parser.isoparse, help="Evaluate at this ISO timestamp")
    alerts_parser.add_argument("--limit", type=int, help="Maximum alerts to show")

    queue_parser = subparsers.add_parser("queue", help="Fuel entry review queue")
    queue_parser.add_argument("--tab", choices=QUEUE_TABS, default="all", help="Queue tab (default: all)")

    submit_parser = subparsers.add_parser("submit", help="Record a fuel/odometer submission")
    submit_parser.add_argument("vehicle_id", type=str, help="Vehicle id (or driver id of its assigned driver)")
    submit_parser.add_argument("--fuel", type=float, required=True, help="Liters dispensed")
    submit_parser.add_argument("--odo", type=float, required=True, help="Odometer reading (km)")
    submit_parser.add_argument("--ocr", type=float, default=100, help="OCR confidence 0-100 (default: 100)")
    submit_parser.add_argument("--station", type=str, required=True, help="Station name")
    submit_parser.add_argument("--price", type=float, help="Price per liter")
    submit_parser.add_argument("--driver", type=str, help="Driver id (default: vehicle's driver)")
    submit_parser.add_argument("--at", type=date_parser.isoparse, help="Submission time (ISO, default: now)")
    submit_parser.add_argument("--dry-run", action="store_true", help="Show what would be added without saving")

    approve_parser = subparsers.add_parser("approve", help="Approve a submitted fuel entry")
    approve_parser.add_argument("entry_id", type=str)
    reject_parser = subparsers.add_parser("reject", help="Reject a submitted fuel entry")
    reject_parser.add_argument("entry_id", type=str)

    tickets_parser = subparsers.add_parser("tickets", help="Maintenance board")
    tickets_parser.add_argument("--status", type=TicketStatus, help="Only show one column, e.g. 'Scheduled'")
    tickets_parser.add_argument("--fleet", default="all", help="Fleet name (default: all)")
    tickets_parser.add_argument("--vehicle", default="all", help="Vehicle id (default: all)")
    tickets_parser.add_argument("--priority", default="all", choices=["all"] + [p.value for p in Priority])
    tickets_parser.add_argument("--vendor", default="all", help="Vendor name (default: all)")

    advance_parser = subparsers.add_parser("advance", help="Move a work order to a new status")
    advance_parser.add_argument("ticket_id", type=str)
    advance_parser.add_argument("status", type=TicketStatus, help="'In Progress', 'Completed' or 'Deferred'")

    edit_parser = subparsers.add_parser("edit-ticket", help="Change a work order's details")
    edit_parser.add_argument("ticket_id", type=str)
    edit_parser.add_argument("--type", type=WorkType, help="'Service', 'Repair' or 'Inspection'")
    edit_parser.add_argument("--priority", type=Priority, help="'High', 'Medium' or 'Low'")
    edit_parser.add_argument("--due", type=parse_date, help="Due date (YYYY-MM-DD)")
    edit_parser.add_argument("--vendor", type=str)
    edit_parser.add_argument("--est-cost", type=float)
    edit_parser.add_argument("--actual-cost", type=float)
    edit_parser.add_argument("--notes", type=str)

    vehicles_parser = subparsers.add_parser("vehicles", help="Vehicle list")
    vehicles_parser.add_argument("--fleet", default="all", help="Fleet name (default: all)")

    vehicle_parser = subparsers.add_parser("vehicle", help="One vehicle's fuel history and work orders")
    vehicle_parser.add_argument("vehicle_id", type=str)
    vehicle_parser.add_argument("--status", type=TicketStatus, help="Only show work orders in this status")

    add_vehicle_parser = subparsers.add_parser("add-vehicle", help="Register a new vehicle")
    add_vehicle_parser.add_argument("plate", type=str)
    add_vehicle_parser.add_argument("--type", type=str, required=True, help="Vehicle type, e.g. 'Van'")
    add_vehicle_parser.add_argument("--fleet", type=str, required=True, help="Fleet name")
    add_vehicle_parser.add_argument("--odo", type=float, default=0, help="Odometer reading (km, default: 0)")
    add_vehicle_parser.add_argument("--driver", type=str, help="Assigned driver id")
    add_vehicle_parser.add_argument("--dry-run", action="store_true", help="Show what would be added without saving")

    subparsers.add_parser("drivers", help="Driver list")
    driver_parser = subparsers.add_parser("driver", help="One driver's submissions")
    driver_parser.add_argument("driver_id", type=str)

    report_parser = subparsers.add_parser("report", help="Print a report")
    report_parser.add_argument("name", choices=sorted(REPORTS))
    report_parser.add_argument("--fleet", default="all", help="Fleet name (default: all)")
    report_parser.add_argument("--vehicle", default="all", help="Vehicle id (default: all)")
    report_parser.add_argument("--station", default="all", help="Station name (default: all)")
    report_parser.add_argument("--from", dest="start", type=parse_date, help="Start date (default: 13 days before --to)")
    report_parser.add_argument("--to", dest="end", type=parse_date, help="End date (default: today)")
    report_parser.add_argument("--export", type=Path, help="Directory to write the CSV export to")

    return parser


COMMANDS = {
    "dashboard": cmd_dashboard,
    "alerts": cmd_alerts,
    "queue": cmd_queue,
    "submit": cmd_submit,
    "approve": cmd_approve,
    "reject": cmd_reject,
    "tickets": cmd_tickets,
    "advance": cmd_advance,
    "edit-ticket": cmd_edit_ticket,
    "vehicles": cmd_vehicles,
    "vehicle": cmd_vehicle,
    "add-vehicle": cmd_add_vehicle,
    "drivers": cmd_drivers,
    "driver": cmd_driver,
    "report": cmd_report,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate data file exists
    if args.data_file is not None and not args.data_file.exists():
        print(f"Error: File not found: {args.data_file}")
        return 1

    store = open_store(args)
    try:
        return COMMANDS[args.command](args, store)
    except (FleetError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
