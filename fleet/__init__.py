"""
Fleet operations domain models and reports.

This package provides the data model and report logic for a fleet dashboard:
- Status enums: vehicle, driver, fuel entry and work order states
- Vehicle, Driver, Fleet, Station: reference entities
- FuelEntry / Flag: fuel and odometer submissions with validation flags
- MaintenanceTicket: work orders with a forward-only workflow
- EntityStore: in-memory aggregate owning every collection
- flagging, aggregation, alerts, export: pure report computations
- reports: the named reports shared by the CLI and the web API
- roster: vehicle and driver list rows
"""

from .status import (
    VehicleStatus,
    DriverStatus,
    EntryStatus,
    WorkType,
    Priority,
    TicketStatus,
)
from .errors import (
    FleetError,
    InvalidOdometerReading,
    SchemaMismatch,
    ExternalServiceFailure,
    InvalidStatusTransition,
    UnknownEntity,
)
from .reference import Fleet, Station
from .vehicle import Vehicle, Driver
from .fuel_entry import Flag, FuelEntry
from .ticket import MaintenanceTicket
from .flagging import FlagThresholds, FlagResult, compute_flags, compute_odo_delta
from .config import Settings, load_settings
from .store import EntityStore
from .alerts import Alert, AlertCategory, select_alerts
from .export import rows_to_csv, rows_to_csv_bytes, export_filename, build_export
from .filters import ReportFilterState
from .reports import REPORTS, build_report
from .roster import DriverSummary, VehicleSummary, driver_summaries, vehicle_summaries
from .loader import load_store, save_fuel_entry, update_entry_status, save_ticket, save_vehicle
from .seed import generate_store

__all__ = [
    "VehicleStatus",
    "DriverStatus",
    "EntryStatus",
    "WorkType",
    "Priority",
    "TicketStatus",
    "FleetError",
    "InvalidOdometerReading",
    "SchemaMismatch",
    "ExternalServiceFailure",
    "InvalidStatusTransition",
    "UnknownEntity",
    "Fleet",
    "Station",
    "Vehicle",
    "Driver",
    "Flag",
    "FuelEntry",
    "MaintenanceTicket",
    "FlagThresholds",
    "FlagResult",
    "compute_flags",
    "compute_odo_delta",
    "Settings",
    "load_settings",
    "EntityStore",
    "Alert",
    "AlertCategory",
    "select_alerts",
    "rows_to_csv",
    "rows_to_csv_bytes",
    "export_filename",
    "build_export",
    "ReportFilterState",
    "REPORTS",
    "build_report",
    "VehicleSummary",
    "DriverSummary",
    "vehicle_summaries",
    "driver_summaries",
    "load_store",
    "save_fuel_entry",
    "update_entry_status",
    "save_ticket",
    "save_vehicle",
    "generate_store",
]
