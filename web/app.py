"""Flask JSON API for the fleet operations dashboard."""

import logging
import os
from datetime import date, datetime
from pathlib import Path

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta
from flask import Blueprint, Flask, Response, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from fleet import (
    EntityStore,
    FleetError,
    InvalidOdometerReading,
    InvalidStatusTransition,
    Priority,
    ReportFilterState,
    Settings,
    TicketStatus,
    UnknownEntity,
    VehicleStatus,
    WorkType,
    build_export,
    build_report,
    driver_summaries,
    generate_store,
    load_store,
    save_fuel_entry,
    save_ticket,
    save_vehicle,
    select_alerts,
    update_entry_status,
    vehicle_summaries,
)
from fleet import aggregation
from fleet.assistant import (
    ANOMALY_FAILED,
    SUMMARY_FAILED,
    AnalysisResult,
    AssistantClient,
    get_anomaly_alert,
    get_report_summary,
)
from fleet.config import apply_env
from fleet.filters import DEFAULT_RANGE_DAYS
from fleet.roster import driver_summary, vehicle_summary
from fleet.seed import ANOMALY_SAMPLE
from fleet.status import entry_variant, priority_variant, ticket_variant, vehicle_variant

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__, url_prefix="/api")


# =============================================================================
# Serialization
# =============================================================================


def entry_to_json(entry, tz) -> dict:
    return {
        "id": entry.id,
        "ts": entry.ts.astimezone(tz).isoformat(),
        "fleet": entry.fleet,
        "vehicleId": entry.vehicle_id,
        "driverId": entry.driver_id,
        "station": entry.station,
        "fuelL": entry.fuel_l,
        "odoKm": entry.odo_km,
        "odoDeltaKm": entry.odo_delta_km,
        "flags": [
            {"id": f.value, "title": f.title, "tooltip": f.tooltip} for f in entry.flags
        ],
        "status": entry.status.value,
        "variant": entry_variant(entry.status),
        "ocrConfidence": entry.ocr_confidence,
        "pricePerL": entry.price_per_l,
        "totalCost": entry.total_cost,
    }


def ticket_to_json(ticket) -> dict:
    return {
        "id": ticket.id,
        "vehicleId": ticket.vehicle_id,
        "type": ticket.type.value,
        "priority": ticket.priority.value,
        "priorityVariant": priority_variant(ticket.priority),
        "dueDate": ticket.due_date.isoformat(),
        "status": ticket.status.value,
        "variant": ticket_variant(ticket.status),
        "vendor": ticket.vendor,
        "estCost": ticket.est_cost,
        "actualCost": ticket.actual_cost,
        "notes": ticket.notes,
    }


def vehicle_to_json(vehicle) -> dict:
    return {
        "id": vehicle.id,
        "plate": vehicle.plate,
        "type": vehicle.type,
        "fleet": vehicle.fleet,
        "status": vehicle.status.value,
        "variant": vehicle_variant(vehicle.status),
        "odoKm": vehicle.odo_km,
        "fuelLevelPercent": vehicle.fuel_level_percent,
        "driverId": vehicle.driver_id,
    }


def driver_to_json(driver) -> dict:
    return {
        "id": driver.id,
        "name": driver.name,
        "contact": driver.contact,
        "licenseNumber": driver.license_number,
        "status": driver.status.value,
        "avatar": driver.avatar,
    }


def vehicle_summary_to_json(summary, tz) -> dict:
    """Vehicles list row: the vehicle plus driver name, last fill and next service."""
    data = vehicle_to_json(summary.vehicle)
    data["driverName"] = summary.driver.name if summary.driver else None
    data["lastFuel"] = summary.last_fuel.astimezone(tz).isoformat() if summary.last_fuel else None
    data["nextService"] = (
        ticket_to_json(summary.next_service) if summary.next_service else None
    )
    return data


def driver_summary_to_json(summary, tz) -> dict:
    data = driver_to_json(summary.driver)
    data["vehicleId"] = summary.vehicle.id if summary.vehicle else None
    data["fleet"] = summary.vehicle.fleet if summary.vehicle else None
    data["lastSubmission"] = (
        summary.last_submission.astimezone(tz).isoformat() if summary.last_submission else None
    )
    data["flagCount"] = summary.flag_count
    data["flags"] = [f.value for f in summary.flags]
    return data


def alert_to_json(alert) -> dict:
    return {
        "id": alert.id,
        "type": alert.category.value,
        "title": alert.title,
        "subtitle": alert.subtitle,
        "timestamp": alert.timestamp.isoformat(),
        "href": alert.target,
    }


# =============================================================================
# Request helpers
# =============================================================================


def get_store() -> EntityStore:
    return current_app.config["FLEET_STORE"]


def get_data_file():
    """Dataset file that mutations are written back to, if any."""
    return current_app.config.get("FLEET_DATA")


def now() -> datetime:
    return datetime.now(get_store().settings.tz)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Expected a JSON object body")
    return data


def require(data: dict, key: str):
    if data.get(key) is None:
        raise BadRequest(f"Missing field '{key}'")
    return data[key]


def parse_date_arg(value):
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise BadRequest(f"Invalid date '{value}' (expected YYYY-MM-DD)") from None


def filter_state_from_args(args) -> ReportFilterState:
    """Report filter state from ?start=&end=&fleet=&vehicle=&station=."""
    store = get_store()
    today = now().date()
    state = ReportFilterState(today=today, tz=store.settings.tz)
    start = parse_date_arg(args.get("start"))
    end = parse_date_arg(args.get("end"))
    if start or end:
        end = end or today
        start = start or end - relativedelta(days=DEFAULT_RANGE_DAYS - 1)
        state.set_date_range((start, end))
    for name in ("fleet", "vehicle", "station"):
        state.set_filter(name, args.get(name, "all"))
    return state


# =============================================================================
# Error handlers
# =============================================================================


def error_response(error: Exception, status: int):
    return jsonify({"error": type(error).__name__, "message": str(error)}), status


@api.errorhandler(UnknownEntity)
def handle_unknown_entity(e):
    return error_response(e, 404)


@api.errorhandler(InvalidStatusTransition)
def handle_invalid_transition(e):
    return error_response(e, 409)


@api.errorhandler(InvalidOdometerReading)
def handle_invalid_odometer(e):
    return error_response(e, 422)


@api.errorhandler(FleetError)
def handle_fleet_error(e):
    return error_response(e, 400)


@api.errorhandler(ValueError)
def handle_value_error(e):
    return error_response(e, 400)


@api.errorhandler(BadRequest)
def handle_bad_request(e):
    return jsonify({"error": "BadRequest", "message": e.description}), 400


# =============================================================================
# Dashboard
# =============================================================================


@api.route("/dashboard")
def dashboard():
    """
    Status cards for today plus the fuel charts for ?start=&end=.

    The chart range defaults to the last 14 days; dailyFuel is a list of
    [date, liters] pairs ascending by date.
    """
    store = get_store()
    tz = store.settings.tz
    today = now().date()
    entries = aggregation.filter_entries(store.fuel_entries, start=today, end=today, tz=tz)
    totals = aggregation.fuel_log_totals(entries)
    counts = aggregation.vehicle_status_counts(store.vehicles)

    state = filter_state_from_args(request.args)
    start, end = state.date_range
    in_range = state.apply(store.fuel_entries)
    return jsonify(
        {
            "date": today.isoformat(),
            "startDate": start.isoformat(),
            "endDate": end.isoformat(),
            "dailyFuel": [
                [day.isoformat(), aggregation.round_amount(liters)]
                for day, liters in aggregation.daily_totals(in_range, tz)
            ],
            "costByStation": {
                station: aggregation.round_amount(cost)
                for station, cost in aggregation.cost_by_station(in_range).items()
            },
            "vehicles": {
                status.value: {"count": n, "variant": vehicle_variant(status)}
                for status, n in counts.items()
            },
            "fuelTodayL": aggregation.round_amount(totals.liters),
            "odoDeltaTodayKm": aggregation.round_amount(totals.odo_delta_km),
            "queue": store.queue_counts(),
        }
    )


@api.route("/alerts")
def alerts():
    store = get_store()
    settings = store.settings
    feed = select_alerts(
        store.fuel_entries,
        store.tickets,
        now(),
        lookahead_days=settings.alert_lookahead_days,
        limit=settings.alert_limit,
        tz=settings.tz,
    )
    return jsonify([alert_to_json(a) for a in feed])


# =============================================================================
# Fuel queue
# =============================================================================


@api.route("/fuel-entries", methods=["GET"])
def list_fuel_entries():
    store = get_store()
    tab = request.args.get("tab", "all")
    entries = sorted(store.queue(tab), key=lambda e: e.ts, reverse=True)
    return jsonify(
        {
            "tab": tab,
            "counts": store.queue_counts(),
            "entries": [entry_to_json(e, store.settings.tz) for e in entries],
        }
    )


@api.route("/fuel-entries", methods=["POST"])
def submit_fuel_entry():
    """Record a fuel/odometer submission from a driver."""
    store = get_store()
    data = json_body()
    ts = date_parser.isoparse(data["ts"]) if data.get("ts") else now()
    try:
        fuel_l = float(require(data, "fuelL"))
        odo_km = float(require(data, "odoKm"))
        ocr_confidence = float(data.get("ocrConfidence", 100))
        price_per_l = float(data["pricePerL"]) if data.get("pricePerL") is not None else None
    except (TypeError, ValueError):
        raise BadRequest("fuelL, odoKm, ocrConfidence and pricePerL must be numbers") from None

    entry = store.submit_fuel_entry(
        vehicle_id=require(data, "vehicleId"),
        fuel_l=fuel_l,
        odo_km=odo_km,
        ocr_confidence=ocr_confidence,
        station=require(data, "station"),
        ts=ts,
        driver_id=data.get("driverId"),
        price_per_l=price_per_l,
    )
    if get_data_file():
        save_fuel_entry(get_data_file(), entry)
    return jsonify(entry_to_json(entry, store.settings.tz)), 201


@api.route("/fuel-entries/<entry_id>/approve", methods=["POST"])
def approve_fuel_entry(entry_id: str):
    store = get_store()
    entry = store.approve_entry(entry_id)
    if get_data_file():
        update_entry_status(get_data_file(), entry.id, entry.status)
    return jsonify(entry_to_json(entry, store.settings.tz))


@api.route("/fuel-entries/<entry_id>/reject", methods=["POST"])
def reject_fuel_entry(entry_id: str):
    store = get_store()
    entry = store.reject_entry(entry_id)
    if get_data_file():
        update_entry_status(get_data_file(), entry.id, entry.status)
    return jsonify(entry_to_json(entry, store.settings.tz))


# =============================================================================
# Maintenance
# =============================================================================


@api.route("/tickets", methods=["GET"])
def list_tickets():
    """Maintenance board columns in workflow order, under ?fleet=&vehicle=&priority=&vendor=."""
    store = get_store()
    priority = request.args.get("priority", "all")
    if priority != "all":
        Priority(priority)
    tickets = store.filter_tickets(
        fleet=request.args.get("fleet", "all"),
        vehicle=request.args.get("vehicle", "all"),
        priority=priority,
        vendor=request.args.get("vendor", "all"),
    )
    board = store.tickets_by_status(tickets)
    return jsonify(
        [
            {
                "status": status.value,
                "variant": ticket_variant(status),
                "tickets": [ticket_to_json(t) for t in tickets],
            }
            for status, tickets in board.items()
        ]
    )


@api.route("/tickets", methods=["POST"])
def create_ticket():
    store = get_store()
    data = json_body()
    try:
        ticket = store.create_ticket(
            vehicle_id=require(data, "vehicleId"),
            type=WorkType(require(data, "type")),
            priority=Priority(require(data, "priority")),
            due_date=date.fromisoformat(require(data, "dueDate")),
            vendor=data.get("vendor", ""),
            est_cost=float(data.get("estCost", 0)),
            notes=data.get("notes", ""),
        )
    except TypeError:
        raise BadRequest("Invalid ticket fields") from None
    if get_data_file():
        save_ticket(get_data_file(), ticket)
    return jsonify(ticket_to_json(ticket)), 201


@api.route("/tickets/<ticket_id>/status", methods=["POST"])
def advance_ticket(ticket_id: str):
    store = get_store()
    target = TicketStatus(require(json_body(), "status"))
    ticket = store.advance_ticket(ticket_id, target)
    if get_data_file():
        save_ticket(get_data_file(), ticket)
    return jsonify(ticket_to_json(ticket))


# JSON key -> (ticket attribute, parser)
TICKET_FIELDS = {
    "type": ("type", WorkType),
    "priority": ("priority", Priority),
    "dueDate": ("due_date", date.fromisoformat),
    "vendor": ("vendor", str),
    "estCost": ("est_cost", float),
    "actualCost": ("actual_cost", float),
    "notes": ("notes", str),
}


@api.route("/tickets/<ticket_id>", methods=["POST"])
def update_ticket(ticket_id: str):
    """Edit work order details; only the fields present in the body change."""
    store = get_store()
    data = json_body()
    changes = {}
    try:
        for key, (name, parse) in TICKET_FIELDS.items():
            if key not in data:
                continue
            if data[key] is None and name == "actual_cost":
                changes[name] = None
            else:
                changes[name] = parse(data[key])
    except TypeError:
        raise BadRequest("Invalid ticket fields") from None
    if not changes:
        raise BadRequest(f"Expected at least one of {', '.join(TICKET_FIELDS)}")
    ticket = store.update_ticket(ticket_id, **changes)
    if get_data_file():
        save_ticket(get_data_file(), ticket)
    return jsonify(ticket_to_json(ticket))


# =============================================================================
# Vehicles and drivers
# =============================================================================


@api.route("/vehicles", methods=["GET"])
def list_vehicles():
    store = get_store()
    rows = vehicle_summaries(store, request.args.get("fleet", "all"))
    return jsonify([vehicle_summary_to_json(s, store.settings.tz) for s in rows])


@api.route("/vehicles", methods=["POST"])
def add_vehicle():
    store = get_store()
    data = json_body()
    try:
        odo_km = float(data.get("odoKm", 0))
    except TypeError:
        raise BadRequest("odoKm must be a number") from None
    vehicle = store.add_vehicle(
        plate=require(data, "plate"),
        type=require(data, "type"),
        fleet=require(data, "fleet"),
        odo_km=odo_km,
        driver_id=data.get("driverId"),
        status=VehicleStatus(data.get("status", VehicleStatus.ACTIVE.value)),
    )
    if get_data_file():
        save_vehicle(get_data_file(), vehicle)
    return jsonify(vehicle_to_json(vehicle)), 201


@api.route("/vehicles/<vehicle_id>")
def vehicle_detail(vehicle_id: str):
    """Vehicle with its fuel history and work orders (?ticketStatus= narrows the latter)."""
    store = get_store()
    tz = store.settings.tz
    vehicle = store.get_vehicle_by_id(vehicle_id)
    tickets = store.tickets_for_vehicle(vehicle.id)
    status = request.args.get("ticketStatus", "all")
    if status != "all":
        target = TicketStatus(status)
        tickets = [t for t in tickets if t.status == target]
    return jsonify(
        {
            "vehicle": vehicle_summary_to_json(vehicle_summary(store, vehicle), tz),
            "fuelEntries": [entry_to_json(e, tz) for e in store.entries_for_vehicle(vehicle.id)],
            "tickets": [ticket_to_json(t) for t in tickets],
        }
    )


@api.route("/drivers")
def list_drivers():
    store = get_store()
    return jsonify(
        [driver_summary_to_json(s, store.settings.tz) for s in driver_summaries(store)]
    )


@api.route("/drivers/<driver_id>")
def driver_detail(driver_id: str):
    store = get_store()
    tz = store.settings.tz
    driver = store.get_driver_by_id(driver_id)
    return jsonify(
        {
            "driver": driver_summary_to_json(driver_summary(store, driver), tz),
            "fuelEntries": [entry_to_json(e, tz) for e in store.entries_for_driver(driver.id)],
        }
    )


# =============================================================================
# Reports
# =============================================================================


@api.route("/reports/<name>")
def report(name: str):
    """Report rows as JSON under the query-string filters; `<name>.csv` downloads."""
    if name.endswith(".csv"):
        return report_csv(name[: -len(".csv")])
    state = filter_state_from_args(request.args)
    rows = build_report(get_store(), name, state, seed=current_app.config["FLEET_SEED"])
    start, end = state.date_range
    return jsonify(
        {
            "report": state.report_name,
            "startDate": start.isoformat(),
            "endDate": end.isoformat(),
            "filters": state.filters,
            "rows": rows,
        }
    )


def report_csv(name: str):
    """Download sink: the report as a CSV attachment."""
    state = filter_state_from_args(request.args)
    rows = build_report(get_store(), name, state, seed=current_app.config["FLEET_SEED"])
    if not rows:
        return jsonify({"error": "NoData", "message": "No data to export."}), 404
    export = build_export(
        state.export_rows, state.report_name, state.filters["fleet"], now().date()
    )
    return Response(
        export.content,
        content_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


# =============================================================================
# Assistant
# =============================================================================


def get_client():
    return current_app.config.get("FLEET_ASSISTANT")


@api.route("/anomaly-alert", methods=["POST"])
def anomaly_alert():
    """Anomaly analysis over the posted fleet data (or the sample series)."""
    data = request.get_json(silent=True) or {}
    client = get_client()
    if client is None:
        logger.warning("Anomaly detection requested but no assistant is configured")
        result = AnalysisResult(False, ANOMALY_FAILED)
    else:
        result = get_anomaly_alert(client, data.get("fleetData", ANOMALY_SAMPLE))
    return jsonify(result.to_dict())


@api.route("/report-summary", methods=["POST"])
def report_summary():
    """Short written summary of fleet performance for a date range."""
    data = json_body()
    start = parse_date_arg(require(data, "startDate"))
    end = parse_date_arg(require(data, "endDate"))
    client = get_client()
    if client is None:
        logger.warning("Report summary requested but no assistant is configured")
        result = AnalysisResult(False, SUMMARY_FAILED)
    else:
        result = get_report_summary(client, start, end, data.get("fleetPerformanceData", {}))
    return jsonify(result.to_dict())


# =============================================================================
# App factory
# =============================================================================


def create_app(store: EntityStore = None, settings: Settings = None, client=None) -> Flask:
    """
    Build the Flask app.

    Without an explicit store, FLEET_DATA names a dataset YAML to load (and
    write mutations back to); otherwise a seeded demo store is generated.
    """
    app = Flask(__name__)
    app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
    app.config["FLEET_SEED"] = int(os.environ.get("FLEET_SEED", "0"))

    data_file = os.environ.get("FLEET_DATA")
    if store is None:
        if data_file:
            store = load_store(Path(data_file))
            app.config["FLEET_DATA"] = Path(data_file)
        else:
            store = generate_store(seed=app.config["FLEET_SEED"], settings=settings)
    if settings is None:
        settings = apply_env(store.settings)
    store.settings = settings

    if client is None and settings.assistant_url:
        client = AssistantClient(settings.assistant_url)

    app.config["FLEET_STORE"] = store
    app.config["FLEET_ASSISTANT"] = client
    app.register_blueprint(api)
    logger.info(
        "Serving %d vehicles, %d fuel entries, %d tickets",
        len(store.vehicles),
        len(store.fuel_entries),
        len(store.tickets),
    )
    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    create_app().run(debug=True, host="0.0.0.0", port=5001)
