#!/usr/bin/env python3
"""Tests for fleetctl CLI formatting, table helpers and commands."""

import shutil
from datetime import date

import pytest

from conftest import UTC
from fleet import (
    EntryStatus,
    Flag,
    MaintenanceTicket,
    Priority,
    TicketStatus,
    WorkType,
    load_store,
)
from fleetctl import (
    format_cost,
    format_flags,
    format_km,
    format_liters,
    main,
    make_queue_table,
    make_ticket_table,
    truncate,
)


@pytest.fixture
def dataset(tmp_path, sample_data_path):
    path = tmp_path / "fleet.yaml"
    shutil.copy(sample_data_path, path)
    return path


class TestFormatting:
    """Tests for format helpers."""

    def test_format_liters(self):
        assert format_liters(42) == "42.00 L"
        assert format_liters(None) == "-"

    def test_format_km(self):
        assert format_km(25678) == "25,678"
        assert format_km(None) == "-"

    def test_format_cost(self):
        assert format_cost(1200) == "1,200.00"
        assert format_cost(None) == "-"

    def test_format_flags(self):
        assert format_flags((Flag.ODO_DELTA_HIGH, Flag.LOW_OCR)) == "odo-delta-high, low-ocr"
        assert format_flags(()) == "-"

    def test_truncate(self):
        assert truncate("short") == "short"
        assert truncate("a" * 40, 10) == "aaaaaaa..."
        assert truncate(None) == "-"
        assert truncate("") == "-"


class TestTables:
    """Tests for table row builders."""

    def test_queue_table(self, store):
        rows = make_queue_table(store.fuel_entries[1:2], UTC)
        assert rows == [
            [
                "FE2",
                "2025-10-25 09:30",
                "V002",
                "Shell",
                "65.00 L",
                "5,000",
                "420",
                "100",
                "odo-delta-high, fuel-over-max",
                "Submitted",
            ]
        ]

    def test_ticket_table(self):
        ticket = MaintenanceTicket("M001", "V090", WorkType.REPAIR, Priority.HIGH,
                                   date(2025, 10, 28), notes="Engine overheating issue.")
        assert make_ticket_table([ticket]) == [
            ["M001", "V090", "Repair", "High", "2025-10-28", "-", "0.00",
             "Engine overheating issue."]
        ]


class TestCommands:
    """Tests for main() against a copy of the sample dataset."""

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.yaml"), "queue"]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_queue_flagged(self, dataset, capsys):
        assert main([str(dataset), "queue", "--tab", "flagged"]) == 0
        out = capsys.readouterr().out
        assert "Flagged (2)" in out
        assert "FE17610000000001" in out
        assert "FE17610000000000" not in out

    def test_approve_writes_back(self, dataset, capsys):
        assert main([str(dataset), "approve", "FE17610000000002"]) == 0
        assert "Approved" in capsys.readouterr().out
        entry = load_store(dataset).get_entry_by_id("FE17610000000002")
        assert entry.status == EntryStatus.APPROVED

    def test_approve_twice_fails(self, dataset, capsys):
        assert main([str(dataset), "approve", "FE17610000000000"]) == 1
        assert "Error: Cannot move fuel entry from Approved" in capsys.readouterr().out

    def test_unknown_entry(self, dataset, capsys):
        assert main([str(dataset), "reject", "FE0"]) == 1
        assert "Error: Unknown fuel entry 'FE0'" in capsys.readouterr().out

    def test_submit_saves(self, dataset, capsys):
        code = main([
            str(dataset), "submit", "V001", "--fuel", "45", "--odo", "26200",
            "--ocr", "97", "--station", "ENOC", "--at", "2025-10-27T08:00:00+04:00",
        ])
        assert code == 0
        out = capsys.readouterr().out
        assert "odo-delta-high" in out
        store = load_store(dataset)
        assert len(store.fuel_entries) == 4
        assert store.get_vehicle_by_id("V001").odo_km == 26200

    def test_submit_dry_run(self, dataset, capsys):
        code = main([
            str(dataset), "submit", "V001", "--fuel", "45", "--odo", "25800",
            "--station", "ENOC", "--dry-run",
        ])
        assert code == 0
        assert "dry run" in capsys.readouterr().out
        assert len(load_store(dataset).fuel_entries) == 3

    def test_submit_backwards_odometer(self, dataset, capsys):
        code = main([
            str(dataset), "submit", "V001", "--fuel", "45", "--odo", "100", "--station", "ENOC",
        ])
        assert code == 1
        assert "Error: Odometer reading" in capsys.readouterr().out
        assert len(load_store(dataset).fuel_entries) == 3

    def test_tickets(self, dataset, capsys):
        assert main([str(dataset), "tickets"]) == 0
        out = capsys.readouterr().out
        assert "SCHEDULED (3):" in out
        assert "IN PROGRESS (1):" in out
        assert "No tickets in this status." in out

    def test_advance_writes_back(self, dataset, capsys):
        assert main([str(dataset), "advance", "M002", "In Progress"]) == 0
        ticket = load_store(dataset).get_ticket_by_id("M002")
        assert ticket.status == TicketStatus.IN_PROGRESS

    def test_advance_illegal(self, dataset, capsys):
        assert main([str(dataset), "advance", "M002", "Completed"]) == 1
        assert "Error: Cannot move ticket" in capsys.readouterr().out

    def test_report_export(self, dataset, tmp_path, capsys):
        out_dir = tmp_path / "out"
        code = main([
            str(dataset), "report", "daily-log", "--from", "2025-10-20", "--to", "2025-10-26",
            "--export", str(out_dir),
        ])
        assert code == 0
        files = list(out_dir.glob("daily_fuel_log_*_all.csv"))
        assert len(files) == 1
        lines = files[0].read_text().splitlines()
        assert lines[0] == "Issue Date/Time,Vehicle Plate,Odometer,Delta Odometer,Quantity (L),Station"
        assert lines[-1].startswith("Totals,")
        assert len(lines) == 5

    def test_report_no_results(self, dataset, capsys):
        code = main([str(dataset), "report", "consumption", "--from", "2020-01-01",
                     "--to", "2020-01-31", "--fleet", "North Fleet"])
        assert code == 0
        assert "0.00" in capsys.readouterr().out

    def test_report_bad_range(self, dataset, capsys):
        code = main([str(dataset), "report", "daily-log", "--from", "2025-10-26",
                     "--to", "2025-10-01"])
        assert code == 1
        assert "Error:" in capsys.readouterr().out

    def test_dashboard(self, dataset, capsys):
        assert main([str(dataset), "dashboard", "--from", "2025-10-24", "--to", "2025-10-26"]) == 0
        out = capsys.readouterr().out
        assert "131.50 L" in out
        assert "Flagged for review: 2" in out

    def test_alerts_with_seed(self, capsys):
        assert main(["--seed", "3", "alerts", "--now", "2025-10-26T12:00:00+04:00"]) == 0
        assert capsys.readouterr().out

    def test_alerts_from_dataset(self, dataset, capsys):
        assert main([str(dataset), "alerts", "--now", "2025-10-27T08:00:00+04:00"]) == 0
        out = capsys.readouterr().out
        assert "Repair Due" in out
        assert "/fuel-queue?entryId=FE17610000000002" in out

    def test_dashboard_charts(self, dataset, capsys):
        assert main([str(dataset), "dashboard", "--from", "2025-10-24", "--to", "2025-10-26"]) == 0
        out = capsys.readouterr().out
        assert "Daily fuel:" in out
        for day, liters in [("2025-10-24", "42.00 L"), ("2025-10-25", "38.50 L"),
                            ("2025-10-26", "51.00 L")]:
            assert any(day in line and liters in line for line in out.splitlines())
        assert "Cost by station:" in out
        assert any("ENOC" in line and "10.04" in line for line in out.splitlines())
        assert any("Shell" in line and "9.28" in line for line in out.splitlines())

    def test_dashboard_empty_period_has_no_charts(self, dataset, capsys):
        assert main([str(dataset), "dashboard", "--from", "2020-01-01", "--to", "2020-01-02"]) == 0
        assert "Daily fuel:" not in capsys.readouterr().out

    def test_tickets_filtered(self, dataset, capsys):
        assert main([str(dataset), "tickets", "--fleet", "North Fleet", "--priority", "High"]) == 0
        out = capsys.readouterr().out
        assert "SCHEDULED (1):" in out
        assert "M003" in out
        assert "M002" not in out
        assert "IN PROGRESS (0):" in out

    def test_tickets_by_vendor(self, dataset, capsys):
        assert main([str(dataset), "tickets", "--vendor", "City Garage"]) == 0
        out = capsys.readouterr().out
        assert "IN PROGRESS (1):" in out
        assert "SCHEDULED (0):" in out

    def test_edit_ticket_writes_back(self, dataset, capsys):
        code = main([str(dataset), "edit-ticket", "M002", "--priority", "High",
                     "--due", "2025-10-30", "--est-cost", "900"])
        assert code == 0
        ticket = load_store(dataset).get_ticket_by_id("M002")
        assert ticket.priority == Priority.HIGH
        assert ticket.due_date == date(2025, 10, 30)
        assert ticket.est_cost == 900
        assert ticket.status == TicketStatus.SCHEDULED

    def test_edit_ticket_nothing_to_change(self, dataset, capsys):
        assert main([str(dataset), "edit-ticket", "M002"]) == 1
        assert "Nothing to change." in capsys.readouterr().out

    def test_edit_ticket_negative_cost(self, dataset, capsys):
        assert main([str(dataset), "edit-ticket", "M002", "--est-cost", "-1"]) == 1
        assert "Error:" in capsys.readouterr().out

    def test_vehicles(self, dataset, capsys):
        assert main([str(dataset), "vehicles", "--fleet", "South Fleet"]) == 0
        out = capsys.readouterr().out
        assert "V090" in out
        assert "V020" in out
        assert "V001" not in out
        assert "2025-10-28 Repair" in out

    def test_vehicle_detail(self, dataset, capsys):
        assert main([str(dataset), "vehicle", "V001"]) == 0
        out = capsys.readouterr().out
        assert "Fuel entries (2):" in out
        assert "FE17610000000002" in out
        assert "Work orders (1):" in out
        assert "M002" in out

    def test_vehicle_detail_status_filter(self, dataset, capsys):
        assert main([str(dataset), "vehicle", "V001", "--status", "Completed"]) == 0
        assert "Work orders (0):" in capsys.readouterr().out

    def test_unknown_vehicle(self, dataset, capsys):
        assert main([str(dataset), "vehicle", "V999"]) == 1
        assert "Error: Unknown vehicle 'V999'" in capsys.readouterr().out

    def test_add_vehicle_saves(self, dataset, capsys):
        code = main([str(dataset), "add-vehicle", "E55555", "--type", "Van",
                     "--fleet", "North Fleet", "--odo", "1200", "--driver", "D002"])
        assert code == 0
        assert "Vehicle saved." in capsys.readouterr().out
        store = load_store(dataset)
        added = [v for v in store.vehicles if v.plate == "E55555"]
        assert len(added) == 1
        assert added[0].id == "V091"
        assert added[0].odo_km == 1200

    def test_add_vehicle_dry_run(self, dataset, capsys):
        code = main([str(dataset), "add-vehicle", "E55555", "--type", "Van",
                     "--fleet", "North Fleet", "--dry-run"])
        assert code == 0
        assert "dry run" in capsys.readouterr().out
        assert len(load_store(dataset).vehicles) == 5

    def test_add_vehicle_unknown_fleet(self, dataset, capsys):
        code = main([str(dataset), "add-vehicle", "E55555", "--type", "Van", "--fleet", "East Fleet"])
        assert code == 1
        assert "Error: Unknown fleet 'East Fleet'" in capsys.readouterr().out

    def test_drivers(self, dataset, capsys):
        assert main([str(dataset), "drivers"]) == 0
        out = capsys.readouterr().out
        for driver_id in ("D001", "D002", "D003", "D004", "D005"):
            assert driver_id in out
        assert "low-ocr" in out

    def test_driver_detail(self, dataset, capsys):
        assert main([str(dataset), "driver", "D001"]) == 0
        out = capsys.readouterr().out
        assert "Fuel entries (2):" in out
        assert "FE17610000000000" in out
        assert "FE17610000000001" not in out
