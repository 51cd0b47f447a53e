#!/usr/bin/env python3
"""Validate fleet dataset YAML files against the schema."""
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def check_references(data: dict) -> list[str]:
    """Check that ids referenced across collections exist. Returns list of errors."""
    errors = []
    fleets = {f["name"] for f in data.get("fleets") or []}
    stations = {s["name"] for s in data.get("stations") or []}
    drivers = {d["id"] for d in data.get("drivers") or []}
    vehicles = {v["id"] for v in data.get("vehicles") or []}

    for v in data.get("vehicles") or []:
        if v["fleet"] not in fleets:
            errors.append(f"Vehicle {v['id']}: unknown fleet '{v['fleet']}'")
        if v.get("driverId") and v["driverId"] not in drivers:
            errors.append(f"Vehicle {v['id']}: unknown driver '{v['driverId']}'")
    for t in data.get("tickets") or []:
        if t["vehicleId"] not in vehicles:
            errors.append(f"Ticket {t['id']}: unknown vehicle '{t['vehicleId']}'")
    for e in data.get("fuelEntries") or []:
        if e["vehicleId"] not in vehicles:
            errors.append(f"Fuel entry {e['id']}: unknown vehicle '{e['vehicleId']}'")
        if e["station"] not in stations:
            errors.append(f"Fuel entry {e['id']}: unknown station '{e['station']}'")
    return errors


def validate_dataset_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single dataset YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=data, schema=schema)
        errors.extend(check_references(data))
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def main():
    """Validate all dataset YAML files in the data/ directory."""
    schema = load_schema()
    data_dir = Path(__file__).parent / "data"

    if not data_dir.exists():
        print(f"Error: data directory not found: {data_dir}")
        return 1

    yaml_files = list(data_dir.glob("*.yaml")) + list(data_dir.glob("*.yml"))

    if not yaml_files:
        print(f"Warning: No YAML files found in {data_dir}")
        return 0

    all_valid = True
    for filepath in sorted(yaml_files):
        errors = validate_dataset_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
