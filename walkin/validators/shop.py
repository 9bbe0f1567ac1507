"""Shop hours document validation against JSON Schema."""

import json
from datetime import date
from pathlib import Path

import jsonschema

from ..models.schedule import time_to_minutes

# Path to the shop hours schema
SCHEMA_PATH = Path(__file__).parent.parent / "contracts" / "shop_schema.json"


def _load_schema() -> dict:
    """Load the shop hours JSON schema."""
    with open(SCHEMA_PATH) as f:
        return json.load(f)


def validate_shop_document(document: dict) -> tuple[bool, list[str]]:
    """
    Validate a shop hours document against the schema and the rules the
    schema cannot express.

    Args:
        document: The parsed JSON document.

    Returns:
        A tuple of (is_valid, list_of_errors).
        If valid, errors list is empty.
    """
    errors: list[str] = []

    try:
        schema = _load_schema()
        jsonschema.validate(instance=document, schema=schema)
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        errors.append(f"Schema validation error at {location}: {e.message}")
        return (False, errors)
    except FileNotFoundError:
        errors.append(f"Schema file not found: {SCHEMA_PATH}")
        return (False, errors)
    except json.JSONDecodeError as e:
        errors.append(f"Schema JSON decode error: {e}")
        return (False, errors)

    seen_days: set[int] = set()
    for rule in document.get("hours", []):
        day = rule["day_of_week"]
        if day in seen_days:
            errors.append(f"day_of_week {day} appears more than once")
        seen_days.add(day)

        if not rule["is_open"]:
            continue
        start, end = rule.get("start_time"), rule.get("end_time")
        if not start or not end:
            errors.append(f"day_of_week {day}: start_time and end_time are required when open")
        elif time_to_minutes(end) <= time_to_minutes(start):
            errors.append(f"day_of_week {day}: end_time must be after start_time")

    for closure in document.get("closures", []):
        try:
            date.fromisoformat(closure["date"])
        except ValueError:
            errors.append(f"closure date is not a real date: {closure['date']}")

    return (len(errors) == 0, errors)
