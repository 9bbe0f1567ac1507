"""Operator management of weekly hours and date closures."""

import json
import re
from datetime import date, timedelta
from pathlib import Path

from pydantic import ValidationError

from .audit import AuditLogger, record
from .errors import InvalidInput
from .models.schedule import Closure, HourRuleInput, HoursOverview, WeeklyHourRule
from .store import WaitlistStore
from .validators.shop import validate_shop_document

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
CLOSURE_WINDOW_DAYS = 30


def parse_date(value: str | date) -> date:
    """Parse a YYYY-MM-DD string, raising InvalidInput on anything else."""
    if isinstance(value, date):
        return value
    if not value:
        raise InvalidInput("date is required")
    if not DATE_RE.match(value):
        raise InvalidInput("date must be in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidInput(f"date is not a real date: {value}") from e


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    field = ".".join(str(p) for p in err["loc"])
    message = err["msg"].removeprefix("Value error, ")
    return f"{field}: {message}" if field else message


class ScheduleAdmin:
    """Edits the hours and closures a location's status is computed from."""

    def __init__(self, store: WaitlistStore, audit: AuditLogger | None = None) -> None:
        self.store = store
        self.audit = audit

    def set_weekly_hours(
        self,
        location_id: str,
        day_of_week: int,
        is_open: bool,
        start_time: str | None = None,
        end_time: str | None = None,
    ) -> WeeklyHourRule:
        """Replace the rule for one weekday.

        Raises:
            InvalidInput: Bad weekday, missing or malformed times, or end <= start.
        """
        if isinstance(day_of_week, bool) or not isinstance(day_of_week, int) or not 0 <= day_of_week <= 6:
            raise InvalidInput("day_of_week must be 0-6")
        try:
            checked = HourRuleInput(
                day_of_week=day_of_week,
                is_open=is_open,
                start_time=start_time,
                end_time=end_time,
            )
        except ValidationError as e:
            raise InvalidInput(_first_error(e)) from e

        rule = WeeklyHourRule(**checked.model_dump())
        with self.store.transaction(location_id) as loc:
            loc.hours[day_of_week] = rule

        record(
            self.audit, "HOURS", location_id,
            day=day_of_week, open=is_open, start=rule.start_time, end=rule.end_time,
        )
        return rule

    def set_closure(
        self,
        location_id: str,
        closure_date: str | date,
        is_closed: bool = True,
        reason: str | None = None,
    ) -> Closure | None:
        """Close the shop on a date, or reopen it with is_closed=False.

        Returns:
            The stored closure, or None when the date was reopened.
        """
        day = parse_date(closure_date)
        closure = Closure(date=day, is_closed=True, reason=reason) if is_closed else None

        with self.store.transaction(location_id) as loc:
            loc.closures = [c for c in loc.closures if c.date != day]
            if closure is not None:
                loc.closures.append(closure)

        record(
            self.audit, "CLOSURE", location_id,
            date=day.isoformat(), closed=is_closed, reason=reason,
        )
        return closure

    def get_hours(self, location_id: str, today: date) -> HoursOverview:
        """Weekly rules plus closed dates in the next 30 days."""
        closures = self.store.get_closures(
            location_id, today, today + timedelta(days=CLOSURE_WINDOW_DAYS)
        )
        return HoursOverview(
            hours=self.store.get_hours(location_id),
            closures=[c for c in closures if c.is_closed],
        )

    def load_shop_file(self, location_id: str, path: Path) -> tuple[bool, list[str]]:
        """Import hours and closures from a JSON document.

        The document is validated first; nothing is stored unless it is valid.
        """
        try:
            with open(path) as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            return (False, [f"Cannot read {path}: {e}"])

        ok, errors = validate_shop_document(document)
        if not ok:
            return (False, errors)

        for rule in document["hours"]:
            self.set_weekly_hours(
                location_id,
                rule["day_of_week"],
                rule["is_open"],
                rule.get("start_time"),
                rule.get("end_time"),
            )
        for closure in document.get("closures", []):
            self.set_closure(
                location_id,
                closure["date"],
                closure.get("is_closed", True),
                closure.get("reason"),
            )
        return (True, [])
