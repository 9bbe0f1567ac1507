"""Hours Scheduler - open/closed status from weekly hours and closures.

All calendar fields are taken from the instant converted into the shop's
time zone, so day boundaries follow local wall-clock time.
"""

from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta

from .clock import DAY_NAMES, ShopClock, sunday_weekday
from .models.schedule import Closure, ScheduleStatus, WeeklyHourRule

LOOKAHEAD_DAYS = 7
CLOSED_TODAY_TEXT = "Closed today"
CLOSED_TEXT = "Closed"


def minutes_to_text(minutes: int) -> str:
    """Format minutes since midnight as "H:MM AM/PM"."""
    h24, m = divmod(minutes, 60)
    h12 = h24 % 12 or 12
    ampm = "PM" if h24 >= 12 else "AM"
    return f"{h12}:{m:02d} {ampm}"


def _rules_by_day(
    hours: Iterable[WeeklyHourRule] | Mapping[int, WeeklyHourRule],
) -> dict[int, WeeklyHourRule]:
    if isinstance(hours, Mapping):
        return dict(hours)
    return {rule.day_of_week: rule for rule in hours}


def _closed_dates(closures: Iterable[Closure]) -> set[date]:
    # Closures with is_closed=False do not close the shop.
    return {c.date for c in closures if c.is_closed}


def _as_clock(clock: ShopClock | str) -> ShopClock:
    return clock if isinstance(clock, ShopClock) else ShopClock(clock)


def _open_window(
    rules: dict[int, WeeklyHourRule], closed: set[date], day: date, weekday: int
) -> tuple[int, int] | None:
    if day in closed:
        return None
    rule = rules.get(weekday)
    if rule is None:
        return None
    return rule.window


def _next_open_day(
    rules: dict[int, WeeklyHourRule], closed: set[date], today: date
) -> tuple[int, date, WeeklyHourRule] | None:
    """First day after today, within the lookahead, with an open rule."""
    for offset in range(1, LOOKAHEAD_DAYS + 1):
        day = today + timedelta(days=offset)
        if day in closed:
            continue
        weekday = sunday_weekday(day)
        rule = rules.get(weekday)
        if rule is not None and rule.window is not None:
            return offset, day, rule
    return None


def _next_open_text(
    rules: dict[int, WeeklyHourRule],
    closed: set[date],
    today: date,
    weekday: int,
    now_minutes: int,
) -> str:
    window = _open_window(rules, closed, today, weekday)
    if window is not None and now_minutes < window[1]:
        # Still time left today, even if not yet open.
        return ""

    found = _next_open_day(rules, closed, today)
    if found is None:
        return CLOSED_TEXT
    offset, day, rule = found
    label = "tomorrow" if offset == 1 else DAY_NAMES[sunday_weekday(day)].lower()
    return f"Opens {label} at {minutes_to_text(rule.window[0])}"


def compute_schedule_status(
    hours: Iterable[WeeklyHourRule] | Mapping[int, WeeklyHourRule],
    closures: Iterable[Closure],
    now: datetime,
    clock: ShopClock | str,
) -> ScheduleStatus:
    """Compute whether the shop is open at ``now`` and the display texts.

    Args:
        hours: Weekly rules, either a list or a mapping keyed by weekday.
        closures: Date-specific closures; any closed entry for a date wins.
        now: An aware instant.
        clock: A ShopClock or an IANA time zone name for the shop.

    Returns:
        ScheduleStatus with is_open_now, today_hours_text and next_open_text.
    """
    clock = _as_clock(clock)
    moment = clock.resolve(now)
    rules = _rules_by_day(hours)
    closed = _closed_dates(closures)

    window = _open_window(rules, closed, moment.date, moment.weekday)
    if window is None:
        return ScheduleStatus(
            is_open_now=False,
            today_hours_text=CLOSED_TODAY_TEXT,
            next_open_text=_next_open_text(
                rules, closed, moment.date, moment.weekday, moment.minutes
            ),
        )

    start, end = window
    open_now = start <= moment.minutes < end
    return ScheduleStatus(
        is_open_now=open_now,
        today_hours_text=f"Open today {minutes_to_text(start)} – {minutes_to_text(end)}",
        next_open_text="" if open_now else _next_open_text(
            rules, closed, moment.date, moment.weekday, moment.minutes
        ),
    )


def next_open_at(
    hours: Iterable[WeeklyHourRule] | Mapping[int, WeeklyHourRule],
    closures: Iterable[Closure],
    now: datetime,
    clock: ShopClock | str,
) -> datetime | None:
    """The next moment the shop opens, strictly after ``now``.

    Returns today's opening time if it is still ahead, otherwise the start of
    the first open day within the lookahead, or None if there is none. The
    result is an aware datetime in the shop's time zone.
    """
    clock = _as_clock(clock)
    moment = clock.resolve(now)
    rules = _rules_by_day(hours)
    closed = _closed_dates(closures)

    window = _open_window(rules, closed, moment.date, moment.weekday)
    if window is not None and moment.minutes < window[0]:
        return clock.local_datetime(moment.date, window[0])

    found = _next_open_day(rules, closed, moment.date)
    if found is None:
        return None
    _, day, rule = found
    return clock.local_datetime(day, rule.window[0])


def is_open_at(
    hours: Iterable[WeeklyHourRule] | Mapping[int, WeeklyHourRule],
    closures: Iterable[Closure],
    now: datetime,
    clock: ShopClock | str,
) -> bool:
    return compute_schedule_status(hours, closures, now, clock).is_open_now
