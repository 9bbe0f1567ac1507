"""Shop-local time resolution."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


@dataclass(frozen=True)
class LocalMoment:
    """An instant expressed as shop-local calendar fields."""

    date: date
    weekday: int  # 0 = Sunday .. 6 = Saturday
    minutes: int  # minutes since local midnight


def sunday_weekday(day: date) -> int:
    """Weekday index with Sunday as 0."""
    return day.isoweekday() % 7


class ShopClock:
    """Supplies "now" and converts instants into the shop's time zone.

    Conversion always goes through zoneinfo so local dates and times stay
    correct across daylight-saving transitions.
    """

    def __init__(self, tz_name: str) -> None:
        try:
            self.tz = ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {tz_name}") from e
        self.tz_name = tz_name

    def now(self) -> datetime:
        """Current instant, aware, in UTC."""
        return datetime.now(timezone.utc)

    def to_local(self, instant: datetime) -> datetime:
        if instant.tzinfo is None:
            raise ValueError("instant must be timezone-aware")
        return instant.astimezone(self.tz)

    def resolve(self, instant: datetime) -> LocalMoment:
        """Resolve an instant to (local date, weekday, minutes since midnight)."""
        local = self.to_local(instant)
        return LocalMoment(
            date=local.date(),
            weekday=sunday_weekday(local.date()),
            minutes=local.hour * 60 + local.minute,
        )

    def local_datetime(self, day: date, minutes: int) -> datetime:
        """Aware datetime for a local wall-clock time on a given date."""
        return datetime(
            day.year, day.month, day.day, minutes // 60, minutes % 60, tzinfo=self.tz
        )


class FixedClock(ShopClock):
    """A ShopClock whose "now" is set explicitly."""

    def __init__(self, tz_name: str, instant: datetime) -> None:
        super().__init__(tz_name)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def advance(self, **delta: float) -> datetime:
        """Move the clock forward by a timedelta given as keyword arguments."""
        self.instant = self.instant + timedelta(**delta)
        return self.instant
