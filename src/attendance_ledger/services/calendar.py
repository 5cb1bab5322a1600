"""Calendar-day policy for same-day duplicate checks."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(tz=UTC)


def format_timestamp(moment: datetime) -> str:
    """Format a moment as UTC ISO-8601 with millisecond precision."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    text = moment.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    cleaned = value.strip()
    if not cleaned:
        return None
    try:
        parsed = datetime.fromisoformat(cleaned)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class DayBoundary:
    """Maps moments to calendar days in a fixed timezone."""

    timezone: str = "UTC"

    def day_of(self, moment: datetime) -> date:
        """Return the calendar day a moment falls on."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        return moment.astimezone(ZoneInfo(self.timezone)).date()

    def day_of_timestamp(self, value: str) -> date | None:
        """Return the calendar day of a stored timestamp, if it parses."""
        parsed = parse_timestamp(value)
        if parsed is None:
            return None
        return self.day_of(parsed)
