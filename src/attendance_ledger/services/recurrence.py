"""Expansion of recurring sessions into dated instances."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from attendance_ledger.domain.errors import ValidationError
from attendance_ledger.domain.models import Session
from attendance_ledger.services.calendar import format_timestamp, utc_now

DEFAULT_INTERVAL_DAYS = 7


def parse_session_date(value: str) -> date:
    """Parse a session date given as YYYY-MM-DD or a full ISO datetime."""
    cleaned = (value or "").strip()
    try:
        return datetime.fromisoformat(cleaned).date()
    except ValueError as exc:
        raise ValidationError(f"Invalid session date: {value!r}") from exc


def effective_interval(interval: int | None) -> int:
    """Return the day interval, falling back to weekly."""
    if interval is None or interval <= 0:
        return DEFAULT_INTERVAL_DAYS
    return interval


@dataclass
class RecurringSessionExpander:
    """Generates the dated instances of a recurring parent session."""

    id_factory: Callable[[], str]
    clock: Callable[[], datetime] = utc_now

    def expand(self, parent: Session) -> list[Session]:
        """Return one instance per repetition, starting one interval after parent.

        The parent's own date is never repeated as an instance. Parents that
        are not recurring, or recur zero times, expand to nothing.
        """
        weeks = parent.recurring_weeks or 0
        if not parent.is_recurring or weeks <= 0:
            return []
        start = parse_session_date(parent.date)
        interval = effective_interval(parent.recurring_interval)
        created_at = format_timestamp(self.clock())
        return [
            Session(
                id=self.id_factory(),
                title=parent.title,
                date=(start + timedelta(days=i * interval)).isoformat(),
                time=parent.time,
                created_at=created_at,
                is_recurring=False,
                recurring_weeks=None,
                recurring_interval=None,
                parent_session_id=parent.id,
            )
            for i in range(1, weeks + 1)
        ]
