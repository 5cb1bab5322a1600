"""Domain models for the attendance ledger."""

from dataclasses import dataclass
from typing import Literal

CheckInMethod = Literal["QR_SCAN", "MANUAL"]

QR_SCAN: CheckInMethod = "QR_SCAN"
MANUAL: CheckInMethod = "MANUAL"
CHECK_IN_METHODS: frozenset[str] = frozenset({QR_SCAN, MANUAL})

UNKNOWN_ATTENDEE = "Unknown Attendee"


@dataclass(frozen=True)
class Attendee:
    """A registered client who can check in to sessions."""

    id: str
    name: str
    email: str
    qr_code: str
    created_at: str


@dataclass(frozen=True)
class Session:
    """A scheduled session, a recurring parent or one of its instances."""

    id: str
    title: str
    date: str
    time: str
    created_at: str
    is_recurring: bool = False
    recurring_weeks: int | None = None
    recurring_interval: int | None = None
    parent_session_id: str | None = None


@dataclass(frozen=True)
class AttendanceRecord:
    """A single check-in written to the attendance table."""

    id: str
    session_id: str
    attendee_id: str
    attendee_name: str
    timestamp: str
    method: CheckInMethod


@dataclass(frozen=True)
class AdmissionResult:
    """Outcome of a check-in attempt."""

    admitted: bool
    record: AttendanceRecord
    already_recorded: bool = False


@dataclass(frozen=True)
class SessionCreation:
    """A created session with the instances generated for it."""

    session: Session
    instances: list[Session]
    warning: str | None = None
