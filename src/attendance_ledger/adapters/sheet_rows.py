"""Positional row codecs for the spreadsheet tables.

Column order is significant and mirrors the header rows:

- Attendees: id, name, email, qrCode, createdAt
- Sessions: id, title, date, time, createdAt, isRecurring, recurringWeeks,
  recurringInterval, parentSessionId
- Attendance: id, sessionId, attendeeId, attendeeName, timestamp, method
"""

from attendance_ledger.domain.models import (
    CHECK_IN_METHODS,
    QR_SCAN,
    Attendee,
    AttendanceRecord,
    Session,
)

ATTENDEE_HEADER = ["id", "name", "email", "qrCode", "createdAt"]
SESSION_HEADER = [
    "id",
    "title",
    "date",
    "time",
    "createdAt",
    "isRecurring",
    "recurringWeeks",
    "recurringInterval",
    "parentSessionId",
]
ATTENDANCE_HEADER = [
    "id",
    "sessionId",
    "attendeeId",
    "attendeeName",
    "timestamp",
    "method",
]


def is_blank(row: list[str]) -> bool:
    """Return True for cleared rows, which have no id."""
    return not row or not str(row[0]).strip()


def attendee_from_row(row: list[str]) -> Attendee:
    cells = _pad(row, len(ATTENDEE_HEADER))
    return Attendee(
        id=cells[0],
        name=cells[1],
        email=cells[2],
        qr_code=cells[3],
        created_at=cells[4],
    )


def attendee_to_row(attendee: Attendee) -> list[str]:
    return [
        attendee.id,
        attendee.name,
        attendee.email,
        attendee.qr_code,
        attendee.created_at,
    ]


def session_from_row(row: list[str]) -> Session:
    cells = _pad(row, len(SESSION_HEADER))
    return Session(
        id=cells[0],
        title=cells[1],
        date=cells[2],
        time=cells[3],
        created_at=cells[4],
        is_recurring=cells[5].strip().lower() == "true",
        recurring_weeks=_parse_int(cells[6]),
        recurring_interval=_parse_int(cells[7]),
        parent_session_id=cells[8] or None,
    )


def session_to_row(session: Session) -> list[str]:
    return [
        session.id,
        session.title,
        session.date,
        session.time,
        session.created_at,
        "true" if session.is_recurring else "false",
        _format_int(session.recurring_weeks),
        _format_int(session.recurring_interval),
        session.parent_session_id or "",
    ]


def attendance_from_row(row: list[str]) -> AttendanceRecord:
    cells = _pad(row, len(ATTENDANCE_HEADER))
    method = cells[5].strip().upper() or QR_SCAN
    if method not in CHECK_IN_METHODS:
        method = QR_SCAN
    return AttendanceRecord(
        id=cells[0],
        session_id=cells[1],
        attendee_id=cells[2],
        attendee_name=cells[3],
        timestamp=cells[4],
        method=method,  # type: ignore[arg-type]
    )


def attendance_to_row(record: AttendanceRecord) -> list[str]:
    return [
        record.id,
        record.session_id,
        record.attendee_id,
        record.attendee_name,
        record.timestamp,
        record.method,
    ]


def _pad(row: list[str], width: int) -> list[str]:
    cells = [str(cell) if cell is not None else "" for cell in row[:width]]
    return cells + [""] * (width - len(cells))


def _parse_int(value: str) -> int | None:
    try:
        return int(value.strip())
    except ValueError:
        return None


def _format_int(value: int | None) -> str:
    return "" if value is None else str(value)
