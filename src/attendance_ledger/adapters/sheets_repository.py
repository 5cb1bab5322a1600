"""Spreadsheet-backed entity repository."""

import secrets
import string
from dataclasses import dataclass
from uuid import uuid4

from attendance_ledger.adapters.sheet_rows import (
    attendance_from_row,
    attendance_to_row,
    attendee_from_row,
    attendee_to_row,
    is_blank,
    session_from_row,
    session_to_row,
)
from attendance_ledger.adapters.sheets_client import (
    ATTENDANCE_TABLE,
    ATTENDEES_TABLE,
    SESSIONS_TABLE,
    SheetStore,
)
from attendance_ledger.domain.models import Attendee, AttendanceRecord, Session
from attendance_ledger.services.attendees import AttendeeRepository
from attendance_ledger.services.ledger import AttendanceRepository
from attendance_ledger.services.sessions import SessionRepository

_QR_ALPHABET = string.ascii_uppercase + string.digits
_QR_LENGTH = 8


def new_id(prefix: str) -> str:
    """Return a unique id such as ``att_3f2c...``."""
    return f"{prefix}_{uuid4().hex}"


@dataclass
class SheetsEntityRepository(
    AttendeeRepository, SessionRepository, AttendanceRepository
):
    """Maps spreadsheet rows to entities and owns id generation."""

    store: SheetStore

    async def list_attendees(self) -> list[Attendee]:
        """Return attendees, skipping the header and cleared rows."""
        rows = await self.store.list_rows(ATTENDEES_TABLE)
        return [attendee_from_row(row) for row in rows[1:] if not is_blank(row)]

    async def append_attendee(self, attendee: Attendee) -> None:
        """Append an attendee row."""
        await self.store.append_rows(ATTENDEES_TABLE, [attendee_to_row(attendee)])

    async def update_attendee(self, attendee: Attendee) -> bool:
        """Rewrite the attendee row with a matching id."""
        index = await self._find_index(ATTENDEES_TABLE, attendee.id)
        if index is None:
            return False
        await self.store.update_row(ATTENDEES_TABLE, index, attendee_to_row(attendee))
        return True

    async def list_sessions(self) -> list[Session]:
        """Return sessions, skipping the header and cleared rows."""
        rows = await self.store.list_rows(SESSIONS_TABLE)
        return [session_from_row(row) for row in rows[1:] if not is_blank(row)]

    async def append_sessions(self, sessions: list[Session]) -> None:
        """Append session rows in one batched call."""
        await self.store.append_rows(
            SESSIONS_TABLE, [session_to_row(session) for session in sessions]
        )

    async def clear_session(self, session_id: str) -> bool:
        """Clear the session row with a matching id."""
        index = await self._find_index(SESSIONS_TABLE, session_id)
        if index is None:
            return False
        await self.store.clear_row(SESSIONS_TABLE, index)
        return True

    async def list_attendance(self) -> list[AttendanceRecord]:
        """Return attendance records, skipping the header and cleared rows."""
        rows = await self.store.list_rows(ATTENDANCE_TABLE)
        return [attendance_from_row(row) for row in rows[1:] if not is_blank(row)]

    async def append_attendance(self, record: AttendanceRecord) -> None:
        """Append one attendance row."""
        await self.store.append_rows(ATTENDANCE_TABLE, [attendance_to_row(record)])

    def new_attendee_id(self) -> str:
        return new_id("attendee")

    def new_session_id(self) -> str:
        return new_id("session")

    def new_attendance_id(self) -> str:
        return new_id("att")

    def new_qr_code(self) -> str:
        suffix = "".join(secrets.choice(_QR_ALPHABET) for _ in range(_QR_LENGTH))
        return f"QR{suffix}"

    async def _find_index(self, table: str, entity_id: str) -> int | None:
        rows = await self.store.list_rows(table)
        for index, row in enumerate(rows):
            if index == 0 or is_blank(row):
                continue
            if row[0] == entity_id:
                return index
        return None
