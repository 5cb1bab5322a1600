"""Attendance ledger: admits each check-in once per session, attendee and day."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Protocol

from attendance_ledger.domain.errors import StoreReadError, ValidationError
from attendance_ledger.domain.models import (
    CHECK_IN_METHODS,
    UNKNOWN_ATTENDEE,
    AdmissionResult,
    AttendanceRecord,
)
from attendance_ledger.services.calendar import DayBoundary, format_timestamp, utc_now
from attendance_ledger.services.locks import InMemoryLockTable, LockTable
from attendance_ledger.services.lookup import LookupService

logger = logging.getLogger(__name__)

LockKey = tuple[str, str, date, str]


class AttendanceRepository(Protocol):
    """Persistence interface for attendance records."""

    async def list_attendance(self) -> list[AttendanceRecord]:
        """Return every attendance record in the store."""

    async def append_attendance(self, record: AttendanceRecord) -> None:
        """Append one attendance row."""

    def new_attendance_id(self) -> str:
        """Return a fresh attendance record id."""


@dataclass
class LedgerPolicy:
    """Timing knobs for lock holds around the eventually consistent store."""

    grace_seconds: float = 3.0
    duplicate_release_seconds: float = 1.0
    max_hold_seconds: float = 60.0


@dataclass
class AttendanceLedger:
    """Decides whether a check-in is new or a repeat and writes it once."""

    repository: AttendanceRepository
    lookup: LookupService
    locks: LockTable = field(default_factory=InMemoryLockTable)
    day_boundary: DayBoundary = field(default_factory=DayBoundary)
    policy: LedgerPolicy = field(default_factory=LedgerPolicy)
    clock: Callable[[], datetime] = utc_now

    async def record_attendance(
        self,
        session_id: str,
        attendee_id: str,
        method: str,
        attendee_name: str | None = None,
    ) -> AdmissionResult:
        """Admit a check-in, writing a record only when none exists today."""
        session_id = (session_id or "").strip()
        attendee_id = (attendee_id or "").strip()
        if not session_id or not attendee_id or not method:
            raise ValidationError("Missing required fields")
        if method not in CHECK_IN_METHODS:
            raise ValidationError(f"Invalid method type: {method}")

        now = self.clock()
        day_key = self.day_boundary.day_of(now)
        lock_key: LockKey = (session_id, attendee_id, day_key, method)

        # Acquire before any await so concurrent callers for the key serialize.
        if not self.locks.try_acquire(lock_key, self.policy.max_hold_seconds):
            logger.info(
                "Check-in for %s at %s already in progress today",
                attendee_id,
                session_id,
            )
            return AdmissionResult(
                admitted=True,
                already_recorded=True,
                record=AttendanceRecord(
                    id="",
                    session_id=session_id,
                    attendee_id=attendee_id,
                    attendee_name=attendee_name or UNKNOWN_ATTENDEE,
                    timestamp=format_timestamp(now),
                    method=method,  # type: ignore[arg-type]
                ),
            )

        try:
            existing = await self._find_same_day(session_id, attendee_id, day_key)
            if existing is None:
                record = AttendanceRecord(
                    id=self.repository.new_attendance_id(),
                    session_id=session_id,
                    attendee_id=attendee_id,
                    attendee_name=await self._resolve_name(attendee_id, attendee_name),
                    timestamp=format_timestamp(now),
                    method=method,  # type: ignore[arg-type]
                )
                await self.repository.append_attendance(record)
        except Exception:
            # A failed attempt must never leave the key held for a retry.
            self.locks.release(lock_key)
            logger.exception("Failed to log attendance for %s", attendee_id)
            raise

        if existing is not None:
            logger.warning(
                "Attendee %s already recorded for session %s on %s",
                attendee_id,
                session_id,
                day_key.isoformat(),
            )
            self.locks.release_after(lock_key, self.policy.duplicate_release_seconds)
            return AdmissionResult(
                admitted=True, already_recorded=True, record=existing
            )

        self.locks.release_after(lock_key, self.policy.grace_seconds)
        logger.info(
            "Recorded %s check-in %s for %s at %s",
            method,
            record.id,
            attendee_id,
            session_id,
        )
        return AdmissionResult(admitted=True, record=record)

    async def list_records(
        self, session_id: str | None = None
    ) -> list[AttendanceRecord]:
        """Return attendance records, optionally for a single session."""
        records = await self.repository.list_attendance()
        if session_id:
            return [record for record in records if record.session_id == session_id]
        return records

    async def _find_same_day(
        self, session_id: str, attendee_id: str, day_key: date
    ) -> AttendanceRecord | None:
        for record in await self.repository.list_attendance():
            if record.session_id != session_id or record.attendee_id != attendee_id:
                continue
            if self.day_boundary.day_of_timestamp(record.timestamp) == day_key:
                return record
        return None

    async def _resolve_name(self, attendee_id: str, supplied: str | None) -> str:
        if supplied and supplied.strip():
            return supplied.strip()
        try:
            attendee = await self.lookup.find_by_id(attendee_id)
        except StoreReadError:
            logger.warning("Could not look up name for attendee %s", attendee_id)
            return UNKNOWN_ATTENDEE
        if attendee is None:
            logger.warning("Attendee %s not found; recording as unknown", attendee_id)
            return UNKNOWN_ATTENDEE
        return attendee.name
