"""Attendee lookups by QR code, id and free-text search."""

import logging
from dataclasses import dataclass
from typing import Protocol

from attendance_ledger.domain.models import Attendee

logger = logging.getLogger(__name__)


class AttendeeReader(Protocol):
    """Read access to the attendee table."""

    async def list_attendees(self) -> list[Attendee]:
        """Return every attendee in the store."""


@dataclass
class LookupService:
    """Read-only projections over the full attendee listing.

    Every call re-fetches the listing; callers resolving many attendees in
    one request should call ``list_attendees`` once and reuse it.
    """

    repository: AttendeeReader

    async def list_attendees(self) -> list[Attendee]:
        """Return all attendees."""
        return await self.repository.list_attendees()

    async def find_by_qr_code(self, code: str) -> Attendee | None:
        """Return the attendee whose QR code matches, ignoring case and padding."""
        normalized = code.strip().lower()
        if not normalized:
            return None
        attendees = await self.repository.list_attendees()
        for attendee in attendees:
            if attendee.qr_code.strip().lower() == normalized:
                return attendee
        logger.warning("No attendee found with QR code %r", code)
        return None

    async def find_by_id(self, attendee_id: str) -> Attendee | None:
        """Return the attendee with the given id, if present."""
        if not attendee_id:
            return None
        attendees = await self.repository.list_attendees()
        return next((a for a in attendees if a.id == attendee_id), None)

    async def search(self, query: str | None) -> list[Attendee]:
        """Return attendees whose name or email contains the query."""
        attendees = await self.repository.list_attendees()
        needle = (query or "").strip().lower()
        if not needle:
            return attendees
        return [
            attendee
            for attendee in attendees
            if needle in attendee.name.lower() or needle in attendee.email.lower()
        ]
