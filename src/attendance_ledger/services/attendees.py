"""Attendee lifecycle: adding clients and editing their details."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Protocol

from attendance_ledger.domain.errors import ValidationError
from attendance_ledger.domain.models import Attendee
from attendance_ledger.services.calendar import format_timestamp, utc_now

logger = logging.getLogger(__name__)

_MAX_QR_ATTEMPTS = 20


class AttendeeRepository(Protocol):
    """Persistence interface for attendees."""

    async def list_attendees(self) -> list[Attendee]:
        """Return every attendee in the store."""

    async def append_attendee(self, attendee: Attendee) -> None:
        """Append a new attendee row."""

    async def update_attendee(self, attendee: Attendee) -> bool:
        """Rewrite an attendee row in place; False when the id is unknown."""

    def new_attendee_id(self) -> str:
        """Return a fresh attendee id."""

    def new_qr_code(self) -> str:
        """Return a random QR code candidate."""


@dataclass
class AttendeeService:
    """Application service for attendee create and update."""

    repository: AttendeeRepository
    clock: Callable[[], datetime] = utc_now

    async def create_attendee(self, name: str, email: str) -> Attendee:
        """Create an attendee with a fresh id and a unique QR code."""
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email:
            raise ValidationError("Name and email are required")
        existing = await self.repository.list_attendees()
        taken = {attendee.qr_code.strip().lower() for attendee in existing}
        attendee = Attendee(
            id=self.repository.new_attendee_id(),
            name=name,
            email=email,
            qr_code=self._unique_qr_code(taken),
            created_at=format_timestamp(self.clock()),
        )
        await self.repository.append_attendee(attendee)
        logger.info(
            "Created attendee %s with QR code %s", attendee.id, attendee.qr_code
        )
        return attendee

    async def update_attendee(
        self,
        attendee_id: str,
        name: str | None = None,
        email: str | None = None,
    ) -> Attendee | None:
        """Update name and/or email; return None when the attendee is unknown."""
        if not attendee_id:
            raise ValidationError("Client ID is required")
        if not name and not email:
            raise ValidationError("At least one field to update is required")
        attendees = await self.repository.list_attendees()
        current = next((a for a in attendees if a.id == attendee_id), None)
        if current is None:
            logger.warning("Attendee %s not found for update", attendee_id)
            return None
        updated = replace(
            current,
            name=name.strip() if name else current.name,
            email=email.strip() if email else current.email,
        )
        if not await self.repository.update_attendee(updated):
            return None
        return updated

    def _unique_qr_code(self, taken: set[str]) -> str:
        for _ in range(_MAX_QR_ATTEMPTS):
            candidate = self.repository.new_qr_code()
            if candidate.lower() not in taken:
                return candidate
        raise RuntimeError("Could not generate a unique QR code")
