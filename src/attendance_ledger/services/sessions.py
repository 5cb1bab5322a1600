"""Session scheduling, including recurring series."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from attendance_ledger.domain.errors import StoreWriteError, ValidationError
from attendance_ledger.domain.models import Session, SessionCreation
from attendance_ledger.services.calendar import format_timestamp, utc_now
from attendance_ledger.services.recurrence import (
    RecurringSessionExpander,
    effective_interval,
    parse_session_date,
)

logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """Persistence interface for sessions."""

    async def list_sessions(self) -> list[Session]:
        """Return every session in the store."""

    async def append_sessions(self, sessions: list[Session]) -> None:
        """Append session rows in a single batch."""

    async def clear_session(self, session_id: str) -> bool:
        """Blank a session row; False when the id is unknown."""

    def new_session_id(self) -> str:
        """Return a fresh session id."""


@dataclass
class SessionService:
    """Creates, lists and deletes sessions."""

    repository: SessionRepository
    cascade_delete: bool = False
    clock: Callable[[], datetime] = utc_now
    expander: RecurringSessionExpander = field(init=False)

    def __post_init__(self) -> None:
        self.expander = RecurringSessionExpander(
            id_factory=self.repository.new_session_id, clock=self.clock
        )

    async def create_session(  # noqa: PLR0913
        self,
        title: str,
        date: str,
        time: str,
        is_recurring: bool = False,
        recurring_weeks: int | None = None,
        recurring_interval: int | None = None,
    ) -> SessionCreation:
        """Persist a session and, when recurring, its generated instances."""
        title = (title or "").strip()
        date = (date or "").strip()
        time = (time or "").strip()
        if not title or not date or not time:
            raise ValidationError("Missing required fields (title, date, time)")
        parse_session_date(date)
        if is_recurring and (recurring_weeks is None or recurring_weeks <= 0):
            raise ValidationError(
                "For recurring sessions, recurringWeeks must be a positive number"
            )

        session = Session(
            id=self.repository.new_session_id(),
            title=title,
            date=date,
            time=time,
            created_at=format_timestamp(self.clock()),
            is_recurring=is_recurring,
            recurring_weeks=recurring_weeks if is_recurring else None,
            recurring_interval=(
                effective_interval(recurring_interval) if is_recurring else None
            ),
        )
        await self.repository.append_sessions([session])
        logger.info("Created session %s (%s on %s)", session.id, title, date)

        instances = self.expander.expand(session)
        if not instances:
            return SessionCreation(session=session, instances=[])
        try:
            await self.repository.append_sessions(instances)
        except StoreWriteError:
            warning = (
                f"Session {session.id} was created but its "
                f"{len(instances)} recurring instances could not be saved"
            )
            logger.warning(warning)
            return SessionCreation(session=session, instances=[], warning=warning)
        logger.info(
            "Generated %d recurring instances for %s", len(instances), session.id
        )
        return SessionCreation(session=session, instances=instances)

    async def list_sessions(self) -> list[Session]:
        """Return all sessions."""
        return await self.repository.list_sessions()

    async def get_session(self, session_id: str) -> Session | None:
        """Return a session by id, if present."""
        sessions = await self.repository.list_sessions()
        return next((s for s in sessions if s.id == session_id), None)

    async def list_instances(self, parent_session_id: str) -> list[Session]:
        """Return the generated instances of a recurring parent."""
        sessions = await self.repository.list_sessions()
        return [s for s in sessions if s.parent_session_id == parent_session_id]

    async def delete_session(
        self, session_id: str, cascade: bool | None = None
    ) -> bool:
        """Clear a session row, optionally with the instances of a parent.

        Returns False when the session does not exist.
        """
        if not session_id:
            raise ValidationError("Session ID is required")
        should_cascade = self.cascade_delete if cascade is None else cascade
        instances: list[Session] = []
        if should_cascade:
            instances = await self.list_instances(session_id)
        if not await self.repository.clear_session(session_id):
            logger.warning("Session not found for deletion: %s", session_id)
            return False
        for instance in instances:
            await self.repository.clear_session(instance.id)
        logger.info(
            "Deleted session %s (%d instances removed)", session_id, len(instances)
        )
        return True
