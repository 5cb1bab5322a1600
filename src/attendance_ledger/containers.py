"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from attendance_ledger.adapters.sheets_client import HttpxSheetsClient, SheetStore
from attendance_ledger.adapters.sheets_repository import SheetsEntityRepository
from attendance_ledger.config import Settings
from attendance_ledger.services.attendees import AttendeeService
from attendance_ledger.services.calendar import DayBoundary
from attendance_ledger.services.ledger import AttendanceLedger, LedgerPolicy
from attendance_ledger.services.locks import InMemoryLockTable
from attendance_ledger.services.lookup import LookupService
from attendance_ledger.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: SheetStore
    lookup_service: LookupService
    attendee_service: AttendeeService
    session_service: SessionService
    ledger: AttendanceLedger
    close_resources: Callable[[], Awaitable[None]]


def build_services(
    settings: Settings, store: SheetStore
) -> tuple[LookupService, AttendeeService, SessionService, AttendanceLedger]:
    """Wire the services on top of a row store."""
    repository = SheetsEntityRepository(store)
    lookup_service = LookupService(repository)
    attendee_service = AttendeeService(repository)
    session_service = SessionService(
        repository, cascade_delete=settings.cascade_session_delete
    )
    ledger = AttendanceLedger(
        repository=repository,
        lookup=lookup_service,
        locks=InMemoryLockTable(),
        day_boundary=DayBoundary(settings.day_boundary_timezone),
        policy=LedgerPolicy(
            grace_seconds=settings.lock_grace_seconds,
            duplicate_release_seconds=settings.duplicate_release_seconds,
            max_hold_seconds=settings.lock_max_hold_seconds,
        ),
    )
    return lookup_service, attendee_service, session_service, ledger


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    sheets_client = HttpxSheetsClient.create(
        spreadsheet_id=resolved_settings.google_sheet_id,
        credentials_json=resolved_settings.google_credentials,
        base_url=resolved_settings.sheets_base_url,
        timeout=resolved_settings.sheets_timeout_seconds,
    )
    lookup_service, attendee_service, session_service, ledger = build_services(
        resolved_settings, sheets_client
    )

    async def close_resources() -> None:
        await sheets_client.close()

    return AppContainer(
        settings=resolved_settings,
        store=sheets_client,
        lookup_service=lookup_service,
        attendee_service=attendee_service,
        session_service=session_service,
        ledger=ledger,
        close_resources=close_resources,
    )
