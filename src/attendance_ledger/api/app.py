"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from attendance_ledger.api.models import (
    AttendanceRequest,
    CreateClientRequest,
    CreateSessionRequest,
    UpdateClientRequest,
)
from attendance_ledger.app_logging import configure_logging
from attendance_ledger.containers import AppContainer
from attendance_ledger.domain.errors import (
    StoreReadError,
    StoreWriteError,
    ValidationError,
)
from attendance_ledger.domain.models import Attendee, AttendanceRecord, Session


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ValidationError)
    async def validation_error(
        _request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            {"error": str(exc)}, status_code=status.HTTP_400_BAD_REQUEST
        )

    @app.exception_handler(StoreReadError)
    async def store_read_error(
        _request: Request, exc: StoreReadError
    ) -> JSONResponse:
        logger.error("Store read failed: %s", exc)
        return JSONResponse(
            {"error": "Failed to read from the spreadsheet"},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    @app.exception_handler(StoreWriteError)
    async def store_write_error(
        _request: Request, exc: StoreWriteError
    ) -> JSONResponse:
        logger.error("Store write failed: %s", exc)
        return JSONResponse(
            {"error": "Failed to write to the spreadsheet"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/attendance")
    async def record_attendance(
        body: AttendanceRequest, request: Request
    ) -> JSONResponse:
        """Record a scanned or manual check-in."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.ledger.record_attendance(
                session_id=body.session_id,
                attendee_id=body.attendee_id,
                method=body.method,
                attendee_name=body.attendee_name,
            )
        except StoreWriteError:
            return JSONResponse(
                {"error": "Failed to log attendance"},
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        if result.already_recorded:
            return JSONResponse(
                {
                    "success": True,
                    "message": "Attendance already recorded for this session today",
                    "alreadyLogged": True,
                    "record": _record_payload(result.record),
                },
                status_code=status.HTTP_200_OK,
            )
        return JSONResponse(
            {
                "success": True,
                "message": "Attendance logged successfully",
                "alreadyLogged": False,
                "record": _record_payload(result.record),
            },
            status_code=status.HTTP_201_CREATED,
        )

    @app.get("/api/attendance")
    async def list_attendance(
        request: Request,
        session_id: str | None = Query(default=None, alias="sessionId"),
    ) -> dict[str, object]:
        """Return attendance records, optionally for one session."""
        state_container: AppContainer = request.app.state.container
        records = await state_container.ledger.list_records(session_id)
        return {"records": [_record_payload(record) for record in records]}

    @app.get("/api/attendees")
    async def list_attendees(
        request: Request, q: str | None = None
    ) -> dict[str, object]:
        """Return attendees, filtered by name or email when a query is given."""
        state_container: AppContainer = request.app.state.container
        attendees = await state_container.lookup_service.search(q)
        return {"attendees": [_attendee_payload(a) for a in attendees]}

    @app.get("/api/attendees/id/{attendee_id}")
    async def attendee_by_id(attendee_id: str, request: Request) -> JSONResponse:
        """Find an attendee by id."""
        state_container: AppContainer = request.app.state.container
        attendee = await state_container.lookup_service.find_by_id(attendee_id)
        if attendee is None:
            return _not_found("Attendee not found")
        return JSONResponse({"attendee": _attendee_payload(attendee)})

    @app.get("/api/attendees/qrcode/{code}")
    async def attendee_by_qr_code(code: str, request: Request) -> JSONResponse:
        """Find an attendee by the code printed on their badge."""
        state_container: AppContainer = request.app.state.container
        attendee = await state_container.lookup_service.find_by_qr_code(code)
        if attendee is None:
            return _not_found("Attendee not found for this QR code")
        return JSONResponse({"attendee": _attendee_payload(attendee)})

    @app.post("/api/clients")
    async def create_client(
        body: CreateClientRequest, request: Request
    ) -> dict[str, object]:
        """Add a client and assign them a QR code."""
        state_container: AppContainer = request.app.state.container
        attendee = await state_container.attendee_service.create_attendee(
            name=body.name, email=body.email
        )
        return {"client": _attendee_payload(attendee)}

    @app.put("/api/clients")
    async def update_client(
        body: UpdateClientRequest, request: Request
    ) -> JSONResponse:
        """Update a client's name or email."""
        state_container: AppContainer = request.app.state.container
        updated = await state_container.attendee_service.update_attendee(
            body.id, name=body.name, email=body.email
        )
        if updated is None:
            return _not_found("Client not found")
        return JSONResponse({"success": True, "client": _attendee_payload(updated)})

    @app.get("/api/sessions")
    async def list_sessions(request: Request) -> dict[str, object]:
        """Return all sessions."""
        state_container: AppContainer = request.app.state.container
        sessions = await state_container.session_service.list_sessions()
        return {"sessions": [_session_payload(s) for s in sessions]}

    @app.post("/api/sessions")
    async def create_session(
        body: CreateSessionRequest, request: Request
    ) -> dict[str, object]:
        """Create a session and any recurring instances."""
        state_container: AppContainer = request.app.state.container
        creation = await state_container.session_service.create_session(
            title=body.title,
            date=body.date,
            time=body.time,
            is_recurring=body.is_recurring,
            recurring_weeks=body.recurring_weeks,
            recurring_interval=body.recurring_interval,
        )
        if body.is_recurring:
            message = (
                f'Created recurring session "{creation.session.title}" '
                f"with {len(creation.instances)} instances"
            )
        else:
            message = f'Created session "{creation.session.title}"'
        return {
            "success": True,
            "message": message,
            "session": _session_payload(creation.session),
            "instances": [_session_payload(s) for s in creation.instances],
            "warning": creation.warning,
        }

    @app.delete("/api/sessions")
    async def delete_session(
        request: Request, id: str = "", cascade: bool | None = None  # noqa: A002
    ) -> JSONResponse:
        """Delete a session; instances follow only when cascading."""
        state_container: AppContainer = request.app.state.container
        deleted = await state_container.session_service.delete_session(
            id, cascade=cascade
        )
        if not deleted:
            return _not_found("Session not found")
        return JSONResponse(
            {"success": True, "message": "Session deleted successfully"}
        )

    return app


def _not_found(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status.HTTP_404_NOT_FOUND)


def _attendee_payload(attendee: Attendee) -> dict[str, object]:
    return {
        "id": attendee.id,
        "name": attendee.name,
        "email": attendee.email,
        "qrCode": attendee.qr_code,
        "createdAt": attendee.created_at,
    }


def _session_payload(session: Session) -> dict[str, object]:
    return {
        "id": session.id,
        "title": session.title,
        "date": session.date,
        "time": session.time,
        "createdAt": session.created_at,
        "isRecurring": session.is_recurring,
        "recurringWeeks": session.recurring_weeks,
        "recurringInterval": session.recurring_interval,
        "parentSessionId": session.parent_session_id,
    }


def _record_payload(record: AttendanceRecord) -> dict[str, object]:
    return {
        "id": record.id,
        "sessionId": record.session_id,
        "attendeeId": record.attendee_id,
        "attendeeName": record.attendee_name,
        "timestamp": record.timestamp,
        "method": record.method,
    }
