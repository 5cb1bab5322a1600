"""Tests for container wiring."""

import asyncio

from attendance_ledger.adapters.sheets_client import HttpxSheetsClient
from attendance_ledger.containers import build_container


def test_build_container_creates_services(settings) -> None:
    settings.lock_grace_seconds = 5.0
    settings.day_boundary_timezone = "Europe/Berlin"
    settings.cascade_session_delete = True

    container = build_container(settings)

    assert isinstance(container.store, HttpxSheetsClient)
    assert container.store.spreadsheet_id == "sheet-123"
    assert container.ledger.policy.grace_seconds == 5.0
    assert container.ledger.day_boundary.timezone == "Europe/Berlin"
    assert container.ledger.lookup is container.lookup_service
    assert container.session_service.cascade_delete is True
    asyncio.run(container.close_resources())
