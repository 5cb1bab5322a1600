"""Tests for adding and editing attendees."""

import asyncio
from dataclasses import dataclass, field

import pytest

from attendance_ledger.adapters.sheets_client import ATTENDEES_TABLE
from attendance_ledger.adapters.sheets_repository import SheetsEntityRepository
from attendance_ledger.domain.errors import ValidationError
from attendance_ledger.services.attendees import AttendeeService
from tests.conftest import FixedWallClock, InMemorySheetStore, add_attendee


@dataclass
class _ScriptedQrRepository(SheetsEntityRepository):
    """Repository whose QR codes come from a fixed script."""

    codes: list[str] = field(default_factory=list)

    def new_qr_code(self) -> str:
        return self.codes.pop(0)


def test_create_attendee_assigns_id_and_qr_code(store: InMemorySheetStore) -> None:
    service = AttendeeService(SheetsEntityRepository(store), clock=FixedWallClock())

    attendee = asyncio.run(service.create_attendee(" Ada Lovelace ", "ada@example.com"))

    assert attendee.id.startswith("attendee_")
    assert attendee.name == "Ada Lovelace"
    assert attendee.qr_code.startswith("QR")
    assert len(attendee.qr_code) == 10
    assert attendee.qr_code[2:].isalnum()
    assert attendee.qr_code == attendee.qr_code.upper()
    assert attendee.created_at == "2025-03-14T10:30:00.000Z"
    assert store.data_rows(ATTENDEES_TABLE) == [
        [
            attendee.id,
            "Ada Lovelace",
            "ada@example.com",
            attendee.qr_code,
            "2025-03-14T10:30:00.000Z",
        ]
    ]


def test_create_attendee_skips_colliding_qr_codes(store: InMemorySheetStore) -> None:
    add_attendee(store, "attendee_1", "Ada", "ada@example.com", "QRAAAAAAAA")
    repository = _ScriptedQrRepository(store, codes=["qraaaaaaaa", "QRBBBBBBBB"])
    service = AttendeeService(repository)

    attendee = asyncio.run(service.create_attendee("Grace", "grace@example.com"))

    assert attendee.qr_code == "QRBBBBBBBB"


@pytest.mark.parametrize(("name", "email"), [("", "a@b.c"), ("Ada", ""), (" ", " ")])
def test_create_attendee_requires_name_and_email(
    store: InMemorySheetStore, name: str, email: str
) -> None:
    service = AttendeeService(SheetsEntityRepository(store))

    with pytest.raises(ValidationError):
        asyncio.run(service.create_attendee(name, email))


def test_update_attendee_changes_only_given_fields(store: InMemorySheetStore) -> None:
    add_attendee(store, "attendee_1", "Ada", "ada@example.com", "QR123")
    add_attendee(store, "attendee_2", "Grace", "grace@example.com", "QR456")
    service = AttendeeService(SheetsEntityRepository(store))

    updated = asyncio.run(service.update_attendee("attendee_2", email="g@navy.mil"))

    assert updated is not None
    assert updated.name == "Grace"
    assert updated.email == "g@navy.mil"
    assert updated.qr_code == "QR456"
    assert store.tables[ATTENDEES_TABLE][2][:4] == [
        "attendee_2",
        "Grace",
        "g@navy.mil",
        "QR456",
    ]
    assert store.tables[ATTENDEES_TABLE][1][2] == "ada@example.com"


def test_update_unknown_attendee_returns_none(store: InMemorySheetStore) -> None:
    service = AttendeeService(SheetsEntityRepository(store))

    assert asyncio.run(service.update_attendee("attendee_404", name="X")) is None


def test_update_requires_a_field(store: InMemorySheetStore) -> None:
    service = AttendeeService(SheetsEntityRepository(store))

    with pytest.raises(ValidationError):
        asyncio.run(service.update_attendee("attendee_1"))
