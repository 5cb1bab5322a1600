"""Tests for recurring session expansion."""

from datetime import date
from itertools import count

import pytest

from attendance_ledger.domain.errors import ValidationError
from attendance_ledger.domain.models import Session
from attendance_ledger.services.recurrence import (
    RecurringSessionExpander,
    parse_session_date,
)
from tests.conftest import FixedWallClock


def _expander() -> RecurringSessionExpander:
    ids = count(1)
    return RecurringSessionExpander(
        id_factory=lambda: f"session_{next(ids)}", clock=FixedWallClock()
    )


def _parent(**overrides) -> Session:  # type: ignore[no-untyped-def]
    fields = {
        "id": "session_parent",
        "title": "Morning yoga",
        "date": "2025-01-01",
        "time": "09:00",
        "created_at": "2024-12-20T08:00:00.000Z",
        "is_recurring": True,
        "recurring_weeks": 4,
        "recurring_interval": 7,
    }
    fields.update(overrides)
    return Session(**fields)


def test_weekly_expansion_starts_one_interval_after_parent() -> None:
    instances = _expander().expand(_parent())

    assert [s.date for s in instances] == [
        "2025-01-08",
        "2025-01-15",
        "2025-01-22",
        "2025-01-29",
    ]
    assert "2025-01-01" not in {s.date for s in instances}
    assert {s.parent_session_id for s in instances} == {"session_parent"}
    assert all(s.title == "Morning yoga" and s.time == "09:00" for s in instances)
    assert all(not s.is_recurring for s in instances)
    assert all(s.recurring_weeks is None for s in instances)
    assert all(s.recurring_interval is None for s in instances)
    assert len({s.id for s in instances}) == 4
    assert instances[0].created_at == "2025-03-14T10:30:00.000Z"


def test_expansion_is_deterministic_for_the_same_parent() -> None:
    first = [s.date for s in _expander().expand(_parent())]
    second = [s.date for s in _expander().expand(_parent())]

    assert first == second


@pytest.mark.parametrize("interval", [None, 0, -3])
def test_interval_defaults_to_weekly(interval: int | None) -> None:
    instances = _expander().expand(
        _parent(recurring_weeks=2, recurring_interval=interval)
    )

    assert [s.date for s in instances] == ["2025-01-08", "2025-01-15"]


def test_custom_interval_crosses_month_and_year() -> None:
    instances = _expander().expand(
        _parent(date="2024-12-20", recurring_weeks=3, recurring_interval=14)
    )

    assert [s.date for s in instances] == ["2025-01-03", "2025-01-17", "2025-01-31"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"is_recurring": False},
        {"recurring_weeks": 0},
        {"recurring_weeks": None},
    ],
)
def test_non_recurring_parents_expand_to_nothing(overrides: dict) -> None:
    assert _expander().expand(_parent(**overrides)) == []


def test_invalid_parent_date_is_rejected() -> None:
    with pytest.raises(ValidationError):
        _expander().expand(_parent(date="next tuesday"))


def test_datetime_parent_date_uses_its_day() -> None:
    instances = _expander().expand(
        _parent(date="2025-01-01T18:00:00Z", recurring_weeks=1)
    )

    assert [s.date for s in instances] == ["2025-01-08"]


@pytest.mark.parametrize("value", ["2025-01-01garbage", "2025-01-01 nonsense", ""])
def test_dates_with_trailing_text_are_rejected(value: str) -> None:
    with pytest.raises(ValidationError):
        parse_session_date(value)


def test_bare_and_full_iso_dates_parse() -> None:
    assert parse_session_date(" 2025-01-01 ") == date(2025, 1, 1)
    assert parse_session_date("2025-01-01T18:00:00.000Z") == date(2025, 1, 1)
