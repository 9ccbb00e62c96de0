from datetime import timezone

import pytest
from blacksheep import HTTPException
from oes.skating.util import check_not_found, generate_id, get_now, to_camel_case


@pytest.mark.parametrize(
    "name, expected",
    [
        ("id", "id"),
        ("event_id", "eventId"),
        ("max_entries", "maxEntries"),
        ("total_registrations", "totalRegistrations"),
        ("upcoming_competitions", "upcomingCompetitions"),
    ],
)
def test_to_camel_case(name, expected):
    assert to_camel_case(name) == expected


def test_check_not_found():
    assert check_not_found("value") == "value"
    assert check_not_found(0) == 0

    with pytest.raises(HTTPException) as exc_info:
        check_not_found(None, "Event not found")

    assert exc_info.value.status == 404
    assert str(exc_info.value) == "Event not found"


def test_get_now():
    now = get_now()
    assert now.tzinfo == timezone.utc


def test_generate_id():
    assert generate_id() != generate_id()
    assert len(generate_id()) == 36
