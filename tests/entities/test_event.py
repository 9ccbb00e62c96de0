from typing import Optional

import pytest
from oes.skating.entities.event import EventEntity


@pytest.mark.parametrize(
    "max_entries, count, expected",
    [
        (None, 0, False),
        (None, 1000, False),
        (20, 0, False),
        (20, 19, False),
        (20, 20, True),
        (20, 21, True),
        (1, 1, True),
    ],
)
def test_is_full(max_entries: Optional[int], count: int, expected: bool):
    event = EventEntity(name="Test", max_entries=max_entries)
    assert event.is_full(count) is expected
