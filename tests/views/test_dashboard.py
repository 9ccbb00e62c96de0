import pytest
from oes.skating.entities.event import EventEntity
from oes.skating.services.competition import CompetitionService
from oes.skating.views.dashboard import read_stats
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.mark.asyncio
async def test_read_stats(db: AsyncSession, event: EventEntity):
    result = await read_stats(CompetitionService(db))
    assert result["total"] == 1
    assert result["active"] == 1
    assert result["totalRegistrations"] == 0
    assert set(result) == {
        "total",
        "draft",
        "published",
        "active",
        "completed",
        "totalRegistrations",
        "upcomingCompetitions",
    }
