"""Dashboard views."""
from oes.skating.app import app
from oes.skating.docs import docs_helper
from oes.skating.models.competition import CompetitionStats
from oes.skating.services.competition import CompetitionService


@app.router.get("/api/dashboard/stats")
@docs_helper(
    response_type=CompetitionStats,
    response_summary="The dashboard counts",
    tags=["Dashboard"],
)
async def read_stats(service: CompetitionService) -> CompetitionStats:
    """Get competition and registration counts for the dashboard."""
    return await service.get_stats()
