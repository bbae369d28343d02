"""Analysis route."""

from fastapi import APIRouter, Depends

from api.routes.auth import require_any_role
from core.dependencies import AnalysisManagerDep
from schemas.analysis import AnalysisResponse

router = APIRouter(prefix="/api/analysis", tags=["Analysis"])


@router.get(
    "",
    response_model=AnalysisResponse,
    summary="Process and catalog metrics",
    dependencies=[Depends(require_any_role)],
)
def get_analysis(analysis_manager: AnalysisManagerDep) -> AnalysisResponse:
    """Return process metrics with per-course and per-role counts.

    CPU usage is sampled over CPU_SAMPLE_SECONDS and reported as 0 when it
    cannot be measured.
    """
    return analysis_manager.snapshot()
