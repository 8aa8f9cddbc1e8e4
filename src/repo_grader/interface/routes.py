"""API routes — thin controllers that delegate to the use case."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends

from repo_grader.domain.ports.usage_counter import UsageCounter
from repo_grader.interface.dependencies import get_usage_counter, get_use_case
from repo_grader.interface.schemas import AnalyzeRequest, AnalyzeResponse, StatsResponse
from repo_grader.services.assess_repo import AssessRepoUseCase

router = APIRouter()


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={
        422: {"description": "Invalid repository identifier or empty repository"},
        403: {"description": "Repository is private"},
        404: {"description": "Repository not found"},
        429: {"description": "GitHub API rate limit exceeded"},
        502: {"description": "GitHub unreachable"},
    },
)
async def analyze(
    body: AnalyzeRequest,
    background_tasks: BackgroundTasks,
    use_case: AssessRepoUseCase = Depends(get_use_case),
    counter: UsageCounter = Depends(get_usage_counter),
) -> AnalyzeResponse:
    """Grade a public GitHub repository."""
    assessment = await use_case.execute(body.repo_url, roast_mode=body.roast_mode)
    background_tasks.add_task(counter.record, assessment.result.score)
    return AnalyzeResponse.from_assessment(assessment)


@router.get("/stats", response_model=StatsResponse)
async def stats(counter: UsageCounter = Depends(get_usage_counter)) -> StatsResponse:
    """Return process-local usage statistics."""
    current = counter.stats()
    return StatsResponse(
        total_analyses=current.total_analyses,
        average_score=current.average_score,
        last_updated=current.last_updated,
    )
