"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator

from repo_grader.domain.entities import Assessment


class AnalyzeRequest(BaseModel):
    """Request body for ``POST /analyze``."""

    repo_url: str = Field(validation_alias=AliasChoices("repo_url", "repoUrl"))
    roast_mode: bool = Field(
        default=False, validation_alias=AliasChoices("roast_mode", "roastMode")
    )

    @field_validator("repo_url")
    @classmethod
    def _must_not_be_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "Repository URL is required."
            raise ValueError(msg)
        return stripped


class RoadmapItemSchema(BaseModel):
    title: str
    description: str
    priority: str


class AnalyzeResponse(BaseModel):
    """Successful response from ``POST /analyze``."""

    repository: str
    score: int
    level: str
    summary: str
    strengths: list[str]
    weaknesses: list[str]
    roadmap: list[RoadmapItemSchema]
    signals: list[str]
    using_fallback: bool
    producer: str | None = None

    @classmethod
    def from_assessment(cls, assessment: Assessment) -> AnalyzeResponse:
        result = assessment.result
        return cls(
            repository=assessment.repository,
            score=result.score,
            level=result.level.value,
            summary=result.summary,
            strengths=list(result.strengths),
            weaknesses=list(result.weaknesses),
            roadmap=[
                RoadmapItemSchema(
                    title=item.title,
                    description=item.description,
                    priority=item.priority.value,
                )
                for item in result.roadmap
            ],
            signals=sorted(signal.value for signal in result.signals),
            using_fallback=assessment.using_fallback,
            producer=assessment.producer,
        )


class StatsResponse(BaseModel):
    """Response from ``GET /stats``."""

    total_analyses: int
    average_score: float
    last_updated: datetime | None = None


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
