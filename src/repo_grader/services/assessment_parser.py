"""Parse and validate raw producer payloads into :class:`AssessmentResult`."""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from repo_grader.domain.entities import (
    AssessmentResult,
    Level,
    Priority,
    RoadmapItem,
    Signal,
)
from repo_grader.domain.exceptions import InvalidAssessmentError
from repo_grader.services.scoring_engine import clamp_score


class _RoadmapPayload(BaseModel):
    title: str
    description: str
    priority: Literal["High", "Medium", "Low"]


class _AssessmentPayload(BaseModel):
    """Wire shape every producer must return; all fields are required."""

    score: float = Field(strict=True, allow_inf_nan=False)
    level: Literal["Beginner", "Intermediate", "Pro", "Elite"]
    summary: str
    strengths: list[str]
    weaknesses: list[str]
    roadmap: list[_RoadmapPayload]


def _strip_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        first_nl = text.index("\n") if "\n" in text else 3
        text = text[first_nl + 1 :]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


def parse_assessment(
    raw: str, signals: frozenset[Signal] = frozenset()
) -> AssessmentResult:
    """Turn a producer's JSON text into an :class:`AssessmentResult`.

    Handles markdown code fences around the JSON.  The score is rounded and
    clamped, and the level is re-derived from it so a producer cannot return
    a grade that disagrees with its own number.

    Raises :class:`InvalidAssessmentError` for anything that is not a
    complete, well-typed assessment.
    """
    try:
        data: Any = json.loads(_strip_fences(raw))
    except json.JSONDecodeError as exc:
        raise InvalidAssessmentError(f"Producer returned invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise InvalidAssessmentError("Producer payload is not a JSON object.")

    try:
        payload = _AssessmentPayload.model_validate(data)
    except ValidationError as exc:
        raise InvalidAssessmentError(
            f"Producer payload failed validation: {exc.error_count()} error(s)"
        ) from exc

    if not payload.summary.strip():
        raise InvalidAssessmentError("Producer payload has an empty summary.")

    score = clamp_score(round(payload.score))
    return AssessmentResult(
        score=score,
        level=Level.from_score(score),
        summary=payload.summary.strip(),
        strengths=tuple(s for s in payload.strengths if s),
        weaknesses=tuple(w for w in payload.weaknesses if w),
        roadmap=tuple(
            RoadmapItem(
                title=item.title,
                description=item.description,
                priority=Priority(item.priority),
            )
            for item in payload.roadmap
        ),
        signals=signals,
    )
