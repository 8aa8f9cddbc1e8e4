from __future__ import annotations

import json

import pytest

from repo_grader.domain.entities import Level, Priority, Signal
from repo_grader.domain.exceptions import InvalidAssessmentError
from repo_grader.services.assessment_parser import parse_assessment


def payload(**overrides):
    base = {
        "score": 78,
        "level": "Pro",
        "summary": "Solid service with thin docs.",
        "strengths": ["Typed domain model"],
        "weaknesses": ["Sparse README"],
        "roadmap": [
            {"title": "Expand README", "description": "Add usage examples", "priority": "High"}
        ],
    }
    base.update(overrides)
    return base


def test_valid_payload():
    result = parse_assessment(json.dumps(payload()), frozenset({Signal.TESTS}))
    assert result.score == 78
    assert result.level is Level.PRO
    assert result.roadmap[0].priority is Priority.HIGH
    assert result.strengths == ("Typed domain model",)
    assert result.signals == frozenset({Signal.TESTS})


def test_markdown_fences_are_stripped():
    raw = "```json\n" + json.dumps(payload()) + "\n```"
    assert parse_assessment(raw).score == 78


def test_score_clamped_and_level_rederived():
    result = parse_assessment(json.dumps(payload(score=140, level="Beginner")))
    assert result.score == 100
    assert result.level is Level.ELITE


def test_fractional_score_rounded():
    assert parse_assessment(json.dumps(payload(score=69.6))).score == 70


@pytest.mark.parametrize(
    "field", ["score", "level", "summary", "strengths", "weaknesses", "roadmap"]
)
def test_missing_field_rejected(field):
    data = payload()
    del data[field]
    with pytest.raises(InvalidAssessmentError):
        parse_assessment(json.dumps(data))


@pytest.mark.parametrize(
    "overrides",
    [
        {"level": "Legendary"},
        {"roadmap": [{"title": "x", "description": "y", "priority": "Urgent"}]},
        {"roadmap": [{"title": "x", "priority": "Low"}]},
        {"strengths": "not a list"},
        {"score": "high"},
        {"score": True},
        {"score": "80"},
        {"summary": "   "},
    ],
)
def test_out_of_contract_values_rejected(overrides):
    with pytest.raises(InvalidAssessmentError):
        parse_assessment(json.dumps(payload(**overrides)))


@pytest.mark.parametrize("raw", ["", "not json", "[1, 2, 3]", '{"score": NaN}'])
def test_non_object_payload_rejected(raw):
    with pytest.raises(InvalidAssessmentError):
        parse_assessment(raw)
