from __future__ import annotations

import asyncio
import json
import logging

import pytest

from repo_grader.domain.entities import Level
from repo_grader.domain.exceptions import ProducerError
from repo_grader.services import scoring_engine
from repo_grader.services.orchestrator import AssessmentOrchestrator
from repo_grader.services.prompt_builder import ROAST_PERSONA, STANDARD_PERSONA

VALID = json.dumps(
    {
        "score": 81,
        "level": "Pro",
        "summary": "Well structured, lightly documented.",
        "strengths": ["Clear layering"],
        "weaknesses": ["No changelog"],
        "roadmap": [{"title": "Add changelog", "description": "Track releases", "priority": "Low"}],
    }
)
MISSING_ROADMAP = json.dumps(
    {"score": 60, "level": "Intermediate", "summary": "ok", "strengths": [], "weaknesses": []}
)


class FakeProducer:
    def __init__(self, name, outcome=None, error=None, delay=0.0):
        self.name = name
        self._outcome = outcome
        self._error = error
        self._delay = delay
        self.calls: list[str] = []

    async def produce(self, snapshot, persona):
        self.calls.append(persona)
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._outcome


async def test_no_producers_uses_engine(make_snapshot):
    snapshot = make_snapshot()
    assessment = await AssessmentOrchestrator().assess(snapshot)

    assert assessment.using_fallback is True
    assert assessment.producer is None
    assert assessment.result == scoring_engine.assess(snapshot)
    assert assessment.repository == "octo/demo"
    assert not scoring_engine.summary_indicates_fallback(assessment.result.summary)


async def test_all_producers_fail_uses_engine(make_snapshot, caplog):
    producers = [
        FakeProducer("groq:a", error=ProducerError("quota exceeded")),
        FakeProducer("groq:b", error=RuntimeError("boom")),
        FakeProducer("gemini:c", outcome="{not json"),
    ]
    snapshot = make_snapshot()

    with caplog.at_level(logging.WARNING):
        assessment = await AssessmentOrchestrator(producers).assess(snapshot, roast_mode=True)

    assert assessment.using_fallback is True
    assert assessment.result == scoring_engine.assess(snapshot, roast_mode=True, after_outage=True)
    assert scoring_engine.summary_indicates_fallback(assessment.result.summary)
    assert all(len(p.calls) == 1 for p in producers)
    assert "groq:a" in caplog.text
    assert "gemini:c" in caplog.text


async def test_first_producer_success_short_circuits(make_snapshot):
    first = FakeProducer("groq:a", outcome=VALID)
    second = FakeProducer("groq:b", outcome=VALID)

    assessment = await AssessmentOrchestrator([first, second]).assess(make_snapshot())

    assert assessment.using_fallback is False
    assert assessment.producer == "groq:a"
    assert assessment.result.score == 81
    assert assessment.result.level is Level.PRO
    assert second.calls == []


async def test_last_producer_success(make_snapshot):
    producers = [
        FakeProducer("groq:a", error=ProducerError("down")),
        FakeProducer("gemini:b", outcome=VALID),
    ]
    assessment = await AssessmentOrchestrator(producers).assess(make_snapshot())

    assert assessment.using_fallback is False
    assert assessment.producer == "gemini:b"


async def test_invalid_payload_advances_to_next_producer(make_snapshot):
    first = FakeProducer("groq:a", outcome=MISSING_ROADMAP)
    second = FakeProducer("gemini:b", outcome=VALID)

    assessment = await AssessmentOrchestrator([first, second]).assess(make_snapshot())

    assert first.calls and second.calls
    assert assessment.producer == "gemini:b"
    assert assessment.result.roadmap[0].title == "Add changelog"


async def test_timeout_counts_as_failure(make_snapshot):
    slow = FakeProducer("groq:slow", outcome=VALID, delay=1.0)
    fast = FakeProducer("gemini:fast", outcome=VALID)

    assessment = await AssessmentOrchestrator([slow, fast], attempt_timeout=0.01).assess(
        make_snapshot()
    )

    assert assessment.producer == "gemini:fast"


@pytest.mark.parametrize(("roast_mode", "persona"), [(False, STANDARD_PERSONA), (True, ROAST_PERSONA)])
async def test_persona_follows_mode(make_snapshot, roast_mode, persona):
    producer = FakeProducer("groq:a", outcome=VALID)
    await AssessmentOrchestrator([producer]).assess(make_snapshot(), roast_mode=roast_mode)
    assert producer.calls == [persona]


async def test_generative_result_carries_snapshot_signals(make_snapshot, files):
    snapshot = make_snapshot(file_tree=files(8, "tests/test_a.py"))
    producer = FakeProducer("groq:a", outcome=VALID)

    assessment = await AssessmentOrchestrator([producer]).assess(snapshot)

    assert assessment.result.signals == scoring_engine.signals_for(snapshot)
