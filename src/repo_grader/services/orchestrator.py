"""Assessment orchestrator — generative producers first, rule engine last.

Producers are attempted strictly in the configured order, each at most once
and each bounded by a per-attempt timeout.  Whatever goes wrong inside an
attempt is logged and the next producer is tried; when none succeeds the
deterministic scoring engine answers.  ``assess`` therefore never raises
for a producer failure.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from repo_grader.domain.entities import Assessment, RepositorySnapshot
from repo_grader.domain.ports.assessment_producer import AssessmentProducer
from repo_grader.services import scoring_engine
from repo_grader.services.assessment_parser import parse_assessment
from repo_grader.services.prompt_builder import persona_for

logger = logging.getLogger(__name__)


class AssessmentOrchestrator:
    """Produces exactly one :class:`Assessment` per snapshot.

    Parameters
    ----------
    producers:
        Generative producers in priority order (may be empty).
    attempt_timeout:
        Seconds allowed for a single producer attempt.
    """

    def __init__(
        self,
        producers: Sequence[AssessmentProducer] = (),
        attempt_timeout: float = 20.0,
    ) -> None:
        self._producers = tuple(producers)
        self._timeout = attempt_timeout

    async def assess(self, snapshot: RepositorySnapshot, roast_mode: bool = False) -> Assessment:
        persona = persona_for(roast_mode)
        signals = scoring_engine.signals_for(snapshot)

        for producer in self._producers:
            logger.info("Assessing %s with %s", snapshot.full_name, producer.name)
            try:
                raw = await asyncio.wait_for(
                    producer.produce(snapshot, persona), timeout=self._timeout
                )
                result = parse_assessment(raw, signals)
            except asyncio.TimeoutError:
                logger.warning(
                    "Producer %s timed out after %.1fs", producer.name, self._timeout
                )
                continue
            except Exception as exc:  # noqa: BLE001
                logger.warning("Producer %s failed: %s", producer.name, exc)
                continue

            logger.info("Producer %s succeeded for %s", producer.name, snapshot.full_name)
            return Assessment(
                repository=snapshot.full_name,
                result=result,
                using_fallback=False,
                producer=producer.name,
            )

        logger.info("Using rule-based fallback for %s", snapshot.full_name)
        return Assessment(
            repository=snapshot.full_name,
            result=scoring_engine.assess(
                snapshot, roast_mode, after_outage=bool(self._producers)
            ),
            using_fallback=True,
        )
