"""Stage 3: relevance scoring through the language model.

The backend reply is untrusted. It is parsed strictly (top-level shape must
be {"matches": [...]}, otherwise ScoringFailure) and then every judgment is
validated on its own: bad ones are dropped and logged as data-quality
events while the rest of the batch survives.

Only transient transport failures are retried, at most once. Content
failures are deterministic and never retried.
"""

import logging
from collections.abc import Awaitable, Callable, Collection
from typing import Any

from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from models.schemas.candidate_summary import MatchCandidateSummary
from models.schemas.match_judgment import MatchJudgment, ScoringEnvelope
from services import gemini_client, prompt_builder
from services.errors import DataQualityWarning, ScoringFailure, TransportFailure

logger = logging.getLogger(__name__)

# (system_instruction, contents, timeout) -> parsed JSON document
GenerateFn = Callable[[str, str, float | None], Awaitable[Any]]

MAX_RAW_LOG_CHARS = 2000


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, TransportFailure) and exc.transient


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    loc = ".".join(str(part) for part in first["loc"]) or "judgment"
    return f"{loc}: {first['msg']}"


def validate_judgments(
    document: Any,
    pool_ids: Collection[str],
) -> tuple[list[MatchJudgment], list[DataQualityWarning]]:
    """Check the top-level shape, then validate each judgment independently."""
    if not isinstance(document, dict):
        raise ScoringFailure(
            "Scoring response is not a JSON object",
            raw=repr(document)[:MAX_RAW_LOG_CHARS],
        )
    try:
        envelope = ScoringEnvelope.model_validate(document)
    except ValidationError as e:
        raise ScoringFailure(
            "Scoring response has no 'matches' list",
            raw=repr(document)[:MAX_RAW_LOG_CHARS],
        ) from e

    judgments: list[MatchJudgment] = []
    warnings: list[DataQualityWarning] = []

    for item in envelope.matches:
        if not isinstance(item, dict):
            warnings.append(DataQualityWarning(None, "judgment is not an object"))
            continue

        raw_id = item.get("profile_id")
        try:
            judgment = MatchJudgment.model_validate(item)
        except ValidationError as e:
            candidate_id = str(raw_id) if raw_id is not None else None
            warnings.append(DataQualityWarning(candidate_id, _describe(e)))
            continue

        if judgment.profile_id not in pool_ids:
            warnings.append(DataQualityWarning(judgment.profile_id, "unknown candidate id"))
            continue

        judgments.append(judgment)

    for w in warnings:
        logger.warning("Dropped judgment for candidate %s: %s", w.candidate_id, w.reason)

    return judgments, warnings


class RelevanceScorer:
    def __init__(
        self,
        generate: GenerateFn | None = None,
        timeout: float | None = None,
        max_retries: int = 1,
        retry_wait: float = 1.0,
    ) -> None:
        self._generate = generate
        self.timeout = timeout
        self.max_retries = max(0, min(1, max_retries))
        self.retry_wait = retry_wait

    async def _call_backend(self, system_instruction: str, contents: str) -> Any:
        generate = self._generate or gemini_client.generate_json
        retrying = AsyncRetrying(
            stop=stop_after_attempt(1 + self.max_retries),
            wait=wait_fixed(self.retry_wait),
            retry=retry_if_exception(_is_transient),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return await retrying(generate, system_instruction, contents, self.timeout)

    async def score(
        self,
        query: str,
        summaries: list[MatchCandidateSummary],
    ) -> list[MatchJudgment]:
        """One backend call for the whole batch; returns the valid judgments."""
        if not summaries:
            return []

        system_instruction = prompt_builder.build_match_instruction()
        contents = prompt_builder.build_match_content(query, summaries)
        pool_ids = {s.id for s in summaries}

        try:
            document = await self._call_backend(system_instruction, contents)
            judgments, warnings = validate_judgments(document, pool_ids)
        except ScoringFailure as e:
            logger.error("Scoring failed: %s | raw=%s", e, e.raw[:MAX_RAW_LOG_CHARS])
            raise
        except TransportFailure as e:
            logger.error("Scoring backend unavailable: %s", e)
            raise

        logger.info(
            "Scored %d candidates: %d valid judgments, %d dropped",
            len(summaries), len(judgments), len(warnings),
        )
        return judgments
