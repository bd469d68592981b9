"""Match pipeline orchestrator: wires the four stages together.

Flow:
    query + requester_id
      ├─ validate query                      → ValidationFailure (no external call)
      ├─ IdentityOracle.resolve(requester)   → AuthFailure
      ├─ CandidatePool.load_candidates()     → list[CandidateProfile]
      │       (empty pool → empty result, scorer never called)
      ├─ summarize() per candidate           → list[MatchCandidateSummary]
      ├─ RelevanceScorer.score()             → list[MatchJudgment]
      ├─ assemble()                          → list[RankedMatch] (raw)
      └─ partition()                         → MatchTiers
                       ↓
         RankedMatches(raw, tiers)

Stateless: nothing is shared between calls except the collaborators.
"""

import logging
from typing import Any

from models.responses import ProfileSnapshot, RankedMatches
from services.errors import AuthFailure, ValidationFailure
from services.pipeline.assembler import assemble, profile_snapshot
from services.pipeline.candidate_pool import CandidatePool
from services.pipeline.scorer import RelevanceScorer
from services.pipeline.summarizer import DEFAULT_MAX_SKILLS, DEFAULT_TEXT_LIMIT, summarize
from services.pipeline.tiers import partition
from services.profile_store import IdentityOracle

logger = logging.getLogger(__name__)

DEFAULT_MAX_QUERY_LENGTH = 500


class MatchPipeline:
    def __init__(
        self,
        pool: CandidatePool,
        identity: IdentityOracle,
        scorer: RelevanceScorer,
        max_query_length: int = DEFAULT_MAX_QUERY_LENGTH,
        summary_text_limit: int = DEFAULT_TEXT_LIMIT,
        summary_max_skills: int = DEFAULT_MAX_SKILLS,
    ) -> None:
        self._pool = pool
        self._identity = identity
        self._scorer = scorer
        self.max_query_length = max_query_length
        self.summary_text_limit = summary_text_limit
        self.summary_max_skills = summary_max_skills

    def _clean_query(self, query: Any) -> str:
        if query is None:
            query = ""
        if not isinstance(query, str):
            raise ValidationFailure("Search query must be a string")
        query = query.strip()
        if not query:
            raise ValidationFailure("Search query must not be empty")
        if len(query) > self.max_query_length:
            raise ValidationFailure(
                f"Search query too long (max {self.max_query_length} chars)"
            )
        return query

    async def _resolve(self, requester_id: Any) -> str:
        if not isinstance(requester_id, str):
            raise AuthFailure("Requester could not be authenticated")
        return await self._identity.resolve(requester_id)

    async def find_matches(self, query: str, requester_id: str) -> RankedMatches:
        """Ranked, tiered matches for `query` on behalf of `requester_id`."""
        query = self._clean_query(query)
        requester = await self._resolve(requester_id)
        logger.info("AI match request from %s (query length %d)", requester, len(query))

        # --- Stage 1: Candidate pool ---
        candidates = await self._pool.load_candidates(requester)
        if not candidates:
            logger.info("No eligible candidates for %s, skipping scorer", requester)
            return RankedMatches()

        # --- Stage 2: Bounded summaries ---
        summaries = [
            summarize(p, self.summary_text_limit, self.summary_max_skills)
            for p in candidates
        ]

        # --- Stage 3: Scoring (only external I/O besides the store) ---
        judgments = await self._scorer.score(query, summaries)

        # --- Stage 4: Assembly + tiers ---
        raw = assemble(judgments, candidates)
        tiers = partition(raw)

        logger.info(
            "Matches for %s: %d total (perfect=%d, strong=%d, potential=%d)",
            requester, len(raw), len(tiers.perfect), len(tiers.strong), len(tiers.potential),
        )
        return RankedMatches(raw=raw, tiers=tiers)

    async def recommend(self, requester_id: str, limit: int = 5) -> list[ProfileSnapshot]:
        """Unscored suggestions: the first `limit` eligible profiles."""
        requester = await self._resolve(requester_id)
        candidates = await self._pool.load_candidates(requester, limit=limit)
        return [profile_snapshot(p) for p in candidates[:limit]]
