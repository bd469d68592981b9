"""Shared dependencies for API routes."""

import json
import logging
from pathlib import Path

from config import settings
from services.pipeline.candidate_pool import CandidatePool
from services.pipeline.orchestrator import MatchPipeline
from services.pipeline.scorer import RelevanceScorer
from services.profile_store import (
    InMemoryProfileStore,
    SupabaseProfileStore,
    profile_from_row,
)

logger = logging.getLogger(__name__)

_store: InMemoryProfileStore | SupabaseProfileStore | None = None


def _load_seed_profiles(path: str) -> InMemoryProfileStore:
    rows = json.loads(Path(path).read_text(encoding="utf-8"))
    profiles = [profile_from_row(row) for row in rows]
    logger.info("Loaded %d seed profiles from %s", len(profiles), path)
    return InMemoryProfileStore(profiles)


def get_profile_store() -> InMemoryProfileStore | SupabaseProfileStore:
    """Process-wide store; the same object serves as identity oracle."""
    global _store
    if _store is None:
        if settings.profile_store == "supabase":
            _store = SupabaseProfileStore(settings.supabase_url, settings.supabase_service_role_key)
        elif settings.profile_seed_file:
            _store = _load_seed_profiles(settings.profile_seed_file)
        else:
            _store = InMemoryProfileStore()
    return _store


def get_pipeline() -> MatchPipeline:
    store = get_profile_store()
    return MatchPipeline(
        pool=CandidatePool(store),
        identity=store,
        scorer=RelevanceScorer(
            timeout=settings.scoring_timeout_seconds,
            max_retries=settings.scoring_max_retries,
            retry_wait=settings.scoring_retry_wait_seconds,
        ),
        max_query_length=settings.max_query_length,
        summary_text_limit=settings.summary_text_limit,
        summary_max_skills=settings.summary_max_skills,
    )
