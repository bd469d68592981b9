"""Stage 1: eligible candidate pool for one requester."""

import logging

from models.schemas.candidate_profile import CandidateProfile
from services.profile_store import ProfileStore

logger = logging.getLogger(__name__)


class CandidatePool:
    def __init__(self, store: ProfileStore) -> None:
        self._store = store

    async def load_candidates(
        self, requester_id: str, limit: int | None = None
    ) -> list[CandidateProfile]:
        """Searchable profiles excluding the requester. Empty is not an error."""
        profiles = await self._store.list_searchable_profiles(excluding=requester_id, limit=limit)

        # Re-check both invariants and drop repeated ids; store order is kept
        seen: set[str] = set()
        candidates = []
        for profile in profiles:
            if not profile.is_searchable or profile.id == requester_id or profile.id in seen:
                continue
            seen.add(profile.id)
            candidates.append(profile)

        logger.info("Found %d searchable profiles for %s", len(candidates), requester_id)
        return candidates
