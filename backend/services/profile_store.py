"""Profile store and identity oracle collaborators.

Both are external to the matching pipeline and read-only from its point of
view. The in-memory store backs local development and tests; the Supabase
store reads the managed backend with the service-role key.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, AuthError, acreate_client

from models.schemas.candidate_profile import (
    AvailabilityType,
    CandidateProfile,
    IkigaiResponses,
    IntentType,
    ProficiencyLevel,
    Skill,
)
from services.errors import AuthFailure, TransportFailure

logger = logging.getLogger(__name__)

_INTENTS = {i.value for i in IntentType}
_AVAILABILITY = {a.value for a in AvailabilityType}
_PROFICIENCY = {p.value for p in ProficiencyLevel}


class ProfileStore(ABC):
    """Read-only source of candidate profiles."""

    name: str = ""

    @abstractmethod
    async def list_searchable_profiles(
        self, excluding: str, limit: int | None = None
    ) -> list[CandidateProfile]:
        """Searchable profiles other than `excluding`, in store order."""


class IdentityOracle(ABC):
    """Resolves a requester id to an authenticated identity."""

    @abstractmethod
    async def resolve(self, user_id: str) -> str:
        """Return the canonical user id or raise AuthFailure."""


# ---------------------------------------------------------------------------
# Row mapping
# ---------------------------------------------------------------------------

def _first(value: Any) -> dict | None:
    if isinstance(value, list):
        return value[0] if value else None
    return value if isinstance(value, dict) else None


def _portfolio_count(value: Any) -> int:
    # Either embedded rows or PostgREST's aggregate form [{"count": n}]
    if isinstance(value, list):
        if len(value) == 1 and isinstance(value[0], dict) and set(value[0]) == {"count"}:
            return int(value[0]["count"] or 0)
        return len(value)
    if isinstance(value, int):
        return value
    return 0


def _skill_from_row(row: dict) -> Skill | None:
    name = row.get("skill_name")
    if not name:
        return None
    proficiency = row.get("proficiency")
    return Skill(
        skill_name=name,
        proficiency=proficiency if proficiency in _PROFICIENCY else ProficiencyLevel.BEGINNER,
        years_of_experience=row.get("years_of_experience"),
    )


def profile_from_row(row: dict) -> CandidateProfile:
    """Map a `profiles` row with embedded relations onto CandidateProfile.

    Unknown enum values are dropped rather than failing the whole load.
    """
    ikigai_row = _first(row.get("ikigai_responses"))
    ikigai = None
    if ikigai_row:
        ikigai = IkigaiResponses(**{
            field: ikigai_row.get(field) for field in IkigaiResponses.model_fields
        })

    skills = [s for s in (_skill_from_row(r) for r in row.get("skills") or []) if s is not None]
    availability = row.get("availability")

    return CandidateProfile(
        id=str(row["id"]),
        full_name=row.get("full_name"),
        avatar_url=row.get("avatar_url"),
        bio=row.get("bio"),
        location=row.get("location"),
        current_intent=[i for i in row.get("current_intent") or [] if i in _INTENTS],
        availability=availability if availability in _AVAILABILITY else None,
        professional_background=row.get("professional_background"),
        ikigai=ikigai,
        skills=skills,
        portfolio_count=_portfolio_count(row.get("portfolio_items")),
        email=row.get("email"),
        is_searchable=bool(row.get("is_searchable")),
    )


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------

class InMemoryProfileStore(ProfileStore, IdentityOracle):
    """Profiles held in process. Known users default to the profile ids."""

    name = "memory"

    def __init__(
        self,
        profiles: Iterable[CandidateProfile] = (),
        known_users: Iterable[str] | None = None,
    ) -> None:
        self._profiles = list(profiles)
        if known_users is None:
            known_users = [p.id for p in self._profiles]
        self._known_users = frozenset(known_users)

    async def list_searchable_profiles(
        self, excluding: str, limit: int | None = None
    ) -> list[CandidateProfile]:
        result = [p for p in self._profiles if p.is_searchable and p.id != excluding]
        return result[:limit] if limit is not None else result

    async def resolve(self, user_id: str) -> str:
        if not user_id or user_id not in self._known_users:
            raise AuthFailure("Requester could not be authenticated")
        return user_id


class SupabaseProfileStore(ProfileStore, IdentityOracle):
    """Supabase-backed store using the service-role key."""

    name = "supabase"

    PROFILE_SELECT = "*, ikigai_responses(*), skills(*), portfolio_items(count)"

    def __init__(self, url: str, key: str) -> None:
        self._url = url
        self._key = key
        self._client: AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _get_client(self) -> AsyncClient:
        if self._client is None:
            async with self._client_lock:
                if self._client is None:
                    self._client = await acreate_client(self._url, self._key)
        return self._client

    async def list_searchable_profiles(
        self, excluding: str, limit: int | None = None
    ) -> list[CandidateProfile]:
        client = await self._get_client()
        query = (
            client.table("profiles")
            .select(self.PROFILE_SELECT)
            .eq("is_searchable", True)
            .neq("id", excluding)
        )
        if limit is not None:
            query = query.limit(limit)

        try:
            response = await query.execute()
        except (APIError, httpx.TransportError) as e:
            logger.error("Error fetching profiles: %s", e)
            raise TransportFailure("Profile store is unavailable", transient=False) from e

        return [profile_from_row(row) for row in response.data or []]

    async def resolve(self, user_id: str) -> str:
        if not user_id:
            raise AuthFailure("Requester could not be authenticated")
        client = await self._get_client()
        try:
            response = await client.auth.admin.get_user_by_id(user_id)
        except (AuthError, ValueError) as e:
            # ValueError: id is not a UUID
            logger.info("Identity lookup failed for %s: %s", user_id, e)
            raise AuthFailure("Requester could not be authenticated") from e

        if response is None or response.user is None:
            raise AuthFailure("Requester could not be authenticated")
        return response.user.id
