"""Stage 2: project a full profile onto the bounded scorer view."""

from models.schemas.candidate_profile import CandidateProfile, Skill
from models.schemas.candidate_summary import IkigaiSummary, MatchCandidateSummary

DEFAULT_TEXT_LIMIT = 600
DEFAULT_MAX_SKILLS = 15


def _clip(text: str | None, limit: int) -> str | None:
    if text is None:
        return None
    text = " ".join(text.split())
    if not text:
        return None
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 1)].rstrip() + "…"


def _format_skill(skill: Skill) -> str:
    detail = skill.proficiency.value
    if skill.years_of_experience:
        detail += f", {skill.years_of_experience}y"
    return f"{skill.skill_name} ({detail})"


def summarize(
    profile: CandidateProfile,
    text_limit: int = DEFAULT_TEXT_LIMIT,
    max_skills: int = DEFAULT_MAX_SKILLS,
) -> MatchCandidateSummary:
    """Total: missing optional fields become None/empty, never absent keys."""
    ikigai = IkigaiSummary()
    if profile.ikigai is not None:
        ikigai = IkigaiSummary(**{
            field: _clip(getattr(profile.ikigai, field), text_limit)
            for field in IkigaiSummary.model_fields
        })

    return MatchCandidateSummary(
        id=profile.id,
        name=_clip(profile.full_name, text_limit),
        bio=_clip(profile.bio, text_limit),
        location=_clip(profile.location, text_limit),
        intent=[i.value for i in profile.current_intent],
        availability=profile.availability.value if profile.availability else None,
        background=_clip(profile.professional_background, text_limit),
        ikigai=ikigai,
        skills=", ".join(_format_skill(s) for s in profile.skills[:max_skills]),
        portfolio_count=profile.portfolio_count,
    )
