"""Prompt templates for the Gemini scoring call."""

import json

from models.schemas.candidate_summary import MatchCandidateSummary

MIN_REQUESTED_SCORE = 50


def build_match_instruction() -> str:
    """System instruction: scoring rubric and the exact output shape."""
    return f"""You are an intelligent matching assistant for a professional networking platform based on the Ikigai philosophy.

Score how well each candidate profile fits the user's search query.

SCORING RUBRIC (weigh all four):
- Skills and expertise alignment with what the query asks for
- Ikigai alignment: what they love, what they are good at, what the world needs, what they can be paid for
- Professional background and stated intent (cofounder, team_member, client, mentor, advisor, investor) and availability
- Career aspirations and purpose

SCORE SCALE:
- 90-100: Perfect match. Fits nearly everything the query describes.
- 70-89:  Strong match. Fits the core of the query with minor gaps.
- 50-69:  Potential match. Partial fit worth a conversation.
- below 50: Not a match. Leave these out.

RULES:
- Use only the profile ids given in the input. Never invent ids.
- Judge each candidate at most once.
- Only include matches with score >= {MIN_REQUESTED_SCORE}.
- Sort by score descending.

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "matches": [
    {{
      "profile_id": "<id from the input>",
      "score": <integer 0-100>,
      "explanation": "<2-3 sentences explaining why they match>",
      "top_attributes": [<up to 3 short key matching points>]
    }}
  ]
}}"""


def build_match_content(query: str, summaries: list[MatchCandidateSummary]) -> str:
    """User content: the literal query plus serialized candidate summaries."""
    profiles = [s.model_dump(mode="json") for s in summaries]
    return (
        f"Search query: {json.dumps(query)}\n\n"
        f"Available profiles:\n{json.dumps(profiles, indent=2, ensure_ascii=False)}"
    )
