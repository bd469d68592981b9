"""Google Gemini API wrapper for the scoring backend.

Every failure is mapped onto the pipeline taxonomy: transport-level problems
become TransportFailure, an unparseable 2xx body becomes ScoringFailure.
Cancellation is never caught, so cancelling the caller aborts the request.
"""

import asyncio
import json
import logging
from typing import Any

import httpx
from google import genai
from google.genai import errors, types

from config import settings
from services.errors import ScoringFailure, TransportFailure

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - AI matching disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


def parse_json_document(text: str | None) -> Any:
    """Parse a model reply as JSON, tolerating a surrounding code fence."""
    if text is None or not text.strip():
        raise ScoringFailure("Scoring backend returned an empty document", raw=text or "")

    text = text.strip()
    # Strip markdown code fences if present
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ScoringFailure(f"Scoring backend returned invalid JSON: {e}", raw=text) from e


async def generate_json(
    system_instruction: str,
    contents: str,
    timeout: float | None = None,
) -> Any:
    """Send one request to Gemini and return the parsed JSON document."""
    client = get_client()
    if client is None:
        raise TransportFailure("Scoring backend is not configured", transient=False)

    config = types.GenerateContentConfig(
        system_instruction=system_instruction,
        temperature=settings.scoring_temperature,
        max_output_tokens=settings.scoring_max_output_tokens,
        response_mime_type="application/json",
    )

    try:
        response = await asyncio.wait_for(
            client.aio.models.generate_content(
                model=settings.gemini_model,
                contents=contents,
                config=config,
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        raise TransportFailure(f"Scoring backend timed out after {timeout}s") from e
    except errors.ServerError as e:
        raise TransportFailure(f"Scoring backend error: HTTP {e.code}") from e
    except errors.ClientError as e:
        # Rate limiting clears up on its own; other 4xx will not
        raise TransportFailure(
            f"Scoring backend rejected the request: HTTP {e.code}",
            transient=e.code == 429,
        ) from e
    except errors.APIError as e:
        raise TransportFailure(f"Scoring backend error: HTTP {e.code}", transient=False) from e
    except httpx.TransportError as e:
        raise TransportFailure(f"Could not reach scoring backend: {e}") from e

    return parse_json_document(response.text)
