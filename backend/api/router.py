import asyncio
import contextlib
import logging
from collections.abc import Awaitable
from typing import TypeVar

from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_pipeline, get_profile_store
from config import settings
from models.requests import MatchRequest
from models.responses import ErrorResponse, MatchResponse, RecommendationsResponse
from services.errors import MatchError
from services.pipeline.orchestrator import MatchPipeline

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)

T = TypeVar("T")

DISCONNECT_POLL_SECONDS = 0.5


class ClientDisconnected(Exception):
    pass


async def _run_until_disconnect(request: Request, coro: Awaitable[T]) -> T:
    """Await `coro`, cancelling it (and its outbound calls) if the client leaves."""
    task = asyncio.ensure_future(coro)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info("Client disconnected, cancelling in-flight search")
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
                raise ClientDisconnected()
    finally:
        # Caller cancelled: wait for the search to unwind before returning
        if not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


def _error_response(error: MatchError) -> ErrorResponse:
    return ErrorResponse(
        error=error.message,
        error_type=error.error_type,
        retryable=error.retryable,
    )


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
        "profile_store": get_profile_store().name,
    }


@router.post("/ai-match", response_model=None)
@limiter.limit(settings.match_rate_limit)
async def ai_match(
    request: Request,
    body: MatchRequest,
    pipeline: MatchPipeline = Depends(get_pipeline),
):
    # Failures are 200 with an error payload so the UI can tell
    # "search failed" apart from "no matches"
    try:
        result = await _run_until_disconnect(
            request, pipeline.find_matches(body.query, body.user_id)
        )
    except MatchError as e:
        logger.info("AI match failed (%s): %s", e.error_type, e.message)
        return _error_response(e)
    except ClientDisconnected:
        return ErrorResponse(error="Client disconnected", error_type="cancelled", retryable=True)

    return MatchResponse(matches=result.raw, tiers=result.tiers)


@router.get("/recommendations", response_model=None)
async def recommendations(
    user_id: str = Query("", alias="userId"),
    limit: int = Query(5, ge=1, le=20),
    pipeline: MatchPipeline = Depends(get_pipeline),
):
    try:
        profiles = await pipeline.recommend(user_id, limit=limit)
    except MatchError as e:
        return _error_response(e)
    return RecommendationsResponse(profiles=profiles)
