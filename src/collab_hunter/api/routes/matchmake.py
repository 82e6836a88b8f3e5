"""
Free-text matchmaking endpoint: `{prompt}` in, `{recommendations, metadata}` out.
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from collab_hunter.api.dependencies import get_pipeline
from collab_hunter.api.schemas import ErrorResponse, MatchmakeRequest, MatchmakeResponse
from collab_hunter.common.errors import MissionFailed
from collab_hunter.common.logging_utils import get_logger
from collab_hunter.extraction.pipeline import ExtractionPipeline

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["matchmaking"])


@router.post(
    "/matchmake",
    response_model=MatchmakeResponse,
    responses={
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def matchmake(
    request: Optional[MatchmakeRequest] = Body(default=None),
    pipeline: ExtractionPipeline = Depends(get_pipeline),
) -> MatchmakeResponse:
    prompt = request.prompt if request is not None else None
    if not isinstance(prompt, str) or not prompt.strip():
        raise HTTPException(status_code=400, detail="Missing prompt (string)")

    try:
        result = await pipeline.matchmake_from_prompt(prompt)
    except MissionFailed as e:
        logger.error(f"[api] Matchmaking failed: {e.cause}")
        raise HTTPException(status_code=502, detail=str(e)) from e

    return MatchmakeResponse(recommendations=result.recommendations, metadata=result.metadata)
