"""
Mission endpoints: preview the instruction text, then run it.
"""
from fastapi import APIRouter, Depends, HTTPException

from collab_hunter.api.dependencies import get_pipeline
from collab_hunter.api.schemas import (
    ErrorResponse,
    PreviewRequest,
    PreviewResponse,
    RunMissionRequest,
    RunMissionResponse,
)
from collab_hunter.common.errors import ConfigError, MissionFailed
from collab_hunter.common.logging_utils import get_logger
from collab_hunter.extraction.pipeline import ExtractionPipeline
from collab_hunter.prompts.query_builders import build_query

logger = get_logger(__name__)

router = APIRouter(prefix="/api/missions", tags=["missions"])


@router.post("/preview", response_model=PreviewResponse, responses={400: {"model": ErrorResponse}})
async def preview_mission(request: PreviewRequest) -> PreviewResponse:
    query = build_query(request.config)
    return PreviewResponse(
        kind=query.kind,
        instructionText=query.instruction_text,
        systemInstruction=query.system_instruction,
        outputShape=query.output_shape.name,
    )


@router.post(
    "/run",
    response_model=RunMissionResponse,
    responses={
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def run_mission(
    request: RunMissionRequest,
    pipeline: ExtractionPipeline = Depends(get_pipeline),
) -> RunMissionResponse:
    """
    Run one mission to completion and return its typed result.

    **Errors:**
    - 400: a required mission input is blank
    - 502: the generative service did not produce a valid result within the retry budget
    """
    try:
        result = await pipeline.run_mission(request.config, request.instructionText)
    except ConfigError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except MissionFailed as e:
        logger.error(f"[api] Mission failed: {e.cause}")
        raise HTTPException(status_code=502, detail=str(e)) from e

    return RunMissionResponse(
        kind=result.kind.value,
        instructionText=result.instruction_text,
        cases=result.cases,
        trends=result.trends,
        ipProfile=result.ip_profile,
        recommendations=result.recommendations,
        metadata=result.metadata,
    )
