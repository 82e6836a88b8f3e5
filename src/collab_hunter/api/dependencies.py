"""
Shared FastAPI dependencies.
"""
from fastapi import Request

from collab_hunter.common.config import get_settings
from collab_hunter.extraction.pipeline import ExtractionPipeline
from collab_hunter.infrastructure.llm.generative_client import build_generative_client


def get_pipeline(request: Request) -> ExtractionPipeline:
    """The app-wide pipeline, built on first use and kept on app.state."""
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        pipeline = ExtractionPipeline(build_generative_client(), settings=get_settings())
        request.app.state.pipeline = pipeline
    return pipeline
