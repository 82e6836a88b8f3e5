from __future__ import annotations

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from collab_hunter.common.config import Settings, get_settings


def build_chat_model(settings: Settings | None = None) -> BaseChatModel:
    """
    Chat model behind the generative boundary.

    SDK-level retries are off: RetryPolicy owns retrying so that a retried
    attempt also re-runs deserialization and validation.
    """
    settings = settings or get_settings()
    kwargs = {}
    if settings.openai_api_key:
        kwargs["api_key"] = settings.openai_api_key

    return ChatOpenAI(
        model=settings.model_name,
        temperature=settings.temperature,
        max_retries=0,
        use_responses_api=True,
        **kwargs,
    )
