"""
The generative-service boundary.

The core only ever sees GenerationRequest -> GenerationResponse. `text` is
untrusted and always goes through the tolerant deserializer and the validator.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from pydantic import BaseModel, Field
from typing_extensions import Protocol

from collab_hunter.common.errors import TransportError
from collab_hunter.common.logging_utils import get_logger
from collab_hunter.models.provenance import GroundingMetadata, WebSource

logger = get_logger(__name__)

WEB_SEARCH_TOOL: Dict[str, Any] = {"type": "web_search_preview"}


class GenerationRequest(BaseModel):
    instruction_text: str
    system_instruction: str = ""
    output_schema: Optional[Dict[str, Any]] = None
    web_search: bool = True
    temperature: float = 0.1


class GenerationResponse(BaseModel):
    text: str = ""
    grounding_metadata: Optional[GroundingMetadata] = None


class GenerativeClient(Protocol):
    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        ...


def message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts: List[str] = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") in (None, "text", "output_text"):
            text = block.get("text")
            if isinstance(text, str):
                parts.append(text)
    return "".join(parts)


def message_citations(message: BaseMessage) -> List[WebSource]:
    """URL citations the Responses API attaches to text blocks."""
    content = message.content
    if isinstance(content, str):
        return []

    sources: List[WebSource] = []
    seen = set()
    for block in content or []:
        if not isinstance(block, dict):
            continue
        for ann in block.get("annotations") or []:
            if not isinstance(ann, dict) or ann.get("type") != "url_citation":
                continue
            url = ann.get("url")
            if not url or url in seen:
                continue
            seen.add(url)
            sources.append(WebSource(uri=url, title=ann.get("title")))
    return sources


class ChatModelGenerativeClient:
    """GenerativeClient backed by a LangChain chat model (ChatOpenAI by default)."""

    def __init__(self, model: BaseChatModel, *, web_search_tool: Optional[Dict[str, Any]] = None) -> None:
        self.model = model
        self.web_search_tool = web_search_tool or WEB_SEARCH_TOOL

    def build_messages(self, request: GenerationRequest) -> List[BaseMessage]:
        system = request.system_instruction.strip()
        if request.output_schema:
            schema = json.dumps(request.output_schema, ensure_ascii=False)
            system = f"{system}\n\nThe JSON you output must conform to this JSON Schema:\n{schema}".strip()

        messages: List[BaseMessage] = []
        if system:
            messages.append(SystemMessage(content=system))
        messages.append(HumanMessage(content=request.instruction_text))
        return messages

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        runnable: Any = self.model
        if request.web_search:
            runnable = runnable.bind_tools([self.web_search_tool])
        runnable = runnable.bind(temperature=request.temperature)

        try:
            message = await runnable.ainvoke(self.build_messages(request))
        except Exception as e:
            raise TransportError(f"Generative service call failed: {e}") from e

        citations = message_citations(message)
        metadata = GroundingMetadata.from_sources(citations) if citations else None
        return GenerationResponse(text=message_text(message), grounding_metadata=metadata)


def build_generative_client(model: Optional[BaseChatModel] = None) -> ChatModelGenerativeClient:
    if model is None:
        from collab_hunter.infrastructure.llm.base_models import build_chat_model

        model = build_chat_model()
    return ChatModelGenerativeClient(model)
