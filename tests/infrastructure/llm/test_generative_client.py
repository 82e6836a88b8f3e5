"""
Tests for the chat-model backed generative client.
"""
from unittest.mock import AsyncMock, Mock

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from collab_hunter.common.errors import TransportError
from collab_hunter.infrastructure.llm.generative_client import (
    WEB_SEARCH_TOOL,
    ChatModelGenerativeClient,
    GenerationRequest,
    message_citations,
    message_text,
)


def fake_model(reply=None, error=None):
    runnable = Mock()
    runnable.ainvoke = AsyncMock(return_value=reply, side_effect=error)

    model = Mock()
    model.bind.return_value = runnable
    model.bind_tools.return_value.bind.return_value = runnable
    return model, runnable


CITED_REPLY = AIMessage(
    content=[
        {
            "type": "text",
            "text": '[{"ipName": "Labubu"}]',
            "annotations": [
                {"type": "url_citation", "url": "https://a.example.com", "title": "A"},
                {"type": "url_citation", "url": "https://a.example.com", "title": "A again"},
                {"type": "file_citation", "file_id": "f1"},
            ],
        },
        {"type": "reasoning", "summary": []},
    ]
)


class TestMessageHelpers:
    def test_text_from_string_content(self):
        assert message_text(AIMessage(content="[]")) == "[]"

    def test_text_from_blocks(self):
        message = AIMessage(content=[{"type": "text", "text": "[1,"}, "2]", {"type": "reasoning"}])
        assert message_text(message) == "[1,2]"

    def test_citations_deduped_by_url(self):
        sources = message_citations(CITED_REPLY)
        assert [(s.uri, s.title) for s in sources] == [("https://a.example.com", "A")]

    def test_no_citations_for_plain_text(self):
        assert message_citations(AIMessage(content="hello")) == []


class TestBuildMessages:
    def test_schema_appended_to_system_message(self):
        client = ChatModelGenerativeClient(Mock())
        request = GenerationRequest(
            instruction_text="find cases",
            system_instruction="Return JSON.",
            output_schema={"type": "array"},
        )
        messages = client.build_messages(request)
        assert isinstance(messages[0], SystemMessage)
        assert messages[0].content.startswith("Return JSON.")
        assert '{"type": "array"}' in messages[0].content
        assert isinstance(messages[1], HumanMessage)
        assert messages[1].content == "find cases"

    def test_no_system_message_when_empty(self):
        client = ChatModelGenerativeClient(Mock())
        messages = client.build_messages(GenerationRequest(instruction_text="hi"))
        assert len(messages) == 1


class TestGenerate:
    @pytest.mark.asyncio
    async def test_web_search_binds_tool_and_collects_citations(self):
        model, runnable = fake_model(reply=CITED_REPLY)
        client = ChatModelGenerativeClient(model)

        response = await client.generate(GenerationRequest(instruction_text="x", temperature=0.3))

        model.bind_tools.assert_called_once_with([WEB_SEARCH_TOOL])
        model.bind_tools.return_value.bind.assert_called_once_with(temperature=0.3)
        assert response.text == '[{"ipName": "Labubu"}]'
        assert response.grounding_metadata.source_urls() == ["https://a.example.com"]

    @pytest.mark.asyncio
    async def test_without_web_search(self):
        model, runnable = fake_model(reply=AIMessage(content="{}"))
        client = ChatModelGenerativeClient(model)

        response = await client.generate(GenerationRequest(instruction_text="x", web_search=False))

        model.bind_tools.assert_not_called()
        assert response.text == "{}"
        assert response.grounding_metadata is None

    @pytest.mark.asyncio
    async def test_sdk_errors_become_transport_errors(self):
        model, _ = fake_model(error=RuntimeError("503 Service Unavailable"))
        client = ChatModelGenerativeClient(model)

        with pytest.raises(TransportError, match="503"):
            await client.generate(GenerationRequest(instruction_text="x"))
