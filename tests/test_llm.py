"""Tests for the completion client."""

from __future__ import annotations

import pytest

from conftest import StubLLM
from skychat.llm import SYSTEM_PROMPT, CompletionClient, CompletionError, CompletionReply


def test_sends_persona_and_prompt() -> None:
    llm = StubLLM("Sunny and 75.")
    reply = CompletionClient(llm).complete("composed prompt")

    assert reply.response == "Sunny and 75."
    assert reply.error is None
    assert llm.calls == [[("system", SYSTEM_PROMPT), ("human", "composed prompt")]]


def test_provider_exception_becomes_error_payload() -> None:
    reply = CompletionClient(StubLLM(error=RuntimeError("quota exceeded"))).complete("p")

    assert reply.response is None
    assert reply.error == "Failed to process request"
    assert reply.details == "quota exceeded"


def test_empty_content_is_an_error() -> None:
    reply = CompletionClient(StubLLM("   ")).complete("p")

    assert reply.error == "Failed to process request"
    assert reply.details == "No response content from AI"


def test_content_parts_are_joined() -> None:
    reply = CompletionClient(StubLLM([{"type": "text", "text": "Hello "}, "there"])).complete("p")
    assert reply.response == "Hello there"


def test_raise_for_error() -> None:
    with pytest.raises(CompletionError) as exc:
        CompletionReply(error="Failed to process request", details="boom").raise_for_error()
    assert exc.value.details == "boom"
    assert CompletionReply(response="ok").raise_for_error().response == "ok"
