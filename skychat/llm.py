import logging
from typing import Any, Optional

from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import BaseModel

from .config import AppConfig

logger = logging.getLogger("skychat.llm")

SYSTEM_PROMPT = (
    "You are a helpful weather assistant that provides concise and accurate weather information. "
    "When users ask about weather, provide relevant details about temperature, conditions, and recommendations."
)


class CompletionError(Exception):
    def __init__(self, error: str, details: Optional[str] = None):
        super().__init__(details or error)
        self.error = error
        self.details = details


class CompletionReply(BaseModel):
    """Mirrors the chat endpoint payload: ``{response}`` or ``{error, details}``."""

    response: Optional[str] = None
    error: Optional[str] = None
    details: Optional[str] = None

    def raise_for_error(self) -> "CompletionReply":
        if self.error:
            raise CompletionError(self.error, self.details)
        return self


def get_llm(
    config: AppConfig,
    temperature: Optional[float] = None,
    max_output_tokens: Optional[int] = None,
) -> ChatGoogleGenerativeAI:
    temp = config.llm_temperature if temperature is None else temperature
    mot = config.llm_max_output_tokens if max_output_tokens is None else max_output_tokens
    return ChatGoogleGenerativeAI(
        model=config.gemini_model,
        google_api_key=config.google_api_key,
        temperature=temp,
        max_output_tokens=mot,
        top_p=config.llm_top_p,
        top_k=config.llm_top_k,
        timeout=config.llm_timeout_seconds,
    )


def _content_text(resp: Any) -> str:
    content = getattr(resp, "content", resp)
    # Some chat models return a list of content parts
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text") or "")
        content = "".join(parts)
    return (content or "").strip() if isinstance(content, str) else ""


class CompletionClient:
    """Send one flattened prompt under a fixed persona; never raises."""

    def __init__(self, llm, system_prompt: str = SYSTEM_PROMPT):
        self._llm = llm
        self._system_prompt = system_prompt

    @classmethod
    def from_config(cls, config: AppConfig) -> "CompletionClient":
        return cls(get_llm(config))

    def complete(self, prompt: str) -> CompletionReply:
        try:
            resp = self._llm.invoke([("system", self._system_prompt), ("human", prompt)])
            text = _content_text(resp)
            if not text:
                raise ValueError("No response content from AI")
        except Exception as e:
            logger.exception("Completion provider error")
            return CompletionReply(error="Failed to process request", details=str(e) or "Unknown error")
        logger.info("LLM answered with %s chars", len(text))
        return CompletionReply(response=text)
