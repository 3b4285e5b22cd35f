"""LLM invocation client.

A thin, retryless wrapper around a chat model: one system prompt (the agent
role), one user message (the project context), text back. Retries, if any,
belong to the caller.
"""

import json
import re
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
import structlog

from ..config import Settings
from ..errors import LLMInvocationError, LLMResponseParseError

logger = structlog.get_logger()

_FENCE_PATTERN = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL | re.IGNORECASE)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class LLMFactory:
    """Factory for creating chat model instances from settings.

    Supports:
    - OpenAI (default): direct connection to the OpenAI API
    - OpenRouter: OpenAI-compatible gateway to other providers
    """

    @staticmethod
    def create_llm(settings: Settings) -> ChatOpenAI:
        """Create a chat model for the configured provider.

        Raises:
            ValueError: If the provider's API key is not configured.
        """
        logger.info(
            "llm_client_created",
            provider=settings.llm_provider,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
        )

        if settings.llm_provider == "openrouter":
            return LLMFactory._create_openrouter_llm(settings)
        return LLMFactory._create_openai_llm(settings)

    @staticmethod
    def _create_openrouter_llm(settings: Settings) -> ChatOpenAI:
        if not settings.openrouter_api_key:
            raise ValueError("OPENROUTER_API_KEY is not set. Please set it to use OpenRouter.")

        return ChatOpenAI(
            base_url=OPENROUTER_BASE_URL,
            api_key=settings.openrouter_api_key,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            default_headers={"X-Title": settings.openrouter_app_name},
        )

    @staticmethod
    def _create_openai_llm(settings: Settings) -> ChatOpenAI:
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is not set. Please set it to use OpenAI.")

        return ChatOpenAI(
            api_key=settings.openai_api_key,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
        )


def parse_json_object(text: str) -> dict[str, Any]:
    """Parse a model reply that must be a single JSON object.

    A single surrounding markdown code fence is tolerated.

    Raises:
        LLMResponseParseError: If the text is not valid JSON or not an object.
    """
    match = _FENCE_PATTERN.match(text)
    payload = match.group(1) if match else text

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise LLMResponseParseError(f"Invalid JSON in model response: {e}") from e

    if not isinstance(data, dict):
        raise LLMResponseParseError(
            f"Expected a JSON object in model response, got {type(data).__name__}"
        )
    return data


def _content_text(content: Any) -> str:
    """Flatten message content (plain string or list of content parts)."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return str(content or "")


class LLMClient:
    """Send a role prompt plus project context to the chat model."""

    def __init__(self, llm: BaseChatModel):
        self._llm = llm

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMClient":
        return cls(LLMFactory.create_llm(settings))

    async def invoke(
        self,
        role_prompt: str,
        context_text: str,
        expect_structured: bool = False,
    ) -> str:
        """Invoke the model once and return its raw text reply.

        With ``expect_structured`` the provider is asked for JSON output and the
        reply is checked to parse as a single JSON object.

        Raises:
            LLMInvocationError: Provider or network failure, or an empty reply.
            LLMResponseParseError: Structured output requested but not returned.
        """
        messages = [SystemMessage(content=role_prompt), HumanMessage(content=context_text)]
        runnable = (
            self._llm.bind(response_format={"type": "json_object"})
            if expect_structured
            else self._llm
        )

        try:
            response = await runnable.ainvoke(messages)
        except Exception as e:
            logger.error(
                "llm_invocation_failed",
                error=str(e),
                error_type=type(e).__name__,
                structured=expect_structured,
            )
            raise LLMInvocationError(f"Model invocation failed: {e}") from e

        text = _content_text(response.content)
        if not text.strip():
            raise LLMInvocationError("Empty response from model")

        if expect_structured:
            parse_json_object(text)

        logger.debug(
            "llm_invocation_complete",
            structured=expect_structured,
            context_chars=len(context_text),
            response_chars=len(text),
        )
        return text

    async def invoke_structured(self, role_prompt: str, context_text: str) -> dict[str, Any]:
        """Invoke the model in structured mode and return the parsed object."""
        text = await self.invoke(role_prompt, context_text, expect_structured=True)
        return parse_json_object(text)
