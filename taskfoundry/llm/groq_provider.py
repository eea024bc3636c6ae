"""Groq provider implementation."""

from typing import Optional

from groq import APIConnectionError, APITimeoutError, Groq

from taskfoundry.config import LLMProvider
from taskfoundry.llm.base import BaseLLMProvider


class GroqProvider(BaseLLMProvider):
    """Groq LLM provider (fast inference for open-source models)."""

    provider = LLMProvider.GROQ
    timeout_errors = (APITimeoutError,)
    connection_errors = (APIConnectionError,)

    def create_client(self, api_key: Optional[str]) -> Groq:
        # One attempt per dispatch pass; the orchestrator decides what happens next
        return Groq(api_key=api_key, max_retries=0, timeout=self.timeout)
