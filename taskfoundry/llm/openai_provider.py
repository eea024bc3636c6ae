"""OpenAI GPT provider implementation."""

from typing import Optional

from openai import APIConnectionError, APITimeoutError, OpenAI

from taskfoundry.config import LLMProvider
from taskfoundry.llm.base import BaseLLMProvider


class OpenAIProvider(BaseLLMProvider):
    """OpenAI GPT LLM provider."""

    provider = LLMProvider.OPENAI
    timeout_errors = (APITimeoutError,)
    connection_errors = (APIConnectionError,)

    def create_client(self, api_key: Optional[str]) -> OpenAI:
        return OpenAI(
            api_key=api_key,
            base_url=self.spec.base_url,
            max_retries=0,
            timeout=self.timeout,
        )
