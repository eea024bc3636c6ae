"""Local model provider implementation.

Targets a user-run inference server with an OpenAI-compatible API
(Ollama, llama.cpp server, LM Studio, vLLM).
"""

import os
from typing import Optional

from openai import OpenAI

from taskfoundry.config import DEFAULT_LOCAL_ENDPOINT, DEFAULT_REQUEST_TIMEOUT, LLMProvider
from taskfoundry.llm.openai_provider import OpenAIProvider

LOCAL_ENDPOINT_ENV_VAR = "TASKFOUNDRY_LOCAL_URL"


class LocalProvider(OpenAIProvider):
    """Local model provider. Requires a running server, no API key."""

    provider = LLMProvider.LOCAL

    def __init__(self, endpoint: Optional[str] = None, timeout: float = DEFAULT_REQUEST_TIMEOUT):
        super().__init__(timeout=timeout)
        self.endpoint = (
            endpoint or os.environ.get(LOCAL_ENDPOINT_ENV_VAR) or DEFAULT_LOCAL_ENDPOINT
        ).rstrip("/")

    @property
    def display_name(self) -> str:
        return f"Local model ({self.endpoint})"

    def create_client(self, api_key: Optional[str]) -> OpenAI:
        # The OpenAI client insists on a key; local servers ignore it
        return OpenAI(
            api_key=api_key or "local",
            base_url=self.endpoint,
            max_retries=0,
            timeout=self.timeout,
        )
