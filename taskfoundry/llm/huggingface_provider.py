"""Hugging Face provider implementation.

The Hugging Face inference router exposes an OpenAI-compatible API, so the
OpenAI client is pointed at its base URL.
"""

from taskfoundry.config import LLMProvider
from taskfoundry.llm.openai_provider import OpenAIProvider


class HuggingFaceProvider(OpenAIProvider):
    """Hugging Face LLM provider (open-source models via the inference router)."""

    provider = LLMProvider.HUGGINGFACE
