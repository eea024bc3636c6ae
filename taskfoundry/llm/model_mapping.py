"""Translation of requested model names between providers."""

import logging
from typing import Mapping, Optional

from taskfoundry.config import AVAILABLE_MODELS, LLMProvider, get_provider_spec

logger = logging.getLogger("taskfoundry")

_LLAMA_70B_HF = "meta-llama/Llama-3.1-70B-Instruct"
_LLAMA_8B_HF = "meta-llama/Llama-3.1-8B-Instruct"

# Canonical model name -> equivalent model per provider
MODEL_MAPPINGS: dict[str, dict[LLMProvider, str]] = {
    # Groq models
    "llama-3.3-70b-versatile": {
        LLMProvider.GROQ: "llama-3.3-70b-versatile",
        LLMProvider.OPENAI: "gpt-4o-mini",
        LLMProvider.HUGGINGFACE: _LLAMA_70B_HF,
        LLMProvider.FREETIER: "llama-3.3-70b-versatile",
    },
    "llama-3.1-70b-versatile": {
        LLMProvider.GROQ: "llama-3.1-70b-versatile",
        LLMProvider.OPENAI: "gpt-4o-mini",
        LLMProvider.HUGGINGFACE: _LLAMA_70B_HF,
        LLMProvider.FREETIER: "llama-3.3-70b-versatile",
    },
    "mixtral-8x7b-32768": {
        LLMProvider.GROQ: "mixtral-8x7b-32768",
        LLMProvider.OPENAI: "gpt-4o-mini",
        LLMProvider.HUGGINGFACE: "mistralai/Mixtral-8x7B-Instruct-v0.1",
        LLMProvider.FREETIER: "llama-3.3-70b-versatile",
    },
    # OpenAI models
    "gpt-4o": {
        LLMProvider.GROQ: "llama-3.3-70b-versatile",
        LLMProvider.OPENAI: "gpt-4o",
        LLMProvider.HUGGINGFACE: _LLAMA_70B_HF,
        LLMProvider.FREETIER: "llama-3.3-70b-versatile",
    },
    "gpt-4o-mini": {
        LLMProvider.GROQ: "llama-3.3-70b-versatile",
        LLMProvider.OPENAI: "gpt-4o-mini",
        LLMProvider.HUGGINGFACE: _LLAMA_70B_HF,
        LLMProvider.FREETIER: "llama-3.3-70b-versatile",
    },
    "gpt-4": {
        LLMProvider.GROQ: "llama-3.3-70b-versatile",
        LLMProvider.OPENAI: "gpt-4",
        LLMProvider.HUGGINGFACE: _LLAMA_70B_HF,
        LLMProvider.FREETIER: "llama-3.3-70b-versatile",
    },
    "gpt-3.5-turbo": {
        LLMProvider.GROQ: "llama-3.1-8b-instant",
        LLMProvider.OPENAI: "gpt-3.5-turbo",
        LLMProvider.HUGGINGFACE: _LLAMA_8B_HF,
        LLMProvider.FREETIER: "llama-3.3-70b-versatile",
    },
}


class ModelMapper:
    """Resolve the concrete model name to send to a provider.

    Args:
        table: Canonical name -> {provider: model}. Defaults to MODEL_MAPPINGS.
        available_models: Native model names per provider, passed through as-is.
    """

    def __init__(
        self,
        table: Optional[Mapping[str, Mapping[LLMProvider, str]]] = None,
        available_models: Optional[Mapping[LLMProvider, list[str]]] = None,
    ):
        self.table = MODEL_MAPPINGS if table is None else table
        self.available_models = AVAILABLE_MODELS if available_models is None else available_models

    def resolve(self, requested_model: Optional[str], provider: LLMProvider) -> str:
        """Map a requested model onto the target provider.

        Args:
            requested_model: The caller's model, or None for the provider default.
            provider: The provider that will serve the request.

        Returns:
            The model name to send. An unknown model falls back to the
            provider's default with an informational notice.
        """
        default_model = get_provider_spec(provider).default_model
        if not requested_model:
            return default_model

        # The local endpoint serves whatever the user has pulled
        if provider is LLMProvider.LOCAL:
            return requested_model

        mapped = self.table.get(requested_model, {}).get(provider)
        if mapped:
            return mapped

        if requested_model in self.available_models.get(provider, []):
            return requested_model

        if requested_model != default_model:
            logger.info(
                'Model "%s" not available for %s, using %s',
                requested_model,
                provider.value,
                default_model,
            )
        return default_model
