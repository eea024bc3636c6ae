"""LLM provider module for taskfoundry.

This module provides a unified interface to multiple LLM providers with
automatic fallback between them.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from taskfoundry.config import DEFAULT_REQUEST_TIMEOUT, GenerationMode, LLMProvider
from taskfoundry.llm.base import BaseLLMProvider
from taskfoundry.llm.exceptions import (
    ConfigurationError,
    ExhaustedFallbackError,
    LLMError,
    MalformedResponseError,
    MissingAPIKeyError,
    ProviderError,
    QuotaExceededError,
    TransientProviderError,
)
from taskfoundry.llm.models import (
    CommitHints,
    CommitResult,
    EngineConfig,
    GenerationRequest,
    GenerationResult,
    TaskResult,
)
from taskfoundry.llm.orchestrator import PROVIDER_CLASSES, EngineOrchestrator, build_providers

# Load environment variables from .env file
load_dotenv()


def get_provider(provider: LLMProvider, config: Optional[EngineConfig] = None) -> BaseLLMProvider:
    """Get an LLM provider adapter.

    Args:
        provider: The provider to use.
        config: Engine configuration (timeout, local endpoint).

    Returns:
        An instance of the appropriate provider adapter.

    Raises:
        ValueError: If the provider is not supported.
    """
    if provider not in PROVIDER_CLASSES:
        raise ValueError(f"Unsupported provider: {provider}")
    return build_providers(config or EngineConfig())[provider]


def generate(
    diff_text: str,
    engine: str = "auto",
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    detailed: bool = False,
    commit_mode: bool = False,
    type: Optional[str] = None,
    scope: Optional[str] = None,
    breaking: bool = False,
    fallback: bool = False,
    api_keys: Optional[dict[str, str]] = None,
    local_endpoint: Optional[str] = None,
    timeout: Optional[float] = None,
    repo_root: Optional[Path] = None,
) -> GenerationResult:
    """Generate a task description or commit message from a diff.

    This is the main entry point for callers.

    Args:
        diff_text: The git diff to describe.
        engine: "auto" or a provider name (groq, openai, huggingface, freetier, local).
        model: Requested model, mapped to each provider's equivalent.
        temperature: Sampling temperature (0-2). Defaults per mode.
        max_tokens: Completion budget (1-4000). Defaults per mode.
        detailed: Detailed task layout.
        commit_mode: Produce a conventional commit instead of a task.
        type: Commit type hint.
        scope: Commit scope hint.
        breaking: Mark the commit as breaking.
        fallback: With an explicit engine, fall back to auto mode on a transient failure.
        api_keys: Explicit keys by provider name, overriding every other source.
        local_endpoint: Base URL of the local model server.
        timeout: Seconds before a provider call counts as a timeout.
        repo_root: Repository root for project-level configuration.

    Returns:
        A TaskResult, or a CommitResult when commit_mode is set.

    Raises:
        MissingAPIKeyError: If an explicitly chosen provider has no key.
        QuotaExceededError: If the free tier was the only option and is used up.
        ExhaustedFallbackError: If every candidate provider failed.
        LLMError: For other LLM-related errors.
    """
    request = GenerationRequest(
        diff_text=diff_text,
        mode=GenerationMode.COMMIT if commit_mode else GenerationMode.TASK,
        detailed=detailed,
        model_hint=model,
        temperature=temperature,
        max_tokens=max_tokens,
        commit_hints=CommitHints(type=type, scope=scope, breaking=breaking) if commit_mode else None,
    )
    config = EngineConfig(
        engine=engine,
        fallback=fallback,
        api_keys=api_keys or {},
        local_endpoint=local_endpoint,
        timeout=timeout or DEFAULT_REQUEST_TIMEOUT,
    )
    return EngineOrchestrator(repo_root=repo_root).dispatch(request, config)


# Export commonly used items
__all__ = [
    "BaseLLMProvider",
    "CommitHints",
    "CommitResult",
    "ConfigurationError",
    "EngineConfig",
    "EngineOrchestrator",
    "ExhaustedFallbackError",
    "GenerationRequest",
    "GenerationResult",
    "LLMError",
    "MalformedResponseError",
    "MissingAPIKeyError",
    "ProviderError",
    "QuotaExceededError",
    "TaskResult",
    "TransientProviderError",
    "generate",
    "get_provider",
]
