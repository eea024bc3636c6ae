"""Engine dispatch and fallback.

Providers are tried strictly one after another; the first success wins and
no later provider is called.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional

from taskfoundry.config import LLMProvider, parse_engine
from taskfoundry.llm.base import BaseLLMProvider
from taskfoundry.llm.classification import describe_failure, is_retryable
from taskfoundry.llm.credentials import CredentialResolver
from taskfoundry.llm.exceptions import ExhaustedFallbackError, LLMError
from taskfoundry.llm.freetier_provider import FreeTierProvider
from taskfoundry.llm.groq_provider import GroqProvider
from taskfoundry.llm.huggingface_provider import HuggingFaceProvider
from taskfoundry.llm.local_provider import LocalProvider
from taskfoundry.llm.model_mapping import ModelMapper
from taskfoundry.llm.models import EngineConfig, GenerationRequest, GenerationResult
from taskfoundry.llm.openai_provider import OpenAIProvider
from taskfoundry.llm.parsing import parse_response
from taskfoundry.usage import UsageTracker

logger = logging.getLogger("taskfoundry")

PROVIDER_CLASSES: dict[LLMProvider, type[BaseLLMProvider]] = {
    LLMProvider.GROQ: GroqProvider,
    LLMProvider.OPENAI: OpenAIProvider,
    LLMProvider.HUGGINGFACE: HuggingFaceProvider,
    LLMProvider.FREETIER: FreeTierProvider,
    LLMProvider.LOCAL: LocalProvider,
}


def build_providers(
    config: EngineConfig,
    tracker: Optional[UsageTracker] = None,
    has_credentials: bool = False,
) -> dict[LLMProvider, BaseLLMProvider]:
    """Instantiate one adapter per provider for a dispatch.

    Args:
        config: Engine configuration (timeout, local endpoint).
        tracker: Usage tracker handed to the free tier.
        has_credentials: Whether the user has any hosted key.
    """
    providers: dict[LLMProvider, BaseLLMProvider] = {}
    for provider, provider_class in PROVIDER_CLASSES.items():
        if provider is LLMProvider.FREETIER:
            providers[provider] = FreeTierProvider(
                tracker=tracker, has_credentials=has_credentials, timeout=config.timeout
            )
        elif provider is LLMProvider.LOCAL:
            providers[provider] = LocalProvider(
                endpoint=config.local_endpoint, timeout=config.timeout
            )
        else:
            providers[provider] = provider_class(timeout=config.timeout)
    return providers


class EngineOrchestrator:
    """Pick providers for a request and fall back between them.

    Args:
        resolver: Credential source. Built from config files per dispatch when None.
        mapper: Model name translation.
        tracker: Free-tier usage tracker.
        providers: Adapter per provider. Built per dispatch when None.
        repo_root: Repository root for project-level API keys.
    """

    def __init__(
        self,
        resolver: Optional[CredentialResolver] = None,
        mapper: Optional[ModelMapper] = None,
        tracker: Optional[UsageTracker] = None,
        providers: Optional[Mapping[LLMProvider, BaseLLMProvider]] = None,
        repo_root: Optional[Path] = None,
    ):
        self.resolver = resolver
        self.mapper = mapper or ModelMapper()
        self.tracker = tracker
        self.providers = providers
        self.repo_root = repo_root

    def _resolver_for(self, config: EngineConfig) -> CredentialResolver:
        if self.resolver is not None:
            return self.resolver
        return CredentialResolver.from_sources(overrides=config.api_keys, repo_root=self.repo_root)

    def _providers_for(
        self, config: EngineConfig, resolver: CredentialResolver
    ) -> Mapping[LLMProvider, BaseLLMProvider]:
        if self.providers is not None:
            return self.providers
        return build_providers(
            config,
            tracker=self.tracker,
            has_credentials=resolver.has_any_credentials(),
        )

    def auto_candidates(self, resolver: CredentialResolver) -> list[LLMProvider]:
        """Hosted providers with a key, in preference order, then the free tier."""
        return resolver.configured_hosted_providers() + [LLMProvider.FREETIER]

    def dispatch(
        self, request: GenerationRequest, config: Optional[EngineConfig] = None
    ) -> GenerationResult:
        """Generate a structured result for the request.

        Args:
            request: What to generate.
            config: Engine selection. Defaults to auto mode.

        Returns:
            TaskResult or CommitResult, depending on request.mode.

        Raises:
            LLMError: The single candidate's own error, or ExhaustedFallbackError
                when several candidates were tried and all failed.
        """
        config = config or EngineConfig()
        resolver = self._resolver_for(config)
        providers = self._providers_for(config, resolver)
        selected = parse_engine(config.engine)

        if selected is None:
            candidates = self.auto_candidates(resolver)
            if candidates == [LLMProvider.FREETIER]:
                logger.info("No API keys configured, using free tier...")
            return self._run(candidates, request, resolver, providers)

        try:
            return self._attempt(selected, request, resolver, providers)
        except LLMError as e:
            if not config.fallback or not is_retryable(e):
                raise
            candidates = [p for p in self.auto_candidates(resolver) if p is not selected]
            if not candidates:
                raise
            logger.warning(
                "%s failed (%s), trying auto fallback...", selected.value, describe_failure(e)
            )
            return self._run(
                candidates, request, resolver, providers, failures=[(selected.value, e)]
            )

    def _run(
        self,
        candidates: list[LLMProvider],
        request: GenerationRequest,
        resolver: CredentialResolver,
        providers: Mapping[LLMProvider, BaseLLMProvider],
        failures: Optional[list[tuple[str, Exception]]] = None,
    ) -> GenerationResult:
        failures = list(failures or [])

        for index, provider in enumerate(candidates):
            try:
                return self._attempt(provider, request, resolver, providers)
            except LLMError as e:
                failures.append((provider.value, e))

                if index < len(candidates) - 1:
                    if is_retryable(e):
                        logger.warning(
                            "%s temporarily unavailable (%s), trying next option...",
                            provider.value,
                            describe_failure(e),
                        )
                    else:
                        logger.warning("%s failed: %s", provider.value, e)
                    continue

                # The terminal candidate's error surfaces as-is when it was the only one
                if len(failures) == 1:
                    raise
                raise ExhaustedFallbackError(failures, resolver.has_any_credentials()) from e

        raise ValueError("No candidate providers to try")

    def _attempt(
        self,
        provider: LLMProvider,
        request: GenerationRequest,
        resolver: CredentialResolver,
        providers: Mapping[LLMProvider, BaseLLMProvider],
    ) -> GenerationResult:
        adapter = providers[provider]
        model = self.mapper.resolve(request.model_hint, provider)
        api_key = resolver.resolve(provider)

        logger.info("Trying %s (%s)...", adapter.display_name, model)
        raw_response = adapter.generate(request, model, api_key)
        return parse_response(raw_response, request.mode, request.commit_hints)
