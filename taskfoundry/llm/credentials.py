"""Layered API key resolution.

Sources, highest priority first:
1. Explicit override (CLI flag or programmatic api_keys)
2. Project config: <repo>/.taskfoundry/config.yaml ``api_keys``
3. System-wide credentials: ~/.taskfoundry/credentials
4. Environment variable (e.g. GROQ_API_KEY)
"""

import os
import re
from pathlib import Path
from typing import Mapping, Optional

from taskfoundry import global_config, user_config
from taskfoundry.config import (
    HOSTED_PREFERENCE,
    LLMProvider,
    ProviderKind,
    get_provider_spec,
)

SOURCE_OVERRIDE = "override"
SOURCE_PROJECT = "project"
SOURCE_SYSTEM = "system"
SOURCE_ENVIRONMENT = "environment"


class CredentialResolver:
    """Resolve per-provider API keys from layered sources.

    Layers keyed by provider name (override, project) and by env var name
    (system credentials file, environment) are both supported.
    """

    def __init__(
        self,
        overrides: Optional[Mapping[str, str]] = None,
        project_keys: Optional[Mapping[str, str]] = None,
        system_keys: Optional[Mapping[str, str]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.overrides = {k.lower(): v for k, v in (overrides or {}).items() if v}
        self.project_keys = {k.lower(): v for k, v in (project_keys or {}).items() if v}
        self.system_keys = dict(system_keys or {})
        self.environ = environ if environ is not None else os.environ

    @classmethod
    def from_sources(
        cls,
        overrides: Optional[Mapping[str, str]] = None,
        repo_root: Optional[Path] = None,
    ) -> "CredentialResolver":
        """Build a resolver from the config files on disk.

        Args:
            overrides: Explicit keys by provider name.
            repo_root: Repository root for the project layer, if any.
        """
        project_keys = user_config.get_api_keys(repo_root) if repo_root else {}
        return cls(
            overrides=overrides,
            project_keys=project_keys,
            system_keys=global_config.load_credentials(),
        )

    def _lookup(self, provider: LLMProvider) -> tuple[Optional[str], Optional[str]]:
        env_var = get_provider_spec(provider).api_key_env_var
        layers = (
            (SOURCE_OVERRIDE, self.overrides.get(provider.value)),
            (SOURCE_PROJECT, self.project_keys.get(provider.value)),
            (SOURCE_SYSTEM, self.system_keys.get(env_var)),
            (SOURCE_ENVIRONMENT, self.environ.get(env_var)),
        )
        for source, value in layers:
            if value and value.strip():
                return value.strip(), source
        return None, None

    def resolve(self, provider: LLMProvider) -> Optional[str]:
        """Get the API key for a provider, or None when no layer has one."""
        return self._lookup(provider)[0]

    def source_of(self, provider: LLMProvider) -> Optional[str]:
        """Name of the layer the provider's key comes from, or None."""
        return self._lookup(provider)[1]

    def configured_hosted_providers(self) -> list[LLMProvider]:
        """Hosted providers with a key, in auto-mode preference order."""
        return [p for p in HOSTED_PREFERENCE if self.resolve(p)]

    def has_any_credentials(self) -> bool:
        """Whether the user owns a key for any hosted provider."""
        return any(
            self.resolve(p)
            for p in LLMProvider
            if get_provider_spec(p).kind is ProviderKind.HOSTED
        )


def mask_key(api_key: str) -> str:
    """Mask an API key for display."""
    if len(api_key) > 12:
        return api_key[:8] + "..." + api_key[-4:]
    return "***"


# Expected key shapes for hosted providers; prefixes are fixed by each vendor
KEY_PATTERNS = {
    LLMProvider.GROQ: re.compile(r"^gsk_[A-Za-z0-9]{20,}$"),
    LLMProvider.OPENAI: re.compile(r"^sk-[A-Za-z0-9_-]{20,}$"),
    LLMProvider.HUGGINGFACE: re.compile(r"^hf_[A-Za-z0-9]{20,}$"),
}

MIN_KEY_LENGTH = 11


def validate_api_key(provider: LLMProvider, api_key: Optional[str]) -> bool:
    """Check that an API key looks like one the provider issues.

    Providers without a known prefix only need a key longer than ten characters.
    """
    api_key = (api_key or "").strip()
    if not api_key:
        return False
    pattern = KEY_PATTERNS.get(provider)
    if pattern is not None:
        return bool(pattern.match(api_key))
    return len(api_key) >= MIN_KEY_LENGTH
