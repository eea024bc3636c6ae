"""Static configuration for taskfoundry LLM providers.

User-editable settings live in ~/.taskfoundry/config.yaml and
<repo>/.taskfoundry/config.yaml; see taskfoundry.settings for the merge.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LLMProvider(Enum):
    """Supported LLM providers."""

    GROQ = "groq"
    OPENAI = "openai"
    HUGGINGFACE = "huggingface"
    FREETIER = "freetier"
    LOCAL = "local"


class ProviderKind(Enum):
    """Who owns the credential a provider is called with."""

    HOSTED = "hosted"
    COMMUNITY = "community"
    LOCAL = "local"


class GenerationMode(Enum):
    """What the model is asked to produce."""

    TASK = "task"
    COMMIT = "commit"


AUTO_ENGINE = "auto"


@dataclass(frozen=True)
class RateLimitProfile:
    """Published provider limits. Informational only, nothing enforces them."""

    requests_per_minute: Optional[int]
    tokens_per_minute: Optional[int]


@dataclass(frozen=True)
class ProviderSpec:
    """Static description of one provider."""

    provider: LLMProvider
    display_name: str
    kind: ProviderKind
    requires_credential: bool
    default_model: str
    api_key_env_var: str
    rate_limits: RateLimitProfile
    base_url: Optional[str] = None

    @property
    def name(self) -> str:
        return self.provider.value


# ============================================================
# PROVIDER REGISTRY
# ============================================================

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
OPENAI_BASE_URL = "https://api.openai.com/v1"
HUGGINGFACE_BASE_URL = "https://router.huggingface.co/v1"
DEFAULT_LOCAL_ENDPOINT = "http://localhost:11434/v1"

PROVIDER_SPECS = {
    LLMProvider.GROQ: ProviderSpec(
        provider=LLMProvider.GROQ,
        display_name="Groq",
        kind=ProviderKind.HOSTED,
        requires_credential=True,
        default_model="llama-3.3-70b-versatile",
        api_key_env_var="GROQ_API_KEY",
        rate_limits=RateLimitProfile(requests_per_minute=30, tokens_per_minute=6000),
        base_url=GROQ_BASE_URL,
    ),
    LLMProvider.OPENAI: ProviderSpec(
        provider=LLMProvider.OPENAI,
        display_name="OpenAI",
        kind=ProviderKind.HOSTED,
        requires_credential=True,
        default_model="gpt-4o-mini",
        api_key_env_var="OPENAI_API_KEY",
        rate_limits=RateLimitProfile(requests_per_minute=500, tokens_per_minute=200000),
        base_url=OPENAI_BASE_URL,
    ),
    LLMProvider.HUGGINGFACE: ProviderSpec(
        provider=LLMProvider.HUGGINGFACE,
        display_name="Hugging Face",
        kind=ProviderKind.HOSTED,
        requires_credential=True,
        default_model="meta-llama/Llama-3.1-70B-Instruct",
        api_key_env_var="HUGGINGFACE_API_KEY",
        rate_limits=RateLimitProfile(requests_per_minute=60, tokens_per_minute=None),
        base_url=HUGGINGFACE_BASE_URL,
    ),
    LLMProvider.FREETIER: ProviderSpec(
        provider=LLMProvider.FREETIER,
        display_name="Free tier",
        kind=ProviderKind.COMMUNITY,
        requires_credential=True,
        default_model="llama-3.3-70b-versatile",
        api_key_env_var="TASKFOUNDRY_COMMUNITY_KEY",
        rate_limits=RateLimitProfile(requests_per_minute=30, tokens_per_minute=6000),
        base_url=GROQ_BASE_URL,
    ),
    LLMProvider.LOCAL: ProviderSpec(
        provider=LLMProvider.LOCAL,
        display_name="Local model",
        kind=ProviderKind.LOCAL,
        requires_credential=False,
        default_model="llama3.2",
        api_key_env_var="LOCAL_API_KEY",
        rate_limits=RateLimitProfile(requests_per_minute=None, tokens_per_minute=None),
    ),
}

# Auto mode tries hosted providers in this order, then the free tier
HOSTED_PREFERENCE = (
    LLMProvider.GROQ,
    LLMProvider.OPENAI,
    LLMProvider.HUGGINGFACE,
)

ENGINE_CHOICES = [AUTO_ENGINE] + [p.value for p in LLMProvider]


def get_provider_spec(provider: LLMProvider) -> ProviderSpec:
    """Get the static spec for a provider."""
    return PROVIDER_SPECS[provider]


def parse_engine(engine: str) -> Optional[LLMProvider]:
    """Turn an engine selector into a provider.

    Args:
        engine: "auto" or a provider name.

    Returns:
        The provider, or None for auto mode.

    Raises:
        ValueError: If the engine is unknown.
    """
    value = (engine or AUTO_ENGINE).strip().lower()
    if value == AUTO_ENGINE:
        return None
    try:
        return LLMProvider(value)
    except ValueError:
        raise ValueError(
            f"Unknown engine: {engine}. Must be one of: {', '.join(ENGINE_CHOICES)}"
        )


# ============================================================
# GENERATION DEFAULTS
# ============================================================

DEFAULT_TASK_TEMPERATURE = 0.3
DEFAULT_COMMIT_TEMPERATURE = 0.2
DEFAULT_CONCISE_MAX_TOKENS = 1000
DEFAULT_DETAILED_MAX_TOKENS = 2000
DEFAULT_COMMIT_MAX_TOKENS = 300

MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0
MIN_MAX_TOKENS = 1
MAX_MAX_TOKENS = 4000

# Seconds before a provider call is abandoned as a timeout
DEFAULT_REQUEST_TIMEOUT = 60.0

# ============================================================
# FREE TIER LIMITS
# ============================================================

FREE_TIER_DAILY_LIMIT = 50
FREE_TIER_MONTHLY_LIMIT = 1000

# ============================================================
# COMMIT TYPES
# ============================================================

COMMIT_TYPES = {
    "feat": "A new feature",
    "fix": "A bug fix",
    "docs": "Documentation only changes",
    "style": "Changes that do not affect the meaning of the code (white-space, formatting, etc)",
    "refactor": "A code change that neither fixes a bug nor adds a feature",
    "perf": "A code change that improves performance",
    "test": "Adding missing tests or correcting existing tests",
    "chore": "Changes to the build process or auxiliary tools and libraries",
    "ci": "Changes to CI configuration files and scripts",
    "build": "Changes that affect the build system or external dependencies",
}

COMMIT_TYPE_NAMES = list(COMMIT_TYPES.keys())

DEFAULT_COMMIT_TYPE = "chore"

# ============================================================
# AVAILABLE MODELS PER PROVIDER
# ============================================================

AVAILABLE_MODELS = {
    LLMProvider.GROQ: [
        "llama-3.3-70b-versatile",
        "llama-3.1-8b-instant",
        "gemma2-9b-it",
        "mixtral-8x7b-32768",
    ],
    LLMProvider.OPENAI: [
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4o",
        "gpt-4o-mini",
        "gpt-4",
        "gpt-3.5-turbo",
    ],
    LLMProvider.HUGGINGFACE: [
        "meta-llama/Llama-3.1-70B-Instruct",
        "meta-llama/Llama-3.1-8B-Instruct",
        "mistralai/Mixtral-8x7B-Instruct-v0.1",
    ],
    LLMProvider.FREETIER: [
        "llama-3.3-70b-versatile",
    ],
    LLMProvider.LOCAL: [],
}
