"""LLM-related exception classes.

Contains all exception classes for provider dispatch:
- LLMError: Base exception for LLM-related errors
- ConfigurationError / MissingAPIKeyError: Misconfiguration, never retried
- ProviderError / TransientProviderError: A provider call failed
- QuotaExceededError: The shared free-tier allowance is used up
- MalformedResponseError: A 2xx response without the required fields
- ExhaustedFallbackError: Every candidate provider failed
"""

from typing import Optional


class LLMError(Exception):
    """Base exception for LLM-related errors."""

    pass


class ConfigurationError(LLMError):
    """Raised when a provider is misconfigured."""

    pass


class MissingAPIKeyError(ConfigurationError):
    """Raised when the required API key is not set."""

    pass


class ProviderError(LLMError):
    """Raised when a provider call fails."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class TransientProviderError(ProviderError):
    """Raised for rate limits, 5xx responses, timeouts and network failures."""

    pass


class QuotaExceededError(LLMError):
    """Raised when the free-tier daily or monthly limit has been reached."""

    def __init__(
        self,
        message: str,
        day_count: int = 0,
        month_count: int = 0,
        daily_limit: int = 0,
        monthly_limit: int = 0,
        has_credentials: bool = False,
    ):
        super().__init__(message)
        self.day_count = day_count
        self.month_count = month_count
        self.daily_limit = daily_limit
        self.monthly_limit = monthly_limit
        self.has_credentials = has_credentials


class MalformedResponseError(LLMError):
    """Raised when the LLM response lacks the fields required for the mode."""

    pass


class ExhaustedFallbackError(LLMError):
    """Raised when every candidate provider has failed.

    Attributes:
        failures: Ordered (provider name, error) pairs, one per attempt.
        has_credentials: Whether the user had any hosted API key configured.
    """

    def __init__(self, failures: list[tuple[str, Exception]], has_credentials: bool):
        self.failures = failures
        self.has_credentials = has_credentials
        super().__init__(self._build_message())

    @property
    def last_error(self) -> Optional[Exception]:
        return self.failures[-1][1] if self.failures else None

    @property
    def quota_exceeded(self) -> bool:
        return any(isinstance(error, QuotaExceededError) for _, error in self.failures)

    def _build_message(self) -> str:
        lines = ["All engines failed:"]
        for name, error in self.failures:
            lines.append(f"  - {name}: {error}")
        lines.append("")
        if self.has_credentials:
            lines.append(
                "All configured engines failed. This might be temporary - try again in a few minutes.\n"
                "  - Check your API key quotas/limits\n"
                "  - Try a specific engine: taskfoundry task --engine openai\n"
                "  - Use the free tier: taskfoundry task --engine freetier"
            )
        else:
            lines.append(
                "Consider setting up an API key for more reliable access:\n"
                "  - Run: taskfoundry config set-key groq\n"
                "  - Or export GROQ_API_KEY / OPENAI_API_KEY / HUGGINGFACE_API_KEY"
            )
        return "\n".join(lines)
