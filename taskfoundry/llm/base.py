"""Base class and shared request handling for LLM providers.

Every supported backend speaks the OpenAI-style chat completions protocol:
one user message, temperature and max_tokens in, ``choices[0].message.content``
out. Subclasses only choose the SDK client and how to reach it.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from taskfoundry.config import DEFAULT_REQUEST_TIMEOUT, LLMProvider, get_provider_spec
from taskfoundry.llm.classification import classify_message, FailureClass
from taskfoundry.llm.exceptions import (
    MalformedResponseError,
    MissingAPIKeyError,
    ProviderError,
    TransientProviderError,
)
from taskfoundry.llm.models import GenerationRequest
from taskfoundry.llm.prompts import build_prompt


def provider_error(message: str, provider: str, status_code: Optional[int] = None) -> ProviderError:
    """Build the ProviderError subclass matching the message's failure class."""
    if classify_message(message) is FailureClass.RETRYABLE or (
        status_code is not None and classify_message(str(status_code)) is FailureClass.RETRYABLE
    ):
        return TransientProviderError(message, provider=provider, status_code=status_code)
    return ProviderError(message, provider=provider, status_code=status_code)


def _error_body(error: Exception) -> str:
    body = getattr(error, "body", None)
    if body:
        return str(body)
    return str(error)


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers.

    Attributes:
        provider: Registry identity of this backend.
        timeout_errors: SDK exception types meaning the request timed out.
        connection_errors: SDK exception types meaning the host was unreachable.
    """

    provider: LLMProvider
    timeout_errors: tuple = ()
    connection_errors: tuple = ()

    def __init__(self, timeout: float = DEFAULT_REQUEST_TIMEOUT):
        self.timeout = timeout

    @property
    def spec(self):
        return get_provider_spec(self.provider)

    @property
    def name(self) -> str:
        return self.provider.value

    @property
    def display_name(self) -> str:
        return self.spec.display_name

    @abstractmethod
    def create_client(self, api_key: Optional[str]) -> Any:
        """Create the SDK client for one call.

        Args:
            api_key: The resolved credential (may be None for keyless providers).
        """
        pass

    def check_credential(self, api_key: Optional[str]) -> None:
        """Fail fast, before any request is built, when a required key is missing.

        Raises:
            MissingAPIKeyError: If the provider needs a key and none was given.
        """
        if self.spec.requires_credential and not api_key:
            env_var = self.spec.api_key_env_var
            raise MissingAPIKeyError(
                f"{self.display_name} API key not found. Set it using:\n"
                f"  1. Environment variable: export {env_var}=your_key_here\n"
                f"  2. Run: taskfoundry config set-key {self.name}\n"
                f"  3. Manually add to ~/.taskfoundry/credentials"
            )

    def build_messages(self, request: GenerationRequest) -> list[dict]:
        return [{"role": "user", "content": build_prompt(request)}]

    def generate(self, request: GenerationRequest, model: str, api_key: Optional[str]) -> str:
        """Send the request to the provider and return the raw completion.

        Args:
            request: The generation request.
            model: Concrete model name for this provider.
            api_key: Resolved credential.

        Returns:
            The completion text, stripped.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            ProviderError: If the API call fails (TransientProviderError when retryable).
            MalformedResponseError: If the response has no completion text.
        """
        self.check_credential(api_key)
        return self.complete(request, model, api_key)

    def complete(self, request: GenerationRequest, model: str, api_key: Optional[str]) -> str:
        client = self.create_client(api_key)

        try:
            response = client.chat.completions.create(
                model=model,
                messages=self.build_messages(request),
                temperature=request.effective_temperature,
                max_tokens=request.effective_max_tokens,
            )
        except Exception as e:
            raise self.convert_error(e) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, KeyError, TypeError):
            content = None

        if not content or not content.strip():
            raise MalformedResponseError(f"{self.display_name} returned an empty completion")
        return content.strip()

    def convert_error(self, error: Exception) -> ProviderError:
        """Turn an SDK exception into a ProviderError carrying status and body."""
        status_code = getattr(error, "status_code", None)
        if status_code is not None:
            message = f"{self.display_name} API error ({status_code}): {_error_body(error)}"
        elif self.timeout_errors and isinstance(error, self.timeout_errors):
            message = f"{self.display_name} request timeout after {self.timeout}s: {error}"
        elif self.connection_errors and isinstance(error, self.connection_errors):
            message = f"{self.display_name} network error: {error}"
        else:
            message = f"{self.display_name} API call failed: {error}"
        return provider_error(message, provider=self.name, status_code=status_code)
