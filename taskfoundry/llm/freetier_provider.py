"""Free tier provider implementation.

Calls Groq with a community key shared by all users, so every call is
counted against a daily and monthly allowance before it is made.
"""

import logging
from typing import Optional

from taskfoundry.config import DEFAULT_REQUEST_TIMEOUT, LLMProvider
from taskfoundry.llm.exceptions import MissingAPIKeyError, QuotaExceededError
from taskfoundry.llm.groq_provider import GroqProvider
from taskfoundry.llm.models import GenerationRequest
from taskfoundry.usage import UsageTracker

logger = logging.getLogger("taskfoundry")


class FreeTierProvider(GroqProvider):
    """Community shared-key provider with a usage quota.

    Args:
        tracker: Usage tracker for the shared allowance.
        has_credentials: Whether the user has their own hosted key, which
            changes the remediation offered when the allowance runs out.
    """

    provider = LLMProvider.FREETIER

    def __init__(
        self,
        tracker: Optional[UsageTracker] = None,
        has_credentials: bool = False,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        super().__init__(timeout=timeout)
        self.tracker = tracker or UsageTracker()
        self.has_credentials = has_credentials

    def check_credential(self, api_key: Optional[str]) -> None:
        if not api_key:
            raise MissingAPIKeyError(
                "Free tier unavailable: no community key is configured "
                f"({self.spec.api_key_env_var}).\n"
                "Set up your own API key for guaranteed access: taskfoundry config set-key groq"
            )

    def _quota_error(self, day_count: int, month_count: int) -> QuotaExceededError:
        tracker = self.tracker
        lines = [
            "Free tier limit reached!",
            f"  Today: {day_count}/{tracker.daily_limit} requests",
            f"  Monthly: {month_count}/{tracker.monthly_limit} requests",
            "",
        ]
        if self.has_credentials:
            lines.append("You have API keys configured. Use them instead: taskfoundry task --engine auto")
        else:
            lines.append("Get unlimited access with your own API key: taskfoundry config set-key groq")
        return QuotaExceededError(
            "\n".join(lines),
            day_count=day_count,
            month_count=month_count,
            daily_limit=tracker.daily_limit,
            monthly_limit=tracker.monthly_limit,
            has_credentials=self.has_credentials,
        )

    def generate(self, request: GenerationRequest, model: str, api_key: Optional[str]) -> str:
        """Check the allowance, call Groq with the community key, count the call.

        Raises:
            QuotaExceededError: If the allowance is used up (no request is sent).
            MissingAPIKeyError: If no community key is available.
        """
        counter = self.tracker.read_counters()
        if not self.tracker.can_use(counter):
            raise self._quota_error(counter.day_count, counter.month_count)

        self.check_credential(api_key)

        logger.info(
            "Using taskfoundry free tier (%d/%d today)...",
            counter.day_count + 1,
            self.tracker.daily_limit,
        )
        content = self.complete(request, model, api_key)
        self.tracker.record_use(counter)
        return content
