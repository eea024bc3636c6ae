"""Pydantic models for generation requests and structured results."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskfoundry.config import (
    AUTO_ENGINE,
    COMMIT_TYPE_NAMES,
    DEFAULT_COMMIT_MAX_TOKENS,
    DEFAULT_COMMIT_TEMPERATURE,
    DEFAULT_CONCISE_MAX_TOKENS,
    DEFAULT_DETAILED_MAX_TOKENS,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TASK_TEMPERATURE,
    MAX_MAX_TOKENS,
    MAX_TEMPERATURE,
    MIN_MAX_TOKENS,
    MIN_TEMPERATURE,
    GenerationMode,
    parse_engine,
)


class CommitHints(BaseModel):
    """Caller-supplied commit directives the model should honor."""

    model_config = ConfigDict(frozen=True)

    type: Optional[str] = None
    scope: Optional[str] = None
    breaking: bool = False

    @field_validator("type")
    @classmethod
    def type_must_be_known(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip().lower()
        if v not in COMMIT_TYPE_NAMES:
            raise ValueError(
                f"Invalid commit type: {v}. Must be one of: {', '.join(COMMIT_TYPE_NAMES)}"
            )
        return v

    @field_validator("scope")
    @classmethod
    def blank_scope_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


class GenerationRequest(BaseModel):
    """One diff to turn into a task description or commit message.

    Attributes:
        diff_text: The git diff (non-empty).
        mode: TASK or COMMIT.
        detailed: Ask for the detailed task layout (TASK mode only).
        model_hint: Requested model name, mapped per provider.
        temperature: Sampling temperature, None for the mode default.
        max_tokens: Completion budget, None for the mode default.
        commit_hints: Explicit type/scope/breaking for COMMIT mode.
    """

    model_config = ConfigDict(frozen=True)

    diff_text: str
    mode: GenerationMode = GenerationMode.TASK
    detailed: bool = False
    model_hint: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=MIN_TEMPERATURE, le=MAX_TEMPERATURE)
    max_tokens: Optional[int] = Field(default=None, ge=MIN_MAX_TOKENS, le=MAX_MAX_TOKENS)
    commit_hints: Optional[CommitHints] = None

    @field_validator("diff_text")
    @classmethod
    def diff_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Diff cannot be empty")
        return v

    @property
    def is_commit(self) -> bool:
        return self.mode is GenerationMode.COMMIT

    @property
    def effective_temperature(self) -> float:
        if self.temperature is not None:
            return self.temperature
        return DEFAULT_COMMIT_TEMPERATURE if self.is_commit else DEFAULT_TASK_TEMPERATURE

    @property
    def effective_max_tokens(self) -> int:
        if self.max_tokens is not None:
            return self.max_tokens
        if self.is_commit:
            return DEFAULT_COMMIT_MAX_TOKENS
        return DEFAULT_DETAILED_MAX_TOKENS if self.detailed else DEFAULT_CONCISE_MAX_TOKENS


class EngineConfig(BaseModel):
    """How the dispatcher should pick providers for a request."""

    engine: str = AUTO_ENGINE
    fallback: bool = False
    api_keys: dict[str, str] = Field(default_factory=dict)
    local_endpoint: Optional[str] = None
    timeout: float = DEFAULT_REQUEST_TIMEOUT

    @field_validator("engine")
    @classmethod
    def engine_must_be_known(cls, v: str) -> str:
        parse_engine(v)
        return (v or AUTO_ENGINE).strip().lower()


class TaskResult(BaseModel):
    """Structured task description."""

    title: str = ""
    summary: str = ""
    technical: str = ""


class CommitResult(BaseModel):
    """Structured conventional commit."""

    type: str = "chore"
    scope: str = ""
    description: str
    body: str = ""
    breaking: bool = False
    breaking_description: str = ""

    @field_validator("type")
    @classmethod
    def type_must_be_known(cls, v: str) -> str:
        if v not in COMMIT_TYPE_NAMES:
            raise ValueError(f"Invalid commit type: {v}")
        return v

    @field_validator("description")
    @classmethod
    def description_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Description cannot be empty")
        return v.strip()


GenerationResult = Union[TaskResult, CommitResult]
