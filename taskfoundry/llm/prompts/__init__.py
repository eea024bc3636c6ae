"""LLM prompt templates for task and commit generation.

This package contains the prompt templates for each generation mode:
- task: Concise and detailed TITLE/SUMMARY/TECHNICAL layouts
- commit: Conventional commit TYPE/SCOPE/DESCRIPTION/BODY/BREAKING layout
"""

from taskfoundry.llm.models import GenerationRequest
from taskfoundry.llm.prompts.commit import COMMIT_PROMPT, build_commit_instructions
from taskfoundry.llm.prompts.task import (
    TASK_PREAMBLE,
    TASK_PROMPT_CONCISE,
    TASK_PROMPT_DETAILED,
    build_task_instructions,
)

DIFF_BLOCK_TEMPLATE = """{instructions}

Git diff:
```
{diff}
```"""


def build_prompt(request: GenerationRequest) -> str:
    """Build the single user message sent to every provider.

    Args:
        request: The generation request.

    Returns:
        The mode-specific instructions followed by the fenced diff.
    """
    if request.is_commit:
        instructions = build_commit_instructions(request.commit_hints)
    else:
        instructions = build_task_instructions(request.detailed)
    return DIFF_BLOCK_TEMPLATE.format(instructions=instructions, diff=request.diff_text)


__all__ = [
    "COMMIT_PROMPT",
    "TASK_PREAMBLE",
    "TASK_PROMPT_CONCISE",
    "TASK_PROMPT_DETAILED",
    "build_commit_instructions",
    "build_task_instructions",
    "build_prompt",
]
