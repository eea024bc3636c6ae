"""Conventional commit prompt template.

Caller hints (type, scope, breaking) become directives; anything not given
is left for the model to decide.
"""

from typing import Optional

from taskfoundry.config import COMMIT_TYPE_NAMES
from taskfoundry.llm.models import CommitHints

COMMIT_PROMPT = """Generate a conventional commit message for this git diff.

{type_directive}
{scope_directive}
{breaking_directive}

Guidelines:
- Description should be in imperative mood (e.g., "add" not "added" or "adds")
- Keep description under 50 characters if possible
- Description should be lowercase
- Body should explain what and why, not how
- Follow conventional commit format: type(scope): description

Respond in exactly this format:
TYPE: [commit type]
SCOPE: [scope or leave empty if none]
DESCRIPTION: [clear, concise description in imperative mood]
BODY: [optional longer explanation - leave empty if not needed]
BREAKING: [breaking change description if applicable, otherwise leave empty]"""


def build_commit_instructions(hints: Optional[CommitHints] = None) -> str:
    """Return the commit instructions with the caller's hints injected."""
    hints = hints or CommitHints()

    if hints.type:
        type_directive = f'Use the commit type "{hints.type}".'
    else:
        type_directive = (
            "Determine the most appropriate commit type from: "
            f"{', '.join(COMMIT_TYPE_NAMES)}."
        )

    if hints.scope:
        scope_directive = f'Use the scope "{hints.scope}".'
    else:
        scope_directive = (
            "Determine an appropriate scope if relevant (e.g., api, ui, auth, db). "
            "Leave empty if not applicable."
        )

    if hints.breaking:
        breaking_directive = "This is a BREAKING CHANGE that affects existing functionality."
    else:
        breaking_directive = "Determine if this is a breaking change based on the diff."

    return COMMIT_PROMPT.format(
        type_directive=type_directive,
        scope_directive=scope_directive,
        breaking_directive=breaking_directive,
    )
