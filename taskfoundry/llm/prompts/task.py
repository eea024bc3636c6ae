"""Task description prompt templates.

Both layouts ask for the same three labels (TITLE/SUMMARY/TECHNICAL) so the
response parser handles either.
"""

TASK_PREAMBLE = (
    "Analyze this git diff and create a task description for Azure DevOps or similar tools."
)

TASK_PROMPT_CONCISE = """{preamble}
Respond in exactly this format:

TITLE: [Brief summary of the change]
SUMMARY: [What was changed and why]
TECHNICAL: [Implementation notes and considerations]

Keep responses concise and focused."""

TASK_PROMPT_DETAILED = """{preamble}
Create a comprehensive task description with detailed sections.

Respond in exactly this format:

TITLE: [Clear, actionable title]
SUMMARY: [Comprehensive summary including:
- What was changed and why
- Key functionality added/modified
- Business impact or user benefits
- Requirements or acceptance criteria
- Test coverage requirements if applicable]
TECHNICAL: [Detailed technical considerations including:
- Implementation approach and architecture decisions
- Dependencies and integrations affected
- Performance considerations
- Security considerations if applicable
- Testing strategy and recommendations
- Deployment considerations
- Potential risks and mitigation strategies
- Code quality and best practices notes]

Provide detailed, actionable information that would help a developer understand the full scope and context."""


def build_task_instructions(detailed: bool = False) -> str:
    """Return the task instructions for the concise or detailed layout."""
    template = TASK_PROMPT_DETAILED if detailed else TASK_PROMPT_CONCISE
    return template.format(preamble=TASK_PREAMBLE)
