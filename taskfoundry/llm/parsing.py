"""Parsing of labeled LLM responses into structured results.

Contains:
- scan_sections: Line scanner for LABEL: sections (primary pass)
- extract_task_fields: Whole-text regex extraction (second-chance pass)
- parse_task_response: TITLE/SUMMARY/TECHNICAL -> TaskResult
- parse_commit_response: TYPE/SCOPE/DESCRIPTION/BODY/BREAKING -> CommitResult
- parse_response: Dispatch on the generation mode
"""

import re
from typing import Optional, Union

from taskfoundry.config import COMMIT_TYPE_NAMES, DEFAULT_COMMIT_TYPE, GenerationMode
from taskfoundry.llm.exceptions import MalformedResponseError
from taskfoundry.llm.models import CommitHints, CommitResult, TaskResult

TASK_LABELS = {
    "TITLE": "title",
    "SUMMARY": "summary",
    "TECHNICAL": "technical",
}

COMMIT_LABELS = ("TYPE", "SCOPE", "DESCRIPTION", "BODY", "BREAKING")

# Placeholder values models use for "nothing here"
EMPTY_MARKERS = {"", "empty", "none", "n/a", "[empty]", "[none]"}

_NOT_BREAKING = {"no", "false"}

_TITLE_RE = re.compile(r"TITLE:\s*(.+?)\s*(?=SUMMARY:|TECHNICAL:|$)", re.MULTILINE)
_SUMMARY_RE = re.compile(r"SUMMARY:\s*(.*?)(?=TECHNICAL:|\Z)", re.DOTALL)
_TECHNICAL_RE = re.compile(r"TECHNICAL:\s*(.*)\Z", re.DOTALL)


def _label_pattern(labels) -> re.Pattern:
    # Tolerates markdown decoration such as "**TITLE:**" or "## SUMMARY:"
    names = "|".join(re.escape(label) for label in labels)
    return re.compile(rf"^[#*\s]*({names})\s*\**\s*:\s*\**\s*(.*)$")


def scan_sections(raw_text: str, labels) -> dict[str, str]:
    """Split a response into labeled sections.

    A line starting with a known label opens a section and the rest of that
    line is its first fragment. Every following line is appended as written
    (newline-joined, trailing whitespace dropped) until the next label line,
    so indentation and blank lines inside a section survive.

    Args:
        raw_text: The raw completion text.
        labels: The labels to recognize.

    Returns:
        Mapping of label to its content, trimmed only at the edges. Labels that never
        appear are absent.
    """
    pattern = _label_pattern(labels)
    sections: dict[str, str] = {}
    current: Optional[str] = None
    fragments: list[str] = []

    for line in (raw_text or "").splitlines():
        match = pattern.match(line.strip())
        if match:
            if current is not None:
                sections[current] = "\n".join(fragments).strip()
            current = match.group(1)
            fragments = [match.group(2).strip()]
        elif current is not None:
            fragments.append(line.rstrip())

    if current is not None:
        sections[current] = "\n".join(fragments).strip()

    return sections


def extract_task_fields(raw_text: str) -> dict[str, str]:
    """Regex extraction over the whole text, for labels that are not at line starts.

    Returns:
        Only the fields whose label was found.
    """
    fields = {}
    text = raw_text or ""

    title_match = _TITLE_RE.search(text)
    if title_match:
        fields["title"] = title_match.group(1).strip()

    summary_match = _SUMMARY_RE.search(text)
    if summary_match:
        fields["summary"] = summary_match.group(1).strip()

    technical_match = _TECHNICAL_RE.search(text)
    if technical_match:
        fields["technical"] = technical_match.group(1).strip()

    return fields


def parse_task_response(raw_text: str) -> TaskResult:
    """Parse a TITLE/SUMMARY/TECHNICAL response.

    Never raises: missing labels leave the field empty. When the line scan finds
    neither a summary nor technical notes, a regex pass gets a second chance.
    """
    sections = scan_sections(raw_text, TASK_LABELS)
    fields = {TASK_LABELS[label]: value for label, value in sections.items()}

    if not fields.get("summary") and not fields.get("technical"):
        fields.update(extract_task_fields(raw_text))

    return TaskResult(**fields)


def _clean(value: Optional[str]) -> str:
    value = (value or "").strip()
    if value.lower() in EMPTY_MARKERS:
        return ""
    return value


def _normalize_type(value: Optional[str]) -> Optional[str]:
    # Accept "Feat", "feat(api)" and "feat!" as "feat"
    match = re.match(r"[a-z]+", (value or "").strip().lower())
    if match and match.group(0) in COMMIT_TYPE_NAMES:
        return match.group(0)
    return None


def parse_commit_response(raw_text: str, hints: Optional[CommitHints] = None) -> CommitResult:
    """Parse a TYPE/SCOPE/DESCRIPTION/BODY/BREAKING response.

    Explicit caller hints win over what the model wrote.

    Raises:
        MalformedResponseError: If the response has no description.
    """
    hints = hints or CommitHints()
    sections = scan_sections(raw_text, COMMIT_LABELS)

    description = sections.get("DESCRIPTION", "").strip()
    if not description:
        raise MalformedResponseError(
            "Failed to generate commit description: the response has no DESCRIPTION.\n"
            f"Raw response:\n{raw_text}"
        )

    commit_type = hints.type or _normalize_type(sections.get("TYPE")) or DEFAULT_COMMIT_TYPE

    scope = hints.scope or _clean(sections.get("SCOPE")).strip("()")

    breaking_description = _clean(sections.get("BREAKING"))
    if breaking_description.lower() in _NOT_BREAKING:
        breaking_description = ""

    return CommitResult(
        type=commit_type,
        scope=scope,
        description=description,
        body=_clean(sections.get("BODY")),
        breaking=hints.breaking or bool(breaking_description),
        breaking_description=breaking_description,
    )


def parse_response(
    raw_text: str,
    mode: GenerationMode,
    hints: Optional[CommitHints] = None,
) -> Union[TaskResult, CommitResult]:
    """Parse a raw completion for the given mode."""
    if mode is GenerationMode.COMMIT:
        return parse_commit_response(raw_text, hints)
    return parse_task_response(raw_text)
