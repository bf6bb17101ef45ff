from __future__ import annotations

import re

from app.analysis.cleaning import strip_markdown

DEFAULT_GREETING = "Dear Applicant,"
DEFAULT_CLOSING = "Best regards,\nThe Rejection Bot"

_GREETING_RE = re.compile(r"^(?:dear|hello|hi|greetings|hey)\b", re.IGNORECASE)
_SUBJECT_RE = re.compile(r"^(?:subject|re|regarding|title)\s*:", re.IGNORECASE)
_CLOSING_RE = re.compile(
    r"^(?:(?:best|kind|warm|warmest|warmly)\s+regards|regards|sincerely(?:\s+yours)?|yours\s+(?:truly|sincerely)"
    r"|respectfully(?:\s+yours)?|best(?:\s+wishes)?|all\s+the\s+best|cheers|with\s+regrets?|thanks\s+again)"
    r"\s*(?:[,.!].*)?$",
    re.IGNORECASE,
)
_NUMBERED_LINE_RE = re.compile(r"^\s*\d{1,2}[.)]\s+", re.MULTILINE)
_BLANK_RUN_RE = re.compile(r"\n{3,}")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"[ \t]+([,.;:!?])")
_TRAILING_SPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)


def subject_line(job_position: str | None) -> str:
    position = (job_position or "").strip()
    if position:
        return f"Subject: Your Application for the {position} Position"
    return "Subject: Regarding Your Recent Application"


def filler_paragraph(letter_grade: str) -> str:
    grade = ((letter_grade or "").split() or ["F"])[0]
    return (
        f"After careful review, your resume earned a grade of {grade}. While we appreciate "
        "the effort that went into it, it did not stand out among the many applications we "
        "received, and we have decided to move forward with other candidates."
    )


def numbered_list_to_prose(text: str) -> str:
    """Turn '1. foo\\n2. bar' into blank-line separated paragraphs."""
    if len(_NUMBERED_LINE_RE.findall(text)) < 2:
        return text
    parts = [part.strip() for part in _NUMBERED_LINE_RE.split(text)]
    paragraphs = [re.sub(r"\s*\n\s*", " ", part) for part in parts if part]
    return "\n\n".join(paragraphs)


def _is_closing(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and len(stripped.split()) <= 6 and bool(_CLOSING_RE.match(stripped))


def _paragraphs(lines: list[str]) -> list[str]:
    blocks = re.split(r"\n\s*\n", "\n".join(lines).strip())
    return [block.strip() for block in blocks if block.strip()]


def tidy_whitespace(text: str) -> str:
    value = _TRAILING_SPACE_RE.sub("", text)
    value = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", value)
    value = _BLANK_RUN_RE.sub("\n\n", value)
    return value.strip()


def normalize_rejection_letter(text: str, *, letter_grade: str, job_position: str | None = None) -> str:
    """Shape arbitrary letter text into subject, greeting, body paragraphs and closing."""
    lines = [strip_markdown(line).rstrip() for line in (text or "").strip().splitlines()]

    subject = None
    remaining: list[str] = []
    for line in lines:
        if subject is None and _SUBJECT_RE.match(line.strip()):
            subject = line.strip()
            continue
        remaining.append(line)

    closing_lines: list[str] = []
    for index in range(len(remaining) - 1, -1, -1):
        if _is_closing(remaining[index]):
            closing_lines = [line.strip() for line in remaining[index:] if line.strip()]
            remaining = remaining[:index]
            break

    while remaining and not remaining[0].strip():
        remaining.pop(0)
    greeting = None
    if remaining and _GREETING_RE.match(remaining[0].strip()):
        greeting = remaining.pop(0).strip()

    body = numbered_list_to_prose("\n".join(remaining).strip())
    paragraphs = _paragraphs(body.splitlines()) if body else []

    # The greeting counts as a paragraph of its own; one filler keeps the letter substantive.
    if len(paragraphs) + 1 < 3:
        paragraphs.append(filler_paragraph(letter_grade))

    sections = [
        subject or subject_line(job_position),
        greeting or DEFAULT_GREETING,
        *paragraphs,
        "\n".join(closing_lines) if closing_lines else DEFAULT_CLOSING,
    ]
    return tidy_whitespace("\n\n".join(sections))
