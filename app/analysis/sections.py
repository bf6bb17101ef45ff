"""Section extraction for free-form completions.

Every section is tried with a chain of strategies, first success wins:
``marker`` (marker-to-marker slice), ``line_scan`` (marker literal found line by line)
and ``heuristic`` (whole-text guess that always yields something).
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Literal

from app.analysis.cleaning import clean_items, strip_markdown

logger = logging.getLogger(__name__)

Tier = Literal["marker", "line_scan", "heuristic"]

REJECTION_LETTER = "REJECTION LETTER"
FEEDBACK_POINTS = "FEEDBACK POINTS"
CONSTRUCTIVE_FEEDBACK = "CONSTRUCTIVE FEEDBACK"

MARKERS = (
    "IS THIS A RESUME?",
    "SCORE",
    "LETTER GRADE",
    REJECTION_LETTER,
    FEEDBACK_POINTS,
    CONSTRUCTIVE_FEEDBACK,
)

_MARKUP = r"[ \t]*[#>*_]*[ \t]*"
_ANY_MARKER = "|".join(
    re.escape(name) if name.endswith("?") else rf"{re.escape(name)}[ \t*_]*:" for name in MARKERS
)
_MARKER_LINE_RE = re.compile(rf"^{_MARKUP}(?:{_ANY_MARKER})", re.IGNORECASE)

SECTIONS = (REJECTION_LETTER, FEEDBACK_POINTS, CONSTRUCTIVE_FEEDBACK)

# Header markers only end a section in their full "marker: value" form, so a letter line such as
# "Score: 70 is not enough." stays in the body.
_HEADER_LINES = (
    r"IS THIS A RESUME\?[ \t*_]*(?:YES|NO)\b",
    r"SCORE[ \t*_]*:[ \t*_]*\d{1,3}(?:[ \t]*/[ \t]*100)?[ \t*_.]*$",
    r"LETTER GRADE[ \t*_]*:[ \t*_]*[A-F][+\-−–]?[ \t*_]*(?:$|[(\-–—:|])",
)
_BOUNDARY = rf"^{_MARKUP}(?:" + "|".join(
    [*(rf"{re.escape(name)}[ \t*_]*:" for name in SECTIONS), *_HEADER_LINES]
) + ")"
_BOUNDARY_LINE_RE = re.compile(_BOUNDARY, re.IGNORECASE)

_LETTER_HINT_RE = re.compile(
    r"\b(?:application|applying|unfortunately|regret|candidates?|position|thank you|decided|dear)\b",
    re.IGNORECASE,
)
_ADVICE_RE = re.compile(
    r"\b(?:should|consider|add|improve|include|try|focus|highlight|quantify|remove|use|replace|tailor)\b",
    re.IGNORECASE,
)
_LIST_LINE_RE = re.compile(r"^\s*(?:\d{1,2}[.)]|[-•*])\s+")

DEFAULT_LETTER_BODY = (
    "Thank you for taking the time to apply. After reviewing your resume, we have decided "
    "not to move forward with your application at this time."
)
DEFAULT_FEEDBACK_POINTS = (
    "Your resume does not clearly communicate your achievements.",
    "Key accomplishments are buried in generic descriptions.",
    "The layout makes it hard to scan for the most relevant experience.",
)
DEFAULT_CONSTRUCTIVE_FEEDBACK = (
    "Quantify your accomplishments with concrete numbers and outcomes.",
    "Lead each bullet point with a strong action verb.",
    "Tailor your skills section to the role you are applying for.",
)


@dataclass(frozen=True)
class SectionMatch:
    text: str
    tier: Tier

    @property
    def degraded(self) -> bool:
        return self.tier != "marker"


def _section_pattern(name: str) -> re.Pattern[str]:
    return re.compile(
        rf"^{_MARKUP}{re.escape(name)}[ \t*_]*:[ \t*_]*(?P<body>.*?)(?={_BOUNDARY}|\Z)",
        re.IGNORECASE | re.MULTILINE | re.DOTALL,
    )


_SECTION_PATTERNS = {name: _section_pattern(name) for name in SECTIONS}


def extract_by_marker(text: str, name: str) -> str | None:
    match = _SECTION_PATTERNS[name].search(text)
    if not match:
        return None
    body = match.group("body").strip()
    return body or None


def _line_key(line: str) -> str:
    return strip_markdown(line).strip().upper()


def extract_by_line_scan(text: str, name: str) -> str | None:
    """Find a line that starts with the marker literal, even without a colon."""
    lines = text.splitlines()
    start = None
    first_line_rest = ""
    for index, line in enumerate(lines):
        key = _line_key(line)
        if key.startswith(name):
            start = index
            first_line_rest = strip_markdown(line).strip()[len(name):].lstrip(" :-–—*").strip()
            break
    if start is None:
        return None

    collected = [first_line_rest] if first_line_rest else []
    others = [section for section in SECTIONS if section != name]
    for line in lines[start + 1:]:
        key = _line_key(line)
        if any(key.startswith(section) for section in others) or _BOUNDARY_LINE_RE.match(line):
            break
        collected.append(line)
    body = "\n".join(collected).strip()
    return body or None


def _content_lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if line.strip() and not _MARKER_LINE_RE.match(line)]


def heuristic_letter(text: str) -> str:
    candidates = [
        line.strip()
        for line in _content_lines(text)
        if not _LIST_LINE_RE.match(line) and _LETTER_HINT_RE.search(line)
    ]
    return "\n".join(candidates) if candidates else DEFAULT_LETTER_BODY


def heuristic_feedback_points(text: str) -> str:
    items = clean_items(_content_lines(text), section="feedback_points", limit=5)
    return "\n".join(items or DEFAULT_FEEDBACK_POINTS)


def heuristic_constructive_feedback(text: str) -> str:
    advice = [line for line in _content_lines(text) if _ADVICE_RE.search(line)]
    items = clean_items(advice, section="constructive_feedback", limit=5)
    return "\n".join(items or DEFAULT_CONSTRUCTIVE_FEEDBACK)


_HEURISTICS: dict[str, Callable[[str], str]] = {
    REJECTION_LETTER: heuristic_letter,
    FEEDBACK_POINTS: heuristic_feedback_points,
    CONSTRUCTIVE_FEEDBACK: heuristic_constructive_feedback,
}


def extract_section(
    text: str,
    name: str,
    *,
    accept: Callable[[str], bool] | None = None,
) -> SectionMatch:
    """Run the strategy chain for one section.

    ``accept`` lets the caller reject a non-empty block that cleans down to nothing,
    which moves extraction on to the next tier.
    """
    strategies: tuple[tuple[Tier, Callable[[str, str], str | None]], ...] = (
        ("marker", extract_by_marker),
        ("line_scan", extract_by_line_scan),
    )
    for tier, strategy in strategies:
        body = strategy(text, name)
        if body and (accept is None or accept(body)):
            match = SectionMatch(text=body, tier=tier)
            break
    else:
        match = SectionMatch(text=_HEURISTICS[name](text), tier="heuristic")

    if match.degraded:
        logger.info("analysis_parse_degraded section=%s tier=%s", name.lower().replace(" ", "_"), match.tier)
    return match
