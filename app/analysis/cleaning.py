"""Composable string transforms applied to items scraped from a completion.

Each transform is idempotent; ``clean_item`` runs them in a fixed order until the
text stops changing.
"""
from __future__ import annotations

import re
from typing import Iterable

from app.core.config.scoring import get_scoring_value

_EMOJI_CLASS = (
    "\U0001F000-\U0001FAFF"
    "\u2300-\u23FF"
    "\u2600-\u27BF"
    "\u2B00-\u2BFF"
    "\uFE0F\u200D\u20E3"
)
_LEADING_EMOJI_RE = re.compile(rf"^(?:[{_EMOJI_CLASS}]|\s)+")
_TRAILING_EMOJI_RE = re.compile(rf"(?:[{_EMOJI_CLASS}]|\s)+$")

_BOLD_RE = re.compile(r"(\*\*|__)(.+?)\1")
_ITALIC_RE = re.compile(r"(?<![\w*])\*(?!\s)(.+?)(?<!\s)\*(?![\w*])|(?<![\w_])_(?!\s)(.+?)(?<!\s)_(?![\w_])")
_STRAY_MARKUP_RE = re.compile(r"\*\*|__|`")
_HEADING_RE = re.compile(r"^\s*(?:#{1,6}|>)\s*")

_BULLET_CHARS = "-•◦▪▫●○■□◆◇▶►–—*·"
_LIST_MARKER_RE = re.compile(
    rf"^\s*(?:(?:\(?\d{{1,2}}[.):](?=\s|$)|\(?[a-zA-Z][.)](?=\s)|[{re.escape(_BULLET_CHARS)}](?=\s)|\[[ xX]?\](?=\s))\s*)+"
)
_LABEL_PREFIX_RE = re.compile(r"^(?:(?:improvement|suggestion|tip|advice|recommended|recommendation)\s*:\s*)+", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


def strip_markdown(text: str) -> str:
    value = _HEADING_RE.sub("", text)
    value = _BOLD_RE.sub(r"\2", value)
    value = _ITALIC_RE.sub(lambda m: m.group(1) or m.group(2), value)
    return _STRAY_MARKUP_RE.sub("", value)


def strip_emoji(text: str) -> str:
    value = _LEADING_EMOJI_RE.sub("", text)
    return _TRAILING_EMOJI_RE.sub("", value)


def strip_list_marker(text: str) -> str:
    return _LIST_MARKER_RE.sub("", text)


def strip_label_prefix(text: str) -> str:
    return _LABEL_PREFIX_RE.sub("", text)


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


_PIPELINE = (strip_markdown, strip_emoji, strip_list_marker, strip_emoji, strip_label_prefix, normalize_whitespace)


def clean_item(text: str) -> str:
    value = text or ""
    for _ in range(4):
        previous = value
        for transform in _PIPELINE:
            value = transform(value)
        if value == previous:
            break
    return value


def blocklist(section: str) -> tuple[str, ...]:
    entries = get_scoring_value(f"blocklist.{section}", []) or []
    return tuple(str(entry) for entry in entries)


def is_echoed_header(text: str, phrases: Iterable[str]) -> bool:
    return any(phrase in text for phrase in phrases)


def dedupe(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    unique: list[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        unique.append(item)
    return unique


def clean_items(lines: Iterable[str], *, section: str | None = None, limit: int | None = None) -> list[str]:
    """Clean, filter and dedupe list items; ``section`` selects a header blocklist."""
    phrases = blocklist(section) if section else ()
    cleaned: list[str] = []
    for line in lines:
        item = clean_item(line)
        if not item or not any(ch.isalnum() for ch in item):
            continue
        if phrases and is_echoed_header(item, phrases):
            continue
        cleaned.append(item)
    unique = dedupe(cleaned)
    return unique[:limit] if limit is not None else unique
