from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def extract_balanced(text: str, opener: str = "{") -> str | None:
    """Return the first top-level ``{...}`` or ``[...]`` span, respecting string literals."""
    closer = "}" if opener == "{" else "]"
    start = text.find(opener)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escape_next = False
    for i in range(start, len(text)):
        ch = text[i]
        if escape_next:
            escape_next = False
            continue
        if ch == "\\":
            escape_next = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def loads_or_none(candidate: str | None) -> Any | None:
    if not candidate:
        return None
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        return None


def extract_json_payload(text: str | None, *, prefer: str = "{") -> Any | None:
    """Parse a JSON value out of model output that may carry fences or chatter."""
    if not text:
        return None
    stripped = _FENCE_RE.sub("", text.strip())
    parsed = loads_or_none(stripped)
    if parsed is not None:
        return parsed

    openers = (prefer, "[" if prefer == "{" else "{")
    for opener in openers:
        parsed = loads_or_none(extract_balanced(stripped, opener))
        if parsed is not None:
            return parsed
    return None
