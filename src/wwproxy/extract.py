"""Final JSON extraction from visible text.

Multi-step workflows print several JSON-looking artefacts along the way; only
the final one is returned to the caller.

Order:
1) text between the start/end markers (authoritative when both are present)
2) the LAST balanced {...} span in the text (degraded fallback)

The selected slice is cleaned of BOMs and Markdown code fences, then parsed.
"""
from __future__ import annotations

import json
import re
from typing import Optional, Tuple

from .config import FINAL_JSON_END, FINAL_JSON_START, PREVIEW_CHARS
from .errors import ExtractionFailed, ParseFailed
from .types import ExtractedPayload, FinalJsonSlice

_LEADING_FENCE = re.compile(r"^```(?:json)?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"```$")

def extract_between_markers(text: str, start_tag: str = FINAL_JSON_START, end_tag: str = FINAL_JSON_END) -> Optional[str]:
    a = text.find(start_tag)
    if a == -1:
        return None
    b = text.find(end_tag, a + len(start_tag))
    if b == -1:
        return None
    return text[a + len(start_tag):b].strip()

def find_last_balanced_json(text: str) -> Optional[str]:
    start = -1
    depth = 0
    last: Optional[Tuple[int, int]] = None

    for i, ch in enumerate(text):
        if ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0 and start != -1:
                last = (start, i + 1)
                start = -1

    if last is None:
        return None
    return text[last[0]:last[1]].strip()

def cleanup_json_slice(s: str) -> str:
    t = s.strip()
    if t.startswith("\ufeff"):
        t = t[1:].lstrip()
    t = _LEADING_FENCE.sub("", t, count=1).strip()
    t = _TRAILING_FENCE.sub("", t, count=1)
    return t.strip()

def locate_final_slice(text: str, markers: Tuple[str, str] = (FINAL_JSON_START, FINAL_JSON_END), preview_chars: int = PREVIEW_CHARS) -> FinalJsonSlice:
    marked = extract_between_markers(text, *markers)
    if marked:
        return FinalJsonSlice(text=marked, source="marked")

    guessed = find_last_balanced_json(text)
    if guessed:
        return FinalJsonSlice(text=guessed, source="fallback")

    raise ExtractionFailed(
        f"Expected {markers[0]} ... {markers[1]} or a balanced JSON object in the final step output.",
        preview=text[-preview_chars:] if preview_chars > 0 else "",
    )

def _reject_constant(name: str):
    # NaN/Infinity are not JSON and cannot be re-serialized for strict clients
    raise ValueError(f"Unexpected token {name} in JSON")

def parse_final_slice(final: FinalJsonSlice, preview_chars: int = PREVIEW_CHARS) -> ExtractedPayload:
    cleaned = cleanup_json_slice(final.text)
    try:
        value = json.loads(cleaned, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise ParseFailed(str(e), preview=cleaned[:preview_chars], source=final.source)

    return ExtractedPayload(
        value=value,
        text=json.dumps(value, ensure_ascii=False, indent=2),
        source=final.source,
    )

def extract_final_json(text: str, markers: Tuple[str, str] = (FINAL_JSON_START, FINAL_JSON_END), preview_chars: int = PREVIEW_CHARS) -> ExtractedPayload:
    final = locate_final_slice(text or "", markers, preview_chars)
    return parse_final_slice(final, preview_chars)
