"""Upstream body -> visible text.

A released app answers in one of several shapes:
- a single JSON object with a 'text' or 'output' string
- a single JSON object that already IS the final payload
- NDJSON / SSE-like lines, each optionally a JSON record carrying a chunk
- plain text

Each shape is a matcher. Matchers run in order against the same body and the
first non-None result wins. The last matcher always matches.
"""
from __future__ import annotations

import json
from typing import Any, Iterable, List, Optional, Sequence, Tuple

class ShapeMatcher:
    name = "base"

    def match(self, raw: str) -> Optional[str]:
        raise NotImplementedError

def _text_field(obj: Any, keys: Sequence[str]) -> Optional[str]:
    if not isinstance(obj, dict):
        return None
    for k in keys:
        v = obj.get(k)
        if isinstance(v, str):
            return v
    return None

class JsonBlobMatcher(ShapeMatcher):
    name = "json_blob"

    def __init__(self, final_keys: Iterable[str] = ("hero", "meta", "sections")):
        self.final_keys = tuple(final_keys)

    def match(self, raw: str) -> Optional[str]:
        try:
            obj = json.loads(raw)
        except (TypeError, ValueError, RecursionError):
            return None
        if not isinstance(obj, dict):
            return None

        text = _text_field(obj, ("text", "output"))
        if text:
            return text

        # Sometimes the object is already the final JSON.
        if any(obj.get(k) for k in self.final_keys):
            return json.dumps(obj, ensure_ascii=False)
        return None

def _strip_sse_prefix(line: str) -> str:
    if line.startswith("data:"):
        return line[len("data:"):].strip()
    return line

def chunk_text(obj: Any) -> Optional[str]:
    """Text carried by one stream record, if it is a shape we recognise."""
    if not isinstance(obj, dict):
        return None
    value = obj.get("value")
    if isinstance(value, dict) and value.get("type") == "chunk" and isinstance(value.get("value"), str):
        return value["value"]
    return _text_field(obj, ("output", "text"))

class StreamLinesMatcher(ShapeMatcher):
    name = "stream_lines"

    def match(self, raw: str) -> Optional[str]:
        if not raw:
            return None

        parts: List[str] = []
        for line in raw.split("\n"):
            s = _strip_sse_prefix(line.strip())
            if not s:
                continue
            try:
                obj = json.loads(s)
            except (ValueError, RecursionError):
                # SSE framing, keep-alives and partial lines are expected noise
                continue
            text = chunk_text(obj)
            if text is not None:
                parts.append(text)

        out = "".join(parts)
        return out or None

class RawTextMatcher(ShapeMatcher):
    name = "raw"

    def match(self, raw: str) -> Optional[str]:
        return raw or ""

def default_matchers(final_keys: Iterable[str] = ("hero", "meta", "sections")) -> List[ShapeMatcher]:
    return [JsonBlobMatcher(final_keys), StreamLinesMatcher(), RawTextMatcher()]

def match_shape(raw: str, matchers: Optional[Sequence[ShapeMatcher]] = None) -> Tuple[str, str]:
    """Return (matcher name, visible text) for the first matcher that applies."""
    for m in matchers or default_matchers():
        text = m.match(raw or "")
        if text is not None:
            return m.name, text
    return "none", ""

def normalize_visible_text(raw: str, matchers: Optional[Sequence[ShapeMatcher]] = None) -> str:
    return match_shape(raw, matchers)[1]
