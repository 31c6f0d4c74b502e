"""Request-scoped data containers.

Nothing here outlives one invocation. The goal is:
- keep the pipeline stages decoupled
- keep typing clear but not over-abstract
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional

SliceSource = Literal["marked", "fallback"]

@dataclass
class InboundRequest:
    inputs: Dict[str, Any]
    version: str

@dataclass
class UpstreamResponse:
    status_code: int
    content_type: str
    text: str

@dataclass
class FinalJsonSlice:
    text: str
    source: SliceSource

@dataclass
class ExtractedPayload:
    value: Any
    text: str
    source: SliceSource

@dataclass
class ProxyResult:
    status_code: int
    body: Optional[Dict[str, Any]]
    meta: Dict[str, Any] = field(default_factory=dict)
