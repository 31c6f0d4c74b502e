"""Inbound request validation.

Rules:
- OPTIONS is a CORS preflight and never reaches the upstream.
- Only POST runs the pipeline; every other method is rejected.
- 'inputs' must be a JSON object. Its fields are forwarded untouched except
  for configured defaults, which fill fields that are missing or blank so the
  released app's schema validation does not fail.
- 'version' in the body overrides the configured version when non-blank.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping

from .errors import InvalidInput, MethodNotAllowed
from .types import InboundRequest
from .logging_util import get_logger

logger = get_logger(__name__)

def normalize_method(method: Any) -> str:
    return str(method or "").strip().upper()

def check_method(method: Any) -> bool:
    """Return True for a preflight, False for POST, raise for anything else."""
    m = normalize_method(method)
    if m == "OPTIONS":
        return True
    if m != "POST":
        raise MethodNotAllowed()
    return False

def _is_blank(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, str):
        return not v.strip()
    return False

def apply_input_defaults(inputs: Dict[str, Any], defaults: Mapping[str, str]) -> Dict[str, Any]:
    out = dict(inputs)
    for name, value in defaults.items():
        if _is_blank(out.get(name)):
            out[name] = value
    return out

def parse_input(body: Any, default_version: str, defaults: Mapping[str, str]) -> InboundRequest:
    if not isinstance(body, dict):
        raise InvalidInput()

    inputs = body.get("inputs")
    if not isinstance(inputs, dict):
        raise InvalidInput()

    version = body.get("version")
    if not isinstance(version, str) or not version.strip():
        version = default_version

    req = InboundRequest(inputs=apply_input_defaults(inputs, defaults), version=version.strip())
    logger.debug("Parsed InboundRequest: fields=%s version=%s", sorted(req.inputs), req.version)
    return req
