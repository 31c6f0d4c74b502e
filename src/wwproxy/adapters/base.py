"""Adapter interface for hosted workflow services."""
from __future__ import annotations

from typing import Any, Dict

from ..types import UpstreamResponse

class BaseWorkflowAdapter:
    def run(self, inputs: Dict[str, Any], version: str) -> UpstreamResponse:
        raise NotImplementedError
