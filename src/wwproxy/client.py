"""ProxyClient: validate -> invoke -> normalize -> extract -> format."""
from __future__ import annotations

import time
from typing import Any, Dict, Optional

from .adapters.base import BaseWorkflowAdapter
from .adapters.wordware import WordwareAdapter
from .config import ProxyConfig
from .errors import ProxyError, ServerError
from .extract import extract_final_json
from .input_spec import check_method, parse_input
from .normalize import default_matchers, match_shape
from .types import ExtractedPayload, ProxyResult
from .logging_util import get_logger, log_step

logger = get_logger(__name__)

class ProxyClient:
    def __init__(self, config: ProxyConfig, adapter: Optional[BaseWorkflowAdapter] = None):
        self.config = config
        self.adapter = adapter or WordwareAdapter(config)
        self.matchers = default_matchers(config.final_keys)

    def extract(self, raw: str) -> ExtractedPayload:
        """Normalize a raw upstream body and pull the final JSON out of it."""
        shape, visible = match_shape(raw, self.matchers)
        logger.info("visible text: shape=%s chars=%d", shape, len(visible))
        return extract_final_json(visible, self.config.markers, self.config.preview_chars)

    def run(self, method: Any, body: Any, request_id: Optional[str] = None) -> ProxyResult:
        meta: Dict[str, Any] = {"request_id": request_id, "steps": {}, "where": None}
        t0 = time.time()

        try:
            log_step(logger, "1", "validate request method=%s", method)
            meta["where"] = "validate"
            if check_method(method):
                meta["steps"]["total_ms"] = int((time.time() - t0) * 1000)
                return ProxyResult(status_code=200, body=None, meta=meta)
            req = parse_input(body, self.config.version, self.config.input_defaults)

            log_step(logger, "2", "call upstream version=%s", req.version)
            meta["where"] = "upstream"
            t_call = time.time()
            upstream = self.adapter.run(req.inputs, req.version)
            meta["steps"]["call_ms"] = int((time.time() - t_call) * 1000)

            log_step(logger, "3", "normalize and extract final json (%d chars, %s)", len(upstream.text), upstream.content_type or "no content-type")
            meta["where"] = "extract"
            payload = self.extract(upstream.text)

            log_step(logger, "4", "format response source=%s", payload.source)
            out: Dict[str, Any] = {"json": payload.value, "text": payload.text}
            if self.config.include_raw:
                out["raw"] = upstream.text

            meta["where"] = None
            meta["steps"]["total_ms"] = int((time.time() - t0) * 1000)
            return ProxyResult(status_code=200, body=out, meta=meta)

        except ProxyError as e:
            logger.error("ProxyClient.run failed at %s: %s (%s)", meta["where"], e.label, e.detail)
            meta["steps"]["total_ms"] = int((time.time() - t0) * 1000)
            return ProxyResult(status_code=e.status_code, body=e.to_body(), meta=meta)

        except Exception as e:
            logger.exception("ProxyClient.run failed: %s", e)
            meta["steps"]["total_ms"] = int((time.time() - t0) * 1000)
            err = ServerError(str(e))
            return ProxyResult(status_code=err.status_code, body=err.to_body(), meta=meta)
