"""Wordware released-app adapter (POST /{prompt_id}/run)."""
from __future__ import annotations

import hashlib
import json
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
import requests
from typing import Any, Dict, List

from ..config import ProxyConfig
from ..errors import ConfigMissing, ServerError, UpstreamError, UpstreamTimeout
from ..logging_util import get_logger
from ..types import UpstreamResponse
from .base import BaseWorkflowAdapter

logger = get_logger(__name__)

# Many released apps stream NDJSON lines even when JSON is acceptable.
ACCEPT = "text/event-stream, application/json;q=0.9, */*;q=0.8"
CHUNK_SIZE = 8192
DETAIL_CHARS = 2000

def read_body(r: requests.Response, deadline: float) -> str:
    """Read the whole body, giving up once the wall-clock deadline passes."""
    buf = bytearray()
    try:
        for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
            if chunk:
                buf.extend(chunk)
            if time.monotonic() > deadline:
                raise UpstreamTimeout()
    except requests.RequestException as e:
        # requests reports a read timeout mid-body as ConnectionError
        if time.monotonic() >= deadline:
            raise UpstreamTimeout()
        raise ServerError(f"response read failed: {e}")
    return buf.decode("utf-8", errors="replace")

def error_detail(text: str) -> str:
    try:
        obj = json.loads(text)
    except ValueError:
        return text
    if isinstance(obj, dict):
        for k in ("error", "message", "detail"):
            v = obj.get(k)
            if isinstance(v, str) and v.strip():
                return v
    return text

class WordwareAdapter(BaseWorkflowAdapter):
    def __init__(self, config: ProxyConfig):
        self.config = config

    def _check_config(self) -> None:
        if not self.config.api_key:
            raise ConfigMissing("WORDWARE_API_KEY is not set")
        if not self.config.prompt_id:
            raise ConfigMissing("WORDWARE_PROMPT_ID is not set")

    def _fetch(self, headers: Dict[str, Any], payload: Dict[str, Any], deadline: float, opened: List[requests.Response]) -> UpstreamResponse:
        timeout = self.config.timeout_seconds
        try:
            r = requests.post(self.config.run_url, headers=headers, json=payload, timeout=timeout, stream=True)
        except requests.Timeout:
            raise UpstreamTimeout()
        except requests.RequestException as e:
            raise ServerError(f"request failed: {e}")

        opened.append(r)
        try:
            text = read_body(r, deadline)
        finally:
            r.close()

        return UpstreamResponse(
            status_code=r.status_code,
            content_type=r.headers.get("Content-Type", ""),
            text=text,
        )

    def run(self, inputs: Dict[str, Any], version: str) -> UpstreamResponse:
        self._check_config()

        key = self.config.api_key
        sha8 = hashlib.sha256(key.encode("utf-8")).hexdigest()[:8]
        logger.info("[WORDWARE_KEY] len=%d sha8=%s", len(key), sha8)

        headers = {
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
            "Accept": ACCEPT,
        }
        payload: Dict[str, Any] = {"inputs": inputs, "version": version}

        timeout = self.config.timeout_seconds
        deadline = time.monotonic() + timeout

        # requests only bounds each socket read, so the whole call runs in a
        # worker and is abandoned once the wall-clock bound passes.
        opened: List[requests.Response] = []
        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="wordware")
        try:
            future = pool.submit(self._fetch, headers, payload, deadline, opened)
            up = future.result(timeout=timeout)
        except FutureTimeout:
            for r in opened:
                r.close()
            logger.error("Wordware call exceeded %.1fs", timeout)
            raise UpstreamTimeout()
        finally:
            pool.shutdown(wait=False)

        if not 200 <= up.status_code < 300:
            logger.error("Wordware returned http %d: %s", up.status_code, up.text[:200])
            raise UpstreamError(up.status_code, error_detail(up.text)[:DETAIL_CHARS])

        return up
