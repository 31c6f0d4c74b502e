"""Proxy error taxonomy.

Every failure the pipeline can produce is one of these. Each carries the HTTP
status, a machine category and a short label so the client can turn it into a
response body at a single boundary.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class ProxyError(Exception):
    status_code = 500
    category = "server-error"
    label = "Server error"

    def __init__(self, detail: str = "", preview: Optional[str] = None):
        super().__init__(detail or self.label)
        self.detail = detail
        self.preview = preview

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.label, "category": self.category}
        if self.detail:
            body["detail"] = self.detail
        if self.preview is not None:
            body["preview"] = self.preview
        return body


class MethodNotAllowed(ProxyError):
    status_code = 405
    category = "validation"
    label = "Method not allowed"


class InvalidInput(ProxyError):
    status_code = 400
    category = "validation"
    label = "Missing or invalid inputs"


class ConfigMissing(ProxyError):
    label = "Server misconfigured"


class UpstreamError(ProxyError):
    category = "upstream-error"
    label = "Wordware API error"

    def __init__(self, status_code: int, detail: str = ""):
        super().__init__(detail)
        self.status_code = status_code


class UpstreamTimeout(ProxyError):
    def __init__(self, detail: str = "Upstream timeout"):
        super().__init__(detail)


class ExtractionFailed(ProxyError):
    status_code = 422
    category = "extraction-failed"
    label = "FINAL JSON not found"


class ParseFailed(ProxyError):
    status_code = 422
    category = "parse-failed"

    def __init__(self, detail: str, preview: str, source: str = "marked"):
        super().__init__(detail, preview=preview)
        self.label = f"Unable to parse final JSON ({source})"


class ServerError(ProxyError):
    pass
