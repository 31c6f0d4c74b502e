"""HTTP response shaping for the serverless entrypoint."""
from __future__ import annotations

import json
from typing import Any, Dict

from .types import ProxyResult

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST,OPTIONS",
}

def to_http_response(result: ProxyResult) -> Dict[str, Any]:
    if result.body is None:
        return {"statusCode": result.status_code, "headers": dict(CORS_HEADERS), "body": ""}

    return {
        "statusCode": result.status_code,
        "headers": {**CORS_HEADERS, "Content-Type": "application/json"},
        "body": json.dumps(result.body, ensure_ascii=False),
    }
