"""AWS Lambda entrypoint.

Design goals:
- Keep this file small and stable.
- Delegate all real logic to src/wwproxy so the same pipeline runs from the
  CLI and from Lambda.
- Read configuration per invocation; nothing is cached between requests.

Expected event shapes (minimal):
1) API Gateway REST (body is a JSON string):
   {"httpMethod": "POST", "body": "{\"inputs\": {...}, \"version\": \"^3.2\"}"}

2) API Gateway HTTP API / function URL:
   {"requestContext": {"http": {"method": "POST"}}, "body": "...", "isBase64Encoded": false}

3) Direct invoke / local test (no HTTP context, always treated as POST):
   {"inputs": {...}}  or  {"body": "{\"inputs\": {...}}"}

Return:
- statusCode: 200 / 400 / 405 / 422 / 500 / upstream passthrough
- headers: CORS headers on every response
- body: JSON string of {"json":..., "text":...} or {"error":..., "category":..., "detail":...}
"""
import base64
import json
from typing import Any, Dict

from src.wwproxy.client import ProxyClient
from src.wwproxy.config import ProxyConfig
from src.wwproxy.errors import ServerError
from src.wwproxy.logging_util import get_logger
from src.wwproxy.responses import to_http_response
from src.wwproxy.types import ProxyResult

logger = get_logger(__name__)

def _safe_json_loads(s: Any):
    if isinstance(s, dict):
        return s
    if not isinstance(s, str):
        return {}
    s = s.strip()
    if not s:
        return {}
    try:
        return json.loads(s)
    except Exception:
        return {}

def _has_http_context(event: Dict[str, Any]) -> bool:
    return "httpMethod" in event or "requestContext" in event

def _event_method(event: Dict[str, Any]) -> str:
    if not _has_http_context(event):
        return "POST"
    method = event.get("httpMethod")
    if not method:
        method = ((event.get("requestContext") or {}).get("http") or {}).get("method")
    return method or ""

def _event_body(event: Dict[str, Any]) -> Any:
    if not _has_http_context(event) and "body" not in event:
        return event

    body = event.get("body")
    if isinstance(body, str) and event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body).decode("utf-8")
        except Exception as e:
            logger.error("Failed to decode base64 body: %s", e)
            return {}
    return _safe_json_loads(body)

def lambda_handler(event: Dict[str, Any], context: Any):
    try:
        event = event if isinstance(event, dict) else {}
        client = ProxyClient(ProxyConfig.from_env())
        result = client.run(
            _event_method(event),
            _event_body(event),
            request_id=getattr(context, "aws_request_id", None),
        )
        return to_http_response(result)

    except Exception as e:
        logger.exception("lambda_handler fatal error: %s", e)
        err = ServerError(str(e))
        return to_http_response(ProxyResult(status_code=err.status_code, body=err.to_body()))
