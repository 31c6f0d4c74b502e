"""Simple CLI for the Wordware proxy.

Usage examples:
- JSON string input (runs the released app):
  python cli.py "{\"inputs\":{\"Persona_Name\":\"Ada\"}}"

- JSON file input (prefix with @):
  python cli.py @request.json

- Offline extraction from a saved upstream body (no network call):
  python cli.py --extract @wordware_body.txt

- Pretty print:
  python cli.py @request.json --pretty

Notes:
- Configuration comes from the same WORDWARE_* environment variables as Lambda.
- Exit code is 0 for a 2xx result and 1 otherwise.
"""
import argparse
import json
from pathlib import Path
from typing import Any

from src.wwproxy.client import ProxyClient
from src.wwproxy.config import ProxyConfig
from src.wwproxy.errors import ProxyError
from src.wwproxy.logging_util import get_logger

logger = get_logger(__name__)

def _read_arg(spec: str) -> str:
    if spec.startswith("@"):
        return Path(spec[1:]).read_text(encoding="utf-8")
    return spec

def _dump(obj: Any, pretty: bool) -> None:
    if pretty:
        print(json.dumps(obj, ensure_ascii=False, indent=2))
    else:
        print(json.dumps(obj, ensure_ascii=False))

def main(argv=None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("input", help="JSON string or @path/to/json (or upstream body with --extract)")
    ap.add_argument("--extract", action="store_true", help="Only normalize and extract from a saved upstream body")
    ap.add_argument("--pretty", action="store_true", help="Pretty print the output JSON")
    args = ap.parse_args(argv)

    try:
        data = _read_arg(args.input)
    except OSError as e:
        logger.error("Failed to read input: %s", e)
        return 2

    client = ProxyClient(ProxyConfig.from_env())

    if args.extract:
        try:
            payload = client.extract(data)
        except ProxyError as e:
            _dump(e.to_body(), args.pretty)
            return 1
        _dump({"json": payload.value, "text": payload.text}, args.pretty)
        return 0

    try:
        req = json.loads(data)
    except ValueError as e:
        logger.error("Failed to parse input: %s", e)
        return 2

    result = client.run("POST", req, request_id="CLI")
    _dump({"status": result.status_code, "body": result.body}, args.pretty)
    return 0 if 200 <= result.status_code < 300 else 1

if __name__ == "__main__":
    raise SystemExit(main())
