"""Proxy configuration.

Design:
- Everything the handler needs from the environment is read once per
  invocation into an immutable ProxyConfig and passed to ProxyClient.
  Tests build ProxyConfig directly and never touch os.environ.
- Missing credentials are NOT an error here. The invoker raises
  ConfigMissing when it actually needs them, so a misconfigured function
  still answers OPTIONS/405/400 correctly.

input_defaults.yaml supports:
- defaults:
    Persona_TravelHistory: "None"
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .logging_util import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://app.wordware.ai/api/released-app"
DEFAULT_VERSION = "^3.2"
DEFAULT_TIMEOUT_SECONDS = 300.0
FINAL_JSON_START = "__FINAL_JSON_START__"
FINAL_JSON_END = "__FINAL_JSON_END__"
PREVIEW_CHARS = 800

def _project_root() -> Path:
    # <root>/src/wwproxy/config.py -> parents[2] == <root>
    return Path(__file__).resolve().parents[2]

def sanitize_api_key(raw: str) -> str:
    k = (raw or "").strip()
    k = k.strip(' "\'`')
    k = k.strip("“”‘’")
    return k

def _load_yaml(path: Path) -> Dict:
    if not path.exists():
        return {}
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except Exception as e:
        logger.error("Failed to load YAML: %s (%s)", path, e)
        return {}

def load_input_defaults(path: Optional[Path] = None) -> Dict[str, str]:
    if path is None:
        path = _project_root() / "src" / "configs" / "input_defaults.yaml"
    doc = _load_yaml(path)
    defaults = doc.get("defaults") if isinstance(doc, dict) else None
    if not isinstance(defaults, dict):
        return {}
    return {str(k): str(v) for k, v in defaults.items()}

def _env_flag(env: Mapping[str, str], name: str) -> bool:
    v = (env.get(name) or "").strip().lower()
    return v in ("1", "true", "y", "yes", "on")

def _to_float(v: Any, default: float) -> float:
    if v is None:
        return default
    try:
        f = float(v)
    except Exception:
        return default
    return f if f > 0 else default

@dataclass(frozen=True)
class ProxyConfig:
    prompt_id: str = ""
    api_key: str = ""
    version: str = DEFAULT_VERSION
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    include_raw: bool = False
    input_defaults: Dict[str, str] = field(default_factory=dict)
    markers: Tuple[str, str] = (FINAL_JSON_START, FINAL_JSON_END)
    final_keys: Tuple[str, ...] = ("hero", "meta", "sections")
    preview_chars: int = PREVIEW_CHARS

    @property
    def run_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.prompt_id}/run"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ProxyConfig":
        env = os.environ if env is None else env

        defaults_path = (env.get("WWPROXY_INPUT_DEFAULTS") or "").strip()

        return cls(
            prompt_id=(env.get("WORDWARE_PROMPT_ID") or "").strip(),
            api_key=sanitize_api_key(env.get("WORDWARE_API_KEY") or ""),
            version=(env.get("WORDWARE_VERSION") or "").strip() or DEFAULT_VERSION,
            base_url=(env.get("WORDWARE_BASE_URL") or "").strip() or DEFAULT_BASE_URL,
            timeout_seconds=_to_float(env.get("WORDWARE_TIMEOUT_SECONDS"), DEFAULT_TIMEOUT_SECONDS),
            include_raw=_env_flag(env, "WORDWARE_INCLUDE_RAW"),
            input_defaults=load_input_defaults(Path(defaults_path) if defaults_path else None),
        )
