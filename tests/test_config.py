from src.wwproxy.config import (
    DEFAULT_BASE_URL,
    ProxyConfig,
    load_input_defaults,
    sanitize_api_key,
)

def test_from_env_reads_wordware_vars(tmp_path):
    env = {
        "WORDWARE_PROMPT_ID": " app-123 ",
        "WORDWARE_API_KEY": ' "ww-secret" ',
        "WORDWARE_VERSION": "^4.0",
        "WORDWARE_TIMEOUT_SECONDS": "12.5",
        "WORDWARE_INCLUDE_RAW": "yes",
        "WWPROXY_INPUT_DEFAULTS": str(tmp_path / "missing.yaml"),
    }
    cfg = ProxyConfig.from_env(env)
    assert cfg.prompt_id == "app-123"
    assert cfg.api_key == "ww-secret"
    assert cfg.version == "^4.0"
    assert cfg.timeout_seconds == 12.5
    assert cfg.include_raw is True
    assert cfg.input_defaults == {}
    assert cfg.run_url == f"{DEFAULT_BASE_URL}/app-123/run"

def test_from_env_defaults():
    cfg = ProxyConfig.from_env({"WORDWARE_TIMEOUT_SECONDS": "soon"})
    assert cfg.api_key == ""
    assert cfg.version == "^3.2"
    assert cfg.timeout_seconds == 300.0
    assert cfg.include_raw is False
    # shipped src/configs/input_defaults.yaml
    assert cfg.input_defaults == {"Persona_TravelHistory": "None"}

def test_load_input_defaults_from_yaml(tmp_path):
    p = tmp_path / "defaults.yaml"
    p.write_text("defaults:\n  Field_A: n/a\n  Field_B: 0\n", encoding="utf-8")
    assert load_input_defaults(p) == {"Field_A": "n/a", "Field_B": "0"}

def test_load_input_defaults_bad_yaml_is_empty(tmp_path):
    p = tmp_path / "defaults.yaml"
    p.write_text("defaults: [unclosed", encoding="utf-8")
    assert load_input_defaults(p) == {}
    p.write_text("- just\n- a list\n", encoding="utf-8")
    assert load_input_defaults(p) == {}

def test_sanitize_api_key():
    assert sanitize_api_key("  `abc`  ") == "abc"
    assert sanitize_api_key("“abc”") == "abc"
    assert sanitize_api_key("") == ""
