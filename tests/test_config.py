"""Tests for Settings defaults and models.yaml merging."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from playwright_agent.config import ModelConfig, Settings, _load_models_yaml, get_model_config


@pytest.fixture(autouse=True)
def _reset_cache():
    """Reset the module-level YAML cache before each test."""
    import playwright_agent.config as cfg
    cfg._models_config_cache = None
    yield
    cfg._models_config_cache = None


def _env(path):
    return patch.dict("os.environ", {"MODELS_CONFIG_PATH": str(path)})


def test_settings_defaults():
    s = Settings(_env_file=None, llm_api_key="k")
    assert s.agent_max_iterations == 20
    assert s.agent_max_tokens == 4096
    assert s.click_timeout_ms == 5000
    assert s.text_limit == 3000
    assert s.browser_headless is True


def test_settings_from_environment():
    with patch.dict("os.environ", {"AGENT_MAX_ITERATIONS": "5", "BROWSER_HEADLESS": "false"}):
        s = Settings(_env_file=None)
    assert s.agent_max_iterations == 5
    assert s.browser_headless is False


def test_model_config_defaults():
    mc = ModelConfig()
    assert mc.model == ""
    assert mc.temperature is None
    assert mc.max_tokens is None
    assert mc.base_url == ""


def test_load_yaml_missing_file(tmp_path):
    with _env(tmp_path / "nope.yaml"):
        assert _load_models_yaml() == {}


def test_load_yaml_empty_file(tmp_path):
    yaml_file = tmp_path / "models.yaml"
    yaml_file.write_text("")
    with _env(yaml_file):
        assert _load_models_yaml() == {}


def test_load_yaml_caches_result(tmp_path):
    yaml_file = tmp_path / "models.yaml"
    yaml_file.write_text("default:\n  model: m1\n")
    with _env(yaml_file):
        first = _load_models_yaml()
        yaml_file.write_text("default:\n  model: m2\n")
        second = _load_models_yaml()
    assert first is second
    assert second["default"]["model"] == "m1"


def test_no_yaml_falls_back_to_settings(tmp_path):
    from playwright_agent.config import settings

    with _env(tmp_path / "nope.yaml"):
        mc = get_model_config("browser")
    assert mc.model == settings.llm_model
    assert mc.base_url == settings.llm_base_url
    assert mc.max_tokens == settings.agent_max_tokens


def test_browser_override_merges_with_default(tmp_path):
    yaml_file = tmp_path / "models.yaml"
    yaml_file.write_text(
        "default:\n"
        "  model: default-model\n"
        "  temperature: 0.2\n"
        "  base_url: https://default.api/v1\n"
        "agents:\n"
        "  browser:\n"
        "    model: browser-model\n"
        "    max_tokens: 8000\n"
        "    unknown_key: ignored\n"
    )
    with _env(yaml_file):
        mc = get_model_config("browser")
    assert mc == ModelConfig(
        model="browser-model",
        temperature=0.2,
        max_tokens=8000,
        base_url="https://default.api/v1",
    )


def test_unknown_agent_uses_default_section(tmp_path):
    yaml_file = tmp_path / "models.yaml"
    yaml_file.write_text("default:\n  model: default-model\n")
    with _env(yaml_file):
        mc = get_model_config("other")
    assert mc.model == "default-model"
