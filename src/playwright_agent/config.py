from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    llm_api_key: str = ""
    promptlayer_api_key: str = ""
    llm_base_url: str = "https://openrouter.ai/api/v1"
    llm_model: str = "anthropic/claude-sonnet-4"

    # Agent loop
    agent_max_iterations: int = 20
    agent_max_tokens: int = 4096

    # Browser
    browser_headless: bool = True
    browser_viewport_width: int = 1280
    browser_viewport_height: int = 800
    click_timeout_ms: int = 5000
    text_limit: int = 3000


settings = Settings()


@dataclass
class ModelConfig:
    model: str = ""
    temperature: float | None = None
    max_tokens: int | None = None
    base_url: str = ""


_models_config_cache: dict | None = None


def _load_models_yaml() -> dict:
    global _models_config_cache
    if _models_config_cache is not None:
        return _models_config_cache

    config_path = os.environ.get("MODELS_CONFIG_PATH", "models.yaml")
    path = Path(config_path)
    if not path.is_file():
        _models_config_cache = {}
        return _models_config_cache

    import yaml

    with open(path) as f:
        _models_config_cache = yaml.safe_load(f) or {}
    return _models_config_cache


def get_model_config(agent_name: str = "") -> ModelConfig:
    """Get model config for an agent, merging default + agent override.

    Falls back to Settings env variables if models.yaml doesn't exist.
    """
    data = _load_models_yaml()

    if not data:
        return ModelConfig(
            model=settings.llm_model,
            max_tokens=settings.agent_max_tokens,
            base_url=settings.llm_base_url,
        )

    default = data.get("default", {})
    merged = {
        "model": default.get("model", settings.llm_model),
        "temperature": default.get("temperature"),
        "max_tokens": default.get("max_tokens", settings.agent_max_tokens),
        "base_url": default.get("base_url", settings.llm_base_url),
    }

    if agent_name:
        agents = data.get("agents", {})
        agent_override = agents.get(agent_name, {})
        for key, value in agent_override.items():
            if key in merged:
                merged[key] = value

    return ModelConfig(
        model=merged["model"],
        temperature=merged["temperature"],
        max_tokens=merged["max_tokens"],
        base_url=merged["base_url"],
    )
