import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = ".reviewbot.yml"

DEFAULT_CONFIG: dict = {
    "ai_review": True,
    "model": "anthropic",
    "max_changed_lines": 300,
    "max_turns": 1,  # bounded AI conversation length, 1-3
    "max_tokens": 1024,
    "ai_timeout": 60,  # seconds per AI request
    "allow_unverified_webhooks": False,  # local development only
}

MAX_TURNS_RANGE = (1, 3)


def load_config(config_path: Optional[str] = None, overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. The YAML config file (REVIEWBOT_CONFIG or .reviewbot.yml)
      3. Explicit overrides (CLI flags, tests)

    Credentials always come from the environment, never from the file.
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path or os.environ.get("REVIEWBOT_CONFIG") or DEFAULT_CONFIG_PATH)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if overrides:
        for key, value in overrides.items():
            if value is not None:
                config[key] = value

    # GitHub App identity used by the webhook server
    config["github_app_id"] = os.environ.get("GITHUB_APP_ID")
    config["github_private_key"] = _normalize_private_key(os.environ.get("GITHUB_PRIVATE_KEY"))
    config["github_client_id"] = os.environ.get("GITHUB_CLIENT_ID")
    config["github_client_secret"] = os.environ.get("GITHUB_CLIENT_SECRET")
    config["webhook_secret"] = os.environ.get("GITHUB_WEBHOOK_SECRET")
    # Personal token for CLI runs
    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["anthropic_api_key"] = os.environ.get("ANTHROPIC_API_KEY") or os.environ.get("CLAUDE_API_KEY")
    config["openai_api_key"] = os.environ.get("OPENAI_API_KEY")

    return config


def validate_config(config: dict) -> dict:
    """Raise ValueError for settings the pipeline cannot run with."""
    low, high = MAX_TURNS_RANGE
    max_turns = config.get("max_turns")
    if not isinstance(max_turns, int) or not low <= max_turns <= high:
        raise ValueError(f"max_turns must be an integer between {low} and {high}, got {max_turns!r}")

    max_changed_lines = config.get("max_changed_lines")
    if not isinstance(max_changed_lines, int) or max_changed_lines <= 0:
        raise ValueError(f"max_changed_lines must be a positive integer, got {max_changed_lines!r}")

    if config.get("model") not in ("anthropic", "openai"):
        raise ValueError(f"Unknown model provider: {config.get('model')!r}. Choose 'anthropic' or 'openai'.")
    return config


def _normalize_private_key(key: Optional[str]) -> Optional[str]:
    # Hosting platforms often store the PEM with literal "\n" sequences.
    if key and "\\n" in key:
        return key.replace("\\n", "\n")
    return key


def check_api_key(config: dict) -> None:
    """Raise ValueError when AI review is on but the chosen provider has no API key."""
    if not config.get("ai_review"):
        return
    model = config.get("model")
    if model == "anthropic" and not config.get("anthropic_api_key"):
        raise ValueError("ANTHROPIC_API_KEY environment variable is not set.")
    if model == "openai" and not config.get("openai_api_key"):
        raise ValueError("OPENAI_API_KEY environment variable is not set.")
