"""Tests for config loading."""

import pytest

from smartspend.config import SmartSpendConfig, load_config
from smartspend.models import UserProfile


@pytest.fixture(autouse=True)
def _clear_api_keys(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


def test_load_config_defaults():
    """Loading with no path returns all defaults."""
    config = load_config()
    assert isinstance(config, SmartSpendConfig)
    assert config.ai.backend == "gemini"
    assert config.ai.gemini.model == "gemini-2.0-flash"
    assert config.ai.gemini.api_key == ""
    assert config.database.path == "~/.config/smartspend/smartspend.db"
    assert config.profile.to_profile() == UserProfile()
    assert config.coach.recent_transactions == 10
    assert config.coach.alert_window_days == 7
    assert config.coach.alert_threshold == 2
    assert config.scheduler.digest_schedule == "0 21 * * *"
    assert config.user.owner_id == "local"


def test_load_config_nonexistent_file():
    config = load_config("/nonexistent/path.toml")
    assert config.ai.backend == "gemini"


def test_load_config_from_toml(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        """\
[ai]
backend = "claude"

[ai.claude]
api_key = "test-key-123"
model = "claude-test"

[database]
path = "/var/lib/smartspend.db"

[profile]
junk_food_limit = 1500
savings_goal = 20000

[coach]
alert_threshold = 4

[user]
owner_id = "asha"
email = "asha@example.com"
""",
        encoding="utf-8",
    )
    config = load_config(path)

    assert config.ai.backend == "claude"
    assert config.ai.claude.api_key == "test-key-123"
    assert config.ai.claude.model == "claude-test"
    assert config.database.path == "/var/lib/smartspend.db"
    assert config.profile.junk_food_limit == 1500
    assert config.profile.impulse_spending_limit == 10000
    assert config.profile.savings_goal == 20000
    assert config.coach.alert_threshold == 4
    assert config.coach.recent_transactions == 10
    assert config.user.owner_id == "asha"
    assert config.user.email == "asha@example.com"


def test_load_config_env_override(monkeypatch):
    """Environment variables fill in empty API keys."""
    monkeypatch.setenv("GEMINI_API_KEY", "env-gemini-key")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-anthropic-key")

    config = load_config()
    assert config.ai.gemini.api_key == "env-gemini-key"
    assert config.ai.claude.api_key == "env-anthropic-key"


def test_load_config_file_key_takes_precedence(monkeypatch, tmp_path):
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    path = tmp_path / "config.toml"
    path.write_bytes(b'[ai.gemini]\napi_key = "file-key"\n')

    config = load_config(path)
    assert config.ai.gemini.api_key == "file-key"


@pytest.mark.parametrize("value", ["0", "-100", '"lots"'])
def test_load_config_rejects_bad_profile_limit(tmp_path, value):
    path = tmp_path / "config.toml"
    path.write_text(f"[profile]\nsavings_goal = {value}\n", encoding="utf-8")
    with pytest.raises(ValueError, match="savings_goal"):
        load_config(path)
