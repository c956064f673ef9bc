"""TOML configuration loader."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]

from .models import UserProfile


@dataclass
class GeminiConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class ClaudeConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class AIConfig:
    backend: str = "gemini"
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)


@dataclass
class DatabaseConfig:
    path: str = "~/.config/smartspend/smartspend.db"


@dataclass
class ProfileDefaults:
    junk_food_limit: float = 2000.0
    impulse_spending_limit: float = 10000.0
    savings_goal: float = 5000.0

    def __post_init__(self) -> None:
        # Same rules as a settings edit; raises ValueError on a bad value.
        profile = UserProfile().update(
            junk_food_limit=self.junk_food_limit,
            impulse_spending_limit=self.impulse_spending_limit,
            savings_goal=self.savings_goal,
        )
        self.junk_food_limit = profile.junk_food_limit
        self.impulse_spending_limit = profile.impulse_spending_limit
        self.savings_goal = profile.savings_goal

    def to_profile(self) -> UserProfile:
        return UserProfile(
            junk_food_limit=self.junk_food_limit,
            impulse_spending_limit=self.impulse_spending_limit,
            savings_goal=self.savings_goal,
        )


@dataclass
class CoachConfig:
    recent_transactions: int = 10
    alert_window_days: int = 7
    alert_threshold: int = 2


@dataclass
class SchedulerConfig:
    digest_schedule: str = "0 21 * * *"


@dataclass
class UserConfig:
    owner_id: str = "local"
    email: str = ""


@dataclass
class SmartSpendConfig:
    ai: AIConfig = field(default_factory=AIConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    profile: ProfileDefaults = field(default_factory=ProfileDefaults)
    coach: CoachConfig = field(default_factory=CoachConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    user: UserConfig = field(default_factory=UserConfig)


def load_config(path: str | Path | None = None) -> SmartSpendConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.

    Raises:
        ValueError: If a [profile] limit is not a positive number.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    ai = raw.get("ai", {})
    dbs = raw.get("database", {})
    prf = raw.get("profile", {})
    cch = raw.get("coach", {})
    sch = raw.get("scheduler", {})
    usr = raw.get("user", {})

    gemini_cfg = ai.get("gemini", {})
    claude_cfg = ai.get("claude", {})

    # Config file wins over the environment
    gemini_api_key = gemini_cfg.get("api_key", "") or os.environ.get(
        "GEMINI_API_KEY", ""
    )
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )

    defaults = ProfileDefaults()

    return SmartSpendConfig(
        ai=AIConfig(
            backend=ai.get("backend", "gemini"),
            gemini=GeminiConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.0-flash"),
            ),
            claude=ClaudeConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
        ),
        database=DatabaseConfig(
            path=dbs.get("path", "~/.config/smartspend/smartspend.db"),
        ),
        profile=ProfileDefaults(
            junk_food_limit=prf.get("junk_food_limit", defaults.junk_food_limit),
            impulse_spending_limit=prf.get(
                "impulse_spending_limit", defaults.impulse_spending_limit
            ),
            savings_goal=prf.get("savings_goal", defaults.savings_goal),
        ),
        coach=CoachConfig(
            recent_transactions=cch.get("recent_transactions", 10),
            alert_window_days=cch.get("alert_window_days", 7),
            alert_threshold=cch.get("alert_threshold", 2),
        ),
        scheduler=SchedulerConfig(
            digest_schedule=sch.get("digest_schedule", "0 21 * * *"),
        ),
        user=UserConfig(
            owner_id=usr.get("owner_id", "local"),
            email=usr.get("email", ""),
        ),
    )
