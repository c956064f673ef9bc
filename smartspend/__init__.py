"""Smart expense tracker with AI categorization, analytics and streaks."""

from .ai import AIBackend, classify_or_default, create_backend
from .analytics import Analysis, compute_analysis, percentage_of_total
from .config import SmartSpendConfig, load_config
from .db import ProfileStore, TransactionStore
from .goals import (
    Badge,
    Challenge,
    GoalProgress,
    compute_goal_progress,
    evaluate_badges,
    evaluate_challenges,
)
from .models import Classification, Streaks, Transaction, UserProfile
from .streaks import compute_streaks
from .tracker import Notification, Tracker

__all__ = [
    "AIBackend",
    "create_backend",
    "classify_or_default",
    "Analysis",
    "compute_analysis",
    "percentage_of_total",
    "compute_streaks",
    "Badge",
    "Challenge",
    "GoalProgress",
    "evaluate_badges",
    "compute_goal_progress",
    "evaluate_challenges",
    "Classification",
    "Transaction",
    "UserProfile",
    "Streaks",
    "TransactionStore",
    "ProfileStore",
    "Tracker",
    "Notification",
    "SmartSpendConfig",
    "load_config",
]
