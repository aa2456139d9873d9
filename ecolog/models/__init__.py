"""Data models for EcoLog."""

from ecolog.models.user import User, AccountType
from ecolog.models.action import Action, ActionCategory, ImpactMetrics
from ecolog.models.metrics import ImpactTotals, UserMetrics, CorporateMetrics, LeaderboardEntry

__all__ = [
    "User",
    "AccountType",
    "Action",
    "ActionCategory",
    "ImpactMetrics",
    "ImpactTotals",
    "UserMetrics",
    "CorporateMetrics",
    "LeaderboardEntry",
]
