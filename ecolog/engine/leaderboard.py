"""Leaderboard ranking for EcoLog.

Sorts users of one account type by lifetime CO2 reduced and assigns 1-based ranks.
This produces a deterministic ordering: ties are broken by user id.
"""

from decimal import Decimal
from typing import List, Sequence, Tuple

from ecolog.models.user import User
from ecolog.models.metrics import LeaderboardEntry
from ecolog.models.constants import ANONYMOUS_NAME, IMPACT_PRECISION


def display_name(user: User) -> str:
    """Resolve a user's display name.
    
    "first last" trimmed; falls back to email, then to "Anonymous".
    """
    full_name = f"{user.first_name or ''} {user.last_name or ''}".strip()
    if full_name:
        return full_name
    if user.email:
        return user.email
    return ANONYMOUS_NAME


def rank_leaderboard(totals: Sequence[Tuple[User, Decimal]], limit: int) -> List[LeaderboardEntry]:
    """Rank users by total CO2 reduced.
    
    Users are sorted:
    1. By CO2 reduced (highest first)
    2. Ties by user id (ascending)
    
    Users with no actions take part with a total of 0.
    
    Args:
        totals: (user, lifetime co2_reduced) pairs
        limit: Maximum number of entries to return
        
    Returns:
        Up to `limit` entries with contiguous ranks starting at 1
    """
    if limit <= 0:
        return []
    
    ordered = sorted(totals, key=lambda pair: (-Decimal(pair[1]), pair[0].id))
    
    return [
        LeaderboardEntry(
            rank=position,
            user_id=user.id,
            name=display_name(user),
            email=user.email or "",
            co2_reduced=Decimal(co2).quantize(IMPACT_PRECISION),
            eco_points=user.eco_points,
        )
        for position, (user, co2) in enumerate(ordered[:limit], start=1)
    ]
