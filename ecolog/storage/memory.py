"""In-process storage for EcoLog (local development and tests)."""

import threading
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from ecolog.engine.metrics import sum_impacts
from ecolog.errors import ValidationError
from ecolog.models.action import Action
from ecolog.models.metrics import ImpactTotals
from ecolog.models.user import User
from ecolog.storage.base import Storage


class InMemoryStorage(Storage):
    """Dict/list backed store. A single lock makes each creation atomic."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: Dict[str, User] = {}
        self._actions: List[Action] = []

    def get_user(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def upsert_user(self, user: User) -> User:
        with self._lock:
            existing = self._users.get(user.id)
            if existing:
                user = user.model_copy(update={
                    "eco_points": existing.eco_points,
                    "created_at": existing.created_at,
                    "updated_at": datetime.utcnow(),
                })
            self._users[user.id] = user
            return user

    def create_action(self, action: Action) -> Action:
        with self._lock:
            owner = self._users.get(action.user_id)
            if owner is None:
                raise ValidationError(f"User {action.user_id} does not exist", field="user_id")
            self._actions.append(action)
            self._users[owner.id] = owner.model_copy(
                update={"eco_points": owner.eco_points + action.points_earned}
            )
            return action

    def _newest_first(self, actions: List[Action], limit: Optional[int]) -> List[Action]:
        # reversed() first so equal timestamps keep newest-inserted first
        ordered = sorted(reversed(actions), key=lambda a: a.created_at, reverse=True)
        return ordered if limit is None else ordered[:limit]

    def get_user_actions(self, user_id: str, limit: Optional[int] = None) -> List[Action]:
        with self._lock:
            owned = [a for a in self._actions if a.user_id == user_id]
        return self._newest_first(owned, limit)

    def get_all_actions(self, limit: Optional[int] = None) -> List[Action]:
        with self._lock:
            snapshot = list(self._actions)
        return self._newest_first(snapshot, limit)

    def get_impact_totals(self, user_id: str, since: Optional[datetime] = None) -> ImpactTotals:
        with self._lock:
            owned = [a for a in self._actions if a.user_id == user_id]
        return sum_impacts(owned, since)

    def get_co2_totals(self, account_type: str) -> List[Tuple[User, Decimal]]:
        with self._lock:
            users = [u for u in self._users.values() if u.account_type == account_type]
            actions = list(self._actions)
        totals = []
        for user in users:
            owned = [a for a in actions if a.user_id == user.id]
            totals.append((user, sum_impacts(owned).co2_reduced))
        return totals
