"""Storage interface for EcoLog.

Two implementations exist: a durable SQL store and an in-process store.
One is selected when the process starts (see `create_storage`); nothing in
the core holds a module-level store, so tests can build isolated instances.
"""

import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from ecolog.models.action import Action
from ecolog.models.metrics import ImpactTotals
from ecolog.models.user import User

load_dotenv()

logger = logging.getLogger(__name__)

STORAGE_BACKEND_SQL = "sql"
STORAGE_BACKEND_MEMORY = "memory"


class Storage(ABC):
    """Persisted users and their action history."""

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        """Return the user, or None if unknown."""
        ...

    @abstractmethod
    def upsert_user(self, user: User) -> User:
        """Create or update a user. Never changes eco_points of an existing user."""
        ...

    @abstractmethod
    def create_action(self, action: Action) -> Action:
        """Append an action and add its points to the owner, atomically.

        Raises ValidationError if the owner does not exist.
        """
        ...

    @abstractmethod
    def get_user_actions(self, user_id: str, limit: Optional[int] = None) -> List[Action]:
        """Return a user's actions, newest first."""
        ...

    @abstractmethod
    def get_all_actions(self, limit: Optional[int] = None) -> List[Action]:
        """Return actions across all users, newest first."""
        ...

    @abstractmethod
    def get_impact_totals(self, user_id: str, since: Optional[datetime] = None) -> ImpactTotals:
        """Sum a user's impact fields over actions created at or after `since`."""
        ...

    @abstractmethod
    def get_co2_totals(self, account_type: str) -> List[Tuple[User, Decimal]]:
        """Return (user, lifetime co2_reduced) for every user of one account type."""
        ...

    def close(self) -> None:
        """Release resources held by the store."""


def resolve_backend(backend: Optional[str] = None, database_url: Optional[str] = None) -> str:
    """Pick a backend name.

    An explicit STORAGE_BACKEND wins; otherwise a configured DATABASE_URL
    selects SQL and its absence selects the in-process store.
    """
    backend = (backend or os.getenv("STORAGE_BACKEND", "")).strip().lower()
    if backend:
        if backend not in (STORAGE_BACKEND_SQL, STORAGE_BACKEND_MEMORY):
            raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")
        return backend
    database_url = database_url if database_url is not None else os.getenv("DATABASE_URL", "")
    return STORAGE_BACKEND_SQL if database_url else STORAGE_BACKEND_MEMORY


def create_storage(backend: Optional[str] = None, database_url: Optional[str] = None) -> Storage:
    """Build the storage selected by configuration."""
    backend = resolve_backend(backend, database_url)
    if backend == STORAGE_BACKEND_SQL:
        from ecolog.database.database import DEFAULT_DATABASE_URL
        from ecolog.storage.database import DatabaseStorage
        url = database_url or os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
        logger.info("Using SQL storage")
        return DatabaseStorage.from_url(url)
    from ecolog.storage.memory import InMemoryStorage
    logger.warning("DATABASE_URL not set - using in-memory storage")
    return InMemoryStorage()
