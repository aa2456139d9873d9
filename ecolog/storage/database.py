"""SQL-backed storage for EcoLog."""

import logging
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Iterator, List, Optional, Tuple

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ecolog.database.action_repository import ActionRepository
from ecolog.database.database import build_engine, build_session_factory, init_db
from ecolog.database.user_repository import UserRepository
from ecolog.errors import PersistenceError
from ecolog.models.action import Action
from ecolog.models.metrics import ImpactTotals
from ecolog.models.user import User
from ecolog.storage.base import Storage

logger = logging.getLogger(__name__)


class DatabaseStorage(Storage):
    """Storage over SQLAlchemy. Each call runs in its own session."""

    def __init__(self, session_factory: sessionmaker, engine: Optional[Engine] = None):
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> "DatabaseStorage":
        """Build an engine for `database_url`, create the schema and wrap it."""
        engine = build_engine(database_url)
        init_db(engine, database_url)
        return cls(build_session_factory(engine), engine=engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            logger.error(f"Storage failure: {type(e).__name__}: {str(e)}")
            raise PersistenceError(f"Storage unavailable: {type(e).__name__}") from e
        finally:
            db.close()

    def get_user(self, user_id: str) -> Optional[User]:
        with self._session() as db:
            return UserRepository(db).get(user_id)

    def upsert_user(self, user: User) -> User:
        with self._session() as db:
            return UserRepository(db).create_or_update(user)

    def create_action(self, action: Action) -> Action:
        with self._session() as db:
            return ActionRepository(db).create(action)

    def get_user_actions(self, user_id: str, limit: Optional[int] = None) -> List[Action]:
        with self._session() as db:
            return ActionRepository(db).get_for_user(user_id, limit)

    def get_all_actions(self, limit: Optional[int] = None) -> List[Action]:
        with self._session() as db:
            return ActionRepository(db).get_all(limit)

    def get_impact_totals(self, user_id: str, since: Optional[datetime] = None) -> ImpactTotals:
        with self._session() as db:
            return ActionRepository(db).impact_totals(user_id, since)

    def get_co2_totals(self, account_type: str) -> List[Tuple[User, Decimal]]:
        with self._session() as db:
            return ActionRepository(db).co2_totals_by_user(account_type)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
