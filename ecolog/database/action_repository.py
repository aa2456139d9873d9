"""Repository for Action database operations."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import desc, func

from ecolog.errors import ValidationError
from ecolog.models.action import Action
from ecolog.models.metrics import ImpactTotals
from ecolog.models.user import User
from ecolog.database.models import ActionDB, UserDB, as_decimal

logger = logging.getLogger(__name__)


class ActionRepository:
    """Repository for Action database operations."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def create(self, action: Action) -> Action:
        """Insert an action and credit its points to the owner in one transaction.
        
        The points bump is an in-database increment, so concurrent creations
        for the same user never lose updates.
        
        Raises:
            ValidationError: If the owning user does not exist
        """
        try:
            updated = (
                self.db.query(UserDB)
                .filter(UserDB.id == action.user_id)
                .update(
                    {UserDB.eco_points: UserDB.eco_points + action.points_earned},
                    synchronize_session=False,
                )
            )
            if not updated:
                self.db.rollback()
                raise ValidationError(f"User {action.user_id} does not exist", field="user_id")
            
            action_db = ActionDB.from_pydantic(action)
            self.db.add(action_db)
            self.db.commit()
            self.db.refresh(action_db)
            logger.debug(f"Created action {action.id} for user {action.user_id} (+{action.points_earned} points)")
            return action_db.to_pydantic()
        except ValidationError:
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create action {action.id}: {type(e).__name__}: {str(e)}")
            raise
    
    def get_for_user(self, user_id: str, limit: Optional[int] = None) -> List[Action]:
        """Get a user's actions sorted by creation date (newest first)."""
        query = self.db.query(ActionDB).filter(
            ActionDB.user_id == user_id,
        ).order_by(desc(ActionDB.created_at))
        if limit is not None:
            query = query.limit(limit)
        return [action_db.to_pydantic() for action_db in query.all()]
    
    def get_all(self, limit: Optional[int] = None) -> List[Action]:
        """Get actions across all users sorted by creation date (newest first)."""
        query = self.db.query(ActionDB).order_by(desc(ActionDB.created_at))
        if limit is not None:
            query = query.limit(limit)
        return [action_db.to_pydantic() for action_db in query.all()]
    
    def impact_totals(self, user_id: str, since: Optional[datetime] = None) -> ImpactTotals:
        """Sum a user's impact columns, optionally only for actions created at or after `since`."""
        conditions = [ActionDB.user_id == user_id]
        if since is not None:
            conditions.append(ActionDB.created_at >= since)
        
        row = self.db.query(
            func.coalesce(func.sum(ActionDB.co2_reduced), 0),
            func.coalesce(func.sum(ActionDB.water_saved), 0),
            func.coalesce(func.sum(ActionDB.waste_diverted), 0),
            func.count(ActionDB.id),
        ).filter(*conditions).one()
        
        return ImpactTotals(
            co2_reduced=as_decimal(row[0]),
            water_saved=as_decimal(row[1]),
            waste_diverted=as_decimal(row[2]),
            action_count=int(row[3] or 0),
        )
    
    def co2_totals_by_user(self, account_type: str) -> List[Tuple[User, Decimal]]:
        """Lifetime CO2 per user of one account type.

        Left join: users without actions are included with 0.
        """
        rows = (
            self.db.query(UserDB, func.coalesce(func.sum(ActionDB.co2_reduced), 0))
            .outerjoin(ActionDB, ActionDB.user_id == UserDB.id)
            .filter(UserDB.account_type == account_type)
            .group_by(UserDB.id)
            .all()
        )
        return [(user_db.to_pydantic(), as_decimal(co2)) for user_db, co2 in rows]
