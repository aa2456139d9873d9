"""Repository for User database operations."""

import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from ecolog.models.user import User
from ecolog.database.models import UserDB, enum_to_value

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for User database operations."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def get(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        user_db = self.db.query(UserDB).filter(UserDB.id == user_id).first()
        return user_db.to_pydantic() if user_db else None
    
    def create_or_update(self, user: User) -> User:
        """Create or update user (upsert).

        Profile and account fields are overwritten; eco_points is only ever
        changed by action creation and is left untouched on update.
        
        Args:
            user: User object to create or update
            
        Returns:
            Created or updated User object
        """
        user_db = self.db.query(UserDB).filter(UserDB.id == user.id).first()
        
        if user_db:
            # Update existing user
            user_db.email = user.email
            user_db.first_name = user.first_name
            user_db.last_name = user.last_name
            user_db.profile_image_url = user.profile_image_url
            user_db.account_type = enum_to_value(user.account_type)
            user_db.company_name = user.company_name
            user_db.updated_at = datetime.utcnow()
            try:
                self.db.commit()
                self.db.refresh(user_db)
                logger.debug(f"Updated user {user.id}")
                return user_db.to_pydantic()
            except Exception as e:
                self.db.rollback()
                logger.error(f"Failed to update user {user.id}: {type(e).__name__}: {str(e)}")
                raise
        else:
            # Create new user
            try:
                user_db = UserDB.from_pydantic(user)
                self.db.add(user_db)
                self.db.commit()
                self.db.refresh(user_db)
                logger.debug(f"Created user {user.id}")
                return user_db.to_pydantic()
            except Exception as e:
                self.db.rollback()
                logger.error(f"Failed to create user {user.id}: {type(e).__name__}: {str(e)}")
                raise
