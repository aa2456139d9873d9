"""SQLAlchemy database models for EcoLog."""

from datetime import datetime
from decimal import Decimal
from typing import Union, TypeVar, Type
import uuid
from sqlalchemy import Column, String, Text, Integer, Numeric, Boolean, DateTime, ForeignKey

from ecolog.database.database import Base
from ecolog.models.user import AccountType
from ecolog.models.action import ActionCategory

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).
    
    Args:
        enum_obj: Enum instance or string value
        
    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.
    
    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails
        
    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


def as_decimal(value) -> Decimal:
    """Normalize a numeric column value (SQLite may hand back floats) to a 2-place Decimal."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(Decimal("0.01"))


class UserDB(Base):
    """Database model for User."""
    
    __tablename__ = "users"
    
    # Primary key (identity provider subject or guest id)
    id = Column(String, primary_key=True)
    
    # User profile
    email = Column(String, nullable=True, unique=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    
    # Account
    account_type = Column(String, nullable=False, default=AccountType.INDIVIDUAL.value, index=True)
    company_name = Column(String, nullable=True)
    eco_points = Column(Integer, nullable=False, default=0)
    
    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from ecolog.models.user import User
        return User(
            id=self.id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            profile_image_url=self.profile_image_url,
            account_type=value_to_enum(self.account_type, AccountType, AccountType.INDIVIDUAL),
            company_name=self.company_name,
            eco_points=self.eco_points or 0,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
    
    @classmethod
    def from_pydantic(cls, user):
        """Create database model from Pydantic model."""
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            profile_image_url=user.profile_image_url,
            account_type=enum_to_value(user.account_type),
            company_name=user.company_name,
            eco_points=user.eco_points,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class ActionDB(Base):
    """Database model for Action.

    Rows are append-only: impact columns are written once at creation.
    """
    
    __tablename__ = "actions"
    
    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    
    # User association
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    
    # Logged fields
    category = Column(String, nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    quantity = Column(Numeric(10, 2), nullable=True)
    unit = Column(String, nullable=True)
    proof_url = Column(String, nullable=True)
    
    # Derived impact (frozen at creation)
    co2_reduced = Column(Numeric(10, 2), nullable=False)
    water_saved = Column(Numeric(10, 2), nullable=False)
    waste_diverted = Column(Numeric(10, 2), nullable=False)
    points_earned = Column(Integer, nullable=False)
    
    verified = Column(Boolean, nullable=False, default=False)
    
    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    
    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from ecolog.models.action import Action
        return Action(
            id=self.id,
            user_id=self.user_id,
            category=ActionCategory(self.category),
            title=self.title,
            description=self.description,
            quantity=as_decimal(self.quantity) if self.quantity is not None else None,
            unit=self.unit,
            proof_url=self.proof_url,
            co2_reduced=as_decimal(self.co2_reduced),
            water_saved=as_decimal(self.water_saved),
            waste_diverted=as_decimal(self.waste_diverted),
            points_earned=self.points_earned,
            verified=self.verified,
            created_at=self.created_at,
        )
    
    @classmethod
    def from_pydantic(cls, action):
        """Create database model from Pydantic model."""
        return cls(
            id=action.id,
            user_id=action.user_id,
            category=enum_to_value(action.category),
            title=action.title,
            description=action.description,
            quantity=action.quantity,
            unit=action.unit,
            proof_url=action.proof_url,
            co2_reduced=action.co2_reduced,
            water_saved=action.water_saved,
            waste_diverted=action.waste_diverted,
            points_earned=action.points_earned,
            verified=action.verified,
            created_at=action.created_at,
        )
