"""User data model for EcoLog."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class AccountType(str, Enum):
    """Account type enumeration."""
    INDIVIDUAL = "individual"
    CORPORATE = "corporate"


class User(BaseModel):
    """User model for EcoLog."""
    
    id: str = Field(..., description="Unique user identifier (issued by the identity provider)")
    email: Optional[str] = Field(None, description="User email address")
    first_name: Optional[str] = Field(None, description="User first name")
    last_name: Optional[str] = Field(None, description="User last name")
    profile_image_url: Optional[str] = Field(None, description="Profile image URL")
    account_type: AccountType = Field(AccountType.INDIVIDUAL, description="Individual or corporate account")
    company_name: Optional[str] = Field(None, description="Company name (corporate accounts only)")
    eco_points: int = Field(0, ge=0, description="Lifetime sum of points earned across all actions")
    created_at: datetime = Field(..., description="User creation timestamp")
    updated_at: datetime = Field(..., description="User last update timestamp")
    
    class Config:
        """Pydantic configuration."""
        use_enum_values = True
