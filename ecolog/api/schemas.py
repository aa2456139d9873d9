"""Request/response models for the EcoLog API."""

from typing import List, Optional, Union
from pydantic import BaseModel, Field

from ecolog.models.action import Action
from ecolog.models.user import User


class ActionCreateRequest(BaseModel):
    """Request model for logging an action.

    `category` is validated by the core so unknown values surface as a
    field-specific 400 rather than a schema error.
    """
    category: str = Field(..., description="energy_saving | recycling | upcycling | sustainable_commute")
    title: str = Field(..., description="Action title")
    description: Optional[str] = Field(None, description="Free-form description")
    quantity: Optional[Union[float, str]] = Field(None, description="Quantity in category units (defaults to 1)")
    unit: Optional[str] = Field(None, description="Unit label (kWh, kg, km)")
    proof_url: Optional[str] = Field(None, description="Link to proof of the action")


class AccountTypeRequest(BaseModel):
    """Request model for switching account type."""
    account_type: str = Field(..., description="individual | corporate")
    company_name: Optional[str] = Field(None, description="Company name (corporate accounts only)")


class AuthResponse(BaseModel):
    """Response model for authentication."""
    access_token: str
    token_type: str = "bearer"
    user: User


class ActionListResponse(BaseModel):
    """Response model for listing actions."""
    actions: List[Action]
    count: int
