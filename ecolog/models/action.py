"""Action data model for EcoLog."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ActionCategory(str, Enum):
    """Closed set of loggable action categories."""
    ENERGY_SAVING = "energy_saving"
    RECYCLING = "recycling"
    UPCYCLING = "upcycling"
    SUSTAINABLE_COMMUTE = "sustainable_commute"


class ImpactMetrics(BaseModel):
    """Derived environmental impact of a single action."""

    co2_reduced: Decimal = Field(Decimal("0.00"), description="kg of CO2 reduced")
    water_saved: Decimal = Field(Decimal("0.00"), description="Liters of water saved")
    waste_diverted: Decimal = Field(Decimal("0.00"), description="kg of waste diverted from landfill")
    points_earned: int = Field(0, description="EcoPoints earned")


class Action(BaseModel):
    """A single logged eco-friendly activity.

    Impact fields are computed once at creation time and never recomputed.
    """
    
    id: str = Field(..., description="Unique action identifier (UUID v4)")
    user_id: str = Field(..., description="User ID who owns this action")
    category: ActionCategory = Field(..., description="Action category")
    title: str = Field(..., description="Action title")
    description: Optional[str] = Field(None, description="Free-form description")
    quantity: Optional[Decimal] = Field(None, ge=0, description="Quantity in category units (kWh, kg, km)")
    unit: Optional[str] = Field(None, description="Unit label supplied by the client")
    proof_url: Optional[str] = Field(None, description="Link to proof of the action")
    co2_reduced: Decimal = Field(..., ge=0, description="kg of CO2 reduced")
    water_saved: Decimal = Field(..., ge=0, description="Liters of water saved")
    waste_diverted: Decimal = Field(..., ge=0, description="kg of waste diverted")
    points_earned: int = Field(..., ge=0, description="EcoPoints earned")
    verified: bool = Field(False, description="Whether the action was verified (manual only)")
    created_at: datetime = Field(..., description="Action creation timestamp")
    
    class Config:
        """Pydantic configuration."""
        use_enum_values = True
