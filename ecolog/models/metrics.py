"""Aggregated metric models for EcoLog."""

from decimal import Decimal
from pydantic import BaseModel, Field


class ImpactTotals(BaseModel):
    """Summed impact over a set of actions."""

    co2_reduced: Decimal = Decimal("0.00")
    water_saved: Decimal = Decimal("0.00")
    waste_diverted: Decimal = Decimal("0.00")
    action_count: int = 0


class UserMetrics(BaseModel):
    """Personal dashboard metrics.

    `eco_points` is always the user's all-time total, even when the
    environmental sums are windowed.
    """

    co2_reduced: Decimal = Field(Decimal("0.00"), description="Summed kg of CO2 reduced")
    water_saved: Decimal = Field(Decimal("0.00"), description="Summed liters of water saved")
    waste_diverted: Decimal = Field(Decimal("0.00"), description="Summed kg of waste diverted")
    eco_points: int = Field(0, description="User's all-time EcoPoints")
    action_count: int = Field(0, description="Number of actions in the window")


class CorporateMetrics(UserMetrics):
    """Corporate dashboard metrics."""

    active_employees: int = Field(1, description="Employees contributing to the totals")


class LeaderboardEntry(BaseModel):
    """One ranked row of a leaderboard."""

    rank: int = Field(..., ge=1)
    user_id: str
    name: str
    email: str = ""
    co2_reduced: Decimal = Decimal("0.00")
    eco_points: int = 0
