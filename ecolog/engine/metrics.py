"""Metrics aggregation for EcoLog.

Rolls per-action records up into per-user totals over an optional time window.
"""

import calendar
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from ecolog.models.action import Action
from ecolog.models.metrics import ImpactTotals, UserMetrics, CorporateMetrics
from ecolog.models.constants import IMPACT_PRECISION, CORPORATE_ACTIVE_EMPLOYEES, PERIOD_MONTH, PERIOD_QUARTER


def in_window(action: Action, since: Optional[datetime]) -> bool:
    """Whether an action falls inside a window starting at `since` (inclusive)."""
    return since is None or action.created_at >= since


def sum_impacts(actions: Iterable[Action], since: Optional[datetime] = None) -> ImpactTotals:
    """Sum impact fields and count actions created at or after `since`.
    
    Args:
        actions: Actions to aggregate
        since: Optional window start; None means all-time
        
    Returns:
        ImpactTotals with 2-decimal sums and the number of matching actions
    """
    co2 = Decimal("0")
    water = Decimal("0")
    waste = Decimal("0")
    count = 0
    for action in actions:
        if not in_window(action, since):
            continue
        co2 += Decimal(action.co2_reduced)
        water += Decimal(action.water_saved)
        waste += Decimal(action.waste_diverted)
        count += 1
    return ImpactTotals(
        co2_reduced=co2.quantize(IMPACT_PRECISION),
        water_saved=water.quantize(IMPACT_PRECISION),
        waste_diverted=waste.quantize(IMPACT_PRECISION),
        action_count=count,
    )


def build_user_metrics(totals: ImpactTotals, eco_points: int) -> UserMetrics:
    """Combine windowed totals with the user's all-time EcoPoints.

    Windowing never applies to eco_points.
    """
    return UserMetrics(
        co2_reduced=totals.co2_reduced,
        water_saved=totals.water_saved,
        waste_diverted=totals.waste_diverted,
        eco_points=eco_points,
        action_count=totals.action_count,
    )


def build_corporate_metrics(totals: ImpactTotals, eco_points: int) -> CorporateMetrics:
    """Corporate variant: only the corporate account's own actions are counted."""
    return CorporateMetrics(
        **build_user_metrics(totals, eco_points).model_dump(),
        active_employees=CORPORATE_ACTIVE_EMPLOYEES,
    )


def _months_back(moment: datetime, months: int) -> datetime:
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def window_start_for_period(period: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """Translate a dashboard period into a window start.
    
    - "month": midnight on the first day of the current month
    - "quarter": midnight three calendar months ago (day clamped to month length)
    - anything else: None (all-time)
    """
    now = now or datetime.utcnow()
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == PERIOD_MONTH:
        return midnight.replace(day=1)
    if period == PERIOD_QUARTER:
        return _months_back(midnight, 3)
    return None
