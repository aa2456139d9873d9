"""Core EcoLog operations.

Every function takes the Storage to act on, so callers decide which
backend is in play.
"""

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from ecolog.engine.impact import calculate_impact, parse_quantity, read_decimal
from ecolog.engine.leaderboard import rank_leaderboard
from ecolog.engine.metrics import build_user_metrics, build_corporate_metrics
from ecolog.errors import ValidationError, NotFoundError
from ecolog.models.action import Action, ActionCategory, ImpactMetrics
from ecolog.models.constants import (
    DEFAULT_LEADERBOARD_LIMIT,
    IMPACT_PRECISION,
    MAX_STORED_AMOUNT,
    MAX_STORED_POINTS,
    GUEST_ID_PREFIX,
    GUEST_FIRST_NAME,
    GUEST_LAST_NAME,
)
from ecolog.models.metrics import UserMetrics, CorporateMetrics, LeaderboardEntry
from ecolog.models.user import User, AccountType
from ecolog.storage.base import Storage

logger = logging.getLogger(__name__)

ACTION_CATEGORIES = {c.value for c in ActionCategory}
ACCOUNT_TYPES = {t.value for t in AccountType}


def compute_impact(category: Any, quantity: Any = None) -> ImpactMetrics:
    """Preview the impact of an action. Never fails."""
    return calculate_impact(category, quantity)


def _validate_category(category: Any) -> str:
    value = getattr(category, "value", category)
    if not isinstance(value, str) or value not in ACTION_CATEGORIES:
        raise ValidationError(
            f"Invalid category: {value!r}. Expected one of: {', '.join(sorted(ACTION_CATEGORIES))}",
            field="category",
        )
    return value


def _validate_account_type(account_type: Any) -> str:
    value = getattr(account_type, "value", account_type)
    if not isinstance(value, str) or value not in ACCOUNT_TYPES:
        raise ValidationError(
            f"Invalid account type: {value!r}. Expected 'individual' or 'corporate'",
            field="account_type",
        )
    return value


def _is_negative(quantity: Any) -> bool:
    value = read_decimal(quantity)
    return value is not None and value.is_finite() and value < 0


def _fits_storage(quantity: Optional[Decimal], impact: ImpactMetrics) -> bool:
    amounts = [impact.co2_reduced, impact.water_saved, impact.waste_diverted]
    if quantity is not None:
        amounts.append(quantity)
    return all(a <= MAX_STORED_AMOUNT for a in amounts) and impact.points_earned <= MAX_STORED_POINTS


def log_action(
    storage: Storage,
    user_id: str,
    category: Any,
    title: str,
    description: Optional[str] = None,
    quantity: Any = None,
    unit: Optional[str] = None,
    proof_url: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Action:
    """Log an action: compute its impact, store it and credit the owner's points.
    
    Args:
        storage: Store to write to
        user_id: Owning user
        category: One of the four action categories
        title: Required, non-empty title
        description, unit, proof_url: Optional free-form fields
        quantity: Quantity in category units; missing/unparseable counts as 1
        now: Creation timestamp override (defaults to utcnow)
        
    Returns:
        The stored Action with impact fields filled in
        
    Raises:
        ValidationError: Invalid category, blank title, missing user_id or unknown owner
    """
    if not user_id:
        raise ValidationError("user_id is required", field="user_id")
    category_value = _validate_category(category)
    if not title or not str(title).strip():
        raise ValidationError("title is required", field="title")
    
    stored_quantity = None
    if quantity is not None and str(quantity).strip() != "":
        if _is_negative(quantity):
            raise ValidationError("quantity must not be negative", field="quantity")
        stored_quantity = parse_quantity(quantity)
    impact = calculate_impact(category_value, quantity)
    if not _fits_storage(stored_quantity, impact):
        raise ValidationError(
            f"quantity is too large; impact values must not exceed {MAX_STORED_AMOUNT}",
            field="quantity",
        )
    if stored_quantity is not None:
        stored_quantity = stored_quantity.quantize(IMPACT_PRECISION)
    
    action = Action(
        id=str(uuid.uuid4()),
        user_id=user_id,
        category=ActionCategory(category_value),
        title=str(title).strip(),
        description=description,
        quantity=stored_quantity,
        unit=unit,
        proof_url=proof_url,
        co2_reduced=impact.co2_reduced,
        water_saved=impact.water_saved,
        waste_diverted=impact.waste_diverted,
        points_earned=impact.points_earned,
        verified=False,
        created_at=now or datetime.utcnow(),
    )
    created = storage.create_action(action)
    logger.info(f"User {user_id} logged {category_value} action {created.id} (+{created.points_earned} points)")
    return created


def get_metrics(storage: Storage, user_id: str, window_start: Optional[datetime] = None) -> UserMetrics:
    """Personal metrics.

    Sums and count honor `window_start`; eco_points is the all-time total.
    An unknown user gets zero metrics.
    """
    user = storage.get_user(user_id)
    if user is None:
        logger.debug(f"Metrics requested for unknown user {user_id}; returning zeros")
        return UserMetrics()
    totals = storage.get_impact_totals(user_id, window_start)
    return build_user_metrics(totals, user.eco_points)


def get_corporate_metrics(storage: Storage, user_id: str, window_start: Optional[datetime] = None) -> CorporateMetrics:
    """Corporate metrics: the corporate account's own actions only."""
    user = storage.get_user(user_id)
    if user is None:
        logger.debug(f"Corporate metrics requested for unknown user {user_id}; returning zeros")
        return CorporateMetrics()
    totals = storage.get_impact_totals(user_id, window_start)
    return build_corporate_metrics(totals, user.eco_points)


def get_leaderboard(
    storage: Storage,
    account_type: Any = AccountType.INDIVIDUAL,
    limit: int = DEFAULT_LEADERBOARD_LIMIT,
) -> List[LeaderboardEntry]:
    """Rank users of one account type by lifetime CO2 reduced."""
    account_type_value = _validate_account_type(account_type)
    if limit is None or int(limit) < 1:
        raise ValidationError("limit must be at least 1", field="limit")
    return rank_leaderboard(storage.get_co2_totals(account_type_value), int(limit))


def get_user_actions(storage: Storage, user_id: str, limit: Optional[int] = None) -> List[Action]:
    """A user's actions, newest first."""
    if limit is not None and limit < 1:
        raise ValidationError("limit must be at least 1", field="limit")
    return storage.get_user_actions(user_id, limit)


def ensure_user(
    storage: Storage,
    user_id: str,
    email: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    profile_image_url: Optional[str] = None,
) -> User:
    """Upsert a user on authentication, keeping account type and points of an existing one."""
    now = datetime.utcnow()
    existing = storage.get_user(user_id)
    if existing:
        user = existing.model_copy(update={
            "email": email if email is not None else existing.email,
            "first_name": first_name if first_name is not None else existing.first_name,
            "last_name": last_name if last_name is not None else existing.last_name,
            "profile_image_url": profile_image_url if profile_image_url is not None else existing.profile_image_url,
            "updated_at": now,
        })
    else:
        user = User(
            id=user_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            profile_image_url=profile_image_url,
            created_at=now,
            updated_at=now,
        )
    return storage.upsert_user(user)


def create_guest_user(storage: Storage) -> User:
    """Issue a fresh guest identity."""
    guest_id = f"{GUEST_ID_PREFIX}{uuid.uuid4()}"
    user = ensure_user(storage, guest_id, first_name=GUEST_FIRST_NAME, last_name=GUEST_LAST_NAME)
    logger.info(f"Created guest user {guest_id}")
    return user


def set_account_type(
    storage: Storage,
    user_id: str,
    account_type: Any,
    company_name: Optional[str] = None,
) -> User:
    """Switch a user between individual and corporate.

    company_name is kept only for corporate accounts.
    """
    account_type_value = _validate_account_type(account_type)
    user = storage.get_user(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    is_corporate = account_type_value == AccountType.CORPORATE.value
    updated = user.model_copy(update={
        "account_type": account_type_value,
        "company_name": company_name if is_corporate else None,
        "updated_at": datetime.utcnow(),
    })
    return storage.upsert_user(updated)
