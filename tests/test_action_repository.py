"""Tests for ActionRepository and UserRepository against SQLite."""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from ecolog.database.models import UserDB
from ecolog.engine.impact import calculate_impact
from ecolog.errors import ValidationError
from ecolog.models.action import Action


def _action(user_id, category="recycling", quantity=5, created_at=None, title="Recycled bottles"):
    impact = calculate_impact(category, quantity)
    return Action(
        id=str(uuid.uuid4()),
        user_id=user_id,
        category=category,
        title=title,
        quantity=Decimal(str(quantity)),
        unit="kg",
        co2_reduced=impact.co2_reduced,
        water_saved=impact.water_saved,
        waste_diverted=impact.waste_diverted,
        points_earned=impact.points_earned,
        created_at=created_at or datetime.utcnow(),
    )


class TestActionRepository:
    """Action persistence and aggregation queries."""

    def test_create_credits_points(self, action_repository, db_session, test_user_id):
        created = action_repository.create(_action(test_user_id))

        assert created.co2_reduced == Decimal("10.00")
        assert created.water_saved == Decimal("250.00")
        assert created.waste_diverted == Decimal("5.00")
        assert created.points_earned == 50
        assert created.verified is False

        user_db = db_session.query(UserDB).filter(UserDB.id == test_user_id).one()
        db_session.refresh(user_db)
        assert user_db.eco_points == 50

    def test_create_for_unknown_user_fails_without_side_effects(self, action_repository):
        with pytest.raises(ValidationError) as exc_info:
            action_repository.create(_action("ghost"))
        assert exc_info.value.field == "user_id"
        assert action_repository.get_all() == []

    def test_get_for_user_newest_first_with_limit(self, action_repository, test_user_id):
        now = datetime.utcnow()
        action_repository.create(_action(test_user_id, created_at=now - timedelta(minutes=2), title="Oldest"))
        action_repository.create(_action(test_user_id, created_at=now, title="Newest"))
        action_repository.create(_action(test_user_id, created_at=now - timedelta(minutes=1), title="Middle"))

        titles = [a.title for a in action_repository.get_for_user(test_user_id)]
        assert titles == ["Newest", "Middle", "Oldest"]
        assert len(action_repository.get_for_user(test_user_id, limit=2)) == 2

    def test_impact_totals_with_window(self, action_repository, test_user_id):
        start = datetime(2026, 10, 1)
        action_repository.create(_action(test_user_id, "recycling", 5, created_at=start - timedelta(days=1)))
        action_repository.create(_action(test_user_id, "energy_saving", 10, created_at=start + timedelta(days=1)))

        all_time = action_repository.impact_totals(test_user_id)
        assert all_time.co2_reduced == Decimal("15.00")
        assert all_time.action_count == 2

        windowed = action_repository.impact_totals(test_user_id, since=start)
        assert windowed.co2_reduced == Decimal("5.00")
        assert windowed.water_saved == Decimal("100.00")
        assert windowed.waste_diverted == Decimal("0")
        assert windowed.action_count == 1

    def test_impact_totals_without_actions(self, action_repository, test_user_id):
        totals = action_repository.impact_totals(test_user_id)
        assert totals.co2_reduced == Decimal("0")
        assert totals.action_count == 0

    def test_co2_totals_include_users_without_actions(self, action_repository, user_repository, user_factory, test_user_id):
        user_repository.create_or_update(user_factory("idle-user"))
        user_repository.create_or_update(user_factory("corp-user", account_type="corporate"))
        action_repository.create(_action(test_user_id, "upcycling", 2))
        action_repository.create(_action(test_user_id, "upcycling", 1))
        action_repository.create(_action("corp-user", "upcycling", 100))

        totals = {user.id: co2 for user, co2 in action_repository.co2_totals_by_user("individual")}
        assert totals == {test_user_id: Decimal("9.00"), "idle-user": Decimal("0")}


class TestUserRepository:
    """User upsert semantics."""

    def test_update_keeps_eco_points(self, user_repository, action_repository, test_user, test_user_id):
        action_repository.create(_action(test_user_id))
        updated = user_repository.create_or_update(
            test_user.model_copy(update={"first_name": "Renamed", "eco_points": 0})
        )
        assert updated.first_name == "Renamed"
        assert updated.eco_points == 50

