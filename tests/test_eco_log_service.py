"""Tests for the core EcoLog operations."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from ecolog.errors import ValidationError, NotFoundError
from ecolog.services import eco_log


class TestLogAction:
    """Logging actions."""

    def test_recycling_five_kg(self, storage, test_user_id):
        before = storage.get_user(test_user_id).eco_points
        action = eco_log.log_action(storage, test_user_id, "recycling", "Recycled glass", quantity=5, unit="kg")

        assert action.co2_reduced == Decimal("10.00")
        assert action.water_saved == Decimal("250.00")
        assert action.waste_diverted == Decimal("5.00")
        assert action.points_earned == 50
        assert action.verified is False
        assert action.quantity == Decimal("5.00")
        assert storage.get_user(test_user_id).eco_points == before + 50

    def test_missing_quantity_counts_as_one(self, storage, test_user_id):
        action = eco_log.log_action(storage, test_user_id, "upcycling", "Turned jars into lamps")
        assert action.points_earned == 15
        assert action.quantity is None

    def test_invalid_category_rejected(self, storage, test_user_id):
        with pytest.raises(ValidationError) as exc_info:
            eco_log.log_action(storage, test_user_id, "composting", "Compost")
        assert exc_info.value.field == "category"
        assert storage.get_user(test_user_id).eco_points == 0

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_blank_title_rejected(self, storage, test_user_id, title):
        with pytest.raises(ValidationError) as exc_info:
            eco_log.log_action(storage, test_user_id, "recycling", title)
        assert exc_info.value.field == "title"

    def test_negative_quantity_rejected(self, storage, test_user_id):
        with pytest.raises(ValidationError) as exc_info:
            eco_log.log_action(storage, test_user_id, "recycling", "Bad", quantity=-2)
        assert exc_info.value.field == "quantity"

    def test_negative_quantity_with_unit_rejected(self, storage, test_user_id):
        with pytest.raises(ValidationError) as exc_info:
            eco_log.log_action(storage, test_user_id, "recycling", "Bad", quantity="-5kg")
        assert exc_info.value.field == "quantity"

    def test_quantity_with_unit_suffix(self, storage, test_user_id):
        action = eco_log.log_action(storage, test_user_id, "recycling", "Bottles", quantity="5kg")
        assert action.quantity == Decimal("5.00")
        assert action.points_earned == 50

    @pytest.mark.parametrize("quantity", ["1e30", 1e40, "100000000"])
    def test_quantity_too_large_to_store_rejected(self, storage, test_user_id, quantity):
        with pytest.raises(ValidationError) as exc_info:
            eco_log.log_action(storage, test_user_id, "recycling", "Big", quantity=quantity)
        assert exc_info.value.field == "quantity"
        assert storage.get_user(test_user_id).eco_points == 0
        assert storage.get_user_actions(test_user_id) == []

    def test_derived_values_too_large_to_store_rejected(self, storage, test_user_id):
        # 10,000,000 kg fits the column but 50 L/kg of water does not
        with pytest.raises(ValidationError) as exc_info:
            eco_log.log_action(storage, test_user_id, "recycling", "Landfill", quantity="10000000")
        assert exc_info.value.field == "quantity"
        assert storage.get_user(test_user_id).eco_points == 0

    def test_largest_storable_quantity_accepted(self, storage, test_user_id):
        # 1,999,999.99 km * 2 L/km is just under the column limit
        action = eco_log.log_action(storage, test_user_id, "sustainable_commute", "Long haul", quantity="1999999.99")
        assert action.water_saved == Decimal("3999999.98")
        assert storage.get_user(test_user_id).eco_points == action.points_earned

    def test_unknown_user_rejected(self, storage):
        with pytest.raises(ValidationError) as exc_info:
            eco_log.log_action(storage, "no-such-user", "recycling", "Orphan")
        assert exc_info.value.field == "user_id"

    def test_stored_impact_matches_preview(self, storage, test_user_id):
        preview = eco_log.compute_impact("sustainable_commute", "12.4")
        action = eco_log.log_action(storage, test_user_id, "sustainable_commute", "Cycled", quantity="12.4")
        assert action.co2_reduced == preview.co2_reduced
        assert action.water_saved == preview.water_saved
        assert action.points_earned == preview.points_earned


class TestGetMetrics:
    """Personal and corporate metrics."""

    def test_commute_then_energy_scenario(self, storage, test_user_id):
        commute = eco_log.log_action(storage, test_user_id, "sustainable_commute", "Bike to work", quantity=15)
        assert commute.co2_reduced == Decimal("2.25")
        assert commute.water_saved == Decimal("30.00")
        assert commute.points_earned == 45

        energy = eco_log.log_action(storage, test_user_id, "energy_saving", "Lights off", quantity=10)
        assert energy.co2_reduced == Decimal("5.00")
        assert energy.water_saved == Decimal("100.00")
        assert energy.points_earned == 50

        metrics = eco_log.get_metrics(storage, test_user_id)
        assert metrics.co2_reduced == Decimal("7.25")
        assert metrics.water_saved == Decimal("130.00")
        assert metrics.waste_diverted == Decimal("0")
        assert metrics.eco_points == 95
        assert metrics.action_count == 2

    def test_window_does_not_apply_to_points(self, storage, test_user_id):
        window_start = datetime(2026, 10, 1)
        eco_log.log_action(storage, test_user_id, "recycling", "Old", quantity=5, now=window_start - timedelta(days=10))
        eco_log.log_action(storage, test_user_id, "energy_saving", "New", quantity=2, now=window_start + timedelta(days=1))

        metrics = eco_log.get_metrics(storage, test_user_id, window_start)
        assert metrics.co2_reduced == Decimal("1.00")
        assert metrics.water_saved == Decimal("20.00")
        assert metrics.waste_diverted == Decimal("0")
        assert metrics.action_count == 1
        assert metrics.eco_points == 60

    def test_unknown_user_gets_zero_metrics(self, storage):
        metrics = eco_log.get_metrics(storage, "no-such-user")
        assert metrics.co2_reduced == Decimal("0")
        assert metrics.eco_points == 0
        assert metrics.action_count == 0

    def test_corporate_metrics(self, storage, test_user_id):
        eco_log.set_account_type(storage, test_user_id, "corporate", "Acme")
        eco_log.log_action(storage, test_user_id, "upcycling", "Pallet furniture", quantity=4)

        metrics = eco_log.get_corporate_metrics(storage, test_user_id)
        assert metrics.co2_reduced == Decimal("12.00")
        assert metrics.eco_points == 60
        assert metrics.active_employees == 1


class TestGetLeaderboard:
    """Leaderboard over stored users."""

    def test_ranks_individuals_including_idle_users(self, storage, user_factory, test_user_id):
        storage.upsert_user(user_factory("idle-user"))
        storage.upsert_user(user_factory("top-user", first_name="Top", last_name="Saver"))
        storage.upsert_user(user_factory("corp-user", account_type="corporate"))
        eco_log.log_action(storage, test_user_id, "recycling", "Cans", quantity=1)
        eco_log.log_action(storage, "top-user", "upcycling", "Chairs", quantity=10)
        eco_log.log_action(storage, "corp-user", "upcycling", "Desks", quantity=500)

        board = eco_log.get_leaderboard(storage, "individual", 10)

        assert [e.user_id for e in board] == ["top-user", test_user_id, "idle-user"]
        assert [e.rank for e in board] == [1, 2, 3]
        assert board[0].name == "Top Saver"
        assert board[0].co2_reduced == Decimal("30.00")
        assert board[0].eco_points == 150
        assert board[-1].co2_reduced == Decimal("0")
        for higher, lower in zip(board, board[1:]):
            assert higher.co2_reduced >= lower.co2_reduced

    def test_limit(self, storage, user_factory):
        for i in range(12):
            storage.upsert_user(user_factory(f"user-{i:02d}"))
        assert len(eco_log.get_leaderboard(storage, "individual", 10)) == 10

    def test_corporate_board(self, storage, user_factory):
        storage.upsert_user(user_factory("corp", account_type="corporate", company_name="Acme"))
        board = eco_log.get_leaderboard(storage, "corporate", 10)
        assert [e.user_id for e in board] == ["corp"]

    def test_invalid_account_type(self, storage):
        with pytest.raises(ValidationError):
            eco_log.get_leaderboard(storage, "government", 10)

    def test_invalid_limit(self, storage):
        with pytest.raises(ValidationError):
            eco_log.get_leaderboard(storage, "individual", 0)


class TestUsers:
    """Identity helpers."""

    def test_guest_user(self, storage):
        guest = eco_log.create_guest_user(storage)
        assert guest.id.startswith("guest:")
        assert guest.first_name == "Guest"
        assert guest.last_name == "User"
        assert guest.account_type == "individual"
        assert guest.eco_points == 0
        assert storage.get_user(guest.id) is not None

    def test_ensure_user_keeps_points_and_account_type(self, storage, test_user_id):
        eco_log.set_account_type(storage, test_user_id, "corporate", "Acme")
        eco_log.log_action(storage, test_user_id, "recycling", "Paper", quantity=1)
        user = eco_log.ensure_user(storage, test_user_id, first_name="Again")
        assert user.first_name == "Again"
        assert user.account_type == "corporate"
        assert user.eco_points == 10

    def test_company_name_cleared_for_individual(self, storage, test_user_id):
        corporate = eco_log.set_account_type(storage, test_user_id, "corporate", "Acme")
        assert corporate.company_name == "Acme"
        individual = eco_log.set_account_type(storage, test_user_id, "individual", "Acme")
        assert individual.account_type == "individual"
        assert individual.company_name is None

    def test_set_account_type_unknown_user(self, storage):
        with pytest.raises(NotFoundError):
            eco_log.set_account_type(storage, "missing", "corporate", "Acme")

    def test_set_account_type_invalid(self, storage, test_user_id):
        with pytest.raises(ValidationError) as exc_info:
            eco_log.set_account_type(storage, test_user_id, "nonprofit")
        assert exc_info.value.field == "account_type"
