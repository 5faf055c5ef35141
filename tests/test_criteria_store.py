"""Tests del store de criterios."""

import json

import pytest

from househunter.database import MemoryStateStore, PersistenceAdapter
from househunter.models import FilterCriteria, ListingStatus, SortOption, Tier, ViewMode
from househunter.state import CriteriaStore


@pytest.fixture
def criteria_store(persistence):
    return CriteriaStore(persistence)


class TestDefaults:
    def test_defaults(self, criteria_store):
        criteria = criteria_store.criteria
        assert criteria.min_price == 0
        assert criteria.max_price == 275_000
        assert criteria.price_tiers == {Tier.GOLD, Tier.SILVER, Tier.BRONZE}
        assert criteria.zone_tiers == set(Tier)
        assert criteria.visible_zones == {Tier.GOLD, Tier.SILVER, Tier.BRONZE}
        assert criteria.status == {ListingStatus.FOR_SALE}
        assert criteria.address_query == ""
        assert criteria.hide_seen is False
        assert criteria.view_mode is ViewMode.ALL
        assert criteria.sort_option is SortOption.PRICE_ASC


class TestNumericSetters:
    """Clamp a valores no negativos."""

    @pytest.mark.parametrize("value", [-1, -250_000, float("nan"), float("-inf"), "abc", None, 10**400])
    def test_min_price_clamped_to_zero(self, criteria_store, value):
        assert criteria_store.set_min_price(value).min_price == 0

    def test_max_price_zero_means_unbounded(self, criteria_store):
        criteria = criteria_store.set_max_price(-10)
        assert criteria.max_price == 0
        assert not criteria.has_max_price

    def test_beds_and_baths_are_integers(self, criteria_store):
        assert criteria_store.set_min_beds(2.7).min_beds == 2
        assert criteria_store.set_min_baths(-3).min_baths == 0

    def test_model_validation_clamps_too(self):
        criteria = FilterCriteria(min_price=-5, max_price=-1, min_beds=-2)
        assert (criteria.min_price, criteria.max_price, criteria.min_beds) == (0, 0, 0)


class TestToggles:
    def test_toggle_removes_and_adds(self, criteria_store):
        criteria = criteria_store.toggle_price_tier(Tier.GOLD)
        assert Tier.GOLD not in criteria.price_tiers
        criteria = criteria_store.toggle_price_tier("Gold")
        assert Tier.GOLD in criteria.price_tiers

    def test_replaces_record_immutably(self, criteria_store):
        before = criteria_store.criteria
        after = criteria_store.toggle_status(ListingStatus.PENDING)
        assert after is not before
        assert before.status == {ListingStatus.FOR_SALE}
        assert after.status == {ListingStatus.FOR_SALE, ListingStatus.PENDING}

    def test_visible_zones_independent_of_zone_filter(self, criteria_store):
        criteria = criteria_store.toggle_visible_zone(Tier.SILVER)
        assert Tier.SILVER not in criteria.visible_zones
        assert Tier.SILVER in criteria.zone_tiers

    def test_unknown_value_is_ignored(self, criteria_store):
        before = criteria_store.criteria
        assert criteria_store.toggle_zone_tier("Platinum") is before


class TestViewAndSort:
    def test_view_mode(self, criteria_store):
        assert criteria_store.set_view_mode("history").view_mode is ViewMode.HISTORY
        assert criteria_store.set_view_mode("bogus").view_mode is ViewMode.ALL

    def test_sort_option(self, criteria_store):
        assert criteria_store.set_sort_option(SortOption.NEWEST).sort_option is SortOption.NEWEST
        assert criteria_store.set_sort_option("cheapest").sort_option is SortOption.PRICE_ASC

    def test_address_query(self, criteria_store):
        assert criteria_store.set_address_query("Oak").address_query == "Oak"
        assert criteria_store.set_address_query(None).address_query == ""


class TestBulkUpdate:
    def test_update_validates_and_clamps(self, criteria_store):
        criteria = criteria_store.update(
            min_price=-100,
            price_tiers=["Gold", "Silver"],
            status=["FOR_SALE", "PENDING"],
            hide_seen=True,
        )
        assert criteria.min_price == 0
        assert criteria.price_tiers == {Tier.GOLD, Tier.SILVER}
        assert criteria.status == {ListingStatus.FOR_SALE, ListingStatus.PENDING}
        assert criteria.hide_seen is True

    def test_invalid_update_keeps_current(self, criteria_store):
        before = criteria_store.criteria
        assert criteria_store.update(price_tiers=["Platinum"]) is before

    def test_unknown_fields_ignored(self, criteria_store):
        before = criteria_store.criteria
        assert criteria_store.update(favorites_only=True) is before

    def test_reset(self, criteria_store):
        criteria_store.set_min_beds(4)
        assert criteria_store.reset() == FilterCriteria()


class TestPersistence:
    def test_every_setter_writes_through(self, state_store, criteria_store):
        criteria_store.set_min_beds(3)
        saved = json.loads(state_store.get("househunter_criteria"))
        assert saved["min_beds"] == 3

        criteria_store.toggle_price_tier(Tier.BRONZE)
        saved = json.loads(state_store.get("househunter_criteria"))
        assert sorted(saved["price_tiers"]) == ["Gold", "Silver"]

    def test_restored_in_next_session(self, persistence):
        CriteriaStore(persistence).update(address_query="maple", sort_option="newest")
        restored = CriteriaStore(persistence).criteria
        assert restored.address_query == "maple"
        assert restored.sort_option is SortOption.NEWEST

    def test_corrupt_snapshot_falls_back_to_default(self):
        store = MemoryStateStore({"househunter_criteria": '{"min_price": "lots"'})
        assert CriteriaStore(PersistenceAdapter(store)).criteria == FilterCriteria()

    def test_unknown_enum_in_snapshot_keeps_other_fields(self):
        store = MemoryStateStore(
            {"househunter_criteria": '{"min_beds": 2, "sort_option": "oldest", "view_mode": "map"}'}
        )
        criteria = CriteriaStore(PersistenceAdapter(store)).criteria
        assert criteria.min_beds == 2
        assert criteria.sort_option is SortOption.PRICE_ASC
        assert criteria.view_mode is ViewMode.ALL

    def test_out_of_range_integer_in_snapshot(self):
        huge = "1" + "0" * 400
        store = MemoryStateStore({"househunter_criteria": f'{{"min_price": {huge}, "min_beds": 2}}'})
        criteria = CriteriaStore(PersistenceAdapter(store)).criteria
        assert criteria.min_price == 0
        assert criteria.min_beds == 2
