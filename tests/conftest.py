"""Fixtures compartidas."""

import pytest

from househunter.classification import classify_price
from househunter.config import Settings
from househunter.database import MemoryStateStore, PersistenceAdapter
from househunter.models import Listing, ListingStatus, Tier, Zone


@pytest.fixture
def make_listing():
    """Factory de Listing con valores que pasan los criterios por defecto."""

    def _make(listing_id: str = "p-1", price: float = 200_000, **overrides) -> Listing:
        data = {
            "id": listing_id,
            "price": price,
            "address": f"{listing_id} Oak St",
            "beds": 3,
            "baths": 2,
            "status": ListingStatus.FOR_SALE,
            "price_tier": classify_price(price),
            "zone_tier": Tier.GOLD,
            "days_on_market": 10,
        }
        data.update(overrides)
        return Listing(**data)

    return _make


@pytest.fixture
def make_zone():
    def _make(tier: Tier, zone_id: str = None) -> Zone:
        return Zone(
            id=zone_id or f"z-{tier.value.lower()}",
            tier=tier,
            coordinates=((0.0, 0.0), (0.0, 1.0), (1.0, 1.0)),
            label=f"{tier.value} zone",
        )

    return _make


@pytest.fixture
def state_store():
    return MemoryStateStore()


@pytest.fixture
def persistence(state_store):
    return PersistenceAdapter(state_store)


@pytest.fixture
def settings(tmp_path):
    """Settings aislados del entorno (sin .env ni red)."""
    return Settings(
        _env_file=None,
        api_base_url="http://127.0.0.1:9",
        state_backend="memory",
        state_file_path=tmp_path / "state.json",
        fallback_listing_count=20,
        fallback_seed=42,
    )
