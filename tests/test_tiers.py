"""Tests de los clasificadores de tiers."""

import pytest

from househunter.classification import (
    classify_contour,
    classify_price,
    classify_zone_position,
    classify_zone_tag,
    distance_meters,
    map_status,
)
from househunter.config import METERS_PER_DEGREE
from househunter.models import GeoPoint, ListingStatus, Tier

REFERENCE = GeoPoint(lat=38.0293, lon=-78.4767)


def _north_of_reference(meters: float) -> GeoPoint:
    return GeoPoint(lat=REFERENCE.lat + meters / METERS_PER_DEGREE, lon=REFERENCE.lon)


class TestClassifyPrice:
    """Bandas de precio."""

    @pytest.mark.parametrize(
        "price,expected",
        [
            (0, Tier.GOLD),
            (224_999, Tier.GOLD),
            (225_000, Tier.SILVER),
            (240_000, Tier.SILVER),
            (250_000, Tier.SILVER),
            (250_001, Tier.BRONZE),
            (5_000_000, Tier.BRONZE),
        ],
    )
    def test_boundaries(self, price, expected):
        assert classify_price(price) is expected

    def test_never_zinc(self):
        prices = range(0, 400_000, 12_345)
        assert Tier.ZINC not in {classify_price(p) for p in prices}


class TestClassifyZoneTag:
    """Tags GIS del backend."""

    @pytest.mark.parametrize(
        "tag,expected",
        [
            ("gold", Tier.GOLD),
            ("GOLD", Tier.GOLD),
            (" Silver ", Tier.SILVER),
            ("bronze", Tier.BRONZE),
            ("zinc", Tier.ZINC),
            ("platinum", Tier.ZINC),
            ("", Tier.ZINC),
            (None, Tier.ZINC),
            (3, Tier.ZINC),
        ],
    )
    def test_mapping(self, tag, expected):
        assert classify_zone_tag(tag) is expected


class TestClassifyZonePosition:
    """Zona por distancia en modo offline."""

    def test_distance_is_symmetric(self):
        other = GeoPoint(lat=38.1, lon=-78.4)
        assert distance_meters(REFERENCE, other) == pytest.approx(distance_meters(other, REFERENCE))

    @pytest.mark.parametrize(
        "meters,expected",
        [
            (0, Tier.GOLD),
            (6_900, Tier.GOLD),
            (7_100, Tier.SILVER),
            (13_900, Tier.SILVER),
            (14_100, Tier.BRONZE),
            (19_900, Tier.BRONZE),
            (20_100, Tier.ZINC),
            (80_000, Tier.ZINC),
        ],
    )
    def test_bands(self, meters, expected):
        assert classify_zone_position(_north_of_reference(meters), REFERENCE) is expected


class TestClassifyContour:
    """Isocronas por minutos de manejo."""

    @pytest.mark.parametrize(
        "minutes,expected",
        [
            (10, Tier.GOLD),
            (40, Tier.GOLD),
            (41, Tier.SILVER),
            (60, Tier.SILVER),
            (75, Tier.BRONZE),
            (None, Tier.BRONZE),
        ],
    )
    def test_tiers(self, minutes, expected):
        tier, label = classify_contour(minutes)
        assert tier is expected
        assert label.endswith("min drive")


class TestMapStatus:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Pending", ListingStatus.PENDING),
            ("Contingent - showing", ListingStatus.PENDING),
            ("SOLD", ListingStatus.SOLD),
            ("for_sale", ListingStatus.FOR_SALE),
            ("", ListingStatus.FOR_SALE),
            (5, ListingStatus.FOR_SALE),
            (None, ListingStatus.FOR_SALE),
        ],
    )
    def test_mapping(self, text, expected):
        assert map_status(text) is expected
