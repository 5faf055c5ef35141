"""
Datos de ejemplo para modo offline.

Genera un dataset determinístico (misma semilla -> mismos datos) alrededor
del punto de referencia: tres isocronas simuladas y N propiedades cuya
zona se asigna por distancia en línea recta.
"""

import math
import random
from typing import Optional

import structlog

from househunter.classification import classify_price, classify_zone_position
from househunter.config import (
    FALLBACK_CITY,
    FALLBACK_STREETS,
    METERS_PER_DEGREE,
    Settings,
    get_settings,
)
from househunter.models import GeoPoint, Listing, ListingStatus, Tier, Zone
from househunter.sources.backend import DataBundle

logger = structlog.get_logger()

# (tier, etiqueta, radio en metros, vértices, ruido); Bronze -> Gold para
# que las capas se apilen bien en el mapa
_ZONE_SPECS = [
    (Tier.BRONZE, "60-75 min drive", 18_000, 40, 0.4),
    (Tier.SILVER, "40-60 min drive", 12_000, 35, 0.35),
    (Tier.GOLD, "0-40 min drive", 6_000, 30, 0.3),
]


class FallbackDataSource:
    """Generador de propiedades y zonas de ejemplo."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.reference = GeoPoint(
            lat=self.settings.reference_lat, lon=self.settings.reference_lon
        )

    def _jagged_ring(
        self, rng: random.Random, radius_m: float, points: int, noise: float
    ) -> tuple[tuple[float, float], ...]:
        """Polígono irregular que simula una isocrona."""
        r_deg = radius_m / METERS_PER_DEGREE
        coords = []
        for i in range(points):
            angle = (i / points) * 2 * math.pi
            r = r_deg * (1 + (rng.random() - 0.5) * noise)
            coords.append(
                (
                    self.reference.lat + r * math.sin(angle),
                    self.reference.lon + r * math.cos(angle),
                )
            )
        return tuple(coords)

    def generate_zones(self, rng: random.Random) -> list[Zone]:
        return [
            Zone(
                id=f"z-{tier.value.lower()}",
                tier=tier,
                label=label,
                coordinates=self._jagged_ring(rng, radius, points, noise),
            )
            for tier, label, radius, points, noise in _ZONE_SPECS
        ]

    def generate_listings(self, rng: random.Random, count: int) -> list[Listing]:
        listings = []
        for i in range(count):
            # Entre 2 y 18 km del centro para cubrir todas las zonas
            radius = 2_000 + rng.random() * 16_000
            angle = rng.random() * 2 * math.pi
            r_deg = radius / METERS_PER_DEGREE
            location = GeoPoint(
                lat=self.reference.lat + r_deg * math.sin(angle),
                lon=self.reference.lon + r_deg * math.cos(angle),
            )

            price = rng.randrange(150_000, 275_000)
            street = rng.choice(FALLBACK_STREETS)

            listings.append(
                Listing(
                    id=f"prop-{i}",
                    price=price,
                    address=f"{rng.randrange(1, 1000)} {street} St, {FALLBACK_CITY}",
                    beds=rng.randint(2, 5),
                    baths=rng.randint(1, 3),
                    sqft=rng.randrange(900, 2900),
                    status=(
                        ListingStatus.FOR_SALE if rng.random() > 0.2 else ListingStatus.PENDING
                    ),
                    image_url=f"https://picsum.photos/seed/{i + 100}/400/300",
                    location=location,
                    price_tier=classify_price(price),
                    zone_tier=classify_zone_position(location, self.reference),
                    days_on_market=rng.randrange(0, 45),
                )
            )
        return listings

    def generate(self, seed: Optional[int] = None, count: Optional[int] = None) -> DataBundle:
        """
        Genera el dataset completo.

        Args:
            seed: Semilla (default: settings.fallback_seed)
            count: Cantidad de propiedades (default: settings.fallback_listing_count)
        """
        seed = self.settings.fallback_seed if seed is None else seed
        count = self.settings.fallback_listing_count if count is None else count

        rng = random.Random(seed)
        zones = self.generate_zones(rng)
        listings = self.generate_listings(rng, count)

        logger.info("Datos de ejemplo generados", listings=len(listings), seed=seed)
        return DataBundle(listings=listings, zones=zones)
