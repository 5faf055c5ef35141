"""
Clasificadores de tiers.

Funciones puras y totales: nunca fallan y se invocan una sola vez por
propiedad durante la ingesta.
"""

import math
from typing import Optional

from househunter.config import (
    CONTOUR_GOLD_MAX,
    CONTOUR_SILVER_MAX,
    METERS_PER_DEGREE,
    PRICE_GOLD_BELOW,
    PRICE_SILVER_MAX,
    ZONE_BRONZE_BELOW_M,
    ZONE_GOLD_BELOW_M,
    ZONE_SILVER_BELOW_M,
)
from househunter.models import GeoPoint, ListingStatus, Tier

_TAGS = {
    "gold": Tier.GOLD,
    "silver": Tier.SILVER,
    "bronze": Tier.BRONZE,
}


def classify_price(price: float) -> Tier:
    """
    Tier por precio.

    < 225k Gold, 225k-250k (inclusive) Silver, > 250k Bronze.
    """
    if price < PRICE_GOLD_BELOW:
        return Tier.GOLD
    if price <= PRICE_SILVER_MAX:
        return Tier.SILVER
    return Tier.BRONZE


def classify_zone_tag(tag: Optional[str]) -> Tier:
    """Mapea el tag GIS del backend; cualquier valor desconocido es Zinc."""
    if not isinstance(tag, str):
        return Tier.ZINC
    return _TAGS.get(tag.strip().lower(), Tier.ZINC)


def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Distancia en línea recta con la aproximación plana de 111.3 km/grado."""
    return math.hypot(a.lat - b.lat, a.lon - b.lon) * METERS_PER_DEGREE


def classify_zone_position(position: GeoPoint, reference: GeoPoint) -> Tier:
    """Tier por distancia al punto de referencia (modo sin backend)."""
    dist = distance_meters(position, reference)
    if dist < ZONE_GOLD_BELOW_M:
        return Tier.GOLD
    if dist < ZONE_SILVER_BELOW_M:
        return Tier.SILVER
    if dist < ZONE_BRONZE_BELOW_M:
        return Tier.BRONZE
    return Tier.ZINC


def classify_contour(minutes: Optional[float]) -> tuple[Tier, str]:
    """Tier y etiqueta de una isocrona según sus minutos de manejo."""
    if minutes is not None and minutes <= CONTOUR_GOLD_MAX:
        return Tier.GOLD, "0-40 min drive"
    if minutes is not None and minutes <= CONTOUR_SILVER_MAX:
        return Tier.SILVER, "40-60 min drive"
    return Tier.BRONZE, "60-75 min drive"


def map_status(text: Optional[str]) -> ListingStatus:
    """Normaliza el estado textual del portal."""
    s = text.lower() if isinstance(text, str) else ""
    if "pending" in s or "contingent" in s:
        return ListingStatus.PENDING
    if "sold" in s:
        return ListingStatus.SOLD
    return ListingStatus.FOR_SALE
