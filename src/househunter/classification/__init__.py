"""
Clasificación de propiedades.

Asigna tiers de precio y de zona en la ingesta.
"""

from househunter.classification.tiers import (
    classify_contour,
    classify_price,
    classify_zone_position,
    classify_zone_tag,
    distance_meters,
    map_status,
)

__all__ = [
    "classify_contour",
    "classify_price",
    "classify_zone_position",
    "classify_zone_tag",
    "distance_meters",
    "map_status",
]
