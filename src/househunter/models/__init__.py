"""
Modelos de datos del sistema.

- Listing / Zone: datos ingeridos (inmutables)
- FilterCriteria: configuración de filtros del usuario
- Disposition: decisión de triage por propiedad
"""

from househunter.models.listing import GeoPoint, Listing, ListingStatus, Tier, Zone
from househunter.models.criteria import FilterCriteria, SortOption, ViewMode
from househunter.models.disposition import Disposition

__all__ = [
    # Ingesta
    "GeoPoint",
    "Listing",
    "ListingStatus",
    "Tier",
    "Zone",
    # Usuario
    "FilterCriteria",
    "SortOption",
    "ViewMode",
    "Disposition",
]
