"""
Pipeline de derivación.

Función pura que combina propiedades, zonas, criterios y decisiones del
usuario en la lista ordenada que se muestra y las capas visibles del mapa:

- Filtro: todos los predicados deben cumplirse (corta en el primero que falla)
- Orden: favoritos primero en la vista "all", luego el orden elegido
- Zonas: solo los tiers marcados como visibles en el mapa
"""

from dataclasses import dataclass
from typing import AbstractSet, Iterable, Mapping, Optional

from househunter.models import (
    Disposition,
    FilterCriteria,
    Listing,
    SortOption,
    ViewMode,
    Zone,
)


@dataclass(frozen=True)
class DerivationResult:
    """Resultado de una derivación."""

    listings: tuple[Listing, ...]
    zones: tuple[Zone, ...]
    total: int  # Propiedades antes de filtrar

    @property
    def count(self) -> int:
        return len(self.listings)

    @property
    def ids(self) -> list[str]:
        return [listing.id for listing in self.listings]


def _passes_view_mode(
    listing_id: str,
    view_mode: ViewMode,
    dispositions: Mapping[str, Disposition],
    viewed: AbstractSet[str],
) -> bool:
    disposition = dispositions.get(listing_id, Disposition.NONE)

    if view_mode is ViewMode.FAVORITES:
        return disposition is Disposition.FAVORITE
    if view_mode is ViewMode.REJECTED:
        return disposition is Disposition.REJECTED
    if view_mode is ViewMode.UNDECIDED:
        return disposition is Disposition.UNDECIDED
    if view_mode is ViewMode.HISTORY:
        return listing_id in viewed
    # ViewMode.ALL oculta los rechazados
    return disposition is not Disposition.REJECTED


def matches_criteria(
    listing: Listing,
    criteria: FilterCriteria,
    dispositions: Mapping[str, Disposition],
    viewed: AbstractSet[str],
    view_mode: Optional[ViewMode] = None,
) -> bool:
    """Predicado de filtro para una propiedad."""
    view_mode = view_mode or criteria.view_mode

    # 1. Precio y características
    if listing.price < criteria.min_price:
        return False
    if criteria.max_price > 0 and listing.price > criteria.max_price:
        return False
    if listing.beds < criteria.min_beds:
        return False
    if listing.baths < criteria.min_baths:
        return False

    # 2. Dirección
    query = criteria.address_query.strip().lower()
    if query and query not in listing.address.lower():
        return False

    # 3. Tiers y estado
    if listing.price_tier not in criteria.price_tiers:
        return False
    if listing.zone_tier not in criteria.zone_tiers:
        return False
    if listing.status not in criteria.status:
        return False

    # 4. Tracking
    if criteria.hide_seen and listing.id in viewed:
        return False

    return _passes_view_mode(listing.id, view_mode, dispositions, viewed)


def _sort_key(sort_option: SortOption):
    if sort_option is SortOption.PRICE_DESC:
        return lambda listing: -listing.price
    if sort_option is SortOption.NEWEST:
        # days_on_market es un proxy de antigüedad, no una fecha real
        return lambda listing: listing.days_on_market
    return lambda listing: listing.price


def derive(
    listings: Iterable[Listing],
    zones: Iterable[Zone],
    criteria: FilterCriteria,
    dispositions: Mapping[str, Disposition],
    viewed: AbstractSet[str],
    view_mode: Optional[ViewMode] = None,
    sort_option: Optional[SortOption] = None,
) -> DerivationResult:
    """
    Deriva la vista filtrada y ordenada.

    Args:
        listings: Propiedades ingeridas (orden original = desempate)
        zones: Zonas ingeridas
        criteria: Criterios del usuario
        dispositions: Mapping id -> Disposition (ausencia = NONE)
        viewed: IDs ya abiertos
        view_mode: Override del modo de vista de `criteria`
        sort_option: Override del orden de `criteria`

    Returns:
        DerivationResult con propiedades y zonas visibles
    """
    listings = list(listings)
    view_mode = view_mode or criteria.view_mode
    sort_option = sort_option or criteria.sort_option

    filtered = [
        listing
        for listing in listings
        if matches_criteria(listing, criteria, dispositions, viewed, view_mode)
    ]

    # sorted() es estable: a igual clave se conserva el orden de entrada
    ordered = sorted(filtered, key=_sort_key(sort_option))
    if view_mode is ViewMode.ALL:
        ordered = sorted(
            ordered,
            key=lambda listing: dispositions.get(listing.id) is not Disposition.FAVORITE,
        )

    visible_zones = tuple(zone for zone in zones if zone.tier in criteria.visible_zones)

    return DerivationResult(
        listings=tuple(ordered),
        zones=visible_zones,
        total=len(listings),
    )
