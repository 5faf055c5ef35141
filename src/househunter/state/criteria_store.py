"""
Store de criterios de filtrado.

Cada setter reemplaza el FilterCriteria completo (model_copy) y lo
persiste. Los numéricos se clampean a >= 0; ningún setter lanza.
"""

from enum import Enum
from typing import Optional, TypeVar, Union

import structlog
from pydantic import ValidationError

from househunter.database import CRITERIA, PersistenceAdapter, memory_persistence
from househunter.models import FilterCriteria, ListingStatus, SortOption, Tier, ViewMode
from househunter.models.criteria import (
    clamp_non_negative,
    parse_sort_option,
    parse_view_mode,
)

logger = structlog.get_logger()

E = TypeVar("E", bound=Enum)


class CriteriaStore:
    """Configuración de filtros vigente, persistida como un único slot."""

    def __init__(self, persistence: Optional[PersistenceAdapter] = None):
        self.persistence = persistence or memory_persistence()
        self._criteria = self.persistence.load(CRITERIA, FilterCriteria())

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    def _replace(self, **changes) -> FilterCriteria:
        # model_copy no valida: los valores llegan ya normalizados
        self._criteria = self._criteria.model_copy(update=changes)
        self.persistence.save(CRITERIA, self._criteria)
        logger.debug("Criterios actualizados", fields=sorted(changes))
        return self._criteria

    # ------------------------------------------------------------------
    # Numéricos
    # ------------------------------------------------------------------

    def set_min_price(self, value) -> FilterCriteria:
        return self._replace(min_price=clamp_non_negative(value))

    def set_max_price(self, value) -> FilterCriteria:
        """0 desactiva el tope de precio."""
        return self._replace(max_price=clamp_non_negative(value))

    def set_min_beds(self, value) -> FilterCriteria:
        return self._replace(min_beds=int(clamp_non_negative(value)))

    def set_min_baths(self, value) -> FilterCriteria:
        return self._replace(min_baths=int(clamp_non_negative(value)))

    # ------------------------------------------------------------------
    # Sets de tiers / estados
    # ------------------------------------------------------------------

    def _toggle_member(self, field: str, enum_cls: type[E], value: Union[E, str]) -> FilterCriteria:
        try:
            member = enum_cls(value)
        except ValueError:
            logger.warning("Valor desconocido ignorado", field=field, value=str(value))
            return self._criteria

        current: frozenset = getattr(self._criteria, field)
        updated = current - {member} if member in current else current | {member}
        return self._replace(**{field: updated})

    def toggle_price_tier(self, tier: Union[Tier, str]) -> FilterCriteria:
        return self._toggle_member("price_tiers", Tier, tier)

    def toggle_zone_tier(self, tier: Union[Tier, str]) -> FilterCriteria:
        return self._toggle_member("zone_tiers", Tier, tier)

    def toggle_visible_zone(self, tier: Union[Tier, str]) -> FilterCriteria:
        """Capa del mapa; independiente del filtro de zona de propiedades."""
        return self._toggle_member("visible_zones", Tier, tier)

    def toggle_status(self, status: Union[ListingStatus, str]) -> FilterCriteria:
        return self._toggle_member("status", ListingStatus, status)

    # ------------------------------------------------------------------
    # Texto, flags y vista
    # ------------------------------------------------------------------

    def set_address_query(self, query: Optional[str]) -> FilterCriteria:
        return self._replace(address_query="" if query is None else str(query))

    def set_hide_seen(self, hide: bool) -> FilterCriteria:
        return self._replace(hide_seen=bool(hide))

    def set_view_mode(self, mode: Union[ViewMode, str]) -> FilterCriteria:
        return self._replace(view_mode=parse_view_mode(mode))

    def set_sort_option(self, option: Union[SortOption, str]) -> FilterCriteria:
        return self._replace(sort_option=parse_sort_option(option))

    # ------------------------------------------------------------------
    # Bulk
    # ------------------------------------------------------------------

    def update(self, **fields) -> FilterCriteria:
        """
        Reemplaza varios campos a la vez con validación completa.

        Campos desconocidos se ignoran; si algún valor no valida, se
        descarta el cambio entero y se conserva el criterio actual.
        """
        known = {k: v for k, v in fields.items() if k in FilterCriteria.model_fields}
        ignored = sorted(set(fields) - set(known))
        if ignored:
            logger.warning("Campos de criterio ignorados", fields=ignored)
        if not known:
            return self._criteria

        data = self._criteria.model_dump()
        data.update(known)
        try:
            criteria = FilterCriteria.model_validate(data)
        except ValidationError as e:
            logger.warning("Criterios inválidos descartados", error=str(e))
            return self._criteria

        self._criteria = criteria
        self.persistence.save(CRITERIA, self._criteria)
        logger.debug("Criterios actualizados", fields=sorted(known))
        return self._criteria

    def reset(self) -> FilterCriteria:
        """Vuelve a los criterios por defecto."""
        self._criteria = FilterCriteria()
        self.persistence.save(CRITERIA, self._criteria)
        logger.info("Criterios reiniciados")
        return self._criteria
