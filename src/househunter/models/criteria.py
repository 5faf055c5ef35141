"""
Criterios de filtrado y orden.

FilterCriteria es inmutable: el CriteriaStore lo reemplaza completo en
cada cambio y lo persiste como un único snapshot.
"""

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from househunter.config import DEFAULT_MAX_PRICE
from househunter.models.listing import ListingStatus, Tier


class ViewMode(str, Enum):
    ALL = "all"
    FAVORITES = "favorites"
    REJECTED = "rejected"
    UNDECIDED = "undecided"
    HISTORY = "history"


class SortOption(str, Enum):
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    # Proxy de "más reciente": menos días publicada primero
    NEWEST = "newest"


def clamp_non_negative(value) -> float:
    """Convierte a float >= 0. Valores no numéricos o no finitos -> 0."""
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return max(0.0, number)


def parse_view_mode(value) -> ViewMode:
    """Modo de vista; valores desconocidos vuelven a ALL."""
    try:
        return ViewMode(value)
    except ValueError:
        return ViewMode.ALL


def parse_sort_option(value) -> SortOption:
    """Orden; valores desconocidos vuelven a precio ascendente."""
    try:
        return SortOption(value)
    except ValueError:
        return SortOption.PRICE_ASC


class FilterCriteria(BaseModel):
    """Configuración de filtros y orden elegida por el usuario."""

    model_config = ConfigDict(frozen=True)

    # Precio (max_price <= 0 significa "sin tope")
    min_price: float = Field(0, description="Precio mínimo")
    max_price: float = Field(DEFAULT_MAX_PRICE, description="Precio máximo; 0 = sin tope")

    # Características físicas
    min_beds: int = Field(0, description="Mínimo de dormitorios")
    min_baths: int = Field(0, description="Mínimo de baños")

    # Tiers
    price_tiers: frozenset[Tier] = Field(
        default_factory=lambda: frozenset({Tier.GOLD, Tier.SILVER, Tier.BRONZE}),
        description="Tiers de precio aceptados",
    )
    zone_tiers: frozenset[Tier] = Field(
        default_factory=lambda: frozenset(Tier),
        description="Tiers de zona aceptados para las propiedades",
    )
    visible_zones: frozenset[Tier] = Field(
        default_factory=lambda: frozenset({Tier.GOLD, Tier.SILVER, Tier.BRONZE}),
        description="Capas de zona visibles en el mapa",
    )

    # Estado y tracking
    status: frozenset[ListingStatus] = Field(
        default_factory=lambda: frozenset({ListingStatus.FOR_SALE}),
        description="Estados de publicación aceptados",
    )
    address_query: str = Field("", description="Substring de dirección (sin mayúsculas)")
    hide_seen: bool = Field(False, description="Ocultar propiedades ya abiertas")

    # Vista
    view_mode: ViewMode = Field(ViewMode.ALL)
    sort_option: SortOption = Field(SortOption.PRICE_ASC)

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def clamp_price(cls, value) -> float:
        return clamp_non_negative(value)

    @field_validator("min_beds", "min_baths", mode="before")
    @classmethod
    def clamp_count(cls, value) -> int:
        return int(clamp_non_negative(value))

    @field_validator("address_query", mode="before")
    @classmethod
    def normalize_query(cls, value) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("view_mode", mode="before")
    @classmethod
    def fallback_view_mode(cls, value) -> ViewMode:
        return parse_view_mode(value)

    @field_validator("sort_option", mode="before")
    @classmethod
    def fallback_sort_option(cls, value) -> SortOption:
        return parse_sort_option(value)

    @property
    def has_max_price(self) -> bool:
        return self.max_price > 0
