"""
Propiedades y zonas.

Una vez ingeridos, Listing y Zone son inmutables. Los tiers se calculan
una sola vez al ingerir y quedan cacheados en el registro.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Tier(str, Enum):
    """Bandas de precio o de cercanía. Zinc solo existe para zonas."""

    GOLD = "Gold"
    SILVER = "Silver"
    BRONZE = "Bronze"
    ZINC = "Zinc"


class ListingStatus(str, Enum):
    FOR_SALE = "FOR_SALE"
    PENDING = "PENDING"
    SOLD = "SOLD"


class GeoPoint(BaseModel):
    """Coordenada geográfica en grados decimales."""

    model_config = ConfigDict(frozen=True)

    lat: float = 0.0
    lon: float = 0.0


class Listing(BaseModel):
    """
    Propiedad lista para triage.

    price_tier y zone_tier se asignan en la ingesta (ver
    househunter.sources.ingestion) y nunca se recalculan.
    """

    model_config = ConfigDict(frozen=True)

    # Identificación
    id: str = Field(..., min_length=1, description="ID estable del backend")

    # Datos principales
    price: float = Field(..., ge=0, description="Precio en USD")
    address: str = Field(..., description="Dirección completa")
    beds: int = Field(0, ge=0, description="Dormitorios")
    baths: int = Field(0, ge=0, description="Baños")
    sqft: float = Field(0, ge=0, description="Superficie en pies cuadrados")
    listing_type: str = Field("Single Family", description="Tipo de propiedad")
    status: ListingStatus = Field(ListingStatus.FOR_SALE)

    # Links
    image_url: str = Field("", description="Imagen principal")
    property_url: str = Field("#", description="Link al portal (Zillow/Realtor)")

    # Ubicación
    location: GeoPoint = Field(default_factory=GeoPoint)

    # Clasificación (derivada en la ingesta)
    price_tier: Tier = Field(..., description="Tier según precio")
    zone_tier: Tier = Field(Tier.ZINC, description="Tier según ubicación (isocrona)")

    # Actividad
    days_on_market: int = Field(0, ge=0, description="Días publicada")
    created_at: Optional[datetime] = Field(None, description="Alta del aviso")
    updated_at: Optional[datetime] = Field(None, description="Último cambio del aviso")


class Zone(BaseModel):
    """Banda geográfica (isocrona) usada para el mapa."""

    model_config = ConfigDict(frozen=True)

    id: str
    tier: Tier
    coordinates: tuple[tuple[float, float], ...] = Field(
        ..., description="Vértices (lat, lon) en anillo cerrado"
    )
    label: str = ""

    @field_validator("coordinates")
    @classmethod
    def close_ring(cls, value: tuple[tuple[float, float], ...]):
        # El primer vértice se repite al final
        if value and value[0] != value[-1]:
            return value + (value[0],)
        return value
