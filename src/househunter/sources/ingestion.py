"""
Ingesta de datos crudos.

Normaliza los registros del backend a Listing/Zone y asigna los tiers
una única vez. Los registros inválidos se descartan con un warning.
"""

import json
import math
from pathlib import Path
from typing import Any, Iterable, Optional

import structlog
from pydantic import ValidationError

from househunter.classification import (
    classify_contour,
    classify_price,
    classify_zone_position,
    classify_zone_tag,
    map_status,
)
from househunter.models import GeoPoint, Listing, Zone

logger = structlog.get_logger()

PLACEHOLDER_IMAGE = "https://picsum.photos/seed/{id}/400/300"


def _number(value: Any, default: float = 0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _count(value: Any) -> int:
    # Medios baños (2.5) se truncan
    number = _number(value)
    return int(number) if math.isfinite(number) else 0


def _location(payload: dict) -> GeoPoint:
    location = payload.get("location") or {}
    lat = location.get("lat") if isinstance(location, dict) else None
    lon = location.get("lon") if isinstance(location, dict) else None
    return GeoPoint(
        lat=_number(lat if lat is not None else payload.get("lat")),
        lon=_number(lon if lon is not None else payload.get("lon")),
    )


def ingest_listing(payload: dict, reference: Optional[GeoPoint] = None) -> Listing:
    """
    Convierte un registro del backend en Listing.

    Args:
        payload: Registro crudo (JSON del endpoint /properties)
        reference: Punto de referencia para asignar zona por distancia
            cuando el registro no trae tag GIS

    Raises:
        ValidationError: Si el registro no tiene id o precio válidos
    """
    listing_id = str(payload.get("id") if payload.get("id") is not None else "")
    # Precios no convertibles (texto, enteros fuera de rango) quedan en None y no validan
    price = _number(payload.get("price"), None)
    location = _location(payload)

    tag = payload.get("gis_tier")
    if tag is None and reference is not None:
        zone_tier = classify_zone_position(location, reference)
    else:
        zone_tier = classify_zone_tag(tag)

    return Listing(
        id=listing_id,
        price=price,
        address=payload.get("address") or "",
        beds=_count(payload.get("beds")),
        baths=_count(payload.get("baths")),
        sqft=_number(payload.get("sqft")),
        listing_type=payload.get("listing_type") or "Single Family",
        status=map_status(payload.get("status")),
        image_url=payload.get("image_url") or PLACEHOLDER_IMAGE.format(id=listing_id),
        property_url=payload.get("property_url") or "#",
        location=location,
        price_tier=classify_price(price or 0),
        zone_tier=zone_tier,
        days_on_market=_count(payload.get("days_on_market")),
        created_at=payload.get("created_at"),
        updated_at=payload.get("updated_at") or payload.get("last_change"),
    )


def ingest_listings(
    payloads: Iterable[dict], reference: Optional[GeoPoint] = None
) -> list[Listing]:
    """Ingiere un lote; descarta (y loguea) los registros inválidos."""
    listings = []
    skipped = 0
    for payload in payloads:
        if not isinstance(payload, dict):
            skipped += 1
            continue
        try:
            listings.append(ingest_listing(payload, reference))
        except ValidationError as e:
            skipped += 1
            logger.warning(
                "Propiedad inválida descartada",
                listing_id=payload.get("id"),
                error=str(e),
            )

    logger.info("Propiedades ingeridas", total=len(listings), skipped=skipped)
    return listings


def _ring(geometry: Any) -> list:
    if not isinstance(geometry, dict):
        raise ValueError("Feature sin geometría")
    if geometry.get("type") == "Polygon":
        return geometry["coordinates"][0]
    if geometry.get("type") == "MultiPolygon":
        return geometry["coordinates"][0][0]
    raise ValueError(f"Geometría no soportada: {geometry.get('type')}")


def zones_from_feature_collection(feature_collection: dict) -> list[Zone]:
    """
    Convierte isocronas GeoJSON ([lon, lat]) en zonas ([lat, lon]).

    El tier sale de properties.contour (minutos de manejo). Features sin
    geometría o mal formados se descartan.
    """
    if not isinstance(feature_collection, dict):
        return []
    features = feature_collection.get("features")
    if not isinstance(features, list):
        return []

    zones = []
    for index, feature in enumerate(features):
        try:
            if not isinstance(feature, dict):
                raise ValueError("Feature no es un objeto")
            properties = feature.get("properties")
            if not isinstance(properties, dict):
                properties = {}
            coordinates = tuple((float(c[1]), float(c[0])) for c in _ring(feature.get("geometry")))
            tier, label = classify_contour(_number(properties.get("contour"), None))
            zones.append(
                Zone(
                    id=str(properties.get("id") or f"zone-{index}"),
                    tier=tier,
                    coordinates=coordinates,
                    label=label,
                )
            )
        except (KeyError, IndexError, TypeError, ValueError, OverflowError) as e:
            logger.warning("Zona inválida descartada", index=index, error=str(e))
    return zones


def load_zones_geojson(path: Path) -> list[Zone]:
    """
    Lee zonas desde un archivo GeoJSON local.

    Acepta una FeatureCollection o una lista cuyo primer elemento lo sea.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, list):
        data = data[0] if data else {}
    zones = zones_from_feature_collection(data)
    logger.info("Zonas locales cargadas", path=str(path), total=len(zones))
    return zones
