"""
Fuentes de datos.

Backend HTTP de propiedades, ingesta/normalización y datos de ejemplo
para modo offline.
"""

from househunter.sources.backend import BackendDataSource, DataBundle
from househunter.sources.fallback import FallbackDataSource
from househunter.sources.ingestion import (
    ingest_listing,
    ingest_listings,
    load_zones_geojson,
    zones_from_feature_collection,
)

__all__ = [
    "BackendDataSource",
    "DataBundle",
    "FallbackDataSource",
    "ingest_listing",
    "ingest_listings",
    "load_zones_geojson",
    "zones_from_feature_collection",
]
