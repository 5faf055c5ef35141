"""
Fuente de datos remota.

Obtiene propiedades (y zonas, si no hay GeoJSON local) del backend HTTP.
Cualquier falla se reporta como DataSourceError; quien llama decide el
fallback.
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Optional

import aiohttp
import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from househunter.config import Settings, get_settings
from househunter.exceptions import DataSourceError
from househunter.models import Listing, Zone
from househunter.sources.ingestion import (
    ingest_listings,
    load_zones_geojson,
    zones_from_feature_collection,
)

logger = structlog.get_logger()

_TRANSIENT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


@dataclass
class DataBundle:
    """Propiedades y zonas de una carga completa."""

    listings: list[Listing] = field(default_factory=list)
    zones: list[Zone] = field(default_factory=list)


class BackendDataSource:
    """
    Cliente del backend de propiedades (FastAPI).

    Endpoints:
        GET /properties -> lista de registros crudos
        GET /zones      -> FeatureCollection de isocronas (solo sin GeoJSON local)
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.base_url = self.settings.api_base_url.rstrip("/")

    def _local_zones(self) -> Optional[list[Zone]]:
        path = self.settings.zones_geojson_path
        if path is None:
            return None
        try:
            return load_zones_geojson(path)
        except (OSError, ValueError) as e:
            logger.warning("No se pudieron cargar zonas locales", path=str(path), error=str(e))
            return []

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _get_json(self, session: aiohttp.ClientSession, path: str):
        url = f"{self.base_url}{path}"
        async with session.get(url) as response:
            if response.status >= 400:
                raise DataSourceError(f"API Error: {response.status} ({url})")
            try:
                return await response.json(content_type=None)
            except (json.JSONDecodeError, ValueError) as e:
                raise DataSourceError(f"Respuesta no es JSON válido ({url})") from e

    async def fetch_listings_and_zones(self) -> DataBundle:
        """
        Descarga propiedades y zonas.

        Returns:
            DataBundle con propiedades ya clasificadas

        Raises:
            DataSourceError: Si el backend no responde o responde mal
        """
        timeout = aiohttp.ClientTimeout(total=self.settings.request_timeout_seconds)
        zones = self._local_zones()

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                properties = await self._get_json(session, "/properties")
                if zones is None:
                    payload = await self._get_json(session, "/zones")
                    if not isinstance(payload, dict):
                        raise DataSourceError("El endpoint /zones no devolvió una FeatureCollection")
                    zones = zones_from_feature_collection(payload)
        except _TRANSIENT_ERRORS as e:
            logger.warning("Backend inaccesible", url=self.base_url, error=str(e))
            raise DataSourceError(f"Backend inaccesible: {e}") from e

        if not isinstance(properties, list):
            raise DataSourceError("El endpoint /properties no devolvió una lista")

        listings = ingest_listings(properties)
        logger.info(
            "Datos obtenidos del backend",
            listings=len(listings),
            zones=len(zones),
        )
        return DataBundle(listings=listings, zones=zones)
