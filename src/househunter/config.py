"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Encontrar la raíz del proyecto (donde está el .env)
# config.py -> househunter/ -> src/ -> project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend de propiedades
    api_base_url: str = Field(
        "http://localhost:8000", description="URL base del backend (FastAPI)"
    )
    request_timeout_seconds: float = Field(
        10.0, gt=0, description="Timeout total por request al backend"
    )
    zones_geojson_path: Optional[Path] = Field(
        None, description="GeoJSON local con isocronas; si falta se piden a /zones"
    )

    # Punto de referencia para zonas por distancia (Charlottesville, VA)
    reference_lat: float = Field(38.0293, description="Latitud del punto de referencia")
    reference_lon: float = Field(-78.4767, description="Longitud del punto de referencia")

    # Datos de respaldo (modo offline)
    fallback_listing_count: int = Field(
        80, ge=0, description="Cantidad de propiedades de ejemplo"
    )
    fallback_seed: int = Field(
        1123, description="Semilla del generador de datos de ejemplo"
    )

    # Persistencia del estado del usuario
    state_backend: str = Field(
        "file", description="Backend de estado: 'file', 'supabase' o 'memory'"
    )
    state_file_path: Path = Field(
        Path.home() / ".househunter" / "state.json",
        description="Archivo JSON para el backend 'file'",
    )
    state_key_prefix: str = Field(
        "househunter_", description="Prefijo de las claves persistidas"
    )

    # Supabase (solo para state_backend='supabase')
    supabase_url: Optional[str] = Field(None, description="URL del proyecto Supabase")
    supabase_key: Optional[str] = Field(None, description="Anon key de Supabase")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key para operaciones admin"
    )
    state_table: str = Field("app_state", description="Tabla clave/valor en Supabase")

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Umbrales de tiers por precio (USD)
PRICE_GOLD_BELOW = 225_000
PRICE_SILVER_MAX = 250_000

# Umbrales de tiers por distancia al punto de referencia (metros)
ZONE_GOLD_BELOW_M = 7_000
ZONE_SILVER_BELOW_M = 14_000
ZONE_BRONZE_BELOW_M = 20_000

# Aproximación plana usada en todo el modo offline
METERS_PER_DEGREE = 111_300

# Isocronas: minutos de manejo (contour) por tier
CONTOUR_GOLD_MAX = 40
CONTOUR_SILVER_MAX = 60

DEFAULT_MAX_PRICE = 275_000

FALLBACK_STREETS = ["Oak", "Maple", "Main", "Broad", "Market"]
FALLBACK_CITY = "Charlottesville VA"
