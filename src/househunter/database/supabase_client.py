"""
Cliente de Supabase.

Singleton para el backend de estado remoto: una tabla clave/valor con
columnas (key, value) y `key` como clave única.
"""

from functools import lru_cache
from typing import Optional

import structlog
from supabase import create_client, Client

from househunter.config import get_settings

logger = structlog.get_logger()


class SupabaseClient:
    """Wrapper del cliente de Supabase con las consultas clave/valor."""

    def __init__(self, client: Client):
        self._client = client

    @property
    def client(self) -> Client:
        """Acceso directo al cliente de Supabase."""
        return self._client

    def fetch_value(self, table: str, key: str) -> Optional[str]:
        """Valor de una clave o None si la fila no existe."""
        response = (
            self._client.table(table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        return response.data[0]["value"] if response.data else None

    def upsert_value(self, table: str, key: str, value: str) -> None:
        """Inserta o reemplaza la fila de una clave."""
        self._client.table(table).upsert(
            {"key": key, "value": value}, on_conflict="key"
        ).execute()
        logger.debug("Estado remoto guardado", table=table, key=key)


@lru_cache
def get_supabase_client() -> SupabaseClient:
    """
    Cliente compartido, creado en el primer uso.

    Raises:
        ValueError: Si faltan SUPABASE_URL / SUPABASE_KEY
    """
    settings = get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError(
            "state_backend='supabase' requiere SUPABASE_URL y SUPABASE_KEY"
        )

    # La service key evita depender de políticas RLS sobre la tabla de estado
    key = settings.supabase_service_key or settings.supabase_key
    client = create_client(settings.supabase_url, key)
    logger.info("Cliente de Supabase inicializado", url=settings.supabase_url, table=settings.state_table)

    return SupabaseClient(client)
