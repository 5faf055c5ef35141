"""
Backends clave/valor para el estado del usuario.

Cada backend guarda strings ya serializados; la (de)serialización vive
en PersistenceAdapter. Los errores de I/O se reportan como StateStoreError.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import structlog

from househunter.config import Settings, get_settings
from househunter.database.supabase_client import SupabaseClient, get_supabase_client
from househunter.exceptions import StateStoreError

logger = structlog.get_logger()


class StateStore(ABC):
    """Interfaz mínima de almacenamiento clave -> valor serializado."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Devuelve el valor guardado o None si la clave no existe."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Guarda (o reemplaza) el valor de una clave."""


class MemoryStateStore(StateStore):
    """Estado solo de sesión; también usado en tests."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JsonFileStateStore(StateStore):
    """
    Todas las claves en un único objeto JSON en disco.

    Cada escritura reescribe el archivo completo de forma atómica
    (archivo temporal + os.replace).
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            # JSONDecodeError y UnicodeDecodeError son ValueError
            raise StateStoreError(f"No se pudo leer {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StateStoreError(f"{self.path} no contiene un objeto JSON")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is None:
            return None
        return value if isinstance(value, str) else json.dumps(value)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except StateStoreError as e:
            logger.warning("Archivo de estado corrupto, se reescribe", path=str(self.path), error=str(e))
            data = {}
        data[key] = value

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=".state-", suffix=".json"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            raise StateStoreError(f"No se pudo escribir {self.path}: {e}") from e


class SupabaseStateStore(StateStore):
    """Estado en una tabla de Supabase con columnas (key, value)."""

    def __init__(self, client: Optional[SupabaseClient] = None, table: str = "app_state"):
        self._client = client or get_supabase_client()
        self.table = table

    def get(self, key: str) -> Optional[str]:
        try:
            return self._client.fetch_value(self.table, key)
        except Exception as e:
            raise StateStoreError(f"Error leyendo '{key}' de Supabase: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self._client.upsert_value(self.table, key, value)
        except Exception as e:
            raise StateStoreError(f"Error escribiendo '{key}' en Supabase: {e}") from e


def build_state_store(settings: Optional[Settings] = None) -> StateStore:
    """Crea el backend configurado en state_backend."""
    settings = settings or get_settings()
    backend = settings.state_backend.lower()

    if backend == "file":
        return JsonFileStateStore(settings.state_file_path)
    if backend == "supabase":
        return SupabaseStateStore(table=settings.state_table)
    if backend == "memory":
        return MemoryStateStore()
    raise ValueError(f"Backend de estado no soportado: {settings.state_backend}")
