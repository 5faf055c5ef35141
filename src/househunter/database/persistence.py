"""
Adaptador de persistencia.

Cinco slots independientes (favorites, rejected, undecided, viewed,
criteria). La carga nunca falla: un valor ausente o corrupto devuelve el
default del slot. La escritura es sincrónica (write-through) y un fallo
del backend se loguea sin propagarse a los stores.
"""

from functools import lru_cache
from typing import Any, Optional, TypeVar

import structlog
from pydantic import TypeAdapter, ValidationError

from househunter.database.state_store import MemoryStateStore, StateStore
from househunter.exceptions import StateStoreError

logger = structlog.get_logger()

T = TypeVar("T")

FAVORITES = "favorites"
REJECTED = "rejected"
UNDECIDED = "undecided"
VIEWED = "viewed"
CRITERIA = "criteria"

SLOTS = (FAVORITES, REJECTED, UNDECIDED, VIEWED, CRITERIA)


@lru_cache(maxsize=None)
def _adapter(schema: Any) -> TypeAdapter:
    return TypeAdapter(schema)


class PersistenceAdapter:
    """Lectura/escritura tipada sobre un StateStore."""

    def __init__(self, store: StateStore, key_prefix: str = "househunter_"):
        self.store = store
        self.key_prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def load(self, key: str, default: T, schema: Any = None) -> T:
        """
        Carga y valida el valor de un slot.

        Args:
            key: Nombre del slot (sin prefijo)
            default: Valor a usar si no hay dato válido
            schema: Tipo para validar; por defecto el tipo de `default`

        Returns:
            El valor persistido o `default`
        """
        schema = schema or type(default)
        try:
            raw = self.store.get(self._key(key))
        except StateStoreError as e:
            logger.warning("No se pudo leer estado persistido", key=key, error=str(e))
            return default

        if raw is None:
            return default

        try:
            return _adapter(schema).validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning(
                "Estado persistido inválido, se usa default",
                key=key,
                error=str(e),
            )
            return default

    def save(self, key: str, value: Any, schema: Any = None) -> bool:
        """
        Serializa y guarda el valor completo de un slot.

        Returns:
            True si se escribió, False si el backend falló
        """
        schema = schema or type(value)
        payload = _adapter(schema).dump_json(value).decode("utf-8")
        try:
            self.store.set(self._key(key), payload)
        except StateStoreError as e:
            logger.error("No se pudo guardar estado", key=key, error=str(e))
            return False
        logger.debug("Estado guardado", key=key)
        return True

    def load_ids(self, key: str) -> frozenset[str]:
        """Carga un set de IDs (guardado como lista JSON)."""
        return frozenset(self.load(key, [], list[str]))

    def save_ids(self, key: str, ids: frozenset[str]) -> bool:
        """Guarda un set de IDs como lista ordenada."""
        return self.save(key, sorted(ids), list[str])


def memory_persistence(initial: Optional[dict[str, str]] = None) -> PersistenceAdapter:
    """Adapter sobre un store en memoria (estado solo de sesión)."""
    return PersistenceAdapter(MemoryStateStore(initial))
