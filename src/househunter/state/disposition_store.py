"""
Store de decisiones de triage.

Modela la exclusividad favorito/rechazado/indeciso con un único mapping
id -> Disposition, de modo que una propiedad nunca puede estar en dos
sets a la vez. El set de vistas es monótono: solo reset() lo vacía.
"""

from types import MappingProxyType
from typing import Mapping, Optional

import structlog

from househunter.database import (
    FAVORITES,
    REJECTED,
    UNDECIDED,
    VIEWED,
    PersistenceAdapter,
    memory_persistence,
)
from househunter.models import Disposition

logger = structlog.get_logger()

_SLOT_BY_DISPOSITION = {
    Disposition.FAVORITE: FAVORITES,
    Disposition.REJECTED: REJECTED,
    Disposition.UNDECIDED: UNDECIDED,
}
_DISPOSITION_BY_SLOT = {slot: d for d, slot in _SLOT_BY_DISPOSITION.items()}


class DispositionStore:
    """
    Decisiones por propiedad + historial de vistas.

    Cada mutación persiste, con su valor completo, cada slot que cambió.
    Las operaciones no-op no escriben.
    """

    def __init__(self, persistence: Optional[PersistenceAdapter] = None):
        self.persistence = persistence or memory_persistence()
        self._dispositions: dict[str, Disposition] = {}
        self._viewed: set[str] = set()
        self._restore()

    def _restore(self):
        """Carga los cuatro slots; resuelve solapamientos por precedencia."""
        # Orden de precedencia: favorito > rechazado > indeciso
        for disposition, slot in _SLOT_BY_DISPOSITION.items():
            for listing_id in self.persistence.load_ids(slot):
                current = self._dispositions.get(listing_id)
                if current is not None:
                    logger.warning(
                        "Propiedad en más de un set persistido",
                        listing_id=listing_id,
                        kept=current.value,
                        dropped=disposition.value,
                    )
                    continue
                self._dispositions[listing_id] = disposition

        self._viewed = set(self.persistence.load_ids(VIEWED))
        logger.debug(
            "Decisiones restauradas",
            favorites=len(self.favorites),
            rejected=len(self.rejected),
            undecided=len(self.undecided),
            viewed=len(self._viewed),
        )

    # ------------------------------------------------------------------
    # Lectura
    # ------------------------------------------------------------------

    def disposition_of(self, listing_id: str) -> Disposition:
        return self._dispositions.get(listing_id, Disposition.NONE)

    def _ids_with(self, disposition: Disposition) -> frozenset[str]:
        return frozenset(
            listing_id
            for listing_id, value in self._dispositions.items()
            if value is disposition
        )

    @property
    def favorites(self) -> frozenset[str]:
        return self._ids_with(Disposition.FAVORITE)

    @property
    def rejected(self) -> frozenset[str]:
        return self._ids_with(Disposition.REJECTED)

    @property
    def undecided(self) -> frozenset[str]:
        return self._ids_with(Disposition.UNDECIDED)

    @property
    def viewed(self) -> frozenset[str]:
        return frozenset(self._viewed)

    def is_favorite(self, listing_id: str) -> bool:
        return self.disposition_of(listing_id) is Disposition.FAVORITE

    def is_rejected(self, listing_id: str) -> bool:
        return self.disposition_of(listing_id) is Disposition.REJECTED

    def is_undecided(self, listing_id: str) -> bool:
        return self.disposition_of(listing_id) is Disposition.UNDECIDED

    def is_viewed(self, listing_id: str) -> bool:
        return listing_id in self._viewed

    def snapshot(self) -> Mapping[str, Disposition]:
        """Copia inmutable del mapping actual (para el pipeline)."""
        return MappingProxyType(dict(self._dispositions))

    # ------------------------------------------------------------------
    # Transiciones
    # ------------------------------------------------------------------

    def _toggle(self, listing_id: str, target: Disposition) -> Disposition:
        previous = self.disposition_of(listing_id)

        if previous is target:
            del self._dispositions[listing_id]
            new = Disposition.NONE
        else:
            self._dispositions[listing_id] = target
            new = target

        changed_slots = {
            _SLOT_BY_DISPOSITION[d] for d in (previous, new) if d is not Disposition.NONE
        }
        for slot in sorted(changed_slots):
            self._persist(slot)

        logger.debug(
            "Decisión actualizada",
            listing_id=listing_id,
            previous=previous.value,
            current=new.value,
        )
        return new

    def toggle_favorite(self, listing_id: str) -> Disposition:
        """Favorito <-> ninguno; desde rechazado/indeciso pasa a favorito."""
        return self._toggle(listing_id, Disposition.FAVORITE)

    def toggle_rejected(self, listing_id: str) -> Disposition:
        """Rechazado <-> ninguno; desde favorito/indeciso pasa a rechazado."""
        return self._toggle(listing_id, Disposition.REJECTED)

    def toggle_undecided(self, listing_id: str) -> Disposition:
        """Indeciso <-> ninguno; desde favorito/rechazado pasa a indeciso."""
        return self._toggle(listing_id, Disposition.UNDECIDED)

    def mark_viewed(self, listing_id: str) -> bool:
        """
        Registra que el usuario abrió la propiedad.

        Returns:
            True si era nueva en el historial
        """
        if listing_id in self._viewed:
            return False
        self._viewed.add(listing_id)
        self._persist(VIEWED)
        return True

    def reset(self):
        """Borra todas las decisiones y el historial de vistas."""
        self._dispositions.clear()
        self._viewed.clear()
        for slot in (FAVORITES, REJECTED, UNDECIDED, VIEWED):
            self._persist(slot)
        logger.info("Decisiones reiniciadas")

    def _persist(self, slot: str):
        if slot == VIEWED:
            ids = self.viewed
        else:
            ids = self._ids_with(_DISPOSITION_BY_SLOT[slot])
        self.persistence.save_ids(slot, ids)
