"""
Estado del usuario.

Decisiones de triage, historial de vistas y criterios de filtrado,
cada uno persistido en su propio slot.
"""

from househunter.state.disposition_store import DispositionStore
from househunter.state.criteria_store import CriteriaStore

__all__ = [
    "DispositionStore",
    "CriteriaStore",
]
