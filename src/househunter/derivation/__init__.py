"""
Derivación de la vista.

Filtra y ordena propiedades según criterios y decisiones del usuario.
"""

from househunter.derivation.pipeline import DerivationResult, derive, matches_criteria

__all__ = [
    "DerivationResult",
    "derive",
    "matches_criteria",
]
