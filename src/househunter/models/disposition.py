"""Decisión de triage por propiedad."""

from enum import Enum


class Disposition(str, Enum):
    """
    Estado de triage de una propiedad.

    NONE no se almacena: es la ausencia de la propiedad en el mapping
    del DispositionStore.
    """

    NONE = "none"
    FAVORITE = "favorite"
    REJECTED = "rejected"
    UNDECIDED = "undecided"
