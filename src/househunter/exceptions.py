"""Excepciones del dominio."""


class HouseHunterError(Exception):
    """Base de todos los errores propios del sistema."""


class DataSourceError(HouseHunterError):
    """El backend de propiedades no respondió o devolvió datos inválidos."""


class StateStoreError(HouseHunterError):
    """Fallo de lectura/escritura en el backend de estado."""
