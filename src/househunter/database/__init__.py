"""
Módulo de persistencia.

Provee backends clave/valor (archivo JSON, Supabase, memoria) y el
adaptador tipado que usan los stores.
"""

from househunter.database.supabase_client import get_supabase_client, SupabaseClient
from househunter.database.state_store import (
    StateStore,
    MemoryStateStore,
    JsonFileStateStore,
    SupabaseStateStore,
    build_state_store,
)
from househunter.database.persistence import (
    PersistenceAdapter,
    memory_persistence,
    FAVORITES,
    REJECTED,
    UNDECIDED,
    VIEWED,
    CRITERIA,
)

__all__ = [
    "get_supabase_client",
    "SupabaseClient",
    "StateStore",
    "MemoryStateStore",
    "JsonFileStateStore",
    "SupabaseStateStore",
    "build_state_store",
    "PersistenceAdapter",
    "memory_persistence",
    "FAVORITES",
    "REJECTED",
    "UNDECIDED",
    "VIEWED",
    "CRITERIA",
]
