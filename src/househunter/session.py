"""
Sesión de triage.

Orquesta carga de datos, stores y derivación con un modelo sincrónico:
cada mutación re-deriva la vista en el acto y notifica a los suscriptores.
El único punto asíncrono es la carga de datos (inicio y reintentos).

Flujo:
1. load_data(): backend -> si falla, datos de ejemplo + flag offline
2. Mutaciones (decisiones, vistas, criterios) -> persistencia write-through
3. refresh(): derive() con los inputs actuales -> suscriptores
"""

from typing import Callable, Optional

import structlog

from househunter.config import Settings, get_settings
from househunter.database import PersistenceAdapter, build_state_store
from househunter.derivation import DerivationResult, derive
from househunter.exceptions import DataSourceError
from househunter.models import Disposition, FilterCriteria, Listing, SortOption, ViewMode, Zone
from househunter.sources import BackendDataSource, DataBundle, FallbackDataSource
from househunter.state import CriteriaStore, DispositionStore

logger = structlog.get_logger()

Listener = Callable[[DerivationResult], None]


class TriageSession:
    """Estado completo de una sesión de triage."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        data_source=None,
        fallback: Optional[FallbackDataSource] = None,
        persistence: Optional[PersistenceAdapter] = None,
    ):
        self.settings = settings or get_settings()
        self.data_source = data_source or BackendDataSource(self.settings)
        self.fallback = fallback or FallbackDataSource(self.settings)
        self.persistence = persistence or PersistenceAdapter(
            build_state_store(self.settings),
            key_prefix=self.settings.state_key_prefix,
        )

        self.dispositions = DispositionStore(self.persistence)
        self.criteria_store = CriteriaStore(self.persistence)

        self.listings: list[Listing] = []
        self.zones: list[Zone] = []
        self.offline = False
        self.loading = False

        self._listeners: list[Listener] = []
        self._result = self._derive()

    # ------------------------------------------------------------------
    # Datos
    # ------------------------------------------------------------------

    async def load_data(self) -> DerivationResult:
        """
        Carga propiedades y zonas; nunca lanza.

        Si el backend falla se usan los datos de ejemplo y queda
        `offline = True` hasta una carga exitosa.
        """
        self.loading = True
        try:
            bundle = await self.data_source.fetch_listings_and_zones()
            offline = False
        except DataSourceError as e:
            logger.warning("Backend inaccesible, usando datos de ejemplo", error=str(e))
            bundle = self.fallback.generate()
            offline = True
        finally:
            self.loading = False

        # Gana la última carga que termina
        self._apply_bundle(bundle, offline)
        return self.refresh()

    async def retry(self) -> DerivationResult:
        """Reintento disparado por el usuario."""
        logger.info("Reintentando conexión con el backend")
        return await self.load_data()

    def _apply_bundle(self, bundle: DataBundle, offline: bool):
        self.listings = list(bundle.listings)
        self.zones = list(bundle.zones)
        self.offline = offline
        logger.info(
            "Datos cargados",
            listings=len(self.listings),
            zones=len(self.zones),
            offline=offline,
        )

    def find_listing(self, listing_id: str) -> Optional[Listing]:
        return next((listing for listing in self.listings if listing.id == listing_id), None)

    # ------------------------------------------------------------------
    # Derivación
    # ------------------------------------------------------------------

    @property
    def criteria(self) -> FilterCriteria:
        return self.criteria_store.criteria

    @property
    def result(self) -> DerivationResult:
        """Última vista derivada."""
        return self._result

    def _derive(self) -> DerivationResult:
        return self.preview()

    def preview(
        self,
        view_mode: Optional[ViewMode] = None,
        sort_option: Optional[SortOption] = None,
    ) -> DerivationResult:
        """Deriva con vista/orden puntuales sin tocar los criterios guardados."""
        return derive(
            self.listings,
            self.zones,
            self.criteria,
            self.dispositions.snapshot(),
            self.dispositions.viewed,
            view_mode=view_mode,
            sort_option=sort_option,
        )

    def refresh(self) -> DerivationResult:
        """Re-deriva la vista y notifica a los suscriptores."""
        self._result = self._derive()
        for listener in list(self._listeners):
            listener(self._result)
        return self._result

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Registra un callback que recibe cada nueva vista.

        Returns:
            Función para desuscribirse
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Mutaciones
    # ------------------------------------------------------------------

    def toggle_favorite(self, listing_id: str) -> Disposition:
        disposition = self.dispositions.toggle_favorite(listing_id)
        self.refresh()
        return disposition

    def toggle_rejected(self, listing_id: str) -> Disposition:
        disposition = self.dispositions.toggle_rejected(listing_id)
        self.refresh()
        return disposition

    def toggle_undecided(self, listing_id: str) -> Disposition:
        disposition = self.dispositions.toggle_undecided(listing_id)
        self.refresh()
        return disposition

    def mark_viewed(self, listing_id: str) -> bool:
        added = self.dispositions.mark_viewed(listing_id)
        if added:
            self.refresh()
        return added

    def update_criteria(self, **fields) -> FilterCriteria:
        """Cambia varios criterios a la vez (ver CriteriaStore.update)."""
        criteria = self.criteria_store.update(**fields)
        self.refresh()
        return criteria

    def apply_criteria(self, change: Callable[[CriteriaStore], FilterCriteria]) -> FilterCriteria:
        """
        Aplica un setter del CriteriaStore y re-deriva.

        Ejemplo:
            session.apply_criteria(lambda s: s.toggle_price_tier(Tier.GOLD))
        """
        criteria = change(self.criteria_store)
        self.refresh()
        return criteria

    def reset(self):
        """Borra decisiones, historial y criterios."""
        self.dispositions.reset()
        self.criteria_store.reset()
        self.refresh()
