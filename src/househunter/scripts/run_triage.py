"""
CLI de triage de propiedades.

Uso:
    python -m househunter.scripts.run_triage list
    python -m househunter.scripts.run_triage list --view favorites --sort price-desc
    python -m househunter.scripts.run_triage favorite prop-12
    python -m househunter.scripts.run_triage criteria --max-price 250000 --price-tiers Gold,Silver
    python -m househunter.scripts.run_triage reset
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

import structlog

from househunter.config import get_settings
from househunter.derivation import DerivationResult
from househunter.models import Disposition, SortOption, ViewMode
from househunter.session import TriageSession

# Configurar logging
settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(message)s",
    force=True,
)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

_MARKS = {
    Disposition.FAVORITE: "★",
    Disposition.REJECTED: "✗",
    Disposition.UNDECIDED: "?",
    Disposition.NONE: " ",
}


def _split(value: Optional[str]) -> Optional[list[str]]:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def _print_result(
    session: TriageSession,
    result: DerivationResult,
    limit: Optional[int],
    view_mode: ViewMode,
    sort_option: SortOption,
):
    if session.offline:
        print("⚠ Backend inaccesible: mostrando datos de ejemplo (usa 'list' para reintentar)")

    print(
        f"{result.count} de {result.total} propiedades "
        f"(vista={view_mode.value}, orden={sort_option.value})"
    )
    print()

    rows = result.listings[:limit] if limit is not None else result.listings
    for listing in rows:
        mark = _MARKS[session.dispositions.disposition_of(listing.id)]
        seen = "·" if session.dispositions.is_viewed(listing.id) else " "
        print(
            f"{mark}{seen} {listing.id:<10} ${listing.price:>10,.0f}  "
            f"{listing.beds}bd/{listing.baths}ba  "
            f"precio={listing.price_tier.value:<6} zona={listing.zone_tier.value:<6} "
            f"{listing.days_on_market:>3}d  {listing.address}"
        )

    if result.zones:
        print()
        print("Capas visibles: " + ", ".join(f"{z.tier.value} ({z.label})" for z in result.zones))


def cmd_list(session: TriageSession, args) -> int:
    asyncio.run(session.load_data())

    # --view/--sort aplican solo a esta consulta; no se persisten
    view_mode = ViewMode(args.view) if args.view else session.criteria.view_mode
    sort_option = SortOption(args.sort) if args.sort else session.criteria.sort_option
    result = session.preview(view_mode=view_mode, sort_option=sort_option)

    _print_result(session, result, args.limit, view_mode, sort_option)
    return 0


def cmd_toggle(session: TriageSession, args) -> int:
    actions = {
        "favorite": session.toggle_favorite,
        "reject": session.toggle_rejected,
        "undecided": session.toggle_undecided,
    }
    disposition = actions[args.command](args.listing_id)
    print(f"{args.listing_id}: {disposition.value}")
    return 0


def cmd_view(session: TriageSession, args) -> int:
    added = session.mark_viewed(args.listing_id)
    print(f"{args.listing_id}: {'marcada como vista' if added else 'ya estaba vista'}")
    return 0


def cmd_criteria(session: TriageSession, args) -> int:
    fields = {
        "min_price": args.min_price,
        "max_price": args.max_price,
        "min_beds": args.min_beds,
        "min_baths": args.min_baths,
        "price_tiers": _split(args.price_tiers),
        "zone_tiers": _split(args.zone_tiers),
        "visible_zones": _split(args.visible_zones),
        "status": _split(args.status),
        "address_query": args.address,
        "hide_seen": args.hide_seen,
        "view_mode": args.view,
        "sort_option": args.sort,
    }
    fields = {k: v for k, v in fields.items() if v is not None}
    criteria = session.update_criteria(**fields) if fields else session.criteria
    print(criteria.model_dump_json(indent=2))
    return 0


def cmd_reset(session: TriageSession, args) -> int:
    session.reset()
    print("Decisiones, historial y criterios reiniciados")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Triage de propiedades por precio y zona")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="Muestra la vista filtrada y ordenada")
    p_list.add_argument("--view", choices=[v.value for v in ViewMode], help="Modo de vista")
    p_list.add_argument("--sort", choices=[s.value for s in SortOption], help="Orden")
    p_list.add_argument("--limit", type=int, default=None, help="Máximo de filas")
    p_list.set_defaults(handler=cmd_list)

    for name, help_text in (
        ("favorite", "Marca/desmarca favorito"),
        ("reject", "Marca/desmarca rechazado"),
        ("undecided", "Marca/desmarca indeciso"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("listing_id", help="ID de la propiedad")
        p.set_defaults(handler=cmd_toggle)

    p_view = sub.add_parser("view", help="Registra que se abrió una propiedad")
    p_view.add_argument("listing_id", help="ID de la propiedad")
    p_view.set_defaults(handler=cmd_view)

    p_criteria = sub.add_parser("criteria", help="Muestra o cambia los criterios")
    p_criteria.add_argument("--min-price", type=float)
    p_criteria.add_argument("--max-price", type=float, help="0 = sin tope")
    p_criteria.add_argument("--min-beds", type=int)
    p_criteria.add_argument("--min-baths", type=int)
    p_criteria.add_argument("--price-tiers", help="Separados por coma (ej: Gold,Silver)")
    p_criteria.add_argument("--zone-tiers", help="Separados por coma (ej: Gold,Zinc)")
    p_criteria.add_argument("--visible-zones", help="Capas del mapa separadas por coma")
    p_criteria.add_argument("--status", help="Separados por coma (ej: FOR_SALE,PENDING)")
    p_criteria.add_argument("--address", help="Texto a buscar en la dirección")
    p_criteria.add_argument(
        "--hide-seen", dest="hide_seen", action="store_true", default=None,
        help="Oculta propiedades ya vistas",
    )
    p_criteria.add_argument(
        "--show-seen", dest="hide_seen", action="store_false", default=None,
        help="Muestra propiedades ya vistas",
    )
    p_criteria.add_argument("--view", choices=[v.value for v in ViewMode])
    p_criteria.add_argument("--sort", choices=[s.value for s in SortOption])
    p_criteria.set_defaults(handler=cmd_criteria)

    p_reset = sub.add_parser("reset", help="Borra decisiones, historial y criterios")
    p_reset.set_defaults(handler=cmd_reset)

    return parser


def main(argv: Optional[list[str]] = None):
    """Entry point del script."""
    args = build_parser().parse_args(argv)

    try:
        session = TriageSession(settings=settings)
        sys.exit(args.handler(session, args))
    except KeyboardInterrupt:
        logger.info("Interrumpido por usuario")
        sys.exit(130)
    except Exception as e:
        logger.error("Error fatal", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
