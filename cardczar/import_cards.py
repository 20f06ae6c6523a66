"""Card Import — command-line loader for expansion folders into the card catalog.

Usage:
    python -m cardczar.import_cards EXPANSION FOLDER [EXPANSION FOLDER ...]

Each FOLDER holds blacks.txt / whites.txt (one card per line). Missing folders
are logged and skipped; an invalid card aborts with its error message.

Design Decisions:
    - Reuses SqlCardCatalog validation: the CLI is just another catalog writer
    - Creates tables first so a fresh SQLite file works without alembic
"""

import argparse
import asyncio
import logging
import sys

from cardczar.config import get_settings
from cardczar.core.errors import CardCzarError
from cardczar.infrastructure.database import DatabaseSessionManager
from cardczar.infrastructure.observability import setup_logging
from cardczar.services.card_catalog import SqlCardCatalog

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import card expansions")
    parser.add_argument(
        "pairs", nargs="+", metavar="EXPANSION FOLDER",
        help="expansion name followed by the folder holding its cards",
    )
    args = parser.parse_args(argv)
    if len(args.pairs) % 2:
        parser.error("arguments must be EXPANSION FOLDER pairs")
    return args


async def import_expansions(
    catalog: SqlCardCatalog, pairs: list[tuple[str, str]],
) -> dict[str, tuple[int, int]]:
    """Import each (expansion, folder). Returns per-expansion (blacks, whites)."""
    return {
        expansion: await catalog.import_folder(folder, expansion)
        for expansion, folder in pairs
    }


async def _run(pairs: list[tuple[str, str]]) -> None:
    settings = get_settings()
    db = DatabaseSessionManager(settings.database_url)
    try:
        await db.create_tables()
        catalog = SqlCardCatalog(
            db,
            max_text_length=settings.max_card_text_length,
            max_blanks=settings.max_blanks,
        )
        await import_expansions(catalog, pairs)
    finally:
        await db.dispose()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level, "text")
    pairs = list(zip(args.pairs[::2], args.pairs[1::2]))
    try:
        asyncio.run(_run(pairs))
    except CardCzarError as e:
        logger.error(f"Import failed: {e.message}", extra={"error_code": e.code})
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
