"""Bootstrap logic for reporting on the stored flashcard deck."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from flashdeck.app.settings import AppSettings
from flashdeck.cards import CardStore, Clock, SystemClock
from flashdeck.db import get_session_factory, run_migrations_if_needed
from flashdeck.db.cards import load_store


LOGGER = logging.getLogger(__name__)


def _configure_logging(log_level: str) -> None:
    """Set up project-wide logging configuration."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=log_level,
    )


def format_report(store: CardStore, clock: Clock, recent_limit: int) -> str:
    """Render a plain-text summary of the deck."""
    stats = store.statistics(clock.now())
    lines = [
        f"Cards: {stats.total}",
        f"Due now: {stats.due}",
        f"Mastered: {stats.mastered} ({stats.mastered_percentage:.1f}%)",
        f"Difficult: {stats.difficult} ({stats.difficult_percentage:.1f}%)",
        f"Average ease: {stats.average_ease:.2f}",
    ]

    categories = store.categories()
    if categories:
        lines.append("Categories: " + ", ".join(categories))

    recent = store.recently_added(recent_limit)
    if recent:
        lines.append("Recently added:")
        lines.extend(f"  [{card.category}] {card.question}" for card in recent)
    return "\n".join(lines)


async def build_report(
    session_factory: async_sessionmaker[AsyncSession],
    recent_limit: int,
    clock: Optional[Clock] = None,
) -> str:
    """Load every stored card and summarise the deck."""
    async with session_factory() as session:
        store = await load_store(session)
    LOGGER.info("Loaded %s flashcards from the database.", len(store))
    return format_report(store, clock or SystemClock(), recent_limit)


def run_report(settings: AppSettings) -> None:
    """Print a deck summary using the provided settings."""
    _configure_logging(settings.log_level)
    print(f"{settings.app_name} is running in {settings.app_env} mode.")

    try:
        run_migrations_if_needed()
    except Exception:
        LOGGER.exception("Database migrations failed. Aborting startup.")
        raise

    report = asyncio.run(build_report(get_session_factory(), settings.recent_limit))
    print(report)
