"""
MTG Price Finder — Application Entrypoint

Configures structlog, searches every store for the given card names and
prints a price report.

Run via:
    python -m src.main "Lightning Bolt" "Counterspell"
"""

from __future__ import annotations

import asyncio
import logging
import sys

import structlog

from src.config import SearchMode, settings
from src.models.card_result import CardSearchOutcome
from src.pipeline.search import CardSearchOrchestrator
from src.utils.card_list import cards_to_search, empty_input_message
from src.utils.formatting import render_batch


# ---------------------------------------------------------------------------
# Structlog Configuration
# ---------------------------------------------------------------------------


def _configure_logging(log_level: str = "INFO") -> None:
    """
    Set up structured logging with JSON output on stderr.

    stdout is reserved for the report.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
    """
    level = getattr(logging, log_level.upper())

    # Configure stdlib logging first (for third-party libraries)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


async def main(argv: list[str] | None = None) -> int:
    """
    Search for each card name in argv and print the report.

    A single argument may hold several names separated by newlines.

    Returns:
        Process exit code: 0 when the batch ran, 2 on empty input,
        1 when the batch failed.
    """
    _configure_logging(log_level=settings.LOG_LEVEL)
    logger = structlog.get_logger(__name__)

    args = sys.argv[1:] if argv is None else argv
    mode = SearchMode.SINGLE if len(args) == 1 and "\n" not in args[0] else SearchMode.LIST
    names = cards_to_search(mode, args[0] if args else "", "\n".join(args))

    if not names:
        print(empty_input_message(mode))
        return 2

    logger.info("mtg_price_finder_start", mode=mode.value, cards_count=len(names))

    def report_progress(outcomes: list[CardSearchOutcome]) -> None:
        latest = outcomes[-1]
        logger.info(
            "search_progress",
            completed=len(outcomes),
            total=len(names),
            card_name=latest.card_name,
            status=latest.status.value,
        )

    async with CardSearchOrchestrator() as orchestrator:
        batch = await orchestrator.search_batch(names, on_progress=report_progress)

    print(render_batch(batch))

    if batch.error:
        logger.error("mtg_price_finder_batch_error", error=batch.error)
        return 1
    return 0


# ---------------------------------------------------------------------------
# CLI Entry
# ---------------------------------------------------------------------------


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
