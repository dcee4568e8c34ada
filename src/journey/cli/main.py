# src/journey/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, attaches the list view and the widget to
the live task query, then runs the console REPL until /exit or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, start_views, stop_views
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        await stop_views(state)
    except Exception:
        logger.exception("Failed to stop views.")

    try:
        close = getattr(state.repo, "close", None)
        if close is not None:
            close()
    except Exception:
        logger.debug("Repository close failed.", exc_info=True)


async def run(state: AppState) -> None:
    await start_views(state)
    try:
        if state.settings.console_enabled:
            await run_console_loop(state)
        else:
            logger.info("Console disabled; nothing to run.")
    finally:
        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    try:
        asyncio.run(run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
