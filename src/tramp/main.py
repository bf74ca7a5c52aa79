"""Entry-point for running the game core without a front end."""
from __future__ import annotations

from pathlib import Path

from loguru import logger

from tramp import config as game_config
from tramp.core.logger import configure_logging
from tramp.services.game_store import GameStore, build_game_store


def create_game_store(config_path: Path | None = None) -> GameStore:
    """Load options, install log sinks and wire a store backed by the save dir."""
    settings = game_config.load_config(config_path)
    configure_logging(settings.log_level, game_config.get_log_dir())
    return build_game_store(settings)


def main() -> None:
    """Resume the saved game (or start one) and persist it."""
    store = create_game_store()
    state = store.load_game() or store.init_new_game()
    logger.info(
        "Day {} at {} with {} credits",
        state.player.days_elapsed,
        store.get_current_system().name,
        state.player.credits,
    )
    store.save_game(force=True)


if __name__ == "__main__":
    main()
