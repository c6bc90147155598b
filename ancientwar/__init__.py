"""Deterministic turn-based grand strategy engine set in the ancient world."""

import logging

from .models import ActionType, GameState, Phase, PlayerAction, StatKey
from .rng import RandomGenerator
from .data import DEFAULT_CONTENT, ContentPack
from .actions import execute_player_action
from .turn import advance_turn
from .persistence import (
    GameLoadError,
    GameSaveError,
    load_state,
    load_state_from_string,
    quick_save_state,
    save_state,
)
from .game import Game, IronmanViolation, create_initial_game_state, replay_game

logging.getLogger("ancientwar").addHandler(logging.NullHandler())

__all__ = [
    "ActionType",
    "GameState",
    "Phase",
    "PlayerAction",
    "StatKey",
    "RandomGenerator",
    "DEFAULT_CONTENT",
    "ContentPack",
    "execute_player_action",
    "advance_turn",
    "GameLoadError",
    "GameSaveError",
    "load_state",
    "load_state_from_string",
    "quick_save_state",
    "save_state",
    "Game",
    "IronmanViolation",
    "create_initial_game_state",
    "replay_game",
]
