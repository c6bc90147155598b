from __future__ import annotations

"""Game construction and the session object that drives a running game."""

import copy
import logging
import time
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from atlas.visibility import refresh_visibility

from .actions import execute_player_action
from .ai import assign_archetypes
from .data import (
    DEFAULT_CONTENT,
    ContentPack,
    build_initial_nation_state,
    build_initial_territory_state,
)
from .diplomacy import DiplomacyState, ensure_relation_matrix
from .mechanics import is_ironman_action_allowed
from .missions import start_missions
from .models import (
    GameState,
    LogType,
    Phase,
    PlayerAction,
    ReplayEntry,
    ReplayLog,
    Tone,
    push_log,
    push_notification,
    refresh_armies,
)
from . import persistence
from .rng import MODULUS, RandomGenerator
from .technology import set_tech_focus
from .trade import apply_trade_economy, build_initial_trade_state
from .turn import advance_turn

logger = logging.getLogger("ancientwar.game")

WELCOME_MESSAGE = "Choose up to three actions, then end the turn."


class IronmanViolation(RuntimeError):
    """Raised when a session operation is not allowed in ironman mode."""


def _default_seed() -> int:
    return int(time.time() * 1000) % MODULUS


def create_initial_game_state(
    player_nation_id: str,
    seed: Optional[int] = None,
    content: Optional[ContentPack] = None,
    ironman: bool = False,
) -> GameState:
    """
    Build turn one of a new game for ``player_nation_id``.

    The state only depends on the content pack and the player's choice; the
    seed is recorded for replays and drives the generator of the session.

    Raises:
        ValueError: if the nation is not part of the content pack.
    """
    content = content or DEFAULT_CONTENT
    if content.nation(player_nation_id) is None:
        raise ValueError(f"Unknown nation {player_nation_id!r}")
    if seed is None:
        seed = _default_seed()

    nations = {d.id: build_initial_nation_state(d, content.config) for d in content.nations}
    territories = {
        d.id: build_initial_territory_state(d, content.config) for d in content.territories
    }
    diplomacy = DiplomacyState()
    ensure_relation_matrix(diplomacy, nations)
    assign_archetypes(nations.values(), player_nation_id)

    state = GameState(
        player_nation_id=player_nation_id,
        nations=nations,
        territories=territories,
        diplomacy=diplomacy,
        turn=1,
        phase=Phase.PLAYER,
        ironman=ironman,
        trade=build_initial_trade_state(),
        replay=ReplayLog(seed=int(seed)),
        content=content,
    )

    push_log(state, f"{state.player.name} prepares for ascendance", LogType.INFO)
    push_notification(state, WELCOME_MESSAGE, Tone.NEUTRAL)
    apply_trade_economy(state, content.config)
    start_missions(state.player, content)
    refresh_armies(state)
    refresh_visibility(state)
    logger.info("New game: %s (seed %d%s)", player_nation_id, seed, ", ironman" if ironman else "")
    return state


def replay_game(
    player_nation_id: str,
    seed: int,
    entries: Iterable[ReplayEntry],
    content: Optional[ContentPack] = None,
    ironman: bool = False,
) -> GameState:
    """Rebuild a game by feeding a recorded action log to a fresh state."""
    state = create_initial_game_state(player_nation_id, seed, content, ironman)
    rng = RandomGenerator(seed)
    for entry in entries:
        if entry.action is None:
            advance_turn(state, rng)
        else:
            execute_player_action(state, entry.action, rng)
    return state


class Game:
    """
    One play session: a game state, its random generator and an undo history.

    Ironman sessions may not undo or save manually; they can only be resumed
    from an autosave.
    """

    def __init__(self, state: GameState, rng: Optional[RandomGenerator] = None) -> None:
        self.state = state
        if rng is None:
            start = state.rng_state if state.rng_state is not None else state.replay.seed
            rng = RandomGenerator(start)
        self.rng = rng
        self._history: List[Tuple[GameState, int]] = []

    @classmethod
    def new(
        cls,
        player_nation_id: str,
        seed: Optional[int] = None,
        content: Optional[ContentPack] = None,
        ironman: bool = False,
    ) -> "Game":
        state = create_initial_game_state(player_nation_id, seed, content, ironman)
        return cls(state, RandomGenerator(state.replay.seed))

    @classmethod
    def load(
        cls,
        file_path: Optional[Path] = None,
        content: Optional[ContentPack] = None,
        from_autosave: bool = False,
    ) -> "Game":
        """
        Resume a saved session.

        Raises:
            GameLoadError: if the file cannot be read.
            IronmanViolation: for an ironman save that is not an autosave.
        """
        path = file_path if file_path is not None else (
            persistence.AUTOSAVE_FILE if from_autosave else persistence.SAVE_FILE
        )
        state = persistence.load_state(path, content)
        if not is_ironman_action_allowed(state.ironman, "reload", has_auto_save=from_autosave):
            raise IronmanViolation("Ironman games can only be resumed from their autosave")
        logger.info("Loaded game from %s (turn %d)", path, state.turn)
        return cls(state)

    @property
    def ironman(self) -> bool:
        return self.state.ironman

    def _snapshot(self) -> Tuple[GameState, int]:
        # Content packs are immutable and shared.
        memo = {id(self.state.content): self.state.content}
        return copy.deepcopy(self.state, memo), self.rng.get_state()

    def execute(self, action: PlayerAction) -> bool:
        """Perform one player action. Returns ``True`` if it was carried out."""
        snapshot = None if self.ironman else self._snapshot()
        performed = execute_player_action(self.state, action, self.rng)
        if performed and snapshot is not None:
            self._history.append(snapshot)
        return performed

    def end_turn(self, autosave_path: Optional[Path] = None) -> bool:
        """Run the AI, events and upkeep. Optionally autosave afterwards."""
        advanced = advance_turn(self.state, self.rng)
        self._history.clear()
        if advanced and autosave_path is not None:
            self.autosave(autosave_path)
        return advanced

    @property
    def can_undo(self) -> bool:
        return not self.ironman and bool(self._history)

    def undo(self) -> bool:
        """Revert the last action of the current turn."""
        if not is_ironman_action_allowed(self.ironman, "undo"):
            raise IronmanViolation("Undo is disabled in ironman mode")
        if not self._history:
            return False
        state, rng_state = self._history.pop()
        self.state = state
        self.rng = RandomGenerator(rng_state)
        return True

    def set_tech_focus(self, tech_id: Optional[str]) -> bool:
        return set_tech_focus(self.state.player, tech_id, self.state.content or DEFAULT_CONTENT)

    def _write(self, path: Path) -> Path:
        self.state.rng_state = self.rng.get_state()
        return persistence.save_state(self.state, path)

    def save(self, file_path: Optional[Path] = None) -> Path:
        """
        Manual save.

        Raises:
            IronmanViolation: in ironman mode.
            GameSaveError: if the file cannot be written.
        """
        if not is_ironman_action_allowed(self.ironman, "manualSave"):
            raise IronmanViolation("Manual saves are disabled in ironman mode")
        return self._write(Path(file_path) if file_path is not None else persistence.SAVE_FILE)

    def autosave(self, file_path: Optional[Path] = None) -> Path:
        return self._write(Path(file_path) if file_path is not None else persistence.AUTOSAVE_FILE)


__all__ = [
    "WELCOME_MESSAGE",
    "IronmanViolation",
    "create_initial_game_state",
    "replay_game",
    "Game",
]
