from __future__ import annotations

"""End-of-turn processing."""

import logging

from atlas.visibility import refresh_visibility

from .actions import apply_action
from .ai import ai_turn_order, decide_actions
from .diplomacy import wars_involving
from .events import apply_turn_events
from .mechanics import round_half_up
from .missions import evaluate_missions
from .models import (
    GameState,
    LogType,
    Nation,
    Phase,
    ReplayEntry,
    StatKey,
    Tone,
    adjust_garrison,
    adjust_morale,
    adjust_supply,
    adjust_treasury,
    controlled_territories,
    push_log,
    push_notification,
    refresh_armies,
    update_stat,
)
from .rng import RandomGenerator
from .settings import (
    DEFEAT_STABILITY,
    VICTORY_INFLUENCE,
    VICTORY_STABILITY,
    VICTORY_TERRITORIES,
)
from .trade import apply_trade_economy

logger = logging.getLogger("ancientwar.turn")

REVOLT_STABILITY_LOSS = 3
REVOLT_MAX_GARRISON_LOSS = 2


def _average_faction_support(nation: Nation) -> float:
    if not nation.factions:
        return 55.0
    return sum(f.support for f in nation.factions) / len(nation.factions)


def _apply_faction_pressure(state: GameState, nation: Nation) -> None:
    config = state.content.config
    stability_shift = round_half_up((_average_faction_support(nation) - 55) * config.faction_stability_impact)
    if stability_shift:
        update_stat(nation, StatKey.STABILITY, stability_shift)
    merchants = nation.faction_support("Merchants")
    if merchants is not None:
        economy_shift = round_half_up((merchants - 50) * config.faction_economy_impact)
        if economy_shift:
            update_stat(nation, StatKey.ECONOMY, economy_shift)


def _apply_national_penalties(nation: Nation) -> None:
    if nation.id == "harappa" and nation.stat(StatKey.STABILITY) < 55:
        update_stat(nation, StatKey.MILITARY, -10)
    if nation.id == "medes" and nation.stat(StatKey.ECONOMY) < 50:
        update_stat(nation, StatKey.STABILITY, -5)
    if nation.id == "carthage" and nation.stat(StatKey.MILITARY) < 55:
        update_stat(nation, StatKey.STABILITY, -3)


def upkeep_phase(state: GameState) -> None:
    """
    Settle the economy and the slow drift of every nation.

    Trade is settled first, then for each nation: territory income, army
    upkeep, stat drift, faction pressure, war weariness, national weaknesses
    and the supply and morale drift of its territories.
    """
    config = state.content.config
    apply_trade_economy(state, config)
    for nation in state.nations.values():
        tiles = controlled_territories(state, nation.id)
        adjust_treasury(nation, len(tiles) * config.income_per_territory_base)
        adjust_treasury(nation, -len(tiles) * config.army_upkeep)
        update_stat(nation, StatKey.SUPPORT, -config.base_support_decay)
        update_stat(nation, StatKey.SCIENCE, config.base_science_drift)
        update_stat(nation, StatKey.CRIME, config.base_crime_growth - config.crime_decay)
        _apply_faction_pressure(state, nation)

        wars = wars_involving(state.diplomacy, nation.id)
        if wars:
            update_stat(nation, StatKey.STABILITY, -len(wars) * config.stability_decay_per_war)

        _apply_national_penalties(nation)

        for tile in tiles:
            if tile.siege_progress > 0:
                adjust_supply(tile, -config.siege_supply_drain)
                adjust_morale(tile, -config.siege_morale_drain)
            else:
                adjust_supply(tile, config.supply_recovery)
                adjust_morale(tile, config.morale_recovery)


def revolt_checks(state: GameState, rng: RandomGenerator) -> None:
    """Restless territories may revolt; a draw is only made for those over the threshold."""
    config = state.content.config
    for territory in state.territories.values():
        nation = state.nations[territory.owner]
        score = nation.stat(StatKey.CRIME) + territory.unrest - nation.stat(StatKey.STABILITY)
        if score > config.revolt_threshold and rng.next() > config.revolt_roll_threshold:
            loss = max(0, min(territory.garrison - 1, REVOLT_MAX_GARRISON_LOSS))
            adjust_garrison(territory, -loss)
            update_stat(nation, StatKey.STABILITY, -REVOLT_STABILITY_LOSS)
            push_log(state, f"Unrest sparks in {territory.name}", LogType.DANGER)


def check_victory_conditions(state: GameState) -> bool:
    """Mark the game over on a player win or loss. Returns ``True`` if it ended."""
    player = state.player
    owned = len(controlled_territories(state, player.id))
    if owned >= VICTORY_TERRITORIES or (
        player.stat(StatKey.INFLUENCE) >= VICTORY_INFLUENCE
        and player.stat(StatKey.STABILITY) >= VICTORY_STABILITY
    ):
        state.winner = player.id
        state.phase = Phase.GAMEOVER
        push_log(state, f"{player.name} ascends to legend!", LogType.SUCCESS)
        push_notification(state, "Victory achieved!", Tone.POSITIVE)
        logger.info("Game over on turn %d: %s wins", state.turn, player.id)
        return True
    if player.stat(StatKey.STABILITY) <= DEFEAT_STABILITY or owned == 0:
        state.defeated = True
        state.phase = Phase.GAMEOVER
        push_log(state, f"{player.name} collapses into chaos", LogType.DANGER)
        push_notification(state, "Your nation has fallen.", Tone.NEGATIVE)
        logger.info("Game over on turn %d: %s defeated", state.turn, player.id)
        return True
    return False


def advance_turn(state: GameState, rng: RandomGenerator) -> bool:
    """
    Close the player's turn and run the rest of the round.

    1. AI phase: every AI nation, in name order, acts up to twice.
    2. Events phase: upkeep, random events, revolts and missions.
    3. Victory check. If the game goes on, refresh fog of war, start the
       next turn and hand control back to the player.

    Returns ``False`` without touching the state once the game is over.
    """
    if state.is_over:
        return False
    state.replay.entries.append(ReplayEntry(turn=state.turn))
    state.queued_events.clear()

    state.phase = Phase.AI
    for nation in ai_turn_order(state):
        for action in decide_actions(state, nation, rng):
            apply_action(state, nation.id, action, rng)

    state.phase = Phase.EVENTS
    upkeep_phase(state)
    apply_turn_events(state, rng)
    revolt_checks(state, rng)
    evaluate_missions(state)
    refresh_armies(state)

    if check_victory_conditions(state):
        return True

    refresh_visibility(state)
    state.turn += 1
    state.actions_taken = 0
    state.phase = Phase.PLAYER
    logger.debug("Turn %d begins", state.turn)
    return True


__all__ = [
    "upkeep_phase",
    "revolt_checks",
    "check_victory_conditions",
    "advance_turn",
]
