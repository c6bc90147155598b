from __future__ import annotations

"""Battle resolution.

A battle is one call to :func:`resolve_combat`. It draws exactly two numbers
from the generator, attacker first, and never fails: invalid inputs are the
caller's responsibility.
"""

import logging
import math
from typing import Dict, Optional

from atlas.terrain import terrain_modifier
from atlas.visibility import refresh_visibility, reveal

from .mechanics import clamp, round_half_up
from .models import (
    CombatOutcome,
    CombatResult,
    GameState,
    LogType,
    StatKey,
    adjust_garrison,
    adjust_morale,
    adjust_supply,
    push_log,
    remove_army,
    set_siege_progress,
    station_army,
    update_stat,
)
from .rng import RandomGenerator
from .settings import COMBAT_DECISIVE_RATIO

logger = logging.getLogger("ancientwar.combat")

# Supply lost by the attacking source territory and by the contested territory.
ATTACKER_SUPPLY_LOSS: Dict[CombatOutcome, int] = {
    CombatOutcome.ATTACKER_VICTORY: 14,
    CombatOutcome.STALEMATE: 11,
    CombatOutcome.DEFENDER_HOLDS: 8,
}
DEFENDER_SUPPLY_LOSS: Dict[CombatOutcome, int] = {
    CombatOutcome.ATTACKER_VICTORY: 24,
    CombatOutcome.STALEMATE: 16,
    CombatOutcome.DEFENDER_HOLDS: 8,
}
ATTACKER_MORALE_SHIFT: Dict[CombatOutcome, int] = {
    CombatOutcome.ATTACKER_VICTORY: 6,
    CombatOutcome.STALEMATE: -2,
    CombatOutcome.DEFENDER_HOLDS: -6,
}
DEFENDER_MORALE_SHIFT: Dict[CombatOutcome, int] = {
    CombatOutcome.ATTACKER_VICTORY: 0,
    CombatOutcome.STALEMATE: -4,
    CombatOutcome.DEFENDER_HOLDS: 5,
}

CAPTURED_MORALE = 55
CAPTURED_SUPPLY = 50
SIEGE_RELIEF = 12
SIEGE_COMPLETE = 100


def _morale_factor(morale: float) -> float:
    return 0.6 + morale / 200


def _supply_factor(supply: float) -> float:
    return 0.6 + supply / 200


def resolve_combat(
    state: GameState,
    attacker_id: str,
    defender_id: str,
    territory_id: str,
    attacking_strength: int,
    rng: RandomGenerator,
    source_territory_id: Optional[str] = None,
) -> CombatResult:
    """
    Fight one battle for ``territory_id`` and apply its consequences.

    1. Compute both sides' power from strength, stats, morale, supply,
       terrain and (for the defender) siege progress, each times a roll.
    2. Classify the outcome and update siege progress. A stalemate that
       completes the siege turns into an attacker victory.
    3. Apply losses, supply and morale penalties, stability changes and,
       on victory, the change of ownership.
    4. Record the battle report and a log line.
    """
    config = state.content.config
    attacker = state.nations[attacker_id]
    defender = state.nations[defender_id]
    territory = state.territories[territory_id]
    source = state.territories.get(source_territory_id) if source_territory_id else None
    terrain = terrain_modifier(territory.terrain)
    low, high = config.combat_randomness_range

    attacker_power = (
        (attacking_strength + attacker.stat(StatKey.MILITARY) / 4)
        * (1 + attacker.stat(StatKey.TECH) / 150)
        * (1 + attacker.stat(StatKey.SUPPORT) / 180)
        * (_morale_factor(source.morale) if source else 0.75)
        * (_supply_factor(source.supply) if source else 1.0)
        * terrain
        * rng.next_in_range(low, high)
    )
    defender_power = (
        (territory.garrison + defender.stat(StatKey.MILITARY) / 4)
        * (1 + defender.stat(StatKey.TECH) / 160)
        * (1 + defender.stat(StatKey.SUPPORT) / 200)
        * _morale_factor(territory.morale)
        * max(0.4, _supply_factor(territory.supply))
        * terrain
        * (1 + territory.siege_progress / 150)
        * rng.next_in_range(low, high)
    )

    if attacker_power > defender_power * COMBAT_DECISIVE_RATIO:
        outcome = CombatOutcome.ATTACKER_VICTORY
    elif defender_power > attacker_power * COMBAT_DECISIVE_RATIO:
        outcome = CombatOutcome.DEFENDER_HOLDS
    else:
        outcome = CombatOutcome.STALEMATE

    if outcome is CombatOutcome.ATTACKER_VICTORY:
        siege = 0
    elif outcome is CombatOutcome.DEFENDER_HOLDS:
        siege = max(0, territory.siege_progress - SIEGE_RELIEF)
    else:
        ratio = attacker_power / defender_power if defender_power > 0 else 1.0
        siege = int(clamp(territory.siege_progress + max(4, round_half_up(ratio * 10)), 0, SIEGE_COMPLETE))
        if siege >= SIEGE_COMPLETE:
            outcome = CombatOutcome.ATTACKER_VICTORY
            siege = 0

    total = attacker_power + defender_power
    garrison_before = territory.garrison
    attacker_loss = int(clamp(
        round_half_up(defender_power / total * attacking_strength), 1, max(1, attacking_strength)
    ))
    # An empty garrison still counts one casualty.
    defender_loss = int(clamp(
        round_half_up(attacker_power / total * garrison_before), 1, max(1, garrison_before)
    ))
    survivors = max(0, attacking_strength - attacker_loss)

    attacker_supply_penalty = ATTACKER_SUPPLY_LOSS[outcome]
    defender_supply_penalty = DEFENDER_SUPPLY_LOSS[outcome]
    if source is not None:
        adjust_supply(source, -attacker_supply_penalty)
        adjust_morale(source, ATTACKER_MORALE_SHIFT[outcome])
    adjust_supply(territory, -defender_supply_penalty)
    adjust_morale(territory, DEFENDER_MORALE_SHIFT[outcome])
    set_siege_progress(territory, siege)

    if outcome is CombatOutcome.ATTACKER_VICTORY:
        territory.owner = attacker_id
        territory.garrison = max(1, survivors)
        territory.morale = CAPTURED_MORALE
        territory.supply = CAPTURED_SUPPLY
        remove_army(defender, territory_id)
        station_army(attacker, territory_id, territory.garrison)
        reveal(state, attacker_id, territory_id)
        update_stat(defender, StatKey.STABILITY, -config.war_stability_penalty)
        update_stat(defender, StatKey.CRIME, config.crime_gain_taxes)
        update_stat(attacker, StatKey.STABILITY, -math.ceil(config.war_stability_penalty / 2))
        message = f"{attacker.name} captured {territory.name} from {defender.name}"
        log_type = LogType.SUCCESS if attacker_id == state.player_nation_id else LogType.DANGER
    else:
        adjust_garrison(territory, -defender_loss)
        if outcome is CombatOutcome.DEFENDER_HOLDS:
            territory.garrison = max(1, territory.garrison)
            update_stat(attacker, StatKey.STABILITY, -config.war_stability_penalty)
            update_stat(attacker, StatKey.CRIME, config.crime_gain_taxes)
            message = f"{defender.name} repelled {attacker.name} at {territory.name}"
        else:
            message = f"Stalemate at {territory.name}; siege at {siege}%"
        if source is not None:
            adjust_garrison(source, survivors)
            station_army(attacker, source.id, source.garrison)
        station_army(defender, territory_id, territory.garrison)
        log_type = LogType.WARNING

    result = CombatResult(
        attacker_id=attacker_id,
        defender_id=defender_id,
        territory_id=territory_id,
        outcome=outcome,
        attacker_loss=attacker_loss,
        defender_loss=defender_loss,
        siege_progress=territory.siege_progress,
        attacker_supply_penalty=attacker_supply_penalty,
        defender_supply_penalty=defender_supply_penalty,
        attacker_power=round(attacker_power, 2),
        defender_power=round(defender_power, 2),
        turn=state.turn,
    )
    state.battle_reports.push(result)
    push_log(state, message, log_type)
    logger.info(
        "Battle for %s: %s (%.2f vs %.2f)",
        territory_id, outcome.value, attacker_power, defender_power,
    )

    if state.player_nation_id in (attacker_id, defender_id):
        refresh_visibility(state)
    return result


__all__ = ["resolve_combat"]
