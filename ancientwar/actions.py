from __future__ import annotations

"""Action costs, validation and handlers.

Every order goes through :func:`apply_action`, whoever issues it. Targets are
checked first, then the cost is paid, then the handler runs. A handler
returns a short result message, or ``None`` when the action did not happen.
"""

import logging
from typing import Callable, Dict, Optional

from atlas.terrain import TerrainType, movement_cost

from .combat import resolve_combat
from .diplomacy import is_allied, is_at_war, modify_relation, toggle_alliance, toggle_war, wars_involving
from .models import (
    ActionType,
    GameState,
    LogType,
    Nation,
    Phase,
    PlayerAction,
    ReplayEntry,
    StatKey,
    Territory,
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
from .technology import advance_research

logger = logging.getLogger("ancientwar.actions")

ACTION_COSTS: Dict[ActionType, int] = {
    ActionType.INVEST_IN_TECH: 6,
    ActionType.RECRUIT_ARMY: 5,
    ActionType.MOVE_ARMY: 0,
    ActionType.COLLECT_TAXES: 0,
    ActionType.PASS_LAW: 4,
    ActionType.SPY: 4,
    ActionType.DIPLOMACY_OFFER: 3,
    ActionType.DECLARE_WAR: 0,
    ActionType.FORM_ALLIANCE: 0,
    ActionType.BRIBE: 5,
    ActionType.SUPPRESS_CRIME: 4,
}

TRAIT_COST_MODIFIERS: Dict[str, Dict[ActionType, int]] = {
    "carthage": {ActionType.RECRUIT_ARMY: -1},
    "medes": {ActionType.RECRUIT_ARMY: 1},
    "minoa": {ActionType.RECRUIT_ARMY: 1},
}

# Actions aimed at another nation
TARGETED_ACTIONS = {
    ActionType.SPY,
    ActionType.DIPLOMACY_OFFER,
    ActionType.DECLARE_WAR,
    ActionType.FORM_ALLIANCE,
    ActionType.BRIBE,
}

ALLIANCE_RELATION_BONUS = 8
BRIBE_RELATION_BONUS = 4
BRIBE_CRIME_INCREASE = 3
CARTHAGE_LAW_STABILITY = 60


def get_action_cost(nation: Nation, action_type: ActionType) -> int:
    cost = ACTION_COSTS[action_type] + TRAIT_COST_MODIFIERS.get(nation.id, {}).get(action_type, 0)
    return max(0, cost)


# --------------------------------------------------------------------
# Validation
# --------------------------------------------------------------------
def _move_cost(state: GameState, target: Territory) -> int:
    return movement_cost(target.terrain, state.content.config.army_move_cost)


def _is_contested(state: GameState, territory: Territory, nation_id: str) -> bool:
    """True when a nation at war with ``nation_id`` owns a neighboring territory."""
    enemies = set(wars_involving(state.diplomacy, nation_id))
    if not enemies:
        return False
    return any(
        state.territories[n].owner in enemies
        for n in territory.neighbors
        if n in state.territories
    )


def validate_action(state: GameState, nation: Nation, action: PlayerAction) -> Optional[str]:
    """Return why ``action`` cannot be carried out, or ``None`` if it can."""
    kind = action.type
    if kind in TARGETED_ACTIONS:
        target = state.nations.get(action.target_nation_id or "")
        if target is None:
            return "No target nation selected"
        if target.id == nation.id:
            return "A nation cannot target itself"
        if kind is ActionType.DECLARE_WAR and is_at_war(state.diplomacy, nation.id, target.id):
            return f"Already at war with {target.name}"
        if kind is ActionType.FORM_ALLIANCE and is_allied(state.diplomacy, nation.id, target.id):
            return f"Already allied with {target.name}"
    elif kind is ActionType.RECRUIT_ARMY:
        territory = state.territories.get(action.source_territory_id or "")
        if territory is None or territory.owner != nation.id:
            return "Recruits must muster in a territory you control"
    elif kind is ActionType.MOVE_ARMY:
        source = state.territories.get(action.source_territory_id or "")
        target = state.territories.get(action.target_territory_id or "")
        if source is None or target is None:
            return "Select a source and a destination"
        if source.owner != nation.id:
            return f"{source.name} is not under your control"
        if target.id not in source.neighbors:
            return f"{target.name} does not border {source.name}"
        if target.owner != nation.id and is_allied(state.diplomacy, nation.id, target.owner):
            return "Armies cannot march on an ally"
        if source.garrison - _move_cost(state, target) <= 0:
            return f"Not enough troops in {source.name} to march"
    return None


# --------------------------------------------------------------------
# Handlers
# --------------------------------------------------------------------
Handler = Callable[[GameState, Nation, PlayerAction, RandomGenerator], Optional[str]]


def _invest_in_tech(state: GameState, nation: Nation, action: PlayerAction, rng: RandomGenerator) -> str:
    config = state.content.config
    update_stat(nation, StatKey.TECH, config.tech_gain_per_invest)
    update_stat(nation, StatKey.SCIENCE, config.science_gain_per_invest)
    completed = advance_research(
        nation,
        config.research_per_invest,
        state.content,
        auto_focus=nation.id != state.player_nation_id,
    )
    push_log(state, f"{nation.name} invests in artisans and scholars", LogType.SUCCESS)
    if completed:
        push_log(state, f"{nation.name} masters {completed}", LogType.SUCCESS)
        return f"+tech, +science; {completed} researched"
    return "+tech, +science"


def _recruit_army(state: GameState, nation: Nation, action: PlayerAction, rng: RandomGenerator) -> str:
    config = state.content.config
    territory = state.territories[action.source_territory_id]
    recruits = config.army_recruit_strength
    if nation.id == "assyria" and territory.id == "assyria_heartland":
        recruits += 2
    adjust_garrison(territory, recruits)
    push_log(state, f"{nation.name} raises fresh troops in {territory.name}")
    return f"+{recruits} strength in {territory.name}"


def _collect_taxes(state: GameState, nation: Nation, action: PlayerAction, rng: RandomGenerator) -> str:
    config = state.content.config
    intake = config.economy_gain_taxes + 2 * len(controlled_territories(state, nation.id))
    adjust_treasury(nation, intake)
    update_stat(nation, StatKey.ECONOMY, 2)
    update_stat(nation, StatKey.CRIME, config.crime_gain_taxes)
    if nation.id == "harappa":
        update_stat(nation, StatKey.ECONOMY, 2)
    if nation.id == "carthage":
        update_stat(nation, StatKey.INFLUENCE, 1)
    if nation.id == "rome" and nation.stat(StatKey.SUPPORT) < 65:
        update_stat(nation, StatKey.CRIME, 2)
    push_log(state, f"{nation.name} levies tribute across its realm", LogType.WARNING)
    return f"+{intake} treasury"


def _pass_law(state: GameState, nation: Nation, action: PlayerAction, rng: RandomGenerator) -> Optional[str]:
    config = state.content.config
    if nation.id == "carthage" and nation.stat(StatKey.STABILITY) < CARTHAGE_LAW_STABILITY:
        adjust_treasury(nation, get_action_cost(nation, ActionType.PASS_LAW))
        push_notification(
            state,
            f"Carthaginian councils reject reforms below {CARTHAGE_LAW_STABILITY} stability.",
            Tone.NEGATIVE,
        )
        return None
    update_stat(nation, StatKey.LAWS, config.law_gain_pass)
    update_stat(nation, StatKey.STABILITY, config.stability_gain_pass)
    if nation.id == "egypt":
        update_stat(nation, StatKey.LAWS, 2)
    if nation.id == "rome" and nation.stat(StatKey.STABILITY) >= 70:
        update_stat(nation, StatKey.SUPPORT, 1)
    if nation.id == "scythia":
        update_stat(nation, StatKey.SUPPORT, -3)
    push_log(state, f"{nation.name} codifies new edicts")
    return "+laws, +stability"


def _spy(state: GameState, nation: Nation, action: PlayerAction, rng: RandomGenerator) -> str:
    config = state.content.config
    target = state.nations[action.target_nation_id]
    update_stat(target, StatKey.STABILITY, -config.spy_effect)
    update_stat(target, StatKey.CRIME, config.spy_crime_increase)
    push_log(state, f"{nation.name} dispatches spies into {target.name}", LogType.WARNING)
    return f"{target.name} destabilised"


def _diplomacy_offer(state: GameState, nation: Nation, action: PlayerAction, rng: RandomGenerator) -> str:
    target = state.nations[action.target_nation_id]
    effect = state.content.config.diplomacy_effect
    if nation.id == "rome":
        effect -= 1
    if nation.id == "minoa" and any(
        t.terrain is TerrainType.COASTAL for t in controlled_territories(state, target.id)
    ):
        update_stat(nation, StatKey.ECONOMY, 1)
    modify_relation(state.diplomacy, nation.id, target.id, effect)
    push_log(state, f"{nation.name} extends envoys to {target.name}", LogType.SUCCESS)
    return f"Relations improved by {effect}"


def _declare_war(state: GameState, nation: Nation, action: PlayerAction, rng: RandomGenerator) -> str:
    target = state.nations[action.target_nation_id]
    toggle_war(state.diplomacy, nation.id, target.id, True)
    update_stat(nation, StatKey.STABILITY, -state.content.config.war_stability_penalty)
    if nation.id == "akkad":
        update_stat(nation, StatKey.MILITARY, 3)
    push_notification(state, f"{nation.name} declares war on {target.name}!", Tone.NEGATIVE)
    push_log(state, f"{nation.name} declares war on {target.name}", LogType.DANGER)
    return f"War with {target.name}"


def _form_alliance(state: GameState, nation: Nation, action: PlayerAction, rng: RandomGenerator) -> str:
    target = state.nations[action.target_nation_id]
    toggle_alliance(state.diplomacy, nation.id, target.id, True)
    modify_relation(state.diplomacy, nation.id, target.id, ALLIANCE_RELATION_BONUS)
    if nation.id == "hittites":
        update_stat(nation, StatKey.STABILITY, -1)
    push_notification(state, f"{nation.name} forges an alliance with {target.name}.", Tone.POSITIVE)
    return f"Alliance with {target.name}"


def _bribe(state: GameState, nation: Nation, action: PlayerAction, rng: RandomGenerator) -> str:
    target = state.nations[action.target_nation_id]
    modify_relation(state.diplomacy, nation.id, target.id, BRIBE_RELATION_BONUS)
    update_stat(target, StatKey.CRIME, BRIBE_CRIME_INCREASE)
    push_log(state, f"{nation.name} slips tribute to {target.name}'s nobles", LogType.WARNING)
    return f"Relations eased; {target.name} crime rises"


def _suppress_crime(state: GameState, nation: Nation, action: PlayerAction, rng: RandomGenerator) -> str:
    reduction = state.content.config.crime_decay + 2
    if nation.id == "assyria":
        reduction += 2
    update_stat(nation, StatKey.CRIME, -reduction)
    update_stat(nation, StatKey.SUPPORT, -1)
    if nation.id == "harappa":
        update_stat(nation, StatKey.INFLUENCE, 2)
    if nation.id == "egypt":
        update_stat(nation, StatKey.SUPPORT, -1)
    push_log(state, f"{nation.name} cracks down on unrest", LogType.WARNING)
    return f"Crime reduced by {reduction}"


def _apply_zone_of_control(state: GameState, nation: Nation, source: Territory, target: Territory) -> None:
    config = state.content.config
    if not (_is_contested(state, source, nation.id) or _is_contested(state, target, nation.id)):
        return
    affected = [source] + ([target] if target.owner == nation.id else [])
    for territory in affected:
        adjust_supply(territory, -config.zoc_supply_penalty)
        adjust_morale(territory, -config.zoc_morale_penalty)


def _move_army(state: GameState, nation: Nation, action: PlayerAction, rng: RandomGenerator) -> str:
    config = state.content.config
    source = state.territories[action.source_territory_id]
    target = state.territories[action.target_territory_id]
    moveable = source.garrison - _move_cost(state, target)
    sent = max(1, min(moveable, config.army_move_cap))

    _apply_zone_of_control(state, nation, source, target)
    adjust_garrison(source, -sent)
    if target.owner == nation.id:
        adjust_garrison(target, sent)
        push_log(state, f"{nation.name} repositions forces into {target.name}")
        return f"Moved {sent} strength to {target.name}"

    result = resolve_combat(state, nation.id, target.owner, target.id, sent, rng, source.id)
    return f"Battle result: {result.outcome.value}"


ACTION_HANDLERS: Dict[ActionType, Handler] = {
    ActionType.INVEST_IN_TECH: _invest_in_tech,
    ActionType.RECRUIT_ARMY: _recruit_army,
    ActionType.MOVE_ARMY: _move_army,
    ActionType.COLLECT_TAXES: _collect_taxes,
    ActionType.PASS_LAW: _pass_law,
    ActionType.SPY: _spy,
    ActionType.DIPLOMACY_OFFER: _diplomacy_offer,
    ActionType.DECLARE_WAR: _declare_war,
    ActionType.FORM_ALLIANCE: _form_alliance,
    ActionType.BRIBE: _bribe,
    ActionType.SUPPRESS_CRIME: _suppress_crime,
}

_missing = set(ActionType) - set(ACTION_HANDLERS)
if _missing:
    raise RuntimeError(f"No handler registered for {sorted(a.value for a in _missing)}")


# --------------------------------------------------------------------
# Entry points
# --------------------------------------------------------------------
def apply_action(
    state: GameState,
    nation_id: str,
    action: PlayerAction,
    rng: RandomGenerator,
) -> Optional[str]:
    """Carry out one action for any nation. Returns the result message or ``None``."""
    nation = state.nations.get(nation_id)
    if nation is None:
        return None
    is_player = nation_id == state.player_nation_id

    problem = validate_action(state, nation, action)
    if problem is not None:
        logger.debug("%s: %s rejected: %s", nation_id, action.type.value, problem)
        if is_player:
            push_notification(state, problem, Tone.NEGATIVE)
        return None

    cost = get_action_cost(nation, action.type)
    if nation.treasury < cost:
        logger.debug("%s cannot afford %s (%d < %d)", nation_id, action.type.value, nation.treasury, cost)
        if is_player:
            push_notification(state, f"Insufficient treasury for {action.type.value}", Tone.NEGATIVE)
        return None
    nation.treasury -= cost

    result = ACTION_HANDLERS[action.type](state, nation, action, rng)
    refresh_armies(state)
    return result


def execute_player_action(state: GameState, action: PlayerAction, rng: RandomGenerator) -> bool:
    """
    Run one action for the human player.

    Refused once the game is over or outside the player phase, and when the
    per-turn action budget is spent. Every attempt is recorded in the replay
    log so the game can be rebuilt from its seed.
    """
    if state.phase is not Phase.PLAYER:
        return False
    state.replay.entries.append(ReplayEntry(turn=state.turn, action=action))

    if state.actions_taken >= state.content.config.max_actions_per_turn:
        push_notification(state, "No actions remaining this turn", Tone.NEGATIVE)
        return False

    result = apply_action(state, state.player_nation_id, action, rng)
    if result is None:
        return False
    state.actions_taken += 1
    tone = Tone.NEGATIVE if "fail" in result.lower() else Tone.POSITIVE
    push_notification(state, result, tone)
    return True


__all__ = [
    "ACTION_COSTS",
    "TRAIT_COST_MODIFIERS",
    "ACTION_HANDLERS",
    "get_action_cost",
    "validate_action",
    "apply_action",
    "execute_player_action",
]
