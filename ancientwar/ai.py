from __future__ import annotations

"""Heuristics for computer-controlled nations.

Each AI nation carries one archetype and produces at most two actions per
turn. Candidates are always taken in territory insertion order and neighbor
list order, so the same state and generator give the same decisions.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from .diplomacy import is_allied, is_at_war
from .models import (
    ActionType,
    Archetype,
    GameState,
    Nation,
    PlayerAction,
    StatKey,
    Territory,
    controlled_territories,
)
from .rng import RandomGenerator
from .settings import AI_ACTIONS_PER_TURN

ARCHETYPE_CYCLE: Tuple[Archetype, ...] = (
    Archetype.EXPANSIONIST,
    Archetype.DEFENSIVE,
    Archetype.OPPORTUNISTIC,
)

DEFENSIVE_CRIME_LIMIT = 60
DEFENSIVE_STABILITY_FLOOR = 55
WEAK_STABILITY = 60


def assign_archetypes(nations: Iterable[Nation], player_nation_id: str) -> Dict[str, Archetype]:
    """Deal archetypes round-robin to the AI nations sorted by name."""
    ai_nations = sorted(
        (n for n in nations if n.id != player_nation_id),
        key=lambda n: n.name,
    )
    assignments: Dict[str, Archetype] = {}
    for index, nation in enumerate(ai_nations):
        archetype = ARCHETYPE_CYCLE[index % len(ARCHETYPE_CYCLE)]
        nation.archetype = archetype
        assignments[nation.id] = archetype
    return assignments


def ai_turn_order(state: GameState) -> List[Nation]:
    return sorted(
        (n for n in state.nations.values() if n.id != state.player_nation_id),
        key=lambda n: n.name,
    )


def _border_tiles(state: GameState, owned: List[Territory]) -> List[Territory]:
    return [
        t for t in owned
        if any(state.territories[n].owner != t.owner for n in t.neighbors if n in state.territories)
    ]


def _hostile_neighbors(state: GameState, nation: Nation, tile: Territory) -> List[Territory]:
    """Neighbors of ``tile`` owned by anyone other than ``nation`` or its allies."""
    return [
        state.territories[n]
        for n in tile.neighbors
        if n in state.territories
        and state.territories[n].owner != nation.id
        and not is_allied(state.diplomacy, nation.id, state.territories[n].owner)
    ]


def _expansionist(state: GameState, nation: Nation, owned: List[Territory]) -> List[PlayerAction]:
    actions: List[PlayerAction] = []
    border = _border_tiles(state, owned)

    declared: Optional[PlayerAction] = None
    for tile in border:
        for enemy in _hostile_neighbors(state, nation, tile):
            if not is_at_war(state.diplomacy, nation.id, enemy.owner):
                declared = PlayerAction(ActionType.DECLARE_WAR, target_nation_id=enemy.owner)
                break
        if declared:
            break

    if declared:
        actions.append(declared)
    else:
        for tile in border:
            targets = [
                e for e in _hostile_neighbors(state, nation, tile)
                if is_at_war(state.diplomacy, nation.id, e.owner)
            ]
            if targets:
                actions.append(PlayerAction(
                    ActionType.MOVE_ARMY,
                    source_territory_id=tile.id,
                    target_territory_id=targets[0].id,
                ))
                break

    actions.append(PlayerAction(
        ActionType.RECRUIT_ARMY,
        source_territory_id=owned[0].id if owned else None,
    ))
    return actions


def _defensive(state: GameState, nation: Nation, rng: RandomGenerator) -> List[PlayerAction]:
    if nation.stat(StatKey.CRIME) > DEFENSIVE_CRIME_LIMIT:
        primary = ActionType.SUPPRESS_CRIME
    elif nation.stat(StatKey.STABILITY) < DEFENSIVE_STABILITY_FLOOR:
        primary = ActionType.PASS_LAW
    else:
        primary = ActionType.INVEST_IN_TECH
    secondary = ActionType.COLLECT_TAXES if rng.next() > 0.5 else ActionType.INVEST_IN_TECH
    return [PlayerAction(primary), PlayerAction(secondary)]


def _opportunistic(
    state: GameState,
    nation: Nation,
    owned: List[Territory],
    rng: RandomGenerator,
) -> List[PlayerAction]:
    enemies: List[Territory] = []
    for tile in _border_tiles(state, owned):
        for enemy in _hostile_neighbors(state, nation, tile):
            if enemy not in enemies:
                enemies.append(enemy)

    primary: Optional[PlayerAction] = None
    weak = next(
        (e for e in enemies if state.nations[e.owner].stat(StatKey.STABILITY) < WEAK_STABILITY),
        None,
    )
    if weak is not None:
        # Source is the first friendly neighbor in the target's own neighbor order
        source = next(
            (
                state.territories[n]
                for n in weak.neighbors
                if n in state.territories and state.territories[n].owner == nation.id
            ),
            None,
        )
        if source is not None:
            primary = PlayerAction(
                ActionType.MOVE_ARMY,
                source_territory_id=source.id,
                target_territory_id=weak.id,
            )
    if primary is None:
        if enemies and rng.next() > 0.5:
            primary = PlayerAction(ActionType.DIPLOMACY_OFFER, target_nation_id=enemies[0].owner)
        else:
            primary = PlayerAction(ActionType.COLLECT_TAXES)

    return [primary, PlayerAction(ActionType.SPY, target_nation_id=state.player_nation_id)]


def decide_actions(state: GameState, nation: Nation, rng: RandomGenerator) -> List[PlayerAction]:
    """Return up to two actions for ``nation`` according to its archetype."""
    owned = controlled_territories(state, nation.id)
    if nation.archetype is Archetype.EXPANSIONIST:
        actions = _expansionist(state, nation, owned)
    elif nation.archetype is Archetype.DEFENSIVE:
        actions = _defensive(state, nation, rng)
    elif nation.archetype is Archetype.OPPORTUNISTIC:
        actions = _opportunistic(state, nation, owned, rng)
    else:
        actions = []
    return actions[:AI_ACTIONS_PER_TURN]


__all__ = ["ARCHETYPE_CYCLE", "assign_archetypes", "ai_turn_order", "decide_actions"]
