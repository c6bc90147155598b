from __future__ import annotations

"""Pure formulas shared by the engine and exposed to callers.

Nothing in this module touches a game state; every function takes plain
numbers or small records and returns a number or a decision.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from .diplomacy import Treaty


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (``2.5 -> 3``, ``-2.5 -> -2``)."""
    return int(math.floor(value + 0.5))


# --------------------------------------------------------------------
# Trade
# --------------------------------------------------------------------
@dataclass(frozen=True)
class TradeContext:
    influence: float = 0
    blockade: float = 0
    supply: float = 0
    treaty_modifier: float = 0
    tech_level: float = 0
    scarcity: float = 0


def calculate_trade_price(base_price: float, context: TradeContext) -> float:
    influence_factor = 1 - clamp(context.influence, 0, 100) / 200
    blockade_factor = 1 + clamp(context.blockade, 0, 1) * 0.5
    supply_factor = 1 + clamp(context.supply, 0, 1)
    treaty_factor = 1 + context.treaty_modifier
    tech_factor = 1 - clamp(context.tech_level, 0, 100) / 250
    scarcity_factor = 1 + context.scarcity
    price = (
        base_price
        * influence_factor
        * blockade_factor
        * supply_factor
        * treaty_factor
        * tech_factor
        * scarcity_factor
    )
    return round(max(0.0, price), 2)


# --------------------------------------------------------------------
# Intrigue and factions
# --------------------------------------------------------------------
def calculate_intrigue_odds(
    agent_skill: float,
    target_security: float,
    relation: float = 0,
    support: float = 50,
    blockade: float = 0,
) -> float:
    """Chance in ``[0.05, 0.95]`` that a covert operation succeeds."""
    odds = (
        0.35
        + clamp(agent_skill - target_security, -60, 60) / 120
        - clamp(relation, -100, 100) / 200
        + clamp(support - 50, -50, 50) / 200
        - blockade * 0.25
    )
    return round(clamp(odds, 0.05, 0.95), 3)


@dataclass(frozen=True)
class FactionInfluenceInput:
    base: float
    prestige: float = 0
    wonders: int = 0
    treaty_bonus: float = 0
    propaganda: float = 0
    blockades_broken: int = 0
    intrigue_victories: int = 0
    crises: int = 0


def calculate_faction_influence(data: FactionInfluenceInput) -> float:
    influence = (
        data.base
        + data.prestige * 2
        + data.wonders * 3
        + data.treaty_bonus * 1.5
        + data.propaganda
        + data.blockades_broken * 1.25
        + data.intrigue_victories * 0.75
        - data.crises * 2.5
    )
    return round(clamp(influence, 0, 100), 2)


# --------------------------------------------------------------------
# Logistics and sieges
# --------------------------------------------------------------------
def calculate_supply_penalty(
    distance: float,
    support: float,
    terrain_difficulty: float = 0,
    weather: float = 0,
    blockade: float = 0,
) -> float:
    """Fraction of fighting strength lost to overextended supply lines."""
    penalty = (
        clamp(distance * 0.06, 0, 0.4)
        + clamp((60 - support) / 200, 0, 0.25)
        + clamp(terrain_difficulty, 0, 0.2)
        + clamp(weather, 0, 0.2)
        + clamp(blockade * 0.5, 0, 0.25)
    )
    return round(clamp(penalty, 0, 0.75), 3)


def advance_siege_progress(
    current: float,
    siege_power: float,
    fortification: float,
    supply_penalty: float = 0,
) -> float:
    step = clamp(siege_power / (fortification + 5), 0.05, 0.35)
    step *= 1 - clamp(supply_penalty, 0, 0.9)
    return round(clamp(current + step, 0, 1), 3)


# --------------------------------------------------------------------
# Treaties
# --------------------------------------------------------------------
def calculate_treaty_penalty(
    existing: Sequence[Treaty],
    proposal: Treaty,
    relation: float = 0,
    rivals: Iterable[str] = (),
    recently_broken: bool = False,
) -> float:
    """Reluctance score for signing ``proposal`` given the treaties already held."""
    penalty = 0.0
    same_type = [t for t in existing if t.type == proposal.type]
    if proposal.exclusive and any(t.exclusive and t.partner != proposal.partner for t in same_type):
        penalty += 25
    if any(t.partner == proposal.partner for t in same_type):
        penalty -= 10
    penalty += 5 * sum(1 for t in same_type if t.partner != proposal.partner)
    if proposal.partner in set(rivals):
        penalty += 20
    if relation < 0:
        penalty += abs(relation) / 2
    if recently_broken:
        penalty += 15
    return round(max(0.0, penalty), 2)


# --------------------------------------------------------------------
# Technology tree
# --------------------------------------------------------------------
DEFAULT_TECH_TREE: Dict[str, List[str]] = {
    "BronzeWorking": [],
    "Irrigation": [],
    "TradeCaravans": ["Irrigation"],
    "SiegeEngineering": ["BronzeWorking"],
    "NavalLogistics": ["BronzeWorking"],
    "IronWorking": ["BronzeWorking"],
    "Mathematics": ["BronzeWorking"],
    "Astronomy": ["Mathematics"],
    "SiegeMasters": ["SiegeEngineering", "IronWorking"],
    "NavalDominance": ["NavalLogistics", "Mathematics"],
    "ImperialBureaucracy": ["TradeCaravans"],
}


def resolve_prerequisites(
    tech: str,
    tree: Mapping[str, Sequence[str]] = DEFAULT_TECH_TREE,
    visited: Optional[Set[str]] = None,
    stack: Optional[Set[str]] = None,
) -> List[str]:
    """Every transitive prerequisite of ``tech``, each listed once, parents first.

    ``stack`` holds the techs on the current path so a cyclic tree ends the
    walk instead of recursing forever.
    """
    visited = set() if visited is None else visited
    stack = set() if stack is None else stack
    if tech in stack:
        return []
    stack.add(tech)
    resolved: List[str] = []
    for requirement in tree.get(tech, []):
        if requirement in visited:
            continue
        visited.add(requirement)
        resolved.append(requirement)
        resolved.extend(resolve_prerequisites(requirement, tree, visited, stack))
    stack.discard(tech)
    return resolved


def get_missing_tech_prerequisites(
    tech: str,
    researched: Iterable[str],
    tree: Mapping[str, Sequence[str]] = DEFAULT_TECH_TREE,
) -> List[str]:
    done = set(researched)
    return [t for t in resolve_prerequisites(tech, tree) if t not in done]


def can_research_tech(
    tech: str,
    researched: Iterable[str],
    tree: Mapping[str, Sequence[str]] = DEFAULT_TECH_TREE,
) -> bool:
    done = set(researched)
    if tech not in tree or tech in done:
        return False
    return not get_missing_tech_prerequisites(tech, done, tree)


# --------------------------------------------------------------------
# Ironman
# --------------------------------------------------------------------
IRONMAN_ACTIONS = ("autoSave", "manualSave", "reload", "undo", "enableCheats")


def is_ironman_action_allowed(ironman: bool, action: str, has_auto_save: bool = False) -> bool:
    """Whether a session-level operation is permitted under the ironman rules."""
    if not ironman:
        return True
    if action == "autoSave":
        return True
    if action == "reload":
        return has_auto_save
    return False


__all__ = [
    "clamp",
    "round_half_up",
    "TradeContext",
    "calculate_trade_price",
    "calculate_intrigue_odds",
    "FactionInfluenceInput",
    "calculate_faction_influence",
    "calculate_supply_penalty",
    "advance_siege_progress",
    "calculate_treaty_penalty",
    "DEFAULT_TECH_TREE",
    "resolve_prerequisites",
    "get_missing_tech_prerequisites",
    "can_research_tech",
    "IRONMAN_ACTIONS",
    "is_ironman_action_allowed",
]
