from __future__ import annotations

"""Diplomacy matrix: relation scores, wars, alliances and blockades."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set

from .settings import RELATION_MAX, RELATION_MIN


@dataclass
class DiplomacyState:
    """Bilateral standing between every pair of nations.

    ``relations`` is a full square matrix kept symmetric. Wars, alliances and
    blockades are keyed by :func:`relation_key` so the order of the two
    nation ids never matters.
    """

    relations: Dict[str, Dict[str, int]] = field(default_factory=dict)
    wars: Set[str] = field(default_factory=set)
    alliances: Set[str] = field(default_factory=set)
    blockades: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Treaty:
    """A signed agreement between two nations."""

    type: str
    partner: str
    exclusive: bool = False


def relation_key(a: str, b: str) -> str:
    first, second = sorted((a, b))
    return f"{first}|{second}"


def split_key(key: str) -> List[str]:
    return key.split("|")


def ensure_relation_matrix(diplomacy: DiplomacyState, nation_ids: Iterable[str]) -> None:
    """Fill in a zero score for every missing ordered pair of distinct nations."""
    ids = list(nation_ids)
    for a in ids:
        row = diplomacy.relations.setdefault(a, {})
        for b in ids:
            if a != b:
                row.setdefault(b, 0)


def get_relation(diplomacy: DiplomacyState, a: str, b: str) -> int:
    return diplomacy.relations.get(a, {}).get(b, 0)


def modify_relation(diplomacy: DiplomacyState, a: str, b: str, delta: float) -> int:
    """Shift the relation between ``a`` and ``b`` on both sides of the matrix."""
    value = get_relation(diplomacy, a, b) + delta
    value = int(max(RELATION_MIN, min(RELATION_MAX, value)))
    diplomacy.relations.setdefault(a, {})[b] = value
    diplomacy.relations.setdefault(b, {})[a] = value
    return value


def is_at_war(diplomacy: DiplomacyState, a: str, b: str) -> bool:
    return relation_key(a, b) in diplomacy.wars


def is_allied(diplomacy: DiplomacyState, a: str, b: str) -> bool:
    return relation_key(a, b) in diplomacy.alliances


def toggle_war(diplomacy: DiplomacyState, a: str, b: str, active: bool) -> None:
    key = relation_key(a, b)
    if active:
        diplomacy.wars.add(key)
        diplomacy.alliances.discard(key)
    else:
        diplomacy.wars.discard(key)


def toggle_alliance(diplomacy: DiplomacyState, a: str, b: str, active: bool) -> None:
    key = relation_key(a, b)
    if active:
        diplomacy.alliances.add(key)
        diplomacy.wars.discard(key)
    else:
        diplomacy.alliances.discard(key)


def wars_involving(diplomacy: DiplomacyState, nation_id: str) -> List[str]:
    """Return the ids of every nation currently at war with ``nation_id``."""
    enemies: List[str] = []
    for key in sorted(diplomacy.wars):
        sides = split_key(key)
        if nation_id in sides:
            enemies.extend(side for side in sides if side != nation_id)
    return enemies


def allies_of(diplomacy: DiplomacyState, nation_id: str) -> Set[str]:
    allies: Set[str] = set()
    for key in diplomacy.alliances:
        sides = split_key(key)
        if nation_id in sides:
            allies.update(side for side in sides if side != nation_id)
    return allies


def set_blockade(diplomacy: DiplomacyState, a: str, b: str, severity: float) -> float:
    """Record a blockade between two nations. A severity of zero lifts it."""
    value = max(0.0, min(1.0, severity))
    key = relation_key(a, b)
    if value == 0:
        diplomacy.blockades.pop(key, None)
    else:
        diplomacy.blockades[key] = value
    return value


def get_blockade_severity(diplomacy: DiplomacyState, a: str, b: str) -> float:
    return diplomacy.blockades.get(relation_key(a, b), 0.0)


def strongest_blockade(diplomacy: DiplomacyState, nation_id: str) -> float:
    """Highest blockade severity affecting ``nation_id``."""
    return max(
        (value for key, value in diplomacy.blockades.items() if nation_id in split_key(key)),
        default=0.0,
    )


__all__ = [
    "DiplomacyState",
    "Treaty",
    "relation_key",
    "ensure_relation_matrix",
    "get_relation",
    "modify_relation",
    "is_at_war",
    "is_allied",
    "toggle_war",
    "toggle_alliance",
    "wars_involving",
    "allies_of",
    "set_blockade",
    "get_blockade_severity",
    "strongest_blockade",
]
