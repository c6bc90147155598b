from __future__ import annotations

"""Fog of war."""

from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterable, Mapping, Optional, Set

if TYPE_CHECKING:
    from ancientwar.models import GameState


class Visibility(Enum):
    VISIBLE = "visible"
    FOGGED = "fogged"
    HIDDEN = "hidden"


def compute_visibility(
    nation_id: str,
    territories: Mapping[str, object],
    allies: Iterable[str] = (),
    previous: Optional[Mapping[str, Visibility]] = None,
) -> Dict[str, Visibility]:
    """Return the visibility of every territory for one nation.

    A territory is visible when the nation or one of its allies owns it, or
    when it borders a territory the nation owns. Territories seen before but
    no longer visible become fogged; the rest stay hidden.
    """
    friendly: Set[str] = {nation_id, *allies}
    owned = {tid for tid, t in territories.items() if getattr(t, "owner") == nation_id}
    seen: Set[str] = set(owned)
    for tid in owned:
        seen.update(getattr(territories[tid], "neighbors"))

    result: Dict[str, Visibility] = {}
    for tid, territory in territories.items():
        if tid in seen or getattr(territory, "owner") in friendly:
            result[tid] = Visibility.VISIBLE
        elif previous and previous.get(tid, Visibility.HIDDEN) is not Visibility.HIDDEN:
            result[tid] = Visibility.FOGGED
        else:
            result[tid] = Visibility.HIDDEN
    return result


def refresh_visibility(state: "GameState") -> None:
    """Recompute the fog of war for every nation on the game state."""
    from ancientwar.diplomacy import allies_of

    for nation_id in state.nations:
        state.visibility[nation_id] = compute_visibility(
            nation_id,
            state.territories,
            allies_of(state.diplomacy, nation_id),
            state.visibility.get(nation_id),
        )


def reveal(state: "GameState", nation_id: str, territory_id: str) -> None:
    view = state.visibility.setdefault(nation_id, {})
    view[territory_id] = Visibility.VISIBLE


__all__ = ["Visibility", "compute_visibility", "refresh_visibility", "reveal"]
