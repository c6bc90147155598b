from __future__ import annotations

"""Random turn events."""

from typing import List

from .models import (
    GameState,
    LogType,
    Tone,
    StatKey,
    adjust_treasury,
    controlled_territories,
    push_log,
    push_notification,
    update_stat,
)
from .rng import RandomGenerator

SCHOLAR_LOYALTY_GAIN = 5


class Event:
    """Base class for weighted turn events."""

    name: str = "event"
    weight: int = 1
    harmful: bool = False

    def describe(self, nation_name: str) -> str:
        raise NotImplementedError

    def apply(self, state: GameState, nation_id: str, rng: RandomGenerator) -> None:
        raise NotImplementedError


class BountifulHarvest(Event):
    name = "bountifulHarvest"
    weight = 3

    def describe(self, nation_name: str) -> str:
        return f"Bountiful harvest boosts {nation_name}'s granaries"

    def apply(self, state: GameState, nation_id: str, rng: RandomGenerator) -> None:
        nation = state.nations[nation_id]
        update_stat(nation, StatKey.ECONOMY, 3)
        update_stat(nation, StatKey.STABILITY, 2)


class Drought(Event):
    name = "drought"
    weight = 2
    harmful = True

    def describe(self, nation_name: str) -> str:
        return f"Drought grips {nation_name}"

    def apply(self, state: GameState, nation_id: str, rng: RandomGenerator) -> None:
        nation = state.nations[nation_id]
        update_stat(nation, StatKey.ECONOMY, -4)
        update_stat(nation, StatKey.STABILITY, -2)
        # Harappa depends on the river floods, Shang granaries attract bandits
        if nation_id == "harappa":
            update_stat(nation, StatKey.ECONOMY, -2)
        if nation_id == "shang":
            update_stat(nation, StatKey.CRIME, 1)


class BorderRaid(Event):
    name = "borderRaid"
    weight = 3
    harmful = True

    def describe(self, nation_name: str) -> str:
        return f"Border raid tests {nation_name}'s patrols"

    def apply(self, state: GameState, nation_id: str, rng: RandomGenerator) -> None:
        nation = state.nations[nation_id]
        update_stat(nation, StatKey.STABILITY, -3)
        tiles = controlled_territories(state, nation_id)
        if tiles:
            tile = tiles[int(rng.next() * len(tiles))]
            tile.unrest += 5
            tile.garrison = max(1, tile.garrison - 1)


class Festival(Event):
    name = "festival"
    weight = 2

    def describe(self, nation_name: str) -> str:
        return f"{nation_name} hosts lavish festivals"

    def apply(self, state: GameState, nation_id: str, rng: RandomGenerator) -> None:
        nation = state.nations[nation_id]
        update_stat(nation, StatKey.SUPPORT, 4)
        update_stat(nation, StatKey.STABILITY, 2)
        adjust_treasury(nation, -3)


class ScholarFind(Event):
    name = "scholarFind"
    weight = 2

    def describe(self, nation_name: str) -> str:
        return f"A brilliant scholar advances {nation_name}'s sciences"

    def apply(self, state: GameState, nation_id: str, rng: RandomGenerator) -> None:
        nation = state.nations[nation_id]
        update_stat(nation, StatKey.SCIENCE, 4)
        update_stat(nation, StatKey.TECH, 2)
        for character in nation.characters:
            if character.expertise == "science":
                character.loyalty = min(100, character.loyalty + SCHOLAR_LOYALTY_GAIN)
                break


# Declaration order is the order of the cumulative weight scan.
ALL_EVENTS: List[Event] = [
    BountifulHarvest(),
    Drought(),
    BorderRaid(),
    Festival(),
    ScholarFind(),
]


def pick_event(rng: RandomGenerator, pool: List[Event] = ALL_EVENTS) -> Event:
    """Weighted pick: the first event whose cumulative weight reaches the roll."""
    total = sum(event.weight for event in pool)
    roll = rng.next() * total
    cumulative = 0
    for event in pool:
        cumulative += event.weight
        if roll <= cumulative:
            return event
    return pool[0]


def apply_turn_events(state: GameState, rng: RandomGenerator) -> None:
    """
    Roll the event pool for every nation.

    The player always gets an event. Each AI nation first draws once and only
    suffers an event when that draw beats ``ai_event_threshold``.
    """
    threshold = state.content.config.ai_event_threshold
    for nation in state.nations.values():
        is_player = nation.id == state.player_nation_id
        if not is_player and rng.next() <= threshold:
            continue
        event = pick_event(rng)
        event.apply(state, nation.id, rng)
        description = event.describe(nation.name)
        push_log(state, description, LogType.WARNING if event.harmful else LogType.INFO)
        if is_player:
            state.queued_events.append(event.name)
            push_notification(state, description, Tone.NEGATIVE if event.harmful else Tone.POSITIVE)


__all__ = [
    "Event",
    "BountifulHarvest",
    "Drought",
    "BorderRaid",
    "Festival",
    "ScholarFind",
    "ALL_EVENTS",
    "pick_event",
    "apply_turn_events",
]
