import os
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ancientwar.events import (
    ALL_EVENTS,
    BorderRaid,
    BountifulHarvest,
    Drought,
    Festival,
    ScholarFind,
    apply_turn_events,
    pick_event,
)
from ancientwar.game import create_initial_game_state
from ancientwar.models import StatKey
from ancientwar.rng import RandomGenerator


class FixedRng(RandomGenerator):
    def __init__(self, value):
        super().__init__(1)
        self.value = value

    def next(self):
        return self.value


@pytest.fixture
def state():
    return create_initial_game_state("rome", 8)


def test_weighted_pick_follows_declaration_order():
    # Weights 3, 2, 3, 2, 2 over a total of 12
    assert isinstance(pick_event(FixedRng(0.0)), BountifulHarvest)
    assert isinstance(pick_event(FixedRng(0.25)), BountifulHarvest)
    assert isinstance(pick_event(FixedRng(0.4)), Drought)
    assert isinstance(pick_event(FixedRng(0.6)), BorderRaid)
    assert isinstance(pick_event(FixedRng(0.75)), Festival)
    assert isinstance(pick_event(FixedRng(0.99)), ScholarFind)


def test_every_event_has_a_unique_name():
    names = [event.name for event in ALL_EVENTS]
    assert len(names) == len(set(names))


def test_drought_hits_harappa_harder(state):
    harappa = state.nations["harappa"]
    egypt = state.nations["egypt"]
    Drought().apply(state, "harappa", RandomGenerator(1))
    Drought().apply(state, "egypt", RandomGenerator(1))
    assert harappa.stat(StatKey.ECONOMY) == 68 - 6
    assert egypt.stat(StatKey.ECONOMY) == 62 - 4


def test_border_raid_unsettles_a_territory(state):
    rome = state.player
    BorderRaid().apply(state, "rome", FixedRng(0.0))
    latium = state.territories["rome_latium"]
    assert rome.stat(StatKey.STABILITY) == 67
    assert latium.unrest == 15
    assert latium.garrison == 4


def test_festival_costs_gold(state):
    rome = state.player
    treasury = rome.treasury
    Festival().apply(state, "rome", RandomGenerator(1))
    assert rome.treasury == max(0, treasury - 3)
    assert rome.stat(StatKey.SUPPORT) == 64


def test_scholar_find_pleases_the_scholar(state):
    rome = state.player
    ScholarFind().apply(state, "rome", RandomGenerator(1))
    scholar = next(c for c in rome.characters if c.expertise == "science")
    assert scholar.loyalty == 65
    assert rome.stat(StatKey.SCIENCE) == 49


def test_player_always_gets_an_event(state):
    apply_turn_events(state, FixedRng(0.1))
    assert len(state.queued_events) == 1
    assert state.queued_events[0] == "bountifulHarvest"


def test_ai_events_skipped_below_threshold(state):
    economy = {nid: n.stat(StatKey.ECONOMY) for nid, n in state.nations.items()}
    apply_turn_events(state, FixedRng(0.5))
    for nid, nation in state.nations.items():
        if nid == "rome":
            continue
        assert nation.stat(StatKey.ECONOMY) == economy[nid]


def test_ai_events_fire_above_threshold(state):
    apply_turn_events(state, FixedRng(0.99))
    scholars = [
        c for n in state.nations.values() for c in n.characters if c.expertise == "science"
    ]
    assert all(c.loyalty == 65 for c in scholars)
