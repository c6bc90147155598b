import os
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ancientwar.diplomacy import toggle_alliance
from ancientwar.game import create_initial_game_state
from atlas.terrain import TerrainType, movement_cost, terrain_modifier
from atlas.territories import (
    TERRITORY_DEFINITIONS,
    TerritoryDefinition,
    are_adjacent,
    find_asymmetric_edges,
    validate_adjacency,
)
from atlas.visibility import Visibility, compute_visibility, refresh_visibility


def test_shipped_map_is_undirected():
    assert find_asymmetric_edges(TERRITORY_DEFINITIONS) == []
    assert len(TERRITORY_DEFINITIONS) == 23


def test_one_way_edge_is_rejected():
    broken = [
        TerritoryDefinition("a", "A", "x", TerrainType.PLAINS, ("b",)),
        TerritoryDefinition("b", "B", "y", TerrainType.PLAINS, ()),
    ]
    assert find_asymmetric_edges(broken) == [("a", "b")]
    with pytest.raises(ValueError):
        validate_adjacency(broken)


def test_terrain_tables():
    assert terrain_modifier(TerrainType.MOUNTAIN) == pytest.approx(1.1)
    assert terrain_modifier(TerrainType.COASTAL) == pytest.approx(0.95)
    assert movement_cost(TerrainType.MOUNTAIN) == 3
    assert movement_cost(TerrainType.PLAINS, 2) == 2


def test_are_adjacent():
    state = create_initial_game_state("rome", 1)
    assert are_adjacent(state.territories, "rome_latium", "rome_etruria")
    assert not are_adjacent(state.territories, "rome_etruria", "rome_campania")
    assert not are_adjacent(state.territories, "nowhere", "rome_latium")


def test_allied_territory_is_visible():
    state = create_initial_game_state("rome", 1)
    assert state.player_view()["shang_anyang"] is Visibility.HIDDEN
    toggle_alliance(state.diplomacy, "rome", "shang", True)
    refresh_visibility(state)
    assert state.player_view()["shang_anyang"] is Visibility.VISIBLE


def test_lost_sight_becomes_fog():
    state = create_initial_game_state("rome", 1)
    previous = compute_visibility("rome", state.territories)
    assert previous["carthage_carthage"] is Visibility.VISIBLE
    state.territories["rome_campania"].owner = "carthage"
    view = compute_visibility("rome", state.territories, previous=previous)
    assert view["carthage_carthage"] is Visibility.FOGGED
    assert view["rome_campania"] is Visibility.VISIBLE
    assert view["shang_anyang"] is Visibility.HIDDEN


def test_every_nation_has_a_view():
    state = create_initial_game_state("rome", 1)
    assert set(state.visibility) == set(state.nations)
    assert state.visibility["shang"]["shang_anyang"] is Visibility.VISIBLE
