import os
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ancientwar.game import create_initial_game_state
from ancientwar.models import SupplyState, adjust_supply, supply_state_for


@pytest.mark.parametrize(
    "supply, expected",
    [
        (100, SupplyState.SUPPLIED),
        (70, SupplyState.SUPPLIED),
        (69, SupplyState.STRAINED),
        (40, SupplyState.STRAINED),
        (39, SupplyState.EXHAUSTED),
        (0, SupplyState.EXHAUSTED),
    ],
)
def test_supply_state_thresholds(supply, expected):
    assert supply_state_for(supply) is expected
    territory = create_initial_game_state("rome", 1).territories["rome_latium"]
    territory.supply = supply
    assert territory.supply_state is expected


def test_supply_state_follows_adjustments():
    territory = create_initial_game_state("rome", 1).territories["rome_latium"]
    territory.supply = 70
    adjust_supply(territory, -1)
    assert territory.supply_state is SupplyState.STRAINED
    adjust_supply(territory, -500)
    assert territory.supply == 0
    assert territory.supply_state is SupplyState.EXHAUSTED
