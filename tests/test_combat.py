import os
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ancientwar.combat import resolve_combat
from ancientwar.game import create_initial_game_state
from ancientwar.models import CombatOutcome, StatKey
from ancientwar.rng import RandomGenerator
from atlas.visibility import Visibility


class FixedRng(RandomGenerator):
    """Generator that always returns the same draw."""

    def __init__(self, value):
        super().__init__(1)
        self.value = value

    def next(self):
        return self.value


@pytest.fixture
def state():
    return create_initial_game_state("rome", 123)


def test_seeded_battle_is_predictable(state):
    rng = RandomGenerator(42)
    battle = resolve_combat(state, "rome", "carthage", "carthage_carthage", 12, rng, "rome_latium")

    assert battle.outcome is CombatOutcome.ATTACKER_VICTORY
    assert state.territories["carthage_carthage"].owner == "rome"
    assert battle.attacker_loss == 5
    assert battle.defender_loss == 3
    assert battle.siege_progress == 0
    assert battle.attacker_supply_penalty > 0
    assert state.battle_reports[0] == battle


def test_capture_consequences(state):
    resolve_combat(state, "rome", "carthage", "carthage_carthage", 12, RandomGenerator(42), "rome_latium")
    captured = state.territories["carthage_carthage"]

    assert captured.garrison == 7
    assert captured.morale == 55
    assert captured.supply == 50
    assert state.nations["rome"].stat(StatKey.STABILITY) == 68
    assert state.nations["carthage"].stat(StatKey.STABILITY) == 59
    assert state.territories["rome_latium"].supply == 80 - 14
    assert any(a.territory_id == "carthage_carthage" for a in state.nations["rome"].armies)
    assert not any(a.territory_id == "carthage_carthage" for a in state.nations["carthage"].armies)
    assert state.player_view()["carthage_carthage"] is Visibility.VISIBLE


def test_same_seed_same_battle():
    first = create_initial_game_state("rome", 1)
    second = create_initial_game_state("rome", 1)
    a = resolve_combat(first, "rome", "carthage", "carthage_carthage", 6, RandomGenerator(9), "rome_campania")
    b = resolve_combat(second, "rome", "carthage", "carthage_carthage", 6, RandomGenerator(9), "rome_campania")
    assert a == b


def test_defender_holds_keeps_a_garrison(state):
    territory = state.territories["carthage_carthage"]
    territory.garrison = 40
    territory.siege_progress = 20
    rome_stability = state.nations["rome"].stat(StatKey.STABILITY)

    battle = resolve_combat(state, "rome", "carthage", "carthage_carthage", 2, FixedRng(0.5), "rome_campania")

    assert battle.outcome is CombatOutcome.DEFENDER_HOLDS
    assert territory.owner == "carthage"
    assert territory.garrison >= 1
    assert territory.siege_progress == 8
    assert state.nations["rome"].stat(StatKey.STABILITY) == rome_stability - 4
    assert battle.attacker_loss <= 2


def test_losses_are_at_least_one(state):
    battle = resolve_combat(state, "rome", "carthage", "carthage_carthage", 1, FixedRng(0.5), "rome_campania")
    assert battle.attacker_loss == 1
    assert battle.defender_loss >= 1


def test_attack_without_source_uses_reduced_morale(state):
    battle = resolve_combat(state, "rome", "carthage", "carthage_carthage", 4, FixedRng(0.5))
    assert battle.attacker_supply_penalty > 0
    assert state.territories["rome_latium"].supply == 80
    assert battle.attacker_power > 0


def test_stalemate_completing_the_siege_captures(state):
    for nation_id in ("rome", "carthage"):
        for key in (StatKey.MILITARY, StatKey.TECH, StatKey.SUPPORT):
            state.nations[nation_id].stats[key] = 0
    source = state.territories["rome_campania"]
    source.morale = 80
    source.supply = 80
    territory = state.territories["carthage_carthage"]
    territory.garrison = 10
    territory.morale = 80
    territory.supply = 80
    territory.siege_progress = 98

    # 16 against 10 * (1 + 98 / 150): too close to be decisive
    battle = resolve_combat(state, "rome", "carthage", "carthage_carthage", 16, FixedRng(0.5), "rome_campania")

    assert battle.outcome is CombatOutcome.ATTACKER_VICTORY
    assert battle.siege_progress == 0
    assert territory.siege_progress == 0
    assert territory.owner == "rome"
    assert territory.garrison == 8


def test_empty_garrison_still_records_a_loss(state):
    state.territories["carthage_carthage"].garrison = 0
    battle = resolve_combat(state, "rome", "carthage", "carthage_carthage", 12, RandomGenerator(42), "rome_latium")
    assert battle.defender_loss == 1
    assert state.territories["carthage_carthage"].garrison >= 0
