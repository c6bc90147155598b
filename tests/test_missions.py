import os
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ancientwar.game import create_initial_game_state
from ancientwar.missions import evaluate_missions
from ancientwar.models import StatKey
from ancientwar.technology import advance_research, available_techs, has_tech, set_tech_focus


@pytest.fixture
def state():
    return create_initial_game_state("rome", 13)


def test_secure_homeland_rewards_treasury(state):
    rome = state.player
    treasury = rome.treasury
    completed = evaluate_missions(state)
    assert completed == ["secure_homeland"]
    assert rome.treasury == treasury + 10
    assert "regional_power" in rome.missions.active
    assert "secure_homeland" in rome.missions.completed


def test_missions_do_not_complete_twice(state):
    evaluate_missions(state)
    treasury = state.player.treasury
    assert evaluate_missions(state) == []
    assert state.player.treasury == treasury


def test_unmet_objectives_keep_mission_active(state):
    state.player.stats[StatKey.STABILITY] = 50
    assert evaluate_missions(state) == []
    assert "secure_homeland" in state.player.missions.active


def test_tech_mission_unlocks_next(state):
    rome = state.player
    rome.tech.researched.append("BronzeWorking")
    military = rome.stat(StatKey.MILITARY)
    completed = evaluate_missions(state)
    assert "age_of_bronze" in completed
    assert rome.stat(StatKey.MILITARY) == military + 3
    assert "house_of_learning" in rome.missions.active


def test_regional_power_counts_territories(state):
    rome = state.player
    evaluate_missions(state)
    state.territories["carthage_carthage"].owner = "rome"
    state.territories["carthage_numidia"].owner = "rome"
    influence = rome.stat(StatKey.INFLUENCE)
    assert "regional_power" in evaluate_missions(state)
    assert rome.stat(StatKey.INFLUENCE) == influence + 5


def test_available_techs_follow_the_tree(state):
    rome = state.player
    content = state.content
    assert available_techs(rome, content) == ["BronzeWorking", "Irrigation"]
    rome.tech.researched.append("Irrigation")
    assert "TradeCaravans" in available_techs(rome, content)
    assert "Irrigation" not in available_techs(rome, content)


def test_auto_focus_picks_first_available(state):
    carthage = state.nations["carthage"]
    assert advance_research(carthage, 12, state.content) is None
    assert carthage.tech.focus is None
    advance_research(carthage, 12, state.content, auto_focus=True)
    assert carthage.tech.focus == "BronzeWorking"
    assert carthage.tech.progress["BronzeWorking"] == 12
    assert advance_research(carthage, 24, state.content) == "BronzeWorking"
    assert has_tech(carthage, "BronzeWorking")


def test_clearing_focus(state):
    rome = state.player
    assert set_tech_focus(rome, "Irrigation", state.content)
    assert set_tech_focus(rome, None, state.content)
    assert rome.tech.focus is None
