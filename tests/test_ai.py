import os
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from ancientwar.ai import ai_turn_order, assign_archetypes, decide_actions
from ancientwar.diplomacy import toggle_war
from ancientwar.game import create_initial_game_state
from ancientwar.models import ActionType, Archetype, StatKey
from ancientwar.rng import RandomGenerator


def test_archetypes_dealt_round_robin_by_name():
    state = create_initial_game_state("rome", 1)
    assert state.player.archetype is None
    assignments = assign_archetypes(state.nations.values(), "rome")
    assert assignments["akkad"] is Archetype.EXPANSIONIST
    assert assignments["assyria"] is Archetype.DEFENSIVE
    assert assignments["carthage"] is Archetype.OPPORTUNISTIC
    assert assignments["egypt"] is Archetype.EXPANSIONIST
    assert "rome" not in assignments
    assert state.nations["shang"].archetype is Archetype.EXPANSIONIST


def test_turn_order_skips_player():
    state = create_initial_game_state("egypt", 1)
    order = [n.id for n in ai_turn_order(state)]
    assert "egypt" not in order
    assert order == sorted(order)


def test_expansionist_declares_war_on_neighbours():
    state = create_initial_game_state("rome", 101)
    carthage = state.nations["carthage"]
    carthage.archetype = Archetype.EXPANSIONIST
    actions = decide_actions(state, carthage, RandomGenerator(5))
    assert actions[0].type is ActionType.DECLARE_WAR
    assert actions[0].target_nation_id == "rome"
    assert actions[1].type is ActionType.RECRUIT_ARMY
    assert actions[1].source_territory_id == "carthage_carthage"


def test_expansionist_at_war_marches():
    state = create_initial_game_state("rome", 101)
    carthage = state.nations["carthage"]
    carthage.archetype = Archetype.EXPANSIONIST
    for enemy in ("rome", "minoa", "egypt"):
        toggle_war(state.diplomacy, "carthage", enemy, True)
    actions = decide_actions(state, carthage, RandomGenerator(5))
    assert actions[0].type is ActionType.MOVE_ARMY
    assert actions[0].source_territory_id == "carthage_carthage"
    assert actions[0].target_territory_id == "rome_campania"


def test_defensive_suppresses_crime_under_pressure():
    state = create_initial_game_state("rome", 202)
    egypt = state.nations["egypt"]
    egypt.archetype = Archetype.DEFENSIVE
    egypt.stats[StatKey.CRIME] = 75
    actions = decide_actions(state, egypt, RandomGenerator(3))
    assert actions[0].type is ActionType.SUPPRESS_CRIME
    assert len(actions) == 2


def test_defensive_passes_laws_when_unstable():
    state = create_initial_game_state("rome", 202)
    egypt = state.nations["egypt"]
    egypt.archetype = Archetype.DEFENSIVE
    egypt.stats[StatKey.STABILITY] = 40
    actions = decide_actions(state, egypt, RandomGenerator(3))
    assert actions[0].type is ActionType.PASS_LAW


def test_opportunistic_targets_unstable_neighbours():
    state = create_initial_game_state("rome", 303)
    medes = state.nations["medes"]
    medes.archetype = Archetype.OPPORTUNISTIC
    state.nations["akkad"].stats[StatKey.STABILITY] = 45
    actions = decide_actions(state, medes, RandomGenerator(4))
    assert actions[0].type in (ActionType.MOVE_ARMY, ActionType.DIPLOMACY_OFFER)
    assert actions[1].type is ActionType.SPY
    assert actions[1].target_nation_id == "rome"


def test_opportunistic_without_weak_targets_draws():
    state = create_initial_game_state("rome", 303)
    shang = state.nations["shang"]
    shang.archetype = Archetype.OPPORTUNISTIC
    state.nations["harappa"].stats[StatKey.STABILITY] = 90
    rng = RandomGenerator(4)
    before = rng.get_state()
    actions = decide_actions(state, shang, rng)
    assert rng.get_state() != before
    assert actions[0].type in (ActionType.DIPLOMACY_OFFER, ActionType.COLLECT_TAXES)


def test_same_state_and_seed_same_decisions():
    first = create_initial_game_state("rome", 9)
    second = create_initial_game_state("rome", 9)
    for nation_id in first.nations:
        if nation_id == "rome":
            continue
        a = decide_actions(first, first.nations[nation_id], RandomGenerator(17))
        b = decide_actions(second, second.nations[nation_id], RandomGenerator(17))
        assert a == b
        assert len(a) <= 2


def test_opportunistic_source_follows_target_neighbor_order():
    state = create_initial_game_state("rome", 303)
    assyria = state.nations["assyria"]
    assyria.archetype = Archetype.OPPORTUNISTIC
    state.territories["akkad_sumer"].owner = "assyria"
    state.nations["akkad"].stats[StatKey.STABILITY] = 80
    state.nations["medes"].stats[StatKey.STABILITY] = 30

    actions = decide_actions(state, assyria, RandomGenerator(4))

    assert actions[0].type is ActionType.MOVE_ARMY
    assert actions[0].target_territory_id == "medes_zagros"
    assert actions[0].source_territory_id == "assyria_heartland"
