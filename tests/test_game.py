import os
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

import pytest

import ancientwar.persistence as persistence
from ancientwar.game import Game, IronmanViolation, create_initial_game_state, replay_game
from ancientwar.models import ActionType, Phase, PlayerAction, StatKey
from ancientwar.persistence import quick_save_state
from atlas.visibility import Visibility


@pytest.fixture
def save_files(tmp_path, monkeypatch):
    """Redirect both default save locations into a temporary directory."""
    save_file = tmp_path / "save.json"
    autosave_file = tmp_path / "autosave.json"
    monkeypatch.setattr(persistence, "SAVE_FILE", save_file)
    monkeypatch.setattr(persistence, "AUTOSAVE_FILE", autosave_file)
    return save_file, autosave_file


def play_replay_script(seed=512):
    game = Game.new("rome", seed=seed)
    game.execute(PlayerAction(ActionType.COLLECT_TAXES))
    game.execute(PlayerAction(ActionType.DIPLOMACY_OFFER, target_nation_id="carthage"))
    game.execute(PlayerAction(ActionType.RECRUIT_ARMY, source_territory_id="rome_latium"))
    game.end_turn()
    return game


def test_initial_state():
    state = create_initial_game_state("rome", 7)
    assert state.turn == 1
    assert state.phase is Phase.PLAYER
    assert state.actions_taken == 0
    assert len(state.nations) == 11
    assert len(state.territories) == 23
    assert state.log[0].message == "Rome prepares for ascendance"
    assert state.player.missions.active == ["secure_homeland", "age_of_bronze"]
    assert state.replay.seed == 7
    for a in state.nations:
        for b in state.nations:
            if a != b:
                assert state.diplomacy.relations[a][b] == 0


def test_unknown_nation_is_rejected():
    with pytest.raises(ValueError):
        create_initial_game_state("atlantis", 1)


def test_initial_visibility():
    view = create_initial_game_state("rome", 7).player_view()
    assert view["rome_latium"] is Visibility.VISIBLE
    assert view["carthage_carthage"] is Visibility.VISIBLE
    assert view["shang_anyang"] is Visibility.HIDDEN


def test_identical_seeds_and_actions_give_identical_saves():
    first = quick_save_state(play_replay_script().state)
    second = quick_save_state(play_replay_script().state)
    assert first == second


def test_replay_rebuilds_the_same_game():
    game = play_replay_script()
    game.execute(PlayerAction(ActionType.SPY, target_nation_id="atlantis"))
    game.execute(PlayerAction(ActionType.INVEST_IN_TECH))
    game.end_turn()

    state = game.state
    rebuilt = replay_game("rome", state.replay.seed, state.replay.entries)
    assert quick_save_state(rebuilt) == quick_save_state(state)


def test_undo_restores_previous_state():
    game = Game.new("rome", seed=3)
    treasury = game.state.player.treasury
    assert game.execute(PlayerAction(ActionType.COLLECT_TAXES))
    assert game.can_undo
    assert game.undo()
    assert game.state.player.treasury == treasury
    assert game.state.actions_taken == 0
    assert not game.undo()


def test_undo_history_cleared_by_end_turn():
    game = Game.new("rome", seed=3)
    game.execute(PlayerAction(ActionType.COLLECT_TAXES))
    game.end_turn()
    assert not game.can_undo


def test_ironman_blocks_undo_and_manual_save(save_files):
    game = Game.new("rome", seed=3, ironman=True)
    game.execute(PlayerAction(ActionType.COLLECT_TAXES))
    with pytest.raises(IronmanViolation):
        game.undo()
    with pytest.raises(IronmanViolation):
        game.save()


def test_ironman_reload_only_from_autosave(save_files):
    save_file, autosave_file = save_files
    game = Game.new("rome", seed=3, ironman=True)
    game.end_turn(autosave_path=autosave_file)
    assert autosave_file.exists()

    with pytest.raises(IronmanViolation):
        Game.load(autosave_file)
    resumed = Game.load(from_autosave=True)
    assert resumed.state.turn == game.state.turn
    assert resumed.ironman


def test_reload_continues_the_random_stream(save_files):
    save_file, _ = save_files
    game = Game.new("rome", seed=21)
    game.execute(PlayerAction(ActionType.COLLECT_TAXES))
    game.save()
    resumed = Game.load(save_file)

    game.end_turn()
    resumed.end_turn()
    assert quick_save_state(resumed.state) == quick_save_state(game.state)


def test_set_tech_focus_and_research():
    game = Game.new("rome", seed=5)
    assert not game.set_tech_focus("SiegeMasters")
    assert game.set_tech_focus("BronzeWorking")
    military = game.state.player.stat(StatKey.MILITARY)
    for _ in range(3):
        game.state.player.treasury = 50
        assert game.execute(PlayerAction(ActionType.INVEST_IN_TECH))
    assert "BronzeWorking" in game.state.player.tech.researched
    assert game.state.player.stat(StatKey.MILITARY) == military + 3
    assert game.state.player.tech.focus is None
