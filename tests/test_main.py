import os
import sys
import json
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

import main
from ancientwar.rng import rng_from_string


def test_word_seeds_are_hashed():
    assert main.parse_seed("42") == 42
    assert main.parse_seed("carthago") == rng_from_string("carthago").get_state()
    assert main.parse_seed("carthago") == main.parse_seed("carthago")


def test_autoplay_writes_a_save(tmp_path, capsys):
    target = tmp_path / "final.json"
    code = main.main(["--seed", "8", "--turns", "2", "--save-file", str(target)])
    assert code == 0
    assert target.exists()
    payload = json.loads(target.read_text())
    assert payload["playerNationId"] == "rome"
    assert "Rome" in capsys.readouterr().out


def test_same_seed_gives_same_save(tmp_path):
    first = tmp_path / "a.json"
    second = tmp_path / "b.json"
    main.main(["--seed", "hannibal", "--turns", "3", "--save-file", str(first)])
    main.main(["--seed", "hannibal", "--turns", "3", "--save-file", str(second)])
    assert first.read_text() == second.read_text()


def test_missing_load_file_fails(tmp_path):
    assert main.main(["--load-file", str(tmp_path / "missing.json")]) == 1


def test_resume_from_save(tmp_path):
    target = tmp_path / "save.json"
    main.main(["--seed", "4", "--turns", "1", "--save-file", str(target)])
    turn = json.loads(target.read_text())["turn"]
    assert main.main(["--load-file", str(target), "--turns", "1", "--save-file", str(target)]) == 0
    assert json.loads(target.read_text())["turn"] >= turn
