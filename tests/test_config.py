import json

import pytest

from tallyterm.action import EnterInsert, Increment, IncrementSingle, Quit, ScheduleIncrement
from tallyterm.config import ConfigError, get_config_dir, get_data_dir, load_config
from tallyterm.keys import KeyChord, parse_key_sequence


@pytest.fixture
def cfg_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("TALLYTERM_CONFIG", str(tmp_path / "config"))
    monkeypatch.setenv("TALLYTERM_DATA", str(tmp_path / "data"))
    (tmp_path / "config").mkdir()
    return tmp_path / "config"


def test_dirs_from_env(cfg_dir, tmp_path):
    assert get_config_dir() == str(cfg_dir)
    assert get_data_dir() == str(tmp_path / "data")


def test_xdg_fallback(monkeypatch, tmp_path):
    monkeypatch.delenv("TALLYTERM_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert get_config_dir() == str(tmp_path / "tallyterm")


def test_defaults_without_file(cfg_dir):
    cfg = load_config()
    home = cfg.keymap("Home")
    assert home[(KeyChord("q"),)] == Quit()
    assert home[(KeyChord("j"),)] == ScheduleIncrement()
    assert home[(KeyChord("/"),)] == EnterInsert()
    assert cfg.keymap("global")[(KeyChord("c", ctrl=True),)] == Quit()
    assert cfg.keymap("missing") == {}


def test_user_file_overrides_and_extends(cfg_dir):
    (cfg_dir / "config.json").write_text(json.dumps({
        "keybindings": {
            "Home": {"<j>": "IncrementSingle", "<g><g>": "Increment(10)"},
        }
    }))
    home = load_config().keymap("Home")
    assert home[(KeyChord("j"),)] == IncrementSingle()
    assert home[parse_key_sequence("<g><g>")] == Increment(10)
    # untouched defaults survive
    assert home[(KeyChord("q"),)] == Quit()


def test_explicit_path(tmp_path, cfg_dir):
    path = tmp_path / "other.json"
    path.write_text(json.dumps({"keybindings": {"global": {"<Ctrl-x>": "Quit"}}}))
    cfg = load_config(str(path))
    assert cfg.keymap("global")[(KeyChord("x", ctrl=True),)] == Quit()


def test_keymaps_are_read_only(cfg_dir):
    cfg = load_config()
    with pytest.raises(TypeError):
        cfg.keymap("Home")[(KeyChord("z"),)] = Quit()
    with pytest.raises(TypeError):
        cfg.keybindings["new"] = {}


@pytest.mark.parametrize("content", [
    "{not json",
    "[]",
    json.dumps({"keybindings": []}),
    json.dumps({"keybindings": {"Home": []}}),
    json.dumps({"keybindings": {"Home": {"<j>": "Explode"}}}),
    json.dumps({"keybindings": {"Home": {"<nosuchkey>": "Quit"}}}),
    json.dumps({"keybindings": {"Home": {"<j>": 3}}}),
])
def test_bad_config_raises(cfg_dir, content):
    (cfg_dir / "config.json").write_text(content)
    with pytest.raises(ConfigError):
        load_config()
