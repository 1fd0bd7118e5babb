import json
import logging
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from tallyterm.action import Action, parse_action
from tallyterm.keys import KeySequence, parse_key_sequence

logger = logging.getLogger(__name__)

APP_NAME = "tallyterm"

HOME = os.path.expanduser("~")

# default settings
DEFAULT_KEYBINDINGS = {
    "global": {
        "<Ctrl-c>": "Quit",
        "<Ctrl-d>": "Quit",
        "<Ctrl-z>": "Suspend",
        "<Ctrl-l>": "Refresh",
    },
    "Home": {
        "<q>": "Quit",
        "<j>": "ScheduleIncrement",
        "<k>": "ScheduleDecrement",
        "<J>": "IncrementSingle",
        "<K>": "DecrementSingle",
        "</>": "EnterInsert",
        "<?>": "ToggleShowHelp",
    },
}

Keymap = Mapping[KeySequence, Action]


class ConfigError(Exception):
    pass


def get_config_dir() -> str:
    override = os.environ.get("TALLYTERM_CONFIG")
    if override:
        return override
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(HOME, ".config")
    return os.path.join(base, APP_NAME)


def get_data_dir() -> str:
    override = os.environ.get("TALLYTERM_DATA")
    if override:
        return override
    base = os.environ.get("XDG_DATA_HOME") or os.path.join(HOME, ".local", "share")
    return os.path.join(base, APP_NAME)


@dataclass(frozen=True)
class Config:
    config_dir: str = ""
    data_dir: str = ""
    keybindings: Mapping[str, Keymap] = field(default_factory=lambda: MappingProxyType({}))

    def keymap(self, section: str) -> Keymap:
        return self.keybindings.get(section, MappingProxyType({}))


def _build_keymap(section: str, raw: Mapping[str, Any]) -> Keymap:
    keymap = {}
    for key_text, action_text in raw.items():
        if not isinstance(key_text, str) or not isinstance(action_text, str):
            raise ConfigError(f"[{section}] bindings must map strings to strings, got {key_text!r}: {action_text!r}")
        try:
            seq = parse_key_sequence(key_text)
        except ValueError as e:
            raise ConfigError(f"[{section}] bad key {key_text!r}: {e}") from e
        try:
            keymap[seq] = parse_action(action_text)
        except ValueError as e:
            raise ConfigError(f"[{section}] bad action for {key_text!r}: {e}") from e
    return MappingProxyType(keymap)


def build_keybindings(user: Optional[Mapping[str, Any]] = None) -> Mapping[str, Keymap]:
    """Merge user bindings over the defaults, section by section."""
    merged = {name: dict(bindings) for name, bindings in DEFAULT_KEYBINDINGS.items()}
    for section, bindings in (user or {}).items():
        if not isinstance(bindings, dict):
            raise ConfigError(f"keybindings.{section} must be an object")
        merged.setdefault(section, {}).update(bindings)
    return MappingProxyType({name: _build_keymap(name, b) for name, b in merged.items()})


def load_config(path: Optional[str] = None) -> Config:
    '''
    Reads `config.json` from the config dir (or `path`), if it exists:

        {"keybindings": {"Home": {"<g><g>": "IncrementSingle"}}}

    A missing file means defaults; a broken one is a ConfigError.
    '''
    config_dir = get_config_dir()
    path = path or os.path.join(config_dir, "config.json")

    data: dict = {}
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"cannot read {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top level must be an object")
        logger.info("loaded config from %s", path)
    else:
        logger.debug("no config at %s, using defaults", path)

    user_bindings = data.get("keybindings", {})
    if not isinstance(user_bindings, dict):
        raise ConfigError(f"{path}: 'keybindings' must be an object")

    return Config(
        config_dir=config_dir,
        data_dir=get_data_dir(),
        keybindings=build_keybindings(user_bindings),
    )
