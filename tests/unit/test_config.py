"""
Tests for loading the key map from TOML documents and files.
"""

import pytest

from keynav.actions import NamedKeyAction, NavigationAction, WindowAction
from keynav.choice_map import ChoiceMap, Run, SwitchMode, named_key_command
from keynav.config import (
    DEFAULT_CONFIG,
    load_choice_map,
    load_config_file,
    load_document,
    read_config_file,
)
from keynav.error_handler_util import ConfigError
from keynav.key_grammar import parse_command


class TestLoadDocument:
    """TOML parsing."""

    def test_valid_document(self):
        document = load_document('[commands.normal]\nj = "down"\n')
        assert document == {"commands": {"normal": {"j": "down"}}}

    def test_invalid_toml_raises_config_error(self):
        with pytest.raises(ConfigError, match="Invalid configuration document"):
            load_document('[commands.normal\nj = ')

    def test_default_config_parses(self):
        document = load_document(DEFAULT_CONFIG)
        assert set(document["groups"]) == {"window", "focus"}


class TestConfigFiles:
    """Reading configuration from disk."""

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read configuration file"):
            read_config_file(tmp_path / "missing.toml")

    def test_load_config_file(self, tmp_path):
        path = tmp_path / "keys.toml"
        path.write_text('[commands.normal]\nq = "help"\n', encoding='utf-8')
        assert load_config_file(path) == {"commands": {"normal": {"q": "help"}}}

    def test_load_choice_map_from_path(self, tmp_path):
        path = tmp_path / "keys.toml"
        path.write_text('[groups]\n[commands.normal]\nq = "help"\n', encoding='utf-8')
        choice_map = load_choice_map(path=path)
        assert choice_map.resolve("normal", parse_command("q")) == Run((WindowAction.HELP,))

    def test_missing_file_falls_back_to_builtins(self, tmp_path):
        choice_map = load_choice_map(path=tmp_path / "missing.toml")
        assert choice_map == ChoiceMap()

    def test_malformed_text_falls_back_to_builtins(self):
        assert load_choice_map(text="not = [valid") == ChoiceMap()

    def test_text_takes_precedence_over_path(self, tmp_path):
        choice_map = load_choice_map(text='[groups]\n[commands.normal]\nx = "menu"\n',
                                     path=tmp_path / "missing.toml")
        assert choice_map.resolve("normal", parse_command("x")) == Run((WindowAction.MENU,))


class TestDefaultKeyMap:
    """The shipped key map."""

    @pytest.fixture
    def default_map(self):
        return load_choice_map()

    def test_modes(self, default_map):
        assert set(default_map.mode_names()) == {"normal", "window", "focus"}
        assert default_map.skipped == 0

    def test_group_bindings(self, default_map):
        assert default_map.resolve("normal", parse_command("<Cr> + w")) == SwitchMode("window")
        assert default_map.resolve("normal", parse_command("<Cr> + g")) == SwitchMode("focus")

    def test_vim_style_navigation(self, default_map):
        assert default_map.resolve("normal", parse_command("j")) == Run((NavigationAction.DOWN,))
        assert default_map.resolve("normal", parse_command("J")) == Run((NavigationAction.NEXT_ROW,))

    def test_list_binding(self, default_map):
        assert default_map.resolve("focus", parse_command("j")) == Run(
            (NavigationAction.NEXT_WINDOW, NavigationAction.DOWN))

    def test_named_keys_in_every_mode(self, default_map):
        escape = named_key_command(NamedKeyAction.ESCAPE)
        for mode in default_map.mode_names():
            assert default_map.resolve(mode, escape) == Run((NamedKeyAction.ESCAPE,))
