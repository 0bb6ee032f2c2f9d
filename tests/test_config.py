"""
Unit tests for configuration loading.
"""

import json

import pytest

from i3_autosplit.config import DEFAULT_QUEUE_SIZE, AutosplitConfig, load_config
from i3_autosplit.errors import ConfigError, ErrorCode
from i3_autosplit.split_heuristic import TERMINAL_NAMES


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "autosplit.json"


class TestLoadConfig:

    def test_missing_file_uses_defaults(self, config_file):
        config = load_config(config_file)

        assert config.terminal_names == TERMINAL_NAMES
        assert config.queue_size == DEFAULT_QUEUE_SIZE
        assert config.socket_path is None

    def test_valid_file(self, config_file):
        config_file.write_text(json.dumps({
            "terminal_names": ["foot", "kitty"],
            "queue_size": 4,
            "socket_path": "/run/user/1000/sway-ipc.sock",
        }))

        config = load_config(config_file)

        assert config.terminal_names == frozenset({"foot", "kitty"})
        assert config.queue_size == 4
        assert config.socket_path == "/run/user/1000/sway-ipc.sock"

    def test_malformed_json(self, config_file):
        config_file.write_text('{"queue_size": ')

        with pytest.raises(ConfigError) as exc_info:
            load_config(config_file)

        assert exc_info.value.code == ErrorCode.CONFIG_LOAD_FAILED
        assert exc_info.value.context == {"path": str(config_file)}

    def test_non_object_root(self, config_file):
        config_file.write_text('["Alacritty"]')

        with pytest.raises(ConfigError) as exc_info:
            load_config(config_file)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID

    @pytest.mark.parametrize("data", [
        {"queue_size": 0},
        {"queue_size": "many"},
        {"terminal_names": []},
        {"terminal_names": ["  "]},
    ])
    def test_invalid_values(self, config_file, data):
        config_file.write_text(json.dumps(data))

        with pytest.raises(ConfigError) as exc_info:
            load_config(config_file)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID


class TestOverrides:

    def test_none_keeps_values(self):
        config = AutosplitConfig(queue_size=3).with_overrides()

        assert config.queue_size == 3
        assert config.terminal_names == TERMINAL_NAMES

    def test_overrides_applied(self):
        config = AutosplitConfig().with_overrides(
            terminal_names=["foot"], queue_size=20, socket_path="/tmp/i3.sock"
        )

        assert config.terminal_names == frozenset({"foot"})
        assert config.queue_size == 20
        assert config.socket_path == "/tmp/i3.sock"

    def test_invalid_override(self):
        with pytest.raises(ConfigError) as exc_info:
            AutosplitConfig().with_overrides(queue_size=-1)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID
