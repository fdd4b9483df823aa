"""Tests for chatstream.settings — TOML reveal config loading."""

from pathlib import Path

import pytest

from chatstream.schemas.streaming import RevealConfig
from chatstream.settings import load_reveal_config

# Path to the config file shipped with the package
_CONFIG_DIR = Path(__file__).parent.parent / "chatstream" / "config"


class TestLoadRevealConfig:
    def test_loads_packaged_defaults(self):
        config = load_reveal_config()
        assert isinstance(config, RevealConfig)
        assert config == load_reveal_config(_CONFIG_DIR / "defaults.toml")

    def test_packaged_defaults_match_model_defaults(self):
        assert load_reveal_config(_CONFIG_DIR / "defaults.toml") == RevealConfig()

    def test_loads_custom_file(self, tmp_path):
        path = tmp_path / "reveal.toml"
        path.write_text(
            "[reveal]\npace_interval = 0.05\nchunk_size = 3\nmin_animated_length = 5\n"
        )
        config = load_reveal_config(path)
        assert config.pace_interval == 0.05
        assert config.chunk_size == 3
        assert config.min_animated_length == 5
        assert config.history_limit == 0

    def test_missing_table_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.toml"
        path.write_text("[other]\nkey = 1\n")
        assert load_reveal_config(path) == RevealConfig()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Reveal config not found"):
            load_reveal_config(tmp_path / "nope.toml")

    def test_invalid_value_raises(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("[reveal]\nchunk_size = 0\n")
        with pytest.raises(ValueError, match="Invalid \\[reveal\\] settings"):
            load_reveal_config(path)

    def test_reveal_not_a_table_raises(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text("reveal = 3\n")
        with pytest.raises(ValueError, match="must be a table"):
            load_reveal_config(path)
