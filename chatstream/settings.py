"""Reveal configuration loader.

Loads RevealConfig from the ``[reveal]`` table of a TOML file. Without an
explicit path the packaged defaults.toml is used, and built-in defaults
apply if that file is absent.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import ValidationError

from chatstream.schemas.streaming import RevealConfig

# Default config directory relative to the chatstream package
_CONFIG_DIR = Path(__file__).parent / "config"


def load_reveal_config(config_path: Path | None = None) -> RevealConfig:
    """Load reveal settings from a TOML file.

    Args:
        config_path: Path to a TOML file with a ``[reveal]`` table.
            Defaults to chatstream/config/defaults.toml.

    Returns:
        RevealConfig with values from the file, defaults elsewhere.

    Raises:
        FileNotFoundError: If an explicit config path does not exist.
        ValueError: If the ``[reveal]`` table is malformed.
    """
    if config_path is None:
        path = _CONFIG_DIR / "defaults.toml"
        if not path.exists():
            return RevealConfig()
    else:
        path = config_path
        if not path.exists():
            raise FileNotFoundError(f"Reveal config not found: {path}")

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    reveal_section = raw.get("reveal", {})
    if not isinstance(reveal_section, dict):
        raise ValueError(f"[reveal] in {path} must be a table")

    try:
        return RevealConfig(**reveal_section)
    except ValidationError as e:
        raise ValueError(f"Invalid [reveal] settings in {path}: {e}") from e
