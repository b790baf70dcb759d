"""Logging setup for the API process."""
from __future__ import annotations

import logging
import logging.config
from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "logging.yaml"


def configure_logging(config_path: Path | None = None, *, level: str | None = None) -> None:
    """Load the YAML logging config, or fall back to a plain INFO setup.

    ``level`` overrides the level of the ``transfer_agent`` logger after the
    config is applied.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    if path.exists():
        with path.open("r", encoding="utf-8") as config_file:
            logging.config.dictConfig(yaml.safe_load(config_file))
    else:
        logging.basicConfig(level=logging.INFO)

    if level:
        logging.getLogger("transfer_agent").setLevel(level.upper())


__all__ = ["DEFAULT_CONFIG_PATH", "configure_logging"]
