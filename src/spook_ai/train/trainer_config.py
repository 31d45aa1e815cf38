"""Trainer hyperparameter loading.

The document is handed to the external trainer untouched; the only check is
that it defines the behavior this package's agents run under.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from spook_ai.config import BEHAVIOR_NAME, TRAINER_CONFIG_PATH
from spook_ai.errors import ConfigurationError


def load_trainer_config(path: str | Path = TRAINER_CONFIG_PATH, behavior_name: str = BEHAVIOR_NAME) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        document = yaml.safe_load(fh) or {}
    if not isinstance(document, dict):
        raise ConfigurationError(f"Trainer config at '{path}' must be a mapping")
    behaviors = document.get("behaviors") or {}
    if behavior_name not in behaviors:
        raise ConfigurationError(f"Trainer config at '{path}' has no behavior named '{behavior_name}'")
    return document


def behavior_summary(document: dict[str, Any], behavior_name: str = BEHAVIOR_NAME) -> dict[str, Any]:
    behavior = document["behaviors"][behavior_name]
    return {
        "trainer": behavior.get("trainer_type"),
        "max_steps": behavior.get("max_steps"),
        "time_horizon": behavior.get("time_horizon"),
    }
