"""Shared utility helpers."""

from __future__ import annotations

import os

from spook_ai.errors import ConfigurationError


def env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def validate_positive(name: str, value: float) -> None:
    if value <= 0:
        raise ConfigurationError(f"{name} must be > 0, got {value}")


def validate_threat_distances(*, threat_distance: float, danger_distance: float, memory_duration: float) -> None:
    validate_positive("danger_distance", danger_distance)
    validate_positive("memory_duration", memory_duration)
    if not danger_distance < threat_distance:
        raise ConfigurationError(
            "danger_distance must be smaller than threat_distance. "
            f"danger_distance={danger_distance}, threat_distance={threat_distance}"
        )


def validate_observation_size(*, declared_size: int, computed_size: int) -> None:
    if int(declared_size) != int(computed_size):
        raise ConfigurationError(
            "Observation size does not match the policy input size. "
            f"declared={declared_size}, computed={computed_size}"
        )


def validate_minimum(name: str, value: float, minimum: float) -> None:
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
