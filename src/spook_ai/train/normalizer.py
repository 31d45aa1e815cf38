"""Running observation normalization for raw, unscaled observation blocks."""

from __future__ import annotations

import torch

from spook_ai.config import OBS_NORM_EPS


class RunningObservationNormalizer:
    """Numerically stable running mean/std normalization for fixed-size observations."""

    def __init__(self, size: int, eps: float = OBS_NORM_EPS):
        self.size = int(size)
        self.eps = float(eps)
        self.count = 0
        self.mean = torch.zeros(self.size, dtype=torch.float64)
        self.m2 = torch.zeros(self.size, dtype=torch.float64)

    def _as_tensor(self, observation: list[float]) -> torch.Tensor:
        x = torch.as_tensor(observation, dtype=torch.float64)
        if x.numel() != self.size:
            raise ValueError(f"Expected observation of size {self.size}, got {x.numel()}")
        return x

    def update(self, observation: list[float]) -> None:
        x = self._as_tensor(observation)
        self.count += 1
        delta = x - self.mean
        self.mean += delta / float(self.count)
        delta2 = x - self.mean
        self.m2 += delta * delta2

    @property
    def variance(self) -> torch.Tensor:
        if self.count > 1:
            return self.m2 / float(self.count - 1)
        return torch.zeros(self.size, dtype=torch.float64)

    def normalize(self, observation: list[float]) -> list[float]:
        x = self._as_tensor(observation)
        std = torch.sqrt(self.variance + self.eps)
        normalized = (x - self.mean) / std
        return [float(value) for value in normalized.tolist()]

    def __call__(self, observation: list[float], update_stats: bool = True) -> list[float]:
        if update_stats:
            self.update(observation)
        return self.normalize(observation)
