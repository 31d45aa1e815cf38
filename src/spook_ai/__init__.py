"""Evader agent core for pursuit/evasion reinforcement-learning episodes."""

__version__ = "0.1.0"
