"""Simulation package.

Exposes the Simulation class and the pattern registry at `src.simulation`.
"""
from .patterns import PATTERNS, generate
from .simulation import Simulation

__all__ = ["Simulation", "PATTERNS", "generate"]
