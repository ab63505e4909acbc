"""Test configuration for pytest.

Ensure the repository root is on sys.path so tests can import the `src` package
(and `run.py`) without needing PYTHONPATH set externally.
"""
import os
import sys

import pytest

# Compute project root: two directories above this file (src/tests -> src -> project root)
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from src.core.cache import CacheConfig  # noqa: E402


@pytest.fixture
def default_config():
    # 64 elements, 4 per line, 8 direct-mapped lines -> 8 sets
    return CacheConfig(array_size=64, line_size=4, cache_lines=8, associativity=1)


@pytest.fixture
def two_way_config():
    # 4 lines, 2 ways -> 2 sets, one element per line
    return CacheConfig(array_size=64, line_size=1, cache_lines=4, associativity=2)
