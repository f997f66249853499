"""
Pytest configuration and shared fixtures for the IMT tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides hash bindings shared by the tree tests
"""

import os
import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from imt.crypto.hashing import binary, get_hash_binding  # noqa: E402


# =============================================================================
# Hash bindings
# =============================================================================

def sum_children(children):
    """Toy n-ary hash: the sum of the children."""
    return sum(children)


def sum_pair(left, right):
    """Toy binary hash: left + right."""
    return left + right


def weighted_children(children):
    """Toy n-ary hash that depends on child order."""
    return sum((i + 1) * child for i, child in enumerate(children))


class FlakyHash:
    """Wraps a hash and raises once more than ``fail_after`` calls were made."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = 0
        self.fail_after = None

    def arm(self, fail_after: int) -> None:
        self.calls = 0
        self.fail_after = fail_after

    def __call__(self, *args):
        self.calls += 1
        if self.fail_after is not None and self.calls > self.fail_after:
            raise RuntimeError("hash backend unavailable")
        return self.inner(*args)


@pytest.fixture
def sum_hash():
    return sum_children


@pytest.fixture
def pair_sum_hash():
    return sum_pair


@pytest.fixture
def weighted_hash():
    return weighted_children


@pytest.fixture
def sha_hash():
    """n-ary SHA-256 field hash."""
    return get_hash_binding("sha256")


@pytest.fixture
def sha_pair():
    """Binary SHA-256 field hash."""
    return binary(get_hash_binding("sha256"))


@pytest.fixture
def flaky():
    return FlakyHash


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep IMT_* variables from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("IMT_"):
            monkeypatch.delenv(key, raising=False)
