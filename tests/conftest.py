"""Shared fixtures for paramkit tests."""

import logging

import pytest

from paramkit.config import reset_config
from paramkit.parameter import Parameter


class Piece:
    """Host object with plain attributes and an accessor method."""

    def __init__(self, param1=None, param2=None, owner=None):
        self.param1 = param1
        self.param2 = param2
        self._owner = owner

    def owner(self):
        return self._owner


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Every test starts from default config with no env overrides."""
    monkeypatch.delenv("PARAMKIT_INCLUDE_CAUSE", raising=False)
    monkeypatch.delenv("PARAMKIT_LOG_FAILURES", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo logging configuration done by CLI runs (basicConfig(force=True))."""
    root = logging.getLogger()
    pk = logging.getLogger("paramkit")
    saved = (root.handlers[:], root.level, pk.level)
    yield
    root.handlers[:] = saved[0]
    root.setLevel(saved[1])
    pk.setLevel(saved[2])


@pytest.fixture
def param1():
    return Parameter(name="param1")


@pytest.fixture
def piece_factory():
    return Piece
