"""Shared fixtures for the signal tests."""

import logging

import pytest

from chainsignal import defaults
from chainsignal.dispatch import ImmediateDispatcher
from chainsignal.signal import Signal
from chainsignal.threadpool import ThreadPool


@pytest.fixture
def signal() -> Signal:
    """A signal that calls its listeners inline."""
    return Signal(dispatcher=ImmediateDispatcher(), name="test")


@pytest.fixture(autouse=True)
def _reset_defaults():
    """Undo any change to the default dispatcher, pool or logging."""
    root = logging.getLogger()
    level = root.level
    yield
    defaults.set_dispatcher(None)
    ThreadPool.shutdown()

    # Console handlers installed by init_logging
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)
    logging.getLogger("chainsignal").setLevel(logging.NOTSET)
