#!/usr/bin/env python3

"""
In-process signals: connect listeners, fire them all at once, or wait for
the next fire.
"""

# © Stuart Longland VK4MSL
# SPDX-License-Identifier: GPL-2.0-or-later

from .connection import Connection
from .dispatch import (
    Dispatcher,
    ExecutorDispatcher,
    ImmediateDispatcher,
    LoopDispatcher,
    init_dispatcher,
)
from .errors import SignalDeletedError, SignalError
from .signal import Emission, Signal, SignalState

__all__ = [
    "Connection",
    "Dispatcher",
    "Emission",
    "ExecutorDispatcher",
    "ImmediateDispatcher",
    "LoopDispatcher",
    "Signal",
    "SignalDeletedError",
    "SignalError",
    "SignalState",
    "init_dispatcher",
]
