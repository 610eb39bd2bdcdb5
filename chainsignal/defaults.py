#!/usr/bin/env python3

"""
Helper routines for setting default I/O loops, loggers and dispatchers
"""

# © Stuart Longland VK4MSL
# SPDX-License-Identifier: GPL-2.0-or-later

import logging
import asyncio
import threading

_DISPATCHER = None
_DISPATCHER_LOCK = threading.Lock()


def get_loop(loop):
    """
    If given an event loop, return it, otherwise use the running one.
    Raises ``RuntimeError`` if called outside a coroutine without a loop.
    """
    if loop is None:
        loop = asyncio.get_running_loop()

    return loop


def get_logger(log, name):
    """
    If given a logger, return it, otherwise create a new one with the name
    given.
    """
    if log is None:
        log = logging.getLogger(name)

    return log


def get_dispatcher(dispatcher):
    """
    If given a dispatcher, return it, otherwise return the process-wide
    default, creating an ``ExecutorDispatcher`` on the shared thread pool if
    none has been set.
    """
    global _DISPATCHER

    if dispatcher is not None:
        return dispatcher

    with _DISPATCHER_LOCK:
        if _DISPATCHER is None:
            from .dispatch import ExecutorDispatcher

            _DISPATCHER = ExecutorDispatcher()

        return _DISPATCHER


def set_dispatcher(dispatcher):
    """
    Replace the process-wide default dispatcher.  Passing ``None`` reverts
    to the thread pool default on next use.  Signals that already picked up
    the old default keep it.
    """
    global _DISPATCHER

    with _DISPATCHER_LOCK:
        _DISPATCHER = dispatcher
