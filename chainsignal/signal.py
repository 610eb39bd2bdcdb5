#!/usr/bin/env python3

"""
A signal: a list of listeners that can all be called with the same arguments
in one go.

Listeners are called most-recently-connected first.  Each call is handed to
the signal's dispatcher, so ``fire`` returns without waiting for any of them
and one failing listener does not stop the rest.

The list may be changed while a fire is walking it, including by the
listeners themselves.  A listener that disconnects itself has already been
reached and is not called twice.  A listener connected, or reconnected,
during a fire lands at the head, behind the walk, and is first called on
the next fire.
"""

# © Stuart Longland VK4MSL
# SPDX-License-Identifier: GPL-2.0-or-later

import asyncio
import enum
import threading
from collections import namedtuple
from concurrent.futures import Future, InvalidStateError
from functools import partial

from . import defaults
from .connection import Connection, WaitConnection
from .errors import SignalDeletedError


# What a waiting caller gets back from a fire
Emission = namedtuple("Emission", ["args", "kwargs"])


class SignalState(enum.Enum):
    ACTIVE = "active"
    DELETED = "deleted"


def _resume_thread(future, *args, **kwargs):
    try:
        future.set_result(Emission(args, kwargs))
    except InvalidStateError:
        # Waiter gave up
        pass


def _resume_task(loop, future, *args, **kwargs):
    try:
        loop.call_soon_threadsafe(
            _set_task_result, future, Emission(args, kwargs)
        )
    except RuntimeError:
        # Loop is closed, nobody left to resume
        pass


def _set_task_result(future, result):
    if not future.done():
        future.set_result(result)


class Signal(object):
    def __init__(self, dispatcher=None, name=None, log=None):
        self._lock = threading.RLock()
        self._head = None
        self._link_count = 0
        self._state = SignalState.ACTIVE
        self._dispatcher = defaults.get_dispatcher(dispatcher)
        self._name = name
        self._log = defaults.get_logger(log, self.__class__.__module__)

    @property
    def name(self):
        return self._name

    @property
    def lock(self):
        """
        Lock guarding the listener list.
        """
        return self._lock

    @property
    def dispatcher(self):
        return self._dispatcher

    @property
    def state(self):
        return self._state

    @property
    def deleted(self):
        return self._state is SignalState.DELETED

    @property
    def head(self):
        return self._head

    @property
    def connections(self):
        """
        Return the connected listeners in the order the next fire would
        call them.
        """
        with self._lock:
            connections = []
            node = self._head
            while node is not None:
                connections.append(node)
                node = node.next

        return tuple(connections)

    def __len__(self):
        return len(self.connections)

    def __bool__(self):
        return True

    def __repr__(self):
        if self._name is None:
            return "<%s at 0x%x %s>" % (
                self.__class__.__name__,
                id(self),
                self._state.value,
            )

        return "<%s %r %s>" % (
            self.__class__.__name__,
            self._name,
            self._state.value,
        )

    def connect(self, callback):
        """
        Call ``callback`` on every fire from now on, until the returned
        connection is disconnected.
        """
        return self._connect(Connection(self, callback))

    def once(self, callback):
        """
        Call ``callback`` on the next fire only.  The connection is
        disconnected before the callback runs, so it is called at most once
        even if it fires the signal itself.  Reconnecting the returned
        connection arms it again.
        """
        return self._connect(Connection(self, callback, oneshot=True))

    def wait(self, timeout=None):
        """
        Block the calling thread until the next fire and return its
        arguments as an ``Emission``.  Without a timeout this waits forever
        if the signal never fires again.  On timeout, ``TimeoutError`` is
        raised and the next fire will not try to resume this caller.
        """
        future = Future()
        connection = self._connect(
            WaitConnection(self, partial(_resume_thread, future))
        )
        try:
            return future.result(timeout)
        finally:
            connection.disconnect()

    async def wait_async(self):
        """
        Suspend the calling task until the next fire and return its
        arguments as an ``Emission``.  Cancelling the task withdraws the
        wait.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        connection = self._connect(
            WaitConnection(self, partial(_resume_task, loop, future))
        )
        try:
            return await future
        finally:
            connection.disconnect()

    def fire(self, *args, **kwargs):
        """
        Call every connected listener with the given arguments.
        """
        with self._lock:
            self._check_active()
            node = self._head
            link_limit = self._link_count

        # A node relinked at the head mid-walk leads back over nodes
        # already reached; those are passed through but not called again.
        # Maps each reached node to the successor last taken from it.
        visited = {}
        count = 0
        while node is not None:
            with self._lock:
                next_ = node.next
                if node in visited:
                    if visited[node] is next_:
                        # Been down this way already
                        break
                    callback = None
                else:
                    callback = node._claim(link_limit)
                    next_ = node.next

                visited[node] = next_

            if callback is not None:
                if node.DISPATCHED:
                    self._dispatcher.dispatch(callback, args, kwargs)
                else:
                    callback(*args, **kwargs)
                count += 1

            node = next_

        self._log.debug("%r fired to %d listeners", self, count)

    def disconnect_all(self):
        """
        Disconnect every listener.  The connections stay valid and may be
        reconnected later.
        """
        with self._lock:
            self._check_active()
            self._disconnect_all()

    def delete(self):
        """
        Disconnect every listener and retire the signal.  Any further use
        of it raises ``SignalDeletedError``, as does reconnecting any of its
        connections.
        """
        with self._lock:
            self._check_active()
            self._disconnect_all()
            self._state = SignalState.DELETED

        self._log.debug("%r deleted", self)

    def _connect(self, connection):
        with self._lock:
            self._check_active()
            connection._link(self)

        self._log.debug("Connected %r to %r", connection, self)
        return connection

    def _disconnect_all(self):
        # Caller holds the lock
        while self._head is not None:
            self._head._unlink()

    def _check_active(self):
        if self._state is SignalState.DELETED:
            raise SignalDeletedError(self)
