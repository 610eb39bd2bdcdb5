#!/usr/bin/env python3

"""
A connection between a signal and one listener.

Connections are the nodes of their signal's listener list.  The list runs
from the most recently connected listener (the head) to the oldest.  Each
node holds a strong reference to the node after it, and weak references to
the node before it and to the signal itself, so dropping a signal frees the
whole list.
"""

# © Stuart Longland VK4MSL
# SPDX-License-Identifier: GPL-2.0-or-later

import weakref

from .errors import SignalDeletedError


class Connection(object):
    """
    Handle for one listener's subscription to a signal.  These are created
    by ``Signal.connect`` and ``Signal.once``, never directly.
    """

    # Invocations go through the signal's dispatcher
    DISPATCHED = True

    def __init__(self, signal, callback, oneshot=False):
        self._signal = weakref.ref(signal)
        self._lock = signal.lock
        self._callback = callback
        self._oneshot = oneshot
        self._connected = False
        self._next = None
        self._prev = None
        self._link_seq = None

    @property
    def callback(self):
        return self._callback

    @property
    def oneshot(self):
        return self._oneshot

    @property
    def signal(self):
        """
        Return the signal this connection belongs to, or ``None`` if the
        signal no longer exists.
        """
        return self._signal()

    @property
    def connected(self):
        return self._connected

    @property
    def next(self):
        return self._next

    @property
    def prev(self):
        if self._prev is None:
            return None
        return self._prev()

    def disconnect(self):
        """
        Stop this listener receiving any further fires.  Does nothing if
        already disconnected.
        """
        with self._lock:
            if not self._connected:
                return

            self._unlink()

    def reconnect(self):
        """
        Re-attach a disconnected listener.  It goes to the head of the list,
        so it is the first to be called on the next fire.  Does nothing if
        already connected.
        """
        signal = self.signal
        if signal is None:
            raise SignalDeletedError()

        with self._lock:
            if self._connected:
                return

            if signal.deleted:
                raise SignalDeletedError(signal)

            self._link(signal)

    def _link(self, signal):
        # Caller holds the lock
        head = signal._head
        self._prev = None
        self._next = head
        if head is not None:
            head._prev = weakref.ref(self)

        signal._head = self
        self._connected = True
        self._link_seq = signal._link_count
        signal._link_count += 1

    def _unlink(self):
        # Caller holds the lock.  self._next is left alone so that a fire
        # currently stopped on this node can still find the rest of the list.
        prev = self.prev
        next_ = self._next

        if prev is not None:
            prev._next = next_
        else:
            signal = self.signal
            if (signal is not None) and (signal._head is self):
                signal._head = next_

        if next_ is not None:
            next_._prev = self._prev

        self._prev = None
        self._connected = False

    def _claim(self, link_limit):
        """
        Return the callback to invoke for a fire reaching this node, or
        ``None`` to skip it.  ``link_limit`` is the signal's link count when
        the fire started; nodes linked since then are skipped.  One-shot
        connections are disconnected here.  Caller holds the lock.
        """
        if not self._connected:
            return None

        if self._link_seq >= link_limit:
            return None

        if self._oneshot:
            self._unlink()

        return self._callback

    def __repr__(self):
        return "<%s %r%s %s>" % (
            self.__class__.__name__,
            self._callback,
            " oneshot" if self._oneshot else "",
            "connected" if self._connected else "disconnected",
        )


class WaitConnection(Connection):
    """
    Temporary connection behind ``Signal.wait``.  It only ever hands the
    fire's arguments to a waiting caller, which never blocks, so it is called
    straight from ``fire`` rather than queued behind other listeners.
    """

    DISPATCHED = False

    def __init__(self, signal, callback):
        super().__init__(signal, callback, oneshot=True)
