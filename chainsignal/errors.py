#!/usr/bin/env python3

"""
Exceptions raised by signals and their connections.
"""

# © Stuart Longland VK4MSL
# SPDX-License-Identifier: GPL-2.0-or-later


class SignalError(Exception):
    """
    Base class for all signal errors.
    """

    pass


class SignalDeletedError(SignalError):
    """
    An operation was attempted on a signal that has been deleted.
    """

    def __init__(self, signal=None):
        self.signal = signal
        if signal is None:
            super().__init__("signal is deleted")
        else:
            super().__init__("signal %r is deleted" % signal)
