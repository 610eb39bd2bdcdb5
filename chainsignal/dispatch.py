#!/usr/bin/env python3

"""
Listener dispatchers.  A dispatcher is handed each listener invocation that
``Signal.fire`` produces and runs it as an independent unit of work, without
making ``fire`` wait for it to finish.

Whatever a listener raises stays inside the dispatcher: it is logged and the
remaining listeners carry on as if nothing happened.

Listeners may be coroutine functions.  The coroutine they return is run as a
task on the event loop of the thread that invoked them, or if that thread has
no running loop, to completion on a temporary one.
"""

# © Stuart Longland VK4MSL
# SPDX-License-Identifier: GPL-2.0-or-later

import asyncio
import inspect
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from . import defaults
from .registry import Registry
from .threadpool import ThreadPool


_REGISTRY = Registry(defaults={"type": "executor"})


def init_dispatcher(**kwargs):
    """
    Initialise a dispatcher from the given parameters.  ``type`` picks the
    class by name or alias, the rest are passed to the constructor.
    """
    return _REGISTRY.init_instance(**kwargs)


async def _await(awaitable):
    return await awaitable


class Dispatcher(object):
    """
    Abstract listener dispatcher.
    """

    @classmethod
    def from_cfg(cls, **config):
        return cls(**config)

    def __init__(self, log=None):
        self._log = defaults.get_logger(log, self.__class__.__module__)
        self._tasks = set()

    def dispatch(self, callback, args, kwargs):
        """
        Arrange for ``callback(*args, **kwargs)`` to be called.
        """
        raise NotImplementedError("Implement in %s" % self.__class__.__name__)

    def _run(self, callback, args, kwargs):
        try:
            result = callback(*args, **kwargs)
        except Exception:
            self._log.error("Listener %r failed", callback, exc_info=1)
            return

        if inspect.isawaitable(result):
            self._complete(callback, result)

    def _complete(self, callback, awaitable):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is None:
            try:
                asyncio.run(_await(awaitable))
            except Exception:
                self._log.error("Listener %r failed", callback, exc_info=1)
            return

        task = asyncio.ensure_future(awaitable, loop=loop)
        self._tasks.add(task)
        task.add_done_callback(partial(self._on_task_done, callback))

    def _on_task_done(self, callback, task):
        self._tasks.discard(task)
        if task.cancelled():
            self._log.debug("Listener %r was cancelled", callback)
            return

        exc = task.exception()
        if exc is not None:
            self._log.error(
                "Listener %r failed",
                callback,
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    def _dropped(self, callback, reason):
        self._log.warning("Dropping call to %r: %s", callback, reason)


@_REGISTRY.register
class ExecutorDispatcher(Dispatcher):
    """
    Submit each invocation to a ``concurrent.futures`` executor.  Given
    ``threads``, the dispatcher runs its own pool of that size, otherwise it
    uses the shared thread pool.

    A single worker thread runs listeners one at a time in the order they
    were dispatched.
    """

    ALIASES = ("executor", "threadpool")

    def __init__(self, executor=None, threads=None, log=None):
        super().__init__(log=log)
        self._own_executor = False
        if (executor is None) and (threads is not None):
            executor = ThreadPoolExecutor(
                threads, thread_name_prefix="chainsignal-dispatch"
            )
            self._own_executor = True

        self._executor = executor

    @property
    def executor(self):
        if self._executor is not None:
            return self._executor

        # Looked up each time, the shared pool may have been replaced
        return ThreadPool.get_instance()

    def shutdown(self, wait=True):
        """
        Shut down the pool if this dispatcher created it.  The shared pool
        is left alone, see ``ThreadPool.shutdown``.
        """
        if self._own_executor:
            self._executor.shutdown(wait=wait)

    def dispatch(self, callback, args, kwargs):
        try:
            self.executor.submit(self._run, callback, args, kwargs)
        except RuntimeError as e:
            # Executor has been shut down
            self._dropped(callback, e)


@_REGISTRY.register
class LoopDispatcher(Dispatcher):
    """
    Schedule each invocation on an asyncio event loop.  Safe to fire from
    any thread.

    Without ``loop``, the running loop is used, so outside a coroutine the
    loop must be given.
    """

    ALIASES = ("loop", "asyncio")

    def __init__(self, loop=None, log=None):
        super().__init__(log=log)
        try:
            self._loop = defaults.get_loop(loop)
        except RuntimeError:
            raise ValueError(
                "%s needs loop= when created outside a running event loop"
                % self.__class__.__name__
            ) from None

    @property
    def loop(self):
        return self._loop

    def dispatch(self, callback, args, kwargs):
        try:
            self._loop.call_soon_threadsafe(self._run, callback, args, kwargs)
        except RuntimeError as e:
            # Event loop is closed
            self._dropped(callback, e)


@_REGISTRY.register
class ImmediateDispatcher(Dispatcher):
    """
    Call each listener straight away on the firing thread.  ``fire`` returns
    once every listener has returned, so this is only suitable for tests and
    single-threaded tools where that is wanted.
    """

    ALIASES = ("immediate", "inline")

    def dispatch(self, callback, args, kwargs):
        self._run(callback, args, kwargs)
