#!/usr/bin/env python3

"""
Configuration loading.  The configuration file is YAML, for example:

.. code-block:: yaml

    logging:
      level: DEBUG
    threads: 4
    dispatcher:
      type: executor
"""

# © Stuart Longland VK4MSL
# SPDX-License-Identifier: GPL-2.0-or-later

import copy
import logging
import logging.config
import os.path

import yaml

from . import defaults
from .dispatch import init_dispatcher
from .path import get_config_path
from .threadpool import ThreadPool

LOG_FORMAT = (
    "%(asctime)s %(name)s[%(filename)s:%(lineno)4d] %(levelname)s %(message)s"
)
LOG_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {"detail": {"format": LOG_FORMAT}},
    "handlers": {
        "console": {
            "formatter": "detail",
            "class": "logging.StreamHandler",
            "level": "INFO",
            "stream": "ext://sys.stderr",
        },
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    "loggers": {
        "chainsignal": {"level": "INFO"},
    },
}


def load_config(path=None):
    """
    Read the configuration file.  A missing file is an empty configuration.
    """
    if path is None:
        path = get_config_path()

    if not os.path.exists(path):
        return {}

    with open(path, "r") as f:
        config = yaml.safe_load(f.read())

    if config is None:
        return {}

    if not isinstance(config, dict):
        raise ValueError(
            "%r: expected a mapping at the top level, got %s"
            % (path, type(config).__name__)
        )

    return config


def init_logging(logconfig=None):
    """
    Set up logging from a ``logging.config.dictConfig`` tree, or from a
    simplified ``level``/``format`` mapping.
    """
    if logconfig is None:
        logconfig = LOG_CONFIG

    logconfig = copy.deepcopy(logconfig)

    if "version" not in logconfig:
        # Assume simplified config
        level = logconfig.pop("level", "INFO")
        logfmt = logconfig.pop("format", LOG_FORMAT)

        logconfig = copy.deepcopy(LOG_CONFIG)
        logconfig["formatters"]["detail"]["format"] = logfmt
        logconfig["handlers"]["console"]["level"] = level
        logconfig["root"]["level"] = level
        for logger in logconfig["loggers"].values():
            logger["level"] = level

    logging.config.dictConfig(logconfig)


def configure(config=None, path=None):
    """
    Apply a configuration: logging, the shared thread pool and the default
    dispatcher.  If ``config`` is not given it is loaded from ``path`` (see
    ``load_config``).  Returns the default dispatcher.
    """
    if config is None:
        config = load_config(path)

    config = dict(config)

    logconfig = config.pop("logging", None)
    if logconfig is not None:
        init_logging(logconfig)

    log = logging.getLogger("chainsignal")

    threads = config.pop("threads", None)
    if threads is not None:
        log.debug("Thread pool size: %d", threads)
        ThreadPool.shutdown()
        ThreadPool.get_instance(threads=threads)

    dispatcher_cfg = config.pop("dispatcher", None)
    if dispatcher_cfg is not None:
        dispatcher = init_dispatcher(**dispatcher_cfg)
        log.debug("Default dispatcher: %r", dispatcher)
        defaults.set_dispatcher(dispatcher)

    for key in config:
        log.warning("Ignoring unknown configuration key %r", key)

    return defaults.get_dispatcher(None)
