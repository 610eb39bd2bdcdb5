#!/usr/bin/env python3

"""
Path handler: determines sane defaults for the configuration file location.
"""

import os
import os.path


def get_home():
    """
    Determine the path for the user's home directory.
    """
    return os.path.expanduser("~")


def get_config_dir():
    """
    Determine the path for config files.  If the user does not set one with
    ``CHAINSIGNAL_CONFIG_DIR``, derive one from ``HOME``.
    """
    try:
        return os.path.expanduser(os.environ["CHAINSIGNAL_CONFIG_DIR"])
    except KeyError:
        pass

    return os.path.join(get_home(), ".config", "chainsignal")


def get_config_path():
    """
    Determine the path of the configuration file.  ``CHAINSIGNAL_CONFIG``
    names the file outright, otherwise it is ``chainsignal.yaml`` in the
    directory given by ``get_config_dir``.
    """
    try:
        return os.path.expanduser(os.environ["CHAINSIGNAL_CONFIG"])
    except KeyError:
        pass

    return os.path.join(get_config_dir(), "chainsignal.yaml")
