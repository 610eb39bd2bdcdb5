#!/usr/bin/env python3

"""
Implementation registry.  Used to allow instantiation of interface classes
from a `dict`-like configuration tree (e.g. loaded from YAML).
"""

# © Stuart Longland VK4MSL
# SPDX-License-Identifier: GPL-2.0-or-later


class Registry(object):
    def __init__(self, defaults=None, typeprop="type", aliasprop="ALIASES"):
        self._typeprop = typeprop
        self._aliasprop = aliasprop
        self._subclasses = {}
        self._defaults = defaults

    @property
    def names(self):
        return sorted(self._subclasses.keys())

    def init_instance(self, **kwargs):
        """
        Retrieve and initialise an instance of a subclass using the given
        parameters.
        """
        if self._defaults is not None:
            defaults = self._defaults.copy()
            defaults.update(kwargs)
            kwargs = defaults

        subclass_name = kwargs.pop(self._typeprop).lower()
        try:
            subclass = self._subclasses[subclass_name]
        except KeyError:
            raise ValueError(
                "Unknown %s %r, expecting one of %s"
                % (self._typeprop, subclass_name, ", ".join(self.names))
            ) from None

        if hasattr(subclass, "from_cfg"):
            return subclass.from_cfg(**kwargs)
        else:
            return subclass(**kwargs)

    def register(self, subclass):
        """
        Add the class into a registry for later use.
        """
        for name in (subclass.__name__,) + getattr(
            subclass, self._aliasprop, ()
        ):
            name = name.lower()
            assert name not in self._subclasses
            self._subclasses[name] = subclass

        return subclass
