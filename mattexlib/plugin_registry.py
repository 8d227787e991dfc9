"""
PluginRegistry - Validates plugin dependencies and merges plugin
capabilities onto a drawing surface.
"""

import logging
from collections.abc import Iterable, Mapping

from .errors import PluginDescriptorError


class PluginDescriptor:
    """
    A named bundle of drawing functions contributed by a plugin.

    Each function receives the surface it is called on as its first argument.
    """

    def __init__(self, name, description="", requires=(), funcs=None):
        """
        Initialize the descriptor.

        Args:
            name: Unique, non-empty plugin name
            description: Human-readable description (logged on install)
            requires: Names of the plugins this one depends on
            funcs: Mapping of method name to callable

        Raises:
            PluginDescriptorError: If the name is empty, requires is not a list of
                names, funcs is not a mapping or a func is not callable
        """
        if not isinstance(name, str) or not name:
            raise PluginDescriptorError(f"Plugin name must be a non-empty string, got {name!r}")
        if isinstance(requires, str) or not isinstance(requires, Iterable):
            raise PluginDescriptorError(f"Plugin {name} must list its requirements, got {requires!r}")
        requires = tuple(requires)
        for required in requires:
            if not isinstance(required, str) or not required:
                raise PluginDescriptorError(f"Plugin {name} requires an invalid name {required!r}")

        if funcs is None:
            funcs = {}
        if not isinstance(funcs, Mapping):
            raise PluginDescriptorError(f"Plugin {name} funcs must be a mapping, got {type(funcs).__name__}")
        funcs = dict(funcs)
        for key, func in funcs.items():
            if not callable(func):
                raise PluginDescriptorError(f"Plugin {name} provides non-callable {key!r}")

        self.name = name
        self.description = description
        self.requires = requires
        self.funcs = funcs

    @classmethod
    def from_dict(cls, record):
        """
        Build a descriptor from a plain {name, description, requires, funcs} record.

        Raises:
            PluginDescriptorError: If the record has no name
        """
        if "name" not in record:
            raise PluginDescriptorError("Plugin record has no 'name'")
        return cls(
            record["name"],
            description=record.get("description", ""),
            requires=record.get("requires", ()),
            funcs=record.get("funcs"),
        )

    @classmethod
    def coerce(cls, plugin):
        """Return plugin as a descriptor, converting plain mappings"""
        if isinstance(plugin, cls):
            return plugin
        if isinstance(plugin, Mapping):
            return cls.from_dict(plugin)
        raise PluginDescriptorError(f"Cannot use {type(plugin).__name__} as a plugin descriptor")

    def __repr__(self):
        return f"PluginDescriptor({self.name!r}, requires={list(self.requires)})"


class UnsatisfiedDependency:
    """A plugin asks for another plugin that was not supplied."""

    def __init__(self, consumer, missing, known=()):
        self.consumer = consumer
        self.missing = missing
        self.known = tuple(known)

    @property
    def message(self):
        found = ", ".join(self.known) if self.known else "(none)"
        return (f"Plugin {self.consumer} is asking for {self.missing}, "
                f"but {self.missing} is not found here. Found plugins: {found}")

    def __eq__(self, other):
        if not isinstance(other, UnsatisfiedDependency):
            return NotImplemented
        return (self.consumer, self.missing) == (other.consumer, other.missing)

    def __hash__(self):
        return hash((self.consumer, self.missing))

    def __repr__(self):
        return f"UnsatisfiedDependency(consumer={self.consumer!r}, missing={self.missing!r})"

    def __str__(self):
        return self.message


class PluginRegistry:
    """
    Installs plugin descriptors onto a capability sink.

    The sink is any object with a mutable ``capabilities`` mapping. Installation
    is all-or-nothing: dependencies are only checked for presence (no cycle
    detection, no install ordering) and nothing is merged unless every
    requirement is met.
    """

    def find_missing(self, plugins):
        """
        Collect every unmet requirement among the plugins.

        Args:
            plugins: Sequence of PluginDescriptor (or plain records)

        Returns:
            List of UnsatisfiedDependency, in descriptor and requirement order
        """
        plugins = [PluginDescriptor.coerce(p) for p in plugins]
        names = [p.name for p in plugins]
        known = set(names)

        errors = []
        for plugin in plugins:
            for required in plugin.requires:
                if required not in known:
                    errors.append(UnsatisfiedDependency(plugin.name, required, names))
        return errors

    def install(self, target, plugins):
        """
        Merge every plugin's functions onto target, if all dependencies resolve.

        Args:
            target: Capability sink (object with a ``capabilities`` mapping)
            plugins: Ordered sequence of PluginDescriptor (or plain records)

        Returns:
            List of UnsatisfiedDependency; empty when installation succeeded.
            On a non-empty result the target is left untouched.
        """
        plugins = [PluginDescriptor.coerce(p) for p in plugins]

        errors = self.find_missing(plugins)
        if errors:
            for error in errors:
                logging.error(error.message)
            return errors

        capabilities = target.capabilities
        owners = {}
        seen = set()
        for plugin in plugins:
            if plugin.name in seen:
                logging.warning(f"Plugin {plugin.name} is listed more than once, later entries win")
            seen.add(plugin.name)

            logging.info(f"Adding: {plugin.name}\n{plugin.description}")
            for key, func in plugin.funcs.items():
                if key in capabilities:
                    previous = owners.get(key, "an earlier install")
                    logging.warning(f"Plugin {plugin.name} replaces {key!r} from {previous}")
                capabilities[key] = func
                owners[key] = plugin.name

        logging.info("Added all plugins successfully")
        return []


_default_registry = PluginRegistry()


def install(target, plugins):
    """Install plugins onto target with the shared registry (see PluginRegistry.install)"""
    return _default_registry.install(target, plugins)
