# This file is part of RTSynapse, a library of real-time synapse plugins. RTSynapse is
# licensed under the Apache License Version 2.0, see <https://www.apache.org/licenses/>

from typing import Any, Dict, Iterable, List, Mapping, Optional, Type

import pandas as pd

from rtsynapse.plugins.plugin import Plugin
from rtsynapse.synapses import ElectricalSynapse


class PluginRegistry:
    """Catalog of plugin factories, keyed by their `kind()`.

    Plugins never register themselves when they are imported. The host builds a
    registry at startup and hands it the factories it wants to offer, either one by
    one with `register()` or all at once with `build_registry()`.

    Example usage
    ^^^^^^^^^^^^^

    ::

        from rtsynapse.registry import build_registry
        from rtsynapse.synapses import ElectricalSynapse

        registry = build_registry([ElectricalSynapse])
        syn = registry.create("rthybrid_electrical_synapse", {"g (nS)": 2.0})
        print(registry.catalog())
    """

    def __init__(self):
        self._factories: Dict[str, Type[Plugin]] = {}

    def register(self, factory: Type[Plugin]) -> Type[Plugin]:
        """Add a plugin factory to the registry.

        Args:
            factory: A `Plugin` subclass. Any callable returning a plugin and
                exposing the descriptor classmethods works as well.

        Returns:
            The factory, such that this method can be used as a class decorator.
        """
        kind = factory.kind()
        if not kind:
            raise ValueError(f"{factory.__name__} does not declare a kind.")
        if kind in self._factories:
            existing = self._factories[kind].__name__
            raise ValueError(
                f"Kind '{kind}' of {factory.__name__} is already registered by "
                f"{existing}. Kinds must be unique."
            )
        self._factories[kind] = factory
        return factory

    def factory(self, kind: str) -> Type[Plugin]:
        """Return the factory registered under `kind`."""
        if kind not in self._factories:
            raise KeyError(
                f"Kind '{kind}' is not registered. Registered kinds: {self.kinds()}."
            )
        return self._factories[kind]

    def create(self, kind: str, config: Optional[Mapping[str, Any]] = None) -> Plugin:
        """Build a configured plugin instance.

        The instance starts from its default state, then receives every entry of
        `default_vars()` followed by every entry of `config` via
        `set_config_value()`.

        Args:
            kind: The kind of the plugin.
            config: Configuration values overriding the defaults.

        Returns:
            A new plugin instance, ready for its first tick.
        """
        factory = self.factory(kind)
        plugin = factory()
        for key, value in factory.default_vars().items():
            plugin.set_config_value(key, value)
        if config is not None:
            for key, value in config.items():
                plugin.set_config_value(key, value)
        return plugin

    def kinds(self) -> List[str]:
        return list(self._factories.keys())

    def catalog(self) -> pd.DataFrame:
        """Return one row of metadata per registered plugin."""
        rows = []
        for kind, factory in self._factories.items():
            behavior = factory.behavior()
            rows.append(
                {
                    "kind": kind,
                    "name": factory.name(),
                    "plugin_type": factory.plugin_type().value,
                    "inputs": list(factory.inputs()),
                    "outputs": list(factory.outputs()),
                    "internal_variables": list(factory.internal_variables()),
                    "default_vars": dict(factory.default_vars()),
                    "supports_start_stop": behavior.supports_start_stop,
                    "supports_restart": behavior.supports_restart,
                    "supports_apply": behavior.supports_apply,
                    "extendable_inputs": behavior.extendable_inputs.value,
                    "loads_started": behavior.loads_started,
                    "external_window": behavior.external_window,
                    "starts_expanded": behavior.starts_expanded,
                }
            )
        columns = [
            "kind",
            "name",
            "plugin_type",
            "inputs",
            "outputs",
            "internal_variables",
            "default_vars",
            "supports_start_stop",
            "supports_restart",
            "supports_apply",
            "extendable_inputs",
            "loads_started",
            "external_window",
            "starts_expanded",
        ]
        return pd.DataFrame(rows, columns=columns).set_index("kind")

    def __contains__(self, kind: str) -> bool:
        return kind in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def build_registry(factories: Iterable[Type[Plugin]]) -> PluginRegistry:
    """Return a registry holding all `factories`, in the given order."""
    registry = PluginRegistry()
    for factory in factories:
        registry.register(factory)
    return registry


def default_registry() -> PluginRegistry:
    """Return a new registry holding the plugins shipped with this package."""
    return build_registry([ElectricalSynapse])
