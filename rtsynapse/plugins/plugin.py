# This file is part of RTSynapse, a library of real-time synapse plugins. RTSynapse is
# licensed under the Apache License Version 2.0, see <https://www.apache.org/licenses/>

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


class PluginType(Enum):
    """What kind of processing component a plugin is.

    `STANDARD` plugins are driven purely through their ports. `DEVICE` plugins
    additionally talk to hardware owned by the host (acquisition boards, clamps) and
    are scheduled with that in mind.
    """

    STANDARD = "standard"
    DEVICE = "device"


class ExtendableInputs(Enum):
    """Whether a host may add input ports to a plugin after it was built."""

    NONE = "none"
    AUTO = "auto"
    MANUAL = "manual"


@dataclass(frozen=True)
class PluginBehavior:
    """Static record of the lifecycle capabilities of a plugin.

    Attributes:
        supports_start_stop: The host may start and stop the plugin.
        supports_restart: The host may restart the plugin.
        supports_apply: Configuration can be applied while the plugin is running.
        extendable_inputs: Whether inputs can be added dynamically.
        loads_started: The plugin is running as soon as it is loaded.
        external_window: The plugin needs a window of its own.
        starts_expanded: The plugin is shown expanded in a UI.
        start_requires_connected_inputs: Inputs that must be connected before start.
        start_requires_connected_outputs: Outputs that must be connected before start.
    """

    supports_start_stop: bool = True
    supports_restart: bool = True
    supports_apply: bool = False
    extendable_inputs: ExtendableInputs = ExtendableInputs.NONE
    loads_started: bool = False
    external_window: bool = False
    starts_expanded: bool = True
    start_requires_connected_inputs: Tuple[str, ...] = ()
    start_requires_connected_outputs: Tuple[str, ...] = ()


class Plugin(ABC):
    """Base class for a processing component driven tick by tick by a host.

    A `Plugin` has two facets. The descriptor is class-level and answers static
    queries (`name()`, `kind()`, `inputs()`, ...). The runtime is the instance: the
    host feeds it configuration and inputs by key, advances it with
    `process_tick()` and reads outputs and internal variables back by key.

    Subclasses declare the descriptor through class attributes and map port names
    onto instance attributes with `_input_slots`, `_output_slots` and
    `_internal_slots`. The maps are checked and frozen once, when the subclass is
    created, so that no string handling is needed beyond a single dict lookup.

    None of the runtime methods may raise: a host running a real-time loop treats
    anything unexpected as a value to be sanitized, not as an error.
    """

    __slots__ = ()

    _name: Optional[str] = None
    _kind: Optional[str] = None
    _plugin_type: PluginType = PluginType.STANDARD
    _inputs: Tuple[str, ...] = ()
    _outputs: Tuple[str, ...] = ()
    _internal_variables: Tuple[str, ...] = ()
    _default_vars: Mapping[str, Any] = MappingProxyType({})
    _behavior: PluginBehavior = PluginBehavior()

    _input_slots: Mapping[str, str] = MappingProxyType({})
    _output_slots: Mapping[str, str] = MappingProxyType({})
    _internal_slots: Mapping[str, str] = MappingProxyType({})

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if "_name" not in cls.__dict__:
            cls._name = cls.__name__
        for ports, slots in [
            (cls._inputs, cls._input_slots),
            (cls._outputs, cls._output_slots),
            (cls._internal_variables, cls._internal_slots),
        ]:
            missing = [port for port in ports if port not in slots]
            if missing:
                raise ValueError(
                    f"{cls.__name__} declares {missing} but maps them to no attribute."
                )
        cls._input_slots = MappingProxyType(dict(cls._input_slots))
        cls._output_slots = MappingProxyType(dict(cls._output_slots))
        cls._internal_slots = MappingProxyType(dict(cls._internal_slots))
        cls._default_vars = MappingProxyType(dict(cls._default_vars))

    @classmethod
    def name(cls) -> str:
        """Human readable name of the plugin."""
        return cls._name

    @classmethod
    def kind(cls) -> Optional[str]:
        """Machine readable identifier the plugin is registered under."""
        return cls._kind

    @classmethod
    def plugin_type(cls) -> PluginType:
        return cls._plugin_type

    @classmethod
    def inputs(cls) -> Tuple[str, ...]:
        """Names of the input ports, in the order they are presented to users."""
        return cls._inputs

    @classmethod
    def outputs(cls) -> Tuple[str, ...]:
        """Names of the output ports."""
        return cls._outputs

    @classmethod
    def internal_variables(cls) -> Tuple[str, ...]:
        """Names of the variables which can be inspected with `get_internal_value`."""
        return cls._internal_variables

    @classmethod
    def default_vars(cls) -> Mapping[str, Any]:
        """Read-only, ordered mapping of configurable parameters to their defaults."""
        return cls._default_vars

    @classmethod
    def behavior(cls) -> PluginBehavior:
        return cls._behavior

    @abstractmethod
    def set_config_value(self, key: str, value: Any) -> None:
        """Set a configurable parameter. Unknown keys and values are ignored."""
        raise NotImplementedError

    @abstractmethod
    def set_input_value(self, key: str, value: float) -> None:
        """Set the current value of an input port. Unknown keys are ignored."""
        raise NotImplementedError

    @abstractmethod
    def process_tick(self, tick: int, period_seconds: float) -> None:
        """Advance the plugin by one tick and recompute its outputs.

        Args:
            tick: Index of the tick, counted by the host.
            period_seconds: Duration of the tick in `s`.
        """
        raise NotImplementedError

    def get_output_value(self, key: str) -> float:
        """Return the value of an output port, `0.0` for unknown keys."""
        slot = self._output_slots.get(key)
        if slot is None:
            return 0.0
        return getattr(self, slot)

    def get_internal_value(self, key: str) -> Optional[float]:
        """Return the value of an internal variable, `None` for unknown keys."""
        slot = self._internal_slots.get(key)
        if slot is None:
            return None
        return getattr(self, slot)

    def output_values(self) -> Dict[str, float]:
        """Return all outputs, keyed by port name."""
        return {key: self.get_output_value(key) for key in self._outputs}

    def internal_values(self) -> Dict[str, float]:
        """Return all internal variables, keyed by name."""
        return {key: self.get_internal_value(key) for key in self._internal_variables}

    def __repr__(self) -> str:
        values = ", ".join(f"{k}={v}" for k, v in self.internal_values().items())
        return f"{self.__class__.__name__}({values})"
