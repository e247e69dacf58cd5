# This file is part of RTSynapse, a library of real-time synapse plugins. RTSynapse is
# licensed under the Apache License Version 2.0, see <https://www.apache.org/licenses/>

from rtsynapse.__version__ import __version__
from rtsynapse.integrate import build_init_and_step_fn, integrate, run
from rtsynapse.plugins import ExtendableInputs, Plugin, PluginBehavior, PluginType
from rtsynapse.registry import PluginRegistry, build_registry, default_registry
from rtsynapse.stimulus import datapoint_to_step_voltages, step_voltage
from rtsynapse.synapses import ElectricalSynapse, Synapse

__all__ = [
    "Plugin",
    "PluginBehavior",
    "PluginType",
    "ExtendableInputs",
    "Synapse",
    "ElectricalSynapse",
    "PluginRegistry",
    "build_registry",
    "default_registry",
    "build_init_and_step_fn",
    "run",
    "integrate",
    "step_voltage",
    "datapoint_to_step_voltages",
]
