# This file is part of RTSynapse, a library of real-time synapse plugins. RTSynapse is
# licensed under the Apache License Version 2.0, see <https://www.apache.org/licenses/>

from rtsynapse.plugins.plugin import (
    ExtendableInputs,
    Plugin,
    PluginBehavior,
    PluginType,
)

__all__ = ["ExtendableInputs", "Plugin", "PluginBehavior", "PluginType"]
