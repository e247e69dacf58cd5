# This file is part of RTSynapse, a library of real-time synapse plugins. RTSynapse is
# licensed under the Apache License Version 2.0, see <https://www.apache.org/licenses/>

from rtsynapse.synapses.synapse import Synapse  # isort: skip
from rtsynapse.synapses.electrical import ElectricalSynapse, gap_junction_current

__all__ = ["Synapse", "ElectricalSynapse", "gap_junction_current"]
