# This file is part of RTSynapse, a library of real-time synapse plugins. RTSynapse is
# licensed under the Apache License Version 2.0, see <https://www.apache.org/licenses/>

from typing import Dict

from jax import Array
from jax.typing import ArrayLike

from rtsynapse.plugins.plugin import Plugin


class Synapse(Plugin):
    """Base class for a synapse plugin.

    As in NEURON, a `Synapse` is considered a point process, which means that its
    conductances are to be specified in `uS` and its currents are to be specified in
    `nA`. Voltages arrive at the ports in `V`, as the host's acquisition hardware
    delivers them, and are converted to `mV` before the current is computed.

    Besides the scalar tick-by-tick runtime inherited from `Plugin`, a synapse
    exposes its transfer function as `compute_current()`, a pure `jax.numpy`
    function which can be jitted and vectorized over many synapses or whole traces.
    """

    __slots__ = ()

    def compute_current(
        self,
        params: Dict[str, ArrayLike],
        pre_voltage: ArrayLike,
        post_voltage: ArrayLike,
        modulation: Dict[str, ArrayLike],
    ) -> Array:
        """Return current through the synapse in `nA`.

        Args:
            params: Configurable parameters of the synapse. Conductances in `uS`.
            pre_voltage: Voltage of the presynaptic neuron in `V`.
            post_voltage: Voltage of the postsynaptic neuron in `V`.
            modulation: Remaining inputs of the synapse, keyed by internal name.

        Returns:
            Current through the synapse in `nA`, broadcast over all arguments.
        """
        raise NotImplementedError
