# This file is part of RTSynapse, a library of real-time synapse plugins. RTSynapse is
# licensed under the Apache License Version 2.0, see <https://www.apache.org/licenses/>

from typing import Optional

import pytest

from rtsynapse.synapses import ElectricalSynapse


@pytest.fixture(scope="session")
def ElectricalSyn():
    """Fixture for creating an electrical synapse with given config and inputs."""

    def build_synapse(
        g_us: float = 0.0,
        post_v: float = 0.0,
        pre_v: float = 0.0,
        scale: float = 0.0,
        offset: float = 0.0,
        tick: Optional[int] = None,
    ) -> ElectricalSynapse:
        """Create an electrical synapse through its host-facing setters.

        Args:
            g_us: Conductance in uS.
            post_v: Postsynaptic voltage in V.
            pre_v: Presynaptic voltage in V.
            scale: Scale from pre to post.
            offset: Offset from pre to post in V.
            tick: If given, process this tick before returning.

        Returns:
            ElectricalSynapse()."""
        syn = ElectricalSynapse()
        syn.set_config_value("g_us", g_us)
        syn.set_input_value("Post-synaptic Voltage (V)", post_v)
        syn.set_input_value("Pre-synaptic Voltage (V)", pre_v)
        syn.set_input_value("Scale (Pre to Post)", scale)
        syn.set_input_value("Offset (Pre to Post)", offset)
        if tick is not None:
            syn.process_tick(tick, 1e-3)
        return syn

    yield build_synapse
