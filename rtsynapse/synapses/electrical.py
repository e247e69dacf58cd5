# This file is part of RTSynapse, a library of real-time synapse plugins. RTSynapse is
# licensed under the Apache License Version 2.0, see <https://www.apache.org/licenses/>

from math import isfinite
from typing import Any, Dict

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from rtsynapse.plugins.plugin import ExtendableInputs, PluginBehavior, PluginType
from rtsynapse.synapses.synapse import Synapse
from rtsynapse.utils.value_utils import as_real, clip, finite_or_zero

MV_PER_V = 1000.0
NS_PER_US = 1000.0
# Bound for the scale, the offset (mV) and the output current (nA).
LIMIT = 1e6
# Scales smaller than this in magnitude are replaced by the identity transform.
MIN_SCALE = 1e-15

POST_V = "Post-synaptic Voltage (V)"
PRE_V = "Pre-synaptic Voltage (V)"
SCALE = "Scale (Pre to Post)"
OFFSET = "Offset (Pre to Post)"
CURRENT = "Current (nA)"

_CONDUCTANCE_US_KEYS = frozenset(["g_us", "g_gap", "g (uS)", "g (microS)", "g"])
_CONDUCTANCE_NS_KEYS = frozenset(["g (nS)"])


def gap_junction_current(
    g_us: ArrayLike,
    pre_v: ArrayLike,
    post_v: ArrayLike,
    scale: ArrayLike,
    offset: ArrayLike,
) -> Array:
    """Return the current through a gap junction in `nA`.

    Vectorized counterpart of `ElectricalSynapse.process_tick()`. All arguments are
    broadcast against each other. Elements with a non-finite argument yield `0.0`.

    Args:
        g_us: Gap-junction conductance in `uS`.
        pre_v: Presynaptic voltage in `V`.
        post_v: Postsynaptic voltage in `V`.
        scale: Factor applied to the presynaptic voltage.
        offset: Offset added to the scaled presynaptic voltage in `V`.

    Returns:
        Current in `nA`, within `[-1e6, 1e6]`.
    """
    g_us, pre_v, post_v, scale, offset = jnp.broadcast_arrays(
        *[jnp.asarray(x) for x in (g_us, pre_v, post_v, scale, offset)]
    )
    valid = (
        jnp.isfinite(g_us)
        & jnp.isfinite(post_v)
        & jnp.isfinite(pre_v)
        & jnp.isfinite(scale)
        & jnp.isfinite(offset)
    )

    degenerate = jnp.abs(scale) < MIN_SCALE
    offset_mv = jnp.where(degenerate, 0.0, offset * MV_PER_V)
    scale = jnp.where(degenerate, 1.0, scale)
    scale = jnp.clip(scale, -LIMIT, LIMIT)
    offset_mv = jnp.clip(offset_mv, -LIMIT, LIMIT)

    v_post_mv = post_v * MV_PER_V
    v_pre_mv = pre_v * MV_PER_V * scale + offset_mv
    current = jnp.clip(g_us * (v_post_mv - v_pre_mv), -LIMIT, LIMIT)
    return jnp.where(valid & jnp.isfinite(current), current, 0.0)


class ElectricalSynapse(Synapse):
    r"""An electrical synapse (gap junction) for hybrid real-time experiments.

    The current through the junction is proportional to the voltage difference
    between the two neurons. The presynaptic voltage is first mapped affinely into
    the frame of the postsynaptic neuron, which lets a living neuron be coupled to a
    model neuron recorded with different units or reference:

    .. math::

        I = g \cdot \left( V_{\text{post}} - (s \cdot V_{\text{pre}} + o) \right)

    A scale with :math:`|s| < 10^{-15}` is read as "no transform": for that tick
    :math:`s = 1` and :math:`o = 0`. Scale, offset and current are clamped to
    :math:`[-10^6, 10^6]`, and any non-finite parameter or input zeroes the current.
    The synapse has no memory, `period_seconds` is ignored.

    The synaptic inputs are:
        - ``Post-synaptic Voltage (V)``: :math:`V_{\text{post}}` (V).
        - ``Pre-synaptic Voltage (V)``: :math:`V_{\text{pre}}` (V).
        - ``Scale (Pre to Post)``: :math:`s` (1).
        - ``Offset (Pre to Post)``: :math:`o` (V).

    The configurable parameter is:
        - ``g_us``: the gap-junction conductance :math:`g` (uS). It can also be set
          as ``g_gap``, ``g``, ``g (uS)``, ``g (microS)`` or, in `nS`, ``g (nS)``.

    The output is:
        - ``Current (nA)``: the junction current :math:`I` (nA).

    .. rubric:: Example usage

    ::

        from rtsynapse.synapses import ElectricalSynapse

        syn = ElectricalSynapse()
        syn.set_config_value("g (nS)", 500.0)
        syn.set_input_value("Post-synaptic Voltage (V)", -0.060)
        syn.set_input_value("Pre-synaptic Voltage (V)", -0.050)
        syn.set_input_value("Scale (Pre to Post)", 1.0)
        syn.process_tick(0, 1e-4)
        syn.get_output_value("Current (nA)")  # -5.0
    """

    __slots__ = ("post_v", "pre_v", "scale", "offset", "g_us", "out_0")

    _name = "RTHybrid Electrical Synapse"
    _kind = "rthybrid_electrical_synapse"
    _plugin_type = PluginType.STANDARD
    _inputs = (POST_V, PRE_V, SCALE, OFFSET)
    _outputs = (CURRENT,)
    _internal_variables = ("post_v", "pre_v", "scale", "offset", "g_us", "current")
    _default_vars = {"g_us": 0.0}
    _behavior = PluginBehavior(
        supports_start_stop=True,
        supports_restart=True,
        supports_apply=False,
        extendable_inputs=ExtendableInputs.NONE,
        loads_started=False,
        external_window=False,
        starts_expanded=True,
        start_requires_connected_inputs=(),
        start_requires_connected_outputs=(),
    )

    _input_slots = {POST_V: "post_v", PRE_V: "pre_v", SCALE: "scale", OFFSET: "offset"}
    _output_slots = {CURRENT: "out_0"}
    _internal_slots = {
        "post_v": "post_v",
        "pre_v": "pre_v",
        "scale": "scale",
        "offset": "offset",
        "g_us": "g_us",
        "current": "out_0",
    }

    def __init__(self):
        self.post_v = 0.0
        self.pre_v = 0.0
        self.scale = 0.0
        self.offset = 0.0
        self.g_us = 0.0
        self.out_0 = 0.0

    def set_config_value(self, key: str, value: Any) -> None:
        v = as_real(value)
        if v is None:
            return
        if key in _CONDUCTANCE_US_KEYS:
            self.g_us = v
        elif key in _CONDUCTANCE_NS_KEYS:
            self.g_us = v / NS_PER_US

    def set_input_value(self, key: str, value: float) -> None:
        slot = self._input_slots.get(key)
        if slot is not None:
            setattr(self, slot, finite_or_zero(value))

    def process_tick(self, tick: int, period_seconds: float) -> None:
        if not (
            isfinite(self.g_us)
            and isfinite(self.post_v)
            and isfinite(self.pre_v)
            and isfinite(self.scale)
            and isfinite(self.offset)
        ):
            self.out_0 = 0.0
            return

        scale = self.scale
        offset_mv = self.offset * MV_PER_V
        if abs(scale) < MIN_SCALE:
            scale = 1.0
            offset_mv = 0.0
        scale = clip(scale, -LIMIT, LIMIT)
        offset_mv = clip(offset_mv, -LIMIT, LIMIT)

        v_post_mv = self.post_v * MV_PER_V
        v_pre_mv = self.pre_v * MV_PER_V * scale + offset_mv
        self.out_0 = clip(self.g_us * (v_post_mv - v_pre_mv), -LIMIT, LIMIT)
        if not isfinite(self.out_0):
            self.out_0 = 0.0

    def compute_current(
        self,
        params: Dict[str, ArrayLike],
        pre_voltage: ArrayLike,
        post_voltage: ArrayLike,
        modulation: Dict[str, ArrayLike],
    ) -> Array:
        """Return current through the gap junction in `nA`.

        `params` needs ``g_us``, `modulation` needs ``scale`` and ``offset``.
        """
        return gap_junction_current(
            params["g_us"],
            pre_voltage,
            post_voltage,
            modulation["scale"],
            modulation["offset"],
        )
