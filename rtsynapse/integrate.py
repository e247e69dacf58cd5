# This file is part of RTSynapse, a library of real-time synapse plugins. RTSynapse is
# licensed under the Apache License Version 2.0, see <https://www.apache.org/licenses/>

from typing import Any, Callable, Dict, Mapping, Optional, Tuple
from warnings import warn

import jax
import numpy as np
import pandas as pd
from jax import Array
from jax.typing import ArrayLike

from rtsynapse.plugins.plugin import Plugin
from rtsynapse.synapses.synapse import Synapse


def build_init_and_step_fn(plugin: Plugin) -> Tuple[Callable, Callable]:
    """Return ``init_fn`` and ``step_fn`` which configure a plugin and run ticks.

    This mirrors what a host scheduler does with a plugin and can be used to drive a
    plugin step by step, e.g. from a custom acquisition loop.

    Args:
        plugin: A plugin instance.

    Returns:
        init_fn, step_fn: Functions that configure the plugin and perform a single
            tick, respectively.

    Example usage
    ^^^^^^^^^^^^^

    ::

        from rtsynapse.integrate import build_init_and_step_fn
        from rtsynapse.synapses import ElectricalSynapse

        init_fn, step_fn = build_init_and_step_fn(ElectricalSynapse())
        init_fn({"g_us": 0.1})
        for tick in range(100):
            outputs = step_fn(tick, {"Pre-synaptic Voltage (V)": -0.05}, 1e-4)
    """

    def init_fn(config: Optional[Mapping[str, Any]] = None) -> Plugin:
        """Apply the default configuration, then `config`.

        Args:
            config: Configuration values overriding the defaults.

        Returns:
            The configured plugin.
        """
        for key, value in plugin.default_vars().items():
            plugin.set_config_value(key, value)
        if config is not None:
            for key, value in config.items():
                plugin.set_config_value(key, value)
        return plugin

    def step_fn(
        tick: int, inputs: Mapping[str, float], period_seconds: float
    ) -> Dict[str, float]:
        """Set the inputs, process one tick and return the outputs.

        Args:
            tick: Index of the tick.
            inputs: Values of the connected inputs. Ports which are not passed keep
                their previous value.
            period_seconds: Duration of the tick in `s`.

        Returns:
            Output values, keyed by port name.
        """
        for key, value in inputs.items():
            plugin.set_input_value(key, value)
        plugin.process_tick(tick, period_seconds)
        return plugin.output_values()

    return init_fn, step_fn


def run(
    plugin: Plugin,
    inputs: Mapping[str, ArrayLike],
    period_seconds: float,
    config: Optional[Mapping[str, Any]] = None,
    record_internal: bool = False,
) -> pd.DataFrame:
    """Drive a plugin through one tick per sample of its input traces.

    Args:
        plugin: A plugin instance.
        inputs: One-dimensional traces of equal length, keyed by input port. Inputs
            which are not passed keep their value for the whole run.
        period_seconds: Duration of one tick in `s`.
        config: Configuration applied on top of `default_vars()` before the first
            tick.
        record_internal: Whether to also record every internal variable after each
            tick.

    Returns:
        One row per tick, indexed by tick, with a `time` column in `s` and one column
        per output (and per internal variable if `record_internal=True`).

    Example usage
    ^^^^^^^^^^^^^

    ::

        import rtsynapse as rs
        from rtsynapse.synapses import ElectricalSynapse

        time, pre_v = rs.step_voltage(0.01, 0.02, 0.02, 1e-4, 0.05, v_offset=-0.06)
        rec = rs.run(
            ElectricalSynapse(),
            {"Pre-synaptic Voltage (V)": pre_v, "Post-synaptic Voltage (V)": -0.06},
            period_seconds=1e-4,
            config={"g (nS)": 10.0},
        )
        rec["Current (nA)"].plot()
    """
    if period_seconds <= 0.0:
        raise ValueError(f"period_seconds must be positive, got {period_seconds}.")

    declared = set(plugin.inputs())
    traces = {}
    for key, trace in inputs.items():
        if key not in declared:
            warn(
                f"'{key}' is not an input of {plugin.name()}, it will be ignored. "
                f"Inputs are {list(plugin.inputs())}."
            )
            continue
        trace = np.atleast_1d(np.asarray(trace, dtype=float))
        if trace.ndim != 1:
            raise ValueError(
                f"Input trace '{key}' must be one-dimensional, got shape {trace.shape}."
            )
        traces[key] = trace

    lengths = {key: len(trace) for key, trace in traces.items() if len(trace) > 1}
    if len(set(lengths.values())) > 1:
        raise ValueError(f"Input traces must have the same length, got {lengths}.")
    num_ticks = max(lengths.values()) if lengths else 1
    # Constant inputs are passed as scalars and broadcast over the run.
    traces = {
        key: np.broadcast_to(trace, (num_ticks,)) for key, trace in traces.items()
    }

    init_fn, step_fn = build_init_and_step_fn(plugin)
    init_fn(config)

    records = []
    for tick in range(num_ticks):
        outputs = step_fn(
            tick, {key: trace[tick] for key, trace in traces.items()}, period_seconds
        )
        row = {"time": tick * period_seconds, **outputs}
        if record_internal:
            row.update(plugin.internal_values())
        records.append(row)

    recordings = pd.DataFrame(records)
    recordings.index.name = "tick"
    return recordings


def integrate(
    synapse: Synapse,
    params: Dict[str, ArrayLike],
    pre_voltage: ArrayLike,
    post_voltage: ArrayLike,
    modulation: Optional[Dict[str, ArrayLike]] = None,
) -> Array:
    """Evaluate the transfer function of a synapse over whole traces at once.

    Unlike `run()`, this does not tick a plugin instance but calls the jitted
    `compute_current()` of the synapse, broadcasting over all arguments. This is
    useful for offline analysis of recorded voltages or for sweeping parameters of
    many synapses in parallel.

    Args:
        synapse: The synapse whose transfer function is evaluated.
        params: Configurable parameters, scalars or arrays.
        pre_voltage: Presynaptic voltage in `V`.
        post_voltage: Postsynaptic voltage in `V`.
        modulation: Remaining inputs of the synapse, keyed by internal name.

    Returns:
        Currents in `nA`.

    Example usage
    ^^^^^^^^^^^^^

    ::

        import jax.numpy as jnp
        from rtsynapse.integrate import integrate
        from rtsynapse.synapses import ElectricalSynapse

        # Sweep the conductance of 10 synapses over a voltage trace.
        g = jnp.linspace(0.0, 1.0, 10)[:, None]
        i = integrate(
            ElectricalSynapse(),
            {"g_us": g},
            pre_voltage=pre_v,
            post_voltage=post_v,
            modulation={"scale": 1.0, "offset": 0.0},
        )
    """
    modulation = {} if modulation is None else modulation
    current_fn = jax.jit(synapse.compute_current)
    return current_fn(params, pre_voltage, post_voltage, modulation)
