# This file is part of RTSynapse, a library of real-time synapse plugins. RTSynapse is
# licensed under the Apache License Version 2.0, see <https://www.apache.org/licenses/>

from typing import Tuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike


def _num_ticks(duration: float, delta_t: float) -> int:
    # Rounding keeps e.g. 0.05 / 1e-4 from landing on 499.
    return int(round(duration / delta_t))


def step_voltage(
    v_delay: float,
    v_dur: float,
    v_amp: float,
    delta_t: float,
    t_max: float,
    v_offset: float = 0.0,
) -> Tuple[Array, Array]:
    """Return time series of a voltage step.

    The trace holds `v_offset` everywhere and `v_offset + v_amp` during the step. It
    can be passed as an input trace to `run()`.

    Args:
        v_delay: Delay in `s` until the step turns on.
        v_dur: Duration of the step in `s`.
        v_amp: Amplitude of the step in `V`.
        delta_t: Tick period in `s`.
        t_max: Maximal time in `s`.
        v_offset: Baseline voltage in `V`.

    Returns:
        A tuple of a time vector and a voltage trace, both of shape `(T,)`.

    Example Usage:
    ^^^^^^^^^^^^^^

    ::

        import rtsynapse as rs

        time, pre_v = rs.step_voltage(0.01, 0.02, 0.03, 1e-4, 0.05, v_offset=-0.065)
        plt.plot(time, pre_v)
    """
    if delta_t <= 0.0:
        raise ValueError(f"delta_t must be positive, got {delta_t}.")
    window_start = _num_ticks(v_delay, delta_t)
    window_end = _num_ticks(v_delay + v_dur, delta_t)
    time_steps = _num_ticks(t_max, delta_t) + 1

    time_vec = jnp.arange(time_steps) * delta_t
    voltage = jnp.zeros((time_steps,)) + v_offset
    return time_vec, voltage.at[window_start:window_end].add(v_amp)


def datapoint_to_step_voltages(
    v_delay: float,
    v_dur: float,
    v_amp: ArrayLike,
    delta_t: float,
    t_max: float,
    v_offset: float = 0.0,
) -> Tuple[Array, Array]:
    """Return time series of several voltage steps with different amplitudes.

    Unlike `step_voltage()`, this takes a vector of amplitudes and returns a step for
    each of them. The result can be passed to `integrate()` to evaluate many
    synapses at once.

    Args:
        v_delay: Delay in `s` until the steps turn on.
        v_dur: Duration of the steps in `s`.
        v_amp: An array of N step amplitudes in `V`.
        delta_t: Tick period in `s`.
        t_max: Maximal time in `s`.
        v_offset: Baseline voltage in `V`.

    Returns:
        A tuple of a time vector (shape `(T,)`) and N traces (shape `(N, T)`).
    """
    if delta_t <= 0.0:
        raise ValueError(f"delta_t must be positive, got {delta_t}.")
    v_amp = jnp.atleast_1d(jnp.asarray(v_amp))
    window_start = _num_ticks(v_delay, delta_t)
    window_end = _num_ticks(v_delay + v_dur, delta_t)
    time_steps = _num_ticks(t_max, delta_t) + 1

    time_vec = jnp.arange(time_steps) * delta_t
    voltage = jnp.zeros((time_steps, len(v_amp))) + v_offset
    return time_vec, voltage.at[window_start:window_end, :].add(v_amp).T
