# This file is part of RTSynapse, a library of real-time synapse plugins. RTSynapse is
# licensed under the Apache License Version 2.0, see <https://www.apache.org/licenses/>

import jax

jax.config.update("jax_enable_x64", True)
jax.config.update("jax_platform_name", "cpu")

import jax.numpy as jnp
import numpy as np
import pytest

import rtsynapse as rs
from rtsynapse.integrate import build_init_and_step_fn, integrate, run
from rtsynapse.synapses import ElectricalSynapse, gap_junction_current

POST = "Post-synaptic Voltage (V)"
PRE = "Pre-synaptic Voltage (V)"
SCALE = "Scale (Pre to Post)"
OFFSET = "Offset (Pre to Post)"
CURRENT = "Current (nA)"


def test_step_fn_matches_manual_ticks():
    syn = ElectricalSynapse()
    init_fn, step_fn = build_init_and_step_fn(syn)
    assert init_fn({"g_us": 0.5}) is syn

    outputs = step_fn(0, {POST: 2.0, PRE: 1.0, SCALE: 2.0, OFFSET: 0.1}, 1e-3)
    assert outputs == pytest.approx({CURRENT: -50.0})

    # Inputs which are not passed keep their value.
    outputs = step_fn(1, {OFFSET: 0.0}, 1e-3)
    assert outputs == pytest.approx({CURRENT: 0.0})


def test_init_fn_restores_defaults():
    syn = ElectricalSynapse()
    syn.set_config_value("g_us", 4.0)
    init_fn, _ = build_init_and_step_fn(syn)
    init_fn()
    assert syn.get_internal_value("g_us") == 0.0


def test_run_records_outputs():
    dt = 1e-4
    time, pre_v = rs.step_voltage(0.001, 0.002, 0.01, dt, 0.005, v_offset=-0.06)
    rec = run(
        ElectricalSynapse(),
        {PRE: pre_v, POST: -0.06, SCALE: 1.0},
        period_seconds=dt,
        config={"g (nS)": 100.0},
    )
    assert list(rec.columns) == ["time", CURRENT]
    assert rec.index.name == "tick"
    assert len(rec) == len(time)
    assert np.allclose(rec["time"].to_numpy(), np.asarray(time))

    current = rec[CURRENT].to_numpy()
    # 0.1 uS * (-60 mV - (-50 mV)) = -1 nA during the step, 0 elsewhere.
    assert current[0] == pytest.approx(0.0)
    assert current[15] == pytest.approx(-1.0)
    assert current[-1] == pytest.approx(0.0)


def test_run_records_internal_variables():
    rec = run(
        ElectricalSynapse(),
        {POST: [0.0, 0.001, np.nan], PRE: 0.0, SCALE: 1.0},
        period_seconds=1e-3,
        config={"g_us": 1.0},
        record_internal=True,
    )
    assert list(rec.columns) == [
        "time",
        CURRENT,
        "post_v",
        "pre_v",
        "scale",
        "offset",
        "g_us",
        "current",
    ]
    assert rec["post_v"].tolist() == [0.0, 0.001, 0.0]
    assert rec[CURRENT].tolist() == pytest.approx([0.0, 1.0, 0.0])
    assert np.all(rec["current"] == rec[CURRENT])


def test_run_without_traces_is_a_single_tick():
    rec = run(ElectricalSynapse(), {}, period_seconds=1e-3)
    assert len(rec) == 1


def test_run_rejects_traces_of_different_length():
    with pytest.raises(ValueError, match="same length"):
        run(ElectricalSynapse(), {POST: [0.0, 1.0], PRE: [0.0, 1.0, 2.0]}, 1e-3)


def test_run_rejects_multidimensional_traces():
    with pytest.raises(ValueError, match="one-dimensional"):
        run(ElectricalSynapse(), {POST: np.zeros((2, 3))}, 1e-3)


@pytest.mark.parametrize("period", [0.0, -1e-3])
def test_run_rejects_non_positive_period(period):
    with pytest.raises(ValueError, match="positive"):
        run(ElectricalSynapse(), {POST: [0.0]}, period)


def test_run_warns_on_unknown_inputs():
    with pytest.warns(UserWarning, match="not an input"):
        rec = run(ElectricalSynapse(), {"Vm": [0.0, 1.0], POST: [0.0, 0.0]}, 1e-3)
    assert len(rec) == 2


def test_gap_junction_current_reference_cases():
    current = gap_junction_current(
        g_us=jnp.asarray([0.5, 1.0]),
        pre_v=jnp.asarray([1.0, 2.0]),
        post_v=jnp.asarray([2.0, 3.0]),
        scale=jnp.asarray([2.0, 0.0]),
        offset=jnp.asarray([0.1, 5.0]),
    )
    assert np.allclose(current, [-50.0, 1000.0])


def test_gap_junction_current_guards():
    current = gap_junction_current(
        g_us=jnp.asarray([jnp.nan, 1.0, 1e9, -1e9, 0.0]),
        pre_v=jnp.asarray([1.0, jnp.inf, 0.0, 0.0, 1e308]),
        post_v=jnp.asarray([2.0, 0.0, 1.0, 1.0, 0.0]),
        scale=1e6,
        offset=0.0,
    )
    assert np.all(np.isfinite(current))
    assert current.tolist() == [0.0, 0.0, 1e6, -1e6, 0.0]


def test_integrate_matches_ticking_plugin():
    rng = np.random.default_rng(1)
    num = 200
    g_us = rng.uniform(-2.0, 2.0, num)
    pre_v = rng.normal(0.0, 0.05, num)
    post_v = rng.normal(0.0, 0.05, num)
    scale = rng.choice([0.0, 1e-16, 0.5, 1.0, 3.0, 1e9], num)
    offset = rng.normal(0.0, 0.01, num)

    batched = integrate(
        ElectricalSynapse(),
        {"g_us": g_us},
        pre_voltage=pre_v,
        post_voltage=post_v,
        modulation={"scale": scale, "offset": offset},
    )

    ticked = []
    syn = ElectricalSynapse()
    for tick in range(num):
        syn.set_config_value("g_us", g_us[tick])
        syn.set_input_value(PRE, pre_v[tick])
        syn.set_input_value(POST, post_v[tick])
        syn.set_input_value(SCALE, scale[tick])
        syn.set_input_value(OFFSET, offset[tick])
        syn.process_tick(tick, 1e-3)
        ticked.append(syn.get_output_value(CURRENT))

    assert batched.shape == (num,)
    assert np.allclose(batched, ticked, rtol=1e-12, atol=1e-12)


def test_integrate_broadcasts_parameter_sweep():
    _, pre_v = rs.step_voltage(0.001, 0.002, 0.01, 1e-4, 0.005, v_offset=-0.06)
    g_us = jnp.linspace(0.0, 1.0, 5)[:, None]
    current = integrate(
        ElectricalSynapse(),
        {"g_us": g_us},
        pre_voltage=pre_v,
        post_voltage=-0.06,
        modulation={"scale": 1.0, "offset": 0.0},
    )
    assert current.shape == (5, len(pre_v))
    assert np.allclose(current[:, 15], -10.0 * np.linspace(0.0, 1.0, 5))
    assert np.allclose(current[:, 0], 0.0)
