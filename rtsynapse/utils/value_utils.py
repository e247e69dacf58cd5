# This file is part of RTSynapse, a library of real-time synapse plugins. RTSynapse is
# licensed under the Apache License Version 2.0, see <https://www.apache.org/licenses/>

from math import inf, isfinite
from numbers import Real
from typing import Any, Optional

import numpy as np


def as_real(value: Any) -> Optional[float]:
    """Interpret `value` as a real number.

    Python ints and floats, numpy scalars and zero-dimensional numpy or jax arrays
    are real numbers. Booleans, strings, `None` and containers are not. Non-finite
    values are returned as they are, callers decide what to do with them. Integers
    too large for a float become an infinity of the same sign.

    Args:
        value: Any value handed over by a host.

    Returns:
        The value as a `float`, or `None` if it is not a real number.
    """
    if isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, Real):
        try:
            return float(value)
        except OverflowError:
            return inf if value > 0 else -inf
        except (TypeError, ValueError):
            return None
    # Zero-dimensional arrays (numpy or jax) expose `shape` and `dtype`.
    shape = getattr(value, "shape", None)
    dtype = getattr(value, "dtype", None)
    if shape == () and dtype is not None:
        try:
            if np.dtype(dtype).kind in "iuf":
                return float(value)
        except (OverflowError, TypeError, ValueError):
            return None
    return None


def finite_or_zero(value: Any) -> float:
    """Return `value` as a float if it is a finite real number, `0.0` otherwise."""
    real = as_real(value)
    if real is None or not isfinite(real):
        return 0.0
    return real


def clip(value: float, lower: float, upper: float) -> float:
    """Clamp `value` to `[lower, upper]`.

    Unlike `min(max(...))`, a NaN is passed through unchanged so that it can be
    detected afterwards.
    """
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value
