"""
Random-number layer shared by the null samplers.

Every Monte Carlo iteration builds its own generator from an explicit seed
with make_rng(), so iterations are reproducible and independent of one
another (and of any global NumPy random state).  rnorm_diagnostic() exposes
the generator/normal-distribution pairing on its own so that a known seed can
be checked against pinned values.
"""

import numbers

import numpy as np


def check_integer_scalar(value, name):
    """Return *value* as a Python int, or raise naming the offending argument."""
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} should be an integer scalar, got {value!r}")
    return int(value)


def make_rng(seed):
    """Fresh generator for one iteration."""
    return np.random.default_rng(seed)


def rnorm_diagnostic(n, seed):
    """Draw *n* standard-normal deviates from a generator seeded with *seed*.

    Pure function of its inputs: the same (n, seed) always gives the same
    sequence, in draw order.
    """
    n = check_integer_scalar(n, "number")
    seed = check_integer_scalar(seed, "seed")
    if n < 0:
        raise ValueError("number should be non-negative")
    if seed < 0:
        raise ValueError("seed should be non-negative")

    rng = make_rng(seed)
    return rng.standard_normal(n)
