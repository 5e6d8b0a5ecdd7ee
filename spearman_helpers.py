"""
Spearman rho helpers for tie-free rankings.

Provides:
- rho_mult(n)                : scaling constant 6 / (n (n^2 - 1))
- rank_stable(values)        : ordinal ranks 0..n-1, ties broken by index
- rank_rows_stable(a)        : the same for every row of a 2D array
- rho_from_ranks(r1, r2)     : scalar rho for two rank vectors
- rho_from_rank_rows(r1, r2) : vectorized rho for paired rows of 2D arrays
- rho_vs_identity_rows(perms) : vectorized rho of each row against 0..n-1

Rankings here are permutations of 0..n-1, so rho reduces to the classic
1 - 6 sum(d^2) / (n (n^2 - 1)) formula.  Squared rank differences are summed
in integer arithmetic: an identity pairing gives exactly 1.0 and a full
reversal gives -1.0 (up to rounding of the scaling constant).

When config.USE_NUMBA is True the row-wise kernel is JIT-compiled with inner
thread parallelism (prange); otherwise pure NumPy is used.
"""

import numpy as np
from numba import njit, prange

import config


def use_numba() -> bool:
    """Return True if the Numba kernels are enabled via config."""
    return bool(config.USE_NUMBA)


# ---------------------------------------------------------------------------
# Numba JIT block
# ---------------------------------------------------------------------------

@njit(fastmath=True, cache=True, parallel=True)
def _rho_from_rank_rows_jit(r1, r2, mult):
    """Rho for each pair of rank rows (parallel over rows)."""
    m, n = r1.shape
    rhos = np.empty(m, dtype=np.float64)
    for i in prange(m):
        ss = 0
        for j in range(n):
            d = r1[i, j] - r2[i, j]
            ss += d * d
        rhos[i] = 1.0 - mult * ss
    return rhos


@njit(fastmath=True, cache=True, parallel=True)
def _rho_vs_identity_rows_jit(perms, mult):
    """Rho of each permutation row against 0..n-1 (parallel over rows)."""
    m, n = perms.shape
    rhos = np.empty(m, dtype=np.float64)
    for i in prange(m):
        ss = 0
        for j in range(n):
            d = perms[i, j] - j
            ss += d * d
        rhos[i] = 1.0 - mult * ss
    return rhos


# ---------------------------------------------------------------------------
# Public ranking and correlation functions
# ---------------------------------------------------------------------------

def rho_mult(n):
    """Scaling constant of the tie-free Spearman formula for *n* items.

    Only finite for n > 1.  rho_mult(5) == 0.05.
    """
    n = float(n)
    return 6.0 / (n * (n * n - 1.0))


def rank_stable(values) -> np.ndarray:
    """Ordinal ranks 0..n-1 of a 1D array; ties keep their original order.

    ``rank[i]`` is the position of item ``i`` after a stable sort.
    """
    arr = np.asarray(values)
    if arr.ndim != 1:
        raise ValueError("values must be a 1D array")
    order = np.argsort(arr, kind="stable")
    ranks = np.empty(arr.shape[0], dtype=np.int64)
    ranks[order] = np.arange(arr.shape[0], dtype=np.int64)
    return ranks


def rank_rows_stable(a: np.ndarray) -> np.ndarray:
    """Ordinal ranks for each row of a 2D array, ties broken by column index."""
    a = np.asarray(a)
    if a.ndim != 2:
        raise ValueError("a must be a 2D array")
    m, n = a.shape
    rows = np.arange(m)[:, None]
    order = np.argsort(a, axis=1, kind="stable")
    ranks = np.empty((m, n), dtype=np.int64)
    ranks[rows, order] = np.arange(n, dtype=np.int64)
    return ranks


def rho_from_ranks(r1, r2) -> float:
    """Spearman rho between two tie-free rank vectors of equal length."""
    r1 = np.asarray(r1, dtype=np.int64)
    r2 = np.asarray(r2, dtype=np.int64)
    if r1.ndim != 1 or r1.shape != r2.shape:
        raise ValueError("r1 and r2 must be 1D arrays with identical length")
    n = r1.shape[0]
    if n <= 1:
        raise ValueError("at least two ranks are required")
    d = r1 - r2
    return 1.0 - rho_mult(n) * int(np.dot(d, d))


def _jit_enabled(use_jit):
    return use_numba() if use_jit is None else bool(use_jit)


def _rank_row_mult(shape):
    n = shape[1]
    if n <= 1:
        raise ValueError("at least two ranks per row are required")
    return rho_mult(n)


def rho_from_rank_rows(r1: np.ndarray, r2: np.ndarray, use_jit=None) -> np.ndarray:
    """
    Vectorized Spearman rho for paired rows of two 2D rank arrays.

    Parameters
    ----------
    r1, r2 : ndarray, shape (n_rows, n)
        Integer rankings, each row a permutation of 0..n-1.
    use_jit : bool or None
        Force the Numba (True) or NumPy (False) kernel; None follows
        config.USE_NUMBA.

    Returns
    -------
    rhos : ndarray, shape (n_rows,)
    """
    r1 = np.ascontiguousarray(r1, dtype=np.int64)
    r2 = np.ascontiguousarray(r2, dtype=np.int64)
    if r1.shape != r2.shape or r1.ndim != 2:
        raise ValueError("r1 and r2 must be 2D arrays with identical shape (n_rows, n)")
    if r1.shape[0] == 0:
        return np.empty(0, dtype=np.float64)
    mult = _rank_row_mult(r1.shape)

    if _jit_enabled(use_jit):
        return _rho_from_rank_rows_jit(r1, r2, mult)

    d = r1 - r2
    ss = np.einsum("ij,ij->i", d, d)
    return 1.0 - mult * ss.astype(np.float64)


def rho_vs_identity_rows(perms: np.ndarray, use_jit=None) -> np.ndarray:
    """Rho of each row of *perms* against the identity ranking 0..n-1.

    Same result as ``rho_from_rank_rows(perms, identity)`` without building
    the (n_rows, n) identity array.
    """
    perms = np.ascontiguousarray(perms, dtype=np.int64)
    if perms.ndim != 2:
        raise ValueError("perms must be a 2D array (n_rows, n)")
    if perms.shape[0] == 0:
        return np.empty(0, dtype=np.float64)
    mult = _rank_row_mult(perms.shape)

    if _jit_enabled(use_jit):
        return _rho_vs_identity_rows_jit(perms, mult)

    d = perms - np.arange(perms.shape[1], dtype=np.int64)
    ss = np.einsum("ij,ij->i", d, d)
    return 1.0 - mult * ss.astype(np.float64)
