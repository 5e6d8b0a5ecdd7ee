"""
Monte Carlo null distributions of Spearman's rho.

Two samplers, one rho value per supplied seed:

get_null_rho(n_cells, iters, seeds)
    rho between the identity ranking 0..N-1 and a uniformly random
    permutation of it (no covariates).

get_null_rho_design(qr, iters, seeds)
    rho between the rankings of two independently simulated residual
    vectors of a linear model.  Under the null, residuals are noise confined
    to the (Nobs - Ncoef)-dimensional orthogonal complement of the design's
    column space.  In the rotated coordinates of the QR factor that subspace
    is simply the last Nobs - Ncoef coordinates, so each realization zeroes
    the first Ncoef entries of a working vector, fills the rest with
    standard normals and multiplies by Q.  The projection matrix is never
    formed.

Each iteration seeds its own generator, so iterations are reproducible and
independent.  With n_jobs != 1 the seeds are split into contiguous blocks and
simulated by joblib workers (each with private generators and scratch
vectors); blocks are concatenated in the original order and the output is
identical to a sequential run.
"""

import warnings

import numpy as np
from joblib import Parallel, delayed, effective_n_jobs

import config
from rng_diagnostic import check_integer_scalar, make_rng
from spearman_helpers import rank_stable, rho_from_rank_rows, rho_vs_identity_rows

# Seeds are stored as int64.
_SEED_MAX = int(np.iinfo(np.int64).max)


# ---------------------------------------------------------------------------
# Argument checks
# ---------------------------------------------------------------------------

def _check_seeds(seeds, iters):
    """Validate the seed sequence against the iteration count."""
    seeds = list(seeds)
    if len(seeds) != iters:
        raise ValueError("number of iterations and seeds should be the same")
    checked = []
    for s in seeds:
        s = check_integer_scalar(s, "seed")
        if s < 0:
            raise ValueError(f"seeds should be non-negative, got {s}")
        if s > _SEED_MAX:
            raise ValueError(f"seeds should be at most {_SEED_MAX}, got {s}")
        checked.append(s)
    return np.asarray(checked, dtype=np.int64)


def make_seeds(iters, seed=None):
    """Draw one seed per iteration from a master generator.

    Parameters
    ----------
    iters : int
        Number of iterations.
    seed : int or None
        Master seed (default: config.SEED).

    Returns
    -------
    ndarray of int64, shape (iters,)
    """
    iters = check_integer_scalar(iters, "number of iterations")
    if iters < 0:
        raise ValueError("number of iterations should be non-negative")
    if seed is None:
        seed = config.SEED
    rng = np.random.default_rng(seed)
    return rng.integers(0, config.SEED_UPPER, size=iters, dtype=np.int64)


# ---------------------------------------------------------------------------
# Block workers
# ---------------------------------------------------------------------------

def _chunk_rows(n):
    """Rows per chunk so one (rows x n) rank array stays within CHUNK_ELEMS."""
    return max(1, config.CHUNK_ELEMS // max(1, n))


def _null_rho_block(n_cells, seeds, use_jit):
    """Unconstrained rho for a contiguous block of seeds."""
    out = np.empty(seeds.size, dtype=np.float64)
    rows = _chunk_rows(n_cells)

    for start in range(0, seeds.size, rows):
        chunk = seeds[start:start + rows]
        perms = np.empty((chunk.size, n_cells), dtype=np.int64)
        for i, s in enumerate(chunk):
            # Generator.permutation is a Fisher-Yates shuffle of 0..N-1.
            perms[i] = make_rng(int(s)).permutation(n_cells)
        out[start:start + chunk.size] = rho_vs_identity_rows(perms, use_jit=use_jit)
    return out


def _null_rho_design_block(qr, seeds, use_jit):
    """Design-adjusted rho for a contiguous block of seeds."""
    nobs = qr.get_nobs()
    ncoef = qr.get_ncoefs()
    nresid = nobs - ncoef
    out = np.empty(seeds.size, dtype=np.float64)
    rhs = np.empty(nobs, dtype=np.float64)
    # Two modes share the budget.
    rows = _chunk_rows(2 * nobs)

    for start in range(0, seeds.size, rows):
        chunk = seeds[start:start + rows]
        ranks = np.empty((2, chunk.size, nobs), dtype=np.int64)
        for i, s in enumerate(chunk):
            rng = make_rng(int(s))
            for mode in range(2):
                # Main effects are zero; only the residual coordinates get noise.
                rhs[:ncoef] = 0.0
                rhs[ncoef:] = rng.standard_normal(nresid)
                rhs[:] = qr.apply(rhs)
                ranks[mode, i] = rank_stable(rhs)
        out[start:start + chunk.size] = rho_from_rank_rows(
            ranks[0], ranks[1], use_jit=use_jit)
    return out


def _dispatch(block_fn, first_arg, seeds, n_jobs):
    """Run *block_fn* over *seeds*, sequentially or over joblib workers."""
    if n_jobs is None:
        n_jobs = config.N_JOBS
    use_jit = bool(config.USE_NUMBA)
    if seeds.size == 0:
        return np.empty(0, dtype=np.float64)
    if n_jobs == 1 or seeds.size == 1:
        return block_fn(first_arg, seeds, use_jit)

    # n_jobs=-1 uses all available cores
    n_blocks = min(effective_n_jobs(n_jobs), seeds.size)
    blocks = np.array_split(seeds, n_blocks)
    parts = Parallel(n_jobs=n_jobs)(
        delayed(block_fn)(first_arg, b, use_jit) for b in blocks)
    return np.concatenate(parts)


# ---------------------------------------------------------------------------
# Public samplers
# ---------------------------------------------------------------------------

def get_null_rho(n_cells, iters, seeds, n_jobs=None):
    """Null distribution of rho for N cells without covariates.

    Parameters
    ----------
    n_cells : int
        Number of cells (N > 1).
    iters : int
        Number of iterations K (>= 0).
    seeds : sequence of int
        One non-negative seed per iteration; ``len(seeds) == iters``.
    n_jobs : int or None
        Parallel jobs (1 = sequential, -1 = all cores, None = config.N_JOBS).

    Returns
    -------
    ndarray of float64, shape (iters,)
        Values lie in [-1, 1]; a seed that yields the identity permutation
        gives exactly 1.
    """
    n_cells = check_integer_scalar(n_cells, "number of cells")
    if n_cells <= 1:
        raise ValueError("number of cells should be greater than 1")
    iters = check_integer_scalar(iters, "number of iterations")
    if iters < 0:
        raise ValueError("number of iterations should be non-negative")
    seeds = _check_seeds(seeds, iters)

    return _dispatch(_null_rho_block, n_cells, seeds, n_jobs)


def get_null_rho_design(qr, iters, seeds, n_jobs=None):
    """Null distribution of rho between residuals of a linear model.

    Parameters
    ----------
    qr : object
        Orthogonal factor of the design matrix, exposing ``get_nobs()``,
        ``get_ncoefs()`` and ``apply(vector, transpose=False)`` (see
        qr_applicator.QRApplicator).  It must be picklable when n_jobs != 1.
    iters : int
        Number of iterations K (>= 0).
    seeds : sequence of int
        One non-negative seed per iteration; ``len(seeds) == iters``.
    n_jobs : int or None
        Parallel jobs (1 = sequential, -1 = all cores, None = config.N_JOBS).

    Returns
    -------
    ndarray of float64, shape (iters,)

    Notes
    -----
    Per iteration one generator draws mode 0's noise and then mode 1's, so
    results are reproducible for a given seed.  The caller must leave at
    least one residual degree of freedom (Ncoef < Nobs); with none, every
    realization is the zero vector and the ranking is meaningless.
    """
    iters = check_integer_scalar(iters, "number of iterations")
    if iters < 0:
        raise ValueError("number of iterations should be non-negative")
    seeds = _check_seeds(seeds, iters)

    nobs = check_integer_scalar(qr.get_nobs(), "number of observations")
    ncoef = check_integer_scalar(qr.get_ncoefs(), "number of coefficients")
    if nobs <= 1:
        raise ValueError("number of observations should be greater than 1")
    if ncoef >= nobs:
        warnings.warn(
            "Design has no residual degrees of freedom; simulated residuals "
            "are all zero and the null rho values are degenerate.",
            UserWarning,
            stacklevel=2,
        )

    return _dispatch(_null_rho_design_block, qr, seeds, n_jobs)
