"""
Configuration for Monte Carlo null distributions of Spearman's rho.

The samplers in null_rho.py estimate the distribution of rho between two
rankings under the null hypothesis, either for unconstrained permutations of
N cells or for residuals of a linear model (design matrix) after the
covariates have been projected out.
"""

# ---------------------------------------------------------------------------
# Simulation parameters
# ---------------------------------------------------------------------------
# Precision of an empirical p-value: the smallest attainable two-sided
# p-value is 2 / (N_ITERS + 1), so 1e6 iterations resolve p ~ 2e-6.
# Runtime is linear in N_ITERS and roughly N log N in the number of cells.
N_ITERS = 1_000_000

# Master seed used to draw the per-iteration seeds (see null_rho.make_seeds).
SEED = 42

# Per-iteration seeds are drawn from [0, SEED_UPPER).  Keeping them below
# 2**31 - 1 means they round-trip through 32-bit integer columns in CSVs.
SEED_UPPER = 2**31 - 1

# Tolerance used when comparing an observed rho against null draws, so that
# an observed value equal to a simulated one counts as "at least as extreme".
PVALUE_TOL = 1e-8

# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------
# Parallel jobs for iteration-level parallelism (1 = sequential, -1 = all cores)
N_JOBS = 1

# Rank entries held per vectorized chunk inside a worker.  The number of
# iterations per chunk is CHUNK_ELEMS // n_cells (at least one), so memory
# stays bounded for large N.
CHUNK_ELEMS = 2**20

USE_NUMBA = True
