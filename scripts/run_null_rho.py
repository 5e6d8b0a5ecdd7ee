"""
Main orchestrator for null distributions of Spearman's rho.

Simulates the null distribution either for N cells without covariates or
for the residuals of a design matrix read from CSV, then writes CSV outputs
and a console summary.  Observed rho values can be passed to get empirical
p-values against the simulated null.
"""

import sys
from pathlib import Path
_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

import os
import time
import argparse

import config

_numba_pre = argparse.ArgumentParser(add_help=False)
_numba_pre.add_argument("--no-numba", action="store_true")
_pre_args, _ = _numba_pre.parse_known_args()
if _pre_args.no_numba:
    config.USE_NUMBA = False

import numpy as np
import pandas as pd

from config import N_ITERS, SEED, N_JOBS
from null_rho import get_null_rho, get_null_rho_design, make_seeds
from null_pvalue import rho_to_pvalue
from qr_applicator import QRApplicator
from table_outputs import (build_null_table, save_null_table,
                           summarize_null, build_summary_table,
                           save_summary_table, print_summary)


def _log(msg):
    print(msg, flush=True)


def load_design(path, intercept=False):
    """Read a numeric design matrix (one row per cell) from CSV."""
    df = pd.read_csv(path)
    design = df.to_numpy(dtype=float)
    if intercept:
        design = np.column_stack([np.ones(design.shape[0]), design])
    return design


def main(n_cells=None, design_path=None, intercept=False, iters=None,
         seed=None, n_jobs=None, outdir="results", observed=None,
         use_numba=None):
    if use_numba is not None:
        config.USE_NUMBA = use_numba
    if iters is None:
        iters = N_ITERS
    if seed is None:
        seed = SEED
    if n_jobs is None:
        n_jobs = N_JOBS
    if (n_cells is None) == (design_path is None):
        raise ValueError("exactly one of n_cells and design_path is required")

    os.makedirs(outdir, exist_ok=True)
    seeds = make_seeds(iters, seed)

    t0 = time.time()
    if design_path is None:
        _log(f"Simulating unconstrained null for {n_cells} cells "
             f"({iters} iterations)...")
        null = get_null_rho(n_cells, iters, seeds, n_jobs=n_jobs)
        summary = summarize_null(null, "unconstrained", n_cells=n_cells,
                                 n_coefs=0)
    else:
        design = load_design(design_path, intercept=intercept)
        qr = QRApplicator.from_design(design)
        _log(f"Simulating design-adjusted null for {qr.get_nobs()} cells, "
             f"{qr.get_ncoefs()} coefficients ({iters} iterations)...")
        null = get_null_rho_design(qr, iters, seeds, n_jobs=n_jobs)
        summary = summarize_null(null, "design", n_cells=qr.get_nobs(),
                                 n_coefs=qr.get_ncoefs())
    _log(f"  Done in {time.time() - t0:.1f}s")

    null_df = build_null_table(null, seeds)
    summary_df = build_summary_table([summary])
    p1 = save_null_table(null_df, os.path.join(outdir, "null_rho.csv"))
    p2 = save_summary_table(summary_df, os.path.join(outdir, "null_summary.csv"))
    _log(f"\nCSV outputs saved to: {p1}, {p2}")

    print_summary(summary_df)

    if observed:
        pvals, limited = rho_to_pvalue(observed, null)
        for rho, p, lim in zip(observed, pvals, limited):
            flag = "  (limited by iterations)" if lim else ""
            _log(f"rho = {rho:+.4f}  p = {p:.6g}{flag}")

    return null_df, summary_df


def _parse_float_list(s):
    """Parse comma-separated floats, e.g. '0.3,-0.1' -> [0.3, -0.1]."""
    return [float(x.strip()) for x in s.split(",")]


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Simulate the null distribution of Spearman's rho.")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--n-cells", type=int, default=None,
                        help="Number of cells (unconstrained null)")
    target.add_argument("--design", default=None,
                        help="CSV design matrix, one row per cell "
                             "(design-adjusted null)")
    parser.add_argument("--intercept", action="store_true",
                        help="Prepend an intercept column to --design")
    parser.add_argument("--iters", type=int, default=None,
                        help=f"Monte Carlo iterations (default: {N_ITERS})")
    parser.add_argument("--seed", type=int, default=None,
                        help=f"Master RNG seed (default: {SEED})")
    parser.add_argument("--n-jobs", type=int, default=None,
                        help="Parallel jobs for iteration-level parallelism "
                             f"(1=sequential, -1=all cores, default: {N_JOBS})")
    parser.add_argument("--outdir", default="results",
                        help="Output directory (default: results)")
    parser.add_argument("--observed", type=str, default=None,
                        help="Comma-separated observed rho values to test "
                             "(e.g. 0.3,-0.1)")
    parser.add_argument("--no-numba", action="store_true",
                        help="Disable Numba JIT (use pure NumPy)")
    args = parser.parse_args()

    main(n_cells=args.n_cells, design_path=args.design,
         intercept=args.intercept, iters=args.iters, seed=args.seed,
         n_jobs=args.n_jobs, outdir=args.outdir,
         observed=_parse_float_list(args.observed) if args.observed else None,
         use_numba=False if args.no_numba else None)
