"""Warm up Numba JIT cache by running small workloads that trigger compilation."""

import argparse
import time

import numpy as np

import config

parser = argparse.ArgumentParser(description="Warm up Numba JIT cache.")
parser.add_argument("--no-numba", action="store_true",
                    help="Disable Numba (verify the NumPy path works)")
args = parser.parse_args()
if args.no_numba:
    config.USE_NUMBA = False

from spearman_helpers import use_numba
from null_rho import get_null_rho, get_null_rho_design, make_seeds
from qr_applicator import QRApplicator

if not use_numba():
    print("Numba is disabled -- nothing to warm up.")
    print("Pure NumPy path is active.")
    raise SystemExit(0)

print("=== Warming up Numba (first run compiles; may take 5-15 s) ===")
t0 = time.time()

seeds = make_seeds(50, 0)
get_null_rho(20, 50, seeds, n_jobs=1)

rng = np.random.default_rng(1)
design = np.column_stack([np.ones(20), rng.standard_normal(20)])
get_null_rho_design(QRApplicator.from_design(design), 50, seeds, n_jobs=1)

elapsed = time.time() - t0
print(f"=== Numba cache written ({elapsed:.1f} s) ===")
print("Subsequent runs will load from cache and skip compilation.")
