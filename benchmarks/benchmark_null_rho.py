"""Compare null rho simulation: Numba vs NumPy kernels, sequential vs joblib."""
import sys
from pathlib import Path
_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

import time

import numpy as np

import config
from null_rho import get_null_rho, get_null_rho_design, make_seeds
from qr_applicator import QRApplicator

N_CELLS, ITERS = 200, 20_000
seeds = make_seeds(ITERS, 42)
rng = np.random.default_rng(0)
qr = QRApplicator.from_design(
    np.column_stack([np.ones(N_CELLS), rng.standard_normal((N_CELLS, 2))]))

# Compile once so timings reflect steady state, not JIT cost.
get_null_rho(N_CELLS, 10, seeds[:10], n_jobs=1)

print(f"N={N_CELLS} cells, {ITERS} iterations")
print("-" * 60)

timings = {}
for label, use_jit, n_jobs in [("numpy, sequential", False, 1),
                               ("numba, sequential", True, 1),
                               ("numba, n_jobs=-1", True, -1)]:
    config.USE_NUMBA = use_jit
    t0 = time.perf_counter()
    null = get_null_rho(N_CELLS, ITERS, seeds, n_jobs=n_jobs)
    t_plain = time.perf_counter() - t0
    t0 = time.perf_counter()
    null_d = get_null_rho_design(qr, ITERS, seeds, n_jobs=n_jobs)
    t_design = time.perf_counter() - t0
    timings[label] = (t_plain, t_design)
    print(f"{label:<20} unconstrained {t_plain:6.2f}s  (var={null.var():.6f})"
          f"   design {t_design:6.2f}s  (var={null_d.var():.6f})")

print("-" * 60)
base = timings["numpy, sequential"]
for label, (tp, td) in timings.items():
    print(f"{label:<20} speedup {base[0]/tp:5.2f}x / {base[1]/td:5.2f}x")
