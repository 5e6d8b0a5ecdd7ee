"""
Summary table generation (no plots).

Produces two table types:
  1. Per-iteration null draws (iteration, seed, rho)
  2. Null distribution summary, one row per simulated configuration
"""

import numpy as np
import pandas as pd


# ---------------------------------------------------------------------------
# Table 1: Per-iteration null draws
# ---------------------------------------------------------------------------

def build_null_table(null_rho, seeds):
    """Build a DataFrame with one row per Monte Carlo iteration."""
    null_rho = np.asarray(null_rho, dtype=float)
    seeds = np.asarray(seeds, dtype=np.int64)
    if null_rho.shape != seeds.shape:
        raise ValueError("null_rho and seeds must have the same length")
    return pd.DataFrame({
        "iteration": np.arange(null_rho.size),
        "seed": seeds,
        "rho": null_rho,
    })


def save_null_table(df, path="results/null_rho.csv"):
    """Write per-iteration null table to CSV."""
    df.to_csv(path, index=False, float_format="%.8f")
    return path


# ---------------------------------------------------------------------------
# Table 2: Null distribution summary
# ---------------------------------------------------------------------------

def summarize_null(null_rho, label, **extra):
    """Summary statistics of one simulated null distribution.

    Extra keyword arguments (e.g. n_cells, n_coefs) are copied into the
    returned dict so rows from several configurations can share a table.
    """
    arr = np.asarray(null_rho, dtype=float)
    row = {"label": label, **extra, "iters": int(arr.size)}
    if arr.size == 0:
        row.update({k: np.nan for k in
                    ("mean", "var", "min", "q025", "median", "q975", "max")})
        return row
    q025, median, q975 = np.quantile(arr, [0.025, 0.5, 0.975])
    row.update({
        "mean": float(arr.mean()),
        "var": float(arr.var(ddof=1)) if arr.size > 1 else np.nan,
        "min": float(arr.min()),
        "q025": float(q025),
        "median": float(median),
        "q975": float(q975),
        "max": float(arr.max()),
    })
    return row


def build_summary_table(summaries):
    """Build a DataFrame from a list of summarize_null() dicts."""
    return pd.DataFrame(summaries).reset_index(drop=True)


def save_summary_table(df, path="results/null_summary.csv"):
    df.to_csv(path, index=False, float_format="%.6f")
    return path


# ---------------------------------------------------------------------------
# Console display
# ---------------------------------------------------------------------------

def print_summary(summary_df):
    """Print key results to console."""
    pd.set_option("display.max_columns", 20)
    pd.set_option("display.width", 160)

    print("\n" + "=" * 80)
    print("NULL DISTRIBUTION OF SPEARMAN'S RHO")
    print("=" * 80)
    if not summary_df.empty:
        print(summary_df.to_string(index=False))
    print()
