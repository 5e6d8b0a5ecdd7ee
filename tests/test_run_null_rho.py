"""End-to-end tests for scripts/run_null_rho.py."""

import importlib.util
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

_script = Path(__file__).resolve().parents[1] / "scripts" / "run_null_rho.py"
_spec = importlib.util.spec_from_file_location("run_null_rho", _script)
run_null_rho = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(run_null_rho)


def test_unconstrained_run(tmp_path, capsys):
    null_df, summary_df = run_null_rho.main(
        n_cells=8, iters=60, seed=1, n_jobs=1, outdir=str(tmp_path),
        observed=[0.9, 0.0])
    assert len(null_df) == 60
    assert (tmp_path / "null_rho.csv").exists()
    assert (tmp_path / "null_summary.csv").exists()
    assert summary_df.loc[0, "label"] == "unconstrained"
    out = capsys.readouterr().out
    assert "rho = +0.9000" in out


def test_design_run(tmp_path):
    rng = np.random.default_rng(0)
    design_csv = tmp_path / "design.csv"
    pd.DataFrame({"age": rng.normal(50, 10, 20),
                  "batch": np.arange(20) % 2}).to_csv(design_csv, index=False)
    null_df, summary_df = run_null_rho.main(
        design_path=str(design_csv), intercept=True, iters=40, seed=3,
        n_jobs=1, outdir=str(tmp_path / "out"))
    assert len(null_df) == 40
    assert summary_df.loc[0, "n_cells"] == 20
    assert summary_df.loc[0, "n_coefs"] == 3
    assert null_df["rho"].between(-1, 1).all()


def test_requires_exactly_one_target(tmp_path):
    with pytest.raises(ValueError):
        run_null_rho.main(iters=5, outdir=str(tmp_path))
    with pytest.raises(ValueError):
        run_null_rho.main(n_cells=5, design_path="x.csv", iters=5,
                          outdir=str(tmp_path))


def test_load_design_intercept(tmp_path):
    path = tmp_path / "d.csv"
    pd.DataFrame({"x": [1.0, 2.0, 3.0]}).to_csv(path, index=False)
    design = run_null_rho.load_design(path, intercept=True)
    np.testing.assert_array_equal(design, [[1, 1], [1, 2], [1, 3]])
