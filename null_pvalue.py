"""
Empirical p-values of observed rho values against a simulated null.

Each tail is estimated as (1 + number of null draws at least as extreme)
/ (1 + K), so a p-value is never zero.  The two-sided p-value is twice the
smaller tail, capped at 1.  Observations beyond every null draw are flagged
as *limited*: their p-value is bounded below by 2 / (K + 1) and more
iterations would be needed to resolve it.
"""

import numpy as np

import config


def rho_to_pvalue(rho, null_rho, tol=None):
    """Two-sided empirical p-values for observed *rho* values.

    Parameters
    ----------
    rho : float or array_like
        Observed correlations.
    null_rho : array_like
        Simulated null distribution (any order).
    tol : float or None
        Null draws within *tol* of an observation count as at least as
        extreme (default: config.PVALUE_TOL).

    Returns
    -------
    pvalues : ndarray
    limited : ndarray of bool
    """
    if tol is None:
        tol = config.PVALUE_TOL
    obs = np.atleast_1d(np.asarray(rho, dtype=np.float64))
    null = np.sort(np.asarray(null_rho, dtype=np.float64).ravel())
    k = null.size
    if k == 0:
        raise ValueError("null distribution should contain at least one value")

    n_left = np.searchsorted(null, obs + tol, side="right")
    n_right = k - np.searchsorted(null, obs - tol, side="left")
    left = (n_left + 1.0) / (k + 1.0)
    right = (n_right + 1.0) / (k + 1.0)

    pvalues = np.minimum(1.0, 2.0 * np.minimum(left, right))
    limited = (n_left == 0) | (n_right == 0)
    return pvalues, limited
