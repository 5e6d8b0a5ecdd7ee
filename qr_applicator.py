"""
Multiply vectors by the orthogonal factor of a compact QR decomposition.

A design matrix X (Nobs x Ncoef) factorizes as X = Q R.  The first Ncoef
columns of Q span the column space of X and the remaining Nobs - Ncoef span
the residual subspace.  Q is stored implicitly as Householder reflectors
(LAPACK geqrf layout), and QRApplicator.apply() multiplies by it with LAPACK
dormqr, so the Nobs x Nobs matrix is never formed.

The null samplers only need three things from a factorization:

    get_nobs()                      -> int
    get_ncoefs()                    -> int
    apply(vector, transpose=False)  -> ndarray of length Nobs

Any object exposing those can be passed to null_rho.get_null_rho_design.
"""

import numpy as np
from scipy.linalg import LinAlgError, lapack
from scipy.linalg import qr as qr_decompose

# Relative size of |R[j, j]| below which a design column is treated as
# linearly dependent on the previous ones.
RANK_TOL = 1e-7


class QRApplicator:
    """Implicit orthogonal factor of a compact QR decomposition.

    Parameters
    ----------
    qr : ndarray, shape (Nobs, Ncoef)
        Householder vectors below the diagonal, R on and above it.
    qraux : ndarray, shape (Ncoef,)
        Scalar factors of the elementary reflectors (LAPACK ``tau``).
    """

    def __init__(self, qr, qraux):
        qr = np.asarray(qr, dtype=np.float64)
        qraux = np.asarray(qraux, dtype=np.float64).ravel()
        if qr.ndim != 2:
            raise ValueError("QR matrix should be two-dimensional")
        nobs, ncoef = qr.shape
        if ncoef > nobs:
            raise ValueError("QR matrix should not have more columns than rows")
        if qraux.shape[0] != ncoef:
            raise ValueError("QR auxiliary vector should have one entry per column")

        self._qr = np.asfortranarray(qr)
        self._qraux = qraux
        self._nobs = nobs
        self._ncoef = ncoef
        self._lwork = self._query_lwork() if ncoef else 1

    @classmethod
    def from_design(cls, design):
        """Factorize a full-rank design matrix with residual degrees of freedom."""
        X = np.asarray(design, dtype=np.float64)
        if X.ndim != 2:
            raise ValueError("design matrix should be two-dimensional")
        nobs, ncoef = X.shape
        if nobs < ncoef:
            raise ValueError("design matrix should not have more columns than rows")
        if nobs == ncoef:
            raise ValueError("design matrix has no residual degrees of freedom")
        if ncoef == 0:
            return cls(np.empty((nobs, 0)), np.empty(0))

        (qr_raw, tau), _ = qr_decompose(X, mode="raw")
        diag = np.abs(np.diag(qr_raw))
        if diag.max() == 0.0 or np.any(diag <= RANK_TOL * diag.max()):
            raise ValueError("design matrix is not of full column rank")
        return cls(qr_raw, tau)

    def get_nobs(self):
        return self._nobs

    def get_ncoefs(self):
        return self._ncoef

    def _query_lwork(self):
        c = np.zeros((self._nobs, 1), dtype=np.float64, order="F")
        _, work, info = lapack.dormqr("L", "N", self._qr, self._qraux, c, -1)
        if info != 0:
            raise LinAlgError(f"dormqr workspace query failed (info={info})")
        return max(1, int(work[0].real))

    def apply(self, vector, transpose=False):
        """Return Q @ vector, or Q.T @ vector when *transpose* is True."""
        v = np.asarray(vector, dtype=np.float64).ravel()
        if v.shape[0] != self._nobs:
            raise ValueError(
                f"vector should have length {self._nobs}, got {v.shape[0]}")
        if self._ncoef == 0:
            return v.copy()

        c = np.asfortranarray(v.reshape(self._nobs, 1))
        trans = "T" if transpose else "N"
        cq, _, info = lapack.dormqr("L", trans, self._qr, self._qraux, c,
                                    self._lwork)
        if info != 0:
            raise LinAlgError(f"dormqr failed (info={info})")
        return np.asarray(cq).ravel()
