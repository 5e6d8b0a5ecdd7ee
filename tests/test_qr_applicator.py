"""Tests for QRApplicator: implicit Q multiplication via LAPACK dormqr."""

import numpy as np
import pytest

from qr_applicator import QRApplicator


def _design(nobs=12, seed=0):
    rng = np.random.default_rng(seed)
    return np.column_stack([np.ones(nobs), rng.standard_normal((nobs, 2))])


def _explicit_q(qr):
    n = qr.get_nobs()
    return np.column_stack([qr.apply(col) for col in np.eye(n)])


def test_dimensions():
    qr = QRApplicator.from_design(_design(12))
    assert qr.get_nobs() == 12
    assert qr.get_ncoefs() == 3


def test_q_is_orthogonal():
    Q = _explicit_q(QRApplicator.from_design(_design()))
    np.testing.assert_allclose(Q.T @ Q, np.eye(Q.shape[0]), atol=1e-12)


def test_leading_columns_span_design():
    X = _design()
    Q = _explicit_q(QRApplicator.from_design(X))
    Q1 = Q[:, :3]
    # Projecting X onto span(Q1) leaves it unchanged.
    np.testing.assert_allclose(Q1 @ (Q1.T @ X), X, atol=1e-10)


def test_residual_subspace_is_orthogonal_to_design():
    X = _design()
    qr = QRApplicator.from_design(X)
    rng = np.random.default_rng(1)
    v = np.zeros(12)
    v[3:] = rng.standard_normal(9)
    resid = qr.apply(v)
    np.testing.assert_allclose(X.T @ resid, 0.0, atol=1e-10)
    assert np.linalg.norm(resid) == pytest.approx(np.linalg.norm(v))


def test_transpose_inverts_apply():
    qr = QRApplicator.from_design(_design())
    v = np.random.default_rng(2).standard_normal(12)
    np.testing.assert_allclose(qr.apply(qr.apply(v), transpose=True), v, atol=1e-12)


def test_apply_does_not_modify_input():
    qr = QRApplicator.from_design(_design())
    v = np.arange(12, dtype=float)
    before = v.copy()
    qr.apply(v)
    np.testing.assert_array_equal(v, before)


def test_no_covariates_is_identity():
    qr = QRApplicator.from_design(np.empty((5, 0)))
    assert qr.get_ncoefs() == 0
    v = np.arange(5, dtype=float)
    np.testing.assert_array_equal(qr.apply(v), v)


def test_wrong_length_vector():
    qr = QRApplicator.from_design(_design())
    with pytest.raises(ValueError, match="length"):
        qr.apply(np.zeros(11))


def test_from_design_rejects_bad_designs():
    with pytest.raises(ValueError, match="two-dimensional"):
        QRApplicator.from_design(np.ones(5))
    with pytest.raises(ValueError, match="more columns than rows"):
        QRApplicator.from_design(np.ones((2, 3)))
    with pytest.raises(ValueError, match="residual degrees of freedom"):
        QRApplicator.from_design(np.eye(3))
    X = _design()
    with pytest.raises(ValueError, match="full column rank"):
        QRApplicator.from_design(np.column_stack([X, X[:, 1]]))


def test_constructor_validates_qraux():
    with pytest.raises(ValueError, match="auxiliary"):
        QRApplicator(np.ones((4, 2)), np.ones(3))
