from __future__ import annotations

import numpy as np
import pytest

from vortfft import transform


def test_round_trip_real_field():
    rng = np.random.default_rng(0)
    X = rng.standard_normal((16, 12))
    np.testing.assert_allclose(transform.inverse_real(transform.forward(X)), X, atol=1e-12)


def test_forward_of_real_field_is_hermitian():
    rng = np.random.default_rng(1)
    X_hat = transform.forward(rng.standard_normal((8, 8)))
    # X̂(-k) = conj(X̂(k))
    flipped = np.roll(np.flip(X_hat, axis=(0, 1)), shift=(1, 1), axis=(0, 1))
    np.testing.assert_allclose(flipped, np.conj(X_hat), atol=1e-12)
    assert np.max(np.abs(transform.inverse(X_hat).imag)) < 1e-12


def test_linearity():
    rng = np.random.default_rng(2)
    a, b = rng.standard_normal((2, 8, 8))
    np.testing.assert_allclose(
        transform.forward(2.0 * a - 3.0 * b),
        2.0 * transform.forward(a) - 3.0 * transform.forward(b),
        atol=1e-12,
    )


def test_rejects_non_2d_input():
    with pytest.raises(ValueError):
        transform.forward(np.zeros(8))
    with pytest.raises(ValueError):
        transform.inverse(np.zeros((2, 4, 4)))


def test_rejects_wrong_shape_and_dtype():
    with pytest.raises(ValueError):
        transform.forward(np.zeros((8, 4)), shape=(8, 8))
    with pytest.raises(ValueError):
        transform.forward(np.array([["a", "b"], ["c", "d"]]))
