from __future__ import annotations

import numpy as np
import pytest

from vortfft import domain


def test_wavenumber_sequence_even():
    seq = domain.wavenumber_sequence(8)
    np.testing.assert_array_equal(seq, [0, 1, 2, 3, 4, -3, -2, -1])


def test_wavenumber_sequence_odd_matches_fftfreq():
    seq = domain.wavenumber_sequence(7)
    np.testing.assert_array_equal(seq, np.fft.fftfreq(7) * 7)


def test_wavenumber_matrices_layout():
    kx, ky, k_laplace = domain.wavenumbers(8, 6)
    assert kx.shape == ky.shape == k_laplace.shape == (8, 6)

    # kx varies along axis 0 only, ky along axis 1 only
    np.testing.assert_array_equal(kx[:, 0], 1j * domain.wavenumber_sequence(8))
    np.testing.assert_array_equal(kx, np.repeat(kx[:, :1], 6, axis=1))
    np.testing.assert_array_equal(ky[0, :], 1j * domain.wavenumber_sequence(6))
    np.testing.assert_array_equal(ky, np.repeat(ky[:1, :], 8, axis=0))

    assert np.all(kx.real == 0) and np.all(ky.real == 0)


def test_laplacian_is_real_and_non_positive():
    _, _, k_laplace = domain.wavenumbers(16, 16)
    assert np.all(k_laplace.imag == 0)
    assert np.all(k_laplace.real <= 0)
    assert k_laplace[0, 0] == 0
    assert k_laplace[1, 2] == -(1 + 4)


def test_dealias_mask_two_thirds_rule():
    assert domain.dealias_mask(12, 12, 1.0) is None

    mask = domain.dealias_mask(12, 12, 1.5)
    seq = np.abs(domain.wavenumber_sequence(12))
    kept_x = seq[np.any(mask, axis=1)]
    assert kept_x.max() == 4
    assert mask[0, 0]
    assert not mask[5, 0]

    with pytest.raises(ValueError):
        domain.dealias_mask(12, 12, 0.5)


def test_build_context_is_read_only():
    ctx = domain.build_context(8, 8, Lx=2.0, Ly=4.0)
    assert ctx.shape == (8, 8)
    assert ctx.spacing == (0.25, 0.5)
    assert ctx.dealias_mask is None
    with pytest.raises(ValueError):
        ctx.k_laplace[0, 0] = 1.0


@pytest.mark.parametrize("Nx,Ny,Lx,Ly", [(0, 8, 1.0, 1.0), (8, -2, 1.0, 1.0), (8, 8, 0.0, 1.0)])
def test_build_context_rejects_bad_grid(Nx, Ny, Lx, Ly):
    with pytest.raises(ValueError):
        domain.build_context(Nx, Ny, Lx, Ly)


def test_grid_coordinates():
    ctx = domain.build_context(4, 2, Lx=1.0, Ly=1.0)
    x, y = domain.grid_coordinates(ctx)
    np.testing.assert_allclose(x, [0.0, 0.25, 0.5, 0.75])
    np.testing.assert_allclose(y, [0.0, 0.5])
