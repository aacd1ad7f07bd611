"""
Spectral diagnostics for 2D turbulence.

Isotropic energy and enstrophy spectra, shell-averaged in Fourier space.
Spectra are normalised so that summing over all shells recovers the
domain-averaged energy 0.5<|u|²> and enstrophy 0.5<ω²>.
"""

import numpy as np

from .domain import wavenumber_sequence


def shell_index(Nx, Ny):
    """Integer shell index floor(|k|) for every mode of a full 2D FFT."""
    IX, IY = np.meshgrid(wavenumber_sequence(Nx), wavenumber_sequence(Ny), indexing='ij')
    return np.floor(np.sqrt(IX**2 + IY**2)).astype(int)


def compute_spectra(u, v, vort):
    """
    Compute isotropic 1D energy and enstrophy spectra.

    Args:
        u (ndarray): x-velocity in physical space (Nx, Ny)
        v (ndarray): y-velocity in physical space (Nx, Ny)
        vort (ndarray): Vorticity in physical space (Nx, Ny)

    Returns:
        tuple: (k_bins, E_k, Z_k)
            - k_bins: Integer wavenumber of each shell
            - E_k: Energy spectrum, sum(E_k) = 0.5<|u|²>
            - Z_k: Enstrophy spectrum, sum(Z_k) = 0.5<ω²>
    """
    Nx, Ny = u.shape
    N = Nx * Ny

    uh = np.fft.fft2(u)
    vh = np.fft.fft2(v)
    wh = np.fft.fft2(vort)

    # Energy per mode (Parseval: <f²> = Σ|f̂|² / N²)
    E_mode = 0.5 * (np.abs(uh)**2 + np.abs(vh)**2) / (N * N)
    Z_mode = 0.5 * np.abs(wh)**2 / (N * N)

    shell_idx = shell_index(Nx, Ny)
    mmax = int(shell_idx.max())
    Ek = np.bincount(shell_idx.ravel(), weights=E_mode.ravel(), minlength=mmax + 1)
    Zk = np.bincount(shell_idx.ravel(), weights=Z_mode.ravel(), minlength=mmax + 1)

    k_bins = np.arange(mmax + 1, dtype=np.float64)
    return k_bins, Ek, Zk
