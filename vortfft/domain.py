"""
Domain setup, wavenumber matrices, and the simulation context.

This module builds the frequency-domain coordinate matrices used by every
spectral operator and bundles them, together with the grid description, into
an immutable SimulationContext that is created once per run.

Arrays follow the ``indexing='ij'`` convention: axis 0 is x, axis 1 is y.
Wavenumbers are integers, i.e. the operators act on a 2π-periodic box; the
physical extents Lx, Ly only set the spacing of the output mesh.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np


def wavenumber_sequence(N):
    """
    Integer wavenumbers in FFT order.

    Args:
        N (int): Number of grid points along the axis

    Returns:
        ndarray: [0, 1, ..., N/2, -N/2+1, ..., -1] for even N, and the
            standard FFT ordering for odd N.
    """
    if N <= 0:
        raise ValueError(f"Grid size must be positive, got {N}")
    return np.concatenate([np.arange(0, N // 2 + 1), np.arange(-N // 2 + 1, 0)]).astype(np.float64)


def wavenumbers(Nx, Ny):
    """
    Compute the wavenumber matrices for a full (complex) 2D FFT.

    Args:
        Nx (int): Number of grid points in x
        Ny (int): Number of grid points in y

    Returns:
        tuple: (kx, ky, k_laplace)
            - kx: i * kx wavenumbers, constant along axis 1 (Nx, Ny)
            - ky: i * ky wavenumbers, constant along axis 0 (Nx, Ny)
            - k_laplace: kx² + ky², the Fourier symbol of the Laplacian.
              Real-valued and non-positive (Nx, Ny)
    """
    seq_x = wavenumber_sequence(Nx)
    seq_y = wavenumber_sequence(Ny)
    KX, KY = np.meshgrid(seq_x, seq_y, indexing='ij')
    kx = 1j * KX
    ky = 1j * KY
    k_laplace = kx**2 + ky**2
    return kx, ky, k_laplace


def dealias_mask(Nx, Ny, dealias):
    """
    Rectangular truncation mask for the nonlinear term.

    Modes with |kx| > Nx/(2*dealias) or |ky| > Ny/(2*dealias) are removed;
    dealias=1.5 reproduces the 2/3 rule.

    Args:
        Nx (int): Grid size in x
        Ny (int): Grid size in y
        dealias (float): Dealias factor (1.0 disables truncation)

    Returns:
        ndarray or None: Boolean mask (Nx, Ny), or None when dealias == 1.0
    """
    if dealias < 1.0:
        raise ValueError("Dealias factor must be >= 1.0")
    if dealias == 1.0:
        return None

    kx_max = int(Nx / (2.0 * dealias))
    ky_max = int(Ny / (2.0 * dealias))
    KX, KY = np.meshgrid(np.abs(wavenumber_sequence(Nx)), np.abs(wavenumber_sequence(Ny)), indexing='ij')
    return (KX <= kx_max) & (KY <= ky_max)


@dataclass(frozen=True)
class SimulationContext:
    """Grid description and cached spectral operators for one run."""

    Nx: int
    Ny: int
    Lx: float
    Ly: float
    kx: np.ndarray
    ky: np.ndarray
    k_laplace: np.ndarray
    dealias_mask: Optional[np.ndarray] = None

    @property
    def shape(self):
        return (self.Nx, self.Ny)

    @property
    def spacing(self):
        return (self.Lx / self.Nx, self.Ly / self.Ny)


def build_context(Nx, Ny, Lx=1.0, Ly=1.0, dealias=1.0):
    """
    Build the SimulationContext for a grid.

    Args:
        Nx (int): Number of grid points in x
        Ny (int): Number of grid points in y
        Lx (float): Domain length in x (output spacing only)
        Ly (float): Domain length in y (output spacing only)
        dealias (float): Dealias factor for the advection term (1.0 = off)

    Returns:
        SimulationContext: Context with read-only wavenumber arrays

    Raises:
        ValueError: If grid sizes or extents are not positive
        MemoryError: If the wavenumber matrices cannot be allocated
    """
    if Nx <= 0 or Ny <= 0:
        raise ValueError("Grid dimensions Nx and Ny must be positive")
    if Lx <= 0 or Ly <= 0:
        raise ValueError("Domain lengths Lx and Ly must be positive")

    try:
        kx, ky, k_laplace = wavenumbers(Nx, Ny)
        mask = dealias_mask(Nx, Ny, dealias)
    except MemoryError as exc:
        raise MemoryError(f"Cannot allocate wavenumber matrices for a {Nx}x{Ny} grid") from exc

    for arr in (kx, ky, k_laplace, mask):
        if arr is not None:
            arr.flags.writeable = False

    return SimulationContext(
        Nx=int(Nx), Ny=int(Ny), Lx=float(Lx), Ly=float(Ly),
        kx=kx, ky=ky, k_laplace=k_laplace, dealias_mask=mask,
    )


def grid_coordinates(ctx):
    """
    Physical grid point coordinates for output.

    Args:
        ctx (SimulationContext): Simulation context

    Returns:
        tuple: (x, y) 1D coordinate arrays of length Nx and Ny
    """
    dx, dy = ctx.spacing
    return np.arange(ctx.Nx) * dx, np.arange(ctx.Ny) * dy
