"""
Spectral operators for one time step of the vorticity equation.

Equations (2π-periodic box):
    ∂ω/∂t + u·∇ω = ν∇²ω
    ∇²ψ = -ω
    u = ∂ψ/∂y,  v = -∂ψ/∂x

Each operator is a whole-array, element-wise numpy expression. The per-step
chain is:

    solve_poisson -> velocity_from_streamfunction -> advection_term
        -> crank_nicolson_step
"""

import numpy as np

from . import transform


def solve_poisson(w_hat, kx, ky):
    """
    Solve ∇²ψ = -ω in Fourier space.

    For 2D incompressible flow:
        ψ̂ = -ω̂ / (kx² + ky²)

    with kx, ky the imaginary wavenumbers, so kx² + ky² = -|k|². The mean
    (k = 0) mode is set to zero: ψ is only defined up to a constant.

    Args:
        w_hat (ndarray): Vorticity in spectral space (Nx, Ny)
        kx (ndarray): i*kx wavenumber matrix (Nx, Ny)
        ky (ndarray): i*ky wavenumber matrix (Nx, Ny)

    Returns:
        ndarray: Stream function in spectral space (Nx, Ny)
    """
    k2 = kx**2 + ky**2
    zero_mode = (kx == 0) & (ky == 0)
    with np.errstate(divide='ignore', invalid='ignore'):
        psi_hat = -w_hat / np.where(zero_mode, 1.0, k2)
    psi_hat[zero_mode] = 0.0
    return psi_hat


def velocity_from_streamfunction(psi_hat, kx, ky):
    """
    Real-space velocity from the spectral stream function.

    Args:
        psi_hat (ndarray): Stream function in spectral space (Nx, Ny)
        kx (ndarray): i*kx wavenumber matrix
        ky (ndarray): i*ky wavenumber matrix

    Returns:
        tuple: (u, v)
            - u: ∂ψ/∂y in physical space (Nx, Ny)
            - v: -∂ψ/∂x in physical space (Nx, Ny)
    """
    u = transform.inverse_real(ky * psi_hat)
    v = transform.inverse_real(-kx * psi_hat)
    return u, v


def advection_term(u, v, vort_hat, kx, ky, dealias_mask=None):
    """
    Pseudo-spectral evaluation of the nonlinear term (u·∇)ω.

    Vorticity gradients are taken spectrally, the product is formed in
    physical space and transformed back.

    Args:
        u (ndarray): x-velocity in physical space (Nx, Ny)
        v (ndarray): y-velocity in physical space (Nx, Ny)
        vort_hat (ndarray): Vorticity in spectral space (Nx, Ny)
        kx (ndarray): i*kx wavenumber matrix
        ky (ndarray): i*ky wavenumber matrix
        dealias_mask (ndarray, optional): Boolean mask of retained modes.
            No truncation is applied when None.

    Returns:
        ndarray: Advection term in spectral space (Nx, Ny)
    """
    vort_x = transform.inverse_real(kx * vort_hat)
    vort_y = transform.inverse_real(ky * vort_hat)

    advect = u * vort_x + v * vort_y
    advect_hat = transform.forward(advect)

    if dealias_mask is not None:
        advect_hat = np.where(dealias_mask, advect_hat, 0.0)
    return advect_hat


def crank_nicolson_step(vort_hat, advect_hat, k_laplace, dt, nu):
    """
    Advance the spectral vorticity by one semi-implicit step.

    Viscous term Crank-Nicolson (implicit), advection explicit:

        ω̂' = ((1 + dt/2 ν kL) ω̂ - dt N̂) / (1 - dt/2 ν kL)

    kL <= 0, so the denominator is >= 1 for ν >= 0.

    Args:
        vort_hat (ndarray): Vorticity in spectral space (Nx, Ny)
        advect_hat (ndarray): Advection term in spectral space (Nx, Ny)
        k_laplace (ndarray): Laplacian symbol kx² + ky² (Nx, Ny)
        dt (float): Time step
        nu (float): Kinematic viscosity

    Returns:
        ndarray: Vorticity in spectral space at t + dt
    """
    half = 0.5 * dt * nu * k_laplace
    return ((1.0 + half) * vort_hat - dt * advect_hat) / (1.0 - half)
