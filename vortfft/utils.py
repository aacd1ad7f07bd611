"""
Flow diagnostics and progress reporting.

This module provides helper functions for:
- Domain-averaged energy, enstrophy and RMS velocity
- Reynolds and CFL numbers for the fixed-step integrator
- A snapshot observer that logs simulation progress
"""

import logging
import numpy as np

logger = logging.getLogger(__name__)


def compute_energy(u, v):
    """Domain-averaged kinetic energy 0.5<|u|²>."""
    return 0.5 * float(np.mean(u * u + v * v))


def compute_enstrophy(vort):
    """Domain-averaged enstrophy 0.5<ω²>."""
    return 0.5 * float(np.mean(vort * vort))


def rms_u(u, v):
    """RMS velocity √(<|u|²>)."""
    return float(np.sqrt(np.mean(u * u + v * v)))


def compute_max_velocity(u, v):
    """
    Compute maximum velocity magnitude from grid data.

    Args:
        u (ndarray): x-velocity in physical space
        v (ndarray): y-velocity in physical space

    Returns:
        float: Maximum velocity magnitude |u|_max
    """
    return float(np.sqrt(np.max(u * u + v * v)))


def compute_reynolds_number(u, v, nu, L=2.0 * np.pi):
    """
    Box Reynolds number Re = u_rms L / ν.

    The spectral operators use integer wavenumbers, so the box length seen by
    the dynamics is 2π. Returns inf for ν = 0.
    """
    if nu == 0:
        return np.inf
    return rms_u(u, v) * L / nu


def compute_cfl(u, v, dt):
    """
    Advective CFL number dt (max|u|/dx + max|v|/dy) on the 2π-periodic box.

    Args:
        u (ndarray): x-velocity in physical space (Nx, Ny)
        v (ndarray): y-velocity in physical space (Nx, Ny)
        dt (float): Time step

    Returns:
        float: CFL number
    """
    Nx, Ny = u.shape
    dx = 2.0 * np.pi / Nx
    dy = 2.0 * np.pi / Ny
    return float(dt * (np.max(np.abs(u)) / dx + np.max(np.abs(v)) / dy))


class ProgressLogger:
    """
    Snapshot observer that logs the simulation time and flow diagnostics.

    Args:
        nu (float): Kinematic viscosity
        dt (float): Time step
        r (int): Realisation index used in log messages
    """

    def __init__(self, nu, dt, r=0):
        self.nu = nu
        self.dt = dt
        self.r = r
        self._cfl_warned = False

    def __call__(self, snap):
        max_speed = compute_max_velocity(snap.u, snap.v)
        cfl = compute_cfl(snap.u, snap.v, self.dt)
        logger.info(
            "[run %d] snap=%5d it=%7d t=%9.4f max|u|=%10.3e E=%10.3e Z=%10.3e Re_box=%9.3e CFL=%6.3f",
            self.r, snap.index, snap.step, snap.t, max_speed,
            compute_energy(snap.u, snap.v), compute_enstrophy(snap.vorticity),
            compute_reynolds_number(snap.u, snap.v, self.nu), cfl,
        )
        if cfl > 1.0 and not self._cfl_warned:
            logger.warning(
                "[run %d] CFL number %.3f exceeds 1 at t=%.4f; consider a smaller dt",
                self.r, cfl, snap.t,
            )
            self._cfl_warned = True
