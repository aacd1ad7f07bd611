"""
vortfft: 2D Pseudo-Spectral Vorticity Solver
=============================================

2D incompressible Navier-Stokes equations in vorticity/stream-function form on
a periodic box, using FFTs and semi-implicit Crank-Nicolson time stepping.

Modules:
    config: Configuration and command-line argument parsing
    domain: Wavenumber matrices and the simulation context
    transform: Forward/inverse 2D FFT
    operators: Poisson solve, velocity, advection and Crank-Nicolson update
    scenarios: Initial vorticity scenarios
    solver: Time loop and realisation driver
    spectral: Energy and enstrophy spectra
    output: HDF5/VTK snapshot and spectra writers
    utils: Flow diagnostics and progress logging
"""

__version__ = "0.1.0"

from . import config
from . import domain
from . import transform
from . import operators
from . import scenarios
from . import solver
from . import spectral
from . import output
from . import utils

__all__ = [
    "config",
    "domain",
    "transform",
    "operators",
    "scenarios",
    "solver",
    "spectral",
    "output",
    "utils",
]
