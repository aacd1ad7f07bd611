"""
Initial vorticity scenarios.

Each scenario produces a real vorticity field on an Nx x Ny grid together with
default time-stepping parameters. Scenarios are selected through the Scenario
enum and looked up in the SCENARIOS table:

    half         two half planes of different vorticity
    qtrs         four squares of differing vorticity
    rand         a field of random vorticity values
    bubble1      one dense region of CW vorticity in a bed of random vorticity
    bubbleSplit  two vortices which are very close
    bubble2      three nested regions of vorticity (CW, CCW, CW) in a random bed
    spectral     random field with a prescribed power-law spectrum
"""

import enum
import logging
from collections import namedtuple

import numpy as np

from .domain import wavenumber_sequence

logger = logging.getLogger(__name__)


class Scenario(enum.Enum):
    HALF = "half"
    QTRS = "qtrs"
    RAND = "rand"
    BUBBLE1 = "bubble1"
    BUBBLE_SPLIT = "bubbleSplit"
    BUBBLE2 = "bubble2"
    SPECTRAL = "spectral"


ScenarioSpec = namedtuple(
    "ScenarioSpec",
    ["generator", "dt", "t_end", "plot_dump", "divisor", "min_size", "description"],
)


def _disk(rows, cols, threshold):
    """Boolean disk (r+1)² + (c-1)² < threshold on the given index offsets."""
    return ((cols[None, :] - 1) ** 2 + (rows[:, None] + 1) ** 2) < threshold


def _half(Nx, Ny, rng):
    vort = np.zeros((Nx, Ny))
    vort[:Nx // 2, :] = 1.0
    return vort


def _qtrs(Nx, Ny, rng):
    vort = np.zeros((Nx, Ny))
    vort[:Nx // 2, :Ny // 2] = 1.0
    vort[Nx // 2:, Ny // 2:] = 1.0
    return vort


def _rand(Nx, Ny, rng):
    return 2.0 * rng.random((Nx, Ny)) - 1.0


def _bubble_region(Nx, Ny):
    rows = np.arange(-Nx // 4 + 1, Nx // 4 + 1)
    cols = np.arange(-Ny // 4 + 1, Ny // 4 + 1)
    return _disk(rows, cols, 1024)


def _bubble1(Nx, Ny, rng):
    vort = 0.25 * rng.random((Nx, Ny)) - 0.50

    inside = _bubble_region(Nx, Ny)
    b1 = 0.5 * rng.random(inside.shape) - 0.25
    b1[inside] = 0.5 * (rng.random(np.count_nonzero(inside)) + 1.0)

    vort[Nx // 4:3 * Nx // 4, Ny // 4:3 * Ny // 4] = b1
    return vort


def _bubble_split(Nx, Ny, rng):
    vort = 0.5 * rng.random((Nx, Ny)) - 0.25

    inside = _bubble_region(Nx, Ny)
    b1 = 0.5 * rng.random(inside.shape) - 0.25
    left = np.zeros_like(inside)
    left[:, :Ny // 4 - 1] = True

    noise = rng.random(inside.shape)
    b1 = np.where(inside & left, 0.10 * (noise - 1.0), b1)
    b1 = np.where(inside & ~left, 0.10 * (noise + 0.90), b1)

    vort[Nx // 4:3 * Nx // 4, Ny // 4:3 * Ny // 4] = b1
    return vort


def _bubble2(Nx, Ny, rng):
    vort = 2.0 * rng.random((Nx, Ny)) - 1.0
    ex = 2  # pad so the bubbles are not clipped
    s_left = 5
    s_right = 4

    # Outer CW bubble, shifted left
    rows = np.arange(-Nx // 4 + 1 - ex, Nx // 4 + 1)
    cols = np.arange(-Ny // 4 + 1 - ex, Ny // 4 + 1)
    inside = _disk(rows, cols, Nx * 8 + Nx / 1.5)
    b1 = np.where(inside, 0.8, 2.0 * rng.random(inside.shape) - 1.0)
    vort[Nx // 4 - ex:3 * Nx // 4, Ny // 4 - ex - s_left:3 * Ny // 4 - s_left] = b1

    # Middle CCW bubble
    rows = np.arange(-Nx // 8 + 1 - ex, Nx // 8 + 1)
    cols = np.arange(-Ny // 8 + 1 - ex, Ny // 8 + 1)
    inside = _disk(rows, cols, 2 * Nx + Nx / 0.75)
    b2 = np.where(inside, -1.0, 1.0)
    vort[3 * Nx // 8 - ex:5 * Nx // 8, 3 * Ny // 8 - ex:5 * Ny // 8] = b2

    # Inner CW bubble, shifted right/down
    rows = np.arange(-Nx // 16 + 1 - ex, Nx // 16 + 1)
    cols = np.arange(-Ny // 16 + 1 - ex, Ny // 16 + 1)
    inside = _disk(rows, cols, Nx / 2)
    b3 = np.where(inside, 1.0, -1.0)
    vort[7 * Nx // 16 - ex - s_right:9 * Nx // 16 - s_right,
         7 * Ny // 16 - ex + s_right:9 * Ny // 16 + s_right] = b3
    return vort


def _spectral(Nx, Ny, rng, alpha=49.0, power=2.5):
    """
    Random vorticity with variance Var[ω̂(k)] ∝ (|k|² + alpha)^(-power).

    The field has zero mean and is normalised to unit RMS.
    """
    KX, KY = np.meshgrid(wavenumber_sequence(Nx), np.arange(Ny // 2 + 1), indexing='ij')
    var_k = np.power(KX**2 + KY**2 + alpha, -power)

    w_hat = (rng.standard_normal(var_k.shape) + 1j * rng.standard_normal(var_k.shape)) * np.sqrt(var_k / 2.0)
    w_hat[0, 0] = 0.0

    vort = np.fft.irfft2(w_hat, s=(Nx, Ny))
    rms = np.sqrt(np.mean(vort**2))
    if rms > 0:
        vort /= rms
    return vort


SCENARIOS = {
    Scenario.HALF: ScenarioSpec(
        _half, 5e-2, 1000.0, 100, 2, 2,
        "two half planes w/ opposite sign vorticity"),
    Scenario.QTRS: ScenarioSpec(
        _qtrs, 1e-2, 2.5, 5, 2, 2,
        "4 squares of differing vorticity"),
    Scenario.RAND: ScenarioSpec(
        _rand, 1e-1, 1000.0, 25, 2, 2,
        "a field of random vorticity values"),
    Scenario.BUBBLE1: ScenarioSpec(
        _bubble1, 5e-3, 7.5, 10, 4, 4,
        "one dense region of CW vorticity in a bed of random vorticity values"),
    Scenario.BUBBLE_SPLIT: ScenarioSpec(
        _bubble_split, 5e-3, 7.5, 10, 4, 4,
        "two vortices which are very close"),
    Scenario.BUBBLE2: ScenarioSpec(
        _bubble2, 1e-2, 30.0, 50, 16, 32,
        "three nested regions of vorticity (CW, CCW, CW) in a bed of random vorticity values"),
    Scenario.SPECTRAL: ScenarioSpec(
        _spectral, 1e-2, 10.0, 50, 2, 2,
        "a random vorticity field with a power-law spectrum"),
}


def validate_grid(kind, Nx, Ny):
    """
    Check that a scenario can be laid out on an Nx x Ny grid.

    Raises:
        ValueError: If the grid is too small or not divisible as required
    """
    spec = SCENARIOS[Scenario(kind)]
    for name, N in (("Nx", Nx), ("Ny", Ny)):
        if N < spec.min_size or N % spec.divisor != 0:
            raise ValueError(
                f"Scenario '{Scenario(kind).value}' needs {name} >= {spec.min_size} "
                f"and divisible by {spec.divisor}, got {name}={N}"
            )


def generate(kind, Nx, Ny, rng=None):
    """
    Generate the initial vorticity for a scenario.

    Args:
        kind (Scenario or str): Scenario kind or its tag
        Nx (int): Number of grid points in x
        Ny (int): Number of grid points in y
        rng (numpy.random.Generator, optional): Random generator for the
            random scenarios

    Returns:
        tuple: (vort, dt, t_end, plot_dump)
            - vort: Real vorticity field (Nx, Ny)
            - dt: Default time step
            - t_end: Default final time
            - plot_dump: Default number of steps between snapshots

    Raises:
        ValueError: For an unknown tag or an incompatible grid
    """
    kind = Scenario(kind)
    validate_grid(kind, Nx, Ny)
    if rng is None:
        rng = np.random.default_rng()

    spec = SCENARIOS[kind]
    logger.info("Simulating %s", spec.description)
    vort = spec.generator(Nx, Ny, rng)
    return vort, spec.dt, spec.t_end, spec.plot_dump
