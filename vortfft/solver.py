"""
Time integration for the 2D vorticity/stream-function equations.

This module contains the simulation driver:
- Simulation: the time loop (Poisson solve, velocity, advection and
  Crank-Nicolson update per step) with snapshot emission every plot_dump steps
- Snapshot: the record handed to output and progress observers
- run_single_realisation: builds context, initial condition and observers
  from command-line arguments and runs one realisation
- run_rank_realisations: runs one MPI rank's realisations, aborting the job
  on failure
"""

import enum
import logging
import math
import pathlib
from collections import namedtuple
from contextlib import contextmanager

import numpy as np

from . import config
from . import domain
from . import operators
from . import output
from . import scenarios
from . import transform
from . import utils

logger = logging.getLogger(__name__)


Snapshot = namedtuple("Snapshot", ["index", "step", "t", "u", "v", "vorticity", "ctx"])


class State(enum.Enum):
    UNINITIALISED = "uninitialised"
    INITIALISED = "initialised"
    STEPPING = "stepping"
    TERMINATED = "terminated"


class SimulationError(RuntimeError):
    """
    Fatal failure inside the time loop.

    Attributes:
        stage (str): initialisation, poisson, velocity, advection,
            integration or output
        step (int): Step index at which the failure occurred
    """

    def __init__(self, stage, step, cause=None):
        self.stage = stage
        self.step = step
        message = f"Simulation failed during {stage} at step {step}"
        if cause is not None:
            message += f": {type(cause).__name__}: {cause}"
        super().__init__(message)


@contextmanager
def _stage(name, step):
    """Re-raise any failure as a SimulationError naming the stage and step."""
    try:
        yield
    except SimulationError:
        raise
    except Exception as exc:
        raise SimulationError(name, step, exc) from exc


class Simulation:
    """
    Pseudo-spectral time loop for the vorticity equation.

    Step 0 only computes the velocity and emits the initial snapshot. Every
    later step runs the full pipeline, advances the clock by dt and emits a
    snapshot whenever the number of completed steps is a multiple of
    plot_dump.

    Args:
        ctx (SimulationContext): Grid and wavenumber matrices
        nu (float): Kinematic viscosity
        dt (float): Time step
        t_end (float): Final time
        plot_dump (int): Number of steps between snapshots
        observers (iterable): Callables receiving a Snapshot
    """

    def __init__(self, ctx, nu, dt, t_end, plot_dump, observers=()):
        if dt <= 0:
            raise ValueError("Time step dt must be positive")
        if t_end < 0:
            raise ValueError("Final time t_end must be non-negative")
        if plot_dump < 1:
            raise ValueError("plot_dump must be at least 1")
        if nu < 0:
            raise ValueError("Viscosity nu must be non-negative")

        self.ctx = ctx
        self.nu = nu
        self.dt = dt
        self.t_end = t_end
        self.plot_dump = int(plot_dump)
        self.observers = list(observers)

        # Tolerance so that e.g. 2.5/0.01 gives 250 steps, not 249
        self.n_steps = int(math.floor(t_end / dt + 1e-9))

        self.state = State.UNINITIALISED
        self.vort_hat = None
        self.t = 0.0
        self.iteration = 0
        self.save_count = 0

    def initialise(self, vort):
        """
        Seed the vorticity from a real field and reset the clock.

        Args:
            vort (ndarray): Vorticity in physical space (Nx, Ny)

        Raises:
            SimulationError: If the field cannot be transformed on this grid
        """
        with _stage("initialisation", 0):
            self.vort_hat = transform.forward(vort, shape=self.ctx.shape)
        self.t = 0.0
        self.iteration = 0
        self.save_count = 0
        self.state = State.INITIALISED

    @property
    def vorticity(self):
        """Current vorticity in physical space."""
        return transform.inverse_real(self.vort_hat)

    def velocity(self, step=None):
        """Current velocity (u, v) in physical space."""
        step = self.iteration if step is None else step
        ctx = self.ctx
        with _stage("poisson", step):
            psi_hat = operators.solve_poisson(self.vort_hat, ctx.kx, ctx.ky)
        with _stage("velocity", step):
            u, v = operators.velocity_from_streamfunction(psi_hat, ctx.kx, ctx.ky)
        return u, v

    def _emit(self, index, step, u, v):
        with _stage("output", step):
            snap = Snapshot(index, step, self.t, u, v, self.vorticity, self.ctx)
            for observer in self.observers:
                observer(snap)

    def step(self):
        """
        Run the next step index.

        Raises:
            RuntimeError: If the simulation is not initialised or has terminated
            SimulationError: If any stage of the step fails
        """
        if self.state is State.UNINITIALISED:
            raise RuntimeError("Simulation.initialise() must be called before stepping")
        if self.state is State.TERMINATED:
            raise RuntimeError("Simulation has already terminated")
        self.state = State.STEPPING

        n = self.iteration
        ctx = self.ctx
        u, v = self.velocity(n)

        if n == 0:
            self._emit(0, 0, u, v)
        else:
            with _stage("advection", n):
                advect_hat = operators.advection_term(u, v, self.vort_hat, ctx.kx, ctx.ky, ctx.dealias_mask)

            with _stage("integration", n):
                vort_hat = operators.crank_nicolson_step(self.vort_hat, advect_hat, ctx.k_laplace, self.dt, self.nu)
                if not np.all(np.isfinite(vort_hat)):
                    raise FloatingPointError("non-finite vorticity coefficients")
            self.vort_hat = vort_hat
            self.t = n * self.dt

            self.save_count += 1
            if self.save_count % self.plot_dump == 0:
                # Recomputed from the updated vorticity rather than reusing the
                # start-of-step velocity, so u, v and vorticity all describe time t
                u, v = self.velocity(n)
                self._emit(self.save_count, n, u, v)

        self.iteration += 1
        if self.iteration > self.n_steps:
            self.state = State.TERMINATED

    def run(self):
        """
        Step until the final step index has been run.

        Returns:
            ndarray: Final vorticity in spectral space
        """
        while self.state is not State.TERMINATED:
            self.step()
        return self.vort_hat


def output_directory(args, r):
    """
    Create and return the output directory of realisation r.

    Layout: outdir/[tag_]<scenario>_Nx<Nx>_Ny<Ny>_nu<nu>/realisation_<r>
    """
    tag = (args.tag + "_") if args.tag else ""
    nu_str = f"nu{args.nu:.0e}"
    root = pathlib.Path(args.outdir) / f"{tag}{args.scenario}_Nx{args.Nx}_Ny{args.Ny}_{nu_str}"
    run_dir = root / f"realisation_{r:04d}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def build_observers(args, run_dir, dt, r):
    """
    Snapshot observers requested on the command line.

    Returns:
        list: Progress logger followed by the enabled writers
    """
    observers = [utils.ProgressLogger(args.nu, dt, r)]
    if args.format in ("hdf5", "both"):
        observers.append(output.HDF5SnapshotWriter(run_dir))
    if args.format in ("vtk", "both"):
        observers.append(output.VTKSnapshotWriter(run_dir))
    if not args.no_spectra:
        observers.append(output.SpectraWriter(run_dir))
    return observers


def run_single_realisation(args, r):
    """
    Run a single realisation of the simulation.

    This is the main simulation driver that:
    1. Builds the simulation context (wavenumbers, dealias mask)
    2. Generates the initial vorticity for the chosen scenario
    3. Sets up output observers
    4. Runs the time loop

    Args:
        args: Parsed command-line arguments
        r (int): Realisation index (0, 1, 2, ...), offsets the random seed

    Returns:
        Simulation: The terminated simulation

    Raises:
        SimulationError: If initialisation or any time step fails
    """
    with _stage("initialisation", 0):
        ctx = domain.build_context(args.Nx, args.Ny, args.Lx, args.Ly, args.dealias)
        rng = np.random.default_rng(args.seed + r)
        vort, dt, t_end, plot_dump = scenarios.generate(args.scenario, args.Nx, args.Ny, rng)
        dt, t_end, plot_dump = config.resolve_time_parameters(args, dt, t_end, plot_dump)

    run_dir = output_directory(args, r)
    sim = Simulation(ctx, args.nu, dt, t_end, plot_dump,
                     observers=build_observers(args, run_dir, dt, r))
    sim.initialise(vort)

    logger.info("[run %d] dt=%.2e t_end=%.4g plot_dump=%d steps=%d output=%s",
                r, dt, t_end, plot_dump, sim.n_steps, run_dir)
    if ctx.dealias_mask is not None:
        logger.info("[run %d] Dealiasing advection with factor %.2f", r, args.dealias)

    try:
        logger.info("[run %d] Starting time integration", r)
        sim.run()
    except Exception:
        logger.exception("[run %d] Exception in main loop", r)
        raise

    logger.info("[run %d] Simulation complete at t=%.4f", r, sim.t)
    return sim


def run_rank_realisations(args, comm):
    """
    Run this rank's share of the realisations, round-robin over ranks.

    A failed realisation aborts the whole job with comm.Abort(1), so no rank
    is left waiting for it in a later collective call.

    Args:
        args: Parsed command-line arguments
        comm: MPI communicator (anything with rank, size and Abort)

    Returns:
        list: Indices of the realisations run on this rank
    """
    done = []
    for r in range(comm.rank, args.n_realisations, comm.size):
        logger.info("")
        logger.info("Starting realisation %d/%d", r + 1, args.n_realisations)
        logger.info("-" * 70)

        try:
            run_single_realisation(args, r)
        except SimulationError as e:
            logger.error("Realisation %d failed on rank %d during %s at step %d: %s",
                         r, comm.rank, e.stage, e.step, e)
            comm.Abort(1)
        except Exception as e:
            logger.error("Realisation %d failed on rank %d: %s: %s",
                         r, comm.rank, type(e).__name__, e)
            comm.Abort(1)

        logger.info("-" * 70)
        logger.info("Completed realisation %d/%d", r + 1, args.n_realisations)
        done.append(r)
    return done
