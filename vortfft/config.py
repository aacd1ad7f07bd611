"""
Configuration and command-line argument parsing for vortfft simulations.

This module handles all command-line arguments and parameter validation
for the pseudo-spectral vorticity solver.
"""

import argparse

from . import scenarios


def get_args(argv=None):
    """
    Parse command-line arguments for a simulation.

    Args:
        argv (list, optional): Argument list; defaults to sys.argv[1:]

    Returns:
        argparse.Namespace: Parsed command-line arguments containing all
            simulation parameters (grid, viscosity, scenario, time stepping,
            output settings, etc.)
    """
    ap = argparse.ArgumentParser(
        description="2D incompressible Navier-Stokes in vorticity/stream-function form (pseudo-spectral, Crank-Nicolson)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Domain / resolution parameters
    domain_group = ap.add_argument_group('Domain and Resolution')
    domain_group.add_argument(
        "--Nx", type=int, default=256,
        help="Number of grid points in x direction"
    )
    domain_group.add_argument(
        "--Ny", type=int, default=256,
        help="Number of grid points in y direction"
    )
    domain_group.add_argument(
        "--Lx", type=float, default=1.0,
        help="Domain length in x direction (output mesh spacing)"
    )
    domain_group.add_argument(
        "--Ly", type=float, default=1.0,
        help="Domain length in y direction (output mesh spacing)"
    )
    domain_group.add_argument(
        "--dealias", type=float, default=1.0,
        help="Dealias factor for the advection term (1.0 = none, 1.5 = 2/3 rule)"
    )

    # Physics parameters
    physics_group = ap.add_argument_group('Physical Parameters')
    physics_group.add_argument(
        "--nu", type=float, default=1.0e-3,
        help="Kinematic viscosity"
    )

    # Initial conditions
    ic_group = ap.add_argument_group('Initial Conditions')
    ic_group.add_argument(
        "--scenario", type=str, default=scenarios.Scenario.BUBBLE2.value,
        choices=[s.value for s in scenarios.Scenario],
        help="Initial vorticity scenario"
    )

    # Time integration
    time_group = ap.add_argument_group('Time Integration')
    time_group.add_argument(
        "--dt", type=float, default=None,
        help="Time step (defaults to the scenario's value)"
    )
    time_group.add_argument(
        "--t_end", type=float, default=None,
        help="Total simulation time (defaults to the scenario's value)"
    )
    time_group.add_argument(
        "--plot_dump", type=int, default=None,
        help="Number of steps between snapshots (defaults to the scenario's value)"
    )

    # Output
    output_group = ap.add_argument_group('Output Settings')
    output_group.add_argument(
        "--outdir", type=str, default="snapshots",
        help="Root output directory for simulation data"
    )
    output_group.add_argument(
        "--tag", type=str, default="",
        help="Optional tag to add to output directory name"
    )
    output_group.add_argument(
        "--format", type=str, default="hdf5",
        choices=["hdf5", "vtk", "both"],
        help="Snapshot file format"
    )
    output_group.add_argument(
        "--no_spectra", action="store_true",
        help="Do not write energy/enstrophy spectra at snapshots"
    )

    # Ensemble and reproducibility
    ensemble_group = ap.add_argument_group('Ensemble Configuration')
    ensemble_group.add_argument(
        "--n_realisations", type=int, default=1,
        help="Number of independent realisations to run"
    )
    ensemble_group.add_argument(
        "--seed", type=int, default=42,
        help="Base random seed for initial conditions (each realisation uses seed+r)"
    )

    return ap.parse_args(argv)


def validate_args(args):
    """
    Validate command-line arguments for consistency.

    Args:
        args: Parsed arguments from get_args()

    Raises:
        ValueError: If arguments are inconsistent or invalid
    """
    # Check domain parameters
    if args.Nx <= 0 or args.Ny <= 0:
        raise ValueError("Grid dimensions Nx and Ny must be positive")

    if args.Lx <= 0 or args.Ly <= 0:
        raise ValueError("Domain lengths Lx and Ly must be positive")

    if args.dealias < 1.0:
        raise ValueError("Dealias factor must be >= 1.0")

    # Check physics parameters
    if args.nu < 0:
        raise ValueError("Viscosity nu must be non-negative")

    # Scenario must fit on the grid
    scenarios.validate_grid(args.scenario, args.Nx, args.Ny)

    # Check time parameters
    if args.dt is not None and args.dt <= 0:
        raise ValueError("Time step dt must be positive")

    if args.t_end is not None and args.t_end < 0:
        raise ValueError("End time t_end must be non-negative")

    if args.plot_dump is not None and args.plot_dump < 1:
        raise ValueError("plot_dump must be at least 1")

    if args.n_realisations <= 0:
        raise ValueError("Number of realisations must be positive")


def resolve_time_parameters(args, dt, t_end, plot_dump):
    """
    Apply command-line overrides to a scenario's default time parameters.

    Args:
        args: Parsed command-line arguments
        dt (float): Scenario default time step
        t_end (float): Scenario default final time
        plot_dump (int): Scenario default snapshot interval

    Returns:
        tuple: (dt, t_end, plot_dump)
    """
    if args.dt is not None:
        dt = args.dt
    if args.t_end is not None:
        t_end = args.t_end
    if args.plot_dump is not None:
        plot_dump = args.plot_dump
    return dt, t_end, plot_dump
