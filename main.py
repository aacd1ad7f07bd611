#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
vortfft: 2D Pseudo-Spectral Vorticity Solver
============================================

Incompressible 2D Navier-Stokes in vorticity/stream-function form on a
periodic box, FFT-based with Crank-Nicolson time stepping.

Usage:
    # Single core
    python main.py --scenario bubble2 --Nx 256 --Ny 256 --nu 1e-3

    # Ensemble of realisations spread over MPI processes
    mpiexec -n 4 python main.py --scenario rand --n_realisations 8

For help:
    python main.py --help
"""

import logging
from mpi4py import MPI

from vortfft import config, solver


def main():
    """
    Main entry point for vortfft simulations.

    Parses command-line arguments, validates configuration, sets up logging,
    and runs this rank's share of the requested realisations.
    """
    # Parse arguments
    args = config.get_args()
    comm = MPI.COMM_WORLD

    # Setup logging (INFO on rank 0, WARNING on others)
    logging.basicConfig(
        level=logging.INFO if comm.rank == 0 else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger(__name__)

    # Validate arguments
    try:
        config.validate_args(args)
    except ValueError as e:
        if comm.rank == 0:
            logger.error("Invalid configuration: %s", e)
        comm.Abort(1)

    # Log configuration on rank 0
    if comm.rank == 0:
        logger.info("=" * 70)
        logger.info("vortfft: 2D Pseudo-Spectral Vorticity Solver")
        logger.info("=" * 70)
        logger.info("Domain: %dx%d grid on [0,%.2f]x[0,%.2f]",
                    args.Nx, args.Ny, args.Lx, args.Ly)
        logger.info("Physics: nu=%.2e", args.nu)
        logger.info("Scenario: %s (seed=%d)", args.scenario, args.seed)
        logger.info("Dealias factor: %.2f", args.dealias)
        logger.info("MPI processes: %d", comm.size)
        logger.info("Output directory: %s (%s)", args.outdir, args.format)
        logger.info("Number of realisations: %d", args.n_realisations)
        logger.info("=" * 70)

    # Run realisations, round-robin over ranks; a failure aborts every rank
    solver.run_rank_realisations(args, comm)

    comm.Barrier()

    # Final summary
    if comm.rank == 0:
        logger.info("")
        logger.info("=" * 70)
        logger.info("All %d realisation(s) completed successfully!", args.n_realisations)
        logger.info("=" * 70)


if __name__ == "__main__":
    main()
