"""
Snapshot output.

Observers that persist the fields handed out by the time loop:
- HDF5SnapshotWriter: velocity and vorticity per snapshot in snapshots.h5
- VTKSnapshotWriter: quad-mesh VTK files written with meshio
- SpectraWriter: energy/enstrophy spectra in spectra.h5

Every observer is called with a solver.Snapshot record. Writers start from
empty files, so re-using a run directory never mixes results of two runs.
"""

import pathlib
import h5py
import meshio
import numpy as np

from . import domain
from . import spectral
from . import utils


def snapshot_name(index):
    return f"snap_{index:06d}"


class HDF5SnapshotWriter:
    """
    Write each snapshot as a group of snapshots.h5.

    The file is truncated when the writer is created.

    Args:
        run_dir (str or Path): Output directory for this realisation
        filename (str): Name of the HDF5 file inside run_dir
    """

    def __init__(self, run_dir, filename="snapshots.h5"):
        self.path = pathlib.Path(run_dir) / filename
        with h5py.File(self.path, "w"):
            pass

    def __call__(self, snap):
        ctx = snap.ctx
        with h5py.File(self.path, "a") as h5:
            if "x" not in h5:
                x, y = domain.grid_coordinates(ctx)
                h5.create_dataset("x", data=x)
                h5.create_dataset("y", data=y)

            name = snapshot_name(snap.index)
            if name in h5:
                del h5[name]
            grp = h5.create_group(name)
            grp.create_dataset("velocity_x", data=snap.u)
            grp.create_dataset("velocity_y", data=snap.v)
            grp.create_dataset("vorticity", data=snap.vorticity)

            grp.attrs["sim_time"] = snap.t
            grp.attrs["step"] = snap.step
            grp.attrs["Nx"] = ctx.Nx
            grp.attrs["Ny"] = ctx.Ny
            grp.attrs["Lx"] = ctx.Lx
            grp.attrs["Ly"] = ctx.Ly
            grp.attrs["energy"] = utils.compute_energy(snap.u, snap.v)
            grp.attrs["enstrophy"] = utils.compute_enstrophy(snap.vorticity)


def read_snapshot(path, index):
    """
    Read one snapshot written by HDF5SnapshotWriter.

    Args:
        path (str or Path): snapshots.h5 file
        index (int): Snapshot index

    Returns:
        dict: Arrays 'velocity_x', 'velocity_y', 'vorticity' plus the
            group attributes (sim_time, step, Nx, Ny, Lx, Ly, energy, enstrophy)

    Raises:
        KeyError: If the snapshot is not present in the file
    """
    with h5py.File(path, "r") as h5:
        name = snapshot_name(index)
        if name not in h5:
            raise KeyError(f"Snapshot {index} not found in {path}")
        grp = h5[name]
        data = {key: np.array(grp[key]) for key in ("velocity_x", "velocity_y", "vorticity")}
        data.update({key: grp.attrs[key] for key in grp.attrs})
    return data


def grid_mesh(ctx):
    """
    Points and quad cells of the output grid.

    Point p = i*Ny + j sits at (x[i], y[j]), matching a C-order ravel of
    the (Nx, Ny) field arrays.

    Returns:
        tuple: (points (Nx*Ny, 3), quads ((Nx-1)*(Ny-1), 4))
    """
    x, y = domain.grid_coordinates(ctx)
    X, Y = np.meshgrid(x, y, indexing='ij')
    points = np.column_stack([X.ravel(), Y.ravel(), np.zeros(X.size)])

    ids = np.arange(ctx.Nx * ctx.Ny).reshape(ctx.Nx, ctx.Ny)
    quads = np.column_stack([
        ids[:-1, :-1].ravel(),
        ids[1:, :-1].ravel(),
        ids[1:, 1:].ravel(),
        ids[:-1, 1:].ravel(),
    ])
    return points, quads


class VTKSnapshotWriter:
    """
    Write each snapshot as a VTK quad mesh.

    Files are named vtk_data/snapshot_<index>.vtk inside run_dir. Snapshot
    files left over from an earlier run are removed when the writer is
    created.
    """

    def __init__(self, run_dir):
        self.vtk_dir = pathlib.Path(run_dir) / "vtk_data"
        self.vtk_dir.mkdir(parents=True, exist_ok=True)
        for stale in self.vtk_dir.glob("snapshot_*.vtk"):
            stale.unlink()

    def path_for(self, index):
        return self.vtk_dir / f"snapshot_{index:04d}.vtk"

    def __call__(self, snap):
        points, quads = grid_mesh(snap.ctx)
        u = snap.u.ravel()
        v = snap.v.ravel()
        meshio.write(str(self.path_for(snap.index)), meshio.Mesh(
            points, [("quad", quads)],
            point_data={
                "u": u,
                "v": v,
                "vorticity": snap.vorticity.ravel(),
                "velocity": np.column_stack([u, v, np.zeros_like(u)]),
            }
        ))


class SpectraWriter:
    """
    Compute isotropic spectra at each snapshot and store them in spectra.h5.

    Each snapshot becomes a dataset k_E_Z_t<time> with columns (k, E(k), Z(k)).
    The file is truncated when the writer is created.
    """

    def __init__(self, run_dir, filename="spectra.h5"):
        self.path = pathlib.Path(run_dir) / filename
        with h5py.File(self.path, "w"):
            pass

    def __call__(self, snap):
        k_bins, E_k, Z_k = spectral.compute_spectra(snap.u, snap.v, snap.vorticity)
        with h5py.File(self.path, "a") as h5:
            dset = f"k_E_Z_t{snap.t:.6f}"
            if dset in h5:
                del h5[dset]
            h5.create_dataset(dset, data=np.vstack([k_bins, E_k, Z_k]).T)
