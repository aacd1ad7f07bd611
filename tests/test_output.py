from __future__ import annotations

import h5py
import meshio
import numpy as np
import pytest

from vortfft import domain, output
from vortfft.solver import Snapshot


@pytest.fixture
def snap():
    ctx = domain.build_context(4, 3, Lx=2.0, Ly=3.0)
    rng = np.random.default_rng(0)
    u, v, w = rng.standard_normal((3, 4, 3))
    return Snapshot(index=5, step=5, t=0.25, u=u, v=v, vorticity=w, ctx=ctx)


def test_hdf5_writer(tmp_path, snap):
    writer = output.HDF5SnapshotWriter(tmp_path)
    writer(snap)
    writer(snap)  # rewriting the same index replaces the group

    data = output.read_snapshot(tmp_path / "snapshots.h5", 5)
    np.testing.assert_array_equal(data["velocity_x"], snap.u)
    np.testing.assert_array_equal(data["vorticity"], snap.vorticity)
    assert data["sim_time"] == 0.25
    assert (data["Nx"], data["Ny"]) == (4, 3)
    assert data["energy"] == pytest.approx(0.5 * np.mean(snap.u**2 + snap.v**2))

    with h5py.File(tmp_path / "snapshots.h5", "r") as h5:
        np.testing.assert_allclose(h5["x"][...], [0.0, 0.5, 1.0, 1.5])
        np.testing.assert_allclose(h5["y"][...], [0.0, 1.0, 2.0])

    with pytest.raises(KeyError):
        output.read_snapshot(tmp_path / "snapshots.h5", 6)


def test_vtk_writer(tmp_path, snap):
    writer = output.VTKSnapshotWriter(tmp_path)
    writer(snap)

    mesh = meshio.read(writer.path_for(5))
    assert mesh.points.shape == (12, 3)
    # point i*Ny + j sits at (x[i], y[j])
    np.testing.assert_allclose(mesh.points[1], [0.0, 1.0, 0.0])
    np.testing.assert_allclose(mesh.points[3], [0.5, 0.0, 0.0])
    np.testing.assert_allclose(mesh.points[-1], [1.5, 2.0, 0.0])

    quads = mesh.cells_dict["quad"]
    assert quads.shape == (6, 4)
    np.testing.assert_array_equal(quads[0], [0, 3, 4, 1])

    np.testing.assert_allclose(mesh.point_data["vorticity"].ravel(), snap.vorticity.ravel())
    np.testing.assert_allclose(mesh.point_data["u"].ravel(), snap.u.ravel())
    velocity = mesh.point_data["velocity"]
    assert velocity.shape == (12, 3)
    np.testing.assert_allclose(velocity[4], [snap.u[1, 1], snap.v[1, 1], 0.0])


def test_vtk_writer_removes_stale_snapshots(tmp_path, snap):
    output.VTKSnapshotWriter(tmp_path)(snap)
    writer = output.VTKSnapshotWriter(tmp_path)
    assert list(writer.vtk_dir.iterdir()) == []


def test_writers_start_from_empty_files(tmp_path, snap):
    output.HDF5SnapshotWriter(tmp_path)(snap)
    output.SpectraWriter(tmp_path)(snap)

    output.HDF5SnapshotWriter(tmp_path)
    output.SpectraWriter(tmp_path)

    with h5py.File(tmp_path / "snapshots.h5", "r") as h5:
        assert len(h5) == 0
    with h5py.File(tmp_path / "spectra.h5", "r") as h5:
        assert len(h5) == 0


def test_spectra_writer(tmp_path, snap):
    output.SpectraWriter(tmp_path)(snap)
    with h5py.File(tmp_path / "spectra.h5", "r") as h5:
        data = h5["k_E_Z_t0.250000"][...]
    assert data.shape[1] == 3
    assert data[:, 1].sum() == pytest.approx(0.5 * np.mean(snap.u**2 + snap.v**2))
