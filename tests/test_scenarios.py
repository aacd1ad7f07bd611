from __future__ import annotations

import numpy as np
import pytest

from vortfft import scenarios
from vortfft.scenarios import Scenario


def test_every_scenario_has_a_table_entry():
    assert set(scenarios.SCENARIOS) == set(Scenario)


@pytest.mark.parametrize("kind", list(Scenario))
def test_generate_shapes_and_defaults(kind):
    vort, dt, t_end, plot_dump = scenarios.generate(kind, 64, 64, np.random.default_rng(0))
    assert vort.shape == (64, 64)
    assert np.all(np.isfinite(vort))
    assert vort.dtype == np.float64
    spec = scenarios.SCENARIOS[kind]
    assert (dt, t_end, plot_dump) == (spec.dt, spec.t_end, spec.plot_dump)


def test_generate_accepts_tags():
    vort, dt, t_end, plot_dump = scenarios.generate("qtrs", 8, 8)
    assert (dt, t_end, plot_dump) == (1e-2, 2.5, 5)
    expected = np.zeros((8, 8))
    expected[:4, :4] = 1.0
    expected[4:, 4:] = 1.0
    np.testing.assert_array_equal(vort, expected)


def test_half():
    vort, dt, t_end, plot_dump = scenarios.generate(Scenario.HALF, 6, 4)
    assert np.all(vort[:3] == 1.0)
    assert np.all(vort[3:] == 0.0)
    assert (dt, t_end, plot_dump) == (5e-2, 1000.0, 100)


def test_random_scenarios_are_reproducible():
    a, *_ = scenarios.generate("rand", 16, 16, np.random.default_rng(7))
    b, *_ = scenarios.generate("rand", 16, 16, np.random.default_rng(7))
    c, *_ = scenarios.generate("rand", 16, 16, np.random.default_rng(8))
    np.testing.assert_array_equal(a, b)
    assert not np.array_equal(a, c)
    assert a.min() >= -1.0 and a.max() < 1.0


def test_bubble2_nested_regions():
    N = 64
    vort, *_ = scenarios.generate(Scenario.BUBBLE2, N, N, np.random.default_rng(0))
    # centre of the inner bubble (shifted down/right by 4 cells)
    assert vort[N // 2 - 4, N // 2 + 4] == 1.0
    # the middle ring is uniformly +-1
    ring = vort[3 * N // 8:5 * N // 8, 3 * N // 8:5 * N // 8]
    assert set(np.unique(ring)) <= {-1.0, 1.0}


def test_bubble1_disk_values():
    N = 32
    vort, *_ = scenarios.generate(Scenario.BUBBLE1, N, N, np.random.default_rng(0))
    block = vort[N // 4:3 * N // 4, N // 4:3 * N // 4]
    # a radius-32 disk covers the whole block on a small grid
    assert np.all((block >= 0.5) & (block < 1.0))
    outside = np.ones((N, N), dtype=bool)
    outside[N // 4:3 * N // 4, N // 4:3 * N // 4] = False
    assert np.all((vort[outside] >= -0.5) & (vort[outside] < -0.25))


def test_bubble_split_has_opposite_signs():
    N = 32
    vort, *_ = scenarios.generate(Scenario.BUBBLE_SPLIT, N, N, np.random.default_rng(0))
    block = vort[N // 4:3 * N // 4, N // 4:3 * N // 4]
    assert np.all(block[:, :N // 4 - 1] <= 0.0)
    assert np.all(block[:, N // 4 - 1:] >= 0.09)


def test_spectral_scenario_zero_mean_unit_rms():
    vort, *_ = scenarios.generate(Scenario.SPECTRAL, 32, 32, np.random.default_rng(3))
    assert abs(vort.mean()) < 1e-12
    assert np.sqrt(np.mean(vort**2)) == pytest.approx(1.0)


def test_unknown_tag():
    with pytest.raises(ValueError):
        scenarios.generate("vortex_street", 16, 16)


@pytest.mark.parametrize("kind,Nx,Ny", [
    ("half", 7, 8),
    ("bubble1", 18, 16),
    ("bubble2", 16, 16),
    ("bubble2", 64, 40),
])
def test_incompatible_grid(kind, Nx, Ny):
    with pytest.raises(ValueError):
        scenarios.validate_grid(kind, Nx, Ny)
