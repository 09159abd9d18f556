import numpy as np
import pytest

from .context import quad_mesh
from cfg import init_cnfg
from msh import init_geom
from lev import FRAC_TOLS, check_frac, sigma_levs, layer_thick, \
                setup_vertical_grid


def _setup(frac, thck, **opts):
    frac = np.asarray(frac, dtype=np.float64)
    mesh = quad_mesh(nlev=frac.size, frac=frac)
    geom = init_geom(mesh, thck)
    cnfg = init_cnfg(**opts)
    ierr = setup_vertical_grid(mesh, geom, cnfg)
    return mesh, geom, ierr


def test_single_level():
    frac = np.array([1.0])
    sigc, sigi = sigma_levs(frac)
    assert np.array_equal(sigc, [0.5])
    assert np.array_equal(sigi, [0.0, 1.0])

    hh_cell = layer_thick(np.array([100.0]), frac)
    assert hh_cell.shape == (1, 1)
    assert hh_cell[0, 0] == 100.0


def test_three_levels():
    mesh, geom, ierr = _setup([0.2, 0.3, 0.5], np.full(12, 10.0))
    assert ierr == 0
    assert np.allclose(mesh.layr.sigi, [0.0, 0.2, 0.5, 1.0],
                       rtol=0.0, atol=1e-15)
    assert np.allclose(mesh.layr.sigc, [0.1, 0.35, 0.75],
                       rtol=0.0, atol=1e-15)
    assert np.allclose(geom.hh_cell[0, 0, :], [2.0, 3.0, 5.0])


def test_exact_sum_left_unchanged(capsys):
    frac = np.array([0.25, 0.25, 0.5])
    save = frac.copy()
    assert check_frac(frac) == 0
    assert np.array_equal(frac, save)
    assert "Adjusting" not in capsys.readouterr().out


def test_sigma_bounds_and_monotone():
    np.random.seed(0)
    for nlev in [1, 2, 5, 10, 40]:
        frac = np.random.uniform(0.1, 1.0, nlev)
        frac = frac / np.sum(frac)
        check_frac(frac)
        sigc, sigi = sigma_levs(frac)
        assert sigi[0] == 0.0
        assert sigi[-1] == 1.0
        assert np.all(np.diff(sigi) >= 0.0)
        assert np.all(np.diff(sigc) >= 0.0)
        assert np.all((sigc >= 0.0) & (sigc <= 1.0))
        assert np.allclose(np.diff(sigi), frac, rtol=0.0, atol=1e-12)


def test_small_error_adjusts_top_layer(capsys):
    frac = np.array([0.2, 0.3, 0.5004])
    save = frac.copy()
    assert check_frac(frac) == 0
    assert np.sum(frac) == pytest.approx(1.0, rel=0.0, abs=1e-15)
    assert frac[0] == pytest.approx(0.1996, abs=1e-15)
    assert np.array_equal(frac[1:], save[1:])

    outs = capsys.readouterr()
    assert "Adjusting upper layerThicknessFrac" in outs.out
    assert "Error" not in outs.err


def test_large_error_flagged_but_corrected(capsys):
    frac = np.array([0.2, 0.3, 0.6])
    assert check_frac(frac) == 1
    assert np.sum(frac) == pytest.approx(1.0, rel=0.0, abs=1e-15)
    assert frac[0] == pytest.approx(0.1, abs=1e-15)

    outs = capsys.readouterr()
    assert "Error" in outs.err
    assert "Adjusting" in outs.out


def test_large_error_strict_raises():
    frac = np.array([0.2, 0.3, 0.6])
    with pytest.raises(ValueError):
        check_frac(frac, strict=True)
    assert np.array_equal(frac, [0.2, 0.3, 0.6])


def test_deficit_within_tolerance():
    frac = np.array([0.5, 0.5 - 0.5 * FRAC_TOLS])
    assert check_frac(frac) == 0
    assert np.sum(frac) == pytest.approx(1.0, rel=0.0, abs=1e-15)
    assert frac[1] == 0.5 - 0.5 * FRAC_TOLS


def test_setup_flags_error_and_continues():
    mesh, geom, ierr = _setup([0.5, 0.6], np.full(12, 1.0))
    assert ierr == 1
    assert mesh.layr.frac[0] == pytest.approx(0.4)
    assert mesh.layr.sigi[-1] == 1.0
    assert np.allclose(geom.hh_cell[0, :, 0], 0.4)


def test_setup_strict_raises():
    with pytest.raises(ValueError):
        _setup([0.5, 0.6], np.full(12, 1.0),
               config_strict_layer_fractions=True)


def test_restart_skips_check(capsys):
    mesh, geom, ierr = _setup([0.5, 0.6], np.full(12, 1.0),
                              config_do_restart=True)
    assert ierr == 0
    assert np.array_equal(mesh.layr.frac, [0.5, 0.6])
    assert "Adjusting" not in capsys.readouterr().out


def test_restart_repeatable():
    frac = np.array([0.1, 0.2999, 0.6])
    mesh = quad_mesh(nlev=3, frac=frac)
    geom = init_geom(mesh, np.linspace(0.0, 500.0, 12))
    cnfg = init_cnfg(config_do_restart=True)

    setup_vertical_grid(mesh, geom, cnfg)
    sigc = mesh.layr.sigc.copy()
    sigi = mesh.layr.sigi.copy()
    hh_cell = geom.hh_cell.copy()
    frac = mesh.layr.frac.copy()

    setup_vertical_grid(mesh, geom, cnfg)
    assert np.array_equal(mesh.layr.sigc, sigc)
    assert np.array_equal(mesh.layr.sigi, sigi)
    assert np.array_equal(geom.hh_cell, hh_cell)
    assert np.array_equal(mesh.layr.frac, frac)


def test_layer_thickness_both_time_levels():
    thck = np.linspace(0.0, 1000.0, 12)
    thck[3] = 0.0
    mesh, geom, ierr = _setup([0.1, 0.2, 0.3, 0.4], thck)
    assert geom.hh_cell.shape == (2, 12, 4)
    for klev in range(4):
        want = thck * mesh.layr.frac[klev]
        assert np.array_equal(geom.hh_cell[0, :, klev], want)
        assert np.array_equal(geom.hh_cell[1, :, klev], want)
    assert np.all(geom.hh_cell[:, 3, :] == 0.0)


def test_shape_mismatch_raises():
    mesh = quad_mesh(nlev=3, frac=np.array([0.2, 0.3, 0.5]))
    mesh.layr.frac = np.array([0.5, 0.5])
    geom = init_geom(mesh, np.ones(12))
    with pytest.raises(ValueError):
        setup_vertical_grid(mesh, geom, init_cnfg())

    mesh = quad_mesh(nlev=2, frac=np.array([0.5, 0.5]))
    geom = init_geom(mesh, np.ones(5))
    with pytest.raises(ValueError):
        setup_vertical_grid(mesh, geom, init_cnfg())
