
import sys
import numpy as np

""" LEV: terrain-following (sigma) vertical coordinate setup.
"""
#-- sigma is the fractional depth in the ice column, with 0.0
#-- at the ice surface and 1.0 at the ice bed. Interface 0 is
#-- the surface, interface k is between layers k-1 and k, and
#-- interface nVertLevels is the bed.

FRAC_TOLS      = 1.0E-03    # abs. tol. on SUM(fractions)


def check_frac(frac, strict=False):
    """
    CHECK-FRAC: check that the layer thickness fractions FRAC
    sum to one, adjusting the upper layer in-place if not.

    Any excess (or deficit) is taken from FRAC[0] only, so the
    correction is biased onto the surface layer. A sum that
    is off by more than FRAC_TOLS is flagged as an error, but
    the correction is still applied and the caller decides
    whether to halt; with STRICT=True a ValueError is raised
    instead and FRAC is left as is.

    Returns an error flag.

    """

    ierr = 0

    ftot = np.sum(frac)

    if (ftot != 1.0):
        if (np.abs(ftot - 1.0) > FRAC_TOLS):
            print("Error: The sum of layerThicknessFractions is "
                  "different from 1.0 by more than", FRAC_TOLS,
                  file=sys.stderr)
            if (strict):
                raise ValueError(
                    "SUM(layerThicknessFractions) = %r" % ftot)
            ierr = 1

        print("Adjusting upper layerThicknessFrac by small amount "
              "because sum of layerThicknessFractions is slightly "
              "different from 1.0.")

        frac[0] = frac[0] - (ftot - 1.0)

    return ierr


def sigma_levs(frac):
    """
    SIGMA-LEVS: returns the layer centre and layer interface
    sigma values {SIGC, SIGI} for the fractions FRAC.

    """

    nlev = frac.size

    sigc = np.zeros(nlev + 0, dtype=np.float64)
    sigi = np.zeros(nlev + 1, dtype=np.float64)

    sigc[0] = 0.5 * frac[0]
    sigi[0] = 0.0

    for klev in range(1, nlev):
        sigc[klev] = sigc[klev - 1] + \
            0.5 * frac[klev - 1] + 0.5 * frac[klev]
        sigi[klev] = sigi[klev - 1] + frac[klev - 1]

#-- pin the bed, rather than carry the round-off in the sum
    sigi[nlev] = 1.0

    return sigc, sigi


def layer_thick(thck, frac):

#-- layer thickness (nCells, nVertLevels) from ice thickness

    return thck[:, np.newaxis] * frac[np.newaxis, :]


def setup_vertical_grid(mesh, geom, cnfg):
    """
    SETUP-VERTICAL-GRID: initialise the vertical coordinate
    system from the layer thickness fractions in MESH.LAYR.

    Sets MESH.LAYR.SIGC, MESH.LAYR.SIGI, and both time levels
    of GEOM.HH_CELL. Returns an error flag.

    """

    nlev = mesh.layr.size
    frac = mesh.layr.frac

    if (nlev < 1):
        raise ValueError("nVertLevels must be >= 1")
    if (frac.shape != (nlev, )):
        raise ValueError(
            "layerThicknessFractions has shape %r, expected (%d,)"
            % (frac.shape, nlev))
    if (geom.thck_cell.shape != (mesh.cell.size, )):
        raise ValueError(
            "thickness has shape %r, expected (%d,)"
            % (geom.thck_cell.shape, mesh.cell.size))

    ierr = 0

#-- on restart the fractions were already fixed by the first
#-- run; adjusting again would drift layer 1 at each restart
    if (not cnfg.config_do_restart):
        ierr = check_frac(
            frac, cnfg.config_strict_layer_fractions)

    mesh.layr.sigc, mesh.layr.sigi = sigma_levs(frac)

    hh_cell = layer_thick(geom.thck_cell, frac)

    geom.hh_cell = np.zeros(
        (2, mesh.cell.size, nlev), dtype=np.float64)
    geom.hh_cell[0, :, :] = hh_cell
    geom.hh_cell[1, :, :] = hh_cell

    return ierr
