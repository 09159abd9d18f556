
import sys
import time
import xarray
import argparse

""" LIS: land-ice setup on generalised MPAS meshes.
"""
#-- Sets up the vertical coordinate system and mesh sign and
#-- index fields, ahead of the ice-dynamics time-stepping.

from stb import strtobool

from cfg import load_cnfg, setup_cnfg
from msh import load_mesh, load_geom
from lev import setup_vertical_grid
from ops import li_sign_mats


def li_setup(mesh, geom, cnfg):
    """
    LI-SETUP: run the land-ice setup steps on MESH and GEOM
    for the config table CNFG. Returns an error flag; the
    caller decides whether to halt on a non-zero value.

    """

    ierr = 0

    ierr = ierr | setup_cnfg(cnfg)

    print("Setting up vertical grid...")

    ierr = ierr | setup_vertical_grid(mesh, geom, cnfg)

    print("--> sigma(centre):", mesh.layr.sigc)
    print("--> sigma(interf):", mesh.layr.sigi)

    print("Forming sign + index fields...")

    ttic = time.time()

    li_sign_mats(mesh, cnfg)

    ttoc = time.time()
   #print(ttoc - ttic)

    return ierr


def save_file(name, save, mesh, geom):

#-- inject mesh with setup fields and write output MPAS file

    print("Output written to:", save)

    init = xarray.open_dataset(name)

    init["layerThicknessFractions"] = (
        ("nVertLevels"), mesh.layr.frac)
    init["layerCenterSigma"] = (
        ("nVertLevels"), mesh.layr.sigc)
    init["layerInterfaceSigma"] = (
        ("nVertLevelsP1"), mesh.layr.sigi)

    init["layerThickness"] = (
        ("nCells", "nVertLevels"), geom.hh_cell[0, :, :])
    init["layerThickness"].attrs.update({
        "long_name": "Layer thickness, time level 1"})
    init["layerThickness2"] = (
        ("nCells", "nVertLevels"), geom.hh_cell[1, :, :])
    init["layerThickness2"].attrs.update({
        "long_name": "Layer thickness, time level 2"})

    init["edgeSignOnCell"] = (
        ("nCells", "maxEdges"), mesh.cell.sign)

    if (getattr(mesh.vert, "sign", None) is not None):
        init["edgeSignOnVertex"] = (
            ("nVertices", "vertexDegree"), mesh.vert.sign)

    if (getattr(mesh.cell, "kite", None) is not None):
        init["kiteIndexOnCell"] = (
            ("nCells", "maxEdges"), mesh.cell.kite)

    init.to_netcdf(save, format="NETCDF4")
    init.close()

    return


def main(args):

    cnfg = load_cnfg(
        args.mpas_file,
        config_do_restart=args.do_restart,
        config_strict_layer_fractions=args.strict_fractions,
        config_check_mesh_topology=args.check_topology)

    print("Loading the mesh file...")

    mesh = load_mesh(args.mpas_file)
    geom = load_geom(args.mpas_file, mesh)

    ierr = li_setup(mesh, geom, cnfg)

    if (args.save_file is not None):
        save_file(args.mpas_file, args.save_file, mesh, geom)

    if (ierr != 0):
        print("Error: land-ice setup returned", ierr,
              file=sys.stderr)

    return ierr


if (__name__ == "__main__"):
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawTextHelpFormatter)

    parser.add_argument(
        "--mpas-file", dest="mpas_file", type=str,
        required=True, help="Path to user MPAS file.")

    parser.add_argument(
        "--save-file", dest="save_file", type=str,
        required=False,
        default=None, help="Path to write setup fields to.")

    parser.add_argument(
        "--do-restart", dest="do_restart",
        type=lambda x: bool(strtobool(str(x.strip()))),
        required=False,
        default=None, help="Restart: keep layer fractions.")

    parser.add_argument(
        "--strict-fractions", dest="strict_fractions",
        type=lambda x: bool(strtobool(str(x.strip()))),
        required=False,
        default=None, help="Halt on SUM(fractions) != 1.")

    parser.add_argument(
        "--check-topology", dest="check_topology",
        type=lambda x: bool(strtobool(str(x.strip()))),
        required=False,
        default=None, help="Halt on bad edge incidence.")

    sys.exit(main(parser.parse_args()))
