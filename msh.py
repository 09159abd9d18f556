
import numpy as np
from netCDF4 import Dataset


class base: pass


def load_mesh(name):
    """
    LOAD-MESH: load the NAME.nc MPAS mesh file into a local
    mesh data structure.

    Only the topology needed by the land-ice setup steps is
    read: cells, edges, vertices (where present) and the set
    of vertical layers. Connectivity stays 1-based, as in the
    file.

    """

    data = Dataset(name, "r")

    def _var(vname, dtype):
        if (vname in data.variables.keys()):
            return np.asarray(data.variables[vname][:], dtype=dtype)
        return None

    cell_edge = _var("edgesOnCell", np.int32)
    cell_topo = _var("nEdgesOnCell", np.int32)
    edge_cell = _var("cellsOnEdge", np.int32)

    if (cell_edge is None or cell_topo is None or
            edge_cell is None):
        data.close()
        raise ValueError(
            "Mesh connectivity not found in: %s" % name)

    if ("nVertLevels" in data.dimensions):
        nlev = int(data.dimensions["nVertLevels"].size)
    else:
        nlev = 1

    frac = _var("layerThicknessFractions", np.float64)
    sigc = _var("layerCenterSigma", np.float64)
    sigi = _var("layerInterfaceSigma", np.float64)

    mesh = init_mesh(
        cell_topo, cell_edge, edge_cell,
        _var("verticesOnCell", np.int32),
        _var("verticesOnEdge", np.int32),
        _var("edgesOnVertex", np.int32),
        _var("cellsOnVertex", np.int32),
        nlev, frac)

    if (sigc is not None): mesh.layr.sigc = sigc
    if (sigi is not None): mesh.layr.sigi = sigi

    data.close()

    return mesh


def load_geom(name, mesh):
    """
    LOAD-GEOM: load the ice thickness from the NAME.nc MPAS
    file into a local geometry data structure.

    """

    data = Dataset(name, "r")

    thck = None
    if ("thickness" in data.variables.keys()):
        thck = np.asarray(
            data.variables["thickness"][:], dtype=np.float64)
        if (thck.ndim == 2):
        #-- (Time, nCells): take the last time slice
            thck = thck[-1, :]

    data.close()

    return init_geom(mesh, thck)


def init_mesh(cell_topo, cell_edge, edge_cell,
              cell_vert=None, edge_vert=None,
              vert_edge=None, vert_cell=None,
              nlev=1, frac=None):
    """
    INIT-MESH: form a local mesh data structure from a set of
    (1-based) MPAS connectivity arrays.

    If FRAC is None, NLEV layers of equal thickness are used.

    """

    mesh = base()

    mesh.cell = base()
    mesh.cell.topo = np.asarray(cell_topo, dtype=np.int32)
    mesh.cell.edge = np.asarray(cell_edge, dtype=np.int32)
    mesh.cell.size = int(mesh.cell.topo.size)
    mesh.cell.vert = None
    if (cell_vert is not None):
        mesh.cell.vert = np.asarray(cell_vert, dtype=np.int32)

    mesh.edge = base()
    mesh.edge.cell = np.asarray(edge_cell, dtype=np.int32)
    mesh.edge.size = int(mesh.edge.cell.shape[0])
    mesh.edge.vert = None
    if (edge_vert is not None):
        mesh.edge.vert = np.asarray(edge_vert, dtype=np.int32)

    if (mesh.cell.edge.shape[0] != mesh.cell.size):
        raise ValueError("edgesOnCell does not match nCells")
    if (np.any(mesh.cell.topo > mesh.cell.edge.shape[1])):
        raise ValueError("nEdgesOnCell exceeds maxEdges")
    if (mesh.edge.cell.ndim != 2 or
            mesh.edge.cell.shape[1] != 2):
        raise ValueError("cellsOnEdge must be (nEdges, 2)")

    mesh.vert = None
    if (vert_edge is not None and edge_vert is not None):
        mesh.vert = base()
        mesh.vert.edge = np.asarray(vert_edge, dtype=np.int32)
        mesh.vert.size = int(mesh.vert.edge.shape[0])
        mesh.vert.degree = int(mesh.vert.edge.shape[1])
        mesh.vert.cell = None
        if (vert_cell is not None):
            mesh.vert.cell = np.asarray(vert_cell, dtype=np.int32)

    mesh.layr = base()
    mesh.layr.size = int(nlev)
    if (frac is None):
        frac = np.full(nlev, 1.0 / nlev, dtype=np.float64)
    mesh.layr.frac = np.array(frac, dtype=np.float64)
    mesh.layr.sigc = np.zeros(nlev + 0, dtype=np.float64)
    mesh.layr.sigi = np.zeros(nlev + 1, dtype=np.float64)

    return mesh


def init_geom(mesh, thck=None):

#-- ice thickness per cell, and two time levels for the
#-- layer thickness, (2, nCells, nVertLevels)

    geom = base()

    if (thck is None):
        thck = np.zeros(mesh.cell.size, dtype=np.float64)

    geom.thck_cell = np.array(thck, dtype=np.float64)
    geom.hh_cell = np.zeros(
        (2, mesh.cell.size, mesh.layr.size), dtype=np.float64)

    return geom
