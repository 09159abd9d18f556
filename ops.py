
import numpy as np
from scipy.sparse import csr_matrix


def li_sign_mats(mesh, cnfg):
    """
    LI-SIGN-MATS: determine the sign and index fields for the
    mesh items:

    EDGE-SIGN-CELL: +1/-1 if cell is head/tail of each edge
    EDGE-SIGN-DUAL: +1/-1 if vert is head/tail of each edge
    KITE-INDEX-CELL: position of cell in cellsOnVertex

    The fields are stored on MESH as CELL.SIGN, VERT.SIGN and
    CELL.KITE. The dual fields are only formed when the mesh
    carries the vertex connectivity they need.

    """

    class base: pass

    strict = cnfg.config_check_mesh_topology

    sign = base()
    sign.edge_sign_cell = cell_edge_sign(mesh, strict)
    sign.edge_sign_dual = None
    sign.kite_index_cell = None

    mesh.cell.sign = sign.edge_sign_cell

    if (mesh.vert is not None):
        sign.edge_sign_dual = dual_edge_sign(mesh, strict)
        mesh.vert.sign = sign.edge_sign_dual

        if (mesh.cell.vert is not None and
                mesh.vert.cell is not None):
            sign.kite_index_cell = cell_kite_index(mesh, strict)
            mesh.cell.kite = sign.kite_index_cell

    nbad = check_sign(mesh, sign.edge_sign_cell)
    if (nbad > 0 and strict):
        raise ValueError(
            "edgeSignOnCell is not antisymmetric on %d edges"
            % nbad)

    return sign


def edge_sign(mask, edge, ends, strict=True, name="cell"):
    """
    EDGE-SIGN: returns the sign of each edge local to a set of
    mesh items (cells or vertices).

    MASK[i, j] is TRUE where item i has an edge in local slot
    j, EDGE[i, j] is its (1-based) edge index, and ENDS[e, :]
    are the (1-based) items at the ends of edge e. An edge is
    taken to point from ENDS[e, 0] to ENDS[e, 1], so the sign
    is -1 for the first item and +1 otherwise.

    An item that is neither end of its edge raises ValueError
    if STRICT, and is otherwise given +1 with a warning.

    """

    sign = np.zeros(edge.shape, dtype=np.int32)

    nedg = ends.shape[0]

    for epos in range(edge.shape[1]):

        iidx = np.argwhere(mask[:, epos]).ravel()

        eidx = edge[iidx, epos] - 1

        if (np.any(eidx < 0) or np.any(eidx >= nedg)):
            ibad = iidx[(eidx < 0) | (eidx >= nedg)]
            raise ValueError(
                "Invalid edge index on %s %d, slot %d" %
                (name, ibad[0] + 1, epos + 1))

        i1st = ends[eidx, 0] - 1
        i2nd = ends[eidx, 1] - 1

        flip = iidx == i1st
        okay = np.logical_not(flip)

        fail = np.logical_and(okay, iidx != i2nd)
        if (np.any(fail)):
            ibad = iidx[fail]
            if (strict):
                raise ValueError(
                    "Edge %d is not on %s %d (slot %d); %d bad "
                    "items in this slot" % (
                    eidx[fail][0] + 1, name, ibad[0] + 1,
                    epos + 1, ibad.size))

            print("Warning: %d %ss in slot %d are not on their "
                  "edge, setting sign = +1" %
                  (ibad.size, name, epos + 1))

        sign[iidx[okay], epos] = +1
        sign[iidx[flip], epos] = -1

    return sign


def cell_edge_sign(mesh, strict=True):

#-- edgeSignOnCell: vector points from cell 1 to cell 2

    slot = np.arange(mesh.cell.edge.shape[1])
    mask = slot[np.newaxis, :] < mesh.cell.topo[:, np.newaxis]

    return edge_sign(
        mask, mesh.cell.edge, mesh.edge.cell, strict, "cell")


def dual_edge_sign(mesh, strict=True):

#-- edgeSignOnVertex: vector points from vert 1 to vert 2;
#-- boundary verts have edge = 0 in the missing slots

    mask = mesh.vert.edge > 0

    return edge_sign(
        mask, mesh.vert.edge, mesh.edge.vert, strict, "vertex")


def cell_kite_index(mesh, strict=True):
    """
    CELL-KITE-INDEX: returns, for the vertex in each local slot
    of each cell, the (1-based) position of that cell in the
    vertex's cellsOnVertex, or 0 if not found.

    """

    kite = np.zeros(mesh.cell.vert.shape, dtype=np.int32)

    for epos in range(mesh.cell.vert.shape[1]):

        mask = mesh.cell.topo > epos

        cidx = np.argwhere(mask).ravel()

        vidx = mesh.cell.vert[mask, epos] - 1

        if (np.any(vidx < 0) or np.any(vidx >= mesh.vert.size)):
            raise ValueError(
                "Invalid vertex index in slot %d" % (epos + 1))

        for vpos in range(mesh.vert.cell.shape[1]):

            same = mesh.vert.cell[vidx, vpos] - 1 == cidx

            kite[cidx[same], epos] = vpos + 1

        fail = kite[cidx, epos] == 0
        if (np.any(fail) and strict):
            raise ValueError(
                "Cell %d is not on vertex %d (slot %d)" % (
                cidx[fail][0] + 1, vidx[fail][0] + 1, epos + 1))

    return kite


def cell_flux_sums(mesh, sign):

#-- CELL-FLUX-SUMS: returns SUM(s_e * F_e) via sparse matrix
#-- operator OP. Use OP * F, where F is a vector of (signed)
#-- fluxes for all edges in the mesh and S are edge signs.

    xvec = np.array([], dtype=np.float64)
    ivec = np.array([], dtype=np.int32)
    jvec = np.array([], dtype=np.int32)

    for epos in range(sign.shape[1]):

        mask = mesh.cell.topo > epos

        cidx = np.argwhere(mask).ravel()

        eidx = mesh.cell.edge[mask, epos] - 1

        ivec = np.hstack((ivec, cidx))
        jvec = np.hstack((jvec, eidx))
        xvec = np.hstack((xvec, sign[mask, epos]))

    return csr_matrix((xvec, (ivec, jvec)),
        shape=(mesh.cell.size, mesh.edge.size))


def check_sign(mesh, sign):
    """
    CHECK-SIGN: check the cell signs are antisymmetric across
    each interior edge, so that cell fluxes cancel in pairs.
    Returns the number of edges that fail.

    """

    flux = cell_flux_sums(mesh, sign)

    inner = np.logical_and(
        mesh.edge.cell[:, 0] > 0, mesh.edge.cell[:, 1] > 0)

    ssum = np.asarray(flux.sum(axis=0)).ravel()

    nbad = int(np.count_nonzero(ssum[inner] != 0))

    if (nbad > 0):
        print("Warning: edge signs do not cancel on", nbad,
              "interior edges")

    return nbad
