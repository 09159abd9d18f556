
from netCDF4 import Dataset

from stb import strtobool

""" CFG: config-options table for the land-ice setup steps.
"""
#-- The table is an explicit record, passed to each routine
#-- that reads from it.

CNFG_OPTS = {
    "config_do_restart": False,
    "config_strict_layer_fractions": False,
    "config_check_mesh_topology": True,
}


class base: pass


def init_cnfg(**opts):
    """
    INIT-CNFG: return a config table set to the defaults in
    CNFG_OPTS, with any OPTS applied over the top.

    """

    cnfg = base()
    for name, vals in CNFG_OPTS.items():
        setattr(cnfg, name, vals)

    for name, vals in opts.items():
        set_cnfg(cnfg, name, vals)

    return cnfg


def load_cnfg(name, **opts):
    """
    LOAD-CNFG: read any config_* global attributes from the
    NAME.nc MPAS file, then apply OPTS. Options passed as
    None are left as read.

    """

    cnfg = init_cnfg()

    data = Dataset(name, "r")
    for attr in data.ncattrs():
        if (attr in CNFG_OPTS):
            set_cnfg(cnfg, attr, data.getncattr(attr))
    data.close()

    for attr, vals in opts.items():
        if (vals is not None):
            set_cnfg(cnfg, attr, vals)

    return cnfg


def set_cnfg(cnfg, name, vals):

    if (name not in CNFG_OPTS):
        raise KeyError("Unknown config option: %s" % name)

    setattr(cnfg, name, bool(strtobool(vals)))


def get_cnfg(cnfg, name):

    if (name not in CNFG_OPTS):
        raise KeyError("Unknown config option: %s" % name)

    return getattr(cnfg, name)


def print_cnfg(cnfg):

    print("MPASLI is using the following configuration:")
    print("============================================")
    for name in sorted(CNFG_OPTS):
        print("   ", name, "=", get_cnfg(cnfg, name))
    print("============================================")
    print("")


def setup_cnfg(cnfg):
    """
    SETUP-CNFG: make any setup changes needed for the chosen
    config options. Returns an error flag.

    """

    print_cnfg(cnfg)

#-- no config-specific adjustments are needed at present

    return 0
