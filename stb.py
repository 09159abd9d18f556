
import numpy as np


def strtobool(val):
    """
    STRTOBOOL: map a config value to 1 or 0. Accepts the usual
    strings, MPAS-style "YES" / "NO" file attributes, and
    plain (or numpy) bools and ints.

    """
    if isinstance(val, (bool, np.bool_)):
        return int(val)
    if isinstance(val, (int, np.integer)):
        if val in (0, 1): return int(val)
        raise ValueError("Invalid bool value %r" % (val,))

    val = str(val).strip().lower()
    if val in ('y', 'yes', 't', 'true', 'on', '1', '.true.'):
        return 1
    elif val in ('n', 'no', 'f', 'false', 'off', '0', '.false.'):
        return 0
    else:
        raise ValueError("Invalid bool value %r" % (val,))
