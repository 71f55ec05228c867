"""
Parameter checks shared by the clusterer, the kd-tree and the reader.
"""

import numpy as np

from .exceptions import InvalidParameter


def check_int(name: str, value, minimum: int = 1) -> int:
    """Return ``value`` as an int, or raise if it is not an integer ``>= minimum``."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < minimum:
        raise InvalidParameter(f"{name} must be an integer >= {minimum}, got {value!r}")
    return int(value)


def check_random_state(value):
    """Accept ``None``, a non-negative integer seed or a ``numpy.random.Generator``."""
    if value is None or isinstance(value, np.random.Generator):
        return value
    return check_int('random_state', value, minimum=0)
