# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

"""Summary statistics over flat series of scores."""

import numpy as np

from ..errors import ConfigurationError
from .interval import ValueType


def _stddev(a):
    if len(a) < 2:
        return 0.0
    return float(np.std(a, ddof=1))


_STATS = {
    'mean': lambda a: float(np.mean(a)),
    'median': lambda a: float(np.median(a)),
    'sum': lambda a: a.sum().item(),
    'min': lambda a: a.min().item(),
    'max': lambda a: a.max().item(),
    'range': lambda a: (a.max() - a.min()).item(),
    'stddev': _stddev,
    'length': lambda a: float(np.mean(a)),
}

METHODS = tuple(_STATS) + ('count', 'ncount')

_METHOD_VALUE_TYPES = {
    'count': ValueType.COUNT,
    'ncount': ValueType.NAME,
    'length': ValueType.LENGTH,
}


def check_method(method):
    if method not in METHODS:
        raise ConfigurationError(f'Unknown method "{method}". Expected one of: {", ".join(METHODS)}')
    return method


def value_type_for_method(method):
    """Value type to collect from a source for a summary method."""
    check_method(method)
    return _METHOD_VALUE_TYPES.get(method, ValueType.COVERAGE)


def calculate_score(method, values):
    """Combine a flat series into one value.

    ``count`` is the number of samples and ``ncount`` the number of
    distinct names. Empty series give 0 for counts and sums, otherwise None.
    """
    check_method(method)
    if method == 'count':
        return len(values)
    if method == 'ncount':
        return len(set(values))
    if len(values) == 0:
        return 0 if method == 'sum' else None
    return _STATS[method](np.asarray(values))
