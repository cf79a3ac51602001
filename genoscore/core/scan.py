# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

"""Alignment scanning and coverage sampling over one region.

Every scan variant (strandedness x value type x indexed) runs through the
same loop in :func:`scan`. The variants differ only in the inclusion
predicate returned by :func:`strand_predicate` and the accumulator built
by :func:`make_accumulator`.

Alignments are reduced to one representative position, the midpoint of
their footprint (see :func:`midpoint`), and only kept when that position
lies inside the queried region.
"""

import logging as lg

import numpy as np

from ..errors import ConfigurationError
from ..source.abc import footprint
from .interval import Strandedness, ValueType


def midpoint(aln):
    """1-based representative position of an alignment."""
    return (aln.position + 1 + aln.end) // 2


def strand_predicate(strandedness, strand):
    """Build the inclusion test for alignments.

    Args:
        strandedness: :class:`Strandedness` requested by the caller.
        strand: Strand of the queried feature. ``0`` is treated as forward.

    Returns:
        Callable taking an alignment and returning True when it is kept.
    """
    strandedness = Strandedness.parse(strandedness)
    if strandedness is Strandedness.ALL:
        return lambda aln: True
    forward = strand >= 0
    if strandedness is Strandedness.SENSE:
        return lambda aln: aln.is_reverse != forward
    return lambda aln: aln.is_reverse == forward


class _FlatAccumulator:
    def __init__(self, value_func, into=None):
        self.value_func = value_func
        self.result = into if into is not None else []

    def add(self, pos, aln):
        self.result.append(self.value_func(aln))


class _CountAccumulator:
    def __init__(self, into=None):
        self.result = into if into is not None else {}

    def add(self, pos, aln):
        self.result[pos] = self.result.get(pos, 0) + 1


class _ListAccumulator:
    def __init__(self, value_func, into=None):
        self.value_func = value_func
        self.result = into if into is not None else {}

    def add(self, pos, aln):
        self.result.setdefault(pos, []).append(self.value_func(aln))


def _name(aln):
    return aln.name


def make_accumulator(value_type, indexed, into=None):
    """Accumulator for alignment-based value types.

    ``into`` is an existing flat list or position map to add to, used when
    several sources feed one query.
    """
    value_type = ValueType.parse(value_type)
    if value_type is ValueType.COUNT:
        return _CountAccumulator(into) if indexed else _FlatAccumulator(lambda aln: 1, into)
    elif value_type is ValueType.LENGTH:
        return _ListAccumulator(footprint, into) if indexed else _FlatAccumulator(footprint, into)
    elif value_type is ValueType.NAME:
        return _ListAccumulator(_name, into) if indexed else _FlatAccumulator(_name, into)
    else:
        raise ConfigurationError(
            f'Value type "{value_type.value}" is not collected from alignments, use coverage instead'
        )


def scan(source, region, strandedness, value_type, indexed, into=None):
    """Walk alignments over ``region`` and accumulate values.

    Args:
        source: Open :class:`~genoscore.source.abc.ScoreSource`.
        region: :class:`~genoscore.core.interval.GenomicInterval`.
        strandedness: ``all``, ``sense`` or ``antisense``.
        value_type: ``count``, ``length`` or ``name``.
        indexed: Return a position map instead of a flat list.
        into: Optional list or position map to accumulate into.

    Returns:
        Flat list of values, or dict of position to count (``count``) or
        to list of values (``length``, ``name``). Unknown sequences and
        empty regions give an empty result.
    """
    keep = strand_predicate(strandedness, region.strand)
    acc = make_accumulator(value_type, indexed, into)
    if not source.has_sequence(region.seq_id):
        return acc.result
    region = region.clamped()
    if region.is_empty:
        return acc.result

    _start, _stop = region.start, region.stop
    for aln in source.fetch_alignments(*region.zero_based()):
        if not keep(aln):
            continue
        pos = midpoint(aln)
        if _start <= pos <= _stop:
            acc.add(pos, aln)
    return acc.result


def coverage(source, region):
    """Per-base coverage over ``region``, index 0 at ``region.start``.

    Returns an empty array when the sequence is unknown or the region is
    empty after clamping.
    """
    if not source.has_sequence(region.seq_id):
        return np.zeros(0, dtype=np.int64)
    region = region.clamped()
    if region.is_empty:
        return np.zeros(0, dtype=np.int64)
    return source.coverage(*region.zero_based())


def collect_scores(sources, region, strandedness, value_type):
    """Flat values over ``region`` from one or more sources, concatenated."""
    value_type = ValueType.parse(value_type)
    scores = []
    for src in sources:
        if value_type is ValueType.COVERAGE:
            scores.extend(coverage(src, region).tolist())
        else:
            scan(src, region, strandedness, value_type, indexed=False, into=scores)
    return scores


def collect_position_scores(sources, region, strandedness, value_type):
    """Position map over ``region`` merged across sources.

    Counts and coverage are summed per position; lengths are averaged per
    position after all sources are merged; names are kept as lists.
    """
    value_type = ValueType.parse(value_type)
    if value_type is ValueType.COVERAGE and Strandedness.parse(strandedness) is not Strandedness.ALL:
        lg.debug('Coverage does not support stranded collection, strandedness ignored')

    pos2data = {}
    for src in sources:
        if value_type is ValueType.COVERAGE:
            cov = coverage(src, region)
            if len(cov) == 0:
                continue
            _start = region.clamped().start
            for i, value in enumerate(cov.tolist()):
                pos2data[_start + i] = pos2data.get(_start + i, 0) + value
        else:
            scan(src, region, strandedness, value_type, indexed=True, into=pos2data)

    if value_type is ValueType.LENGTH:
        for pos, lengths in pos2data.items():
            pos2data[pos] = float(np.mean(lengths))
    return pos2data
