# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

"""Profiles over discontiguous sub-intervals of a feature.

Positions collected over each sub-interval (exon, CDS segment, ...) are
shifted left so that consecutive sub-intervals abut, as if the gaps
between them did not exist. The resulting virtual coordinates start at
the first sub-interval's start and only make sense together with the
``practical_start`` and ``practical_stop`` they were computed against.
"""

import logging as lg
from collections import namedtuple

from ..errors import ConfigurationError
from .interval import GenomicInterval, ValueType
from .scan import collect_position_scores

SubfeatureProfile = namedtuple('SubfeatureProfile', ['positions', 'practical_start', 'practical_stop'])

NAME_SCOPES = ('global', 'local')


def _shift_positions(scores, pos2data, adjustment, start, end, seen):
    """Move positions in ``[start, end]`` by ``-adjustment`` into ``pos2data``.

    With ``seen`` (a set), values are lists of names and a name already in
    ``seen`` is dropped.
    """
    for p in sorted(scores):
        if not start <= p <= end:
            continue
        if seen is None:
            pos2data[p - adjustment] = scores[p]
            continue
        for n in scores[p]:
            if n in seen:
                continue
            seen.add(n)
            pos2data.setdefault(p - adjustment, []).append(n)


def map_subfeatures(sources, subintervals, strand, strandedness, value_type, extend=0, name_scope='global'):
    """Collect a position map over stitched sub-intervals.

    Args:
        sources: Open score sources.
        subintervals: :class:`GenomicInterval` list, sorted by genomic start.
        strand: Strand of the parent feature.
        strandedness: ``all``, ``sense`` or ``antisense``.
        value_type: Value type collected per position.
        extend: Flank length added before the first and after the last
            sub-interval.
        name_scope: For ``name`` values, ``global`` counts a name once over
            the whole feature; ``local`` once per sub-interval.

    Returns:
        :class:`SubfeatureProfile`.
    """
    value_type = ValueType.parse(value_type)
    if name_scope not in NAME_SCOPES:
        raise ConfigurationError(f'Unknown name scope "{name_scope}". Expected one of: {", ".join(NAME_SCOPES)}')
    if not subintervals:
        return SubfeatureProfile({}, None, None)

    _dedup = value_type is ValueType.NAME
    practical_start = subintervals[0].start
    practical_stop = subintervals[-1].stop
    seq_id = subintervals[0].seq_id

    pos2data = {}
    seen = set() if _dedup else None
    current_end = practical_start
    adjustment = 0
    for sub in subintervals:
        scores = collect_position_scores(
            sources,
            GenomicInterval(sub.seq_id, sub.start, sub.stop, strand),
            strandedness,
            value_type,
        )
        adjustment = sub.start - current_end
        if _dedup and name_scope == 'local':
            seen = set()
        _shift_positions(scores, pos2data, adjustment, sub.start, sub.stop, seen)
        current_end += sub.length

    if extend:
        # Left flank sits directly before the first sub-interval
        left = GenomicInterval(seq_id, practical_start - extend, practical_start - 1, strand)
        scores = collect_position_scores(sources, left, strandedness, value_type)
        if _dedup and name_scope == 'local':
            seen = set()
        _shift_positions(scores, pos2data, 0, left.start, left.stop, seen)

        # Right flank shares the last sub-interval's adjustment
        right = GenomicInterval(seq_id, practical_stop + 1, practical_stop + extend, strand)
        scores = collect_position_scores(sources, right, strandedness, value_type)
        if _dedup and name_scope == 'local':
            seen = set()
        _shift_positions(scores, pos2data, adjustment, right.start, right.stop, seen)

    lg.debug(f'Stitched {len(subintervals)} sub-intervals into {current_end - practical_start} virtual bases')
    return SubfeatureProfile(pos2data, practical_start, current_end)
