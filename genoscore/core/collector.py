# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

"""Feature-level score collection.

:class:`ScoreCollector` ties the scanning, stitching, avoidance and
relative-coordinate steps together for one feature at a time, and owns the
open score sources it reads from.
"""

import logging as lg

from ..errors import ConfigurationError
from ..source import SourceRegistry
from .avoid import avoid_positions
from .counter import count_alignments
from .interval import GenomicInterval, ValueType
from .relative import ReferencePoint, reference_coordinate, to_relative
from .scan import collect_position_scores, collect_scores
from .stats import calculate_score, value_type_for_method
from .subfeature import NAME_SCOPES, map_subfeatures


def unique_name_counts(pos2data, name_scope='global'):
    """Reduce a position map of name lists to unique-name counts.

    ``global`` counts each name once per map, at its lowest position;
    ``local`` counts distinct names per position.
    """
    if name_scope not in NAME_SCOPES:
        raise ConfigurationError(f'Unknown name scope "{name_scope}". Expected one of: {", ".join(NAME_SCOPES)}')
    ret = {}
    if name_scope == 'local':
        for p, names in pos2data.items():
            ret[p] = len(set(names))
        return ret
    seen = set()
    for p in sorted(pos2data):
        _new = set(pos2data[p]) - seen
        seen.update(_new)
        if _new:
            ret[p] = len(_new)
    return ret


class ScoreCollector:
    """Collects scores for features from one or more datasets.

    Datasets are given as paths and opened through the collector's
    :class:`~genoscore.source.SourceRegistry`; the collector closes them
    all in :meth:`close`.

    Args:
        feature_lookup: Optional annotation with ``features_overlapping``,
            required for position avoidance.
        registry: Registry to reuse. A new one is created by default.
    """

    def __init__(self, feature_lookup=None, registry=None):
        self.feature_lookup = feature_lookup
        self.registry = registry if registry is not None else SourceRegistry()

    def sources(self, datasets):
        if isinstance(datasets, str):
            datasets = [datasets]
        return [self.registry.open(d) for d in datasets]

    def close(self):
        self.registry.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    # --- Single scores ---

    def get_score(self, datasets, region, method='mean', strandedness='all', extend=0, subfeatures=None):
        """One summary value over a region or over a feature's sub-intervals.

        A region whose stop lies before its start is flipped and treated as
        the reverse strand. ``extend`` is ignored with ``subfeatures``.
        """
        value_type = value_type_for_method(method)
        sources = self.sources(datasets)

        if subfeatures:
            scores = []
            for sub in subfeatures:
                _sub = GenomicInterval(sub.seq_id, sub.start, sub.stop, region.strand)
                scores.extend(collect_scores(sources, _sub, strandedness, value_type))
            return calculate_score(method, scores)

        _start, _stop, _strand = region.start - extend, region.stop + extend, region.strand
        _start = max(1, _start)
        if _stop < _start:
            if _stop <= 0:
                return None
            _start, _stop, _strand = _stop, _start, -1
        scores = collect_scores(sources, GenomicInterval(region.seq_id, _start, _stop, _strand), strandedness, value_type)
        return calculate_score(method, scores)

    # --- Position scores ---

    def _finish(self, pos2data, value_type, name_scope):
        if value_type is ValueType.NAME:
            return unique_name_counts(pos2data, name_scope)
        return pos2data

    def _avoid(self, pos2data, avoid, feature_id, seq_id, start, stop):
        if not avoid:
            return pos2data
        if self.feature_lookup is None:
            raise ConfigurationError('Position avoidance requires a feature annotation')
        types = [avoid] if isinstance(avoid, str) else list(avoid)
        return avoid_positions(pos2data, seq_id, start, stop, feature_id, types, self.feature_lookup)

    def get_region_position_scores(
        self,
        datasets,
        region,
        method='mean',
        strandedness='all',
        extend=0,
        position=5,
        coordinate=None,
        absolute=False,
        avoid=None,
        feature_id=None,
        subfeatures=None,
        name_scope='global',
    ):
        """Position map over a feature, relative to a reference point.

        Args:
            datasets: Path or list of paths to data files.
            region: The feature as a :class:`GenomicInterval`.
            method: Summary method, selects the value type collected.
            strandedness: ``all``, ``sense`` or ``antisense``.
            extend: Flank length added on both sides.
            position: Reference point, 5, 3 or 4 (midpoint).
            coordinate: Explicit reference coordinate, overrides ``position``.
            absolute: Keep genomic coordinates.
            avoid: Feature type(s) whose positions are dropped.
            feature_id: Id of the feature itself, never avoided.
            subfeatures: Sorted sub-intervals to stitch together. Virtual
                coordinates are used and avoidance is not applied.
            name_scope: Unique-name counting scope for ``ncount``.

        Returns:
            dict of position (relative or absolute) to value.
        """
        value_type = value_type_for_method(method)
        ReferencePoint.parse(position)
        sources = self.sources(datasets)

        if subfeatures:
            profile = map_subfeatures(
                sources, subfeatures, region.strand, strandedness, value_type, extend=extend, name_scope=name_scope
            )
            pos2data = profile.positions
            if value_type is ValueType.NAME:
                pos2data = {p: len(names) for p, names in pos2data.items()}
            if absolute or profile.practical_start is None:
                return pos2data
            if coordinate is None:
                coordinate = reference_coordinate(
                    position,
                    region.start,
                    region.stop,
                    region.strand,
                    practical_start=profile.practical_start,
                    practical_stop=profile.practical_stop,
                )
            return to_relative(pos2data, coordinate, region.strand)

        _region = region.extended(extend).clamped()
        pos2data = collect_position_scores(sources, _region, strandedness, value_type)
        pos2data = self._avoid(pos2data, avoid, feature_id, _region.seq_id, _region.start, _region.stop)
        pos2data = self._finish(pos2data, value_type, name_scope)
        if absolute:
            return pos2data
        if coordinate is None:
            coordinate = reference_coordinate(position, region.start, region.stop, region.strand)
        return to_relative(pos2data, coordinate, region.strand)

    def get_relative_point_position_scores(
        self,
        datasets,
        region,
        extend,
        position=5,
        coordinate=None,
        method='mean',
        strandedness='all',
        absolute=False,
        avoid=None,
        feature_id=None,
        name_scope='global',
    ):
        """Position map in a window of ``extend`` bp around a reference point."""
        if not extend:
            raise ConfigurationError('An extend value is required for reference point collection')
        value_type = value_type_for_method(method)
        sources = self.sources(datasets)
        if coordinate is None:
            coordinate = reference_coordinate(position, region.start, region.stop, region.strand)

        _window = GenomicInterval(region.seq_id, coordinate - extend, coordinate + extend, region.strand).clamped()
        lg.debug(f'Collecting {method} around {region.seq_id}:{coordinate}')
        pos2data = collect_position_scores(sources, _window, strandedness, value_type)
        pos2data = self._avoid(pos2data, avoid, feature_id, _window.seq_id, _window.start, _window.stop)
        pos2data = self._finish(pos2data, value_type, name_scope)
        if absolute:
            return pos2data
        return to_relative(pos2data, coordinate, region.strand)

    # --- Totals ---

    def count_alignments(self, dataset, min_quality=0, paired=False, worker_count=1):
        return count_alignments(
            dataset, min_quality=min_quality, paired=paired, worker_count=worker_count, registry=self.registry
        )
