# -*- coding: utf-8 -*-

# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

""" Genoscore profile

"""
import logging as lg
import sys

import pandas as pd

from . import FEATURE_OPTS, REPORTING_OPTS, SubcommandOptions, configure_logging, resolve_targets
from ..core.collector import ScoreCollector
from ..errors import ConfigurationError


class ProfileOptions(SubcommandOptions):

    OPTS = """
    - Input Options:
        - datasets:
            positional: True
            nargs: "+"
            help: One or more alignment files (BAM or CRAM). Values from all
                  files are merged per position.
    """ + FEATURE_OPTS + """
    - Profile Options:
        - method:
            default: mean
            choices:
                - mean
                - count
                - ncount
                - length
            help: >
                  Value reported per position. "count" counts alignments by
                  midpoint, "ncount" counts unique read names, "length"
                  averages alignment lengths. "mean" reports per-base
                  coverage.
        - strandedness:
            default: all
            choices:
                - all
                - sense
                - antisense
            help: Alignment strand relative to the feature.
        - extend:
            type: int
            default: 0
            help: Flank length added on both sides. Required with --point.
        - position:
            type: int
            default: 5
            choices:
                - 5
                - 3
                - 4
            help: Reference point, 5 for the 5' end, 3 for the 3' end, 4 for
                  the midpoint.
        - coordinate:
            type: int
            help: Explicit genomic reference coordinate. Overrides --position.
        - point:
            action: store_true
            help: Collect a window of --extend bp around the reference point
                  instead of over the whole feature.
        - absolute:
            action: store_true
            help: Report genomic positions instead of relative positions.
        - avoid:
            action: append
            help: Drop positions overlapping other features of this GTF
                  feature type. May be given more than once. Requires
                  --gtffile.
        - name_scope:
            default: global
            choices:
                - global
                - local
            help: For "ncount", count each read name once per feature
                  ("global") or once per position or sub-feature ("local").
    """ + REPORTING_OPTS


def run(args):
    opts = ProfileOptions(args)
    configure_logging(opts)
    lg.info('\n{}\n'.format(opts))
    if opts.point and not opts.extend:
        raise ConfigurationError('--point requires --extend')
    if opts.point and opts.subfeature:
        raise ConfigurationError('--point cannot be combined with --subfeature')

    lookup, targets = resolve_targets(opts)
    frames = []
    with ScoreCollector(feature_lookup=lookup) as collector:
        for label, fid, region, subs in targets:
            if opts.point:
                pos2data = collector.get_relative_point_position_scores(
                    opts.datasets,
                    region,
                    opts.extend,
                    position=opts.position,
                    coordinate=opts.coordinate,
                    method=opts.method,
                    strandedness=opts.strandedness,
                    absolute=opts.absolute,
                    avoid=opts.avoid,
                    feature_id=fid,
                    name_scope=opts.name_scope,
                )
            else:
                pos2data = collector.get_region_position_scores(
                    opts.datasets,
                    region,
                    method=opts.method,
                    strandedness=opts.strandedness,
                    extend=opts.extend,
                    position=opts.position,
                    coordinate=opts.coordinate,
                    absolute=opts.absolute,
                    avoid=opts.avoid,
                    feature_id=fid,
                    subfeatures=subs,
                    name_scope=opts.name_scope,
                )
            lg.info(f'{label}: {len(pos2data)} positions')
            _df = pd.DataFrame(sorted(pos2data.items()), columns=['position', opts.method])
            _df.insert(0, 'feature', label)
            frames.append(_df)

    _report = pd.concat(frames, ignore_index=True)
    _report.to_csv(sys.stdout, sep='\t', index=False)
    return _report
