# -*- coding: utf-8 -*-

# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

""" Genoscore score

"""
import logging as lg
import sys

import pandas as pd

from . import FEATURE_OPTS, REPORTING_OPTS, SubcommandOptions, configure_logging, resolve_targets
from ..core.collector import ScoreCollector


class ScoreOptions(SubcommandOptions):

    OPTS = """
    - Input Options:
        - datasets:
            positional: True
            nargs: "+"
            help: One or more alignment files (BAM or CRAM). Values from all
                  files are pooled.
    """ + FEATURE_OPTS + """
    - Scoring Options:
        - method:
            default: mean
            choices:
                - mean
                - median
                - sum
                - min
                - max
                - range
                - stddev
                - count
                - ncount
                - length
            help: >
                  Method combining values over the region into one score.
                  "count" counts alignments whose midpoint lies in the region,
                  "ncount" counts unique read names, "length" averages
                  alignment lengths. Other methods summarise per-base
                  coverage.
        - strandedness:
            default: all
            choices:
                - all
                - sense
                - antisense
            help: Alignment strand relative to the feature. Ignored for
                  coverage methods.
        - extend:
            type: int
            default: 0
            help: Extend each region by this many bp on both sides. Ignored
                  with --subfeature.
    """ + REPORTING_OPTS


def run(args):
    opts = ScoreOptions(args)
    configure_logging(opts)
    lg.info('\n{}\n'.format(opts))

    _lookup, targets = resolve_targets(opts)
    rows = []
    with ScoreCollector() as collector:
        for label, _fid, region, subs in targets:
            score = collector.get_score(
                opts.datasets,
                region,
                method=opts.method,
                strandedness=opts.strandedness,
                extend=opts.extend,
                subfeatures=subs,
            )
            rows.append((label, score))

    _report = pd.DataFrame(rows, columns=['feature', opts.method])
    _report.to_csv(sys.stdout, sep='\t', index=False, na_rep='.')
    return _report
