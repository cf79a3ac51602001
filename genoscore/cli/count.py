# -*- coding: utf-8 -*-

# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

""" Genoscore count

"""
import logging as lg
import sys
from time import time

from . import REPORTING_OPTS, SubcommandOptions, configure_logging
from ..core.collector import ScoreCollector


class CountOptions(SubcommandOptions):

    OPTS = """
    - Input Options:
        - samfile:
            positional: True
            help: Path to alignment file (BAM or CRAM). Coordinate-sorted
                  files without an index are indexed on open.
    - Counting Options:
        - min_mapq:
            type: int
            default: 0
            help: Minimum mapping quality of counted alignments.
        - paired:
            action: store_true
            help: Count proper pairs once instead of every mapped alignment.
                  Only the forward mate of each proper pair is counted.
        - ncpu:
            type: int
            default: 2
            help: Number of worker processes. Chromosomes are split between
                  workers by length.
    """ + REPORTING_OPTS


def run(args):
    """ Count the alignments in a file

    Args:
        args:

    Returns:

    """
    opts = CountOptions(args)
    configure_logging(opts)
    lg.info('\n{}\n'.format(opts))
    total_time = time()

    with ScoreCollector() as collector:
        total = collector.count_alignments(
            opts.samfile,
            min_quality=opts.min_mapq,
            paired=opts.paired,
            worker_count=opts.ncpu,
        )
    print(total, file=sys.stdout)

    lg.info('genoscore count complete (%.1fs)' % (time() - total_time))
    return total
