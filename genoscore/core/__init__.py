# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

"""Scoring and coordinate engine.

Example::

    from genoscore.core import GenomicInterval, ScoreCollector

    with ScoreCollector() as collector:
        region = GenomicInterval('chr1', 10000, 12000, -1)
        profile = collector.get_region_position_scores('reads.bam', region, method='count')
"""

from .collector import ScoreCollector  # noqa: F401
from .interval import GenomicInterval, Strandedness, ValueType  # noqa: F401
