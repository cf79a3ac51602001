# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

"""Total alignment counts, optionally split across worker processes.

Chromosomes are dealt to workers longest first, round-robin, so that each
worker gets a roughly even share of bases. Workers never share a source
handle: each one clones the source it receives.
"""

import functools
import logging as lg
import os
from multiprocessing import Pool

from ..errors import ConfigurationError, WorkerFailure
from ..source.abc import ScoreSource


def read_filter(min_quality=0, paired=False):
    """Inclusion test for counting.

    Proper pairs are counted once, through the forward mate. Single-end
    counting takes every mapped alignment.
    """
    if paired:
        return lambda aln: aln.is_proper_pair and not aln.is_reverse and aln.mapping_quality >= min_quality
    return lambda aln: not aln.is_unmapped and aln.mapping_quality >= min_quality


def partition_chromosomes(lengths, worker_count):
    """Split chromosomes into ``worker_count`` buckets of similar total length.

    Args:
        lengths: Iterable of ``(seq_id, length)``.
        worker_count: Number of buckets.

    Returns:
        List of ``worker_count`` lists of sequence names.
    """
    worker_count = max(1, worker_count)
    buckets = [[] for _ in range(worker_count)]
    ordered = sorted(lengths, key=lambda t: t[1], reverse=True)
    for i, (seq_id, _length) in enumerate(ordered):
        buckets[i % worker_count].append(seq_id)
    return buckets


def count_chromosome(source, seq_id, keep):
    _n = 0
    for aln in source.fetch_alignments(seq_id, 0, source.target_length(seq_id)):
        if keep(aln):
            _n += 1
    return _n


def _count_bucket(source, min_quality, paired, seq_ids):
    # Runs in a worker process, source arrives without an open handle
    keep = read_filter(min_quality, paired)
    with source.clone() as handle:
        return sum(count_chromosome(handle, seq_id, keep) for seq_id in seq_ids)


def resolve_source(source, registry):
    """Accept either an open :class:`ScoreSource` or a path to open."""
    if isinstance(source, ScoreSource):
        return source
    elif isinstance(source, (str, os.PathLike)):
        return registry.open(os.fspath(source))
    else:
        raise ConfigurationError(f'Expected a path or an open score source, got {type(source).__name__}')


def count_alignments(source, min_quality=0, paired=False, worker_count=1, registry=None):
    """Count alignments passing the quality and pairing filters.

    Args:
        source: Path to a data file or an open score source.
        min_quality: Minimum mapping quality.
        paired: Count proper pairs once instead of every mapped alignment.
        worker_count: Number of worker processes. ``<= 1`` counts in the
            calling process.
        registry: :class:`~genoscore.source.SourceRegistry` used to open
            paths. Required when ``source`` is a path.

    Returns:
        Number of alignments.

    Raises:
        WorkerFailure: A worker process failed. No partial count is
            returned.
    """
    if registry is None and not isinstance(source, ScoreSource):
        raise ConfigurationError('A source registry is required to count alignments from a path')
    src = resolve_source(source, registry)
    _mode = 'paired' if paired else 'single-end'

    if worker_count <= 1:
        keep = read_filter(min_quality, paired)
        total = 0
        for seq_id in src.references:
            _n = count_chromosome(src, seq_id, keep)
            lg.debug(f'{seq_id}: {_n} alignments')
            total += _n
        lg.info(f'Counted {total} {_mode} alignments in {src.path}')
        return total

    buckets = [b for b in partition_chromosomes(src.chromosome_lengths(), worker_count) if b]
    lg.info(f'Counting {_mode} alignments in parallel with {len(buckets)} workers...')
    _countfunc = functools.partial(_count_bucket, src, min_quality, paired)
    with Pool(processes=worker_count) as pool:
        result = pool.map_async(_countfunc, buckets)
        try:
            counts = result.get()
        except Exception as exc:
            raise WorkerFailure(f'Alignment counting failed for {src.path}: {exc}') from exc
    total = sum(counts)
    lg.info(f'Counted {total} {_mode} alignments in {src.path}')
    return total
