# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

"""Tests for genoscore.core.counter."""

import os

import pytest

from genoscore.core.counter import count_alignments, partition_chromosomes, read_filter
from genoscore.errors import ConfigurationError, WorkerFailure
from genoscore.source import SourceRegistry
from genoscore.source.bam import BamSource
from genoscore.tests.helpers import MemorySource, Read, make_alignment, write_bam


@pytest.fixture
def mixed_source():
    return MemorySource({
        'chr1': [
            make_alignment(100, 50, proper_pair=True),
            make_alignment(300, 50, reverse=True, proper_pair=True),
            make_alignment(500, 50, mapq=5, proper_pair=True),
            make_alignment(700, 50, unmapped=True),
        ],
        'chr2': [
            make_alignment(100, 50),
        ],
    })


@pytest.fixture
def many_chromosomes(tmp_path):
    references = [(f'chr{i}', 1000 * i) for i in range(1, 7)]
    reads = []
    for i, (name, length) in enumerate(references):
        for j in range(i + 1):
            reads.append(Read(name, 10 + 100 * j, 50, reverse=bool(j % 2)))
    return write_bam(tmp_path / 'many.bam', reads, references=references)


# --- Partitioning ---


class TestPartition:
    def test_longest_first_round_robin(self):
        lengths = [('a', 10), ('b', 50), ('c', 30), ('d', 40), ('e', 20)]
        assert partition_chromosomes(lengths, 2) == [['b', 'c', 'a'], ['d', 'e']]

    def test_more_workers_than_chromosomes(self):
        assert partition_chromosomes([('a', 10), ('b', 20)], 3) == [['b'], ['a'], []]

    def test_single_worker(self):
        assert partition_chromosomes([('a', 10), ('b', 20)], 1) == [['b', 'a']]

    def test_every_chromosome_assigned_once(self):
        lengths = [(f'c{i}', i * 7 % 13) for i in range(20)]
        buckets = partition_chromosomes(lengths, 4)
        assert sorted(s for b in buckets for s in b) == sorted(s for s, _ in lengths)


# --- Filters ---


class TestReadFilter:
    def test_single_end_skips_unmapped(self):
        keep = read_filter()
        assert keep(make_alignment(0, 10))
        assert not keep(make_alignment(0, 10, unmapped=True))

    def test_min_quality(self):
        keep = read_filter(min_quality=10)
        assert keep(make_alignment(0, 10, mapq=10))
        assert not keep(make_alignment(0, 10, mapq=9))

    def test_paired_counts_forward_mate(self):
        keep = read_filter(paired=True)
        assert keep(make_alignment(0, 10, proper_pair=True))
        assert not keep(make_alignment(0, 10, reverse=True, proper_pair=True))
        assert not keep(make_alignment(0, 10))


# --- Counting ---


class TestCountAlignments:
    @pytest.mark.parametrize(
        'min_quality, paired, expected',
        [
            (0, False, 4),
            (10, False, 3),
            (0, True, 2),
            (10, True, 1),
        ],
    )
    def test_sequential(self, mixed_source, min_quality, paired, expected):
        assert count_alignments(mixed_source, min_quality=min_quality, paired=paired) == expected

    def test_parallel_matches_sequential(self, many_chromosomes):
        with BamSource(many_chromosomes) as src:
            sequential = count_alignments(src, worker_count=1)
            parallel = count_alignments(src, worker_count=4)
        assert sequential == parallel == 21

    def test_parallel_quality_filter(self, tmp_path):
        reads = [Read('chr1', 10, 20, mapq=40), Read('chr2', 10, 20, mapq=2), Read('chr3', 10, 20, mapq=40)]
        path = write_bam(tmp_path / 'q.bam', reads)
        with BamSource(path) as src:
            assert count_alignments(src, min_quality=20, worker_count=2) == 2

    @pytest.mark.parametrize('min_quality, expected', [(0, 3), (10, 2)])
    def test_parallel_paired(self, tmp_path, min_quality, expected):
        reads = [
            Read('chr1', 100, 50, proper_pair=True),
            Read('chr1', 300, 50, reverse=True, proper_pair=True),
            Read('chr2', 100, 50, proper_pair=True),
            Read('chr2', 300, 50, reverse=True, proper_pair=True),
            Read('chr3', 100, 50, mapq=5, proper_pair=True),
            Read('chr3', 300, 50, reverse=True, mapq=5, proper_pair=True),
            Read('chr3', 600, 50),
        ]
        path = write_bam(tmp_path / 'pairs.bam', reads)
        with BamSource(path) as src:
            sequential = count_alignments(src, min_quality=min_quality, paired=True, worker_count=1)
            parallel = count_alignments(src, min_quality=min_quality, paired=True, worker_count=2)
        assert sequential == parallel == expected

    def test_path_through_registry(self, bam_file):
        with SourceRegistry() as registry:
            assert count_alignments(bam_file, registry=registry) == 5
            assert bam_file in registry

    def test_path_without_registry(self, bam_file):
        with pytest.raises(ConfigurationError):
            count_alignments(bam_file)

    def test_bad_source_type(self):
        with pytest.raises(ConfigurationError):
            count_alignments(42, registry=SourceRegistry())

    def test_worker_failure(self, bam_file):
        src = BamSource(bam_file)
        try:
            os.remove(bam_file)
            os.remove(bam_file + '.bai')
            with pytest.raises(WorkerFailure):
                count_alignments(src, worker_count=2)
        finally:
            src.close()
