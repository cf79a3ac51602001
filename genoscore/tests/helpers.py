# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

"""Test data builders: in-memory score sources and small BAM files."""

from collections import namedtuple

import numpy as np
import pysam

from genoscore.source.abc import Alignment, ScoreSource

Read = namedtuple(
    'Read',
    ['seq_id', 'start', 'length', 'reverse', 'name', 'mapq', 'proper_pair', 'cigar', 'sequence'],
    defaults=(False, None, 30, False, None, None),
)
Read.__doc__ = """Read for :func:`write_bam`. ``start`` is 0-based and ``length`` counts query bases."""

REFERENCES = (('chr1', 10000), ('chr2', 5000), ('chr3', 2000))


def make_alignment(start, length, reverse=False, name=None, mapq=30, proper_pair=False, unmapped=False):
    """Alignment record with a 0-based ``start``."""
    _end = start if unmapped else start + length
    return Alignment(start, _end, reverse, unmapped, proper_pair, mapq, name or f'r{start}_{length}')


class MemorySource(ScoreSource):
    """Score source backed by a dict of alignment lists."""

    def __init__(self, alignments, lengths=None, path='memory'):
        super().__init__(path)
        self._alignments = {k: list(v) for k, v in alignments.items()}
        if lengths is None:
            lengths = {k: max([a.end for a in v] + [0]) + 1000 for k, v in self._alignments.items()}
        self._lengths = dict(lengths)
        self.closed = False

    @property
    def references(self):
        return tuple(self._lengths)

    def target_length(self, seq_id):
        return self._lengths[seq_id]

    def fetch_alignments(self, seq_id, start, end):
        for a in sorted(self._alignments.get(seq_id, []), key=lambda a: a.position):
            if a.position < end and max(a.end, a.position + 1) > start:
                yield a

    def coverage(self, seq_id, start, end):
        cov = np.zeros(max(0, end - start), dtype=np.int64)
        for a in self._alignments.get(seq_id, []):
            if a.is_unmapped:
                continue
            s, e = max(a.position, start), min(a.end, end)
            if s < e:
                cov[s - start:e - start] += 1
        return cov

    def clone(self):
        return type(self)(self._alignments, self._lengths, self.path)

    def close(self):
        self.closed = True


def write_bam(path, reads, references=REFERENCES, index=True, sort_order='coordinate'):
    """Write ``reads`` to a BAM file at ``path``, sorted by position."""
    path = str(path)
    header = {
        'HD': {'VN': '1.6', 'SO': sort_order},
        'SQ': [{'SN': name, 'LN': length} for name, length in references],
    }
    _tid = {name: i for i, (name, _length) in enumerate(references)}
    reads = sorted(reads, key=lambda r: (_tid[r.seq_id], r.start))
    with pysam.AlignmentFile(path, 'wb', header=header) as outf:
        for i, r in enumerate(reads):
            a = pysam.AlignedSegment(outf.header)
            a.query_name = r.name or f'read{i}'
            a.query_sequence = r.sequence or 'A' * r.length
            a.flag = 0
            if r.proper_pair:
                a.is_paired = True
                a.is_proper_pair = True
                a.is_read1 = not r.reverse
                a.is_read2 = r.reverse
                a.mate_is_reverse = not r.reverse
            a.is_reverse = r.reverse
            a.reference_id = _tid[r.seq_id]
            a.reference_start = r.start
            a.mapping_quality = r.mapq
            a.cigartuples = r.cigar or [(0, r.length)]
            a.next_reference_id = _tid[r.seq_id] if r.proper_pair else -1
            a.next_reference_start = r.start if r.proper_pair else -1
            a.query_qualities = pysam.qualitystring_to_array('I' * r.length)
            outf.write(a)
    if index:
        pysam.index(path)
    return path
