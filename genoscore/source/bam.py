# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

import logging as lg
import os

import numpy as np
import pysam
from pysam.utils import SamtoolsError

from ..errors import SourceOpenError
from .abc import Alignment, ScoreSource

_REMOTE_PREFIXES = ('http://', 'https://', 'ftp://', 's3://')


def strip_file_prefix(path):
    if path.startswith('file:'):
        return path[len('file:'):]
    return path


class BamSource(ScoreSource):
    """Indexed BAM or CRAM file read through pysam.

    Local coordinate-sorted files without an index get a ``.bai`` created
    on open. Paired reads are treated as independent alignments.
    """

    def __init__(self, path):
        super().__init__(path)
        self._bam = None
        self._bam = self._open(strip_file_prefix(path))
        self._references = tuple(self._bam.references)
        self._lengths = dict(zip(self._bam.references, self._bam.lengths))

    def _open(self, path):
        _mode = 'rc' if path.endswith('.cram') else 'rb'
        try:
            sf = pysam.AlignmentFile(path, _mode, check_sq=False)
        except (OSError, ValueError) as exc:
            raise SourceOpenError(self.path, str(exc)) from exc

        if sf.has_index():
            return sf

        _is_coordinate_sorted = sf.header.to_dict().get('HD', {}).get('SO') == 'coordinate'
        sf.close()
        if path.startswith(_REMOTE_PREFIXES) or not _is_coordinate_sorted:
            raise SourceOpenError(self.path, 'file is not indexed')

        lg.info(f'Coordinate-sorted alignment file without index, creating index for {os.path.basename(path)}')
        try:
            pysam.index(path)
            return pysam.AlignmentFile(path, _mode, check_sq=False)
        except (OSError, ValueError, SamtoolsError) as exc:
            raise SourceOpenError(self.path, f'unable to index: {exc}') from exc

    def _handle(self):
        self._check_awake()
        if self._bam is None:
            raise SourceOpenError(self.path, 'source is closed')
        return self._bam

    @property
    def references(self):
        self._check_awake()
        return self._references

    def chromosome_names(self):
        return frozenset(self.references)

    def target_length(self, seq_id):
        self._check_awake()
        return self._lengths[seq_id]

    def fetch_alignments(self, seq_id, start, end):
        for a in self._handle().fetch(seq_id, start, end):
            _end = a.reference_end
            yield Alignment(
                a.reference_start,
                _end if _end is not None else a.reference_start,
                a.is_reverse,
                a.is_unmapped,
                a.is_proper_pair,
                a.mapping_quality,
                a.query_name,
            )

    def coverage(self, seq_id, start, end):
        if end <= start:
            return np.zeros(0, dtype=np.int64)
        # Pileup depth counts deletions and N bases, unlike per-nucleotide tallies
        cov = np.zeros(end - start, dtype=np.int64)
        for col in self._handle().pileup(
            seq_id,
            start,
            end,
            truncate=True,
            stepper='all',
            min_base_quality=0,
            ignore_overlaps=False,
            ignore_orphans=False,
        ):
            cov[col.reference_pos - start] = col.nsegments
        return cov

    def clone(self):
        return type(self)(self.path)

    def close(self):
        _bam = getattr(self, '_bam', None)
        if _bam is not None:
            _bam.close()
            self._bam = None
