# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

"""Abstract interface for score sources.

A score source answers region queries against one indexed data file.
Coordinates passed to a source are 0-based and half-open; translating the
1-based closed regions used everywhere else is the caller's job (see
:meth:`genoscore.core.interval.GenomicInterval.zero_based`).

Handles are not safe for overlapping use from several workers. Each
worker obtains its own handle with :meth:`ScoreSource.clone`. Pickling a
source only transfers its locator: the unpickled object is dormant until
it is cloned in the receiving process.
"""

from abc import ABC, abstractmethod
from collections import namedtuple

from ..errors import SourceOpenError

Alignment = namedtuple(
    'Alignment',
    ['position', 'end', 'is_reverse', 'is_unmapped', 'is_proper_pair', 'mapping_quality', 'name'],
)
Alignment.__doc__ = """Read-only alignment record. ``position`` is 0-based, ``end`` exclusive."""


def footprint(aln):
    return aln.end - aln.position


class ScoreSource(ABC):
    """One open data file that can be queried by region."""

    def __init__(self, path):
        self.path = path

    # --- Catalog ---

    @property
    @abstractmethod
    def references(self):
        """Sequence names in file order."""

    def chromosome_names(self):
        return frozenset(self.references)

    def has_sequence(self, seq_id):
        return seq_id in self.chromosome_names()

    @abstractmethod
    def target_length(self, seq_id):
        """Length of ``seq_id`` in base pairs."""

    def chromosome_lengths(self):
        """List of ``(seq_id, length)`` in file order."""
        return [(ref, self.target_length(ref)) for ref in self.references]

    # --- Queries ---

    @abstractmethod
    def fetch_alignments(self, seq_id, start, end):
        """Iterate :class:`Alignment` records overlapping ``[start, end)``."""

    @abstractmethod
    def coverage(self, seq_id, start, end):
        """Per-base coverage over ``[start, end)`` as an integer array."""

    # --- Lifecycle ---

    @abstractmethod
    def clone(self):
        """Return an independent handle on the same data."""

    @abstractmethod
    def close(self):
        """Release the underlying file handle."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    @property
    def is_dormant(self):
        """True for a source unpickled in another process, until cloned."""
        return getattr(self, '_dormant', False)

    def _check_awake(self):
        if self.is_dormant:
            raise SourceOpenError(self.path, 'unpickled source has no open handle, clone it first')

    def __reduce__(self):
        return (_dormant, (type(self), self.path))

    def __repr__(self):
        return f'<{type(self).__name__} path={self.path}>'


def _dormant(cls, path):
    obj = cls.__new__(cls)
    ScoreSource.__init__(obj, path)
    obj._dormant = True
    return obj
