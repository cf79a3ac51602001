# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

import logging as lg
from collections import OrderedDict

from ..errors import SourceOpenError
from .abc import Alignment, ScoreSource  # noqa: F401


def get_source_class(path):
    """Get ScoreSource class matching the provided path

    Args:
        path (str): Local path or URL of the data file. A leading
            ``file:`` prefix is ignored.

    Returns:
        ScoreSource subclass able to read the file.
    """
    _path = path.lower()
    if _path.endswith('.bam') or _path.endswith('.cram'):
        from .bam import BamSource

        return BamSource
    else:
        raise SourceOpenError(path, 'unrecognized format, only BAM and CRAM files are supported')


class SourceRegistry:
    """Open score sources keyed by path.

    Opening the same path twice returns the same handle. The registry owns
    every handle it opened and closes them all in :meth:`close`.
    """

    def __init__(self):
        self._sources = OrderedDict()

    def open(self, path):
        if path in self._sources:
            return self._sources[path]
        src = get_source_class(path)(path)
        lg.debug(f'Opened score source {path}')
        self._sources[path] = src
        return src

    def invalidate(self, path):
        """Close and forget the handle for ``path``, if any."""
        src = self._sources.pop(path, None)
        if src is not None:
            src.close()

    def close(self):
        while self._sources:
            _path, src = self._sources.popitem()
            src.close()

    def __contains__(self, path):
        return path in self._sources

    def __len__(self):
        return len(self._sources)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
