# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

"""Exceptions raised by genoscore.

Queries against a sequence that a source does not know about are not
errors; they return empty results.
"""


class GenoscoreError(Exception):
    """Base class for genoscore errors."""


class SourceOpenError(GenoscoreError):
    """A score source could not be opened or indexed."""

    def __init__(self, path, reason=''):
        self.path = path
        self.reason = reason
        msg = f'Unable to open score source "{path}"'
        if reason:
            msg += f': {reason}'
        super().__init__(msg)

    def __reduce__(self):
        return (type(self), (self.path, self.reason))


class ConfigurationError(GenoscoreError, ValueError):
    """Invalid parameter or parameter combination."""


class WorkerFailure(GenoscoreError):
    """A parallel counting worker failed; the whole count is abandoned."""
