# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

from ..errors import ConfigurationError


def load_annotation(path, feature_types=None):
    """Load an annotation file into a feature lookup

    Args:
        path (str): Path to the annotation file. Only GTF is supported.
        feature_types (list of str): GTF feature types to keep. All types
            are kept by default.

    Returns:
        Feature lookup providing ``features_overlapping`` and
        ``subfeatures``.
    """
    _path = path.lower()
    if _path.endswith('.gtf') or _path.endswith('.gtf.txt'):
        from .intervaltree import GTFFeatureIndex

        return GTFFeatureIndex(path, feature_types)
    else:
        raise ConfigurationError(f'Unknown annotation format for "{path}". Only GTF is supported.')
