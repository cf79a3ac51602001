# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

import logging as lg


def avoid_positions(pos2data, seq_id, start, stop, exclude_id, types, lookup):
    """Drop positions that fall inside a competing annotated feature.

    Every feature of ``types`` overlapping ``[start, stop]`` other than
    ``exclude_id`` removes the positions it covers. The map is modified in
    place and returned.

    Args:
        pos2data: Position map keyed by absolute genomic position.
        seq_id, start, stop: Region the positions were collected over.
        exclude_id: Id of the feature of interest, never avoided.
        types: Feature types to avoid.
        lookup: Object with ``features_overlapping(seq_id, start, end, types)``.
    """
    for feat in lookup.features_overlapping(seq_id, start, stop, types):
        if feat.id == exclude_id:
            continue
        _drop = [p for p in pos2data if feat.start <= p <= feat.end]
        for p in _drop:
            del pos2data[p]
        if _drop:
            lg.debug(f'Avoided {len(_drop)} positions overlapping {feat.id}')
    return pos2data
