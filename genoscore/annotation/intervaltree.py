# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

import logging as lg
import re
from collections import OrderedDict, defaultdict, namedtuple

from intervaltree import IntervalTree

from ..core.interval import GenomicInterval
from ..errors import ConfigurationError

GTFRow = namedtuple('GTFRow', ['chrom', 'source', 'feature', 'start', 'end', 'score', 'strand', 'frame', 'attribute'])

AnnotatedFeature = namedtuple('AnnotatedFeature', ['id', 'seq_id', 'start', 'end', 'strand', 'name', 'type'])

_STRANDS = {'+': 1, '-': -1}

# Sub-feature kinds and the GTF feature types that provide them
SUBFEATURE_TYPES = {
    'exon': ('exon',),
    'cds': ('CDS',),
    '5p_utr': ('five_prime_utr', '5UTR'),
    '3p_utr': ('three_prime_utr', '3UTR'),
}

# GTF attribute holding the identifier of each feature type
_ID_KEYS = {
    'gene': ('gene_id',),
    'transcript': ('transcript_id',),
    'exon': ('exon_id',),
}
_NAME_KEYS = {
    'gene': ('gene_name', 'gene_id'),
    'transcript': ('transcript_name', 'transcript_id'),
}


class GTFFeatureIndex:
    """Annotated features from a GTF file, indexed by interval tree.

    Genes and transcripts are identified by ``gene_id`` and
    ``transcript_id``. Other rows are identified by ``exon_id`` when
    present, otherwise by their parent transcript, type and rank.
    """

    def __init__(self, gtf_file, feature_types=None):
        lg.debug('Using intervaltree for annotation.')
        self.features = OrderedDict()
        self.itree = defaultdict(IntervalTree)
        self.children = defaultdict(list)

        _counts = defaultdict(int)
        _opened = isinstance(gtf_file, str)
        fh = open(gtf_file) if _opened else gtf_file  # noqa: SIM115
        try:
            for rownum, line in enumerate(fh):
                if line.startswith('#') or not line.strip():
                    continue
                f = GTFRow(*line.strip('\n').split('\t'))
                if feature_types is not None and f.feature not in feature_types:
                    continue
                attr = dict(re.findall(r'(\w+)\s+"(.+?)";', f.attribute))

                parent = attr.get('transcript_id')
                _fid = self._feature_id(f.feature, attr)
                if _fid is None:
                    if parent is None:
                        lg.warning(f'Skipping row {rownum}: no identifying attribute for "{f.feature}"')
                        continue
                    _counts[(parent, f.feature)] += 1
                    _fid = f'{parent}:{f.feature}:{_counts[(parent, f.feature)]}'
                if _fid in self.features:
                    _fid = f'{_fid}:{rownum}'

                feat = AnnotatedFeature(
                    _fid,
                    f.chrom,
                    int(f.start),
                    int(f.end),
                    _STRANDS.get(f.strand, 0),
                    self._feature_name(f.feature, attr, _fid),
                    f.feature,
                )
                """ Add to feature list """
                self.features[_fid] = feat
                """ Add to interval tree """
                self.itree[f.chrom].addi(feat.start, feat.end + 1, feat)
                """ Register under parent transcript """
                if parent is not None and f.feature not in ('gene', 'transcript'):
                    self.children[parent].append(feat)
        finally:
            if _opened:
                fh.close()
        lg.info(f'Loaded {len(self.features)} annotated features')

    @staticmethod
    def _feature_id(ftype, attr):
        for key in _ID_KEYS.get(ftype, ()):
            if key in attr:
                return attr[key]
        return None

    @staticmethod
    def _feature_name(ftype, attr, default):
        for key in _NAME_KEYS.get(ftype, ()):
            if key in attr:
                return attr[key]
        return default

    def __len__(self):
        return len(self.features)

    def get_feature(self, feature_id):
        """Feature record for ``feature_id``, or None."""
        return self.features.get(feature_id)

    def interval(self, feature_id):
        feat = self.features[feature_id]
        return GenomicInterval(feat.seq_id, feat.start, feat.end, feat.strand)

    def features_overlapping(self, seq_id, start, end, types=None):
        """Features on ``seq_id`` overlapping the closed range ``[start, end]``."""
        if seq_id not in self.itree:
            return []
        _result = []
        for iv in self.itree[seq_id].overlap(start, end + 1):
            if types is None or iv.data.type in types:
                _result.append(iv.data)
        _result.sort(key=lambda feat: (feat.start, feat.end))
        return _result

    def subfeatures(self, transcript_id, kind='exon'):
        """Sub-intervals of a transcript in ascending genomic order.

        Args:
            transcript_id: ``transcript_id`` of the parent feature.
            kind: One of ``exon``, ``cds``, ``5p_utr``, ``3p_utr``.

        Returns:
            List of :class:`GenomicInterval`.
        """
        kind = kind.lower()
        if kind not in SUBFEATURE_TYPES:
            raise ConfigurationError(f'Unknown subfeature "{kind}". Supported: {", ".join(SUBFEATURE_TYPES)}')
        _types = SUBFEATURE_TYPES[kind]
        subs = [f for f in self.children.get(transcript_id, []) if f.type in _types]
        subs.sort(key=lambda f: f.start)
        return [GenomicInterval(f.seq_id, f.start, f.end, f.strand) for f in subs]
