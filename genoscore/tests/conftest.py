# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

import pytest

from genoscore.tests.helpers import MemorySource, Read, make_alignment, write_bam

GTF_TEXT = '\n'.join([
    '##description: test annotation',
    'chr1\ttest\tgene\t100\t500\t.\t+\t.\tgene_id "g1"; gene_name "ALPHA";',
    'chr1\ttest\ttranscript\t100\t500\t.\t+\t.\tgene_id "g1"; transcript_id "t1"; transcript_name "ALPHA-201";',
    'chr1\ttest\texon\t300\t350\t.\t+\t.\tgene_id "g1"; transcript_id "t1"; exon_number "2";',
    'chr1\ttest\texon\t100\t150\t.\t+\t.\tgene_id "g1"; transcript_id "t1"; exon_number "1";',
    'chr1\ttest\tCDS\t120\t150\t.\t+\t0\tgene_id "g1"; transcript_id "t1";',
    'chr1\ttest\tCDS\t300\t330\t.\t+\t0\tgene_id "g1"; transcript_id "t1";',
    'chr1\ttest\tgene\t400\t900\t.\t-\t.\tgene_id "g2"; gene_name "BETA";',
    'chr1\ttest\tgene\t200\t260\t.\t+\t.\tgene_id "g3"; gene_name "GAMMA";',
    '',
])


@pytest.fixture
def stranded_source():
    """Two forward and two reverse alignments with midpoints inside chr1:1-1000.

    Midpoints are 125 (+), 225 (-), 325 (+) and 1000 (-). A fifth forward
    alignment has its midpoint at 1040.
    """
    return MemorySource({
        'chr1': [
            make_alignment(100, 50, name='a'),
            make_alignment(200, 50, reverse=True, name='b'),
            make_alignment(300, 50, name='c'),
            make_alignment(950, 100, reverse=True, name='d'),
            make_alignment(990, 100, name='e'),
        ],
    }, lengths={'chr1': 5000, 'chr2': 3000})


@pytest.fixture
def bam_reads():
    return [
        Read('chr1', 100, 50, name='a'),
        Read('chr1', 200, 50, reverse=True, name='b'),
        Read('chr1', 300, 100, name='c'),
        Read('chr2', 1000, 40, name='d', mapq=5),
        Read('chr3', 500, 30, reverse=True, name='e'),
    ]


@pytest.fixture
def bam_file(tmp_path, bam_reads):
    return write_bam(tmp_path / 'reads.bam', bam_reads)


@pytest.fixture
def gtf_file(tmp_path):
    path = tmp_path / 'annotation.gtf'
    path.write_text(GTF_TEXT)
    return str(path)
