# -*- coding: utf-8 -*-

# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

__version__ = '0.4.0'
