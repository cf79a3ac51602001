# This file is part of Genoscore.
# Score collection from genomic alignment files over features and regions.
#
# Licensed under MIT License.

"""Tests for genoscore.core.stats."""

import pytest

from genoscore.core.interval import ValueType
from genoscore.core.stats import METHODS, calculate_score, value_type_for_method
from genoscore.errors import ConfigurationError

VALUES = [1, 2, 2, 3, 7]


class TestCalculateScore:
    @pytest.mark.parametrize(
        'method, expected',
        [
            ('mean', 3.0),
            ('median', 2.0),
            ('sum', 15),
            ('min', 1),
            ('max', 7),
            ('range', 6),
            ('count', 5),
            ('ncount', 4),
            ('length', 3.0),
        ],
    )
    def test_methods(self, method, expected):
        assert calculate_score(method, VALUES) == expected

    def test_stddev_is_sample(self):
        assert calculate_score('stddev', [2, 4]) == pytest.approx(1.4142135)

    def test_stddev_single_value(self):
        assert calculate_score('stddev', [5]) == 0.0

    def test_ncount_of_names(self):
        assert calculate_score('ncount', ['a', 'b', 'a']) == 2

    @pytest.mark.parametrize('method', ['count', 'ncount', 'sum'])
    def test_empty_is_zero(self, method):
        assert calculate_score(method, []) == 0

    @pytest.mark.parametrize('method', ['mean', 'median', 'min', 'max', 'range', 'stddev', 'length'])
    def test_empty_is_none(self, method):
        assert calculate_score(method, []) is None

    def test_unknown_method(self):
        with pytest.raises(ConfigurationError):
            calculate_score('mode', VALUES)

    def test_all_methods_known(self):
        for method in METHODS:
            value_type_for_method(method)


class TestValueTypes:
    @pytest.mark.parametrize(
        'method, expected',
        [
            ('mean', ValueType.COVERAGE),
            ('stddev', ValueType.COVERAGE),
            ('count', ValueType.COUNT),
            ('ncount', ValueType.NAME),
            ('length', ValueType.LENGTH),
        ],
    )
    def test_value_type(self, method, expected):
        assert value_type_for_method(method) is expected
