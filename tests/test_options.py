#!/usr/bin/env python3
# tests/test_options.py - Unit tests for options.py

import os
import sys

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from options import minimal_subset, pick_representative


class TestMinimalSubset:
    """Test suite for minimal_subset()"""

    def test_keeps_only_shortest(self):
        assert minimal_subset(['shi', 'si', 'ci']) == ['si', 'ci']

    def test_keeps_order(self):
        assert minimal_subset(['ci', 'sixya', 'si']) == ['ci', 'si']

    def test_single_option(self):
        assert minimal_subset(['ka']) == ['ka']

    def test_empty(self):
        assert minimal_subset([]) == []

    def test_accepts_any_iterable(self):
        assert minimal_subset(o for o in ('aa', 'a')) == ['a']


class TestPickRepresentative:
    """Test suite for pick_representative()"""

    def test_no_prefix_returns_shortest(self):
        assert pick_representative(['shi', 'si', 'ci']) == 'si'

    def test_tie_goes_to_first(self):
        assert pick_representative(['ci', 'si']) == 'ci'

    def test_prefix_filters_options(self):
        assert pick_representative(['si', 'ci'], 'c') == 'ci'

    def test_prefix_prefers_shortest_match(self):
        assert pick_representative(['sya', 'sixya', 'sha'], 'si') == 'sixya'

    def test_unmatched_prefix_falls_back_to_shortest(self):
        assert pick_representative(['shi', 'si'], 'x') == 'si'

    def test_empty_options(self):
        assert pick_representative([], 'a') == ''
