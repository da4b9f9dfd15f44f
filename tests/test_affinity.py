"""
Tests for reader/source leaning affinity
"""
import itertools

import pytest

from tebpaper.processors.affinity import leaning_affinity
from tebpaper.utils.constants import LeaningConstants


SPECTRUM = LeaningConstants.SPECTRUM


class TestLeaningAffinity:
    """Test the affinity model"""

    @pytest.mark.parametrize("label", SPECTRUM)
    def test_same_label_is_perfect_match(self, label):
        assert leaning_affinity(label, label) == 1.0

    def test_opposite_poles_score_zero(self):
        assert leaning_affinity('left', 'right') == 0.0
        assert leaning_affinity('right', 'left') == 0.0

    def test_symmetric_for_every_pair(self):
        for a, b in itertools.product(SPECTRUM, repeat=2):
            assert leaning_affinity(a, b) == leaning_affinity(b, a)

    def test_default_spectrum_steps(self):
        assert [leaning_affinity('left', label) for label in SPECTRUM] == [1.0, 0.75, 0.5, 0.25, 0.0]
        assert leaning_affinity('centre', 'centre-right') == 0.75

    def test_decays_with_distance(self):
        scores = [leaning_affinity('left', label) for label in SPECTRUM]
        assert scores == sorted(scores, reverse=True)
        assert len(set(scores)) == len(SPECTRUM)

    def test_always_within_unit_interval(self):
        for a, b in itertools.product(SPECTRUM, repeat=2):
            assert 0.0 <= leaning_affinity(a, b) <= 1.0

    @pytest.mark.parametrize("reader,source", [
        ('libertarian', 'centre'),
        ('centre', 'unknown'),
        ('', ''),
        ('Centre', 'centre'),
    ])
    def test_unknown_labels_are_neutral(self, reader, source):
        assert leaning_affinity(reader, source) == 0.5

    def test_custom_spectrum_reaches_zero_at_the_ends(self):
        spectrum = ['a', 'b', 'c']
        assert leaning_affinity('a', 'c', spectrum) == 0.0
        assert leaning_affinity('a', 'b', spectrum) == pytest.approx(0.5)
