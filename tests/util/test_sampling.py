"""Tests for the Box-Muller sampler and glyph picker."""

from __future__ import annotations

import statistics

import pytest

from bleedout.fonts import SplatFont
from bleedout.util import rng
from bleedout.util.sampling import random_glyph, sample_box_muller


class FixedStream:
    """Returns the same value for every draw."""

    def __init__(self, value: float) -> None:
        self.value = value
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        return self.value


class TestSampleBoxMuller:
    """Tests for sample_box_muller."""

    def test_samples_stay_in_unit_range(self) -> None:
        samples = [sample_box_muller() for _ in range(10_000)]
        assert all(0.0 <= s <= 1.0 for s in samples)

    def test_samples_center_on_half(self) -> None:
        samples = [sample_box_muller() for _ in range(10_000)]
        assert statistics.fmean(samples) == pytest.approx(0.5, abs=0.01)
        assert statistics.pstdev(samples) == pytest.approx(0.1, abs=0.01)

    def test_seeded_samples_are_reproducible(self) -> None:
        rng.init(5)
        first = [sample_box_muller() for _ in range(20)]
        rng.init(5)
        assert [sample_box_muller() for _ in range(20)] == first

    def test_out_of_range_draws_are_clamped(self) -> None:
        """A source that always lands far outside [0, 1] still terminates."""
        # u = 1 - 0.999999 makes sqrt(-2 ln u) about 5.3, so num is about 1.03
        stream = FixedStream(0.999999)

        result = sample_box_muller(stream, max_attempts=5)

        assert result == 1.0
        assert stream.draws == 10

    def test_in_range_draw_returns_immediately(self) -> None:
        stream = FixedStream(0.25)
        result = sample_box_muller(stream)
        assert 0.0 <= result <= 1.0
        assert stream.draws == 2


class TestRandomGlyph:
    def test_glyph_comes_from_font(self) -> None:
        font = SplatFont(name="test", available_glyphs="xyz")
        for _ in range(50):
            assert random_glyph(font) in "xyz"

    def test_uses_given_stream(self) -> None:
        font = SplatFont(name="test", available_glyphs="abcdef")
        picks_a = [random_glyph(font, rng.RNGProvider(3).get("x")) for _ in range(3)]
        picks_b = [random_glyph(font, rng.RNGProvider(3).get("x")) for _ in range(3)]
        assert picks_a == picks_b
