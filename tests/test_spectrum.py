import math

import numpy as np
import pytest

from audio.spectrum import SpectrumRemapper, build_knots, index_bounds
from core.config import VisualizerConfig


class TestIndexBounds:
    def test_ceiling_clip(self):
        assert index_bounds(1024, 44100, 0.0, 15000.0) == (0, 348)

    def test_ceiling_above_nyquist_is_capped(self):
        assert index_bounds(1024, 8000, 0.0, 15000.0) == (0, 513)

    def test_floor_clip(self):
        assert index_bounds(64, 64, 1.0, 32.0) == (1, 32)
        assert index_bounds(64, 64, 0.5, 32.0) == (1, 32)

    def test_zero_floor_keeps_dc(self):
        lo, _ = index_bounds(1024, 44100, 0.0, 15000.0)
        assert lo == 0

    def test_invalid_rate(self):
        assert index_bounds(1024, 0, 0.0, 15000.0) == (0, 0)


class TestKnots:
    def test_matches_power_formula(self):
        for base in (1.02, 0.98, 2.0):
            count = 50
            raw = np.array([0.0] + [1 - 1 / base ** i for i in range(1, count)])
            expected = raw / raw[-1] * (count - 1)
            np.testing.assert_allclose(build_knots(count, base), expected, rtol=1e-9, atol=1e-9)

    def test_spans_available_indices(self):
        knots = build_knots(100, 1.02)
        assert knots[0] == 0.0
        assert knots[-1] == pytest.approx(99.0)
        assert np.all(np.diff(knots) > 0)

    def test_base_above_one_favours_low_frequencies(self):
        gaps = np.diff(build_knots(20, 1.1))
        assert np.all(np.diff(gaps) < 0)

    def test_base_below_one_favours_high_frequencies(self):
        gaps = np.diff(build_knots(20, 0.9))
        assert np.all(np.diff(gaps) > 0)

    def test_base_one_is_linear(self):
        np.testing.assert_array_equal(build_knots(8, 1.0), np.arange(8))


class TestRemap:
    def test_output_shape(self):
        rng = np.random.default_rng(3)
        spectrum = np.fft.fft(rng.standard_normal(1024))
        remapper = SpectrumRemapper(VisualizerConfig(), 512)
        out = remapper.remap(spectrum, 44100.0, math.sqrt(1024))
        assert out is not None
        assert out.shape == (512,)
        assert out.dtype == np.float32
        assert np.all(out >= 0)

    def test_too_few_indices_returns_none(self):
        remapper = SpectrumRemapper(VisualizerConfig(), 16)
        assert remapper.remap(np.ones(4, dtype=complex), 44100.0, 2.0) is None

    def test_floor_clip_leaving_too_few_indices(self):
        config = VisualizerConfig(floor_frequency=14990.0, ceiling_frequency=15000.0)
        remapper = SpectrumRemapper(config, 16)
        assert remapper.remap(np.ones(1024, dtype=complex), 44100.0, 32.0) is None

    def test_zero_floor_maps_dc_to_first_bin(self):
        spectrum = np.zeros(64, dtype=complex)
        spectrum[0] = 8.0
        config = VisualizerConfig(ceiling_frequency=32.0)
        out = SpectrumRemapper(config, 16).remap(spectrum, 64.0, 8.0)
        assert out[0] == pytest.approx(math.log10(2.0), rel=1e-6)
        assert int(np.argmax(out)) == 0

    def test_floor_clip_excludes_dc(self):
        spectrum = np.zeros(64, dtype=complex)
        spectrum[0] = 8.0
        config = VisualizerConfig(floor_frequency=1.0, ceiling_frequency=32.0)
        out = SpectrumRemapper(config, 16).remap(spectrum, 64.0, 8.0)
        np.testing.assert_array_equal(out, np.zeros(16, dtype=np.float32))

    @pytest.mark.parametrize("floor_frequency, lo", [(1.0, 1), (1.5, 2), (3.0, 3)])
    def test_floor_clip_boundary_index(self, floor_frequency, lo):
        # size = rate = 64: el índice i corresponde a i Hz
        spectrum = np.zeros(64, dtype=complex)
        spectrum[lo] = 8.0
        spectrum[lo - 1] = 800.0
        config = VisualizerConfig(floor_frequency=floor_frequency, ceiling_frequency=32.0)
        out = SpectrumRemapper(config, 16).remap(spectrum, 64.0, 8.0)

        assert out[0] == pytest.approx(math.log10(1.0 + 8.0 / 8.0), rel=1e-6)
        # El índice anterior al suelo no aparece en ninguna banda
        assert out.max() <= math.log10(2.0) + 1e-6

    def test_log_magnitude_and_output_scale(self):
        spectrum = np.full(64, 3.0 + 4.0j)
        base = SpectrumRemapper(VisualizerConfig(ceiling_frequency=32.0), 8)
        scaled = SpectrumRemapper(VisualizerConfig(ceiling_frequency=32.0, output_scale=2.0), 8)

        out = base.remap(spectrum, 64.0, 5.0)
        np.testing.assert_allclose(out, np.full(8, math.log10(2.0)), rtol=1e-6)
        np.testing.assert_allclose(scaled.remap(spectrum, 64.0, 5.0), out * 2, rtol=1e-6)

    def test_knots_cached_between_calls(self):
        remapper = SpectrumRemapper(VisualizerConfig(), 32)
        spectrum = np.ones(1024, dtype=complex)
        remapper.remap(spectrum, 44100.0, 32.0)
        knots = remapper._knots
        remapper.remap(spectrum, 44100.0, 32.0)
        assert remapper._knots is knots
