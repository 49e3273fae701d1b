import math

import numpy as np
import pytest

import audio.fft as fft_module
from audio.fft import SpectralEngine


def test_insufficient_data_returns_none():
    engine = SpectralEngine()
    assert engine.transform(np.zeros(0, dtype=np.float32)) is None
    assert engine.transform(np.ones(1, dtype=np.float32)) is None
    assert engine.cached_powers == []


def test_two_samples_is_enough():
    spectrum, scale = SpectralEngine().transform(np.array([1.0, -1.0], dtype=np.float32))
    assert len(spectrum) == 2
    assert scale == pytest.approx(math.sqrt(2))


def test_power_of_two_truncation():
    rng = np.random.default_rng(1)
    values = rng.standard_normal(1000).astype(np.float32)
    engine = SpectralEngine()

    spectrum, scale = engine.transform(values)
    assert len(spectrum) == 512
    assert scale == pytest.approx(math.sqrt(512))
    assert engine.cached_powers == [9]

    # Las 488 muestras finales no influyen en el espectro
    altered = values.copy()
    altered[512:] = 100.0
    other, _ = engine.transform(altered)
    np.testing.assert_allclose(other, spectrum)


def test_matches_windowed_numpy_fft():
    rng = np.random.default_rng(7)
    values = rng.standard_normal(16)
    spectrum, _ = SpectralEngine().transform(values)
    expected = np.fft.fft(values * np.hamming(16))
    np.testing.assert_allclose(spectrum, expected, atol=1e-9)


def test_window_is_applied():
    spectrum, _ = SpectralEngine().transform(np.ones(8, dtype=np.float32))
    assert spectrum[0].real == pytest.approx(np.hamming(8).sum())
    assert spectrum[0].imag == pytest.approx(0.0)


def test_cache_entry_is_reused():
    engine = SpectralEngine()
    first = engine.entry(10)
    assert engine.entry(10) is first
    assert first.size == 1024
    assert len(first.window) == 1024


def test_plan_built_once_per_size(monkeypatch):
    built = []
    base_plan = fft_module.FFTPlan

    class CountingPlan(base_plan):
        def __init__(self, size):
            built.append(size)
            super().__init__(size)

    monkeypatch.setattr(fft_module, "FFTPlan", CountingPlan)

    engine = SpectralEngine()
    for length in (1024, 1100, 2047, 1024, 600):
        engine.transform(np.zeros(length, dtype=np.float32))

    assert built == [1024, 512]
    assert engine.cached_powers == [9, 10]
