import numpy as np
import pytest

from audio.pcm import as_float_samples


def test_bytes_to_float32():
    raw = np.array([0.5, -0.25, 1.0], dtype=np.float32).tobytes()
    out = as_float_samples(raw)
    assert out.dtype == np.float32
    np.testing.assert_array_equal(out, [0.5, -0.25, 1.0])


def test_bytes_length_must_be_whole_floats():
    with pytest.raises(ValueError):
        as_float_samples(b"\x00" * 6)


def test_interleaved_channels_are_averaged():
    raw = np.array([1.0, 0.0, 0.5, 0.5], dtype=np.float32).tobytes()
    np.testing.assert_array_equal(as_float_samples(raw, channels=2), [0.5, 0.5])


def test_channel_count_must_divide_samples():
    raw = np.zeros(3, dtype=np.float32).tobytes()
    with pytest.raises(ValueError):
        as_float_samples(raw, channels=2)


def test_column_array_is_flattened():
    block = np.arange(4, dtype=np.float32).reshape(4, 1)
    np.testing.assert_array_equal(as_float_samples(block), [0, 1, 2, 3])


def test_stereo_array_is_averaged():
    block = np.array([[1.0, 3.0], [2.0, 2.0]], dtype=np.float64)
    out = as_float_samples(block)
    assert out.dtype == np.float32
    np.testing.assert_array_equal(out, [2.0, 2.0])


def test_rejects_invalid_shape():
    with pytest.raises(ValueError):
        as_float_samples(np.zeros((2, 2, 2)))
