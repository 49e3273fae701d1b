"""Shared pytest configuration and fixtures for the visualiser test suite."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Ensure the project root is in the path for imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.config import VisualizerConfig


@pytest.fixture
def config():
    return VisualizerConfig()


@pytest.fixture
def sine():
    """Generator of float32 sine blocks: sine(frequency, rate, count)."""
    def _sine(frequency, rate, count, amplitude=1.0):
        t = np.arange(count) / rate
        return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)
    return _sine
