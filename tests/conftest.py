"""Shared fixtures: synthetic updaters and test chimes."""

import os
import sys

import numpy as np
import pytest

# Run from a checkout without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from FCPE.SVM.synthetic import build_text_firmware, build_raw_firmware


@pytest.fixture
def text_firmware():
    return build_text_firmware()


@pytest.fixture
def raw_firmware():
    return build_raw_firmware()


@pytest.fixture
def tone():
    """Just under two packets of an 880 Hz sine, big-endian 16-bit."""
    t = np.arange(110)
    return (np.sin(2 * np.pi * 880 * t / 44_100) * 12_000).astype(">i2").tobytes()
