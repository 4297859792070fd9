"""
QC analysis: spectral slope per color, level checks, short and silent clips.
"""
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import numpy as np
import pytest
import torch
from noisemachine.core.types import GenerationRequest, NoiseType
from noisemachine.qc import analyze
from noisemachine.synth import NoiseSynthesizer

SR = 44100
SEED = 2024


def _render(noise_type: NoiseType) -> np.ndarray:
    return NoiseSynthesizer().render(GenerationRequest(noise_type, 1, SR), seed=SEED).samples


@pytest.fixture(scope="module")
def results():
    return {t: analyze(_render(t), SR, t) for t in NoiseType}


@pytest.mark.parametrize("noise_type", list(NoiseType))
def test_rendered_clips_pass(results, noise_type):
    result = results[noise_type]
    assert result["status"] == "PASS", result["failures"] + result["warnings"]


def test_slopes_follow_colors(results):
    white = results[NoiseType.WHITE]["metrics"]["spectral_slope"]
    pink = results[NoiseType.PINK]["metrics"]["spectral_slope"]
    red = results[NoiseType.RED]["metrics"]["spectral_slope"]
    assert white > pink > red
    assert abs(white) < 0.2
    assert abs(pink + 1.0) < 0.3
    assert abs(red + 2.0) < 0.4


def test_white_is_uncorrelated(results):
    assert abs(results[NoiseType.WHITE]["metrics"]["lag1_autocorr"]) < 0.02


def test_mislabelled_clip_fails(results):
    red = _render(NoiseType.RED)
    result = analyze(red, SR, NoiseType.WHITE)
    assert result["status"] == "FAIL"
    assert any("Spectral slope" in f for f in result["failures"])


def test_clipping_fails():
    audio = torch.full((8192,), 0.5)
    audio[100] = 1.5
    result = analyze(audio, SR, NoiseType.WHITE)
    assert result["status"] == "FAIL"
    assert any("Peak too high" in f for f in result["failures"])


def test_short_clip_skips_slope():
    result = analyze(_render(NoiseType.PINK)[:1000], SR, NoiseType.PINK)
    assert result["metrics"]["spectral_slope"] is None


def test_empty_and_silent_clips_warn():
    empty = analyze(np.zeros(0, dtype=np.float32), SR, NoiseType.RED)
    assert empty["status"] == "WARN"
    silent = analyze(np.zeros(100, dtype=np.float32), SR, NoiseType.RED)
    assert silent["status"] == "WARN"
    assert silent["metrics"]["peak_dbfs"] == -np.inf
