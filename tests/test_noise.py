"""
Unit tests for noisemachine/dsp/noise: white, red and pink generators plus pink spectral shaping.
Run from project root: python -m pytest tests/test_noise.py -v
"""
import sys
import os
import math

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
import torch
import torch.fft
from noisemachine.dsp.noise import Noise, pink_scale, shape_pink_spectrum, standardize
from noisemachine.dsp.random_source import RandomSource

SEED = 1234


def _lag1(x: torch.Tensor) -> float:
    c = x - x.mean()
    return float(torch.sum(c[1:] * c[:-1]) / torch.sum(c * c))


# -----------------------------------------------------------------------------
# White
# -----------------------------------------------------------------------------

class TestWhite:
    def test_length_and_dtype(self):
        with RandomSource(SEED) as rng:
            x = Noise.white(8000, rng)
        assert x.shape == (8000,)
        assert x.dtype == torch.float64

    def test_statistics(self):
        with RandomSource(SEED) as rng:
            x = Noise.white(100000, rng)
        assert abs(float(x.mean())) < 0.02
        assert abs(float(x.std()) - 1.0) < 0.02

    def test_lag1_autocorrelation_near_zero(self):
        with RandomSource(SEED) as rng:
            x = Noise.white(100000, rng)
        assert abs(_lag1(x)) < 0.02

    def test_empty(self):
        with RandomSource(SEED) as rng:
            assert Noise.white(0, rng).numel() == 0


# -----------------------------------------------------------------------------
# Red
# -----------------------------------------------------------------------------

class TestRed:
    def test_increments_are_white_with_sample_rate_scaling(self):
        sample_rate = 8000
        with RandomSource(SEED) as rng:
            x = Noise.red(100000, sample_rate, rng)
        steps = torch.diff(x)
        expected_std = math.sqrt(1.0 / sample_rate)
        assert abs(float(steps.mean())) < 0.02 * expected_std
        assert abs(float(steps.std()) / expected_std - 1.0) < 0.02
        assert abs(_lag1(steps)) < 0.02

    def test_first_sample_is_first_step(self):
        with RandomSource(SEED) as rng:
            walk = Noise.red(10, 100, rng)
        with RandomSource(SEED) as rng:
            steps = rng.gaussian(10, 0.0, math.sqrt(1.0 / 100))
        assert torch.allclose(walk[0], steps[0])
        assert torch.allclose(walk, torch.cumsum(steps, dim=0))

    def test_variance_grows_with_index(self):
        walks = []
        with RandomSource(SEED) as rng:
            for _ in range(400):
                walks.append(Noise.red(1000, 1000, rng))
        stacked = torch.stack(walks)
        var = stacked.var(dim=0)
        assert float(var[99]) < float(var[499]) < float(var[999])
        # Brownian motion: var[i] ~ (i + 1) / sample_rate
        assert abs(float(var[999]) - 1.0) < 0.25

    def test_empty(self):
        with RandomSource(SEED) as rng:
            x = Noise.red(0, 44100, rng)
        assert x.numel() == 0


# -----------------------------------------------------------------------------
# Pink
# -----------------------------------------------------------------------------

class TestPinkScale:
    def test_odd_length(self):
        # ceil(5/2) = 3 -> 1, 1/sqrt2, 1/sqrt3 | 1/sqrt2, 1
        expected = torch.tensor([1.0, 2 ** -0.5, 3 ** -0.5, 2 ** -0.5, 1.0], dtype=torch.float64)
        assert torch.allclose(pink_scale(5), expected)

    def test_even_length(self):
        # ceil(4/2) = 2 -> 1, 1/sqrt2 | 1/sqrt2, 1
        expected = torch.tensor([1.0, 2 ** -0.5, 2 ** -0.5, 1.0], dtype=torch.float64)
        assert torch.allclose(pink_scale(4), expected)

    def test_falls_to_midpoint_then_rises(self):
        scale = pink_scale(1001)
        lower, upper = scale[:501], scale[501:]
        assert (torch.diff(lower) < 0).all()
        assert (torch.diff(upper) > 0).all()
        assert float(upper[-1]) == 1.0

    @pytest.mark.parametrize("n", [0, 1, 2, 3])
    def test_degenerate_lengths_are_finite(self, n):
        scale = pink_scale(n)
        assert scale.shape == (n,)
        assert torch.isfinite(scale).all()
        assert (scale <= 1.0).all()

    def test_shaping_scales_real_and_imag(self):
        spectrum = torch.full((5,), complex(2.0, -4.0), dtype=torch.complex128)
        shaped = shape_pink_spectrum(spectrum)
        scale = pink_scale(5)
        assert torch.allclose(shaped.real, 2.0 * scale)
        assert torch.allclose(shaped.imag, -4.0 * scale)


class TestPink:
    def test_fft_round_trip_reproduces_sequence(self):
        with RandomSource(SEED) as rng:
            x = Noise.white(1001, rng)
        back = torch.fft.ifft(torch.fft.fft(x.to(torch.complex128)))
        assert torch.allclose(back.real, x, atol=1e-10)
        assert float(torch.max(torch.abs(back.imag))) < 1e-10

    @pytest.mark.parametrize("n", [1000, 1001, 44100])
    def test_standardized_output(self, n):
        with RandomSource(SEED) as rng:
            x = Noise.pink(n, rng)
        assert x.shape == (n,)
        assert x.dtype == torch.float64
        assert abs(float(x.mean())) < 1e-9
        assert abs(float(x.std()) - 1.0) < 1e-9

    def test_low_frequencies_dominate(self):
        with RandomSource(SEED) as rng:
            x = Noise.pink(48000, rng)
        power = torch.abs(torch.fft.rfft(x)) ** 2
        low = float(power[1:200].mean())
        high = float(power[-2000:].mean())
        assert low > 20 * high

    def test_neighbouring_samples_correlated(self):
        with RandomSource(SEED) as rng:
            x = Noise.pink(48000, rng)
        assert _lag1(x) > 0.3

    @pytest.mark.parametrize("n", [0, 1, 2, 3])
    def test_degenerate_lengths_do_not_crash(self, n):
        with RandomSource(SEED) as rng:
            x = Noise.pink(n, rng)
        assert x.shape == (n,)
        assert torch.isfinite(x).all()

    def test_determinism(self):
        with RandomSource(SEED) as rng:
            a = Noise.pink(4096, rng)
        with RandomSource(SEED) as rng:
            b = Noise.pink(4096, rng)
        assert torch.equal(a, b)


def test_standardize_constant_buffer_is_centred():
    out = standardize(torch.full((16,), 3.0, dtype=torch.float64))
    assert torch.equal(out, torch.zeros(16, dtype=torch.float64))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
