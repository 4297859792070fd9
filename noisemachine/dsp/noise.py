import math

import torch
import torch.fft

from noisemachine.dsp.random_source import RandomSource


def pink_scale(num_samples: int) -> torch.Tensor:
    """
    Per-bin amplitude scale for 1/f shaping of a length-N spectrum.
    Bins below ceil(N/2) get 1/sqrt(i+1); the mirrored upper half gets 1/sqrt(N-i).
    Both denominators are >= 1 for every bin.
    """
    n = num_samples
    points = (n + 1) // 2
    idx = torch.arange(n, dtype=torch.float64)
    denom = torch.where(idx < points, idx + 1.0, n - idx)
    return 1.0 / torch.sqrt(denom)


def shape_pink_spectrum(spectrum: torch.Tensor) -> torch.Tensor:
    """Scale real and imaginary parts of every bin by the pink amplitude curve."""
    scale = pink_scale(spectrum.shape[-1]).to(spectrum.device)
    return spectrum * scale


def standardize(samples: torch.Tensor) -> torch.Tensor:
    """
    (x - mean) / std with the sample (N-1) deviation.
    Buffers shorter than 2 or with zero spread are only mean-centred.
    """
    if samples.numel() == 0:
        return samples
    centred = samples - samples.mean()
    if samples.numel() < 2:
        return centred
    std = float(torch.std(samples))
    if std == 0.0 or not math.isfinite(std):
        return centred
    return centred / std


class Noise:
    @staticmethod
    def white(num_samples: int, rng: RandomSource) -> torch.Tensor:
        """Generates white noise (Gaussian distribution)."""
        return rng.gaussian(num_samples, 0.0, 1.0)

    @staticmethod
    def red(num_samples: int, sample_rate: int, rng: RandomSource) -> torch.Tensor:
        """
        Generates red (Brownian) noise as a random walk.
        Step deviation is sqrt(1/sample_rate), so finer sampling takes smaller steps.
        """
        if num_samples == 0:
            return torch.zeros(0, dtype=torch.float64)
        steps = rng.gaussian(num_samples, 0.0, math.sqrt(1.0 / sample_rate))
        return torch.cumsum(steps, dim=0)

    @staticmethod
    def pink(num_samples: int, rng: RandomSource) -> torch.Tensor:
        """
        Generates pink noise (1/f) via spectral shaping.
        Full complex FFT of length N (no padding), so any N works.
        """
        white = rng.gaussian(num_samples, 0.0, 1.0)
        if num_samples == 0:
            return white

        # FFT of the complex embedding (imag = 0)
        spectrum = torch.fft.fft(white.to(torch.complex128))

        # 1/f power -> 1/sqrt(f) amplitude
        spectrum = shape_pink_spectrum(spectrum)

        # Inverse FFT, keep the real part
        pink = torch.fft.ifft(spectrum).real.contiguous()

        # Back to zero mean / unit variance
        return standardize(pink)
