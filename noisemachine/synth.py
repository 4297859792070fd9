"""
Noise synthesizer: one generator per noise color, shared post chain.
Random source -> generator -> peak normalize -> float32 output buffer.
"""
import logging
from typing import Callable, Dict, Optional

import numpy as np
import torch

from noisemachine.core.types import AudioBuffer, GenerationRequest, NoiseType
from noisemachine.dsp.noise import Noise
from noisemachine.dsp.postchain import PostChain
from noisemachine.dsp.random_source import RandomSource

logger = logging.getLogger(__name__)

NoiseGenerator = Callable[[GenerationRequest, RandomSource], torch.Tensor]

GENERATORS: Dict[NoiseType, NoiseGenerator] = {
    NoiseType.WHITE: lambda req, rng: Noise.white(req.total_samples, rng),
    NoiseType.PINK: lambda req, rng: Noise.pink(req.total_samples, rng),
    NoiseType.RED: lambda req, rng: Noise.red(req.total_samples, req.sample_rate, rng),
}


def _peak_dbfs(samples: np.ndarray) -> float:
    if samples.size == 0:
        return -np.inf
    peak = float(np.max(np.abs(samples)))
    if peak <= 0:
        return -np.inf
    return 20.0 * np.log10(peak)


class NoiseSynthesizer:
    def __init__(self, generators: Optional[Dict[NoiseType, NoiseGenerator]] = None):
        self.generators = dict(GENERATORS if generators is None else generators)

    def generate_raw(self, request: GenerationRequest, rng: RandomSource) -> torch.Tensor:
        """Raw float64 buffer from the request's generator, before normalization."""
        try:
            generator = self.generators[request.noise_type]
        except KeyError:
            raise ValueError(f"No generator for noise type: {request.noise_type!r}") from None
        raw = generator(request, rng)
        if raw.shape[-1] != request.total_samples:
            raise RuntimeError(
                f"{request.noise_type.label} generator returned {raw.shape[-1]} samples, "
                f"expected {request.total_samples}"
            )
        return raw

    def render(self, request: GenerationRequest, seed: Optional[int] = None) -> AudioBuffer:
        """
        Synthesize one clip.

        Args:
            request: Validated generation request
            seed: Random seed (None = NOISEMACHINE_SEED or a fresh seed)

        Returns:
            AudioBuffer with float32 samples in [-1, 1] (all zeros when the raw peak is 0)
        """
        with RandomSource(seed) as rng:
            logger.info(
                "Generating %s noise: %d samples @ %d Hz (seed=%d)",
                request.noise_type.label, request.total_samples, request.sample_rate, rng.seed,
            )
            raw = self.generate_raw(request, rng)
            samples = PostChain.process(raw)
            used_seed = rng.seed

        return AudioBuffer(
            samples=samples,
            sample_rate=request.sample_rate,
            noise_type=request.noise_type,
            seed=used_seed,
            peak_dbfs=_peak_dbfs(samples),
        )
