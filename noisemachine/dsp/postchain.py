"""
Shared post chain: peak normalization -> narrowing to float32 output samples.
Deterministic; no randomness.
"""
import numpy as np
import torch

SAFETY_CLAMP = 1.0


class PostChain:
    """
    Shared post chain applied to every generator's raw buffer.
    """

    @staticmethod
    def peak(buffer: torch.Tensor) -> float:
        if buffer.numel() == 0:
            return 0.0
        return float(torch.max(torch.abs(buffer)))

    @staticmethod
    def peak_normalize(buffer: torch.Tensor) -> torch.Tensor:
        """Divide by max(|x|). A silent or empty buffer comes back as zeros."""
        peak = PostChain.peak(buffer)
        if peak == 0.0:
            return torch.zeros_like(buffer)
        return buffer / peak

    @staticmethod
    def to_output_samples(buffer: torch.Tensor) -> np.ndarray:
        """Narrow float64 -> float32. Clamp absorbs rounding at full scale; no dither."""
        data = buffer.detach().cpu().to(torch.float32).numpy()
        return np.clip(data, -SAFETY_CLAMP, SAFETY_CLAMP)

    @staticmethod
    def process(buffer: torch.Tensor) -> np.ndarray:
        return PostChain.to_output_samples(PostChain.peak_normalize(buffer))
