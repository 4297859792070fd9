"""
Seeded Gaussian random source.
Seed resolution: explicit seed -> NOISEMACHINE_SEED environment variable -> fresh system seed.
"""
import os
import random
import logging
from typing import Optional

import torch

from noisemachine.core.errors import SubsystemInitError

logger = logging.getLogger(__name__)

SEED_ENV_VAR = "NOISEMACHINE_SEED"
MAX_SEED = 2**63 - 1


def resolve_seed(seed: Optional[int] = None) -> int:
    """Pick the seed for a run. Raises SubsystemInitError on an unusable value."""
    if seed is None:
        env_seed = os.environ.get(SEED_ENV_VAR)
        if env_seed is not None and env_seed.strip():
            seed = env_seed.strip()
        else:
            return random.randint(0, 2**31 - 1)
    try:
        value = int(seed)
    except (TypeError, ValueError) as exc:
        raise SubsystemInitError(f"Invalid random seed: {seed!r}") from exc
    if value < 0 or value > MAX_SEED:
        raise SubsystemInitError(f"Random seed out of range: {value}")
    return value


class RandomSource:
    """
    Normal-deviate generator wrapping a private torch.Generator.
    Use as a context manager; a closed source refuses further draws.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = resolve_seed(seed)
        try:
            self._generator = torch.Generator(device="cpu")
            self._generator.manual_seed(self.seed)
        except RuntimeError as exc:
            raise SubsystemInitError(f"Unable to start random source: {exc}") from exc
        logger.debug("Random source seeded with %d", self.seed)

    def __enter__(self) -> "RandomSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._generator is None

    def close(self) -> None:
        self._generator = None

    def _require_open(self) -> torch.Generator:
        if self._generator is None:
            raise SubsystemInitError("Random source is closed")
        return self._generator

    def gaussian(self, n: int, mean: float = 0.0, stddev: float = 1.0) -> torch.Tensor:
        """n i.i.d. float64 deviates from N(mean, stddev^2)."""
        generator = self._require_open()
        draws = torch.randn(n, generator=generator, dtype=torch.float64)
        if stddev != 1.0:
            draws = draws * stddev
        if mean != 0.0:
            draws = draws + mean
        return draws

    def next_gaussian(self, mean: float = 0.0, stddev: float = 1.0) -> float:
        """Single deviate from N(mean, stddev^2)."""
        return float(self.gaussian(1, mean, stddev)[0])
