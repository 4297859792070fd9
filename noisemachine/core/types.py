from dataclasses import dataclass, asdict
from enum import IntEnum
import numpy as np
from typing import Dict, Any, Optional


class NoiseType(IntEnum):
    """Noise color. The integer value is the 1/f^alpha exponent and the CLI code."""
    WHITE = 0
    PINK = 1
    RED = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


# Accepted spellings on the command line / HTTP path
NOISE_TYPE_NAMES = {
    "white": NoiseType.WHITE,
    "pink": NoiseType.PINK,
    "red": NoiseType.RED,
    "brown": NoiseType.RED,
}


@dataclass(frozen=True)
class GenerationRequest:
    noise_type: NoiseType
    duration_s: int
    sample_rate: int

    @property
    def total_samples(self) -> int:
        return self.sample_rate * self.duration_s

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["noise_type"] = self.noise_type.name.lower()
        out["total_samples"] = self.total_samples
        return out


@dataclass
class AudioBuffer:
    samples: np.ndarray  # float32 array
    sample_rate: int
    noise_type: NoiseType
    seed: Optional[int] = None
    peak_dbfs: float = -np.inf

    def __len__(self) -> int:
        return len(self.samples)
