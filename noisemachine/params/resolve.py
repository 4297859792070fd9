"""
Request resolution: merge DEFAULT_REQUEST with incoming values, then validate.
Validation runs before any buffer is allocated; each bad field raises its own error kind.
"""
from typing import Dict, Any, Optional

from noisemachine.core.errors import InvalidDuration, InvalidNoiseType, InvalidSampleRate
from noisemachine.core.types import GenerationRequest, NoiseType, NOISE_TYPE_NAMES
from noisemachine.params.schema import DEFAULT_REQUEST, PARAM_SCHEMA


def _parse_int(value: Any) -> Optional[int]:
    """int or integer string -> int; anything else -> None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_noise_type(value: Any) -> NoiseType:
    """Accepts a NoiseType, its integer code (int or string) or a color name."""
    if isinstance(value, NoiseType):
        return value
    if isinstance(value, str) and value.strip().lower() in NOISE_TYPE_NAMES:
        return NOISE_TYPE_NAMES[value.strip().lower()]
    code = _parse_int(value)
    if code is None or code not in NoiseType._value2member_map_:
        raise InvalidNoiseType(
            f"Invalid noise type {value!r}: enter an integer value between 0 and 2 "
            "(or white / pink / red)"
        )
    return NoiseType(code)


def parse_duration(value: Any) -> int:
    entry = PARAM_SCHEMA["duration_s"]
    duration = _parse_int(value)
    if duration is None or duration < entry["min"] or duration > entry["max"]:
        raise InvalidDuration(
            f"Invalid duration {value!r}: enter an integer value between "
            f"{entry['min']} and {entry['max']}"
        )
    return duration


def parse_sample_rate(value: Any) -> int:
    entry = PARAM_SCHEMA["sample_rate"]
    sample_rate = _parse_int(value)
    if sample_rate is None or sample_rate < entry["min"]:
        raise InvalidSampleRate(f"Invalid sample rate {value!r}: sampling rate must be positive")
    return sample_rate


def validate_request(noise_type: Any, duration: Any, sample_rate: Any) -> GenerationRequest:
    """
    Validate raw values in order: noise type, duration, sample rate.
    Raises the first matching validation error.
    """
    return GenerationRequest(
        noise_type=parse_noise_type(noise_type),
        duration_s=parse_duration(duration),
        sample_rate=parse_sample_rate(sample_rate),
    )


def resolve_request(params: Optional[Dict[str, Any]]) -> GenerationRequest:
    """
    Resolve a request dict by:
    1. Starting from DEFAULT_REQUEST
    2. Overriding with incoming known keys (unknown keys are ignored)
    3. Validating the merged values

    Args:
        params: Incoming dict (may be partial or empty)

    Returns:
        Validated, immutable GenerationRequest.
    """
    merged = dict(DEFAULT_REQUEST)
    for key, value in (params or {}).items():
        if key in merged and value is not None:
            merged[key] = value
    return validate_request(merged["noise_type"], merged["duration_s"], merged["sample_rate"])
