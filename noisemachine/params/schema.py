"""
Request parameter schema and defaults.
Single source for the bounds enforced by the CLI and the HTTP service.
"""
from typing import Dict, Any, Literal

# Type definitions
ParamType = Literal["int", "enum"]

# Schema entry structure: type, default, min, max, description
ParamSchemaEntry = Dict[str, Any]

MAX_DURATION_S = 30
MIN_SAMPLE_RATE = 1
DEFAULT_SAMPLE_RATE = 44100

# Extension -> soundfile container. Output is always mono IEEE float.
SUPPORTED_EXTENSIONS: Dict[str, str] = {
    ".wav": "WAV",
    ".aif": "AIFF",
    ".aiff": "AIFF",
    ".aifc": "AIFF",
    ".afc": "AIFF",
}
OUTPUT_SUBTYPE = "FLOAT"
OUTPUT_CHANNELS = 1


def _make_param(
    param_type: ParamType,
    default: Any,
    min_val: Any,
    max_val: Any,
    description: str,
) -> ParamSchemaEntry:
    """Helper to create a schema entry."""
    return {
        "type": param_type,
        "default": default,
        "min": min_val,
        "max": max_val,
        "description": description,
    }


PARAM_SCHEMA: Dict[str, ParamSchemaEntry] = {
    "noise_type": _make_param(
        "enum", "white", 0, 2, "Noise color: 0/white, 1/pink, 2/red (brown)"
    ),
    "duration_s": _make_param(
        "int", 1, 0, MAX_DURATION_S, "Clip length in whole seconds"
    ),
    "sample_rate": _make_param(
        "int", DEFAULT_SAMPLE_RATE, MIN_SAMPLE_RATE, None, "Output sample rate (Hz)"
    ),
}

DEFAULT_REQUEST: Dict[str, Any] = {
    name: entry["default"] for name, entry in PARAM_SCHEMA.items()
}


USAGE = (
    "usage: noisemachine outfile type dur srate\n"
    "where type =:\n"
    "       0 = white\n"
    "       1 = pink\n"
    "       2 = brown\n"
    f"dur   = duration of outfile in seconds (max {MAX_DURATION_S})\n"
    "srate = required sample rate of outfile\n"
)
