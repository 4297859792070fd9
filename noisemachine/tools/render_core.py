"""
Core rendering utilities with debug outputs and fingerprinting.
Used by the canonical render.py tool.
"""
import os
import json
import hashlib
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np

from noisemachine.core.io import AudioIO
from noisemachine.core.types import AudioBuffer, GenerationRequest
from noisemachine.qc.qc import analyze
from noisemachine.synth import NoiseSynthesizer


def _get_git_hash() -> str:
    """Get short git commit hash."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            cwd=os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")),
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except OSError:
        pass
    return "unknown"


def _compute_audio_fingerprint(samples: np.ndarray, sample_rate: int) -> Dict:
    """Compute fingerprint: SHA256, peak, RMS, band energies."""
    audio_1d = np.asarray(samples, dtype=np.float32).reshape(-1)

    # SHA256 hash of audio bytes
    sha256 = hashlib.sha256(audio_1d.tobytes()).hexdigest()

    n = len(audio_1d)
    peak = float(np.max(np.abs(audio_1d))) if n else 0.0
    rms = float(np.sqrt(np.mean(audio_1d.astype(np.float64) ** 2) + 1e-12)) if n else 0.0

    if n < 2:
        return {
            "sha256": sha256,
            "peak": peak,
            "rms": rms,
            "low_energy": 0.0,
            "mid_energy": 0.0,
            "high_energy": 0.0,
        }

    magnitude = np.abs(np.fft.rfft(audio_1d.astype(np.float64)))
    freqs = np.fft.rfftfreq(n, 1.0 / sample_rate)

    # Low: <200Hz, Mid: 200-5000Hz, High: >5000Hz
    low_mask = freqs < 200.0
    mid_mask = (freqs >= 200.0) & (freqs < 5000.0)
    high_mask = freqs >= 5000.0

    return {
        "sha256": sha256,
        "peak": peak,
        "rms": rms,
        "low_energy": float(np.sum(magnitude[low_mask] ** 2)),
        "mid_energy": float(np.sum(magnitude[mid_mask] ** 2)),
        "high_energy": float(np.sum(magnitude[high_mask] ** 2)),
    }


def render_noise(
    request: GenerationRequest,
    outfile: Path,
    seed: Optional[int] = None,
    debug: bool = False,
    qc: bool = False,
    script_name: str = "unknown",
) -> Tuple[AudioBuffer, Dict]:
    """
    Render a noise clip to a sound file with fingerprinting and optional QC / debug trace.

    Args:
        request: Validated generation request
        outfile: Output path; the extension selects the container
        seed: Random seed (None = NOISEMACHINE_SEED or random)
        debug: Save <stem>.resolved.json next to the output
        qc: Run QC analysis
        script_name: Name of calling script (for debug JSON)

    Returns:
        Tuple of (audio_buffer, debug_info_dict)
    """
    outfile = Path(outfile)

    # Step 1: Fail on an unknown extension before any allocation
    AudioIO.output_format(str(outfile))

    # Step 2: Render audio
    audio = NoiseSynthesizer().render(request, seed=seed)

    # Step 3: Write file
    frames = AudioIO.write_frames(audio.samples, request.sample_rate, str(outfile))

    # Step 4: Fingerprint
    fingerprint = _compute_audio_fingerprint(audio.samples, request.sample_rate)

    # Step 5: QC analysis (optional)
    qc_result = analyze(audio.samples, request.sample_rate, request.noise_type) if qc else None

    debug_info = {
        "noise_type": request.noise_type.label,
        "script_name": script_name,
        "timestamp": datetime.now().isoformat(),
        "git_hash": _get_git_hash(),
        "seed": audio.seed,
        "request": request.to_dict(),
        "frames_written": frames,
        "fingerprint": fingerprint,
        "qc_result": qc_result,
        "output_path": str(outfile),
    }

    # Step 6: Save debug JSON if enabled
    if debug:
        json_path = outfile.with_name(f"{outfile.stem}.resolved.json")
        with open(json_path, "w") as f:
            json.dump(debug_info, f, indent=2, default=str)
        debug_info["json_path"] = str(json_path)

    return audio, debug_info
