"""
Quality Control analysis for rendered noise clips.
Checks level safety and that the spectrum follows the expected 1/f^alpha slope.
"""
import torch
import numpy as np
from typing import Dict, Optional, Union

from noisemachine.core.types import NoiseType
from noisemachine.qc.thresholds import QC_THRESHOLDS

SEGMENT_SIZE = 4096
MIN_BIN = 4  # skip DC and window leakage around it


def _db(x: float) -> float:
    """Convert linear to dB."""
    if x <= 0:
        return -np.inf
    return 20.0 * np.log10(abs(x))


def _welch_psd(audio: torch.Tensor, sample_rate: int, segment: int = SEGMENT_SIZE):
    """Averaged Hann-windowed periodogram over 50%-overlapping segments."""
    hop = segment // 2
    window = torch.hann_window(segment, dtype=torch.float64)
    frames = audio.unfold(0, segment, hop)
    frames = frames - frames.mean(dim=1, keepdim=True)
    spectrum = torch.fft.rfft(frames * window, dim=1)
    power = torch.mean(torch.abs(spectrum) ** 2, dim=0)
    freqs = torch.fft.rfftfreq(segment, 1.0 / sample_rate, dtype=torch.float64)
    return freqs, power


def _spectral_slope(audio: torch.Tensor, sample_rate: int) -> Optional[float]:
    """
    Least-squares slope of log10(power) against log10(frequency), weighted 1/f so
    each octave counts the same. Fit band: bin MIN_BIN up to a quarter of sample rate.
    """
    if audio.numel() < SEGMENT_SIZE:
        return None
    freqs, power = _welch_psd(audio, sample_rate)
    mask = (torch.arange(len(freqs)) >= MIN_BIN) & (freqs <= sample_rate / 4.0) & (power > 0)
    if int(mask.sum()) < 8:
        return None
    f = freqs[mask].numpy()
    p = power[mask].numpy()
    # polyfit squares the weights
    weights = 1.0 / np.sqrt(f)
    slope, _ = np.polyfit(np.log10(f), np.log10(p), 1, w=weights)
    return float(slope)


def _lag1_autocorr(audio: torch.Tensor) -> float:
    if audio.numel() < 2:
        return 0.0
    centred = audio - audio.mean()
    denom = float(torch.sum(centred ** 2))
    if denom <= 0:
        return 0.0
    return float(torch.sum(centred[1:] * centred[:-1]) / denom)


def analyze(audio: Union[torch.Tensor, np.ndarray], sample_rate: int, noise_type: NoiseType) -> Dict:
    """
    Analyze a rendered noise clip for QC issues.

    Args:
        audio: Audio samples (1D tensor or array)
        sample_rate: Sample rate in Hz
        noise_type: Expected noise color

    Returns:
        Dict with metrics and pass/fail flags
    """
    if not isinstance(audio, torch.Tensor):
        audio = torch.from_numpy(np.asarray(audio))
    audio = audio.reshape(-1).to(torch.float64)
    color = NoiseType(noise_type).name.lower()

    if audio.numel() == 0:
        peak = rms = dc = 0.0
    else:
        peak = float(torch.max(torch.abs(audio)))
        rms = float(torch.sqrt(torch.mean(audio ** 2)))
        dc = float(torch.mean(audio))

    metrics = {
        "num_samples": int(audio.numel()),
        "peak_linear": peak,
        "peak_dbfs": _db(peak),
        "rms_linear": rms,
        "rms_dbfs": _db(rms),
        "crest_factor": peak / (rms + 1e-12),
        "dc_offset": dc,
        "lag1_autocorr": _lag1_autocorr(audio),
        "spectral_slope": _spectral_slope(audio, sample_rate),
    }

    thresholds = QC_THRESHOLDS.get(color, {})
    failures = []
    warnings = []

    if audio.numel() == 0:
        warnings.append("Empty clip: nothing to analyze")
    elif peak == 0.0:
        warnings.append("Silent clip: peak is 0")

    # Peak check
    peak_max = thresholds.get("peak_dbfs_max", 0.0)
    if metrics["peak_dbfs"] > peak_max + 1e-6:
        failures.append(f"Peak too high (clipping): {metrics['peak_dbfs']:.2f} dBFS > {peak_max:.2f} dBFS")

    # Spectral slope check
    slope = metrics["spectral_slope"]
    if slope is not None and "spectral_slope" in thresholds:
        expected = thresholds["spectral_slope"]
        tol = thresholds.get("spectral_slope_tol", 0.5)
        if abs(slope - expected) > tol:
            failures.append(
                f"Spectral slope off for {color} noise: {slope:.2f} (expected {expected:.1f} +/- {tol:.2f})"
            )

    dc_max = thresholds.get("dc_offset_max")
    if dc_max is not None and abs(dc) > dc_max:
        warnings.append(f"DC offset high: {dc:.4f} > {dc_max:.4f}")

    ac_max = thresholds.get("lag1_autocorr_max")
    if ac_max is not None and audio.numel() >= SEGMENT_SIZE and abs(metrics["lag1_autocorr"]) > ac_max:
        warnings.append(f"Lag-1 autocorrelation high: {metrics['lag1_autocorr']:.4f} > {ac_max:.4f}")

    # Overall status
    status = "PASS"
    if failures:
        status = "FAIL"
    elif warnings:
        status = "WARN"

    return {
        "noise_type": color,
        "status": status,
        "metrics": metrics,
        "failures": failures,
        "warnings": warnings,
    }
