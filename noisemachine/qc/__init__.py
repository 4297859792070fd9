"""
Quality Control module for evaluating rendered noise clips.
"""
from noisemachine.qc.qc import analyze
from noisemachine.qc.thresholds import QC_THRESHOLDS

__all__ = ["analyze", "QC_THRESHOLDS"]
