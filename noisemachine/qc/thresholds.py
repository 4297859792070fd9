"""
Default QC thresholds per noise color.
"""
QC_THRESHOLDS = {
    "white": {
        "peak_dbfs_max": 0.0,
        "spectral_slope": 0.0,  # log10 power per log10 Hz
        "spectral_slope_tol": 0.35,
        "dc_offset_max": 0.05,
        "lag1_autocorr_max": 0.05,  # i.i.d. samples
    },
    "pink": {
        "peak_dbfs_max": 0.0,
        "spectral_slope": -1.0,
        "spectral_slope_tol": 0.4,
        "dc_offset_max": 0.05,
    },
    "red": {
        "peak_dbfs_max": 0.0,
        "spectral_slope": -2.0,
        "spectral_slope_tol": 0.5,
    },
}
