"""Blendshape calibration: versioned profiles and the calibrator that applies them."""

from .profile import CalibrationProfile, load_calibration_profile, get_default_profile, DEFAULT_PROFILE_DIR
from .calibrator import BlendshapeCalibrator
