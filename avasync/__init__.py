"""AvaSync: per-frame tracking normalization and LiveLink-style UDP streaming.

Exports the core objects so callers can write `from avasync import FrameStreamer`.
"""

from .core import (
    FrameInput, Landmark, ScoreEntry,
    CalibrationProfile, load_calibration_profile, get_default_profile,
    BlendshapeCalibrator, DatagramTransmitter, FrameStreamer,
    SchemaMismatch, TransportError, CalibrationProfileError,
)

__version__ = "0.1.0"
