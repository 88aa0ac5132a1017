"""Core components for AvaSync.

This package contains the per-frame pipeline: landmark normalization, face
subset projection, blendshape calibration, record encoding and UDP transmission,
plus the FrameStreamer that runs them once per frame.
"""

# Model
from .model.frame_input import FrameInput, Landmark, ScoreEntry

# Landmarks
from .landmarks.normalizer import aspect_ratio, normalize_point, normalize_landmarks, normalize_pose
from .landmarks.face_subset import project_face_subset

# Calibration
from .calibration import CalibrationProfile, load_calibration_profile, get_default_profile, BlendshapeCalibrator

# LiveLink
from .livelink import RECORD_KEYS, encode_frame_record, serialize_record, DatagramTransmitter, create_socket_connection

# Runtime
from .runtime.streamer import FrameStreamer

# Adapters
from .tracking.holistic_source import frame_from_holistic, landmarks_from_mediapipe, scores_from_mediapipe

from .errors import AvaSyncError, SchemaMismatch, TransportError, CalibrationProfileError
from .config import get_stream_config, setup_logging
