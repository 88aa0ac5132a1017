# This software is licensed under a **dual-license model**
# For individuals and businesses earning **under $1M per year**, this software is licensed under the **MIT License**
# Businesses or organizations with **annual revenue of $1,000,000 or more** must obtain permission to use this software commercially.

import logging
from typing import Optional

from ..calibration.calibrator import BlendshapeCalibrator
from ..calibration.profile import CalibrationProfile, get_default_profile
from ..config import DEFAULT_FALLBACK_RESOLUTION
from ..errors import SchemaMismatch, TransportError
from ..landmarks.face_subset import project_face_subset
from ..landmarks.normalizer import aspect_ratio, normalize_landmarks, normalize_pose
from ..livelink.encoder import encode_frame_record, serialize_record
from ..livelink.transmitter import DatagramTransmitter
from ..model.frame_input import FrameInput

logger = logging.getLogger(__name__)


class FrameStreamer:
    """
    Turns each FrameInput into one wire record and sends it to the rig.

    Frames are independent: a bad field nulls that field for one frame, a failed
    send drops one frame, and nothing carries over to the next call.
    """

    def __init__(self, profile: Optional[CalibrationProfile] = None,
                 transmitter: Optional[DatagramTransmitter] = None,
                 fallback_resolution=None):
        """
        Args:
            profile: calibration profile; defaults to the process-wide profile.
            transmitter: datagram transmitter; defaults to one on the LiveLink port.
            fallback_resolution: (width, height) used when a frame carries none.
        """
        self.profile = profile if profile is not None else get_default_profile()
        self.calibrator = BlendshapeCalibrator(self.profile)
        self.transmitter = transmitter if transmitter is not None else DatagramTransmitter()
        self.fallback_resolution = tuple(fallback_resolution or DEFAULT_FALLBACK_RESOLUTION)

        self.frames_processed = 0
        self.frames_sent = 0
        self.frames_dropped = 0
        self.field_failures = 0

    @classmethod
    def from_config(cls, config: dict, profile: Optional[CalibrationProfile] = None):
        """Build a streamer from get_stream_config()."""
        transmitter = DatagramTransmitter(
            host=config["UDP_HOST"],
            port=config["UDP_PORT"],
            soft_limit=config["DATAGRAM_SOFT_LIMIT"],
            hard_limit=config["DATAGRAM_HARD_LIMIT"],
        )
        return cls(profile=profile, transmitter=transmitter,
                   fallback_resolution=config["FALLBACK_RESOLUTION"])

    def _guarded(self, key, compute, *args):
        try:
            return compute(*args)
        except SchemaMismatch as e:
            self.field_failures += 1
            logger.warning(f"Dropping '{key}' for this frame: {e}")
            return None

    def build_record(self, frame: FrameInput) -> dict:
        ratio = aspect_ratio(frame.resolution, self.fallback_resolution)

        res = None
        if frame.resolution is not None:
            width, height = frame.resolution
            res = {"x": int(width), "y": int(height)}

        body = lhand = rhand = face = blendshape = None
        if frame.pose is not None:
            body = self._guarded("Body", normalize_pose, frame.pose, ratio)
        if frame.left_hand is not None:
            lhand = self._guarded("LHand", normalize_landmarks, frame.left_hand, ratio)
        if frame.right_hand is not None:
            rhand = self._guarded("RHand", normalize_landmarks, frame.right_hand, ratio)
        if frame.face is not None:
            face = self._guarded("Face", project_face_subset, frame.face, ratio, self.profile.face_indices)
        if frame.scores is not None:
            blendshape = self._guarded("BlendShape", self.calibrator.calibrate, frame.scores)

        return encode_frame_record(res=res, body=body, lhand=lhand, rhand=rhand,
                                   face=face, blendshape=blendshape)

    def process_frame(self, frame: FrameInput) -> Optional[bytes]:
        """
        Encode and send one frame.

        Returns:
            bytes: the datagram payload that was sent, or None if the frame was dropped.
        """
        self.frames_processed += 1
        payload = serialize_record(self.build_record(frame))
        try:
            self.transmitter.send(payload)
        except TransportError as e:
            self.frames_dropped += 1
            logger.error(f"Dropping frame {self.frames_processed}: {e}")
            return None
        self.frames_sent += 1
        return payload

    def stats(self) -> dict:
        return {
            "frames_processed": self.frames_processed,
            "frames_sent": self.frames_sent,
            "frames_dropped": self.frames_dropped,
            "field_failures": self.field_failures,
        }

    def open(self):
        self.transmitter.open()
        return self

    def close(self):
        """Release the transport. Safe to call more than once."""
        self.transmitter.close()

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
