from __future__ import annotations

import pytest

from avasync.core.calibration.profile import CalibrationProfile, load_calibration_profile
from avasync.core.model.frame_input import FrameInput, Landmark, ScoreEntry


class RecordingSocket:
    """UDP stand-in that keeps every datagram it is given."""

    def __init__(self):
        self.datagrams = []
        self.addresses = []
        self.closed = False

    def sendto(self, payload, address):
        self.datagrams.append(bytes(payload))
        self.addresses.append(address)
        return len(payload)

    def close(self):
        self.closed = True


@pytest.fixture
def recording_socket() -> RecordingSocket:
    return RecordingSocket()


@pytest.fixture(scope="session")
def default_profile() -> CalibrationProfile:
    return load_calibration_profile()


@pytest.fixture
def small_profile() -> CalibrationProfile:
    """Four-channel profile with hand-checkable numbers."""
    return CalibrationProfile(
        name="test",
        version="0.0.1",
        classifier="unit-test",
        neutral_label="_neutral",
        channels=("a", "b", "c", "d"),
        scale=(2.0, 1.0, 1.0, 0.5),
        offset=(0.0, -0.1, 0.0, 0.2),
        swap_pairs=((0, 1),),
        couplings=((3, 2, 0.5), (2, 3, -1.0)),
        face_indices=(13, 0),
    )


def centred_landmarks(count, visibility=None, presence=None):
    return [Landmark(0.5, 0.5, 0.0, visibility, presence) for _ in range(count)]


@pytest.fixture
def full_frame(default_profile) -> FrameInput:
    """A frame with every field present and shaped for the bundled profile."""
    scores = [ScoreEntry("_neutral", 0.9)] + [
        ScoreEntry(name, 0.25) for name in default_profile.channels
    ]
    return FrameInput(
        pose=centred_landmarks(33, visibility=0.9, presence=0.8),
        left_hand=centred_landmarks(21),
        right_hand=centred_landmarks(21),
        face=centred_landmarks(478),
        scores=scores,
        resolution=(1920, 1080),
    )
