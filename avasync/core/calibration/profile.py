# This software is licensed under a **dual-license model**
# For individuals and businesses earning **under $1M per year**, this software is licensed under the **MIT License**
# Businesses or organizations with **annual revenue of $1,000,000 or more** must obtain permission to use this software commercially.

"""
Calibration profiles for the upstream blendshape classifier.

A profile is a directory with a `profile.json` (identity, swap pairs, coupling
triples, face landmark subset) and a per-channel CSV table (index, name, scale,
offset). Profiles are tied to a specific classifier release; shipping a new
profile directory is how a classifier upgrade is absorbed.
"""

import json
import logging
import math
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

import pandas as pd

from ..errors import CalibrationProfileError

logger = logging.getLogger(__name__)

# Path to the bundled profiles (relative to this module)
_PROFILES_DIR = Path(__file__).parent / "profiles"
DEFAULT_PROFILE_DIR = _PROFILES_DIR / "mediapipe_blendshapes_v1"

CHANNEL_COLUMNS = ["index", "name", "scale", "offset"]


@dataclass(frozen=True)
class CalibrationProfile:
    name: str
    version: str
    classifier: str
    neutral_label: str
    channels: Tuple[str, ...]
    scale: Tuple[float, ...]
    offset: Tuple[float, ...]
    swap_pairs: Tuple[Tuple[int, int], ...]
    couplings: Tuple[Tuple[int, int, float], ...]
    face_indices: Tuple[int, ...]

    def __post_init__(self):
        validate_profile(self)

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    @property
    def expected_score_count(self) -> int:
        """Raw classifier output length, including the neutral channel."""
        return len(self.channels) + 1

    def describe(self) -> str:
        return (
            f"{self.name} v{self.version} ({self.classifier}): "
            f"{self.channel_count} channels, {len(self.swap_pairs)} swap pairs, "
            f"{len(self.couplings)} couplings, {len(self.face_indices)} face landmarks"
        )


def validate_profile(profile: CalibrationProfile) -> None:
    """Raises CalibrationProfileError if the profile tables disagree with each other."""
    n = len(profile.channels)
    if n == 0:
        raise CalibrationProfileError(f"Profile '{profile.name}' defines no channels")
    if len(profile.scale) != n or len(profile.offset) != n:
        raise CalibrationProfileError(
            f"Profile '{profile.name}': {n} channels but {len(profile.scale)} scales "
            f"and {len(profile.offset)} offsets"
        )
    for value in profile.scale + profile.offset:
        if not math.isfinite(value):
            raise CalibrationProfileError(f"Profile '{profile.name}': non-finite scale/offset {value}")

    seen = set()
    for a, b in profile.swap_pairs:
        if a == b:
            raise CalibrationProfileError(f"Profile '{profile.name}': swap pair ({a}, {b}) swaps a channel with itself")
        for idx in (a, b):
            if not 0 <= idx < n:
                raise CalibrationProfileError(f"Profile '{profile.name}': swap index {idx} outside 0..{n - 1}")
            if idx in seen:
                raise CalibrationProfileError(f"Profile '{profile.name}': channel {idx} appears in more than one swap pair")
            seen.add(idx)

    for target, source, coefficient in profile.couplings:
        for idx in (target, source):
            if not 0 <= idx < n:
                raise CalibrationProfileError(f"Profile '{profile.name}': coupling index {idx} outside 0..{n - 1}")
        if not math.isfinite(coefficient):
            raise CalibrationProfileError(f"Profile '{profile.name}': non-finite coupling coefficient {coefficient}")

    for idx in profile.face_indices:
        if idx < 0:
            raise CalibrationProfileError(f"Profile '{profile.name}': negative face index {idx}")


def load_channel_table(csv_path: Union[str, Path]) -> pd.DataFrame:
    """
    Loads the per-channel calibration CSV.
    Returns the rows sorted by channel index.
    """
    try:
        table = pd.read_csv(csv_path)
    except FileNotFoundError as e:
        raise CalibrationProfileError(f"Channel table not found: {csv_path}") from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise CalibrationProfileError(f"Channel table {csv_path} is not valid CSV: {e}") from e

    missing = [c for c in CHANNEL_COLUMNS if c not in table.columns]
    if missing:
        raise CalibrationProfileError(f"Channel table {csv_path} is missing columns {missing}")

    table = table[CHANNEL_COLUMNS].sort_values("index").reset_index(drop=True)
    if table["index"].tolist() != list(range(len(table))):
        raise CalibrationProfileError(f"Channel table {csv_path} must number channels 0..N-1 without gaps")
    return table


def load_calibration_profile(path: Optional[Union[str, Path]] = None) -> CalibrationProfile:
    """
    Load a calibration profile from a directory or a profile.json path.

    Args:
        path: profile directory or its profile.json. None loads the bundled profile.

    Returns:
        CalibrationProfile: immutable, validated profile.
    """
    profile_path = Path(path).expanduser() if path else DEFAULT_PROFILE_DIR
    if profile_path.is_dir():
        profile_path = profile_path / "profile.json"
    try:
        raw = json.loads(profile_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise CalibrationProfileError(f"Calibration profile not found: {profile_path}") from e
    except json.JSONDecodeError as e:
        raise CalibrationProfileError(f"Calibration profile {profile_path} is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise CalibrationProfileError(f"Calibration profile {profile_path} must be a JSON object")

    try:
        table = load_channel_table(profile_path.parent / raw.get("channels_file", "channels.csv"))
        profile = CalibrationProfile(
            name=str(raw["name"]),
            version=str(raw["version"]),
            classifier=str(raw.get("classifier", "")),
            neutral_label=str(raw.get("neutral_label", "_neutral")),
            channels=tuple(str(name) for name in table["name"]),
            scale=tuple(float(v) for v in table["scale"]),
            offset=tuple(float(v) for v in table["offset"]),
            swap_pairs=tuple((int(a), int(b)) for a, b in raw.get("swap_pairs", [])),
            couplings=tuple((int(t), int(s), float(k)) for t, s, k in raw.get("couplings", [])),
            face_indices=tuple(int(i) for i in raw.get("face_indices", [])),
        )
    except CalibrationProfileError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise CalibrationProfileError(f"Calibration profile {profile_path} is malformed: {e}") from e

    logger.info(f"Loaded calibration profile {profile.describe()}")
    return profile


_default_profile = None
_default_profile_lock = threading.Lock()


def get_default_profile() -> CalibrationProfile:
    """Process-wide profile, loaded once from AVASYNC_CALIBRATION_PROFILE or the bundled asset."""
    global _default_profile
    if _default_profile is None:
        with _default_profile_lock:
            if _default_profile is None:
                _default_profile = load_calibration_profile(os.getenv("AVASYNC_CALIBRATION_PROFILE") or None)
    return _default_profile
