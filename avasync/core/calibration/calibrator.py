# This software is licensed under a **dual-license model**
# For individuals and businesses earning **under $1M per year**, this software is licensed under the **MIT License**
# Businesses or organizations with **annual revenue of $1,000,000 or more** must obtain permission to use this software commercially.

from typing import List, Sequence

import numpy as np

from ..errors import SchemaMismatch
from .profile import CalibrationProfile


def _score_value(entry) -> float:
    # ScoreEntry, ClassificationList entries and Tasks Category all expose .score
    value = getattr(entry, "score", entry)
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise SchemaMismatch(f"Score {value!r} is not a number") from e


class BlendshapeCalibrator:
    """
    Corrects raw blendshape classifier scores using a calibration profile.

    Pipeline per frame: drop the neutral channel, undo the channel swaps,
    apply per-channel gain/bias, then add the cross-channel couplings.
    Every output value is clipped to [0, 1].
    """

    def __init__(self, profile: CalibrationProfile):
        self.profile = profile
        n = profile.channel_count

        permutation = np.arange(n)
        for a, b in profile.swap_pairs:
            permutation[a], permutation[b] = b, a
        self._permutation = permutation
        self._scale = np.asarray(profile.scale, dtype=np.float64)
        self._offset = np.asarray(profile.offset, dtype=np.float64)
        for array in (self._permutation, self._scale, self._offset):
            array.flags.writeable = False

    def permute(self, values: np.ndarray) -> np.ndarray:
        """Apply the swap pairs. Applying twice restores the original order."""
        return np.asarray(values)[self._permutation]

    def calibrate(self, scores: Sequence) -> List[float]:
        """
        Args:
            scores: raw classifier output, neutral channel first.

        Returns:
            list: N calibrated weights in [0, 1], rounded to 4 decimals.

        Raises:
            SchemaMismatch: if len(scores) != N + 1 or a score is not numeric.
        """
        expected = self.profile.expected_score_count
        if len(scores) != expected:
            raise SchemaMismatch(
                f"Classifier produced {len(scores)} scores, profile "
                f"'{self.profile.name}' v{self.profile.version} expects {expected}"
            )

        raw = np.fromiter((_score_value(s) for s in scores[1:]), dtype=np.float64, count=expected - 1)
        raw = np.clip(np.nan_to_num(raw, nan=0.0, posinf=1.0, neginf=0.0), 0.0, 1.0)

        calibrated = np.clip(self.permute(raw) * self._scale + self._offset, 0.0, 1.0)

        # Couplings read values already updated by earlier couplings
        for target, source, coefficient in self.profile.couplings:
            calibrated[target] = min(max(calibrated[target] + coefficient * calibrated[source], 0.0), 1.0)

        return [round(float(v), 4) for v in calibrated]
