"""Tests for blendshape score calibration."""

from types import SimpleNamespace

import numpy as np
import pytest

from avasync.core.calibration.calibrator import BlendshapeCalibrator
from avasync.core.errors import SchemaMismatch
from avasync.core.model.frame_input import ScoreEntry


class TestCalibratePipeline:

    def test_hand_checked_example(self, small_profile):
        calibrator = BlendshapeCalibrator(small_profile)
        # neutral, then a, b, c, d
        out = calibrator.calibrate([0.9, 0.1, 0.3, 0.4, 0.6])
        # swap(a, b) -> [0.3, 0.1, 0.4, 0.6]
        # affine     -> [0.6, 0.0, 0.4, 0.5]
        # d += 0.5*c -> 0.7 ; c += -1.0*d -> clipped to 0.0
        assert out == [0.6, 0.0, 0.0, 0.7]

    def test_neutral_channel_is_ignored(self, small_profile):
        calibrator = BlendshapeCalibrator(small_profile)
        assert calibrator.calibrate([0.0, 0.1, 0.3, 0.4, 0.6]) == calibrator.calibrate([1.0, 0.1, 0.3, 0.4, 0.6])

    def test_accepts_score_objects(self, small_profile):
        calibrator = BlendshapeCalibrator(small_profile)
        entries = [ScoreEntry("_neutral", 0.9)] + [ScoreEntry(c, v) for c, v in zip("abcd", (0.1, 0.3, 0.4, 0.6))]
        categories = [SimpleNamespace(category_name=e.label, score=e.score) for e in entries]
        assert calibrator.calibrate(entries) == calibrator.calibrate(categories) == [0.6, 0.0, 0.0, 0.7]

    def test_output_is_python_floats(self, default_profile):
        out = BlendshapeCalibrator(default_profile).calibrate([0.5] * 52)
        assert len(out) == 51
        assert all(type(v) is float for v in out)


class TestSchemaMismatch:

    @pytest.mark.parametrize("length", [0, 1, 4, 6, 52])
    def test_wrong_length_is_rejected(self, small_profile, length):
        with pytest.raises(SchemaMismatch):
            BlendshapeCalibrator(small_profile).calibrate([0.5] * length)

    def test_bundled_profile_expects_52_scores(self, default_profile):
        calibrator = BlendshapeCalibrator(default_profile)
        with pytest.raises(SchemaMismatch):
            calibrator.calibrate([0.5] * 51)
        assert len(calibrator.calibrate([0.5] * 52)) == 51

    @pytest.mark.parametrize("bad", ["loud", None, {"label": "a", "score": 0.5}])
    def test_non_numeric_score_is_rejected(self, small_profile, bad):
        with pytest.raises(SchemaMismatch):
            BlendshapeCalibrator(small_profile).calibrate([0.0, 0.1, bad, 0.3, 0.4])


class TestInvariants:

    def test_values_always_clipped(self, default_profile):
        calibrator = BlendshapeCalibrator(default_profile)
        rng = np.random.default_rng(7)
        for _ in range(200):
            raw = rng.uniform(-2.0, 3.0, size=52)
            raw[rng.integers(0, 52)] = np.nan
            raw[rng.integers(0, 52)] = np.inf
            out = calibrator.calibrate(list(raw))
            assert all(0.0 <= v <= 1.0 for v in out)

    def test_swap_pairs_are_an_involution(self, default_profile):
        calibrator = BlendshapeCalibrator(default_profile)
        values = np.arange(default_profile.channel_count, dtype=np.float64)
        once = calibrator.permute(values)
        assert not np.array_equal(once, values)
        np.testing.assert_array_equal(calibrator.permute(once), values)

    def test_bundled_swaps_mirror_jaw_and_mouth(self, default_profile):
        calibrator = BlendshapeCalibrator(default_profile)
        channels = default_profile.channels
        permuted = [channels[i] for i in calibrator.permute(np.arange(len(channels)))]
        assert permuted[channels.index("jawLeft")] == "jawRight"
        assert permuted[channels.index("mouthRight")] == "mouthLeft"

    def test_tables_are_read_only(self, small_profile):
        calibrator = BlendshapeCalibrator(small_profile)
        with pytest.raises(ValueError):
            calibrator._scale[0] = 10.0
