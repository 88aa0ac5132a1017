from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class Landmark:
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None
    presence: Optional[float] = None


@dataclass(frozen=True)
class ScoreEntry:
    label: str
    score: float


LandmarkSet = Sequence[Landmark]


@dataclass
class FrameInput:
    """
    One frame of tracking data as delivered by the perception pipeline.

    Every field is optional; a field left as None is "not tracked this frame"
    and is encoded as an explicit null downstream.
    """
    pose: Optional[LandmarkSet] = None
    left_hand: Optional[LandmarkSet] = None
    right_hand: Optional[LandmarkSet] = None
    face: Optional[LandmarkSet] = None
    scores: Optional[Sequence[ScoreEntry]] = None
    resolution: Optional[Tuple[int, int]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FrameInput":
        """
        Build a FrameInput from a JSON-compatible mapping.

        Landmarks may be objects ({"x", "y", "z", "visibility", "presence"}) or
        arrays ([x, y, z, visibility, presence], trailing items optional).
        Scores may be {"label", "score"} objects or bare numbers.

        Raises:
            ValueError: if the mapping is not shaped like a frame.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Frame must be a JSON object, got {type(data).__name__}")

        resolution = data.get("resolution")
        if resolution is not None:
            if isinstance(resolution, Mapping):
                resolution = (resolution.get("width"), resolution.get("height"))
            try:
                width, height = resolution
                resolution = (int(width), int(height))
            except (TypeError, ValueError) as e:
                raise ValueError(f"Resolution must be [width, height], got {resolution!r}") from e

        return cls(
            pose=_landmarks_from_json(data.get("pose"), "pose"),
            left_hand=_landmarks_from_json(data.get("left_hand"), "left_hand"),
            right_hand=_landmarks_from_json(data.get("right_hand"), "right_hand"),
            face=_landmarks_from_json(data.get("face"), "face"),
            scores=_scores_from_json(data.get("scores")),
            resolution=resolution,
        )


def _landmark_from_json(item: Union[Mapping[str, Any], Sequence[float]], field: str) -> Landmark:
    if isinstance(item, Mapping):
        return Landmark(
            x=float(item["x"]),
            y=float(item["y"]),
            z=float(item.get("z", 0.0)),
            visibility=_optional_float(item.get("visibility")),
            presence=_optional_float(item.get("presence")),
        )
    values = list(item)
    if not 2 <= len(values) <= 5:
        raise ValueError(f"Landmark in '{field}' must have 2 to 5 values, got {len(values)}")
    values += [None] * (5 - len(values))
    x, y, z, visibility, presence = values
    return Landmark(
        x=float(x),
        y=float(y),
        z=float(z) if z is not None else 0.0,
        visibility=_optional_float(visibility),
        presence=_optional_float(presence),
    )


def _landmarks_from_json(items: Any, field: str) -> Optional[List[Landmark]]:
    if items is None:
        return None
    if not isinstance(items, (list, tuple)):
        raise ValueError(f"'{field}' must be a list of landmarks")
    try:
        return [_landmark_from_json(item, field) for item in items]
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed landmark in '{field}': {e}") from e


def _scores_from_json(items: Any) -> Optional[List[ScoreEntry]]:
    if items is None:
        return None
    if not isinstance(items, (list, tuple)):
        raise ValueError("'scores' must be a list")
    scores = []
    try:
        for i, item in enumerate(items):
            if isinstance(item, Mapping):
                scores.append(ScoreEntry(label=str(item.get("label", "")), score=float(item["score"])))
            else:
                scores.append(ScoreEntry(label=str(i), score=float(item)))
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed entry in 'scores': {e}") from e
    return scores


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def frame_to_dict(frame: FrameInput) -> Dict[str, Any]:
    """Inverse of FrameInput.from_dict, using the object form for landmarks."""
    def landmarks(items):
        if items is None:
            return None
        return [
            {"x": lm.x, "y": lm.y, "z": lm.z, "visibility": lm.visibility, "presence": lm.presence}
            for lm in items
        ]

    return {
        "pose": landmarks(frame.pose),
        "left_hand": landmarks(frame.left_hand),
        "right_hand": landmarks(frame.right_hand),
        "face": landmarks(frame.face),
        "scores": None if frame.scores is None else [{"label": s.label, "score": s.score} for s in frame.scores],
        "resolution": None if frame.resolution is None else list(frame.resolution),
    }
