# This software is licensed under a **dual-license model**
# For individuals and businesses earning **under $1M per year**, this software is licensed under the **MIT License**
# Businesses or organizations with **annual revenue of $1,000,000 or more** must obtain permission to use this software commercially.

"""
Adapters from MediaPipe outputs to FrameInput.

Reads results by attribute instead of importing mediapipe, so any object shaped
like a Holistic result (pose_landmarks, left_hand_landmarks, right_hand_landmarks,
face_landmarks) or a FaceLandmarker blendshape list works.
"""

from typing import List, Optional, Tuple

from ..model.frame_input import FrameInput, Landmark, ScoreEntry


def landmarks_from_mediapipe(container) -> Optional[List[Landmark]]:
    """
    Convert a NormalizedLandmarkList (or a plain sequence of landmarks) to Landmarks.
    Returns None when the part was not detected.
    """
    if container is None:
        return None
    points = getattr(container, "landmark", container)
    return [
        Landmark(
            x=float(p.x),
            y=float(p.y),
            z=float(getattr(p, "z", 0.0)),
            visibility=_optional_float(getattr(p, "visibility", None)),
            presence=_optional_float(getattr(p, "presence", None)),
        )
        for p in points
    ]


def scores_from_mediapipe(blendshapes) -> Optional[List[ScoreEntry]]:
    """
    Convert a ClassificationList (.classification with .label) or a list of
    Tasks Category objects (.category_name) to ScoreEntries, keeping order.
    """
    if blendshapes is None:
        return None
    entries = getattr(blendshapes, "classification", blendshapes)
    scores = []
    for entry in entries:
        label = getattr(entry, "label", None) or getattr(entry, "category_name", None) or ""
        scores.append(ScoreEntry(label=str(label), score=float(entry.score)))
    return scores


def frame_from_holistic(results, image_size: Optional[Tuple[int, int]] = None,
                        blendshapes=None) -> FrameInput:
    """
    Build a FrameInput from a Holistic result.

    Args:
        results: object with pose/left_hand/right_hand/face landmark attributes.
        image_size: (width, height) of the processed image, if known.
        blendshapes: raw classifier output for the same frame, if any.
    """
    return FrameInput(
        pose=landmarks_from_mediapipe(getattr(results, "pose_landmarks", None)),
        left_hand=landmarks_from_mediapipe(getattr(results, "left_hand_landmarks", None)),
        right_hand=landmarks_from_mediapipe(getattr(results, "right_hand_landmarks", None)),
        face=landmarks_from_mediapipe(getattr(results, "face_landmarks", None)),
        scores=scores_from_mediapipe(blendshapes),
        resolution=(int(image_size[0]), int(image_size[1])) if image_size else None,
    )


def _optional_float(value):
    return None if value is None else float(value)
