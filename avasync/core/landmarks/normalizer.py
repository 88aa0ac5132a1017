# This software is licensed under a **dual-license model**
# For individuals and businesses earning **under $1M per year**, this software is licensed under the **MIT License**
# Businesses or organizations with **annual revenue of $1,000,000 or more** must obtain permission to use this software commercially.

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import DEFAULT_FALLBACK_RESOLUTION
from ..errors import SchemaMismatch

_HALF = Decimal("0.5")
_ZERO = Decimal(0)
COORD_STEP = Decimal("0.0001")  # 4 decimal places
SCORE_STEP = Decimal("0.001")   # 3 decimal places


def aspect_ratio(resolution: Optional[Tuple[int, int]] = None,
                 fallback: Tuple[int, int] = DEFAULT_FALLBACK_RESOLUTION) -> Decimal:
    """
    Returns height / width for the frame.

    Falls back to `fallback` when no resolution was delivered so the ratio is
    always deterministic. A non-positive width or height degrades to 0.
    """
    width, height = resolution if resolution is not None else fallback
    if width <= 0 or height <= 0:
        return _ZERO
    return Decimal(int(height)) / Decimal(int(width))


def _to_decimal(value) -> Decimal:
    # str() keeps the shortest decimal form, also for numpy scalars
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise SchemaMismatch(f"Landmark component {value!r} is not a number") from e
    if not result.is_finite():
        raise SchemaMismatch(f"Landmark component {value!r} is not finite")
    return result


def _quantize(value: Decimal, step: Decimal) -> float:
    # + 0.0 folds -0.0 into 0.0
    return float(value.quantize(step, rounding=ROUND_HALF_UP)) + 0.0


def normalize_point(landmark, ratio: Decimal) -> Dict[str, float]:
    """Centre on the image midpoint, flip y up (scaled by aspect ratio) and flip z."""
    x = _to_decimal(landmark.x)
    y = _to_decimal(landmark.y)
    z = _to_decimal(getattr(landmark, "z", 0.0))
    return {
        "x": _quantize(x - _HALF, COORD_STEP),
        "y": _quantize((_HALF - y) * ratio, COORD_STEP),
        "z": _quantize(-z, COORD_STEP),
    }


def normalize_landmarks(landmarks: Sequence, ratio: Decimal) -> List[Dict[str, float]]:
    """Position-only normalization used for hands. Preserves order and length."""
    return [normalize_point(lm, ratio) for lm in landmarks]


def _score(value) -> float:
    if value is None:
        # Unset proto fields read as 0
        return 0.0
    return _quantize(_to_decimal(value), SCORE_STEP)


def normalize_pose(landmarks: Sequence, ratio: Decimal) -> List[Dict]:
    """
    Normalize a pose set, carrying presence and visibility.

    Returns:
        list: [{"pre": float, "vis": float, "pos": {"x", "y", "z"}}, ...]
    """
    return [
        {
            "pre": _score(getattr(lm, "presence", None)),
            "vis": _score(getattr(lm, "visibility", None)),
            "pos": normalize_point(lm, ratio),
        }
        for lm in landmarks
    ]
