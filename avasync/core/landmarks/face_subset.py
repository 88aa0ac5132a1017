# This software is licensed under a **dual-license model**
# For individuals and businesses earning **under $1M per year**, this software is licensed under the **MIT License**
# Businesses or organizations with **annual revenue of $1,000,000 or more** must obtain permission to use this software commercially.

from decimal import Decimal
from typing import Dict, List, Sequence

from ..errors import SchemaMismatch
from .normalizer import normalize_point


def project_face_subset(face: Sequence, ratio: Decimal, indices: Sequence[int]) -> List[Dict]:
    """
    Normalize only the face landmarks the rig consumes.

    Args:
        face: full face landmark set (468 points, or 478 with refined irises).
        ratio: aspect ratio from aspect_ratio().
        indices: ordered subset of face mesh indices, from the calibration profile.

    Returns:
        list: [{"id": index, "pos": {"x", "y", "z"}}, ...] in subset order.

    Raises:
        SchemaMismatch: if the face set is too short for the subset.
    """
    face_len = len(face)
    if indices and max(indices) >= face_len:
        raise SchemaMismatch(
            f"Face subset needs index {max(indices)} but only {face_len} face landmarks were delivered"
        )
    return [{"id": int(i), "pos": normalize_point(face[i], ratio)} for i in indices]
