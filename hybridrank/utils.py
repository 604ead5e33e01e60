"""Utility functions for hybrid ranking"""

import json
import math
from typing import Any, Dict, Optional

import numpy as np


def decode_metadata(raw: Any) -> Dict[str, Any]:
    """
    JSONB column value → dict

    asyncpg returns jsonb as text unless a codec is registered.
    """
    if raw is None:
        return {}
    if isinstance(raw, str):
        return json.loads(raw)
    return dict(raw)


def clamp01(value: float) -> float:
    """
    Clamp a number into [0, 1]

    NaN and infinities map to 0.0 (never +1.0 for +inf).

    Examples:
        >>> clamp01(1.7)
        1.0
        >>> clamp01(float("nan"))
        0.0
    """
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return max(0.0, min(1.0, value))


def parse_vector_text(text: Optional[str]) -> Optional[np.ndarray]:
    """
    Parse pgvector text format into a float array

    Args:
        text: Vector literal as returned by ``embedding::text``,
            e.g. "[0.1,0.2,0.3]" (brackets optional)

    Returns:
        1-D float64 array, or None for NULL/empty input

    Raises:
        ValueError: If any component is not a number

    Examples:
        >>> parse_vector_text("[1,2.5,-3]")
        array([ 1. ,  2.5, -3. ])

        >>> parse_vector_text("[]") is None
        True
    """
    if text is None:
        return None

    s = text.strip()
    if s.startswith("["):
        s = s[1:]
    if s.endswith("]"):
        s = s[:-1]
    s = s.strip()
    if not s:
        return None

    # float() raises ValueError on garbage components
    return np.array([float(part.strip()) for part in s.split(",")], dtype=np.float64)
