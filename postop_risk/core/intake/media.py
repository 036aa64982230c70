"""
Media analysis intake.

The eye-image analysis service answers with a JSON object, sometimes wrapped
in markdown fences or prose. This module turns whatever came back into a
MediaAnalysis, or None when nothing usable arrived. A failed analysis is
never an error for the scoring core: it simply means "no media analysis".
"""
from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from postop_risk.core.assessment import MediaAnalysis
from postop_risk.core.scoring.base import round_half_up
from postop_risk.utils import get_logger

logger = get_logger(__name__)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)

_SCORE_KEYS = ("rednessScore", "edemaScore", "dischargePatternScore", "overallMediaRisk")
SCORE_MIN = 0
SCORE_MAX = 100


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Pull the outermost ``{...}`` block out of free text and decode it."""
    match = _JSON_OBJECT.search(text)
    if not match:
        return None
    try:
        decoded = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return decoded if isinstance(decoded, dict) else None


def _clamp_score(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value  # let validation reject it
    return int(max(SCORE_MIN, min(SCORE_MAX, round_half_up(value))))


def parse_media_analysis(payload: Union[str, Dict[str, Any], None]) -> Optional[MediaAnalysis]:
    """
    Convert an image-analysis response into a MediaAnalysis.

    Returns None for: no payload, an ``{"error": ...}`` payload, text without
    a JSON object, a missing ``overallMediaRisk`` or values of the wrong type.
    """
    if payload is None:
        return None

    data = extract_json_object(payload) if isinstance(payload, str) else payload
    if data is None:
        logger.warning("Media analysis response contained no JSON object; ignoring")
        return None

    if data.get("error"):
        logger.warning(f"Media analysis service reported an error: {data['error']}")
        return None

    if data.get("overallMediaRisk") is None:
        logger.warning("Media analysis response has no overallMediaRisk; ignoring")
        return None

    cleaned = dict(data)
    for key in _SCORE_KEYS:
        if cleaned.get(key) is None:
            cleaned.pop(key, None)
        else:
            cleaned[key] = _clamp_score(cleaned[key])
    if cleaned.get("abnormalCues") is None:
        cleaned.pop("abnormalCues", None)

    try:
        media = MediaAnalysis.model_validate(cleaned)
    except ValidationError as exc:
        logger.warning(f"Media analysis response failed validation: {exc.error_count()} error(s)")
        return None

    logger.debug(
        f"Media analysis accepted: overall={media.overall_media_risk} cues={len(media.abnormal_cues)}"
    )
    return media
