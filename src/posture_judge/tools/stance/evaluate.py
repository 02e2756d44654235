"""
Stance verdict: combine the three predicates into CORRECT / CLOSE / INCORRECT.
Pure per frame; nothing carries over between frames.
"""
import logging
from enum import Enum
from typing import Any, Dict

from .geometry import are_legs_apart, are_legs_together, is_aligned_body_and_arms
from .skeleton import Skeleton

logger = logging.getLogger(__name__)


class PoseVerdict(Enum):
    CORRECT = "correct"
    CLOSE = "close"
    INCORRECT = "incorrect"


# (arms_aligned, legs_together, legs_apart) -> verdict; anything missing is INCORRECT
_DECISION_TABLE = {
    (True, True, False): PoseVerdict.CORRECT,
    (True, False, True): PoseVerdict.CORRECT,
    (True, False, False): PoseVerdict.CLOSE,
    (False, True, False): PoseVerdict.CLOSE,
    (False, False, True): PoseVerdict.CLOSE,
}

_STATUS_MESSAGES = {
    PoseVerdict.CORRECT: "Stance matched",
    PoseVerdict.CLOSE: "Almost there",
    PoseVerdict.INCORRECT: "Stance not matched",
}


def classify_pose(arms_aligned: bool, legs_together: bool, legs_apart: bool) -> PoseVerdict:
    key = (bool(arms_aligned), bool(legs_together), bool(legs_apart))
    return _DECISION_TABLE.get(key, PoseVerdict.INCORRECT)


def evaluate_stance(skeleton: Skeleton) -> Dict[str, Any]:
    """
    Returns dict with: verdict (PoseVerdict), arms_aligned, legs_together,
    legs_apart, status_msg, tracking_id.
    """
    arms_aligned = is_aligned_body_and_arms(skeleton)
    legs_together = are_legs_together(skeleton)
    legs_apart = are_legs_apart(skeleton)
    verdict = classify_pose(arms_aligned, legs_together, legs_apart)
    logger.debug(
        "skeleton %s: arms=%s together=%s apart=%s -> %s",
        skeleton.tracking_id, arms_aligned, legs_together, legs_apart, verdict.value,
    )
    return {
        "verdict": verdict,
        "arms_aligned": arms_aligned,
        "legs_together": legs_together,
        "legs_apart": legs_apart,
        "status_msg": _STATUS_MESSAGES[verdict],
        "tracking_id": skeleton.tracking_id,
    }
