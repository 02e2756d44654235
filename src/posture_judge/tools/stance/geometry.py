"""
Stance predicates on a single skeleton, in sensor space.

Each check projects a joint onto a reference joint's axis and accepts a
deviation up to `length * tan(angle)`.
"""
import logging

import numpy as np

from . import config
from .skeleton import JointType, Skeleton

logger = logging.getLogger(__name__)

_ALIGNMENT_JOINTS = (JointType.HEAD, JointType.SHOULDER_CENTER, JointType.HIP_CENTER)
_ARM_JOINTS = (
    JointType.SHOULDER_LEFT,
    JointType.WRIST_LEFT,
    JointType.SHOULDER_RIGHT,
    JointType.WRIST_RIGHT,
)
_LEG_JOINTS = (JointType.HIP_CENTER, JointType.ANKLE_LEFT, JointType.ANKLE_RIGHT)


def tolerance_band(length: float, angle_deg: float) -> float:
    """Allowed deviation for a segment of `length` tilted at most `angle_deg`."""
    return float(length * np.tan(np.radians(angle_deg)))


def is_body_aligned(skeleton: Skeleton) -> bool:
    """Head, shoulder center and hip center stacked on one vertical line."""
    max_offset = config.THRESHOLDS["BODY_ALIGNMENT_MAX_OFFSET"]
    head_x = skeleton[JointType.HEAD].position.x
    shoulder_x = skeleton[JointType.SHOULDER_CENTER].position.x
    hip_x = skeleton[JointType.HIP_CENTER].position.x
    return abs(head_x - shoulder_x) <= max_offset and abs(shoulder_x - hip_x) <= max_offset


def _is_arm_level(skeleton: Skeleton, shoulder: JointType, wrist: JointType) -> bool:
    shoulder_pos = skeleton[shoulder].position
    wrist_pos = skeleton[wrist].position
    distance = abs(shoulder_pos.x - wrist_pos.x)
    tolerance = tolerance_band(distance, config.THRESHOLDS["ARM_TOLERANCE_DEG"])
    # Projected wrist: wrist X and Z, shoulder Y.
    projected_y = shoulder_pos.y
    return abs(wrist_pos.y - projected_y) <= tolerance


def is_aligned_body_and_arms(skeleton: Skeleton) -> bool:
    """True if the body is aligned and both arms sit in the relaxed position."""
    if not skeleton.is_available(*_ALIGNMENT_JOINTS, *_ARM_JOINTS):
        logger.debug("skeleton %s: body or arm joint not tracked", skeleton.tracking_id)
        return False
    if not is_body_aligned(skeleton):
        return False
    return (
        _is_arm_level(skeleton, JointType.SHOULDER_LEFT, JointType.WRIST_LEFT)
        and _is_arm_level(skeleton, JointType.SHOULDER_RIGHT, JointType.WRIST_RIGHT)
    )


def leg_drop(skeleton: Skeleton) -> float:
    """Vertical distance from hip center down to the left ankle (positive when standing)."""
    return skeleton[JointType.HIP_CENTER].position.y - skeleton[JointType.ANKLE_LEFT].position.y


def are_legs_together(skeleton: Skeleton) -> bool:
    """Both ankles under the hip center within the leg tolerance angle."""
    if not skeleton.is_tracked(*_LEG_JOINTS):
        logger.debug("skeleton %s: hip center or ankle not tracked", skeleton.tracking_id)
        return False
    hip_x = skeleton[JointType.HIP_CENTER].position.x
    tolerance = tolerance_band(leg_drop(skeleton), config.THRESHOLDS["LEG_TOLERANCE_DEG"])
    left_dev = abs(skeleton[JointType.ANKLE_LEFT].position.x - hip_x)
    right_dev = abs(skeleton[JointType.ANKLE_RIGHT].position.x - hip_x)
    return left_dev <= tolerance and right_dev <= tolerance


def are_legs_apart(skeleton: Skeleton) -> bool:
    """Ankle separation matches the target spread angle within the leg tolerance."""
    if not skeleton.is_tracked(*_LEG_JOINTS):
        logger.debug("skeleton %s: hip center or ankle not tracked", skeleton.tracking_id)
        return False
    drop = leg_drop(skeleton)
    tolerance = tolerance_band(drop, config.THRESHOLDS["LEG_TOLERANCE_DEG"])
    spread_target = tolerance_band(drop, config.THRESHOLDS["LEG_SPREAD_TARGET_DEG"])
    separation = abs(skeleton[JointType.ANKLE_RIGHT].position.x - skeleton[JointType.ANKLE_LEFT].position.x)
    return abs(spread_target - tolerance) <= separation <= abs(spread_target + tolerance)
