"""
Stick-figure overlay: bones colored by stance verdict, joints by tracking state,
red bars on clipped frame edges.
"""
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from . import config
from .evaluate import PoseVerdict
from .skeleton import (
    FrameEdges,
    Joint,
    JointTrackingState,
    JointType,
    Skeleton,
    SkeletonPoint,
    SkeletonTrackingState,
)

Color = Tuple[int, int, int]
ScreenMapper = Callable[[SkeletonPoint], Tuple[float, float]]

BONES: List[Tuple[JointType, JointType]] = [
    # Torso
    (JointType.HEAD, JointType.SHOULDER_CENTER),
    (JointType.SHOULDER_CENTER, JointType.SHOULDER_LEFT),
    (JointType.SHOULDER_CENTER, JointType.SHOULDER_RIGHT),
    (JointType.SHOULDER_CENTER, JointType.SPINE),
    (JointType.SPINE, JointType.HIP_CENTER),
    (JointType.HIP_CENTER, JointType.HIP_LEFT),
    (JointType.HIP_CENTER, JointType.HIP_RIGHT),
    # Left arm
    (JointType.SHOULDER_LEFT, JointType.ELBOW_LEFT),
    (JointType.ELBOW_LEFT, JointType.WRIST_LEFT),
    (JointType.WRIST_LEFT, JointType.HAND_LEFT),
    # Right arm
    (JointType.SHOULDER_RIGHT, JointType.ELBOW_RIGHT),
    (JointType.ELBOW_RIGHT, JointType.WRIST_RIGHT),
    (JointType.WRIST_RIGHT, JointType.HAND_RIGHT),
    # Left leg
    (JointType.HIP_LEFT, JointType.KNEE_LEFT),
    (JointType.KNEE_LEFT, JointType.ANKLE_LEFT),
    (JointType.ANKLE_LEFT, JointType.FOOT_LEFT),
    # Right leg
    (JointType.HIP_RIGHT, JointType.KNEE_RIGHT),
    (JointType.KNEE_RIGHT, JointType.ANKLE_RIGHT),
    (JointType.ANKLE_RIGHT, JointType.FOOT_RIGHT),
]

VERDICT_COLORS: Dict[PoseVerdict, Color] = {
    PoseVerdict.CORRECT: config.COLORS["correct"],
    PoseVerdict.CLOSE: config.COLORS["close"],
    PoseVerdict.INCORRECT: config.COLORS["incorrect"],
}


@dataclass(frozen=True)
class BonePen:
    color: Color
    thickness: int


class SkeletonRenderer:
    def __init__(self, map_to_screen: ScreenMapper):
        self.map_to_screen = map_to_screen
        self.width = config.RENDER_CONFIG["WIDTH"]
        self.height = config.RENDER_CONFIG["HEIGHT"]

    def new_canvas(self) -> np.ndarray:
        canvas = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        canvas[:, :] = config.COLORS["background"]
        return canvas

    def _to_pixel(self, point: SkeletonPoint) -> Tuple[int, int]:
        x, y = self.map_to_screen(point)
        return int(round(x)), int(round(y))

    @staticmethod
    def bone_pen(joint0: Joint, joint1: Joint, verdict: PoseVerdict) -> Optional[BonePen]:
        """Pen for a bone, or None when the bone should not be drawn."""
        states = (joint0.tracking_state, joint1.tracking_state)
        if JointTrackingState.NOT_TRACKED in states:
            return None
        # Don't draw if both points are inferred
        if states == (JointTrackingState.INFERRED, JointTrackingState.INFERRED):
            return None
        if states == (JointTrackingState.TRACKED, JointTrackingState.TRACKED):
            return BonePen(VERDICT_COLORS[verdict], config.RENDER_CONFIG["TRACKED_BONE_THICKNESS"])
        return BonePen(config.COLORS["inferred_bone"], config.RENDER_CONFIG["INFERRED_BONE_THICKNESS"])

    @staticmethod
    def joint_color(joint: Joint) -> Optional[Color]:
        if joint.tracking_state is JointTrackingState.TRACKED:
            return config.COLORS["tracked_joint"]
        if joint.tracking_state is JointTrackingState.INFERRED:
            return config.COLORS["inferred_joint"]
        return None

    def draw_clipped_edges(self, canvas: np.ndarray, skeleton: Skeleton) -> None:
        t = config.RENDER_CONFIG["CLIP_BOUNDS_THICKNESS"]
        w, h = self.width, self.height
        color = config.COLORS["clipped_edge"]
        edges = skeleton.clipped_edges
        if FrameEdges.BOTTOM in edges:
            cv2.rectangle(canvas, (0, h - t), (w - 1, h - 1), color, -1)
        if FrameEdges.TOP in edges:
            cv2.rectangle(canvas, (0, 0), (w - 1, t - 1), color, -1)
        if FrameEdges.LEFT in edges:
            cv2.rectangle(canvas, (0, 0), (t - 1, h - 1), color, -1)
        if FrameEdges.RIGHT in edges:
            cv2.rectangle(canvas, (w - t, 0), (w - 1, h - 1), color, -1)

    def draw_bone(self, canvas: np.ndarray, skeleton: Skeleton, joint_type0: JointType,
                  joint_type1: JointType, verdict: PoseVerdict) -> bool:
        joint0 = skeleton[joint_type0]
        joint1 = skeleton[joint_type1]
        pen = self.bone_pen(joint0, joint1, verdict)
        if pen is None:
            return False
        cv2.line(canvas, self._to_pixel(joint0.position), self._to_pixel(joint1.position), pen.color, pen.thickness)
        return True

    def draw_bones_and_joints(self, canvas: np.ndarray, skeleton: Skeleton, verdict: PoseVerdict) -> None:
        for joint_type0, joint_type1 in BONES:
            self.draw_bone(canvas, skeleton, joint_type0, joint_type1, verdict)

        radius = config.RENDER_CONFIG["JOINT_THICKNESS"]
        for joint in skeleton:
            color = self.joint_color(joint)
            if color is not None:
                cv2.circle(canvas, self._to_pixel(joint.position), radius, color, -1)

    def draw_body_center(self, canvas: np.ndarray, skeleton: Skeleton) -> None:
        cv2.circle(
            canvas,
            self._to_pixel(skeleton.position),
            config.RENDER_CONFIG["BODY_CENTER_THICKNESS"],
            config.COLORS["center_point"],
            -1,
        )

    def draw_verdict(self, canvas: np.ndarray, verdict: PoseVerdict, origin: Tuple[int, int] = (10, 30)) -> None:
        cv2.putText(canvas, f"Stance: {verdict.value.upper()}", origin,
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, VERDICT_COLORS[verdict], 2)

    def render_frame(self, skeletons: Sequence[Skeleton], evaluations: Dict[int, dict]) -> np.ndarray:
        """
        Draw one frame. `evaluations` maps the index of each Tracked skeleton in
        `skeletons` to its evaluate_stance() result.
        """
        canvas = self.new_canvas()
        caption_y = 30
        for idx, skeleton in enumerate(skeletons):
            self.draw_clipped_edges(canvas, skeleton)
            if skeleton.tracking_state is SkeletonTrackingState.TRACKED:
                verdict = evaluations[idx]["verdict"] if idx in evaluations else PoseVerdict.INCORRECT
                self.draw_bones_and_joints(canvas, skeleton, verdict)
                self.draw_verdict(canvas, verdict, (20, caption_y))
                caption_y += 25
            elif skeleton.tracking_state is SkeletonTrackingState.POSITION_ONLY:
                self.draw_body_center(canvas, skeleton)
        return canvas
