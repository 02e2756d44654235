"""
Live skeleton source: webcam + MediaPipe Pose Landmarker (Tasks API).

World landmarks (metres, hip-centred, Y down) are converted into the 20-joint
depth-camera skeleton so the stance checks see the same sensor space.
"""
import logging
import os
from typing import Iterator, List, Optional, Sequence, Tuple

import cv2

from ...config import Config
from . import config
from .skeleton import (
    FrameEdges,
    Joint,
    JointTrackingState,
    JointType,
    Skeleton,
    SkeletonPoint,
    SkeletonTrackingState,
)
from .sources import SensorUnavailableError, TrackingMode, apply_tracking_mode, project_to_depth_image

logger = logging.getLogger(__name__)

# MediaPipe 33-point pose indices
NOSE = 0
LEFT_SHOULDER, RIGHT_SHOULDER = 11, 12
LEFT_ELBOW, RIGHT_ELBOW = 13, 14
LEFT_WRIST, RIGHT_WRIST = 15, 16
LEFT_INDEX, RIGHT_INDEX = 19, 20
LEFT_HIP, RIGHT_HIP = 23, 24
LEFT_KNEE, RIGHT_KNEE = 25, 26
LEFT_ANKLE, RIGHT_ANKLE = 27, 28
LEFT_FOOT_INDEX, RIGHT_FOOT_INDEX = 31, 32

# Joints read straight off one landmark
DIRECT_LANDMARKS = {
    JointType.HEAD: NOSE,
    JointType.SHOULDER_LEFT: LEFT_SHOULDER,
    JointType.SHOULDER_RIGHT: RIGHT_SHOULDER,
    JointType.ELBOW_LEFT: LEFT_ELBOW,
    JointType.ELBOW_RIGHT: RIGHT_ELBOW,
    JointType.WRIST_LEFT: LEFT_WRIST,
    JointType.WRIST_RIGHT: RIGHT_WRIST,
    JointType.HAND_LEFT: LEFT_INDEX,
    JointType.HAND_RIGHT: RIGHT_INDEX,
    JointType.HIP_LEFT: LEFT_HIP,
    JointType.HIP_RIGHT: RIGHT_HIP,
    JointType.KNEE_LEFT: LEFT_KNEE,
    JointType.KNEE_RIGHT: RIGHT_KNEE,
    JointType.ANKLE_LEFT: LEFT_ANKLE,
    JointType.ANKLE_RIGHT: RIGHT_ANKLE,
    JointType.FOOT_LEFT: LEFT_FOOT_INDEX,
    JointType.FOOT_RIGHT: RIGHT_FOOT_INDEX,
}


def _find_model() -> Optional[str]:
    if Config.POSE_MODEL_PATH:
        return Config.POSE_MODEL_PATH if os.path.exists(Config.POSE_MODEL_PATH) else None
    for path in config.AI_CONFIG["MODEL_CANDIDATES"]:
        if os.path.exists(path):
            return os.path.abspath(path)
    return None


def tracking_state_from_visibility(visibility: float) -> JointTrackingState:
    if visibility >= config.TRACKING_CONFIG["TRACKED_VISIBILITY"]:
        return JointTrackingState.TRACKED
    if visibility >= config.TRACKING_CONFIG["INFERRED_VISIBILITY"]:
        return JointTrackingState.INFERRED
    return JointTrackingState.NOT_TRACKED


def _to_sensor_space(lm) -> Tuple[float, float, float]:
    depth = config.TRACKING_CONFIG["NOMINAL_SUBJECT_DEPTH_M"]
    return float(lm.x), -float(lm.y), float(lm.z) + depth


def _visibility(lm) -> float:
    return float(getattr(lm, "visibility", 0.0) or 0.0)


def clipped_edges_from_landmarks(landmarks: Sequence) -> FrameEdges:
    """Edges the body crosses, from normalized image landmarks ([0, 1] is on screen)."""
    edges = FrameEdges.NONE
    for lm in landmarks:
        if lm.x < 0.0:
            edges |= FrameEdges.LEFT
        elif lm.x > 1.0:
            edges |= FrameEdges.RIGHT
        if lm.y < 0.0:
            edges |= FrameEdges.TOP
        elif lm.y > 1.0:
            edges |= FrameEdges.BOTTOM
    return edges


def skeleton_from_landmarks(world_landmarks: Sequence, landmarks: Optional[Sequence] = None,
                            tracking_id: int = 1) -> Skeleton:
    """Build a depth-camera skeleton from one person's 33 MediaPipe landmarks."""
    if len(world_landmarks) < 33:
        raise ValueError(f"Expected 33 pose landmarks, got {len(world_landmarks)}")

    positions = {}
    visibilities = {}
    for jt, idx in DIRECT_LANDMARKS.items():
        positions[jt] = _to_sensor_space(world_landmarks[idx])
        visibilities[jt] = _visibility(world_landmarks[idx])

    def _mid(a: JointType, b: JointType):
        pa, pb = positions[a], positions[b]
        return tuple((u + v) / 2.0 for u, v in zip(pa, pb)), min(visibilities[a], visibilities[b])

    positions[JointType.HIP_CENTER], visibilities[JointType.HIP_CENTER] = _mid(JointType.HIP_LEFT, JointType.HIP_RIGHT)
    positions[JointType.SHOULDER_CENTER], visibilities[JointType.SHOULDER_CENTER] = _mid(
        JointType.SHOULDER_LEFT, JointType.SHOULDER_RIGHT
    )
    ratio = config.TRACKING_CONFIG["SPINE_RATIO"]
    hip_c = positions[JointType.HIP_CENTER]
    shoulder_c = positions[JointType.SHOULDER_CENTER]
    positions[JointType.SPINE] = tuple(h + (s - h) * ratio for h, s in zip(hip_c, shoulder_c))
    visibilities[JointType.SPINE] = min(visibilities[JointType.HIP_CENTER], visibilities[JointType.SHOULDER_CENTER])

    joints = {
        jt: Joint(jt, SkeletonPoint(*positions[jt]), tracking_state_from_visibility(visibilities[jt]))
        for jt in JointType
    }
    return Skeleton(
        joints=joints,
        tracking_state=SkeletonTrackingState.TRACKED,
        position=joints[JointType.HIP_CENTER].position,
        clipped_edges=clipped_edges_from_landmarks(landmarks) if landmarks is not None else FrameEdges.NONE,
        tracking_id=tracking_id,
    )


class MediaPipeSkeletonSource:
    """Webcam frames through Pose Landmarker; at most one skeleton per frame."""

    name = "mediapipe"

    def __init__(self, camera_index: int = 0, mode: TrackingMode = TrackingMode.DEFAULT):
        self.camera_index = camera_index
        self.mode = mode
        self.model_path: Optional[str] = None
        self.detector = None
        self._cap = None

    def start(self) -> None:
        self.model_path = _find_model()
        if not self.model_path:
            raise SensorUnavailableError(
                "Pose Landmarker model not found. Place pose_landmarker_full.task in project root or set POSE_MODEL_PATH."
            )
        from mediapipe.tasks import python as mp_tasks
        from mediapipe.tasks.python import vision

        base_options = mp_tasks.BaseOptions(model_asset_path=self.model_path)
        options = vision.PoseLandmarkerOptions(base_options=base_options, output_segmentation_masks=False)
        self.detector = vision.PoseLandmarker.create_from_options(options)

        self._cap = cv2.VideoCapture(self.camera_index)
        if not self._cap.isOpened():
            self.stop()
            raise SensorUnavailableError(f"Could not open camera {self.camera_index}")
        logger.info("Camera %s started (%s mode, model %s)", self.camera_index, self.mode.value, self.model_path)

    def stop(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("Camera %s stopped", self.camera_index)
        if self.detector is not None:
            self.detector.close()
            self.detector = None

    def set_tracking_mode(self, mode: TrackingMode) -> None:
        logger.info("Tracking mode -> %s", mode.value)
        self.mode = mode

    def frames(self) -> Iterator[List[Skeleton]]:
        if self._cap is None or self.detector is None:
            raise RuntimeError("MediaPipe source is not started")
        import mediapipe as mp

        while self._cap is not None and self._cap.isOpened():
            ret, frame = self._cap.read()
            if not ret:
                break
            rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)
            result = self.detector.detect(mp_image)

            skeletons = []
            if result.pose_world_landmarks:
                landmarks = result.pose_landmarks[0] if result.pose_landmarks else None
                skeleton = skeleton_from_landmarks(result.pose_world_landmarks[0], landmarks)
                skeletons.append(apply_tracking_mode(skeleton, self.mode))
            yield skeletons

    def map_to_screen(self, point: SkeletonPoint) -> Tuple[float, float]:
        return project_to_depth_image(point)
