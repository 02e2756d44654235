"""
Skeleton sources: anything that can be started, stopped and iterated frame by
frame, yielding the skeletons seen in each frame.
"""
import json
import logging
import os
from enum import Enum
from typing import Iterator, List, Optional, Protocol, Tuple

from . import config
from .skeleton import JointTrackingState, JointType, Skeleton, SkeletonPoint, skeleton_from_dict

logger = logging.getLogger(__name__)


class SensorUnavailableError(RuntimeError):
    """No camera, model or recording is ready; the stance check never runs."""


class TrackingMode(Enum):
    DEFAULT = "default"
    SEATED = "seated"


# Joints the sensor stops tracking in seated mode
SEATED_UNTRACKED_JOINTS = (
    JointType.SPINE,
    JointType.HIP_CENTER,
    JointType.HIP_LEFT,
    JointType.HIP_RIGHT,
    JointType.KNEE_LEFT,
    JointType.KNEE_RIGHT,
    JointType.ANKLE_LEFT,
    JointType.ANKLE_RIGHT,
    JointType.FOOT_LEFT,
    JointType.FOOT_RIGHT,
)


class SkeletonSource(Protocol):
    """Protocol that all skeleton sources must implement"""
    name: str

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def set_tracking_mode(self, mode: TrackingMode) -> None: ...

    def frames(self) -> Iterator[List[Skeleton]]: ...

    def map_to_screen(self, point: SkeletonPoint) -> Tuple[float, float]: ...


def project_to_depth_image(point: SkeletonPoint) -> Tuple[float, float]:
    """Pinhole projection of a sensor-space point into the 640x480 depth image."""
    width = config.RENDER_CONFIG["WIDTH"]
    height = config.RENDER_CONFIG["HEIGHT"]
    focal = config.TRACKING_CONFIG["DEPTH_FOCAL_LENGTH_PX"]
    if point.z <= 0:
        # Behind or on the sensor plane: park it at the image center.
        return width / 2.0, height / 2.0
    return (
        width / 2.0 + point.x / point.z * focal,
        height / 2.0 - point.y / point.z * focal,
    )


def apply_tracking_mode(skeleton: Skeleton, mode: TrackingMode) -> Skeleton:
    if mode is not TrackingMode.SEATED:
        return skeleton
    return skeleton.with_joint_states({jt: JointTrackingState.NOT_TRACKED for jt in SEATED_UNTRACKED_JOINTS})


class ReplaySkeletonSource:
    """
    Replays a recorded skeleton stream.

    File layout: {"frames": [{"skeletons": [<skeleton>, ...]}, ...]} where a
    skeleton is {"tracking_state", "position", "clipped_edges", "joints":
    {"Head": {"position": [x, y, z], "tracking_state": "Tracked"}, ...}}.
    """

    name = "replay"

    def __init__(self, path: str, mode: TrackingMode = TrackingMode.DEFAULT):
        self.path = path
        self.mode = mode
        self._frames: Optional[List[List[Skeleton]]] = None

    def start(self) -> None:
        if not os.path.exists(self.path):
            raise SensorUnavailableError(f"Recording not found: {self.path}")
        with open(self.path, "r", encoding="utf-8") as fh:
            try:
                raw = json.load(fh)
            except json.JSONDecodeError as e:
                raise ValueError(f"Recording is not valid JSON: {self.path}: {e}") from e
        self._frames = self._parse(raw)
        logger.info("Replay started: %s (%d frames, %s mode)", self.path, len(self._frames), self.mode.value)

    @staticmethod
    def _parse(raw) -> List[List[Skeleton]]:
        frames = raw.get("frames") if isinstance(raw, dict) else None
        if not isinstance(frames, list):
            raise ValueError("Recording needs a top-level 'frames' list")
        parsed = []
        for idx, frame in enumerate(frames):
            entries = frame.get("skeletons", []) if isinstance(frame, dict) else None
            if not isinstance(entries, list):
                raise ValueError(f"Frame {idx}: 'skeletons' must be a list")
            try:
                parsed.append([skeleton_from_dict(entry) for entry in entries])
            except ValueError as e:
                raise ValueError(f"Frame {idx}: {e}") from e
        return parsed

    def stop(self) -> None:
        if self._frames is not None:
            logger.info("Replay stopped: %s", self.path)
        self._frames = None

    def set_tracking_mode(self, mode: TrackingMode) -> None:
        logger.info("Tracking mode -> %s", mode.value)
        self.mode = mode

    def frames(self) -> Iterator[List[Skeleton]]:
        if self._frames is None:
            raise RuntimeError("Replay source is not started")
        for skeletons in self._frames:
            yield [apply_tracking_mode(s, self.mode) for s in skeletons]

    def map_to_screen(self, point: SkeletonPoint) -> Tuple[float, float]:
        return project_to_depth_image(point)
