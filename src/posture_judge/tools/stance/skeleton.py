"""
Depth-camera skeleton model: 20 fixed joints, per-joint tracking confidence,
overall skeleton tracking state and clipped frame edges.
"""
from dataclasses import dataclass, field
from enum import Enum, Flag
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional


class JointType(Enum):
    HIP_CENTER = "HipCenter"
    SPINE = "Spine"
    SHOULDER_CENTER = "ShoulderCenter"
    HEAD = "Head"
    SHOULDER_LEFT = "ShoulderLeft"
    ELBOW_LEFT = "ElbowLeft"
    WRIST_LEFT = "WristLeft"
    HAND_LEFT = "HandLeft"
    SHOULDER_RIGHT = "ShoulderRight"
    ELBOW_RIGHT = "ElbowRight"
    WRIST_RIGHT = "WristRight"
    HAND_RIGHT = "HandRight"
    HIP_LEFT = "HipLeft"
    KNEE_LEFT = "KneeLeft"
    ANKLE_LEFT = "AnkleLeft"
    FOOT_LEFT = "FootLeft"
    HIP_RIGHT = "HipRight"
    KNEE_RIGHT = "KneeRight"
    ANKLE_RIGHT = "AnkleRight"
    FOOT_RIGHT = "FootRight"


class JointTrackingState(Enum):
    NOT_TRACKED = "NotTracked"
    INFERRED = "Inferred"
    TRACKED = "Tracked"


class SkeletonTrackingState(Enum):
    NOT_TRACKED = "NotTracked"
    POSITION_ONLY = "PositionOnly"
    TRACKED = "Tracked"


class FrameEdges(Flag):
    NONE = 0
    RIGHT = 1
    LEFT = 2
    TOP = 4
    BOTTOM = 8

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "FrameEdges":
        edges = cls.NONE
        for name in names:
            try:
                edges |= cls[str(name).strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown frame edge: {name!r}") from None
        return edges

    def names(self) -> list:
        return [e.name.capitalize() for e in (FrameEdges.TOP, FrameEdges.BOTTOM, FrameEdges.LEFT, FrameEdges.RIGHT) if e in self]


@dataclass(frozen=True)
class SkeletonPoint:
    """Sensor-space position in metres (Y up, Z away from the sensor)."""
    x: float
    y: float
    z: float

    @classmethod
    def from_sequence(cls, values) -> "SkeletonPoint":
        try:
            x, y, z = (float(v) for v in values)
        except (TypeError, ValueError):
            raise ValueError(f"Position needs three numbers, got {values!r}") from None
        return cls(x, y, z)


@dataclass(frozen=True)
class Joint:
    joint_type: JointType
    position: SkeletonPoint
    tracking_state: JointTrackingState = JointTrackingState.TRACKED


@dataclass(frozen=True)
class Skeleton:
    """
    One detected body for one frame. Built fresh per frame and never mutated.

    Every JointType must be present exactly once; lookup is keyed by JointType.
    """

    joints: Mapping[JointType, Joint]
    tracking_state: SkeletonTrackingState = SkeletonTrackingState.TRACKED
    position: SkeletonPoint = SkeletonPoint(0.0, 0.0, 0.0)
    clipped_edges: FrameEdges = FrameEdges.NONE
    tracking_id: int = 0

    def __post_init__(self):
        missing = [jt.value for jt in JointType if jt not in self.joints]
        if missing:
            raise ValueError(f"Skeleton is missing joints: {missing}")
        for jt, joint in self.joints.items():
            if joint.joint_type is not jt:
                raise ValueError(f"Joint keyed as {jt.value} reports type {joint.joint_type.value}")
        object.__setattr__(self, "joints", MappingProxyType(dict(self.joints)))

    @classmethod
    def from_joints(cls, joints: Iterable[Joint], **kwargs) -> "Skeleton":
        by_type: Dict[JointType, Joint] = {}
        for joint in joints:
            if joint.joint_type in by_type:
                raise ValueError(f"Duplicate joint: {joint.joint_type.value}")
            by_type[joint.joint_type] = joint
        return cls(joints=by_type, **kwargs)

    def __getitem__(self, joint_type: JointType) -> Joint:
        return self.joints[joint_type]

    def __iter__(self) -> Iterator[Joint]:
        # Enumeration order of JointType, matching the sensor's joint order.
        return (self.joints[jt] for jt in JointType)

    def is_tracked(self, *joint_types: JointType) -> bool:
        return all(self.joints[jt].tracking_state is JointTrackingState.TRACKED for jt in joint_types)

    def is_available(self, *joint_types: JointType) -> bool:
        return all(self.joints[jt].tracking_state is not JointTrackingState.NOT_TRACKED for jt in joint_types)

    def with_joint_states(self, states: Mapping[JointType, JointTrackingState]) -> "Skeleton":
        """Return a copy with some joints' tracking states replaced."""
        joints = {
            jt: Joint(jt, j.position, states.get(jt, j.tracking_state))
            for jt, j in self.joints.items()
        }
        return Skeleton(
            joints=joints,
            tracking_state=self.tracking_state,
            position=self.position,
            clipped_edges=self.clipped_edges,
            tracking_id=self.tracking_id,
        )


def skeleton_from_dict(data: Dict[str, Any]) -> Skeleton:
    """Build a Skeleton from its recorded JSON form (joint names as in JointType values)."""
    if not isinstance(data, dict):
        raise ValueError("Skeleton entry must be an object")
    raw_joints = data.get("joints")
    if not isinstance(raw_joints, dict):
        raise ValueError("Skeleton entry needs a 'joints' object")

    joints = []
    for name, raw in raw_joints.items():
        try:
            jt = JointType(name)
        except ValueError:
            raise ValueError(f"Unknown joint: {name!r}") from None
        if isinstance(raw, dict):
            position = SkeletonPoint.from_sequence(raw.get("position", ()))
            state = JointTrackingState(raw.get("tracking_state", JointTrackingState.TRACKED.value))
        else:
            position = SkeletonPoint.from_sequence(raw)
            state = JointTrackingState.TRACKED
        joints.append(Joint(jt, position, state))

    position: Optional[SkeletonPoint] = None
    if data.get("position") is not None:
        position = SkeletonPoint.from_sequence(data["position"])
    else:
        hip = next((j for j in joints if j.joint_type is JointType.HIP_CENTER), None)
        position = hip.position if hip else SkeletonPoint(0.0, 0.0, 0.0)

    try:
        tracking_id = int(data.get("tracking_id", 0))
    except (TypeError, ValueError):
        raise ValueError(f"tracking_id must be an integer, got {data.get('tracking_id')!r}") from None
    clipped = data.get("clipped_edges", [])
    if not isinstance(clipped, list):
        raise ValueError(f"clipped_edges must be a list of edge names, got {clipped!r}")

    return Skeleton.from_joints(
        joints,
        tracking_state=SkeletonTrackingState(data.get("tracking_state", SkeletonTrackingState.TRACKED.value)),
        position=position,
        clipped_edges=FrameEdges.from_names(clipped),
        tracking_id=tracking_id,
    )
