import json

import pytest

from posture_judge.tools.stance.skeleton import (
    FrameEdges,
    Joint,
    JointTrackingState,
    JointType,
    Skeleton,
    SkeletonPoint,
    SkeletonTrackingState,
)

# Subject 2 m in front of the sensor, arms held level, feet together under the hips.
BASE_POSITIONS = {
    JointType.HIP_CENTER: (0.0, 0.0, 2.0),
    JointType.SPINE: (0.0, 0.1, 2.0),
    JointType.SHOULDER_CENTER: (0.0, 0.5, 2.0),
    JointType.HEAD: (0.0, 0.7, 2.0),
    JointType.SHOULDER_LEFT: (-0.2, 0.5, 2.0),
    JointType.ELBOW_LEFT: (-0.45, 0.5, 2.0),
    JointType.WRIST_LEFT: (-0.7, 0.5, 2.0),
    JointType.HAND_LEFT: (-0.8, 0.5, 2.0),
    JointType.SHOULDER_RIGHT: (0.2, 0.5, 2.0),
    JointType.ELBOW_RIGHT: (0.45, 0.5, 2.0),
    JointType.WRIST_RIGHT: (0.7, 0.5, 2.0),
    JointType.HAND_RIGHT: (0.8, 0.5, 2.0),
    JointType.HIP_LEFT: (-0.1, 0.0, 2.0),
    JointType.KNEE_LEFT: (-0.05, -0.5, 2.0),
    JointType.ANKLE_LEFT: (0.0, -1.0, 2.0),
    JointType.FOOT_LEFT: (0.0, -1.05, 1.9),
    JointType.HIP_RIGHT: (0.1, 0.0, 2.0),
    JointType.KNEE_RIGHT: (0.05, -0.5, 2.0),
    JointType.ANKLE_RIGHT: (0.0, -1.0, 2.0),
    JointType.FOOT_RIGHT: (0.0, -1.05, 1.9),
}


def build_skeleton(positions=None, states=None, **kwargs) -> Skeleton:
    merged = dict(BASE_POSITIONS)
    merged.update(positions or {})
    states = states or {}
    joints = {
        jt: Joint(jt, SkeletonPoint(*merged[jt]), states.get(jt, JointTrackingState.TRACKED))
        for jt in JointType
    }
    kwargs.setdefault("position", joints[JointType.HIP_CENTER].position)
    return Skeleton(joints=joints, **kwargs)


def skeleton_to_dict(skeleton: Skeleton) -> dict:
    return {
        "tracking_state": skeleton.tracking_state.value,
        "tracking_id": skeleton.tracking_id,
        "position": [skeleton.position.x, skeleton.position.y, skeleton.position.z],
        "clipped_edges": skeleton.clipped_edges.names(),
        "joints": {
            joint.joint_type.value: {
                "position": [joint.position.x, joint.position.y, joint.position.z],
                "tracking_state": joint.tracking_state.value,
            }
            for joint in skeleton
        },
    }


@pytest.fixture
def make_skeleton():
    return build_skeleton


@pytest.fixture
def standing_skeleton():
    return build_skeleton()


@pytest.fixture
def recording(tmp_path):
    """Three frames: empty, feet together, feet apart with arms dropped."""
    apart = build_skeleton(
        positions={
            JointType.ANKLE_LEFT: (-0.35, -1.0, 2.0),
            JointType.ANKLE_RIGHT: (0.35, -1.0, 2.0),
            JointType.WRIST_LEFT: (-0.2, 0.0, 2.0),
        },
        clipped_edges=FrameEdges.BOTTOM,
        tracking_id=7,
    )
    far = build_skeleton(tracking_state=SkeletonTrackingState.POSITION_ONLY, tracking_id=8)
    data = {
        "frames": [
            {"skeletons": []},
            {"skeletons": [skeleton_to_dict(build_skeleton(tracking_id=7))]},
            {"skeletons": [skeleton_to_dict(apart), skeleton_to_dict(far)]},
        ]
    }
    path = tmp_path / "stance.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
