# Standing stance check: arms relaxed + feet together / feet apart
from pathlib import Path

_TOOL_DIR = Path(__file__).resolve().parent
# src/posture_judge/tools/stance -> ../../../.. = project root
_PROJECT_ROOT = _TOOL_DIR.parent.parent.parent.parent

# ------------------------------
# 1. Reference pose geometry
# ------------------------------
THRESHOLDS = {
    # Head, shoulder center and hip center X must agree within this (sensor metres).
    "BODY_ALIGNMENT_MAX_OFFSET": 0.05,
    "ARM_TOLERANCE_DEG": 9.0,
    "LEG_TOLERANCE_DEG": 4.5,
    # Target opening of the feet-apart stance, measured from the hip center.
    "LEG_SPREAD_TARGET_DEG": 35.0,
}

# ------------------------------
# 2. Overlay rendering (640x480 depth image space)
# ------------------------------
RENDER_CONFIG = {
    "WIDTH": 640,
    "HEIGHT": 480,
    "JOINT_THICKNESS": 3,
    "BODY_CENTER_THICKNESS": 10,
    "CLIP_BOUNDS_THICKNESS": 10,
    "TRACKED_BONE_THICKNESS": 6,
    "INFERRED_BONE_THICKNESS": 1,
}

# BGR
COLORS = {
    "background": (0, 0, 0),
    "center_point": (255, 0, 0),
    "tracked_joint": (68, 192, 68),
    "inferred_joint": (0, 255, 255),
    "inferred_bone": (128, 128, 128),
    "clipped_edge": (0, 0, 255),
    "correct": (0, 128, 0),
    "close": (0, 255, 255),
    "incorrect": (0, 0, 255),
    "text": (255, 255, 255),
}

# ------------------------------
# 3. Sensor emulation
# ------------------------------
TRACKING_CONFIG = {
    # Landmark visibility -> joint tracking state
    "TRACKED_VISIBILITY": 0.5,
    "INFERRED_VISIBILITY": 0.2,
    # Depth camera nominal focal length at 640x480 (px)
    "DEPTH_FOCAL_LENGTH_PX": 571.26,
    # World landmarks are hip-centred; push the subject in front of the camera (m)
    "NOMINAL_SUBJECT_DEPTH_M": 2.5,
    # Spine joint sits this fraction of the way from hip center to shoulder center
    "SPINE_RATIO": 0.2,
}

# ------------------------------
# 4. AI engine (MediaPipe Pose Landmarker)
# ------------------------------
AI_CONFIG = {
    "MODEL_CANDIDATES": [
        "pose_landmarker_full.task",
        "pose_landmarker_lite.task",
        str(_PROJECT_ROOT / "pose_landmarker_full.task"),
        str(_PROJECT_ROOT / "pose_landmarker_lite.task"),
    ],
}
