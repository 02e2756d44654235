"""
Standing stance check (arms relaxed + feet together / feet apart) on a
depth-camera skeleton stream. Used by tools/stance_analyzer.py.
"""
from .evaluate import PoseVerdict, classify_pose, evaluate_stance
from .processor import StanceProcessor

__all__ = ["PoseVerdict", "classify_pose", "evaluate_stance", "StanceProcessor"]
