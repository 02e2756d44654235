"""
posture_judge - stance checker for depth-camera skeleton streams.
"""

__version__ = "0.1.0"
