"""
Per-frame stance processing: evaluate every tracked skeleton once, then draw
the overlay with that verdict.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from . import config
from .evaluate import evaluate_stance
from .renderer import SkeletonRenderer
from .skeleton import Skeleton, SkeletonTrackingState
from .sources import SkeletonSource

logger = logging.getLogger(__name__)

WINDOW_NAME = "Posture Judge - Stance"


class StanceProcessor:
    def __init__(self, source: SkeletonSource, renderer: Optional[SkeletonRenderer] = None):
        self.source = source
        self.renderer = renderer or SkeletonRenderer(source.map_to_screen)

    def handle_frame(self, skeletons: Sequence[Skeleton]) -> Tuple[np.ndarray, Dict[int, Dict[str, Any]]]:
        """Frame callback. Returns the overlay and {skeleton index: evaluation}."""
        evaluations = {
            idx: evaluate_stance(skeleton)
            for idx, skeleton in enumerate(skeletons)
            if skeleton.tracking_state is SkeletonTrackingState.TRACKED
        }
        canvas = self.renderer.render_frame(skeletons, evaluations)
        return canvas, evaluations

    def process(self, show_video: bool = False, output_video_path: Optional[str] = None,
                max_frames: Optional[int] = None) -> List[Dict[str, Any]]:
        extracted_data = []
        out = None
        # No output file unless the source actually starts.
        self.source.start()
        try:
            if output_video_path:
                fourcc = cv2.VideoWriter_fourcc(*"mp4v")
                size = (config.RENDER_CONFIG["WIDTH"], config.RENDER_CONFIG["HEIGHT"])
                out = cv2.VideoWriter(output_video_path, fourcc, 30, size)

            for frame_idx, skeletons in enumerate(self.source.frames()):
                if max_frames is not None and frame_idx >= max_frames:
                    break
                canvas, evaluations = self.handle_frame(skeletons)
                extracted_data.append({
                    "frame": frame_idx,
                    "skeleton_count": len(skeletons),
                    "evaluations": [evaluations[i] for i in sorted(evaluations)],
                })
                if out:
                    out.write(canvas)
                if show_video:
                    cv2.imshow(WINDOW_NAME, canvas)
                    if cv2.waitKey(1) & 0xFF == ord("q"):
                        break
        finally:
            self.source.stop()
            if out:
                out.release()
            if show_video:
                cv2.destroyAllWindows()

        logger.info("Processed %d frames from %s source", len(extracted_data), self.source.name)
        return extracted_data
