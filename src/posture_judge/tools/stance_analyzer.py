"""
Stance analyzer: replays a recorded skeleton stream through the stance processor
and summarizes per-frame verdicts.
"""
import asyncio
from collections import Counter
from typing import Any, Dict, List

from .stance.evaluate import PoseVerdict
from .stance.processor import StanceProcessor
from .stance.sources import ReplaySkeletonSource, TrackingMode


STANCE_ELEMENT = {
    "name": "Standing stance",
    "poses": ["arms relaxed + feet together", "arms relaxed + feet apart (35°)"],
}


def summarize_frames(frames: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Verdict counts over every evaluated skeleton, plus the most frequent verdict."""
    counts = Counter({v.value: 0 for v in PoseVerdict})
    evaluated_frames = 0
    for frame in frames:
        if frame["evaluations"]:
            evaluated_frames += 1
        for evaluation in frame["evaluations"]:
            counts[evaluation["verdict"].value] += 1

    dominant = None
    if sum(counts.values()) > 0:
        # Ties go to the better verdict.
        order = [v.value for v in PoseVerdict]
        dominant = max(order, key=lambda name: (counts[name], -order.index(name)))
    return {
        "frames": len(frames),
        "evaluated_frames": evaluated_frames,
        "verdict_counts": dict(counts),
        "dominant_verdict": dominant,
    }


class StanceAnalyzer:
    """Analyzer for the two standing stances on a recorded skeleton stream."""

    def __init__(self, *, show_video: bool = False, seated: bool = False):
        self.show_video = show_video
        self.mode = TrackingMode.SEATED if seated else TrackingMode.DEFAULT
        self.name = STANCE_ELEMENT["name"]
        self.description = (
            f"{STANCE_ELEMENT['name']}: " + " / ".join(STANCE_ELEMENT["poses"])
            + ". Correct / close / incorrect per frame."
        )

    def _analyze_sync(self, input_path: str, output_video_path: str | None = None) -> Dict[str, Any]:
        source = ReplaySkeletonSource(input_path, mode=self.mode)
        processor = StanceProcessor(source)
        raw_frames = processor.process(show_video=self.show_video, output_video_path=output_video_path)
        out = summarize_frames(raw_frames)
        out["raw_frames"] = raw_frames
        return out

    async def analyze(self, input_path: str, output_video_path: str | None = None) -> Dict[str, Any]:
        """Async wrapper for the synchronous replay to fit the tool interface"""
        return await asyncio.to_thread(self._analyze_sync, input_path, output_video_path)
