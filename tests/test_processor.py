import pytest

from posture_judge.tools.stance.evaluate import PoseVerdict
from posture_judge.tools.stance.processor import StanceProcessor
from posture_judge.tools.stance.skeleton import SkeletonTrackingState
from posture_judge.tools.stance.sources import SensorUnavailableError, TrackingMode, project_to_depth_image


class FakeSource:
    name = "fake"

    def __init__(self, frames, fail_at=None):
        self._frames = frames
        self.fail_at = fail_at
        self.started = False
        self.stopped = False
        self.mode = TrackingMode.DEFAULT

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def set_tracking_mode(self, mode):
        self.mode = mode

    def frames(self):
        for idx, skeletons in enumerate(self._frames):
            if idx == self.fail_at:
                raise RuntimeError("sensor dropped")
            yield skeletons

    def map_to_screen(self, point):
        return project_to_depth_image(point)


def test_handle_frame_evaluates_tracked_skeletons_only(make_skeleton):
    tracked = make_skeleton(tracking_id=1)
    far = make_skeleton(tracking_state=SkeletonTrackingState.POSITION_ONLY, tracking_id=2)
    processor = StanceProcessor(FakeSource([]))
    canvas, evaluations = processor.handle_frame([far, tracked])
    assert list(evaluations) == [1]
    assert evaluations[1]["verdict"] is PoseVerdict.CORRECT
    assert canvas.shape == (480, 640, 3)


def test_empty_frame_has_no_evaluations():
    canvas, evaluations = StanceProcessor(FakeSource([])).handle_frame([])
    assert evaluations == {}
    assert not canvas.any()


def test_process_records_every_frame(make_skeleton, standing_skeleton):
    source = FakeSource([[], [standing_skeleton], [standing_skeleton, make_skeleton(tracking_id=4)]])
    frames = StanceProcessor(source).process()
    assert source.started and source.stopped
    assert [f["frame"] for f in frames] == [0, 1, 2]
    assert [f["skeleton_count"] for f in frames] == [0, 1, 2]
    assert [len(f["evaluations"]) for f in frames] == [0, 1, 2]
    assert frames[2]["evaluations"][1]["tracking_id"] == 4


def test_process_respects_max_frames(standing_skeleton):
    source = FakeSource([[standing_skeleton]] * 5)
    assert len(StanceProcessor(source).process(max_frames=2)) == 2


def test_source_is_stopped_when_frames_fail(standing_skeleton):
    source = FakeSource([[standing_skeleton], [standing_skeleton]], fail_at=1)
    with pytest.raises(RuntimeError, match="sensor dropped"):
        StanceProcessor(source).process()
    assert source.stopped


class UnavailableSource(FakeSource):
    def start(self):
        raise SensorUnavailableError("no camera")


def test_failed_start_leaves_no_video_file(tmp_path):
    out = tmp_path / "overlay.mp4"
    with pytest.raises(SensorUnavailableError):
        StanceProcessor(UnavailableSource([])).process(output_video_path=str(out))
    assert not out.exists()


def test_video_written_for_started_source(tmp_path, standing_skeleton):
    out = tmp_path / "overlay.mp4"
    frames = StanceProcessor(FakeSource([[standing_skeleton]] * 3)).process(output_video_path=str(out))
    assert len(frames) == 3
    assert out.exists()
