import logging
import os
from dotenv import load_dotenv

load_dotenv()

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Config:
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # Webcam used by the live MediaPipe source.
    CAMERA_INDEX = os.getenv("CAMERA_INDEX", "0")
    # Seated tracking mode is forwarded to the skeleton source only.
    SEATED_MODE = os.getenv("SEATED_MODE", "false").strip().lower() in ("1", "true", "yes", "on")
    # Optional explicit path to a Pose Landmarker .task model; otherwise searched on disk.
    POSE_MODEL_PATH = os.getenv("POSE_MODEL_PATH")

    @classmethod
    def validate(cls):
        if str(cls.LOG_LEVEL).upper() not in _LOG_LEVELS:
            raise ValueError(f"Unknown LOG_LEVEL {cls.LOG_LEVEL!r}. Known: {list(_LOG_LEVELS)}")
        try:
            int(cls.CAMERA_INDEX)
        except (TypeError, ValueError):
            raise ValueError(f"CAMERA_INDEX must be an integer, got {cls.CAMERA_INDEX!r}.") from None

    @classmethod
    def camera_index(cls) -> int:
        return int(cls.CAMERA_INDEX)


def configure_logging(level: str | None = None) -> None:
    """Route package logs through Rich so they interleave cleanly with CLI output."""
    from rich.logging import RichHandler

    level_name = str(level or Config.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
