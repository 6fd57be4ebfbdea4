from skillforge.media.capture import (
    CaptureSession,
    CaptureSourceFactory,
    FfmpegScreenCapture,
    ICaptureSource,
)
from skillforge.media.models import MediaArtifact, check_artifact, load_media_file

__all__ = [
    "CaptureSession",
    "CaptureSourceFactory",
    "FfmpegScreenCapture",
    "ICaptureSource",
    "MediaArtifact",
    "check_artifact",
    "load_media_file",
]
