"""Errors raised by the frame sampler."""

from ffmpegx.exceptions import FFmpegXError


class FrameExtractionError(FFmpegXError):
    """Base class for frame sampler errors."""

    pass


class NoVideoStreamError(FrameExtractionError):
    """Raised when the probed file has no video stream."""

    pass


class UnknownFrameCountError(FrameExtractionError):
    """Raised when neither nb_frames nor duration x fps gives a frame count."""

    pass


class NotInitializedError(FrameExtractionError):
    """Raised when extract() is called before initialize()."""

    pass
