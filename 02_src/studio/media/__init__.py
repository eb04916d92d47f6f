"""Media generation module."""

from .image import ImageGenerator
from .retry import call_with_quota_retry
from .video import ASPECT_RATIOS, VideoGenerator

__all__ = ["ImageGenerator", "VideoGenerator", "ASPECT_RATIOS", "call_with_quota_retry"]
