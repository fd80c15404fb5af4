"""Decoding, encoding and export of recordings."""

from features.media.video_meta import VideoMetaHandler, read_video_meta
from features.media.frame_source import FrameSource
from features.media.gif_encoder import GifEncoder, compute_frame_delay
from features.media.raw_copy import export_raw_copy

__all__ = [
    "VideoMetaHandler",
    "read_video_meta",
    "FrameSource",
    "GifEncoder",
    "compute_frame_delay",
    "export_raw_copy",
]
