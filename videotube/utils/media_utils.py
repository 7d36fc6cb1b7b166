"""
Utility functions for inspecting uploaded media
"""
import ffmpeg
import structlog
from PIL import Image, UnidentifiedImageError

logger = structlog.get_logger()

IMAGE_CONTENT_PREFIX = "image/"
VIDEO_CONTENT_PREFIX = "video/"


def get_video_duration(video_path: str) -> int:
    """
    Extract video duration in seconds using ffmpeg

    Args:
        video_path: Path to the video file

    Returns:
        Duration in seconds (rounded to nearest integer), 0 when it cannot be probed
    """
    try:
        probe = ffmpeg.probe(video_path)
        duration = float(probe['format']['duration'])
        return int(round(duration))
    except (ffmpeg.Error, KeyError, ValueError, FileNotFoundError) as e:
        logger.warning("Could not probe video duration", path=video_path, error=str(e))
        return 0


def is_valid_image(image_path: str) -> bool:
    """Check that the file really is a decodable image"""
    try:
        with Image.open(image_path) as img:
            img.verify()
        return True
    except (UnidentifiedImageError, OSError) as e:
        logger.warning("Uploaded file is not a valid image", path=image_path, error=str(e))
        return False
