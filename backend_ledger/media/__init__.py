"""
Media duration extraction: provider detection and watch-time parsing for embeds.
"""

from backend_ledger.media.extractor import (
    get_media_data,
    get_media_duration,
    get_media_id,
    get_media_key,
    get_media_provider,
    get_youtube_duration,
)
from backend_ledger.media.providers import MediaProvider

__all__ = [
    "MediaProvider",
    "get_media_data",
    "get_media_duration",
    "get_media_id",
    "get_media_key",
    "get_media_provider",
    "get_youtube_duration",
]
