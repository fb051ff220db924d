"""Third-party media providers whose embed telemetry feeds publisher attention time."""

from __future__ import annotations

from enum import Enum


class MediaProvider(str, Enum):
    YOUTUBE = "YOUTUBE"


# Telemetry endpoint prefix per provider; first match wins.
PROVIDER_ENDPOINT_PREFIXES: dict[MediaProvider, str] = {
    MediaProvider.YOUTUBE: "https://www.youtube.com/api/stats/watchtime?",
}

# Query parameter carrying the embedded media id.
PROVIDER_ID_PARAMS: dict[MediaProvider, str] = {
    MediaProvider.YOUTUBE: "docid",
}


def coerce_provider(value: MediaProvider | str | None) -> MediaProvider | None:
    """Accept an enum member or its name; unknown values → None."""
    if value is None or isinstance(value, MediaProvider):
        return value
    try:
        return MediaProvider(str(value).upper())
    except ValueError:
        return None
