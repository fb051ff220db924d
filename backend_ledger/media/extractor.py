"""
Attention-time extraction from media-embed telemetry.

A watch-time ping carries comma-separated segment start (st) and end (et)
times in seconds; a seek or resume adds a segment. The summed segment length
becomes the publisher's media duration in milliseconds. Malformed telemetry
is never an error: it contributes zero.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping
from urllib.parse import parse_qsl, urlsplit

from backend_ledger.ledger_logging import get_logger
from backend_ledger.media.providers import (
    PROVIDER_ENDPOINT_PREFIXES,
    PROVIDER_ID_PARAMS,
    MediaProvider,
    coerce_provider,
)

logger = get_logger(__name__)


def get_media_provider(url: str | None) -> MediaProvider | None:
    """Provider whose telemetry endpoint the URL hits, or None."""
    if url is None:
        return None
    for provider, prefix in PROVIDER_ENDPOINT_PREFIXES.items():
        if url.startswith(prefix):
            return provider
    return None


def get_media_data(url: str | None, provider: MediaProvider | str | None) -> dict[str, str] | None:
    """Parse the telemetry query string into a flat dict (last value wins for repeated keys)."""
    provider = coerce_provider(provider)
    if url is None or provider is None:
        return None
    query = urlsplit(url).query
    if not query:
        return None
    return dict(parse_qsl(query, keep_blank_values=True))


def get_media_id(data: Mapping[str, Any] | None, provider: MediaProvider | str | None) -> str | None:
    provider = coerce_provider(provider)
    if data is None or provider is None:
        return None
    param = PROVIDER_ID_PARAMS.get(provider)
    if param is None:
        return None
    value = data.get(param)
    return str(value) if value is not None else None


def get_media_key(media_id: str | None, provider: MediaProvider | str | None) -> str | None:
    """Stable map key "<provider>:<id>" merging repeated telemetry for one video."""
    provider = coerce_provider(provider)
    if media_id is None or provider is None:
        return None
    return f"{provider.value.lower()}:{media_id}"


def _parse_segments(raw: Any) -> list[float] | None:
    if not isinstance(raw, str):
        return None
    try:
        return [float(part) for part in raw.split(",")]
    except ValueError:
        return None


def get_youtube_duration(data: Mapping[str, Any] | None) -> int:
    """
    Watched milliseconds from st/et segment lists.

    {"st": "11.338,21.339,25.000", "et": "21.339,25.000,26.100"} -> 14762
    Missing fields, non-numeric parts or lists of different length -> 0.
    """
    if data is None:
        return 0
    starts = _parse_segments(data.get("st"))
    ends = _parse_segments(data.get("et"))
    if starts is None or ends is None:
        return 0
    if len(starts) != len(ends):
        logger.debug("media_segments_mismatch", starts=len(starts), ends=len(ends))
        return 0
    seconds = sum(end - start for start, end in zip(starts, ends))
    return int(seconds * 1000)


_DURATION_EXTRACTORS: dict[MediaProvider, Callable[[Mapping[str, Any] | None], int]] = {
    MediaProvider.YOUTUBE: get_youtube_duration,
}


def get_media_duration(data: Mapping[str, Any] | None, provider: MediaProvider | str | None) -> int:
    """Dispatch to the provider's extractor; unknown provider -> 0."""
    provider = coerce_provider(provider)
    extractor = _DURATION_EXTRACTORS.get(provider) if provider is not None else None
    if extractor is None:
        return 0
    return extractor(data)
