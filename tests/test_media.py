"""
Tests for media attention-time extraction (media.extractor).
"""

from __future__ import annotations

import pytest

from backend_ledger.media import (
    MediaProvider,
    get_media_data,
    get_media_duration,
    get_media_id,
    get_media_key,
    get_media_provider,
    get_youtube_duration,
)

WATCHTIME_URL = (
    "https://www.youtube.com/api/stats/watchtime?docid=kLiLOkzLetE"
    "&st=11.338,21.339,25.000&et=21.339,25.000,26.100&ver=2"
)


def test_provider_from_telemetry_url():
    assert get_media_provider(WATCHTIME_URL) is MediaProvider.YOUTUBE


@pytest.mark.parametrize(
    "url",
    [None, "https://www.youtube.com/watch?v=kLiLOkzLetE", "https://example.com/api/stats/watchtime?docid=x"],
)
def test_provider_none_for_other_urls(url):
    assert get_media_provider(url) is None


def test_media_data_parses_query():
    data = get_media_data(WATCHTIME_URL, MediaProvider.YOUTUBE)
    assert data["docid"] == "kLiLOkzLetE"
    assert data["st"] == "11.338,21.339,25.000"
    assert data["et"] == "21.339,25.000,26.100"


def test_media_data_none_without_query_or_provider():
    assert get_media_data("https://www.youtube.com/api/stats/watchtime", MediaProvider.YOUTUBE) is None
    assert get_media_data(WATCHTIME_URL, None) is None
    assert get_media_data(None, MediaProvider.YOUTUBE) is None


def test_media_id_and_key():
    data = get_media_data(WATCHTIME_URL, "YOUTUBE")
    media_id = get_media_id(data, MediaProvider.YOUTUBE)
    assert media_id == "kLiLOkzLetE"
    assert get_media_key(media_id, MediaProvider.YOUTUBE) == "youtube:kLiLOkzLetE"


def test_media_id_and_key_none_inputs():
    assert get_media_id(None, MediaProvider.YOUTUBE) is None
    assert get_media_id({"st": "1"}, MediaProvider.YOUTUBE) is None
    assert get_media_key(None, MediaProvider.YOUTUBE) is None
    assert get_media_key("abc", None) is None


def test_youtube_duration_multiple_segments():
    data = {"st": "11.338,21.339,25.000", "et": "21.339,25.000,26.100"}
    assert get_youtube_duration(data) == 14762


def test_youtube_duration_single_segment():
    assert get_youtube_duration({"st": "11.338", "et": "21.339"}) == 10001


@pytest.mark.parametrize(
    "data",
    [
        None,
        {},
        {"st": "1,2"},
        {"st": "1,2", "et": "3"},
        {"st": "a", "et": "3"},
        {"st": "1", "et": ""},
    ],
)
def test_youtube_duration_malformed_is_zero(data):
    assert get_youtube_duration(data) == 0


def test_media_duration_dispatch():
    data = get_media_data(WATCHTIME_URL, MediaProvider.YOUTUBE)
    assert get_media_duration(data, MediaProvider.YOUTUBE) == 14762
    assert get_media_duration(data, "YOUTUBE") == 14762
    assert get_media_duration(data, None) == 0
    assert get_media_duration(data, "VIMEO") == 0
