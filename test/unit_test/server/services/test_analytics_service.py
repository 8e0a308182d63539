"""Unit tests for analytics helpers."""

import pytest

from streamo.server.services.analytics import DEFAULT_COLOR, platform_color


@pytest.mark.parametrize(
    "name,expected",
    [("Spotify", "#1DB954"), (" apple music ", "#FA243C"), ("YouTube Music", "#FF0000"), ("Napster", DEFAULT_COLOR)],
)
def test_platform_color(name, expected):
    assert platform_color(name) == expected
