"""Tests for icon code mapping."""

import pytest

from skyview.ingest.icons import FALLBACK_ICON, ICON_MAP, weather_icon


class TestWeatherIcon:
    @pytest.mark.parametrize("prefix", ["01", "02", "03", "04", "09", "10", "11", "13", "50"])
    def test_day_and_night_codes_known(self, prefix: str):
        assert f"{prefix}d" in ICON_MAP
        assert f"{prefix}n" in ICON_MAP

    def test_clear_day_and_night_differ(self):
        assert weather_icon("01d") != weather_icon("01n")

    def test_unknown_code_falls_back(self):
        assert weather_icon("99x") == FALLBACK_ICON

    def test_empty_and_none_fall_back(self):
        assert weather_icon("") == FALLBACK_ICON
        assert weather_icon(None) == FALLBACK_ICON

    def test_known_codes_never_fallback(self):
        assert all(weather_icon(code) != FALLBACK_ICON for code in ICON_MAP)
