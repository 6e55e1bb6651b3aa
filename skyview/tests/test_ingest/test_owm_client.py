"""Tests for the OpenWeatherMap client with mocked httpx."""

import httpx
import pytest
import respx

from skyview.ingest.owm_client import (
    NOT_FOUND_MESSAGE,
    UNAUTHORIZED_MESSAGE,
    AuthenticationError,
    LocationNotFoundError,
    OpenWeatherClient,
    TransportError,
    WeatherProviderError,
)
from skyview.ingest.formatters import MalformedPayloadError

BASE = "https://test-owm.example.com"


@pytest.fixture
async def owm():
    client = OpenWeatherClient(api_key="test-key", base_url=BASE)
    yield client
    await client.aclose()


class TestCurrentWeather:
    @pytest.mark.asyncio
    @respx.mock
    async def test_success(self, owm: OpenWeatherClient, current_payload: dict):
        route = respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(200, json=current_payload)
        )

        weather = await owm.get_current_weather("London")
        assert weather.city == "London"
        assert weather.wind_speed == 15

        params = route.calls[0].request.url.params
        assert params["q"] == "London"
        assert params["units"] == "metric"
        assert params["appid"] == "test-key"
        assert params["lang"] == "en"

    @pytest.mark.asyncio
    @respx.mock
    async def test_by_coords(self, owm: OpenWeatherClient, current_payload: dict):
        route = respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(200, json=current_payload)
        )

        await owm.get_current_weather_by_coords(51.5, -0.12)
        params = route.calls[0].request.url.params
        assert params["lat"] == "51.5"
        assert params["lon"] == "-0.12"
        assert "q" not in params

    @pytest.mark.asyncio
    @respx.mock
    async def test_not_found(self, owm: OpenWeatherClient):
        respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(404, json={"cod": "404", "message": "city not found"})
        )

        with pytest.raises(LocationNotFoundError) as exc_info:
            await owm.get_current_weather("Atlantis")
        assert str(exc_info.value) == NOT_FOUND_MESSAGE
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    @respx.mock
    async def test_unauthorized(self, owm: OpenWeatherClient):
        respx.get(f"{BASE}/weather").mock(return_value=httpx.Response(401))

        with pytest.raises(AuthenticationError) as exc_info:
            await owm.get_current_weather("London")
        assert str(exc_info.value) == UNAUTHORIZED_MESSAGE

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_includes_status_text(self, owm: OpenWeatherClient):
        respx.get(f"{BASE}/weather").mock(return_value=httpx.Response(503))

        with pytest.raises(TransportError) as exc_info:
            await owm.get_current_weather("London")
        assert "Service Unavailable" in str(exc_info.value)
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error(self, owm: OpenWeatherClient):
        respx.get(f"{BASE}/weather").mock(side_effect=httpx.ConnectError("boom"))

        with pytest.raises(TransportError):
            await owm.get_current_weather("London")

    @pytest.mark.asyncio
    @respx.mock
    async def test_no_retry(self, owm: OpenWeatherClient):
        route = respx.get(f"{BASE}/weather").mock(return_value=httpx.Response(503))

        with pytest.raises(WeatherProviderError):
            await owm.get_current_weather("London")
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_malformed_payload(self, owm: OpenWeatherClient):
        respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(200, json={"name": "London"})
        )

        with pytest.raises(MalformedPayloadError):
            await owm.get_current_weather("London")


class TestForecast:
    @pytest.mark.asyncio
    @respx.mock
    async def test_success(self, owm: OpenWeatherClient, forecast_payload: dict):
        respx.get(f"{BASE}/forecast").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )

        days = await owm.get_forecast("London")
        assert len(days) == 5
        assert days[0].date == "2026-02-10"

    @pytest.mark.asyncio
    @respx.mock
    async def test_by_coords(self, owm: OpenWeatherClient, forecast_payload: dict):
        route = respx.get(f"{BASE}/forecast").mock(
            return_value=httpx.Response(200, json=forecast_payload)
        )

        days = await owm.get_forecast_by_coords(51.5, -0.12)
        assert len(days) == 5
        assert route.calls[0].request.url.params["lat"] == "51.5"

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_message(self, owm: OpenWeatherClient):
        respx.get(f"{BASE}/forecast").mock(return_value=httpx.Response(500))

        with pytest.raises(TransportError, match="Failed to fetch forecast data"):
            await owm.get_forecast("London")


class TestSearchCities:
    @pytest.mark.asyncio
    @respx.mock
    async def test_single_match(self, owm: OpenWeatherClient, current_payload: dict):
        respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(200, json=current_payload)
        )

        cities = await owm.search_cities("Lond")
        assert len(cities) == 1
        assert cities[0].name == "London"
        assert cities[0].country == "GB"
        assert cities[0].coordinates.lat == 51.5085

    @pytest.mark.asyncio
    @respx.mock
    async def test_not_found_returns_empty(self, owm: OpenWeatherClient):
        respx.get(f"{BASE}/weather").mock(return_value=httpx.Response(404))
        assert await owm.search_cities("Xyzzy") == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error_returns_empty(self, owm: OpenWeatherClient):
        respx.get(f"{BASE}/weather").mock(side_effect=httpx.ConnectTimeout("slow"))
        assert await owm.search_cities("London") == []


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_does_not_close_injected_client(self):
        http = httpx.AsyncClient()
        async with OpenWeatherClient(api_key="k", http=http):
            pass
        assert not http.is_closed
        await http.aclose()
