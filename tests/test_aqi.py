"""
AQI lookup tests. HTTP is served by httpx.MockTransport; nothing leaves the process.
"""

import httpx
import pytest

from modules.lung.aqi import AQIClient, AQILookupError, City, aqi_category, extract_aqi


def pollution(index):
    return {"list": [{"main": {"aqi": index}, "components": {}}]}


GEO = [
    {"name": "Delhi", "lat": 28.65, "lon": 77.23, "country": "IN", "state": "Delhi"},
    {"name": "Delhi", "lat": 39.5, "lon": -84.3, "country": "US", "state": "Ohio"},
]


@pytest.fixture
def calls():
    return []


@pytest.fixture
def client(calls):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if request.url.path == "/geo/1.0/direct":
            if request.url.params["q"] == "Nowhere":
                return httpx.Response(200, json=[])
            return httpx.Response(200, json=GEO[: int(request.url.params["limit"])])
        if request.url.path == "/data/2.5/air_pollution":
            return httpx.Response(200, json=pollution(4))
        return httpx.Response(404)

    c = AQIClient("test-key", transport=httpx.MockTransport(handler))
    yield c
    c.close()


class TestExtract:

    @pytest.mark.parametrize("index, aqi", [(1, 25), (2, 75), (3, 125), (4, 200), (5, 350), (9, 100)])
    def test_index_mapping(self, index, aqi):
        assert extract_aqi(pollution(index)) == aqi

    @pytest.mark.parametrize("payload", [None, {}, {"list": []}, {"list": [{"main": {}}]}, "text"])
    def test_malformed(self, payload):
        assert extract_aqi(payload) is None


class TestCategory:

    @pytest.mark.parametrize("aqi, label", [
        (0, "Good"), (50, "Good"), (51, "Moderate"), (100, "Moderate"), (150, "Unhealthy"),
        (200, "Unhealthy"), (250, "Very Unhealthy"), (301, "Hazardous"), ("75", "Moderate"),
        ("", ""), (None, ""), ("abc", ""),
    ])
    def test_category(self, aqi, label):
        assert aqi_category(aqi) == label


class TestClient:

    def test_search_cities(self, client, calls):
        cities = client.search_cities("Delhi")
        assert [c.country for c in cities] == ["IN", "US"]
        assert cities[1].display_name == "Delhi, Ohio, US"
        assert calls[0].url.params["appid"] == "test-key"

    def test_blank_query_makes_no_request(self, client, calls):
        assert client.search_cities("   ") == []
        assert calls == []

    def test_aqi_for(self, client, calls):
        assert client.aqi_for(28.65, 77.23) == 200
        assert calls[0].url.params["lat"] == "28.65"

    def test_lookup(self, client, calls):
        assert client.lookup("Delhi") == 200
        assert calls[0].url.params["limit"] == "1"
        assert calls[1].url.params["lon"] == "77.23"

    def test_lookup_unknown_city(self, client):
        assert client.lookup("Nowhere") is None

    def test_missing_api_key(self):
        with AQIClient(None, transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[]))) as c:
            with pytest.raises(AQILookupError):
                c.search_cities("Delhi")

    def test_http_error_status(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(401, json={"message": "Invalid API key"}))
        with AQIClient("bad", transport=transport) as c:
            with pytest.raises(AQILookupError) as exc:
                c.aqi_for(1, 2)
        assert exc.value.status_code == 401

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with AQIClient("key", transport=httpx.MockTransport(handler)) as c:
            with pytest.raises(AQILookupError):
                c.lookup("Delhi")

    def test_invalid_json(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, content=b"<html>"))
        with AQIClient("key", transport=transport) as c:
            with pytest.raises(AQILookupError):
                c.aqi_for(1, 2)

    def test_unexpected_geocoding_payload(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"cod": 400}))
        with AQIClient("key", transport=transport) as c:
            with pytest.raises(AQILookupError):
                c.search_cities("Delhi")

    def test_bad_rows_skipped(self):
        rows = [{"name": "A"}, "junk", {"name": "B", "lat": "1.5", "lon": 2}]
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json=rows))
        with AQIClient("key", transport=transport) as c:
            assert c.search_cities("x") == [City("B", 1.5, 2.0)]
