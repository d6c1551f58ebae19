"""
OpenWeatherMap air-quality lookup.

Resolves a city name to coordinates (geocoding API) and reads the current
air-pollution index for it. OWM reports a 1-5 index; it is mapped onto the
0-500 AQI scale the questionnaire uses.

Usage:
    client = AQIClient(api_key=os.environ["OPENWEATHER_API_KEY"])
    aqi = client.lookup("Delhi")
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openweathermap.org"
OWM_INDEX_TO_AQI = {1: 25, 2: 75, 3: 125, 4: 200, 5: 350}
UNKNOWN_INDEX_AQI = 100


class AQILookupError(Exception):
    """AQI lookup failed (network, HTTP status, or payload)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class City:
    name: str
    lat: float
    lon: float
    country: str = ""
    state: str = ""

    @property
    def display_name(self) -> str:
        return ", ".join(p for p in (self.name, self.state, self.country) if p)


def extract_aqi(payload: Any) -> Optional[int]:
    try:
        index = payload["list"][0]["main"]["aqi"]
        return OWM_INDEX_TO_AQI.get(index, UNKNOWN_INDEX_AQI)
    except (KeyError, IndexError, TypeError):
        return None


def aqi_category(aqi: Any) -> str:
    try:
        v = int(aqi)
    except (TypeError, ValueError):
        return ""
    if v <= 50:
        return "Good"
    if v <= 100:
        return "Moderate"
    if v <= 200:
        return "Unhealthy"
    if v <= 300:
        return "Very Unhealthy"
    return "Hazardous"


class AQIClient:
    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "AQIClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        if not self.api_key:
            raise AQILookupError("OpenWeatherMap API key is not configured")
        try:
            resp = self._client.get(path, params={**params, "appid": self.api_key})
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning("AQI request %s failed: HTTP %s", path, e.response.status_code)
            raise AQILookupError(f"HTTP {e.response.status_code} from {path}", e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.warning("AQI request %s failed: %s", path, e)
            raise AQILookupError(str(e)) from e
        except ValueError as e:
            raise AQILookupError(f"Invalid JSON from {path}") from e

    def search_cities(self, query: str, limit: int = 5) -> List[City]:
        query = (query or "").strip()
        if not query:
            return []
        data = self._get("/geo/1.0/direct", {"q": query, "limit": limit})
        if not isinstance(data, list):
            raise AQILookupError("Unexpected geocoding payload")
        cities = []
        for row in data:
            try:
                cities.append(City(
                    name=row["name"],
                    lat=float(row["lat"]),
                    lon=float(row["lon"]),
                    country=row.get("country", ""),
                    state=row.get("state", ""),
                ))
            except (AttributeError, KeyError, TypeError, ValueError):
                continue
        return cities

    def aqi_for(self, lat: float, lon: float) -> Optional[int]:
        return extract_aqi(self._get("/data/2.5/air_pollution", {"lat": lat, "lon": lon}))

    def lookup(self, query: str) -> Optional[int]:
        cities = self.search_cities(query, limit=1)
        if not cities:
            return None
        return self.aqi_for(cities[0].lat, cities[0].lon)
