"""ジオコーディング（Nominatim互換API）

住所→座標（forward）と座標→住所（reverse）。リトライはしない。
describe() は失敗時に座標文字列へフォールバックする。
"""
import logging
from typing import Optional

import requests

from ..config import GEOCODER_BASE_URL, GEOCODER_USER_AGENT, GEOCODER_TIMEOUT
from ..errors import GeocodingError, ValidationError
from .geo import Coordinate

logger = logging.getLogger(__name__)


class GeocodingClient:
    def __init__(
        self,
        base_url: str = GEOCODER_BASE_URL,
        user_agent: str = GEOCODER_USER_AGENT,
        timeout: float = GEOCODER_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent

    def close(self):
        self.session.close()

    def _get(self, path: str, params: dict):
        url = f"{self.base_url}/{path}"
        try:
            r = self.session.get(url, params={"format": "json", **params}, timeout=self.timeout)
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            raise GeocodingError(f"geocoding request failed: {e}") from e
        except ValueError as e:
            raise GeocodingError(f"geocoding returned invalid JSON: {e}") from e

    def forward(self, address: str) -> Optional[Coordinate]:
        """住所→座標。該当なしならNone"""
        if not address or not address.strip():
            return None

        data = self._get("search", {"q": address.strip(), "limit": 1, "addressdetails": 1})
        if not isinstance(data, list) or not data:
            return None

        first = data[0]
        try:
            return Coordinate(float(first["lat"]), float(first["lon"]))
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise GeocodingError(f"invalid coordinates from geocoder: {first!r}") from e

    def reverse(self, coord: Coordinate) -> str:
        """座標→住所。住所が取れなければ座標文字列"""
        data = self._get(
            "reverse",
            {"lat": coord.latitude, "lon": coord.longitude, "addressdetails": 1},
        )
        if isinstance(data, dict) and data.get("display_name"):
            return data["display_name"]
        return str(coord)

    def describe(self, coord: Coordinate) -> str:
        """表示用の住所。ジオコーディング失敗時は座標文字列"""
        try:
            return self.reverse(coord)
        except GeocodingError as e:
            logger.warning(f"Reverse geocoding failed, falling back to coordinates: {e}")
            return str(coord)
