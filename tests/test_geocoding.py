"""ジオコーディングクライアントのテスト — HTTPはスタブ"""
import pytest
import requests

from kissa.errors import GeocodingError
from kissa.services.geo import Coordinate
from kissa.services.geocoding import GeocodingClient


class FakeResponse:
    def __init__(self, payload=None, status_code=200, invalid_json=False):
        self.payload = payload
        self.status_code = status_code
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value")
        return self.payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.headers = {}
        self.response = response
        self.exc = exc
        self.calls = []
        self.closed = False

    def close(self):
        self.closed = True

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout, "headers": dict(self.headers)})
        if self.exc:
            raise self.exc
        return self.response


def _client(session):
    return GeocodingClient(
        base_url="https://geo.example.com/", user_agent="Kissa-Test/1.0", timeout=2, session=session,
    )


class TestForward:
    def test_found(self):
        session = FakeSession(FakeResponse([{"lat": "35.0116", "lon": "135.7681", "display_name": "京都"}]))
        coord = _client(session).forward(" 京都市 ")

        assert coord == Coordinate(35.0116, 135.7681)
        call = session.calls[0]
        assert call["url"] == "https://geo.example.com/search"
        assert call["params"]["q"] == "京都市"
        assert call["params"]["format"] == "json"
        assert call["timeout"] == 2
        assert call["headers"]["User-Agent"] == "Kissa-Test/1.0"

    def test_not_found(self):
        assert _client(FakeSession(FakeResponse([]))).forward("nowhere") is None

    def test_blank_address_skips_request(self):
        session = FakeSession(FakeResponse([]))
        assert _client(session).forward("   ") is None
        assert session.calls == []

    @pytest.mark.parametrize("row", [{"lat": "abc", "lon": "1"}, {"lon": "1"}, {"lat": "95", "lon": "0"}])
    def test_bad_coordinates(self, row):
        with pytest.raises(GeocodingError):
            _client(FakeSession(FakeResponse([row]))).forward("x")

    def test_http_error(self):
        with pytest.raises(GeocodingError):
            _client(FakeSession(FakeResponse(status_code=503))).forward("x")

    def test_network_error(self):
        with pytest.raises(GeocodingError):
            _client(FakeSession(exc=requests.ConnectionError("down"))).forward("x")


class TestReverse:
    def test_display_name(self):
        session = FakeSession(FakeResponse({"display_name": "京都府京都市中京区"}))
        assert _client(session).reverse(Coordinate(35.0116, 135.7681)) == "京都府京都市中京区"
        params = session.calls[0]["params"]
        assert session.calls[0]["url"] == "https://geo.example.com/reverse"
        assert params["lat"] == 35.0116
        assert params["lon"] == 135.7681

    def test_missing_display_name_falls_back_to_coordinates(self):
        client = _client(FakeSession(FakeResponse({"error": "Unable to geocode"})))
        assert client.reverse(Coordinate(35.0116, 135.7681)) == "35.011600, 135.768100"

    def test_invalid_json_raises(self):
        with pytest.raises(GeocodingError):
            _client(FakeSession(FakeResponse(invalid_json=True))).reverse(Coordinate(0, 0))

    def test_describe_degrades_on_failure(self):
        client = _client(FakeSession(exc=requests.Timeout("slow")))
        assert client.describe(Coordinate(-33.8688, 151.2093)) == "-33.868800, 151.209300"


class TestLifecycle:
    def test_close_closes_session(self):
        session = FakeSession()
        _client(session).close()
        assert session.closed

    def test_dependency_closes_after_request(self, monkeypatch):
        from kissa.routes import geocoding as geocoding_routes

        sessions = []

        def make_client():
            session = FakeSession(FakeResponse({"display_name": "京都府京都市"}))
            sessions.append(session)
            return _client(session)

        monkeypatch.setattr(geocoding_routes, "GeocodingClient", make_client)
        gen = geocoding_routes.get_geocoder()
        client = next(gen)
        assert client.describe(Coordinate(35.0116, 135.7681)) == "京都府京都市"
        assert not sessions[0].closed
        with pytest.raises(StopIteration):
            next(gen)
        assert sessions[0].closed
