"""Integration tests for the HTTP API."""
import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from urlparser.api import main
from urlparser.api.main import app, get_suffix_service
from urlparser.config import settings
from urlparser.suffixes.service import SuffixListService


@pytest.fixture
def service(tmp_path, suffix_text):
    """Suffix list service reading a local copy of the list."""
    list_file = tmp_path / "public_suffix_list.dat"
    list_file.write_text(suffix_text, encoding="utf-8")
    return SuffixListService(list_file=str(list_file), cache_path=str(tmp_path / "cache.dat"))


@pytest.fixture
def client(service):
    app.dependency_overrides[get_suffix_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def unavailable_client(tmp_path):
    """Client whose suffix list can never be loaded."""
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    service = SuffixListService(
        url="https://suffixes.test/list.dat",
        cache_path=str(tmp_path / "missing" / "cache.dat"),
        client=httpx.Client(transport=httpx.MockTransport(handler))
    )
    app.dependency_overrides[get_suffix_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestParseEndpoint:
    """Test POST /v1/parse."""

    def test_parse_full_url(self, client):
        response = client.post(
            "/v1/parse",
            json={"url": "https://nu.nl/film/5821479/bijzonder-einde-flikken.html?no=1&m=d#1"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["scheme"] == "https"
        assert data["is_secure"] is True
        assert data["host"] == "nu.nl"
        assert data["path"] == "film/5821479/bijzonder-einde-flikken.html"
        assert data["anchor"] == "1"
        assert data["query_params"] == {"no": "1", "m": "d"}
        assert data["tld"] == "nl"
        assert data["domain"] == "nu.nl"
        assert data["canonical"] == "https://nu.nl/film/5821479/bijzonder-einde-flikken.html?no=1&m=d#1"

    def test_parse_multi_label_suffix(self, client):
        data = client.post("/v1/parse", json={"url": "https://henk.co.uk/film/"}).json()
        assert data["tld"] == "co.uk"
        assert data["domain"] == "henk.co.uk"

    def test_parse_unlisted_host(self, client):
        data = client.post("/v1/parse", json={"url": "http://10.0.0.1/"}).json()
        assert data["tld"] is None
        assert data["domain"] is None

    def test_empty_url_rejected(self, client):
        response = client.post("/v1/parse", json={"url": ""})
        assert response.status_code == 422

    def test_suffix_list_unavailable(self, unavailable_client):
        response = unavailable_client.post("/v1/parse", json={"url": "https://nu.nl"})
        assert response.status_code == 503
        assert "Suffix list unavailable" in response.json()["detail"]


class TestResolveEndpoint:
    """Test POST /v1/resolve."""

    def test_resolve_host(self, client):
        response = client.post("/v1/resolve", json={"host": "henk.gs.hm.no"})
        assert response.status_code == 200
        assert response.json() == {"host": "henk.gs.hm.no", "tld": "gs.hm.no", "domain": "henk.gs.hm.no"}

    def test_host_normalized(self, client):
        data = client.post("/v1/resolve", json={"host": "  WWW.QuoteShirts.NL "}).json()
        assert data["host"] == "www.quoteshirts.nl"
        assert data["domain"] == "quoteshirts.nl"

    def test_blank_host_rejected(self, client):
        response = client.post("/v1/resolve", json={"host": "   "})
        assert response.status_code == 422


class TestHealthAndRefresh:
    """Test health reporting and suffix list refresh."""

    def test_degraded_before_load(self, client):
        data = client.get("/healthz").json()
        assert data["status"] == "degraded"
        assert data["suffix_list"]["loaded"] is False
        assert data["suffix_list"]["entries"] == 0

    def test_healthy_after_load(self, client, service):
        client.post("/v1/resolve", json={"host": "nu.nl"})
        data = client.get("/healthz").json()
        assert data["status"] == "healthy"
        assert data["suffix_list"]["entries"] == len(service.get_index())
        assert data["suffix_list"]["source"] == service.list_file

    def test_refresh(self, client):
        response = client.post("/v1/suffix-list/refresh")
        assert response.status_code == 200
        assert response.json()["loaded"] is True
        assert response.json()["entries"] > 0

    def test_refresh_failure(self, unavailable_client):
        response = unavailable_client.post("/v1/suffix-list/refresh")
        assert response.status_code == 503


class LoopRecordingService(SuffixListService):
    """Service that notes whether get_index ran on the event loop thread."""

    ran_on_event_loop = None

    def get_index(self, force_refresh=False):
        try:
            asyncio.get_running_loop()
            self.ran_on_event_loop = True
        except RuntimeError:
            self.ran_on_event_loop = False
        return super().get_index(force_refresh)


class TestStartup:
    """Test suffix index warm-up on startup."""

    @pytest.fixture(autouse=True)
    def cache_in_tmp(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "suffix_cache_path", str(tmp_path / "startup" / "cache.dat"))

    def test_warms_index_off_event_loop(self, tmp_path, suffix_text, monkeypatch):
        list_file = tmp_path / "public_suffix_list.dat"
        list_file.write_text(suffix_text, encoding="utf-8")
        service = LoopRecordingService(list_file=str(list_file), cache_path=str(tmp_path / "cache.dat"))
        monkeypatch.setattr(main, "suffix_service", service)

        with TestClient(app) as client:
            assert service.ran_on_event_loop is False
            data = client.get("/healthz").json()
        assert data["status"] == "healthy"
        assert (tmp_path / "startup").is_dir()

    def test_starts_without_suffix_list(self, tmp_path, monkeypatch):
        service = SuffixListService(list_file=str(tmp_path / "missing.dat"), cache_path=str(tmp_path / "cache.dat"))
        monkeypatch.setattr(main, "suffix_service", service)

        with TestClient(app) as client:
            data = client.get("/healthz").json()
        assert data["status"] == "degraded"
        assert data["suffix_list"]["loaded"] is False
