import pytest
from fastapi.testclient import TestClient

from adb_api.main import app

from conftest import FakeDevice

client = TestClient(app)


@pytest.fixture
def api_key():
    return "test-api-key"


@pytest.fixture
def headers(api_key):
    return {"X-API-Key": api_key}


@pytest.fixture
def device(monkeypatch):
    fake = FakeDevice()
    monkeypatch.setattr('adb_api.main.TOOLS.device', fake)
    return fake


@pytest.fixture(autouse=True)
def mock_settings(api_key, monkeypatch):
    monkeypatch.setattr('adb_api.config.settings.api_key', api_key)
    yield


class TestHealthEndpoint:
    def test_health_endpoint(self):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "adb-api"
        assert response.headers["Cache-Control"] == "no-store"


class TestToolsEndpoint:
    def test_tools_without_api_key(self):
        response = client.get("/tools")
        assert response.status_code == 401

    def test_tools_with_invalid_api_key(self):
        response = client.get("/tools", headers={"X-API-Key": "invalid-key"})
        assert response.status_code == 401

    def test_list_tools(self, headers):
        response = client.get("/tools", headers=headers)
        assert response.status_code == 200
        names = [t["name"] for t in response.json()]
        assert "adb_natural" in names
        assert "adb_install" not in names
        natural = next(t for t in response.json() if t["name"] == "adb_natural")
        assert natural["inputSchema"]["required"] == ["action"]

    def test_call_natural(self, headers, device):
        response = client.post("/tools/adb_natural", json={"action": "Go Home"}, headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["isError"] is False
        assert data["content"][0]["type"] == "text"
        assert data["content"][0]["text"].startswith("Executed: Go to Home Screen")
        assert device.commands == ["input keyevent 3"]

    def test_call_natural_no_match(self, headers, device):
        response = client.post("/tools/adb_natural", json={"action": "xyz123"}, headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["isError"] is True
        assert "Available commands" in data["content"][0]["text"]
        assert device.commands == []

    def test_call_without_body(self, headers, device):
        response = client.post("/tools/adb_list_packages", headers=headers)
        assert response.status_code == 200
        assert response.json()["isError"] is False
        assert device.commands == ["pm list packages"]

    def test_call_unknown_tool(self, headers, device):
        response = client.post("/tools/adb_install", json={"apk_path": "a.apk"}, headers=headers)
        assert response.status_code == 404

    def test_call_without_api_key(self, device):
        response = client.post("/tools/adb_natural", json={"action": "go home"})
        assert response.status_code == 401
        assert device.commands == []


class TestResolveEndpoint:
    def test_resolve_without_api_key(self):
        response = client.get("/resolve?q=go home")
        assert response.status_code == 401

    def test_resolve_found(self, headers, device):
        response = client.get("/resolve", params={"q": "up volume"}, headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["found"] is True
        assert data["phrase"] == "volume up"
        assert data["strategy"] == "token_overlap"
        assert data["command"]["command"] == "input keyevent 24"
        assert device.commands == []

    def test_resolve_not_found(self, headers):
        response = client.get("/resolve", params={"q": "frobnicate the quux"}, headers=headers)
        data = response.json()
        assert data["found"] is False
        assert "go home" in data["available"]


class TestCatalogEndpoints:
    def test_commands(self, headers):
        response = client.get("/commands", headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data[0] == {
            "phrase": "go home",
            "name": "Go to Home Screen",
            "description": "Navigate to the Android home screen",
            "command": "input keyevent 3",
        }

    def test_keys(self, headers):
        response = client.get("/keys", headers=headers)
        assert response.status_code == 200
        assert response.json()["keys"]["LOCK"] == 276


class TestOpenAccess:
    def test_no_api_key_configured(self, monkeypatch):
        monkeypatch.setattr('adb_api.config.settings.api_key', "")
        response = client.get("/tools")
        assert response.status_code == 200
