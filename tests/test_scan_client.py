import importlib.util
from pathlib import Path

import pytest
import requests

CLIENT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "scan_client.py"


@pytest.fixture()
def scan_client():
    found = importlib.util.spec_from_file_location("scan_client", CLIENT_PATH)
    module = importlib.util.module_from_spec(found)
    found.loader.exec_module(module)
    return module


class FakeResponse:
    def __init__(self, status_code, text, payload=None):
        self.status_code = status_code
        self.text = text
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("Expecting value")
        return self._payload


def test_non_json_reply_is_reported(scan_client, monkeypatch, capsys):
    monkeypatch.setattr(
        requests, "post", lambda *a, **kw: FakeResponse(502, "Bad Gateway")
    )

    assert scan_client.send_scan("NFC001234567890", "DEV001", "MAIN_GATE") is False
    assert "[-] 502: Bad Gateway" in capsys.readouterr().out


def test_error_reply_prints_error_code(scan_client, monkeypatch, capsys):
    monkeypatch.setattr(
        requests,
        "post",
        lambda *a, **kw: FakeResponse(
            404, "", {"ok": False, "error": "card_not_found"}
        ),
    )

    assert scan_client.send_scan("UNKNOWN", "DEV001", "MAIN_GATE") is False
    assert "[-] 404: card_not_found" in capsys.readouterr().out


def test_unreachable_server(scan_client, monkeypatch, capsys):
    def refuse(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(requests, "post", refuse)

    assert scan_client.send_scan("NFC001234567890", "DEV001", "MAIN_GATE") is False
    assert "unreachable" in capsys.readouterr().out
