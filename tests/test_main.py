"""Tests for the command line entry point."""

import json
from pathlib import Path

import pytest
import requests

from blytz.config import settings
from blytz.main import main

from .conftest import BASE_URL

BUNDLED_MODEL_CONFIG = Path(__file__).resolve().parents[1] / "config" / "model_config.yaml"


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "state.json"


@pytest.fixture
def run(monkeypatch, session, state_file):
    monkeypatch.setattr(requests, "Session", lambda: session)

    def _run(*args):
        return main(["--api", BASE_URL, "--state", str(state_file), *args])

    return _run


def test_products(run, capsys):
    assert run("products", "--category", "Audio") == 0

    assert "Catalog (backend)" in capsys.readouterr().out


def test_cart_add_persists(run, capsys, state_file, backend):
    assert run("cart", "add", "1", "-q", "2") == 0

    assert "2 items, total $299.98" in capsys.readouterr().out
    saved = json.loads(state_file.read_text())
    assert saved["cart-storage"]["items"][0]["quantity"] == 2
    assert backend.cart["1"]["quantity"] == 2


def test_cart_add_unknown_product(run, capsys):
    assert run("cart", "add", "999") == 1

    assert "Unknown product 999" in capsys.readouterr().out


def test_cart_offline_shows_pending(run, capsys, backend):
    run("cart", "add", "2")
    backend.offline = True

    assert run("cart", "set", "2", "3") == 0

    out = capsys.readouterr().out
    assert "3 items, total $897.00" in out
    assert "Not yet synced" in out


def test_login(run, capsys, state_file):
    assert run("login", "shopper@blytz.io", "secret") == 0

    assert "Signed in as shopper@blytz.io" in capsys.readouterr().out
    assert json.loads(state_file.read_text())["access_token"] == "token-123"


def test_login_rejected(run, capsys):
    assert run("login", "shopper@blytz.io", "nope") == 1

    assert "Invalid credentials" in capsys.readouterr().out


def test_cart_show_recovers_from_corrupt_state(run, capsys, state_file):
    state_file.write_text('{"cart-storage": {"items": [')

    assert run("cart", "show") == 0

    assert "0 items, total $0.00" in capsys.readouterr().out
    assert json.loads(state_file.read_text())["cart-storage"] == {"items": []}


def test_chat_without_model_config(run, capsys, monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "chat_config_path", str(tmp_path / "missing.yaml"))

    assert run("chat", "any deals today?") == 0

    assert settings.chat_fallback_message in capsys.readouterr().out


def test_chat_without_api_key(run, capsys, monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "chat_config_path", str(BUNDLED_MODEL_CONFIG))
    monkeypatch.setattr(settings, "secrets_env_file", str(tmp_path / ".env"))
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)

    assert run("chat", "any deals today?") == 0

    assert settings.chat_fallback_message in capsys.readouterr().out


def test_chat_unknown_model(run, capsys, monkeypatch):
    monkeypatch.setattr(settings, "chat_config_path", str(BUNDLED_MODEL_CONFIG))

    assert run("chat", "hello", "--model", "no-such-model") == 0

    assert settings.chat_fallback_message in capsys.readouterr().out
