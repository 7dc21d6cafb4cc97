"""Tests for settings parsed from the environment."""

import pytest

from presensi.core.config import Settings


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("http://a.example,http://b.example", ["http://a.example", "http://b.example"]),
        (" http://a.example , ,http://b.example ", ["http://a.example", "http://b.example"]),
        ('["http://a.example", "http://b.example"]', ["http://a.example", "http://b.example"]),
        ("*", ["*"]),
    ],
)
def test_cors_origins_from_env(monkeypatch, raw, expected):
    monkeypatch.setenv("CORS_ORIGINS", raw)
    assert Settings(_env_file=None).CORS_ORIGINS == expected


@pytest.mark.parametrize("raw,expected", [("api/", "/api"), ("/v1", "/v1"), ("", "")])
def test_api_prefix_normalised(monkeypatch, raw, expected):
    monkeypatch.setenv("API_PREFIX", raw)
    assert Settings(_env_file=None).API_PREFIX == expected
