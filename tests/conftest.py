"""
Pytest fixtures for the MaSécurité API. Upstream HTTP, OpenAI and Supabase are mocked.
"""

from __future__ import annotations

import copy
from unittest.mock import MagicMock

import pytest

from masecurite.core.config import Settings, get_settings

PASSWORD_SHA1 = "5BAA61E4C9B93F3F0682250B6CF8331B7EE68FD8"  # sha1("password")

HIBP_BREACHES = [
    {
        "Name": "Adobe",
        "Title": "Adobe",
        "Domain": "adobe.com",
        "BreachDate": "2013-10-04",
        "AddedDate": "2013-12-04T00:00:00Z",
        "PwnCount": 152445165,
        "Description": "In October 2013, 153 million Adobe accounts were breached...",
        "DataClasses": ["Email addresses", "Password hints", "Passwords", "Usernames"],
        "IsVerified": True,
        "IsSensitive": False,
        "LogoPath": "https://haveibeenpwned.com/Content/Images/PwnedLogos/Adobe.png",
    },
    {
        "Name": "Canva",
        "Title": "Canva",
        "Domain": "canva.com",
        "BreachDate": "2019-05-24",
        "PwnCount": 137272116,
        "DataClasses": ["Email addresses", "Geographic locations", "Names"],
        "IsVerified": True,
    },
]

LEAKCHECK_PAYLOAD = {
    "success": True,
    "found": 3,
    "quota": 400,
    "result": [
        {
            "source": {"name": "Collection1", "breach_date": "2019-01"},
            "email": "test@example.com",
            "password": "hunter2025",
            "fields": ["email", "password"],
        },
        {
            "source": {"name": "Twitter.com", "breach_date": "2021-07"},
            "email": "test@example.com",
            "username": "tester",
            "fields": ["email", "username"],
        },
        {
            "source": {"name": "Stealer Logs"},
            "email": "test@example.com",
            "password": "",
            "fields": ["email"],
        },
    ],
}


@pytest.fixture
def hibp_breaches():
    return copy.deepcopy(HIBP_BREACHES)


@pytest.fixture
def leakcheck_payload():
    return copy.deepcopy(LEAKCHECK_PAYLOAD)


@pytest.fixture
def password_sha1():
    return PASSWORD_SHA1


@pytest.fixture
def settings():
    return Settings(
        hibp_api_key="hibp-test-key",
        leakcheck_api_key="leakcheck-test-key",
        openai_api_key="sk-test",
        supabase_url="https://project.supabase.co",
        supabase_service_role_key="service-role-test",
        http_timeout=5.0,
    )


@pytest.fixture
def make_response():
    def _make(status_code=200, json_data=None, text=""):
        resp = MagicMock()
        resp.status_code = status_code
        if isinstance(json_data, Exception):
            resp.json.side_effect = json_data
        else:
            resp.json.return_value = json_data
        resp.text = text
        return resp

    return _make


@pytest.fixture
def client(settings):
    """FastAPI TestClient with configuration pinned to the `settings` fixture."""
    from fastapi.testclient import TestClient

    from masecurite.main import app

    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
