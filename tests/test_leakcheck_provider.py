"""
Tests for the LeakCheck search and its derived fields.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from masecurite.models.breach import LeakCheckResult
from masecurite.services.breach.base import (
    MissingConfigurationError,
    UpstreamError,
    UpstreamSchemaError,
)
from masecurite.services.breach.leakcheck_provider import LeakCheckProvider

GET = "masecurite.services.breach.base.requests.get"


def test_entries_are_normalized(make_response, leakcheck_payload):
    provider = LeakCheckProvider(api_key="lc-key")
    with patch(GET, return_value=make_response(200, leakcheck_payload)) as get:
        result = provider.search("test@example.com", "email")

    assert result.success is True
    assert result.found == 3
    assert result.quota == 400
    assert len(result.entries) == 3

    first, second, third = result.entries
    assert first.source == "Collection1"
    assert first.breach_date == "2019-01"
    assert first.password == "hunter2025"
    assert second.username == "tester"
    assert second.password is None
    # empty strings become null
    assert third.password is None
    assert third.breach_date is None

    kwargs = get.call_args.kwargs
    assert get.call_args.args[0].endswith("/query/test%40example.com")
    assert kwargs["headers"]["X-API-Key"] == "lc-key"
    assert kwargs["params"] == {"type": "email"}


def test_derived_fields_follow_entries(make_response, leakcheck_payload):
    provider = LeakCheckProvider(api_key="lc-key")
    with patch(GET, return_value=make_response(200, leakcheck_payload)):
        result = provider.search("test@example.com")

    assert result.fields == ["email", "password", "username"]
    assert result.password_count == 1
    assert result.has_passwords is True

    dumped = result.model_dump(mode="json", by_alias=True)
    assert dumped["passwordCount"] == 1
    assert dumped["hasPasswords"] is True
    assert dumped["entries"][0]["breachDate"] == "2019-01"


def test_missing_source_defaults_to_unknown(make_response):
    payload = {"success": True, "found": 1, "result": [{"email": "a@b.be"}]}
    provider = LeakCheckProvider(api_key="lc-key")
    with patch(GET, return_value=make_response(200, payload)):
        result = provider.search("a@b.be")

    assert result.entries[0].source == "Unknown"
    assert result.quota == 0


def test_missing_key_raises_without_request():
    provider = LeakCheckProvider(api_key=None)
    with patch(GET) as get:
        with pytest.raises(MissingConfigurationError):
            provider.search("test@example.com")
    get.assert_not_called()


def test_upstream_error_status_raises(make_response):
    provider = LeakCheckProvider(api_key="lc-key")
    with patch(GET, return_value=make_response(401, {"success": False, "error": "Invalid X-API-Key"})):
        with pytest.raises(UpstreamError):
            provider.search("test@example.com")


def test_schema_mismatch_raises(make_response):
    provider = LeakCheckProvider(api_key="lc-key")
    with patch(GET, return_value=make_response(200, {"result": "not-a-list"})):
        with pytest.raises(UpstreamSchemaError):
            provider.search("test@example.com")

    with patch(GET, return_value=make_response(200, ValueError("not json"))):
        with pytest.raises(UpstreamSchemaError):
            provider.search("test@example.com")


def test_unavailable_result_is_explicit():
    result = LeakCheckResult.unavailable("API key not configured")

    assert result.success is False
    assert result.error == "API key not configured"
    assert result.found == 0
    assert result.entries == ()
    assert result.password_count == 0


def test_unsuccessful_payload_raises(make_response):
    provider = LeakCheckProvider(api_key="lc-key")
    payload = {"success": False, "error": "Limit reached"}
    with patch(GET, return_value=make_response(200, payload)):
        with pytest.raises(UpstreamError) as excinfo:
            provider.search("test@example.com")

    assert str(excinfo.value) == "Limit reached"
