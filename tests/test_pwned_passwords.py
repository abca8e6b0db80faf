"""
Tests for the Pwned Passwords k-anonymity lookup.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from masecurite.services.breach.base import InvalidQueryError, UpstreamError
from masecurite.services.breach.pwned_passwords import PwnedPasswordsProvider, split_sha1

GET = "masecurite.services.breach.base.requests.get"

RANGE_BODY = "\r\n".join(
    [
        "003D68EB55068C33ACE09247EE4C639306B:3",
        "1E4C9B93F3F0682250B6CF8331B7EE68FD8:9659365",
        "1E4C9B93F3F0682250B6CF8331B7EE68FD9:1",
    ]
)


def test_split_sha1_uppercases_and_splits(password_sha1):
    prefix, suffix = split_sha1(password_sha1.lower())
    assert prefix == "5BAA6"
    assert len(suffix) == 35
    assert prefix + suffix == password_sha1


@pytest.mark.parametrize("bad", ["", "5BAA6", "Z" * 40, "5BAA61E4C9B93F3F0682250B6CF8331B7EE68FD8AA"])
def test_split_sha1_rejects_non_digests(bad):
    with pytest.raises(InvalidQueryError):
        split_sha1(bad)


def test_only_prefix_is_transmitted(make_response, password_sha1):
    provider = PwnedPasswordsProvider()
    with patch(GET, return_value=make_response(200, text=RANGE_BODY)) as get:
        provider.check_hash(password_sha1)

    url = get.call_args.args[0]
    assert url == "https://api.pwnedpasswords.com/range/5BAA6"
    sent = repr(get.call_args)
    assert password_sha1[5:] not in sent
    assert password_sha1 not in sent


def test_suffix_match_is_pwned(make_response, password_sha1):
    provider = PwnedPasswordsProvider()
    with patch(GET, return_value=make_response(200, text=RANGE_BODY)):
        result = provider.check_hash(password_sha1)

    assert result.pwned is True
    assert result.count == 9659365
    assert "9\u202f659\u202f365" in result.message


def test_no_match_is_not_pwned(make_response):
    provider = PwnedPasswordsProvider()
    unknown = "5BAA6" + "0" * 35
    with patch(GET, return_value=make_response(200, text=RANGE_BODY)):
        result = provider.check_hash(unknown)

    assert result.pwned is False
    assert result.count == 0
    assert result.message == "Ce mot de passe n'apparaît dans aucune fuite connue"


def test_upstream_failure_raises(make_response, password_sha1):
    provider = PwnedPasswordsProvider()
    with patch(GET, return_value=make_response(503)):
        with pytest.raises(UpstreamError):
            provider.check_hash(password_sha1)
