from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
import requests

from masecurite.core.config import get_settings
from masecurite.main import app
from masecurite.models.contact import ContactRequest
from masecurite.services.email_service import (
    EmailDeliveryError,
    format_received_at,
    render_html,
    send_contact_notification,
    subject_label,
)

POST = "masecurite.services.email_service.requests.post"

FORM = {
    "name": "Jean Dupont",
    "email": "jean@example.be",
    "phone": "+32 475 12 34 56",
    "subject": "support-technique",
    "message": "Bonjour,\nmon VPN ne se connecte plus.",
}


@pytest.fixture
def contact_client(client, settings):
    app.dependency_overrides[get_settings] = lambda: replace(
        settings,
        resend_api_key="re_test",
        contact_recipients=("info@masecurite.be", "support@masecurite.be"),
    )
    return client


def test_subject_labels():
    assert subject_label("question-generale") == "Question Générale"
    assert subject_label("facturation") == "Facturation"
    assert subject_label("Partenariat") == "Partenariat"


def test_received_at_is_french_paris_time():
    moment = datetime(2025, 3, 4, 13, 5, 9, tzinfo=timezone.utc)
    assert format_received_at(moment) == "mardi 4 mars 2025 à 14:05:09"


def test_html_escapes_visitor_input():
    form = ContactRequest(**dict(FORM, name="<script>alert(1)</script>"))

    html = render_html(form, "Support Technique", "mardi 4 mars 2025 à 14:05:09")

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "Support Technique" in html


def test_send_posts_to_resend_with_reply_to(make_response):
    form = ContactRequest(**FORM)
    with patch(POST, return_value=make_response(200, {"id": "email-123"})) as post:
        email_id = send_contact_notification(form, api_key="re_test", recipients=["info@masecurite.be"])

    assert email_id == "email-123"
    sent = post.call_args.kwargs
    assert sent["headers"]["Authorization"] == "Bearer re_test"
    assert sent["json"]["reply_to"] == "jean@example.be"
    assert sent["json"]["to"] == ["info@masecurite.be"]
    assert sent["json"]["subject"] == "Nouveau Contact - Support Technique"
    assert "TÉLÉPHONE: +32 475 12 34 56" in sent["json"]["text"]


def test_send_without_phone_says_not_provided(make_response):
    form = ContactRequest(**dict(FORM, phone=None))
    with patch(POST, return_value=make_response(200, {"id": "x"})) as post:
        send_contact_notification(form, api_key="re_test", recipients=["info@masecurite.be"])

    assert "TÉLÉPHONE: Non fourni" in post.call_args.kwargs["json"]["text"]


def test_send_failure_raises(make_response):
    form = ContactRequest(**FORM)
    with patch(POST, return_value=make_response(422, {"message": "Invalid `from` field"})):
        with pytest.raises(EmailDeliveryError) as excinfo:
            send_contact_notification(form, api_key="re_test", recipients=["info@masecurite.be"])
    assert excinfo.value.details == "Invalid `from` field"

    with patch(POST, side_effect=requests.Timeout("slow")):
        with pytest.raises(EmailDeliveryError):
            send_contact_notification(form, api_key="re_test", recipients=["info@masecurite.be"])


# =========================================================
# ROUTE
# =========================================================

def test_contact_route_sends(contact_client, make_response):
    with patch(POST, return_value=make_response(200, {"id": "email-123"})) as post:
        resp = contact_client.post("/contact", json=FORM)

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "emailId": "email-123"}
    assert post.call_args.kwargs["json"]["to"] == ["info@masecurite.be", "support@masecurite.be"]


@pytest.mark.parametrize("missing", ["name", "email", "subject", "message"])
def test_contact_route_requires_fields(contact_client, missing):
    with patch(POST) as post:
        resp = contact_client.post("/contact", json=dict(FORM, **{missing: "  "}))

    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required fields"}
    post.assert_not_called()


def test_contact_route_without_resend_key(client):
    with patch(POST) as post:
        resp = client.post("/contact", json=FORM)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Email service not configured"}
    post.assert_not_called()


def test_contact_route_delivery_failure(contact_client, make_response):
    with patch(POST, return_value=make_response(500, {"message": "Internal"})):
        resp = contact_client.post("/contact", json=FORM)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to send email", "details": "Internal"}
