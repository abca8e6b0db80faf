import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from openai import OpenAI, OpenAIError
from pydantic import BaseModel

from masecurite.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/diagnostics", tags=["Diagnostics"])


class OpenAITestRequest(BaseModel):
    api_key: Optional[str] = None
    model: Optional[str] = None


def build_api_key_report(settings: Settings) -> dict:
    """Which credentials are configured. Never includes the values."""
    keys = {
        "OPENAI_API_KEY": {
            "configured": bool(settings.openai_api_key),
            "usedBy": ["generate-article", "test-openai-connection"],
            "description": "OpenAI API for article generation",
            "getFrom": "https://platform.openai.com/api-keys",
        },
        "LEAKCHECK_API_KEY": {
            "configured": bool(settings.leakcheck_api_key),
            "usedBy": ["leakcheck"],
            "description": "LeakCheck.io API for breach checking",
            "getFrom": "https://leakcheck.io/",
        },
        "HIBP_API_KEY": {
            "configured": bool(settings.hibp_api_key),
            "usedBy": ["breach-checker-hibp", "breach-checker-email"],
            "description": "Have I Been Pwned API for breach checking",
            "getFrom": "https://haveibeenpwned.com/API/Key",
        },
        "RESEND_API_KEY": {
            "configured": bool(settings.resend_api_key),
            "usedBy": ["send-contact-notification"],
            "description": "Resend API for email notifications",
            "getFrom": "https://resend.com/api-keys",
        },
        "SUPABASE_URL": {
            "configured": bool(settings.supabase_url),
            "usedBy": ["generate-article"],
            "description": "Supabase project URL",
            "getFrom": "Supabase project settings",
        },
        "SUPABASE_SERVICE_ROLE_KEY": {
            "configured": bool(settings.supabase_service_role_key),
            "usedBy": ["generate-article"],
            "description": "Supabase service role key",
            "getFrom": "Supabase project settings",
        },
    }

    all_configured = all(
        value["configured"]
        for name, value in keys.items()
        if not name.startswith("SUPABASE_")
    )
    missing_keys = [name for name, value in keys.items() if not value["configured"]]

    return {
        "success": True,
        "allConfigured": all_configured,
        "missingKeys": missing_keys,
        "keys": keys,
        "message": (
            "All required API keys are configured"
            if all_configured
            else f"Missing keys: {', '.join(missing_keys)}"
        ),
    }


@router.get("/api-keys")
def api_key_status(settings: Settings = Depends(get_settings)):
    return build_api_key_report(settings)


@router.post("/openai")
def test_openai_connection(payload: OpenAITestRequest):
    if not payload.api_key:
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Clé API manquante"},
        )

    model = payload.model or "gpt-4o-mini"
    client = OpenAI(api_key=payload.api_key)

    try:
        client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": "You are a helpful assistant."},
                {"role": "user", "content": 'Say "Connection successful"'},
            ],
            max_tokens=10,
        )
    except OpenAIError as exc:
        logger.warning("openai_connection_failed model=%s error=%s", model, type(exc).__name__)
        return {
            "success": False,
            "message": f"Erreur OpenAI: {type(exc).__name__}",
            "model": model,
        }

    logger.info("openai_connection_ok model=%s", model)
    return {
        "success": True,
        "message": f"Connexion réussie avec {model}",
        "model": model,
    }
