import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from masecurite.core.config import Settings, get_settings
from masecurite.models.contact import ContactRequest
from masecurite.services.email_service import EmailDeliveryError, send_contact_notification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["Contact"])


@router.post("")
def send_contact_message(
    payload: ContactRequest,
    settings: Settings = Depends(get_settings),
):
    if not settings.resend_api_key:
        logger.error("contact_email resend_api_key_missing")
        return JSONResponse(status_code=500, content={"error": "Email service not configured"})

    if payload.missing_required():
        return JSONResponse(status_code=400, content={"error": "Missing required fields"})

    try:
        email_id = send_contact_notification(
            payload,
            api_key=settings.resend_api_key,
            recipients=settings.contact_recipients,
            timeout=settings.http_timeout,
        )
    except EmailDeliveryError as exc:
        return JSONResponse(
            status_code=500,
            content={"error": str(exc), "details": exc.details},
        )

    return {"success": True, "emailId": email_id}
